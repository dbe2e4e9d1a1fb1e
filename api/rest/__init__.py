"""
Generic REST-to-SQL gateway.

One catch-all route maps `/{mount}/{table}[/{id}]` and the HTTP verb onto a
single parameterized statement against `table`.
"""
