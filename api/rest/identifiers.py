"""
SQL identifier hygiene.

Identifiers (table and column names) cannot be bound as parameters, so every
name that comes from the caller is reduced to `[A-Za-z0-9_]` before it is
concatenated into statement text.
"""

from __future__ import annotations

import re

_UNSAFE = re.compile(r"[^A-Za-z0-9_]")

QUOTE = '"'

# Reserved words that cannot be used as bare identifiers in PostgreSQL.
RESERVED_KEYWORDS = frozenset(
    {
        "all", "analyse", "analyze", "and", "any", "array", "as", "asc",
        "asymmetric", "authorization", "binary", "both", "case", "cast",
        "check", "collate", "collation", "column", "concurrently",
        "constraint", "create", "cross", "current_catalog", "current_date",
        "current_role", "current_schema", "current_time", "current_timestamp",
        "current_user", "default", "deferrable", "desc", "distinct", "do",
        "else", "end", "except", "false", "fetch", "for", "foreign", "freeze",
        "from", "full", "grant", "group", "having", "ilike", "in", "initially",
        "inner", "intersect", "into", "is", "isnull", "join", "lateral",
        "leading", "left", "like", "limit", "localtime", "localtimestamp",
        "natural", "not", "notnull", "null", "offset", "on", "only", "or",
        "order", "outer", "overlaps", "placing", "primary", "references",
        "returning", "right", "select", "session_user", "similar", "some",
        "symmetric", "system_user", "table", "tablesample", "then", "to",
        "trailing", "true", "union", "unique", "user", "using", "variadic",
        "verbose", "when", "where", "window", "with",
    }
)


def sanitize(name: str) -> str:
    """
    Drop every character outside `[A-Za-z0-9_]`.

    >>> sanitize("users; DROP TABLE x")
    'usersDROPTABLEx'
    """
    return _UNSAFE.sub("", name or "")


def is_reserved(name: str) -> bool:
    return name.lower() in RESERVED_KEYWORDS


def quote_identifier(name: str) -> str:
    """
    Sanitize `name` and quote it when it collides with a reserved keyword.

    Quoted names are case-sensitive, so reserved words are lowercased first
    to address the same table as the unquoted spelling would.
    """
    safe = sanitize(name)
    if safe and is_reserved(safe):
        return f"{QUOTE}{safe.lower()}{QUOTE}"
    return safe
