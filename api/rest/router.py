"""
FastAPI router for the REST-to-SQL gateway.

A single catch-all route accepts every verb so unsupported methods still get
the gateway's JSON envelope (405) instead of the framework default.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status

from core import db

from . import service
from .dependencies import RestOptions, get_database, get_key_resolver, get_options
from .errors import MethodNotAllowedError, ValidationError
from .keys import PrimaryKeyResolver

logger = logging.getLogger(__name__)

router = APIRouter()

ROUTE_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

INVALID_PATH = "Invalid path. Expected format: /rest/{tableName}/{id?}"


def parse_segments(subpath: str) -> tuple[str, str | None]:
    """
    Path below the mount prefix, `{table}[/{id}]` -> (table, id).

    Extra segments are ignored.
    """
    parts = [part for part in (subpath or "").split("/") if part]
    if not parts:
        raise ValidationError(INVALID_PATH)
    table_name = parts[0]
    row_id = parts[1] if len(parts) > 1 else None
    return table_name, row_id


def parse_path(path: str) -> tuple[str, str | None]:
    """
    Full request path, `/{mount}/{table}[/{id}]` -> (table, id).
    """
    parts = [part for part in (path or "").split("/") if part]
    if len(parts) < 2:
        raise ValidationError(INVALID_PATH)
    return parse_segments("/".join(parts[1:]))


async def _read_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid JSON body") from exc


@router.api_route("", methods=ROUTE_METHODS)
@router.api_route("/{path:path}", methods=ROUTE_METHODS)
async def handle_rest(
    request: Request,
    response: Response,
    database: db.Database = Depends(get_database),
    resolver: PrimaryKeyResolver = Depends(get_key_resolver),
    options: RestOptions = Depends(get_options),
) -> dict:
    table_name, row_id = parse_segments(request.path_params.get("path", ""))
    method = request.method.upper()
    logger.debug("rest_request method=%s table=%s id=%s", method, table_name, row_id)

    if method == "GET":
        return await service.read(
            database,
            resolver,
            options,
            table_name,
            row_id,
            request.query_params.multi_items(),
        )

    if method == "POST":
        payload = await _read_body(request)
        result = await service.create(database, resolver, table_name, payload)
        response.status_code = status.HTTP_201_CREATED
        return result

    if method in ("PUT", "PATCH"):
        if row_id is None:
            raise ValidationError("ID is required for updates")
        payload = await _read_body(request)
        return await service.update(database, resolver, options, table_name, row_id, payload)

    if method == "DELETE":
        if row_id is None:
            raise ValidationError("ID is required for deletion")
        return await service.delete(database, resolver, table_name, row_id)

    raise MethodNotAllowedError("Method not allowed")
