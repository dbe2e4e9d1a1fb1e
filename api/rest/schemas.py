"""
Pydantic schemas for the gateway's response envelope.

Rows themselves are schema-free (`dict[str, Any]`); only the envelope around
them is typed.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    total_items: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    current_page: int = Field(..., ge=1)
    limit: int = Field(..., ge=0)


class RowResponse(BaseModel):
    success: bool = True
    result: dict[str, Any]


class CollectionResponse(BaseModel):
    success: bool = True
    results: list[dict[str, Any]]
    pagination: PaginationMeta


class CreatedResponse(BaseModel):
    success: bool = True
    message: str
    id: Any = None


class UpdatedResponse(BaseModel):
    success: bool = True
    message: str
    result: dict[str, Any]
    affected_rows: int = Field(..., ge=0)


class DeletedResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
