"""
Pagination arithmetic for collection reads.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

from .errors import ValidationError

RESERVED_PARAMS = frozenset({"sort_by", "order", "limit", "page"})

# LIMIT and OFFSET bind as bigint.
MAX_BIGINT = 2**63 - 1


def _parse_int(raw: str | None, default: int) -> int:
    text = (raw or "").strip()
    if not text:
        return default
    try:
        return int(text)
    except ValueError:
        return default


@dataclass(frozen=True)
class Pagination:
    limit: int = 0
    page: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "page", max(1, self.page))
        if self.limit > MAX_BIGINT or self.offset > MAX_BIGINT:
            raise ValidationError("limit and page are out of range.")

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "Pagination":
        return cls(
            limit=_parse_int(params.get("limit"), 0),
            page=_parse_int(params.get("page"), 1),
        )

    @property
    def paginated(self) -> bool:
        return self.limit > 0

    @property
    def offset(self) -> int:
        if not self.paginated:
            return 0
        return (self.page - 1) * self.limit

    def total_pages(self, total: int) -> int:
        if not self.paginated:
            return 1
        return math.ceil(total / self.limit)

    def metadata(self, total: int) -> dict[str, int]:
        return {
            "total_items": total,
            "total_pages": self.total_pages(total),
            "current_page": self.page,
            "limit": self.limit if self.paginated else total,
        }
