# search_repo/common/paging.py
from __future__ import annotations

from dataclasses import dataclass

from flask import has_request_context, request

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10

SORT_DIRECTIONS = ("asc", "desc")


def _positive_int(raw):
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value >= 1 else None


def _text(raw):
    if raw is None:
        return None
    raw = str(raw).strip()
    return raw or None


@dataclass(frozen=True)
class SearchParams:
    """
    Request parameters consumed by SearchRepo, passed explicitly:

      term            <- ?q=
      order_by        <- ?orderBy=
      order_direction <- ?orderDirection=   (asc | desc)
      per_page        <- ?per_page=
      page            <- ?page=

    ``None`` means "not supplied"; defaults are applied by the consumer.
    """

    term: str = ""
    order_by: str | None = None
    order_direction: str | None = None
    per_page: int | None = None
    page: int | None = None

    @classmethod
    def from_request(cls, args=None) -> "SearchParams":
        """Read from ``args`` (any mapping) or the active request's query string."""
        if args is None:
            if not has_request_context():
                return cls()
            args = request.args

        direction = _text(args.get("orderDirection"))
        return cls(
            term=_text(args.get("q")) or "",
            order_by=_text(args.get("orderBy")),
            order_direction=direction.lower() if direction else None,
            per_page=_positive_int(args.get("per_page")),
            page=_positive_int(args.get("page")),
        )

    @property
    def direction(self) -> str:
        """Normalized sort direction; anything but ``desc`` sorts ascending."""
        return self.order_direction if self.order_direction in SORT_DIRECTIONS else "asc"
