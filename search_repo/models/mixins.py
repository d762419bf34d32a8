# search_repo/models/mixins.py
from __future__ import annotations

from sqlalchemy import inspect


class SearchableMixin:
    """
    Record-type metadata read by SearchRepo.

      __searchable__  -> default search fields when the caller passes none;
                         "column" or "relation.column" (one hop)
      has_column()    -> which orderBy keys the type accepts on its own
    """

    __searchable__: tuple[str, ...] = ()

    @classmethod
    def has_column(cls, name: str) -> bool:
        return name in inspect(cls).columns
