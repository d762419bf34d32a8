# search_repo/common/search_repo.py
"""
Search / sort / paginate decoration for SQLAlchemy ORM queries.

    page = (
        SearchRepo.of(Employee.query, sortable=["first_name", "created_at"])
        .add_column("full_name", lambda r: f"{r.first_name} {r.last_name or ''}".strip())
        .paginate()
    )

Request parameters (q, orderBy, orderDirection, per_page, page) come from a
SearchParams; when none is passed it is read from the active Flask request.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from flask import current_app, has_app_context
from sqlalchemy import column, inspect, literal_column, or_
from sqlalchemy.orm import Mapper, load_only

from search_repo.common.errors import UnknownSortError
from search_repo.common.paging import DEFAULT_PAGE, DEFAULT_PER_PAGE, SearchParams
from search_repo.common.rows import AugmentedRow, row_to_dict

log = logging.getLogger(__name__)

UNKNOWN_SORT_POLICIES = ("ignore", "error")


def _config(key, default=None):
    if has_app_context():
        return current_app.config.get(key, default)
    return default


def bound_model(query):
    """Mapped class the query selects, or None for column / multi-entity queries."""
    descs = getattr(query, "column_descriptions", None) or []
    if len(descs) != 1:
        return None
    insp = inspect(descs[0].get("expr"), raiseerr=False)
    if isinstance(insp, Mapper):
        return insp.class_
    return None


def has_column(model, name: str) -> bool:
    checker = getattr(model, "has_column", None)
    if callable(checker):
        return bool(checker(name))
    return name in inspect(model).columns


def _model_attr(model, name):
    if not has_column(model, name):
        raise ValueError(f"{model.__name__} has no column {name!r}")
    return getattr(model, name)


def _search_clause(model, path: str, like: str):
    if "." in path:
        relation, col = path.split(".", 1)
        if model is None:
            return literal_column(path).like(like)
        rel = inspect(model).relationships.get(relation)
        if rel is None:
            raise ValueError(f"{model.__name__} has no relationship {relation!r}")
        target = rel.mapper.class_
        criterion = _model_attr(target, col).like(like)
        attr = getattr(model, relation)
        return attr.any(criterion) if rel.uselist else attr.has(criterion)
    if model is None:
        return column(path).like(like)
    return _model_attr(model, path).like(like)


@dataclass
class ResultPage:
    sortable: list[str]
    current_page: int
    last_page: int
    per_page: int
    total: int
    items: list[Any] = field(default_factory=list)

    @property
    def from_(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def to(self) -> int | None:
        if not self.items:
            return None
        return self.from_ + len(self.items) - 1

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.last_page

    def to_dict(self, serialize: Callable[[Any], dict] = row_to_dict) -> dict[str, Any]:
        return {
            "sortable": list(self.sortable),
            "current_page": self.current_page,
            "last_page": self.last_page,
            "per_page": self.per_page,
            "total": self.total,
            "from": self.from_,
            "to": self.to,
            "has_prev": self.has_prev,
            "has_next": self.has_next,
            "items": [serialize(item) for item in self.items],
        }


class EmptyResult:
    """
    Returned by SearchRepo.of when there is neither a term nor anything to
    search. Compares equal to ``{"data": []}`` and answers the SearchRepo
    calls with empty envelopes, so callers can chain either one.
    """

    __hash__ = None

    def __init__(self, sortable: Sequence[str] = ()):
        self.sortable = list(sortable)

    def __eq__(self, other):
        if isinstance(other, EmptyResult):
            return True
        return other == {"data": []}

    def __getitem__(self, key):
        return self.to_dict()[key]

    def __repr__(self):
        return "EmptyResult({'data': []})"

    def add_column(self, name, fn) -> "EmptyResult":
        return self

    def paginate(self, per_page: int | None = None, columns: Sequence[str] | None = None) -> ResultPage:
        per_page = per_page or _config("SEARCH_DEFAULT_PER_PAGE", DEFAULT_PER_PAGE)
        return ResultPage(sortable=list(self.sortable), current_page=DEFAULT_PAGE, last_page=1,
                          per_page=per_page, total=0, items=[])

    def get(self, columns: Sequence[str] | None = None) -> dict[str, Any]:
        return {"data": [], "sortable": list(self.sortable)}

    def to_dict(self) -> dict[str, Any]:
        return {"data": []}


class SearchRepo:
    def __init__(self, query, sortable: Sequence[str] = (), params: SearchParams | None = None):
        self.query = query
        self.model = bound_model(query)
        self.sortable = list(sortable)
        self.params = params or SearchParams()
        self.added_columns: dict[str, Callable[[Any], Any]] = {}

    @classmethod
    def of(
        cls,
        query,
        searchable: Sequence[str] = (),
        sortable: Sequence[str] = (),
        params: SearchParams | None = None,
        on_unknown_sort: str | None = None,
    ):
        """
        Decorate ``query`` with search predicates and an order clause.

        Returns a SearchRepo, or EmptyResult when the term is empty and no
        searchable fields resolve (the query is not touched in that case).
        """
        if params is None:
            params = SearchParams.from_request()
        policy = on_unknown_sort or _config("SEARCH_ON_UNKNOWN_SORT", "ignore")
        if policy not in UNKNOWN_SORT_POLICIES:
            raise ValueError(f"on_unknown_sort must be one of {UNKNOWN_SORT_POLICIES}, got {policy!r}")

        model = bound_model(query)
        searchable = list(searchable)
        if not searchable and model is not None:
            searchable = list(getattr(model, "__searchable__", ()) or ())

        term = params.term or ""
        if not term and not searchable:
            log.debug("search: no term and no searchable fields, short-circuit")
            return EmptyResult(sortable)

        like = f"%{term}%"
        clauses = [_search_clause(model, path, like) for path in searchable]
        if clauses:
            query = query.filter(or_(*clauses))

        if params.order_by:
            order_by = params.order_by.lower()
            declared = model is not None and has_column(model, order_by)
            if declared or order_by in sortable:
                col = getattr(model, order_by) if declared else literal_column(order_by)
                query = query.order_by(col.desc() if params.direction == "desc" else col.asc())
            elif policy == "error":
                raise UnknownSortError(order_by, allowed=sortable)
            else:
                log.debug("search: ignoring unknown orderBy %r", order_by)

        return cls(query, sortable=sortable, params=params)

    def add_column(self, name: str, fn: Callable[[Any], Any]) -> "SearchRepo":
        self.added_columns[name] = fn
        return self

    def _select(self, columns):
        if not columns or list(columns) == ["*"]:
            return self.query
        if self.model is not None:
            return self.query.options(load_only(*[_model_attr(self.model, c) for c in columns]))
        # column queries can only narrow to what they already select
        selected = {d["name"]: d["expr"] for d in self.query.column_descriptions}
        missing = [c for c in columns if c not in selected]
        if missing:
            raise ValueError(f"query does not select {missing!r}")
        return self.query.with_entities(*[selected[c] for c in columns])

    def paginate(self, per_page: int | None = None, columns: Sequence[str] | None = None) -> ResultPage:
        """
        One page of results with derived columns applied.

        Page size precedence: request ``per_page`` > ``per_page`` argument >
        SEARCH_DEFAULT_PER_PAGE. A page past the end is clamped to the last page.
        """
        per_page = self.params.per_page or per_page or _config("SEARCH_DEFAULT_PER_PAGE", DEFAULT_PER_PAGE)
        page = self.params.page or DEFAULT_PAGE
        max_per_page = _config("SEARCH_MAX_PER_PAGE")
        query = self._select(columns)

        results = query.paginate(page=page, per_page=per_page, max_per_page=max_per_page, error_out=False)
        last_page = max(results.pages, 1)
        if results.page > last_page and not results.items:
            log.debug("search: page %s past last page %s, clamping", results.page, last_page)
            results = query.paginate(page=last_page, per_page=per_page, max_per_page=max_per_page, error_out=False)

        return ResultPage(
            sortable=list(self.sortable),
            current_page=results.page,
            last_page=max(results.pages, 1),
            per_page=results.per_page,
            total=results.total,
            items=self.additional_columns(results.items),
        )

    def get(self, columns: Sequence[str] | None = None) -> dict[str, Any]:
        # derived columns are only applied by paginate()
        return {"data": self._select(columns).all(), "sortable": list(self.sortable)}

    def additional_columns(self, items) -> list[Any]:
        if not self.added_columns:
            return list(items)
        out = []
        for item in items:
            row = AugmentedRow(item)
            for name, fn in self.added_columns.items():
                row._set(name, fn(row))
            out.append(row)
        return out
