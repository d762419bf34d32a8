# search_repo/common/rows.py
from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from sqlalchemy import inspect
from sqlalchemy.engine import Row


def _plain(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def row_to_dict(obj) -> dict[str, Any]:
    """
    Flatten a fetched row into a JSON-ready dict.

    - AugmentedRow      -> entity columns + derived columns
    - mapped entity     -> loaded column attributes (load_only-deferred ones skipped)
    - sqlalchemy Row    -> its _mapping
    - any Mapping       -> dict copy
    """
    if isinstance(obj, AugmentedRow):
        return obj.to_dict()
    if isinstance(obj, Row):
        return {k: _plain(v) for k, v in obj._mapping.items()}
    if isinstance(obj, Mapping):
        return {k: _plain(v) for k, v in obj.items()}

    state = inspect(obj, raiseerr=False)
    if state is None or not hasattr(state, "mapper"):
        raise TypeError(f"Cannot serialize row of type {type(obj).__name__}")
    # deferred by load_only: never fetched; expired ones refresh on access
    deferred = state.unloaded - state.expired_attributes
    return {
        attr.key: _plain(getattr(obj, attr.key))
        for attr in state.mapper.column_attrs
        if attr.key not in deferred
    }


class AugmentedRow:
    """
    A fetched row plus its derived columns.

    The wrapped entity is left untouched; derived values live beside it and
    shadow entity attributes of the same name.
    """

    __slots__ = ("_entity", "_derived")

    def __init__(self, entity, derived=None):
        self._entity = entity
        self._derived = dict(derived or {})

    @property
    def entity(self):
        return self._entity

    @property
    def derived(self) -> dict[str, Any]:
        return dict(self._derived)

    def __getattr__(self, name):
        if name in AugmentedRow.__slots__:
            raise AttributeError(name)
        derived = self._derived
        if name in derived:
            return derived[name]
        return getattr(self._entity, name)

    def __getitem__(self, name):
        if name in self._derived:
            return self._derived[name]
        if isinstance(self._entity, Mapping):
            return self._entity[name]
        try:
            return getattr(self._entity, name)
        except AttributeError:
            raise KeyError(name) from None

    def __contains__(self, name):
        if name in self._derived:
            return True
        if isinstance(self._entity, Mapping):
            return name in self._entity
        return hasattr(self._entity, name)

    def _set(self, name, value):
        self._derived[name] = value

    def to_dict(self) -> dict[str, Any]:
        out = row_to_dict(self._entity)
        out.update({k: _plain(v) for k, v in self._derived.items()})
        return out

    def __repr__(self):
        return f"AugmentedRow({self._entity!r}, {self._derived!r})"
