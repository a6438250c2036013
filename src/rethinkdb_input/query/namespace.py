"""
Query-builder namespace bound to ``r`` in query source.

The driver root object also re-exports its connection, networking and error
modules. Query source only sees the term builders listed by the driver's
``rethinkdb.query`` module plus ``expr``.
"""
from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Optional

from .sandbox import guarded_getattr


def builder_names() -> FrozenSet[str]:
    """Public ReQL term builders exported by the driver."""
    from rethinkdb import query

    return frozenset(query.__all__) | {"expr"}


class BuilderNamespace:
    """Read-only view over the term builders of a driver root object."""

    __slots__ = ("_builder", "_names")

    def __init__(self, builder: Any, names: Optional[Iterable[str]] = None):
        self._builder = builder
        self._names = frozenset(names) if names is not None else builder_names()

    def __getattr__(self, name: str) -> Any:
        if name not in self._names:
            raise AttributeError(f"'r.{name}' is not a ReQL term")
        return guarded_getattr(self._builder, name)

    def __repr__(self) -> str:
        return f"BuilderNamespace({len(self._names)} terms)"
