"""In-memory cache of parsed documents keyed by project root."""

from __future__ import annotations

from typing import Generic, TypeVar

T = TypeVar("T")


class ProjectCache(Generic[T]):
    """Key/value store for parsed documents, one entry per project root.

    Keys are the literal root strings callers pass in; two spellings of
    the same directory are separate entries. Values are replaced whole,
    never mutated in place.
    """

    def __init__(self) -> None:
        self._store: dict[str, T] = {}

    def get(self, root: str) -> T | None:
        """Return the entry for *root*, or None on a miss."""
        return self._store.get(root)

    def set(self, root: str, value: T) -> None:
        """Store *value* for *root*, replacing any previous entry."""
        self._store[root] = value

    def contains(self, root: str) -> bool:
        return root in self._store

    def clear(self, root: str | None = None) -> None:
        """Drop the entry for *root*, or every entry when *root* is None."""
        if root is None:
            self._store.clear()
        else:
            self._store.pop(root, None)

    def __len__(self) -> int:
        return len(self._store)
