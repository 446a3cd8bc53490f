"""Per-scope registry of singleton constructs."""

from __future__ import annotations

from typing import Any, Callable, Hashable, TypeVar

T = TypeVar("T")


class DispatcherRegistry:
    """Holds at most one object per ``(scope, uid)`` pair.

    Replaces an ambient "find child by id" lookup: callers inject the
    registry, and the first builder for a scope wins.
    """

    def __init__(self) -> None:
        self._items: dict[tuple[Hashable, str], Any] = {}

    def get(self, scope: Hashable, uid: str) -> Any | None:
        return self._items.get((scope, uid))

    def get_or_create(self, scope: Hashable, uid: str, factory: Callable[[], T]) -> T:
        key = (scope, uid)
        if key not in self._items:
            self._items[key] = factory()
        return self._items[key]

    def __contains__(self, key: tuple[Hashable, str]) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
