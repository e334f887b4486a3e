"""Keyed registries of repository handles and document views."""

from __future__ import annotations

from typing import TYPE_CHECKING

from folio.state._handle import RepositoryHandle

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from folio.views import DocumentView


class Registry[V]:
    """A string-keyed collection with get-or-create semantics."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: dict[str, V] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def get(self, key: str) -> V | None:
        """Return the item registered under ``key``, or None."""
        return self._items.get(key)

    def get_or_create(self, key: str, factory: Callable[[], V]) -> V:
        """Return the item under ``key``, creating it with ``factory`` if absent."""
        item = self._items.get(key)
        if item is None:
            item = self._items[key] = factory()
        return item

    def remove(self, key: str) -> V | None:
        """Unregister and return the item under ``key``, or None."""
        return self._items.pop(key, None)

    def values(self) -> list[V]:
        """Return a snapshot of all registered items."""
        return list(self._items.values())


class RepositoryRegistry(Registry[RepositoryHandle]):
    """Repository handles keyed by resolved root path."""

    __slots__ = ()

    def for_root(self, root: Path) -> RepositoryHandle | None:
        """Return the handle whose root is ``root``."""
        return self.get(str(root.resolve()))

    def containing(self, path: Path) -> RepositoryHandle | None:
        """Return the handle of the innermost repository containing ``path``."""
        path = path.resolve()
        matches = [h for h in self.values() if path == h.root or path.is_relative_to(h.root)]
        return max(matches, key=lambda h: len(h.root.parts), default=None)


class ViewRegistry(Registry["DocumentView"]):
    """Document views keyed by URI string."""

    __slots__ = ()

    def for_handle(self, handle: RepositoryHandle) -> list[DocumentView]:
        """Return every view showing ``handle``."""
        return [view for view in self.values() if view.handle is handle]

    def remove_for_root(self, root: Path) -> list[DocumentView]:
        """Unregister every view of the repository at ``root``."""
        removed = [view for view in self.values() if view.handle.root == root]
        for view in removed:
            _ = self.remove(view.uri)
        return removed
