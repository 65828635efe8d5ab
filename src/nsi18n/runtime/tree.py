"""Namespace tree: full namespace path -> registry and facade.

Every full namespace path maps to at most one NamespaceEntry. Its two
halves are created lazily and independently: get_namespace() may create a
facade for a path that has no registry yet, and register() may create a
registry for a path whose facade was never requested.

Thread Safety:
    Not synchronized. The resolver only mutates the tree under its write
    lock (when thread_safe=True) and reads it under the read lock.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

from nsi18n.core.paths import split_key_by_namespace

if TYPE_CHECKING:
    from nsi18n.runtime.namespace import Namespace
    from nsi18n.runtime.registry import Registry

__all__ = ["NamespaceEntry", "NamespaceTree"]


@dataclass(slots=True)
class NamespaceEntry:
    """Registry and facade registered at one full namespace path."""

    registry: Registry | None = None
    facade: Namespace | None = None


class NamespaceTree:
    """Flat map of full namespace paths to NamespaceEntry.

    The tree is "flat" in storage but hierarchical in meaning: a full key
    such as ``a.b.c`` is searched in the registries at ``a`` (key ``b.c``)
    and ``a.b`` (key ``c``), in that order.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: dict[str, NamespaceEntry] = {}

    def registry_at(self, full_namespace: str) -> Registry | None:
        """Registry registered exactly at full_namespace, or None."""
        entry = self._entries.get(full_namespace)
        return entry.registry if entry is not None else None

    def facade_at(self, full_namespace: str) -> Namespace | None:
        """Facade created for full_namespace, or None."""
        entry = self._entries.get(full_namespace)
        return entry.facade if entry is not None else None

    def add_registry(self, full_namespace: str, registry: Registry) -> None:
        """Store registry at full_namespace, keeping an existing facade."""
        entry = self._entries.get(full_namespace)
        if entry is None:
            self._entries[full_namespace] = NamespaceEntry(registry=registry)
        else:
            entry.registry = registry

    def ensure_facade(
        self, full_namespace: str, factory: Callable[[], Namespace]
    ) -> Namespace:
        """Return the facade at full_namespace, creating it on first request."""
        entry = self._entries.get(full_namespace)
        if entry is None:
            entry = self._entries[full_namespace] = NamespaceEntry()
        if entry.facade is None:
            entry.facade = factory()
        return entry.facade

    def candidates(self, full_key: str) -> Iterator[tuple[Registry, str]]:
        """Yield (registry, local key) for every registry that may own full_key.

        Candidates come shortest namespace first. Ancestor paths with no
        registry are skipped.
        """
        for namespace, local_key in split_key_by_namespace(full_key):
            registry = self.registry_at(namespace)
            if registry is not None:
                yield registry, local_key

    def find_intersection(self, full_namespace: str) -> tuple[Registry, str] | None:
        """Find an existing key that a registry at full_namespace would shadow.

        A registry at ``settings.locale`` collides with a key ``locale.ru``
        stored in ``settings``: the key's cumulative segments contain the
        suffix ``locale`` left after the ancestor namespace.

        Returns:
            (owning registry, colliding local key), or None.
        """
        for registry, local_key in self.candidates(full_namespace):
            key = registry.intersecting_key(local_key)
            if key is not None:
                return registry, key
        return None

    def registries(self) -> Iterator[Registry]:
        """Yield every registered registry in registration order."""
        for entry in self._entries.values():
            if entry.registry is not None:
                yield entry.registry

    def __contains__(self, full_namespace: object) -> bool:
        """True if a registry is registered at full_namespace."""
        entry = self._entries.get(full_namespace) if isinstance(full_namespace, str) else None
        return entry is not None and entry.registry is not None

    def __len__(self) -> int:
        """Number of registered registries."""
        return sum(1 for _ in self.registries())
