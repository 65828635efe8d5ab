"""Per-lookup state for borrow resolution.

Architecture:
    - Found: the option type a search returns (value plus owning registry)
    - VisitContext: cycle-detection state shared by one whole recursive search

A VisitContext is created once per top-level lookup (or per borrow
simulation in Registry.use) and passed by reference through every
recursive find_value call. It is never copied per hop: a borrow chain that
leaves a registry and comes back through a third namespace must still see
the first visit.

Thread Safety:
    Contexts are created per lookup and never shared between threads.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nsi18n.runtime.registry import Registry

__all__ = ["Found", "VisitContext"]


@dataclass(frozen=True, slots=True)
class Found:
    """A resolved value and the registry that stores it.

    Attributes:
        value: The stored value (never falsy)
        registry: Registry holding the Direct entry the value came from
    """

    value: object
    registry: Registry


@dataclass(slots=True)
class VisitContext:
    """Cycle-detection state for one recursive search.

    The visited map records, per registry, every local key already asked
    for during this search. A list per registry (not a single key) is
    required: a registry may legitimately be entered several times with
    different keys, and each of those keys must stay marked.

    Attributes:
        origin_namespace: Namespace the lookup started from (for error reports)
        origin_key: Key the lookup started from (for error reports)
        visited: Registry -> local keys already visited
        error: True once a cycle was detected and reported
    """

    origin_namespace: str | None
    origin_key: str
    visited: dict[Registry, list[str]] = field(default_factory=dict)
    error: bool = False

    @classmethod
    def seeded(cls, registry: Registry, local_key: str) -> VisitContext:
        """Context that already counts (registry, local_key) as visited.

        Used to simulate a borrow before committing it: if the search
        reaches the key being borrowed, the borrow would close a cycle.
        """
        return cls(None, local_key, {registry: [local_key]})

    def visit(self, registry: Registry, local_key: str) -> bool:
        """Record a visit.

        Returns:
            False if (registry, local_key) was already visited, True otherwise.
        """
        keys = self.visited.get(registry)
        if keys is None:
            self.visited[registry] = [local_key]
            return True
        if local_key in keys:
            return False
        keys.append(local_key)
        return True
