"""Dotted path rules for namespaces and keys.

This module is the single source of truth for how namespace paths and keys
are validated, joined and decomposed. Registration, resolution and change
notification all go through these functions so they agree on what a
"full key" is and which namespaces may own it.

Path Grammar:
    segment ( "." segment )*

    - Not empty
    - No leading or trailing dot
    - No empty segment ("a..b")

Decompositions (for the full key "a.b.c"):
    split_key_by_namespace  -> ("a", "b.c"), ("a.b", "c")
    split_key_into_parts    -> "a", "a.b", "a.b.c"

Thread Safety:
    All functions in this module are pure functions. Decompositions are
    memoized with functools.lru_cache, which is thread-safe.

Python 3.13+.
"""

from __future__ import annotations

import functools
import re

from nsi18n.constants import KEY_SEPARATOR, MAX_PATH_CACHE_SIZE

__all__ = [
    "collect_namespace_key_pairs",
    "is_valid_path",
    "join_key",
    "split_key_by_namespace",
    "split_key_into_parts",
    "split_top_level",
]

type NamespaceKeyPair = tuple[str, str]

# Matches any illegal dot placement: a doubled dot, a leading dot, or a trailing dot.
_PATH_ERROR_PATTERN: re.Pattern[str] = re.compile(r"(\.\.)|^\.|\.$")


def is_valid_path(name: object) -> bool:
    """Check a namespace path or key for valid dot placement.

    Args:
        name: Candidate path. Non-string input is rejected, not raised on.

    Returns:
        True if name is a non-empty string with no leading, trailing or
        doubled dots.

    Example:
        >>> is_valid_path("settings.locale")
        True
        >>> is_valid_path("settings..locale")
        False
        >>> is_valid_path("")
        False
    """
    if not isinstance(name, str) or not name:
        return False
    return _PATH_ERROR_PATTERN.search(name) is None


def join_key(namespace: str | None, key: str) -> str:
    """Join a namespace and a local key into a full key.

    An empty or None namespace denotes the root, so the key is returned as is.
    """
    return f"{namespace}{KEY_SEPARATOR}{key}" if namespace else key


def collect_namespace_key_pairs(
    path: tuple[str, ...], index: int
) -> tuple[NamespaceKeyPair, ...]:
    """Pair every namespace prefix of path with the remaining key.

    Prefixes start at ``path[: index + 1]`` and grow by one segment at a
    time; the key part always keeps at least one segment.

    Example:
        >>> collect_namespace_key_pairs(("a", "b", "c"), 0)
        (('a', 'b.c'), ('a.b', 'c'))
    """
    return tuple(
        (KEY_SEPARATOR.join(path[:i]), KEY_SEPARATOR.join(path[i:]))
        for i in range(index + 1, len(path))
    )


@functools.lru_cache(maxsize=MAX_PATH_CACHE_SIZE)
def split_key_by_namespace(full_key: str) -> tuple[NamespaceKeyPair, ...]:
    """Split a full key into every (namespace, local key) candidate.

    Candidates are ordered from the shortest namespace to the longest.
    A single-segment key has no candidates: keys always live inside a
    namespace.

    Example:
        >>> split_key_by_namespace("a.b.c")
        (('a', 'b.c'), ('a.b', 'c'))
        >>> split_key_by_namespace("a")
        ()
    """
    return collect_namespace_key_pairs(tuple(full_key.split(KEY_SEPARATOR)), 0)


@functools.lru_cache(maxsize=MAX_PATH_CACHE_SIZE)
def split_key_into_parts(full_key: str) -> tuple[str, ...]:
    """Split a key into its cumulative prefix segments.

    Example:
        >>> split_key_into_parts("a.b.c")
        ('a', 'a.b', 'a.b.c')
    """
    path = full_key.split(KEY_SEPARATOR)
    return tuple(KEY_SEPARATOR.join(path[: i + 1]) for i in range(len(path)))


def split_top_level(full_key: str) -> NamespaceKeyPair | None:
    """Split a full key at its first separator.

    Returns:
        (top-level namespace, remaining key), or None when either side
        would be empty.

    Example:
        >>> split_top_level("he.says.hi")
        ('he', 'says.hi')
        >>> split_top_level("he") is None
        True
    """
    namespace, sep, rest = full_key.partition(KEY_SEPARATOR)
    if not sep or not namespace or not rest:
        return None
    return namespace, rest
