"""Core utilities shared by the runtime layer.

This package holds the pure path rules that the registry, the namespace
tree, the resolver and the change notifier all depend on. Keeping them
here maintains a clean dependency graph:

    core <- diagnostics <- runtime

Exports:
    is_valid_path: Syntax check for namespaces and keys
    join_key: Namespace + local key -> full key
    split_key_by_namespace: Every (namespace, local key) candidate of a full key
    split_key_into_parts: Cumulative prefix segments of a key
    split_top_level: (top-level namespace, rest) of a full key

Python 3.13+.
"""

from .paths import (
    collect_namespace_key_pairs,
    is_valid_path,
    join_key,
    split_key_by_namespace,
    split_key_into_parts,
    split_top_level,
)

__all__ = [
    "collect_namespace_key_pairs",
    "is_valid_path",
    "join_key",
    "split_key_by_namespace",
    "split_key_into_parts",
    "split_top_level",
]
