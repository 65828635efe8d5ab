"""Shared constants for nsi18n.

This module provides centralized constants used across the core and
runtime packages. Placing constants here avoids circular imports and
provides a single source of truth.

Constants are grouped by domain:
- Path syntax: separator used by namespaces and keys
- Cache limits: Memory bounds for the resolution cache
- Fallback values: What lookups return when a key has no value

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Path syntax
    "KEY_SEPARATOR",
    # Cache limits
    "DEFAULT_CACHE_SIZE",
    "MAX_PATH_CACHE_SIZE",
    # Fallback values
    "DEFAULT_VALUE",
    "FALLBACK_LOCALE",
]

# ============================================================================
# PATH SYNTAX
# ============================================================================

# Separator between namespace segments and key segments.
# A full key is the namespace path and the local key joined by this separator.
KEY_SEPARATOR: str = "."

# ============================================================================
# CACHE LIMITS
# ============================================================================

# Default maximum entries for resolved values.
# 1000 entries is sufficient for most applications (typical UI has <500 keys).
DEFAULT_CACHE_SIZE: int = 1000

# Maximum memoized path decompositions (split_key_by_namespace and friends).
# Paths repeat heavily (every lookup and every notification splits a key).
MAX_PATH_CACHE_SIZE: int = 1024

# ============================================================================
# FALLBACK VALUES
# ============================================================================

# Value returned by get_value()/t() when a key cannot be resolved.
# An empty string keeps UI rendering intact; pass default_value to override.
DEFAULT_VALUE: str = ""

# Locale used when the system locale cannot be detected.
FALLBACK_LOCALE: str = "en_US"
