"""Error codes and error detail records.

Defines the canonical error codes and the structured record delivered to
the error sink.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "ErrorCode",
    "ErrorDetail",
]


class ErrorCode(IntEnum):
    """Error codes with stable numeric identifiers.

    Numbering is part of the public contract: sinks may persist or compare
    the integer value.
    """

    UNREGISTERED_LOCALE = 1
    """change_locale() given a locale rejected by the acceptance predicate."""

    INVALID_NAMESPACE_SYNTAX = 2
    """register() given an empty or malformed namespace path."""

    INVALID_KEY_SYNTAX = 3
    """set()/use() given an empty or malformed key."""

    INVALID_VALUE_TYPE = 4
    """Value conversion rejected the input passed to set()."""

    NAMESPACE_KEY_INTERSECTION = 5
    """New namespace collides with the path of an existing key."""

    KEY_NAMESPACE_INTERSECTION = 6
    """New or changed key collides with the path of an existing namespace."""

    UNREGISTERED_KEY = 7
    """Resolution found no value and no cycle was the cause."""

    CIRCULAR_DEPENDENCY = 8
    """Borrow traversal revisited an already visited (registry, key) pair."""


@dataclass(frozen=True, slots=True)
class ErrorDetail:
    """Structured error record passed to the error sink.

    Attributes:
        code: Canonical error code
        namespace: Namespace the error relates to, None for root-level errors
        key: Key (or locale, for UNREGISTERED_LOCALE) the error relates to
        message: Human-readable description
    """

    code: ErrorCode
    namespace: str | None
    key: str
    message: str

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format detail for log output.

        Example output:
            error[UNREGISTERED_KEY]: The key 'he.says.hi' is not registered.

        Returns:
            Formatted error message with control characters escaped
        """
        # repr() escapes control characters (log injection) while keeping Unicode readable.
        message = repr(self.message)[1:-1]
        return f"error[{self.code.name}]: {message}"
