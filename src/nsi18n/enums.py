"""Enumerations for nsi18n type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.13+.
"""

from enum import StrEnum


class ChangeEvent(StrEnum):
    """Kind of change notification.

    StrEnum provides automatic string conversion: str(ChangeEvent.KEY) == "key"
    """

    LOCALE = "locale"
    """Current locale changed. Payload: the new locale."""

    KEY = "key"
    """A key was set or re-linked. Payload: key relative to the listener's namespace."""


class EntryKind(StrEnum):
    """Storage kind of a registry key.

    StrEnum provides automatic string conversion: str(EntryKind.BORROW) == "borrow"
    """

    DIRECT = "direct"
    """Values stored per locale in the owning registry."""

    BORROW = "borrow"
    """Key resolves through another full key elsewhere in the tree."""


__all__ = [
    "ChangeEvent",
    "EntryKind",
]
