"""Ready-made error sinks.

An error sink is any callable accepting an ErrorDetail. The resolver calls
it synchronously, once per reported error.

- log_error: default sink, logs at WARNING level
- raise_error: strict sink, raises the matching I18nError
- ErrorCollector: records details in memory (tests, batch validation)

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .codes import ErrorCode, ErrorDetail
from .errors import error_from_detail

__all__ = ["ErrorCollector", "ErrorSink", "log_error", "raise_error"]

logger = logging.getLogger(__name__)

type ErrorSink = Callable[[ErrorDetail], None]


def log_error(detail: ErrorDetail) -> None:
    """Log detail at WARNING level."""
    logger.warning("%s", detail.format_error())


def raise_error(detail: ErrorDetail) -> None:
    """Raise the I18nError subclass matching detail.code.

    Raising from the sink aborts the reporting operation. Validation errors
    are reported before anything is mutated, so register(), set() and use()
    stay atomic under this sink.

    Raises:
        I18nError: Always
    """
    raise error_from_detail(detail)


class ErrorCollector:
    """Error sink that records every detail it receives.

    Thread-safe. Instances are callable and can be passed as ``on_error``.

    Example:
        >>> from nsi18n import create_i18n
        >>> errors = ErrorCollector()
        >>> root = create_i18n("en", on_error=errors)
        >>> root.t("missing.key")
        ''
        >>> errors.last.code.name
        'UNREGISTERED_KEY'
    """

    __slots__ = ("_details", "_lock")

    def __init__(self) -> None:
        """Initialize an empty collector."""
        self._details: list[ErrorDetail] = []
        self._lock = threading.Lock()

    def __call__(self, detail: ErrorDetail) -> None:
        """Record detail."""
        with self._lock:
            self._details.append(detail)

    def __len__(self) -> int:
        """Number of recorded details."""
        with self._lock:
            return len(self._details)

    @property
    def details(self) -> tuple[ErrorDetail, ...]:
        """Snapshot of recorded details, oldest first."""
        with self._lock:
            return tuple(self._details)

    @property
    def last(self) -> ErrorDetail | None:
        """Most recently recorded detail, or None."""
        with self._lock:
            return self._details[-1] if self._details else None

    @property
    def codes(self) -> tuple[ErrorCode, ...]:
        """Codes of recorded details, oldest first."""
        with self._lock:
            return tuple(detail.code for detail in self._details)

    def clear(self) -> None:
        """Forget all recorded details."""
        with self._lock:
            self._details.clear()
