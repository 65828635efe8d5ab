"""nsi18n exception hierarchy.

The resolver itself never raises: every failure is delivered to the error
sink as an ErrorDetail. These exceptions exist for sinks that want to turn
details into exceptions (see handlers.raise_error) and for callers that
prefer ``except`` clauses over code comparisons.

Python 3.13+. Zero external dependencies.
"""

from .codes import ErrorCode, ErrorDetail

__all__ = [
    "CircularDependencyError",
    "I18nError",
    "InvalidKeySyntaxError",
    "InvalidNamespaceSyntaxError",
    "InvalidValueTypeError",
    "KeyNamespaceIntersectionError",
    "NamespaceKeyIntersectionError",
    "UnregisteredKeyError",
    "UnregisteredLocaleError",
    "error_from_detail",
]


class I18nError(Exception):
    """Base exception for all nsi18n errors.

    Attributes:
        detail: Structured error record
    """

    def __init__(self, detail: ErrorDetail) -> None:
        """Initialize I18nError.

        Args:
            detail: Structured error record
        """
        super().__init__(detail.message)
        self.detail = detail

    @property
    def code(self) -> ErrorCode:
        """Error code of the wrapped detail."""
        return self.detail.code


class UnregisteredLocaleError(I18nError):
    """Locale is not accepted by the resolver."""


class InvalidNamespaceSyntaxError(I18nError):
    """Namespace path is empty or malformed."""


class InvalidKeySyntaxError(I18nError):
    """Key is empty or malformed."""


class InvalidValueTypeError(I18nError):
    """Value cannot be converted to a stored value."""


class NamespaceKeyIntersectionError(I18nError):
    """Namespace collides with a key registered in another namespace."""


class KeyNamespaceIntersectionError(I18nError):
    """Key collides with a registered namespace."""


class UnregisteredKeyError(I18nError):
    """Lookup of a key that has no value."""


class CircularDependencyError(I18nError):
    """Borrowed keys form a cycle."""


_ERRORS_BY_CODE: dict[ErrorCode, type[I18nError]] = {
    ErrorCode.UNREGISTERED_LOCALE: UnregisteredLocaleError,
    ErrorCode.INVALID_NAMESPACE_SYNTAX: InvalidNamespaceSyntaxError,
    ErrorCode.INVALID_KEY_SYNTAX: InvalidKeySyntaxError,
    ErrorCode.INVALID_VALUE_TYPE: InvalidValueTypeError,
    ErrorCode.NAMESPACE_KEY_INTERSECTION: NamespaceKeyIntersectionError,
    ErrorCode.KEY_NAMESPACE_INTERSECTION: KeyNamespaceIntersectionError,
    ErrorCode.UNREGISTERED_KEY: UnregisteredKeyError,
    ErrorCode.CIRCULAR_DEPENDENCY: CircularDependencyError,
}


def error_from_detail(detail: ErrorDetail) -> I18nError:
    """Build the exception matching detail.code.

    Example:
        >>> from nsi18n.diagnostics import ErrorTemplate
        >>> err = error_from_detail(ErrorTemplate.unregistered_key("he", "hi"))
        >>> type(err).__name__
        'UnregisteredKeyError'
    """
    return _ERRORS_BY_CODE[detail.code](detail)
