"""Diagnostic system for nsi18n errors.

Provides canonical error codes, structured error records, message
templates, the exception hierarchy and ready-made error sinks.

Python 3.13+. Zero external dependencies.
"""

from .codes import ErrorCode, ErrorDetail
from .errors import (
    CircularDependencyError,
    I18nError,
    InvalidKeySyntaxError,
    InvalidNamespaceSyntaxError,
    InvalidValueTypeError,
    KeyNamespaceIntersectionError,
    NamespaceKeyIntersectionError,
    UnregisteredKeyError,
    UnregisteredLocaleError,
    error_from_detail,
)
from .handlers import ErrorCollector, ErrorSink, log_error, raise_error
from .templates import ErrorTemplate

__all__ = [
    "CircularDependencyError",
    "ErrorCode",
    "ErrorCollector",
    "ErrorDetail",
    "ErrorSink",
    "ErrorTemplate",
    "I18nError",
    "InvalidKeySyntaxError",
    "InvalidNamespaceSyntaxError",
    "InvalidValueTypeError",
    "KeyNamespaceIntersectionError",
    "NamespaceKeyIntersectionError",
    "UnregisteredKeyError",
    "UnregisteredLocaleError",
    "error_from_detail",
    "log_error",
    "raise_error",
]
