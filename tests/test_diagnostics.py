"""Tests for the diagnostics package.

Covers error codes, ErrorDetail formatting, ErrorTemplate wording, the
exception hierarchy and the ready-made error sinks.

Python 3.13+.
"""

import dataclasses
import logging
import threading

import pytest

from nsi18n.diagnostics import (
    CircularDependencyError,
    ErrorCode,
    ErrorCollector,
    ErrorDetail,
    ErrorTemplate,
    I18nError,
    InvalidKeySyntaxError,
    InvalidNamespaceSyntaxError,
    InvalidValueTypeError,
    KeyNamespaceIntersectionError,
    NamespaceKeyIntersectionError,
    UnregisteredKeyError,
    UnregisteredLocaleError,
    error_from_detail,
    log_error,
    raise_error,
)


class TestErrorCode:
    """Test stable numeric error codes."""

    def test_numbering(self) -> None:
        """Codes keep their public numeric values."""
        assert [(code.name, code.value) for code in ErrorCode] == [
            ("UNREGISTERED_LOCALE", 1),
            ("INVALID_NAMESPACE_SYNTAX", 2),
            ("INVALID_KEY_SYNTAX", 3),
            ("INVALID_VALUE_TYPE", 4),
            ("NAMESPACE_KEY_INTERSECTION", 5),
            ("KEY_NAMESPACE_INTERSECTION", 6),
            ("UNREGISTERED_KEY", 7),
            ("CIRCULAR_DEPENDENCY", 8),
        ]

    def test_compares_to_int(self) -> None:
        """IntEnum members compare equal to their integers."""
        assert ErrorCode.UNREGISTERED_KEY == 7


class TestErrorDetail:
    """Test ErrorDetail record."""

    def test_frozen(self) -> None:
        """Details are immutable."""
        detail = ErrorTemplate.unregistered_key("he", "says.hi")
        with pytest.raises(dataclasses.FrozenInstanceError):
            detail.key = "other"  # type: ignore[misc]

    def test_str_is_message(self) -> None:
        """str() returns the message."""
        detail = ErrorTemplate.unregistered_key("he", "says.hi")
        assert str(detail) == "The key 'he.says.hi' is not registered."

    def test_format_error(self) -> None:
        """format_error() prefixes the code name."""
        detail = ErrorTemplate.unregistered_key("he", "says.hi")
        assert detail.format_error() == "error[UNREGISTERED_KEY]: The key 'he.says.hi' is not registered."

    def test_format_error_escapes_control_characters(self) -> None:
        """Newlines in keys cannot forge extra log lines."""
        detail = ErrorTemplate.unregistered_key("ns", "a\nb")
        assert "\n" not in detail.format_error()
        assert "\\n" in detail.format_error()


class TestErrorTemplate:
    """Test ErrorTemplate factories."""

    def test_unregistered_locale(self) -> None:
        """Locale goes into the key field."""
        detail = ErrorTemplate.unregistered_locale("xx_xx")
        assert detail.code is ErrorCode.UNREGISTERED_LOCALE
        assert detail.namespace is None
        assert detail.key == "xx_xx"
        assert "xx_xx" in detail.message

    def test_unregistered_locale_with_broken_str(self) -> None:
        """An object whose __str__ raises is still reported."""

        class Broken:
            def __str__(self) -> str:
                raise RuntimeError

        detail = ErrorTemplate.unregistered_locale(Broken())
        assert detail.key == "(unknown)"

    def test_invalid_namespace_syntax(self) -> None:
        """Namespace is recorded when it is a string."""
        detail = ErrorTemplate.invalid_namespace_syntax("foo..bar")
        assert detail.code is ErrorCode.INVALID_NAMESPACE_SYNTAX
        assert detail.namespace == "foo..bar"

    def test_invalid_namespace_syntax_non_string(self) -> None:
        """Non-string namespaces are described by type."""
        detail = ErrorTemplate.invalid_namespace_syntax(None)
        assert detail.namespace is None
        assert "NoneType(type)" in detail.message

    def test_invalid_key_syntax(self) -> None:
        """Message shows the full key."""
        detail = ErrorTemplate.invalid_key_syntax("settings", ".button")
        assert detail.code is ErrorCode.INVALID_KEY_SYNTAX
        assert "'settings..button'" in detail.message

    def test_invalid_value_type(self) -> None:
        """Rejected type name appears in the message."""
        detail = ErrorTemplate.invalid_value_type("ns", "key", "int")
        assert detail.code is ErrorCode.INVALID_VALUE_TYPE
        assert detail.message == "Unacceptable value type 'int'."

    def test_invalid_value_type_unknown(self) -> None:
        """Type name is optional."""
        assert ErrorTemplate.invalid_value_type("ns", "key", None).message == "Unacceptable value type."

    def test_namespace_key_intersection(self) -> None:
        """Message names both namespaces and the colliding key."""
        detail = ErrorTemplate.namespace_key_intersection("settings.locale", "settings", "locale.ru")
        assert detail.code is ErrorCode.NAMESPACE_KEY_INTERSECTION
        assert detail.namespace == "settings.locale"
        assert "'locale.ru'" in detail.message
        assert "'settings'" in detail.message

    def test_key_namespace_intersection(self) -> None:
        """Message names the key and the registered namespace."""
        detail = ErrorTemplate.key_namespace_intersection("settings.foo", "bar", "settings.foo.bar")
        assert detail.code is ErrorCode.KEY_NAMESPACE_INTERSECTION
        assert detail.key == "bar"
        assert "'settings.foo.bar'" in detail.message

    def test_key_namespace_intersection_root(self) -> None:
        """None namespace is rendered as (null)."""
        detail = ErrorTemplate.key_namespace_intersection(None, "ns.key", "ns.key")
        assert "(null)" in detail.message

    def test_circular_dependency(self) -> None:
        """Origin and revisited pair are both reported."""
        detail = ErrorTemplate.circular_dependency(None, "ns1.a", "ns2", "b")
        assert detail.code is ErrorCode.CIRCULAR_DEPENDENCY
        assert detail.key == "ns1.a"
        assert "'ns2'" in detail.message
        assert "'b'" in detail.message


class TestErrorHierarchy:
    """Test exceptions built from details."""

    @pytest.mark.parametrize(
        ("detail", "error_type"),
        [
            (ErrorTemplate.unregistered_locale("xx"), UnregisteredLocaleError),
            (ErrorTemplate.invalid_namespace_syntax(""), InvalidNamespaceSyntaxError),
            (ErrorTemplate.invalid_key_syntax("ns", ""), InvalidKeySyntaxError),
            (ErrorTemplate.invalid_value_type("ns", "k", "int"), InvalidValueTypeError),
            (ErrorTemplate.namespace_key_intersection("a.b", "a", "b"), NamespaceKeyIntersectionError),
            (ErrorTemplate.key_namespace_intersection("a", "b", "a.b"), KeyNamespaceIntersectionError),
            (ErrorTemplate.unregistered_key("a", "b"), UnregisteredKeyError),
            (ErrorTemplate.circular_dependency("a", "b", "c", "d"), CircularDependencyError),
        ],
    )
    def test_error_from_detail(self, detail: ErrorDetail, error_type: type[I18nError]) -> None:
        """Every code maps to its own exception subclass."""
        error = error_from_detail(detail)
        assert type(error) is error_type
        assert isinstance(error, I18nError)
        assert error.detail is detail
        assert error.code is detail.code
        assert str(error) == detail.message


class TestSinks:
    """Test ready-made error sinks."""

    def test_log_error_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        """log_error writes one WARNING record."""
        with caplog.at_level(logging.WARNING, logger="nsi18n.diagnostics.handlers"):
            log_error(ErrorTemplate.unregistered_key("he", "hi"))
        assert len(caplog.records) == 1
        assert caplog.records[0].levelno == logging.WARNING
        assert "error[UNREGISTERED_KEY]" in caplog.records[0].getMessage()

    def test_raise_error(self) -> None:
        """raise_error raises the matching subclass."""
        with pytest.raises(UnregisteredKeyError) as exc_info:
            raise_error(ErrorTemplate.unregistered_key("he", "hi"))
        assert exc_info.value.code is ErrorCode.UNREGISTERED_KEY

    def test_collector_records_in_order(self) -> None:
        """ErrorCollector keeps details oldest first."""
        collector = ErrorCollector()
        first = ErrorTemplate.unregistered_key("a", "b")
        second = ErrorTemplate.unregistered_locale("xx")
        collector(first)
        collector(second)
        assert len(collector) == 2
        assert collector.details == (first, second)
        assert collector.last is second
        assert collector.codes == (ErrorCode.UNREGISTERED_KEY, ErrorCode.UNREGISTERED_LOCALE)

    def test_collector_clear(self) -> None:
        """clear() forgets everything."""
        collector = ErrorCollector()
        collector(ErrorTemplate.unregistered_key("a", "b"))
        collector.clear()
        assert len(collector) == 0
        assert collector.last is None
        assert collector.codes == ()

    def test_collector_thread_safe(self) -> None:
        """Concurrent reports are all recorded."""
        collector = ErrorCollector()
        detail = ErrorTemplate.unregistered_key("a", "b")

        def report() -> None:
            for _ in range(100):
                collector(detail)

        threads = [threading.Thread(target=report) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(collector) == 800
