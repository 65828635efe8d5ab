"""create_i18n(): one-call construction of a resolver root.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from nsi18n.constants import DEFAULT_CACHE_SIZE, DEFAULT_VALUE
from nsi18n.diagnostics import log_error
from nsi18n.locale_utils import get_system_locale
from nsi18n.runtime.options import LocaleOptions
from nsi18n.runtime.resolver import Resolver

if TYPE_CHECKING:
    from nsi18n.diagnostics import ErrorSink
    from nsi18n.runtime.namespace import Namespace
    from nsi18n.runtime.resolver import FacadeFactory, RegistryFactory

__all__ = ["create_i18n"]


def create_i18n(
    locale: str | None = None,
    /,
    *,
    default_locale: str | None = None,
    locales: Iterable[str] = (),
    on_error: ErrorSink = log_error,
    default_value: object = DEFAULT_VALUE,
    thread_safe: bool = False,
    cache_size: int = DEFAULT_CACHE_SIZE,
    registry_factory: RegistryFactory | None = None,
    facade_factory: FacadeFactory | None = None,
) -> Namespace:
    """Create a new root and return its root facade.

    Args:
        locale: Initial locale; None detects the system locale
        default_locale: Fallback locale for value selection (default: locale)
        locales: Locales accepted by change(); empty accepts any locale
        on_error: Error sink (default: log at WARNING level)
        default_value: Returned by get_value() for keys without a value;
            t() uses it only when it is a string
        thread_safe: Guard operations with a readers-writer lock
        cache_size: Maximum number of cached resolutions
        registry_factory: Custom Registry constructor
        facade_factory: Custom Namespace constructor

    Returns:
        The root facade (namespace None).

    Raises:
        ValueError: If locale or default_locale is empty, or cache_size is
            not positive
        TypeError: If locale or default_locale is not a string

    Example:
        >>> root = create_i18n("ru_ru", default_locale="en_us", locales=["ru_ru", "en_us"])
        >>> greetings = root.register("greetings")
        >>> greetings.set_template("hello", "Hello, {name}!", "en_us")
        True
        >>> root.t("greetings.hello", {"name": "Ann"})
        'Hello, Ann!'
        >>> root.change("de_de")
        'ru_ru'
    """
    if locale is None:
        locale = get_system_locale()
    options = LocaleOptions(locale, default_locale, locales)
    resolver = Resolver(
        options,
        on_error=on_error,
        default_value=default_value,
        thread_safe=thread_safe,
        cache_size=cache_size,
        registry_factory=registry_factory,
        facade_factory=facade_factory,
    )
    return resolver.root
