"""Locale configuration for the resolver.

LocaleOptions is what callers write; LocaleConfig is what the resolver
consumes. parse_options() turns the former into the latter once, at
construction time.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

__all__ = ["LocaleConfig", "LocaleOptions", "parse_options"]


def _accept_any(_locale: object) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class LocaleOptions:
    """Immutable locale options for a resolver root.

    Attributes:
        locale: Initial current locale (required, non-empty).
        default_locale: Locale consulted when a key has no value for the
            current locale. Defaults to ``locale``.
        locales: Locales accepted by change_locale(). Empty (default)
            accepts any locale. ``locale`` and ``default_locale`` are always
            accepted.

    Example:
        >>> options = LocaleOptions("ru_ru", locales=("en_us",))
        >>> config = parse_options(options)
        >>> config.accepts("en_us"), config.accepts("ru_ru"), config.accepts("xx_xx")
        (True, True, False)
    """

    locale: str
    default_locale: str | None = None
    locales: Iterable[str] = ()

    def __post_init__(self) -> None:
        """Validate option values at construction time.

        Raises:
            ValueError: If locale is empty, or default_locale is an empty string.
            TypeError: If locale/default_locale is not a string, or locales is a
                bare string.
        """
        if not isinstance(self.locale, str):
            msg = f"locale must be a string, got {type(self.locale).__name__}"
            raise TypeError(msg)
        if not self.locale:
            msg = "locale cannot be empty"
            raise ValueError(msg)
        if self.default_locale is not None:
            if not isinstance(self.default_locale, str):
                msg = (
                    "default_locale must be a string, "
                    f"got {type(self.default_locale).__name__}"
                )
                raise TypeError(msg)
            if not self.default_locale:
                msg = "default_locale cannot be empty"
                raise ValueError(msg)
        if isinstance(self.locales, str):
            msg = "locales must be an iterable of locale codes, not a string"
            raise TypeError(msg)
        # Freeze the iterable so the dataclass stays hashable and re-iterable.
        object.__setattr__(self, "locales", tuple(self.locales))


@dataclass(frozen=True, slots=True)
class LocaleConfig:
    """Parsed locale configuration.

    Attributes:
        locale: Initial current locale
        default_locale: Fallback locale for value selection
        accepts: Predicate deciding whether change_locale() may switch to a locale
    """

    locale: str
    default_locale: str
    accepts: Callable[[str], bool] = _accept_any


def parse_options(options: LocaleOptions) -> LocaleConfig:
    """Turn LocaleOptions into a LocaleConfig.

    A non-empty ``locales`` set becomes a membership predicate that also
    contains the initial and default locales.
    """
    locale = options.locale
    default_locale = options.default_locale or locale
    accepted = frozenset(options.locales)
    if not accepted:
        return LocaleConfig(locale, default_locale)
    accepted |= {locale, default_locale}

    def accepts(value: str) -> bool:
        return isinstance(value, str) and value in accepted

    return LocaleConfig(locale, default_locale, accepts)
