"""Locale helpers for nsi18n.

The resolver treats locales as opaque strings: they are only compared for
equality and used as keys of per-locale value maps. These helpers sit at
the edges, where a locale meets the outside world:

- normalize_locale: BCP-47 ("en-US") to POSIX ("en_US") spelling
- get_system_locale: detect the process locale for create_i18n(locale=None)
- get_babel_locale: Babel Locale for locale-aware placeholder rendering

Python 3.13+.
"""

from __future__ import annotations

import functools
import os
from typing import TYPE_CHECKING

from nsi18n.constants import FALLBACK_LOCALE

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
]

_PSEUDO_LOCALES = frozenset({"", "C", "POSIX"})


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 locale code to POSIX spelling.

    Example:
        >>> normalize_locale("pt-BR")
        'pt_BR'
        >>> normalize_locale("en")
        'en'
    """
    return locale_code.replace("-", "_")


@functools.lru_cache(maxsize=128)
def get_babel_locale(locale_code: str) -> Locale:
    """Parse locale_code into a Babel Locale, once per code.

    Args:
        locale_code: Locale code in BCP-47 or POSIX spelling

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If Babel has no data for the locale
        ValueError: If the code is not a well-formed locale identifier
    """
    # Babel loads CLDR data on import; defer until a value is actually rendered.
    from babel import Locale  # noqa: PLC0415

    return Locale.parse(normalize_locale(locale_code))


def _strip_encoding(value: str) -> str:
    return normalize_locale(value.split(".")[0])


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect the process locale.

    Detection order:
    1. locale.getlocale()
    2. LC_ALL, LC_MESSAGES, LANG environment variables

    "C" and "POSIX" pseudo-locales are skipped and encoding suffixes
    ("de_DE.UTF-8") are stripped.

    Args:
        raise_on_failure: Raise instead of returning FALLBACK_LOCALE when
            nothing usable is found.

    Returns:
        Locale code in POSIX spelling.

    Raises:
        RuntimeError: If raise_on_failure is True and no locale was found.
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
    except (ValueError, AttributeError):
        system_locale = None
    if system_locale and system_locale not in _PSEUDO_LOCALES:
        return _strip_encoding(system_locale)

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in _PSEUDO_LOCALES:
            return _strip_encoding(value)

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)
    return FALLBACK_LOCALE
