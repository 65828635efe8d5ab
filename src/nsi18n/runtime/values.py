"""Stored value types and rendering.

The resolver treats stored values as opaque: it only needs a per-locale
map and a truthiness check. This module is the collaborator that decides
what a value is and how it becomes display text.

Value kinds:
    - str: rendered as is
    - TemplateValue: literal segments plus named placeholders, built from
      a ``{name}`` template string or from a token sequence

Placeholder substitution:
    - Missing variables render as the placeholder name
    - Numbers (int, float, Decimal; not bool) are formatted with Babel's
      format_decimal for the active locale
    - Everything else is rendered with str()

Python 3.13+.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

from babel.core import UnknownLocaleError
from babel.numbers import format_decimal

from nsi18n.locale_utils import get_babel_locale

__all__ = [
    "StrTemplate",
    "StrToken",
    "StoredValue",
    "TemplateValue",
    "format_variable",
    "render",
    "template_to_tokens",
    "to_value",
]

logger = logging.getLogger(__name__)

# Innermost pair of curly braces: "{name}". Nested braces never match.
_PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(r"\{([^{}]+)\}")


@dataclass(frozen=True, slots=True)
class StrToken:
    """One token of a template.

    Attributes:
        kind: "str" for literal text, "ph" for a placeholder
        value: Literal text, or the placeholder name
    """

    kind: Literal["str", "ph"]
    value: str


@dataclass(frozen=True, slots=True)
class StrTemplate:
    """Marker for a template string passed to Registry.set().

    ``registry.set(key, StrTemplate("Hi, {name}!"), locale)`` is the same as
    ``registry.set_template(key, "Hi, {name}!", locale)``.
    """

    value: str


def template_to_tokens(template: str) -> list[StrToken]:
    """Split a ``{name}`` template into literal and placeholder tokens.

    Placeholder names are stripped of surrounding whitespace. Blank
    placeholders (``{ }``) stay part of the literal text.

    Example:
        >>> [t.value for t in template_to_tokens("Hi, { name }!")]
        ['Hi, ', 'name', '!']
    """
    if not isinstance(template, str):
        return []
    tokens: list[StrToken] = []
    last_index = 0
    for match in _PLACEHOLDER_PATTERN.finditer(template):
        name = match.group(1).strip()
        if not name:
            continue
        tokens.append(StrToken("str", template[last_index : match.start()]))
        tokens.append(StrToken("ph", name))
        last_index = match.end()
    tokens.append(StrToken("str", template[last_index:]))
    return tokens


class TemplateValue:
    """Literal segments with named placeholder positions.

    Instances are immutable and always truthy, even for an empty template:
    a stored template is a value in its own right.

    Example:
        >>> value = TemplateValue.from_template("Hello, {name}!")
        >>> value.render({"name": "Ann"})
        'Hello, Ann!'
        >>> value.render()
        'Hello, name!'
    """

    __slots__ = ("_placeholders", "_segments")

    def __init__(self, tokens: Iterable[str | StrToken]) -> None:
        """Build from tokens; plain strings are literal text.

        Tokens of an unknown kind contribute nothing to the output.
        """
        segments: list[str] = []
        placeholders: list[tuple[int, str]] = []
        for index, token in enumerate(tokens):
            if isinstance(token, str):
                segments.append(token)
            elif token.kind == "str":
                segments.append(token.value)
            elif token.kind == "ph":
                placeholders.append((index, token.value))
                segments.append("")
            else:
                segments.append("")
        self._segments: tuple[str, ...] = tuple(segments)
        self._placeholders: tuple[tuple[int, str], ...] = tuple(placeholders)

    @classmethod
    def from_template(cls, template: str) -> TemplateValue:
        """Parse a ``{name}`` template string."""
        return cls(template_to_tokens(template))

    @property
    def placeholders(self) -> tuple[str, ...]:
        """Placeholder names in order of appearance (duplicates kept)."""
        return tuple(name for _, name in self._placeholders)

    def render(
        self, variables: Mapping[str, object] | None = None, locale: str | None = None
    ) -> str:
        """Substitute placeholders and join the segments."""
        if not self._placeholders:
            return "".join(self._segments)
        variables = variables or {}
        segments = list(self._segments)
        for index, name in self._placeholders:
            if name in variables:
                segments[index] = format_variable(variables[name], locale)
            else:
                segments[index] = name
        return "".join(segments)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TemplateValue):
            return NotImplemented
        return (
            self._segments == other._segments
            and self._placeholders == other._placeholders
        )

    def __hash__(self) -> int:
        return hash((self._segments, self._placeholders))

    def __repr__(self) -> str:
        return f"TemplateValue(segments={self._segments!r}, placeholders={self.placeholders!r})"


type StoredValue = str | TemplateValue


def to_value(obj: object) -> StoredValue | None:
    """Convert caller input into a stored value.

    Accepted input:
        - str: stored as is
        - TemplateValue: stored as is
        - StrTemplate: parsed into a TemplateValue
        - list or tuple of str / StrToken: tokens of a TemplateValue

    Returns:
        The stored value, or None if obj cannot be stored.
    """
    match obj:
        case str() | TemplateValue():
            return obj
        case StrTemplate(value=template):
            return TemplateValue.from_template(template)
        case list() | tuple() if all(isinstance(item, (str, StrToken)) for item in obj):
            return TemplateValue(obj)
        case _:
            return None


def format_variable(value: object, locale: str | None) -> str:
    """Render one placeholder variable.

    Numbers are formatted with Babel for locale. Unknown or malformed
    locales fall back to str().
    """
    is_number = isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)
    if is_number and locale:
        try:
            return format_decimal(value, locale=get_babel_locale(locale))
        except (UnknownLocaleError, ValueError) as e:
            logger.debug("Number formatting for locale %r failed: %s", locale, e)
    return str(value)


def render(
    value: object, variables: Mapping[str, object] | None = None, locale: str | None = None
) -> str:
    """Render a stored value to display text.

    Example:
        >>> render("Plain")
        'Plain'
        >>> render(TemplateValue.from_template("{count} items"), {"count": 1500}, "en_US")
        '1,500 items'
    """
    if isinstance(value, str):
        return value
    if isinstance(value, TemplateValue):
        return value.render(variables, locale)
    return str(value)
