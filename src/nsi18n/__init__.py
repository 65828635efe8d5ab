"""nsi18n - namespaced key resolution for localized text.

Independent parts of an application register their own namespaces and
keys; any part can read any key by its full dotted path. Keys may be
stored per locale or borrowed from another namespace, with cycle detection,
locale fallback and a resolution cache.

Public API:
    create_i18n - Create a root and return its root facade
    Namespace - Read facade (t, get_value, has)
    Registry - Key table of a registered namespace (set, set_template, use)
    Resolver - Registration and resolution engine of one root
    LocaleOptions - Locale configuration
    TemplateValue - Stored value with {name} placeholders
    ChangeEvent - Kinds of change notifications

Errors:
    ErrorCode - Stable numeric error codes
    ErrorDetail - Record passed to error sinks
    I18nError - Base exception (raised by the raise_error sink)
    log_error, raise_error, ErrorCollector - Ready-made error sinks

Submodules:
    nsi18n.core - Dotted path rules
    nsi18n.diagnostics - Error codes, templates, exceptions and sinks
    nsi18n.runtime - Resolver, registries, facades and notifications
"""

from .diagnostics import (
    ErrorCode,
    ErrorCollector,
    ErrorDetail,
    I18nError,
    log_error,
    raise_error,
)
from .enums import ChangeEvent
from .runtime import (
    LocaleOptions,
    Namespace,
    Registry,
    Resolver,
    StrTemplate,
    TemplateValue,
    create_i18n,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("nsi18n")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ChangeEvent",
    "ErrorCode",
    "ErrorCollector",
    "ErrorDetail",
    "I18nError",
    "LocaleOptions",
    "Namespace",
    "Registry",
    "Resolver",
    "StrTemplate",
    "TemplateValue",
    "__version__",
    "create_i18n",
    "log_error",
    "raise_error",
]
