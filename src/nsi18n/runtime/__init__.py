"""Resolution runtime.

Provides the Resolver, registries, facades, change notification and the
value collaborator. Depends on core for path rules and on diagnostics for
error reporting.

Python 3.13+.
"""

from .cache import ResolutionCache
from .context import Found, VisitContext
from .events import ChangeListener, ChangeNotifier, DeliveryBatch, Subscription
from .factory import create_i18n
from .namespace import Namespace, NamespaceBase
from .options import LocaleConfig, LocaleOptions, parse_options
from .registry import BorrowEntry, BorrowLink, DirectEntry, Registry
from .resolver import FacadeFactory, RegistryFactory, Resolver
from .rwlock import RWLock
from .tree import NamespaceEntry, NamespaceTree
from .values import (
    StoredValue,
    StrTemplate,
    StrToken,
    TemplateValue,
    render,
    template_to_tokens,
    to_value,
)

__all__ = [
    "BorrowEntry",
    "BorrowLink",
    "ChangeListener",
    "ChangeNotifier",
    "DeliveryBatch",
    "DirectEntry",
    "FacadeFactory",
    "Found",
    "LocaleConfig",
    "LocaleOptions",
    "Namespace",
    "NamespaceBase",
    "NamespaceEntry",
    "NamespaceTree",
    "RWLock",
    "Registry",
    "RegistryFactory",
    "ResolutionCache",
    "Resolver",
    "StoredValue",
    "StrTemplate",
    "StrToken",
    "Subscription",
    "TemplateValue",
    "VisitContext",
    "create_i18n",
    "parse_options",
    "render",
    "template_to_tokens",
    "to_value",
]
