"""Namespace facades.

A facade is a lightweight view of one resolver root at one namespace path.
It holds only the resolver and its namespace; every call is delegated.

- NamespaceBase: API shared by facades and registries (locale control,
  registration, navigation, change subscriptions)
- Namespace: read facade adding get_value(), t() and has()

The root facade has namespace None. Keys passed to a facade are relative
to its namespace: ``root.get_namespace("settings").t("lang")`` is
``root.t("settings.lang")``. Namespace paths given to register() and
get_namespace() are always full paths from the root.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from nsi18n.constants import DEFAULT_VALUE
from nsi18n.core.paths import join_key
from nsi18n.enums import ChangeEvent
from nsi18n.runtime.values import render

if TYPE_CHECKING:
    from nsi18n.runtime.context import Found
    from nsi18n.runtime.events import ChangeListener, Subscription
    from nsi18n.runtime.registry import Registry
    from nsi18n.runtime.resolver import Resolver

__all__ = ["Namespace", "NamespaceBase"]


class NamespaceBase:
    """Scope API shared by Namespace facades and Registry instances."""

    __slots__ = ("_namespace", "_resolver")

    def __init__(self, resolver: Resolver, namespace: str | None) -> None:
        self._resolver = resolver
        self._namespace = namespace

    @property
    def namespace(self) -> str | None:
        """Full namespace path, or None for the root."""
        return self._namespace

    @property
    def resolver(self) -> Resolver:
        """Resolver this scope belongs to."""
        return self._resolver

    @property
    def locale(self) -> str:
        """Current locale of the whole root."""
        return self._resolver.locale

    @property
    def default_locale(self) -> str:
        """Fallback locale of the whole root."""
        return self._resolver.default_locale

    def change(self, locale: str) -> str:
        """Change the current locale of the whole root.

        Clears resolved values and notifies locale listeners. Key listeners
        are not notified even though values may now resolve differently.

        Returns:
            The current locale after the call.
        """
        return self._resolver.change_locale(locale)

    def is_supported_locale(self, locale: str) -> bool:
        """True if change() would accept locale."""
        return self._resolver.is_supported_locale(locale)

    def register(self, full_namespace: str) -> Registry | None:
        """Register (or return the existing) registry at a path from the root.

        Example:
            >>> from nsi18n import create_i18n
            >>> root = create_i18n("en")
            >>> settings = root.register("settings")
            >>> settings.set("system.theme", "Theme", "en")
            True
            >>> root.register("settings.system") is None
            True
        """
        return self._resolver.register(full_namespace)

    def get_root(self) -> Namespace:
        """Root facade."""
        return self._resolver.root

    def get_namespace(self, full_namespace: str) -> Namespace:
        """Facade for a path from the root, like register().

        The namespace does not need to be registered yet.

        Example:
            >>> from nsi18n import create_i18n
            >>> settings = create_i18n("en").get_namespace("settings")
            >>> settings.get_namespace("control").namespace
            'control'
        """
        return self._resolver.get_namespace(full_namespace)

    def on(
        self, event: ChangeEvent | str, listener: ChangeListener, *, once: bool = False
    ) -> Subscription:
        """Subscribe to locale changes or to key changes under this namespace.

        Key listeners receive the changed key relative to this namespace;
        the root receives full keys. There is no per-key subscription.

        Args:
            event: "locale" or "key"
            listener: Called as listener(event, payload)
            once: Remove the listener after its first delivery

        Raises:
            ValueError: If event is not a ChangeEvent value
        """
        event = ChangeEvent(event)
        notifier = self._resolver.notifier
        if event is ChangeEvent.LOCALE:
            return notifier.on_locale(listener, once=once)
        return notifier.on_key(self._namespace, listener, once=once)

    def once(self, event: ChangeEvent | str, listener: ChangeListener) -> Subscription:
        """Subscribe for a single delivery. See on()."""
        return self.on(event, listener, once=True)

    def off(self, event: ChangeEvent | str, listener: ChangeListener) -> bool:
        """Unsubscribe a listener added with on() or once() on this namespace."""
        event = ChangeEvent(event)
        notifier = self._resolver.notifier
        if event is ChangeEvent.LOCALE:
            return notifier.off_locale(listener)
        return notifier.off_key(self._namespace, listener)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(namespace={self._namespace!r})"


class Namespace(NamespaceBase):
    """Read facade of one namespace.

    Example:
        >>> from nsi18n import create_i18n
        >>> root = create_i18n("ru_ru", default_locale="en_us")
        >>> registry = root.register("settings")
        >>> registry.set("lang", "Language", "en_us")
        True
        >>> root.get_namespace("settings").t("lang")
        'Language'
    """

    __slots__ = ()

    def get_value(self, key: str) -> object:
        """Stored value for key, or the resolver's default value."""
        return self._resolver.get_value(self._namespace, key)

    def lookup(self, key: str) -> Found | None:
        """Resolution of key as Found(value, registry), or None."""
        return self._resolver.lookup(self._namespace, key)

    def t(self, key: str, variables: Mapping[str, object] | None = None) -> str:
        """Display text for key.

        Template placeholders are filled from variables; numbers are
        formatted for the current locale.

        Returns:
            Rendered text, or the configured default value when key has no
            value.
        """
        found = self._resolver.lookup(self._namespace, key)
        if found is None:
            default = self._resolver.default_value
            return default if isinstance(default, str) else DEFAULT_VALUE
        return render(found.value, variables, self._resolver.locale)

    def has(self, key: str) -> bool:
        """True if a registry stores key (direct or borrowed).

        Borrowed keys count even when their target has no value.
        """
        return self._resolver.has_full_key(join_key(self._namespace, key))
