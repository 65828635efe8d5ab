"""Resolver: shared state and resolution engine of one root.

One Resolver exists per root facade. It owns:

- locale state (current locale, default locale, acceptance predicate)
- the namespace tree (registries and facades)
- the resolution cache and the unresolved-key set
- the change notifier
- the error sink

Resolution Order:
    For a full key ``a.b.c`` the registries at ``a`` (local key ``b.c``)
    and ``a.b`` (local key ``c``) are asked in that order; the first value
    found wins. Borrowed keys restart the search at their target, sharing
    one VisitContext per top-level lookup so cycles are detected across any
    number of namespaces.

Thread Safety:
    thread_safe=False (default): no locking; complete initialization
    before sharing across threads.

    thread_safe=True: lookups take the read side and mutations the write
    side of an RWLock. Change notifications collected during a mutation
    are delivered after the write lock is released, so listeners may call
    back into the resolver. Error sinks run while the lock is held and must
    not call back into the resolver.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import contextmanager, nullcontext
from typing import TYPE_CHECKING

from nsi18n.constants import DEFAULT_CACHE_SIZE, DEFAULT_VALUE
from nsi18n.core.paths import is_valid_path, join_key
from nsi18n.diagnostics import ErrorTemplate, log_error
from nsi18n.runtime.cache import ResolutionCache
from nsi18n.runtime.context import Found, VisitContext
from nsi18n.runtime.events import ChangeNotifier, DeliveryBatch
from nsi18n.runtime.namespace import Namespace
from nsi18n.runtime.options import LocaleConfig, LocaleOptions, parse_options
from nsi18n.runtime.registry import Registry
from nsi18n.runtime.rwlock import RWLock
from nsi18n.runtime.tree import NamespaceTree

if TYPE_CHECKING:
    from collections.abc import Generator
    from contextlib import AbstractContextManager

    from nsi18n.diagnostics import ErrorDetail, ErrorSink

__all__ = ["FacadeFactory", "RegistryFactory", "Resolver"]

logger = logging.getLogger(__name__)

type RegistryFactory = Callable[[Resolver, str], Registry]
type FacadeFactory = Callable[[Resolver, str | None], Namespace]


class Resolver:
    """Registration and resolution engine of one root.

    Application code normally uses the facades returned by create_i18n();
    the Resolver is reachable from any of them as ``facade.resolver``.

    Example:
        >>> resolver = Resolver(LocaleOptions("en_us"))
        >>> settings = resolver.register("settings")
        >>> settings.set("locale.ru", "Russian", "en_us")
        True
        >>> resolver.get_value("settings", "locale.ru")
        'Russian'
        >>> resolver.register("settings.locale") is None
        True
    """

    __slots__ = (
        "_accepts",
        "_cache",
        "_default_locale",
        "_default_value",
        "_facade_factory",
        "_locale",
        "_lock",
        "_notifier",
        "_on_error",
        "_registry_factory",
        "_root",
        "_tree",
    )

    def __init__(
        self,
        options: LocaleOptions | LocaleConfig,
        /,
        *,
        on_error: ErrorSink = log_error,
        default_value: object = DEFAULT_VALUE,
        thread_safe: bool = False,
        cache_size: int = DEFAULT_CACHE_SIZE,
        registry_factory: RegistryFactory | None = None,
        facade_factory: FacadeFactory | None = None,
    ) -> None:
        """Initialize an empty root.

        Args:
            options: Locale options, or an already parsed LocaleConfig
            on_error: Error sink called once per reported error (default:
                log at WARNING level)
            default_value: Returned by get_value() when a key has no value
            thread_safe: Guard operations with a readers-writer lock
            cache_size: Maximum number of cached resolutions (default: 1000)
            registry_factory: Called as factory(resolver, namespace) to create
                registries (default: Registry)
            facade_factory: Called as factory(resolver, namespace) to create
                facades, including the root (default: Namespace)

        Raises:
            ValueError: If cache_size is not positive
        """
        config = options if isinstance(options, LocaleConfig) else parse_options(options)
        self._locale = config.locale
        self._default_locale = config.default_locale
        self._accepts = config.accepts

        self._on_error = on_error
        self._default_value = default_value
        self._lock: RWLock | None = RWLock() if thread_safe else None

        self._tree = NamespaceTree()
        self._cache = ResolutionCache(cache_size)
        self._notifier = ChangeNotifier()

        self._registry_factory: RegistryFactory = registry_factory or Registry
        self._facade_factory: FacadeFactory = facade_factory or Namespace
        self._root = self._facade_factory(self, None)

        logger.info(
            "Resolver initialized (locale=%s, default_locale=%s, thread_safe=%s)",
            self._locale,
            self._default_locale,
            thread_safe,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def root(self) -> Namespace:
        """Root facade (namespace None)."""
        return self._root

    @property
    def locale(self) -> str:
        """Current locale."""
        return self._locale

    @property
    def default_locale(self) -> str:
        """Locale consulted when a key has no value for the current locale."""
        return self._default_locale

    @property
    def default_value(self) -> object:
        """Value get_value() returns for keys without a value."""
        return self._default_value

    @property
    def notifier(self) -> ChangeNotifier:
        """Change notifier shared by all facades and registries of this root."""
        return self._notifier

    @property
    def is_thread_safe(self) -> bool:
        """True if operations are guarded by a readers-writer lock."""
        return self._lock is not None

    # ------------------------------------------------------------------
    # Locking
    # ------------------------------------------------------------------

    def reading(self) -> AbstractContextManager[None]:
        """Shared side of the lock, or a no-op when not thread-safe."""
        if self._lock is None:
            return nullcontext()
        return self._lock.read()

    def _writing(self) -> AbstractContextManager[None]:
        if self._lock is None:
            return nullcontext()
        return self._lock.write()

    @contextmanager
    def mutation(self, batch: DeliveryBatch | None = None) -> Generator[DeliveryBatch]:
        """Run a mutation and deliver its notifications afterwards.

        The block runs under the write lock (when thread-safe) and collects
        change notifications into the yielded batch. The batch is delivered
        once the lock is released. A block that raises delivers nothing.

        Args:
            batch: Batch whose delivery is already running; the block's
                notifications join it and its deliver() call sends them
        """
        pending = batch if batch is not None else DeliveryBatch()
        with self._writing():
            yield pending
        if batch is None and pending:
            pending.deliver()

    # ------------------------------------------------------------------
    # Locale
    # ------------------------------------------------------------------

    def is_supported_locale(self, locale: str) -> bool:
        """True if change_locale() would accept locale."""
        return isinstance(locale, str) and bool(locale) and self._accepts(locale)

    def change_locale(self, locale: str) -> str:
        """Switch the current locale.

        A rejected locale is reported as UNREGISTERED_LOCALE and leaves the
        state unchanged. Switching clears cached values (not the unresolved
        set) and notifies locale listeners.

        Returns:
            The current locale after the call.
        """
        with self.mutation() as batch:
            if not self.is_supported_locale(locale):
                self.report(ErrorTemplate.unregistered_locale(locale))
            elif locale != self._locale:
                logger.debug("Locale changed: %s -> %s", self._locale, locale)
                self._locale = locale
                self._cache.clear_values()
                self._notifier.collect_locale(locale, batch)
            return self._locale

    # ------------------------------------------------------------------
    # Namespaces
    # ------------------------------------------------------------------

    def register(self, full_namespace: str) -> Registry | None:
        """Register a registry at full_namespace, or return the existing one.

        Refused (None, error reported) when the path is malformed or when an
        existing key already occupies it.
        """
        with self._writing():
            if isinstance(full_namespace, str):
                existing = self._tree.registry_at(full_namespace)
                if existing is not None:
                    return existing
            if not is_valid_path(full_namespace):
                self.report(ErrorTemplate.invalid_namespace_syntax(full_namespace))
                return None
            hit = self._tree.find_intersection(full_namespace)
            if hit is not None:
                other, key = hit
                self.report(
                    ErrorTemplate.namespace_key_intersection(full_namespace, other.namespace, key)
                )
                return None

            self._cache.forget_unresolved(full_namespace)
            registry = self._registry_factory(self, full_namespace)
            self._tree.add_registry(full_namespace, registry)
            logger.debug("Registered namespace: %s", full_namespace)
            return registry

    def get_registry(self, full_namespace: str) -> Registry | None:
        """Registry registered exactly at full_namespace, or None."""
        with self.reading():
            return self._tree.registry_at(full_namespace)

    def get_namespace(self, full_namespace: str) -> Namespace:
        """Facade for full_namespace, created on first request.

        The namespace does not need to be registered.
        """
        with self.reading():
            facade = self._tree.facade_at(full_namespace)
        if facade is not None:
            return facade
        with self._writing():
            return self._tree.ensure_facade(
                full_namespace, lambda: self._facade_factory(self, full_namespace)
            )

    # ------------------------------------------------------------------
    # Hooks used by registries inside mutation()
    # ------------------------------------------------------------------

    def report(self, detail: ErrorDetail) -> None:
        """Send detail to the error sink."""
        self._on_error(detail)

    def check_full_key(self, namespace: str | None, key: str) -> bool:
        """Check that no registry is registered at the full key's path.

        Reports KEY_NAMESPACE_INTERSECTION on collision.
        """
        registry = self._tree.registry_at(join_key(namespace, key))
        if registry is not None:
            self.report(ErrorTemplate.key_namespace_intersection(namespace, key, registry.namespace))
            return False
        return True

    def key_changed(self, registry: Registry, key: str, batch: DeliveryBatch) -> bool:
        """Invalidate the full key and queue its key notifications.

        Returns:
            False (and does nothing) if batch already announced this key.
        """
        if not batch.announce(registry, key):
            return False
        self._cache.invalidate(join_key(registry.namespace, key))
        self._notifier.collect_key(registry.namespace, key, batch)
        return True

    def find_value(self, locale: str, full_key: str, ctx: VisitContext) -> Found | None:
        """Search every registry that may own full_key, shortest namespace first.

        A (registry, local key) pair already visited in ctx is a cycle: it
        is reported, ctx.error is set and the search continues with the
        next candidate.
        """
        for registry, local_key in self._tree.candidates(full_key):
            if not ctx.visit(registry, local_key):
                ctx.error = True
                self.report(
                    ErrorTemplate.circular_dependency(
                        ctx.origin_namespace, ctx.origin_key, registry.namespace, local_key
                    )
                )
                continue
            found = registry.resolve_local(locale, local_key, ctx)
            if found is not None:
                return found
        return None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def lookup(self, namespace: str | None, key: str) -> Found | None:
        """Resolve key relative to namespace.

        Returns:
            Found(value, registry), or None when key has no value. The miss
            is reported once (UNREGISTERED_KEY, unless a cycle was reported
            instead) and remembered until the key or namespace changes.
        """
        with self.reading():
            return self._lookup(namespace, key)

    def get_value(self, namespace: str | None, key: str) -> object:
        """Stored value of key relative to namespace, or the default value."""
        with self.reading():
            found = self._lookup(namespace, key)
        return found.value if found is not None else self._default_value

    def _lookup(self, namespace: str | None, key: str) -> Found | None:
        if not isinstance(key, str):
            self.report(ErrorTemplate.unregistered_key(namespace, repr(key)))
            return None

        full_key = join_key(namespace, key)
        found = self._cache.get(full_key)
        if found is not None:
            return found
        if self._cache.is_unresolved(full_key):
            return None

        ctx = VisitContext(namespace, key)
        found = self.find_value(self._locale, full_key, ctx)
        if found is not None:
            self._cache.put(full_key, found)
            return found

        # A cycle was already reported for this key.
        if not ctx.error:
            self.report(ErrorTemplate.unregistered_key(namespace, key))
        self._cache.mark_unresolved(full_key)
        return None

    def has_full_key(self, full_key: str) -> bool:
        """True if some registry stores full_key, without resolving borrows."""
        with self.reading():
            return any(
                registry.has_key(local_key)
                for registry, local_key in self._tree.candidates(full_key)
            )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    def clear_cache(self) -> None:
        """Drop cached resolutions and unresolved marks.

        Keys that had no value are searched (and reported) again on their
        next lookup.
        """
        self._cache.clear()
        logger.debug("Cache manually cleared")

    def get_cache_stats(self) -> dict[str, int | float]:
        """Get cache statistics.

        Returns:
            Dict with keys: size (int), maxsize (int), unresolved (int),
            hits (int), misses (int), hit_rate (float 0.0-100.0)

        Example:
            >>> resolver = Resolver(LocaleOptions("en"))
            >>> resolver.register("ui").set("ok", "OK", "en")
            True
            >>> resolver.get_value("ui", "ok")  # miss
            'OK'
            >>> resolver.get_value("ui", "ok")  # hit
            'OK'
            >>> stats = resolver.get_cache_stats()
            >>> stats["hits"], stats["misses"]
            (1, 1)
        """
        return self._cache.get_stats()

    def __repr__(self) -> str:
        return (
            f"Resolver(locale={self._locale!r}, "
            f"default_locale={self._default_locale!r}, "
            f"namespaces={len(self._tree)})"
        )
