"""Registry: the key table of one namespace.

Each local key maps to one entry:

- DirectEntry: values stored per locale
- BorrowEntry: an alias of another full key anywhere in the tree

Borrowing:
    ``ns2.use("x", "ns1.var")`` makes ``ns2.x`` resolve through ``ns1.var``.
    The registry subscribes a BorrowLink to key changes of the target's
    top-level namespace (``ns1``, suffix ``var``). When the target changes,
    the link invalidates the cached ``ns2.x`` and re-announces it as a key
    change of ``ns2``, so borrow chains propagate transitively. Propagation
    joins the delivery batch of the originating change, which announces
    each key at most once.

Mutations run inside Resolver.mutation(): under the write lock when the
resolver is thread-safe, with change notifications delivered after release.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nsi18n.core.paths import is_valid_path, join_key, split_key_into_parts, split_top_level
from nsi18n.diagnostics import ErrorTemplate
from nsi18n.enums import ChangeEvent, EntryKind
from nsi18n.runtime.context import Found, VisitContext
from nsi18n.runtime.events import DeliveryBatch
from nsi18n.runtime.namespace import NamespaceBase
from nsi18n.runtime.values import StoredValue, TemplateValue, to_value

if TYPE_CHECKING:
    from nsi18n.runtime.events import Subscription
    from nsi18n.runtime.resolver import Resolver

__all__ = ["BorrowEntry", "BorrowLink", "DirectEntry", "Registry"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DirectEntry:
    """Per-locale values of one key, in insertion order."""

    values: dict[str, StoredValue] = field(default_factory=dict)

    kind = EntryKind.DIRECT


@dataclass(frozen=True, slots=True, eq=False)
class BorrowLink:
    """Key listener keeping a borrowing key in sync with its target.

    Subscribed on the target's top-level namespace; only fires for the
    target's suffix within it.

    Attributes:
        registry: Registry owning the borrowing key
        key: Borrowing key, local to registry
        suffix: Target key relative to its top-level namespace
    """

    registry: Registry
    key: str
    suffix: str

    def __call__(self, _event: ChangeEvent, key: str) -> None:
        if key == self.suffix:
            self.registry._target_changed(self)


@dataclass(frozen=True, slots=True)
class BorrowEntry:
    """Alias of another full key.

    Attributes:
        target: External full key the entry resolves through
        link: Listener propagating target changes
        subscription: Token of the link's subscription
    """

    target: str
    link: BorrowLink
    subscription: Subscription

    kind = EntryKind.BORROW


type KeyEntry = DirectEntry | BorrowEntry


class Registry(NamespaceBase):
    """Key table of one registered namespace.

    Created by Resolver.register(); never instantiate directly in
    application code. Subclasses may be injected with the resolver's
    registry_factory.

    Example:
        >>> from nsi18n import create_i18n
        >>> root = create_i18n("en")
        >>> common = root.register("common")
        >>> common.set("ok", "OK", "en")
        True
        >>> dialog = root.register("dialog")
        >>> dialog.use("confirm", "common.ok")
        True
        >>> root.t("dialog.confirm")
        'OK'
    """

    __slots__ = ("_entries",)

    def __init__(self, resolver: Resolver, namespace: str) -> None:
        super().__init__(resolver, namespace)
        self._entries: dict[str, KeyEntry] = {}

    @property
    def namespace(self) -> str:
        """Full namespace path of this registry."""
        return self._namespace  # type: ignore[return-value]

    def has_key(self, key: str) -> bool:
        """True if key is stored here (direct or borrowed)."""
        return key in self._entries

    def keys(self) -> Iterator[str]:
        """Local keys in insertion order."""
        return iter(list(self._entries))

    def entry_kind(self, key: str) -> EntryKind | None:
        """Storage kind of key, or None if absent."""
        entry = self._entries.get(key)
        return entry.kind if entry is not None else None

    def borrow_target(self, key: str) -> str | None:
        """External full key that key borrows, or None."""
        entry = self._entries.get(key)
        return entry.target if isinstance(entry, BorrowEntry) else None

    def intersecting_key(self, local_key: str) -> str | None:
        """First stored key whose cumulative segments contain local_key.

        A namespace registered at ``<this namespace>.<local_key>`` would
        collide with the returned key.
        """
        for key in self._entries:
            if local_key in split_key_into_parts(key):
                return key
        return None

    def resolve_local(self, locale: str, key: str, ctx: VisitContext) -> Found | None:
        """Resolve key within this registry.

        Direct values are chosen in the order: locale, default locale, first
        stored value. A falsy value counts as absent and does not fall back.
        Borrowed keys continue the search at their target, sharing ctx.
        """
        entry = self._entries.get(key)
        if isinstance(entry, DirectEntry):
            values = entry.values
            value = values.get(locale)
            if value is None and locale != self._resolver.default_locale:
                value = values.get(self._resolver.default_locale)
            if value is None:
                value = next(iter(values.values()), None)
            return Found(value, self) if value else None
        if isinstance(entry, BorrowEntry):
            return self._resolver.find_value(locale, entry.target, ctx)
        return None

    def set(self, key: str, value: object, locale: str) -> bool:
        """Add or replace the value of key for locale.

        Replaces a borrow of key. Accepts str, TemplateValue, StrTemplate,
        or a token sequence.

        Returns:
            True on success; False after reporting the error.
        """
        with self._resolver.mutation() as batch:
            stored = to_value(value)
            if stored is None:
                self._resolver.report(
                    ErrorTemplate.invalid_value_type(self.namespace, key, type(value).__name__)
                )
                return False
            return self._set_value(key, stored, locale, batch)

    def set_template(self, key: str, template: str, locale: str) -> bool:
        """Add or replace key with a ``{name}`` template for locale."""
        with self._resolver.mutation() as batch:
            return self._set_value(key, TemplateValue.from_template(template), locale, batch)

    def use(self, key: str, external_full_key: str) -> bool:
        """Borrow external_full_key as key.

        Replaces every value previously set for key. The target does not
        need to exist yet. The borrow is refused if it would close a cycle.

        Returns:
            True on success or if key already borrows external_full_key;
            False after reporting the error.
        """
        with self._resolver.mutation() as batch:
            return self._use(key, external_full_key, batch)

    def _set_value(
        self, key: str, value: StoredValue, locale: str, batch: DeliveryBatch
    ) -> bool:
        resolver = self._resolver
        if not is_valid_path(key):
            resolver.report(ErrorTemplate.invalid_key_syntax(self.namespace, key))
            return False
        if not resolver.check_full_key(self.namespace, key):
            return False

        entry = self._entries.get(key)
        if isinstance(entry, DirectEntry):
            entry.values[locale] = value
        else:
            if isinstance(entry, BorrowEntry):
                resolver.notifier.off(entry.subscription)
            self._entries[key] = DirectEntry({locale: value})

        logger.debug("Set %s for locale %s", join_key(self.namespace, key), locale)
        resolver.key_changed(self, key, batch)
        return True

    def _use(self, key: str, external_full_key: str, batch: DeliveryBatch) -> bool:
        resolver = self._resolver
        entry = self._entries.get(key)
        if isinstance(entry, BorrowEntry) and entry.target == external_full_key:
            return True

        if not is_valid_path(key):
            resolver.report(ErrorTemplate.invalid_key_syntax(self.namespace, key))
            return False
        if not is_valid_path(external_full_key):
            resolver.report(ErrorTemplate.invalid_key_syntax(None, external_full_key))
            return False
        # Keys never live at the top level: the target has a namespace part.
        split = split_top_level(external_full_key)
        if split is None:
            resolver.report(ErrorTemplate.invalid_key_syntax(None, external_full_key))
            return False
        if join_key(self.namespace, key) == external_full_key:
            resolver.report(
                ErrorTemplate.circular_dependency(None, external_full_key, self.namespace, key)
            )
            return False

        # Walk the target with this key already marked: reaching it again
        # means the borrow would close a cycle. The search reports it.
        ctx = VisitContext.seeded(self, key)
        resolver.find_value(resolver.locale, external_full_key, ctx)
        if ctx.error:
            return False

        if not resolver.check_full_key(None, external_full_key):
            return False
        if not resolver.check_full_key(self.namespace, key):
            return False

        scope, suffix = split
        link = BorrowLink(self, key, suffix)
        if isinstance(entry, BorrowEntry):
            resolver.notifier.off(entry.subscription)
        subscription = resolver.notifier.on_key(scope, link)
        self._entries[key] = BorrowEntry(external_full_key, link, subscription)

        logger.debug("Linked %s -> %s", join_key(self.namespace, key), external_full_key)
        resolver.key_changed(self, key, batch)
        return True

    def _target_changed(self, link: BorrowLink) -> None:
        """Propagate a change of a borrowed target to the borrowing key.

        Runs inside the delivery of the change wave that touched the target
        and queues into it; a key already announced in the wave is skipped.
        """
        with self._resolver.mutation(DeliveryBatch.current()) as batch:
            entry = self._entries.get(link.key)
            # The key may have been re-set or re-linked since the event was queued.
            if not isinstance(entry, BorrowEntry) or entry.link is not link:
                return
            if self._resolver.key_changed(self, link.key, batch):
                logger.debug(
                    "Target %s of %s changed", entry.target, join_key(self.namespace, link.key)
                )
