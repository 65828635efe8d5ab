"""Namespace-scoped change notifications.

Two event kinds (see ChangeEvent):

- ``locale``: delivered to every locale listener, payload is the new locale
- ``key``: delivered per namespace scope, payload is the changed key
  relative to that scope; the ``None`` scope listens to all namespaces and
  receives full keys

Delivery is two-phase. ``collect_*`` snapshots the listeners that should
receive an event into a DeliveryBatch (dropping one-shot listeners at that
moment), and ``DeliveryBatch.deliver()`` calls them later. The resolver
collects while holding its write lock and delivers after releasing it, so
a listener registered after a mutation never receives that mutation's
events, and listeners are free to call back into the resolver.

Subscriptions are explicit tokens: on_key()/on_locale() return a
Subscription that off() removes, independent of listener identity
elsewhere.

Python 3.13+.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable, Hashable
from contextvars import ContextVar
from dataclasses import dataclass

from nsi18n.core.paths import join_key, split_key_by_namespace
from nsi18n.enums import ChangeEvent

__all__ = ["ChangeListener", "ChangeNotifier", "DeliveryBatch", "Subscription"]

logger = logging.getLogger(__name__)

type ChangeListener = Callable[[ChangeEvent, str], None]

# Batch whose deliver() is running in this thread or task.
_delivering: ContextVar[DeliveryBatch | None] = ContextVar("nsi18n_delivering", default=None)


@dataclass(frozen=True, slots=True, eq=False)
class Subscription:
    """Handle returned by ChangeNotifier.on_key()/on_locale().

    Attributes:
        event: Event kind the listener is subscribed to
        scope: Namespace scope for key events (None: all namespaces; always
            None for locale events)
        listener: The subscribed callable
    """

    event: ChangeEvent
    scope: str | None
    listener: ChangeListener


class _Channel:
    """Ordered listener set of one scope.

    A listener appears at most once. Re-subscribing an existing listener
    only updates its one-shot flag.
    """

    __slots__ = ("_listeners",)

    def __init__(self) -> None:
        # listener -> one-shot flag; dict keeps subscription order
        self._listeners: dict[ChangeListener, bool] = {}

    def add(self, listener: ChangeListener, once: bool) -> None:
        self._listeners[listener] = once

    def remove(self, listener: ChangeListener) -> bool:
        return self._listeners.pop(listener, None) is not None

    def snapshot(self) -> list[ChangeListener]:
        """Listeners to notify now; one-shot listeners are removed."""
        listeners = list(self._listeners)
        for listener in listeners:
            if self._listeners[listener]:
                del self._listeners[listener]
        return listeners

    def __len__(self) -> int:
        return len(self._listeners)


class DeliveryBatch:
    """Pending notifications of one change wave, delivered in collection order.

    A wave starts with one mutating call and includes every borrow
    propagation it triggers. Propagation joins the running batch (see
    current()) so its notifications queue behind the ones already pending,
    and announce() lets each (registry, key) pair be re-announced at most
    once per wave. Borrows that resolve through each other therefore stop
    after one round.

    A listener that raises is logged and skipped; the remaining deliveries
    still run.
    """

    __slots__ = ("_announced", "_pending")

    def __init__(self) -> None:
        self._pending: deque[tuple[ChangeListener, ChangeEvent, str]] = deque()
        self._announced: set[tuple[Hashable, str]] = set()

    @staticmethod
    def current() -> DeliveryBatch | None:
        """Batch being delivered in this thread or task, or None."""
        return _delivering.get()

    def add(self, listeners: list[ChangeListener], event: ChangeEvent, value: str) -> None:
        self._pending.extend((listener, event, value) for listener in listeners)

    def announce(self, owner: Hashable, key: str) -> bool:
        """Record a key change of owner; False if already announced in this wave."""
        marker = (owner, key)
        if marker in self._announced:
            return False
        self._announced.add(marker)
        return True

    def deliver(self) -> None:
        """Call every pending listener once and empty the batch.

        Notifications added while delivering are delivered by the same call.
        """
        token = _delivering.set(self)
        try:
            while self._pending:
                listener, event, value = self._pending.popleft()
                try:
                    listener(event, value)
                except Exception:
                    logger.exception(
                        "Change listener %r failed on %s event %r", listener, event, value
                    )
        finally:
            _delivering.reset(token)

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)


class ChangeNotifier:
    """Publish/subscribe hub for locale and key changes of one resolver root.

    Thread Safety:
        Subscription changes and snapshots are protected by an internal lock.
    """

    __slots__ = ("_key_channels", "_lock", "_locale_channel")

    def __init__(self) -> None:
        """Initialize with no listeners."""
        self._lock = threading.Lock()
        self._locale_channel = _Channel()
        self._key_channels: dict[str | None, _Channel] = {}

    def on_locale(self, listener: ChangeListener, *, once: bool = False) -> Subscription:
        """Subscribe listener to locale changes."""
        with self._lock:
            self._locale_channel.add(listener, once)
        return Subscription(ChangeEvent.LOCALE, None, listener)

    def on_key(
        self, scope: str | None, listener: ChangeListener, *, once: bool = False
    ) -> Subscription:
        """Subscribe listener to key changes under scope.

        Args:
            scope: Namespace whose keys to watch; None watches all namespaces
            listener: Called as listener(ChangeEvent.KEY, key)
            once: Remove the listener after its first delivery
        """
        with self._lock:
            channel = self._key_channels.get(scope)
            if channel is None:
                channel = self._key_channels[scope] = _Channel()
            channel.add(listener, once)
        return Subscription(ChangeEvent.KEY, scope, listener)

    def off(self, subscription: Subscription) -> bool:
        """Remove a subscription.

        Returns:
            True if the listener was subscribed, False otherwise.
        """
        if subscription.event is ChangeEvent.LOCALE:
            return self.off_locale(subscription.listener)
        return self.off_key(subscription.scope, subscription.listener)

    def off_locale(self, listener: ChangeListener) -> bool:
        """Unsubscribe listener from locale changes."""
        with self._lock:
            return self._locale_channel.remove(listener)

    def off_key(self, scope: str | None, listener: ChangeListener) -> bool:
        """Unsubscribe listener from key changes under scope."""
        with self._lock:
            channel = self._key_channels.get(scope)
            if channel is None or not channel.remove(listener):
                return False
            if not channel:
                del self._key_channels[scope]
            return True

    def collect_locale(self, locale: str, batch: DeliveryBatch) -> None:
        """Queue a locale change for every locale listener."""
        with self._lock:
            batch.add(self._locale_channel.snapshot(), ChangeEvent.LOCALE, locale)

    def collect_key(self, namespace: str | None, key: str, batch: DeliveryBatch) -> None:
        """Queue a key change for every affected scope.

        The all-namespaces scope receives the full key; each ancestor
        namespace of the full key receives the key relative to itself.
        """
        full_key = join_key(namespace, key)
        with self._lock:
            channel = self._key_channels.get(None)
            if channel is not None:
                batch.add(channel.snapshot(), ChangeEvent.KEY, full_key)
            for scope, local_key in split_key_by_namespace(full_key):
                channel = self._key_channels.get(scope)
                if channel is not None:
                    batch.add(channel.snapshot(), ChangeEvent.KEY, local_key)

    def listener_count(self, scope: str | None = None, *, event: ChangeEvent = ChangeEvent.KEY) -> int:
        """Number of listeners subscribed to event (under scope for key events)."""
        with self._lock:
            if event is ChangeEvent.LOCALE:
                return len(self._locale_channel)
            channel = self._key_channels.get(scope)
            return len(channel) if channel is not None else 0
