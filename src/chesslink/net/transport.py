"""Publish/subscribe transport interface and an in-process broker.

The production transport (a STOMP client over a websocket) lives outside
this package; sessions only depend on :class:`ITransport`.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator, Mapping
from typing import Any

_LOGGER = logging.getLogger(__name__)

MessageHandler = Callable[[str], None]  # raw message body
ConnectionListener = Callable[[bool], None]


# ── Abstract interfaces ─────────────────────────────────────────────────────


class ISubscription(ABC):
    """Handle for one active topic subscription."""

    @property
    @abstractmethod
    def topic(self) -> str: ...

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """False once unsubscribed or dropped with the connection."""

    @abstractmethod
    def unsubscribe(self) -> None:
        """Stop delivery. Calling it twice is a no-op."""


class ITransport(ABC):
    """Connect/publish/subscribe capability shared by all components.

    Implementations must never raise from :meth:`publish` or
    :meth:`subscribe` when disconnected; they report failure instead.
    """

    @property
    @abstractmethod
    def is_connected(self) -> bool: ...

    @abstractmethod
    def publish(self, destination: str, body: Mapping[str, Any]) -> bool:
        """Send a JSON body. Returns False if it could not be sent."""

    @abstractmethod
    def subscribe(
        self, topic: str, handler: MessageHandler
    ) -> ISubscription | None:
        """Deliver raw bodies on *topic* to *handler*. None on failure."""


# ── Subscription bookkeeping ─────────────────────────────────────────────────


class SubscriptionSet:
    """Owned group of subscriptions released together."""

    __slots__ = ("_subscriptions",)

    def __init__(self) -> None:
        self._subscriptions: list[ISubscription] = []

    def add(self, subscription: ISubscription) -> None:
        self._subscriptions.append(subscription)

    def release_all(self) -> int:
        """Unsubscribe every handle and forget it. Returns the count released."""
        subscriptions, self._subscriptions = self._subscriptions, []
        for subscription in subscriptions:
            try:
                subscription.unsubscribe()
            except Exception:
                _LOGGER.exception("Failed to unsubscribe from %s", subscription.topic)
        return len(subscriptions)

    @property
    def is_live(self) -> bool:
        """True when the set is non-empty and every handle still delivers."""
        return bool(self._subscriptions) and all(
            s.is_active for s in self._subscriptions
        )

    @property
    def topics(self) -> list[str]:
        return [s.topic for s in self._subscriptions]

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __iter__(self) -> Iterator[ISubscription]:
        return iter(list(self._subscriptions))


# ── In-process broker ────────────────────────────────────────────────────────


class _MemorySubscription(ISubscription):
    __slots__ = ("_broker", "_topic", "_handler", "_active")

    def __init__(
        self, broker: MemoryTransport, topic: str, handler: MessageHandler
    ) -> None:
        self._broker = broker
        self._topic = topic
        self._handler = handler
        self._active = True

    @property
    def topic(self) -> str:
        return self._topic

    @property
    def is_active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._broker._remove(self)

    def _deliver(self, body: str) -> None:
        if self._active:
            self._handler(body)


class MemoryTransport(ITransport):
    """Synchronous in-process broker.

    Published bodies are recorded in :attr:`published` and also delivered to
    local subscribers of the same destination, so a loopback "server" can
    listen on ``/app/...`` destinations. :meth:`deliver` injects inbound
    messages as if they came from the remote broker.
    """

    __slots__ = ("_connected", "_subscriptions", "published", "on_connection_changed")

    def __init__(self, *, connected: bool = True) -> None:
        self._connected = connected
        self._subscriptions: dict[str, list[_MemorySubscription]] = {}
        self.published: list[tuple[str, dict[str, Any]]] = []
        self.on_connection_changed: list[ConnectionListener] = []

    # ── Connection ───────────────────────────────────────────────────────

    @property
    def is_connected(self) -> bool:
        return self._connected

    def connect(self) -> None:
        if self._connected:
            return
        self._connected = True
        self._emit_connection(True)

    def disconnect(self) -> None:
        """Drop the connection; server-side subscriptions are lost with it."""
        if not self._connected:
            return
        self._connected = False
        for subs in list(self._subscriptions.values()):
            for sub in list(subs):
                sub.unsubscribe()
        self._emit_connection(False)

    # ── ITransport impl ──────────────────────────────────────────────────

    def publish(self, destination: str, body: Mapping[str, Any]) -> bool:
        if not self._connected:
            _LOGGER.error("Cannot publish to %s: transport disconnected", destination)
            return False
        payload = dict(body)
        self.published.append((destination, payload))
        self.deliver(destination, payload)
        return True

    def subscribe(
        self, topic: str, handler: MessageHandler
    ) -> ISubscription | None:
        if not self._connected:
            _LOGGER.error("Cannot subscribe to %s: transport disconnected", topic)
            return None
        sub = _MemorySubscription(self, topic, handler)
        self._subscriptions.setdefault(topic, []).append(sub)
        return sub

    # ── Extra helpers ────────────────────────────────────────────────────

    def deliver(self, topic: str, body: str | Mapping[str, Any]) -> int:
        """Hand *body* to every subscriber of *topic*. Returns the count."""
        if not self._connected:
            return 0
        text = body if isinstance(body, str) else json.dumps(dict(body))
        subs = list(self._subscriptions.get(topic, ()))
        for sub in subs:
            sub._deliver(text)
        return len(subs)

    def subscriber_count(self, topic: str | None = None) -> int:
        if topic is not None:
            return len(self._subscriptions.get(topic, ()))
        return sum(len(subs) for subs in self._subscriptions.values())

    def published_to(self, destination: str) -> list[dict[str, Any]]:
        return [body for dest, body in self.published if dest == destination]

    # ── Internal ─────────────────────────────────────────────────────────

    def _remove(self, sub: _MemorySubscription) -> None:
        subs = self._subscriptions.get(sub.topic)
        if not subs:
            return
        if sub in subs:
            subs.remove(sub)
        if not subs:
            del self._subscriptions[sub.topic]

    def _emit_connection(self, connected: bool) -> None:
        for cb in list(self.on_connection_changed):
            cb(connected)
