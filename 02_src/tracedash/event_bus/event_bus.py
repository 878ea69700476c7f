"""EventBus implementation for named-channel pub/sub."""

from typing import Any, Callable, Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)


Listener = Callable[..., Any]


class Subscription:
    """Handle for one listener registration."""

    def __init__(self, bus: "EventBus", channel: str, listener: Listener):
        self._bus = bus
        self.channel = channel
        self.listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        """Remove this registration. Calling it again is a no-op."""
        if not self.active:
            return
        self.active = False
        self._bus._remove(self)


class IEventBus(Protocol):
    """Synchronous pub/sub keyed by channel name."""

    def subscribe(self, channel: str, listener: Listener) -> Subscription:
        """Append a listener to a channel."""
        ...

    def publish(self, channel: str, *payload: Any) -> None:
        """Call every listener of a channel, in registration order."""
        ...


class EventBus:
    """In-memory pub/sub event bus."""

    def __init__(self):
        self._subscribers: dict[str, list[Subscription]] = {}

    def subscribe(self, channel: str, listener: Listener) -> Subscription:
        """Append a listener to a channel and return its handle."""
        subscription = Subscription(self, channel, listener)
        self._subscribers.setdefault(channel, []).append(subscription)
        return subscription

    def publish(self, channel: str, *payload: Any) -> None:
        """Call every listener of a channel synchronously, in registration order."""
        subscriptions = self._subscribers.get(channel)
        if not subscriptions:
            return

        # Snapshot so listeners may unsubscribe while being called
        for subscription in list(subscriptions):
            if not subscription.active:
                continue
            try:
                subscription.listener(*payload)
            except Exception:
                logger.exception(
                    "Error in listener %r", subscription.listener, extra={"channel": channel}
                )

    def subscriber_count(self, channel: str) -> int:
        """Number of listeners registered on a channel."""
        return len(self._subscribers.get(channel, []))

    def _remove(self, subscription: Subscription) -> None:
        subscriptions = self._subscribers.get(subscription.channel, [])
        # Identity match: the same listener may be registered more than once
        for i, candidate in enumerate(subscriptions):
            if candidate is subscription:
                del subscriptions[i]
                break
        if not subscriptions:
            self._subscribers.pop(subscription.channel, None)
