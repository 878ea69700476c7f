"""EventBus module."""

from .event_bus import EventBus, IEventBus, Listener, Subscription

__all__ = ["EventBus", "IEventBus", "Listener", "Subscription"]
