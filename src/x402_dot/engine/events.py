"""
Event-driven observability with typed events.

Events carry their own data. Components publish them while they work;
hooks and subscribers observe without influencing control flow.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Dict, Callable, Optional, Awaitable, AsyncGenerator

from pydantic import BaseModel, ConfigDict

from ..networks.profiles import Endpoint
from ..schemas.https import PaymentRequirement

logger = logging.getLogger(__name__)


# ==================== Base Event ====================

class BaseEvent(ABC):
    """Base class for all events in the system."""

    @abstractmethod
    def __repr__(self) -> str:
        """String representation of the event."""
        pass


# ==================== Resolver Events ====================

class EndpointProbedEvent(BaseModel, BaseEvent):
    """A single health probe finished."""
    network_id: str
    endpoint: Endpoint
    position: int
    healthy: bool

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def __repr__(self) -> str:
        status = "up" if self.healthy else "down"
        return f"EndpointProbedEvent({self.endpoint.display_name}={status})"


class EndpointSelectedEvent(BaseModel, BaseEvent):
    """Resolver picked the live endpoint for a network."""
    network_id: str
    endpoint: Endpoint

    def __repr__(self) -> str:
        return f"EndpointSelectedEvent(endpoint={self.endpoint.display_name})"


# ==================== Negotiation Events ====================

class StateChangedEvent(BaseModel, BaseEvent):
    """Negotiator moved between states."""
    previous: str
    current: str
    requirement: Optional[PaymentRequirement] = None

    def __repr__(self) -> str:
        return f"StateChangedEvent({self.previous} -> {self.current})"


# ==================== Event Bus ====================

EventHandlerFunc = Callable[[BaseEvent], Awaitable[Optional[BaseEvent]]]
EventHookFunc = Callable[[BaseEvent], Awaitable[None]]


class EventBus:
    """Event dispatcher for publishing and subscribing to events."""

    def __init__(self) -> None:
        """Initialize with empty subscribers and hooks."""
        self._subscribers: Dict[type, list[EventHandlerFunc]] = {}
        self._hooks: Dict[type, list[EventHookFunc]] = {}

    def subscribe(self, event_class: type[BaseEvent], handler: EventHandlerFunc) -> None:
        """
        Register an async handler for the given event class.
        Multiple handlers can be subscribed to the same event type and run in parallel.

        Args:
            event_class: The event class to subscribe to.
            handler: The async handler function to call when the event is published.

        Raises:
            TypeError: If handler is not a coroutine function.
        """
        if not inspect.iscoroutinefunction(handler):
            raise TypeError(f"Handler must be a coroutine function, got {type(handler).__name__}")

        self._subscribers.setdefault(event_class, []).append(handler)

    def hook(self, event_class: type[BaseEvent], hook_func: EventHookFunc) -> None:
        """
        Register a hook for the given event class.
        Hooks are executed before subscribers when the event is dispatched.

        Args:
            event_class: The event class to hook into.
            hook_func: The hook function to call when the event is published.
        """
        if not inspect.iscoroutinefunction(hook_func):
            raise TypeError(f"Handler must be a coroutine function, got {type(hook_func).__name__}")

        self._hooks.setdefault(event_class, []).append(hook_func)

    async def dispatch(self, event: BaseEvent) -> AsyncGenerator[Optional[BaseEvent], None]:
        """
        Dispatch an event to all registered hooks and subscribers.
        Hooks run first, then all subscribers run in parallel.

        Args:
            event: The event to dispatch.

        Yields:
            Results from all subscribers as they complete. Yields nothing if no subscribers are registered.
        """
        hooks = self._hooks.get(type(event), [])
        await asyncio.gather(*(hook(event) for hook in hooks))

        handlers = self._subscribers.get(type(event), [])
        if not handlers:
            return

        tasks = [handler(event) for handler in handlers]
        for coro in asyncio.as_completed(tasks):
            yield await coro

    async def publish(self, event: BaseEvent) -> None:
        """
        Notify hooks, then subscribers, and discard their results.

        Observers never alter the publisher's control flow: an exception
        raised by a hook or subscriber is logged and contained.
        """
        hooks = self._hooks.get(type(event), [])
        results = await asyncio.gather(*(hook(event) for hook in hooks), return_exceptions=True)

        handlers = self._subscribers.get(type(event), [])
        results += await asyncio.gather(*(handler(event) for handler in handlers), return_exceptions=True)

        for result in results:
            if isinstance(result, Exception):
                logger.error("Observer of %r failed", event, exc_info=result)
