"""
Notifications from the spin engine.

The controller and the commentary coordinator publish here; a display,
sound board or test subscribes to whatever it needs. Publishing never
fails because of a subscriber.
"""

import asyncio
import inspect
import logging
import time
from collections import defaultdict, deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Awaitable, Callable, Deque, Dict, List, Set

logger = logging.getLogger(__name__)


class EventType(Enum):
    """What happened."""
    # Spin lifecycle
    SPIN_STARTED = auto()
    SPIN_FINISHED = auto()
    WHEEL_TICK = auto()      # Slice boundary passed the pointer
    STATE_CHANGED = auto()

    INVENTORY_CHANGED = auto()

    # Commentary
    COMMENTARY_UPDATED = auto()
    AI_REQUEST_START = auto()
    AI_REQUEST_COMPLETE = auto()
    AI_REQUEST_ERROR = auto()

    TICK = auto()  # One display frame


@dataclass
class Event:
    """
    A published notification.

    Attributes:
        type: EventType, or a string for ad-hoc events
        data: Payload, keys depend on the type
        source: Publisher name
        timestamp: Wall-clock creation time
    """
    type: EventType | str
    data: Dict[str, Any] = field(default_factory=dict)
    source: str = "engine"
    timestamp: float = field(default_factory=time.time)


Handler = Callable[[Event], None] | Callable[[Event], Awaitable[None]]


class EventBus:
    """
    Publish/subscribe hub.

    Plain handlers run inline. Coroutine handlers are scheduled on the
    running loop by emit(), which holds each task until it finishes, and
    awaited by emit_async(). The last HISTORY_SIZE events are kept for
    inspection.
    """

    HISTORY_SIZE = 100

    def __init__(self) -> None:
        self._subscribers: Dict[EventType | str, List[Handler]] = defaultdict(list)
        self._wildcard: List[Handler] = []
        self._history: Deque[Event] = deque(maxlen=self.HISTORY_SIZE)
        self._tasks: Set[asyncio.Task] = set()

    def subscribe(self, event_type: EventType | str, handler: Handler) -> Callable[[], None]:
        """
        Call handler for every event of event_type.

        Returns:
            A function that removes the subscription
        """
        subscribers = self._subscribers[event_type]
        subscribers.append(handler)

        def unsubscribe() -> None:
            if handler in subscribers:
                subscribers.remove(handler)

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Call handler for every event; returns the unsubscribe function."""
        self._wildcard.append(handler)

        def unsubscribe() -> None:
            if handler in self._wildcard:
                self._wildcard.remove(handler)

        return unsubscribe

    def _handlers_for(self, event: Event) -> List[Handler]:
        return list(self._subscribers.get(event.type, ())) + list(self._wildcard)

    def emit(self, event: Event) -> None:
        """Publish without waiting for coroutine handlers."""
        self._history.append(event)

        for handler in self._handlers_for(event):
            if not inspect.iscoroutinefunction(handler):
                self._call(handler, event)
                continue
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug(f"{event.type}: no running loop for coroutine handler")
                continue
            task = loop.create_task(self._guarded(handler, event))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def emit_async(self, event: Event) -> None:
        """Publish and wait until every handler has finished."""
        self._history.append(event)

        pending = []
        for handler in self._handlers_for(event):
            if inspect.iscoroutinefunction(handler):
                pending.append(self._guarded(handler, event))
            else:
                self._call(handler, event)
        if pending:
            await asyncio.gather(*pending)

    @staticmethod
    def _call(handler: Handler, event: Event) -> None:
        try:
            handler(event)
        except Exception as e:
            logger.error(f"{event.type} handler failed: {e}")

    @staticmethod
    async def _guarded(handler: Handler, event: Event) -> None:
        try:
            await handler(event)
        except Exception as e:
            logger.error(f"{event.type} async handler failed: {e}")

    def get_history(self, event_type: EventType | str | None = None, limit: int = 10) -> List[Event]:
        """Most recent events, oldest first, optionally of one type."""
        events = [e for e in self._history if event_type is None or e.type == event_type]
        return events[-limit:]

    def clear_history(self) -> None:
        self._history.clear()


def spin_finished_event(token: int, participant: str, prize: Any, message: str) -> Event:
    """A winner was resolved and removed from the pool."""
    return Event(
        EventType.SPIN_FINISHED,
        data={"token": token, "participant": participant, "prize": prize, "message": message},
        source="controller",
    )


def commentary_event(token: int, text: str) -> Event:
    """Generated commentary replaced the instant message of spin token."""
    return Event(EventType.COMMENTARY_UPDATED, data={"token": token, "text": text}, source="commentary")


def tick_event(delta: float, frame: int) -> Event:
    """Display frame; delta in seconds since the previous one."""
    return Event(EventType.TICK, data={"delta": delta, "frame": frame}, source="runner")
