"""Core framework components for LuckyWheel."""

from .errors import LuckyWheelError, ValidationError, EmptyPoolError, EnrichmentFailure
from .events import EventBus, Event, EventType
from .state import SpinState, StateMachine

__all__ = [
    "LuckyWheelError",
    "ValidationError",
    "EmptyPoolError",
    "EnrichmentFailure",
    "EventBus",
    "Event",
    "EventType",
    "SpinState",
    "StateMachine",
]
