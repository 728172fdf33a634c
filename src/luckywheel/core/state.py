"""
Spin states and the allowed moves between them.

    IDLE      pool (re)built, nothing spun yet
    SPINNING  wheel animating toward its target angle
    FINISHED  winner resolved and removed, result on display

FINISHED goes straight back to SPINNING on the next spin; only a pool
rebuild returns to IDLE.
"""

from enum import Enum
from typing import Callable
import logging

logger = logging.getLogger(__name__)

StateListener = Callable[["SpinState", "SpinState"], None]


class SpinState(Enum):
    IDLE = "idle"
    SPINNING = "spinning"
    FINISHED = "finished"


class StateMachine:
    """
    Current spin state with validated transitions.

    Listeners get (old, new) after each change. A listener that raises is
    logged; the change stands.
    """

    VALID_TRANSITIONS: list[tuple[SpinState, SpinState]] = [
        (SpinState.IDLE, SpinState.SPINNING),
        (SpinState.SPINNING, SpinState.FINISHED),
        (SpinState.FINISHED, SpinState.SPINNING),
    ]

    def __init__(self, initial_state: SpinState = SpinState.IDLE) -> None:
        self._state = initial_state
        self._allowed = frozenset(self.VALID_TRANSITIONS)
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> SpinState:
        return self._state

    def can_transition(self, to_state: SpinState) -> bool:
        return (self._state, to_state) in self._allowed

    def transition(self, to_state: SpinState) -> bool:
        """
        Move to to_state.

        Returns:
            False (state unchanged) if the move is not allowed
        """
        if not self.can_transition(to_state):
            logger.warning(f"Rejected spin state change {self._state.value} -> {to_state.value}")
            return False
        self._change(to_state)
        return True

    def reset(self) -> None:
        """Return to IDLE from any state."""
        if self._state is not SpinState.IDLE:
            self._change(SpinState.IDLE)

    def add_listener(self, callback: StateListener) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _change(self, to_state: SpinState) -> None:
        old_state, self._state = self._state, to_state
        logger.info(f"Spin state: {old_state.value} -> {to_state.value}")
        for listener in list(self._listeners):
            try:
                listener(old_state, to_state)
            except Exception as e:
                logger.error(f"Spin state listener failed: {e}")
