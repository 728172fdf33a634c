"""Spin controller - runs the wheel from spin request to winner.

The controller is the only writer of the prize pool and of the wheel
rotation. A frame driver calls update() once per display frame; the
rendering side only reads current_rotation, prizes and
inventory_snapshot().

Each spin gets a token. Animation completions and generated commentary
carry the token they were started for and are ignored once a newer spin
has begun.
"""

import logging
import random
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

from luckywheel.animation.rotation import (
    DEFAULT_DURATION_MS,
    EXTRA_ROTATION_SPREAD,
    MIN_EXTRA_ROTATIONS,
    RotationFrame,
    SpinAnimation,
    TickDetector,
    advance,
    pick_target_angle,
)
from luckywheel.audio.engine import get_audio_engine
from luckywheel.core.errors import EmptyPoolError, ValidationError
from luckywheel.core.events import Event, EventBus, EventType, spin_finished_event
from luckywheel.core.state import SpinState, StateMachine
from luckywheel.wheel.commentary import CommentaryCoordinator, SpinRecord
from luckywheel.wheel.inventory import Inventory, InventoryEntry, PrizeInstance, PrizeTemplate
from luckywheel.wheel.resolver import resolve_winner

logger = logging.getLogger(__name__)


def monotonic_ms() -> float:
    """Default frame clock in milliseconds."""
    return time.monotonic() * 1000.0


class SpinController:
    """Orchestrates one prize wheel.

    Lifecycle:
        1. request_spin(name) - validate, capture the name, start the animation
        2. update(now) - per frame: rotation, tick cues, completion
        3. completion - resolve winner, remove it, compose the message,
           optionally request generated commentary
    """

    def __init__(
        self,
        templates: Sequence[PrizeTemplate],
        audio: Any = None,
        commentary: Optional[CommentaryCoordinator] = None,
        event_bus: Optional[EventBus] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
        spin_duration_ms: float = DEFAULT_DURATION_MS,
        min_rotations: float = MIN_EXTRA_ROTATIONS,
        rotation_spread: float = EXTRA_ROTATION_SPREAD,
        ambience_track: Optional[Path] = None,
        ambience_duration: float = 8.0,
    ):
        self._audio = audio if audio is not None else get_audio_engine()
        self._event_bus = event_bus or EventBus()
        self._commentary = commentary or CommentaryCoordinator(event_bus=self._event_bus)
        self._rng = rng or random.Random()
        self._clock = clock or monotonic_ms

        self._spin_duration_ms = spin_duration_ms
        self._min_rotations = min_rotations
        self._rotation_spread = rotation_spread
        self._ambience_track = ambience_track
        self._ambience_duration = ambience_duration
        self._muted = False

        self._state = StateMachine()
        self._state.add_listener(self._on_state_changed)

        # Authoritative rotation, cumulative degrees, never decreases
        self._rotation: float = 0.0
        self._ticks = TickDetector()
        self._animation: Optional[SpinAnimation] = None
        self._spin_token: int = 0
        self._participant: str = ""

        self._templates: List[PrizeTemplate] = list(templates)
        self._generation: int = 0
        self._inventory = Inventory()
        self._build_inventory()

    # ===== READ-ONLY VIEW =====

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def current_state(self) -> SpinState:
        return self._state.state

    @property
    def current_rotation(self) -> float:
        """Wheel rotation in degrees for rendering."""
        return self._rotation

    @property
    def spin_token(self) -> int:
        """Token of the most recent spin (0 before the first)."""
        return self._spin_token

    @property
    def participant(self) -> str:
        """Name captured for the current or last spin."""
        return self._participant

    @property
    def slice_count(self) -> int:
        return len(self._inventory)

    @property
    def can_spin(self) -> bool:
        return self.current_state is not SpinState.SPINNING and not self._inventory.is_empty

    @property
    def prizes(self) -> Tuple[PrizeInstance, ...]:
        """Prize instances in slice order."""
        return tuple(self._inventory)

    @property
    def templates(self) -> List[PrizeTemplate]:
        return list(self._templates)

    @property
    def record(self) -> Optional[SpinRecord]:
        """Result of the last spin, None while spinning or after dismissal."""
        return self._commentary.record

    @property
    def commentary_text(self) -> str:
        return self._commentary.text

    @property
    def commentary_pending(self) -> bool:
        """True while generated commentary is being awaited."""
        return self._commentary.is_pending

    def inventory_snapshot(self) -> List[InventoryEntry]:
        """Remaining stock grouped by prize name."""
        return self._inventory.snapshot()

    # ===== NOTIFICATIONS =====

    def on_spin_finished(
        self, callback: Callable[[str, PrizeInstance, str], None]
    ) -> Callable[[], None]:
        """Call callback(participant, prize, message) after every spin."""
        def handler(event: Event) -> None:
            callback(event.data["participant"], event.data["prize"], event.data["message"])

        return self._event_bus.subscribe(EventType.SPIN_FINISHED, handler)

    def on_commentary_updated(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Call callback(text) when generated commentary replaces the message."""
        def handler(event: Event) -> None:
            callback(event.data["text"])

        return self._event_bus.subscribe(EventType.COMMENTARY_UPDATED, handler)

    # ===== SPIN =====

    def request_spin(self, participant_name: str, now: Optional[float] = None) -> bool:
        """Start a spin for participant_name.

        Args:
            participant_name: Who is spinning; surrounding whitespace ignored
            now: Frame clock timestamp in ms (controller clock if None)

        Returns:
            True if a spin started, False if one is already running

        Raises:
            ValidationError: Blank name or empty prize pool
        """
        if self.current_state is SpinState.SPINNING:
            logger.debug("Spin requested while spinning, ignored")
            return False

        name = (participant_name or "").strip()
        if not name:
            raise ValidationError("Participant name is required")
        if self._inventory.is_empty:
            raise ValidationError("No prizes left on the wheel")

        self._spin_token += 1
        self._participant = name
        self._commentary.discard()

        start_time = self._clock() if now is None else now
        target = pick_target_angle(
            self._rotation,
            self._rng,
            min_rotations=self._min_rotations,
            rotation_spread=self._rotation_spread,
        )
        self._animation = SpinAnimation(
            token=self._spin_token,
            start_angle=self._rotation,
            target_angle=target,
            start_time=start_time,
            duration_ms=self._spin_duration_ms,
        )
        self._ticks.slice_count = len(self._inventory)

        if not self._muted:
            self._call_audio("start_ambience", self._ambience_track, self._ambience_duration)

        self._state.transition(SpinState.SPINNING)
        logger.info(
            f"Spin {self._spin_token} started for {name}: "
            f"{self._rotation:.1f} -> {target:.1f} over {len(self._inventory)} slices"
        )
        self._event_bus.emit(Event(
            EventType.SPIN_STARTED,
            data={
                "token": self._spin_token,
                "participant": name,
                "start_angle": self._rotation,
                "target_angle": target,
                "slice_count": len(self._inventory),
            },
            source="controller",
        ))
        return True

    def update(self, now: Optional[float] = None) -> Optional[RotationFrame]:
        """Advance the running spin to frame timestamp now (ms).

        Returns:
            The computed frame, or None when no spin is running
        """
        animation = self._animation
        if animation is None or self.current_state is not SpinState.SPINNING:
            return None

        frame = advance(animation, self._ticks, self._clock() if now is None else now)
        self._rotation = max(self._rotation, frame.angle)

        if frame.ticked:
            self._call_audio("play_tick")
            self._event_bus.emit(Event(
                EventType.WHEEL_TICK,
                data={"token": animation.token, "angle": frame.angle},
                source="controller",
            ))

        if frame.done:
            self.complete_spin(animation.token, frame.angle)

        return frame

    def complete_spin(self, token: int, final_angle: float) -> Optional[SpinRecord]:
        """Finish spin token at final_angle.

        Completions for a superseded or already finished spin are ignored.

        Returns:
            The new spin record, or None if the completion was ignored
        """
        if token != self._spin_token or self.current_state is not SpinState.SPINNING:
            logger.debug(f"Ignoring completion of stale spin {token}")
            return None

        self._animation = None
        self._rotation = max(self._rotation, final_angle)

        self._call_audio("stop_ambience")
        self._call_audio("play_win_cue")

        index = resolve_winner(final_angle, len(self._inventory))
        prize = self._inventory[index]
        self._inventory.remove(prize.id)

        message = self._commentary.compose(self._participant, prize.name)
        record = SpinRecord(
            token=token,
            participant=self._participant,
            prize=prize,
            message=message,
        )
        self._commentary.begin(record)

        self._state.transition(SpinState.FINISHED)
        logger.info(
            f"Spin {token} finished: {self._participant} won {prize.name} "
            f"(slice {index}, {len(self._inventory)} left)"
        )

        self._event_bus.emit(spin_finished_event(token, self._participant, prize, message))
        self._emit_inventory_changed()

        self._commentary.request_enrichment(record, self._inventory.names())
        return record

    def dismiss_result(self) -> None:
        """Close the result; its pending commentary is dropped."""
        self._commentary.discard()

    # ===== CONFIGURATION =====

    def update_templates(self, templates: Sequence[PrizeTemplate]) -> None:
        """Replace the templates used by the next rebuild()."""
        self._templates = list(templates)
        logger.info(f"Prize templates updated: {len(self._templates)} templates")

    def rebuild(self) -> None:
        """Rebuild the pool from the current templates.

        Raises:
            ValidationError: If a spin is running
        """
        if self.current_state is SpinState.SPINNING:
            raise ValidationError("Cannot rebuild prizes while the wheel is spinning")

        self._commentary.discard()
        self._build_inventory()
        self._state.reset()

    def set_message_template(self, template: str) -> None:
        """Template for the next instant message ({name} and {prize} placeholders)."""
        self._commentary.template = template

    def set_enrichment_enabled(self, enabled: bool) -> None:
        self._commentary.enabled = enabled

    def set_volumes(self, music: float, effects: float) -> None:
        self._call_audio("set_volumes", music, effects)

    def set_muted(self, muted: bool) -> None:
        self._muted = muted
        self._call_audio("set_muted", muted)
        if muted and self.current_state is SpinState.SPINNING:
            self._call_audio("stop_ambience")

    # ===== INTERNALS =====

    def _build_inventory(self) -> None:
        self._generation += 1
        try:
            self._inventory = Inventory.from_templates(self._templates, self._rng, self._generation)
        except EmptyPoolError:
            logger.warning("Prize templates are empty, spinning is disabled")
            self._inventory = Inventory()
        self._emit_inventory_changed()

    def _emit_inventory_changed(self) -> None:
        self._event_bus.emit(Event(
            EventType.INVENTORY_CHANGED,
            data={"slice_count": len(self._inventory)},
            source="controller",
        ))

    def _on_state_changed(self, old_state: SpinState, new_state: SpinState) -> None:
        self._event_bus.emit(Event(
            EventType.STATE_CHANGED,
            data={"from": old_state.value, "to": new_state.value},
            source="controller",
        ))

    def _call_audio(self, method: str, *args: Any) -> None:
        """Fire an audio cue; the wheel never depends on its success."""
        try:
            getattr(self._audio, method)(*args)
        except Exception as e:
            logger.error(f"Audio {method} failed: {e}")
