"""
Frame driver for the spin controller.

Calls SpinController.update() once per frame on the asyncio loop, so
generated commentary tasks run between frames on the same loop.
"""

import asyncio
import logging
from typing import Callable, Optional

from luckywheel.core.events import EventBus, tick_event
from luckywheel.core.state import SpinState
from luckywheel.wheel.controller import SpinController, monotonic_ms

logger = logging.getLogger(__name__)


class FrameDriver:
    """Fixed-rate frame loop.

    Each frame emits a TICK event, advances the controller and yields to
    the event loop for the rest of the frame interval.
    """

    def __init__(
        self,
        controller: SpinController,
        fps: int = 60,
        clock: Optional[Callable[[], float]] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.controller = controller
        self.fps = max(1, fps)
        self._clock = clock or monotonic_ms
        self._event_bus = event_bus or controller.event_bus
        self._running = False
        self._frame_count = 0
        self._last_frame: Optional[float] = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def is_running(self) -> bool:
        return self._running

    def step(self) -> None:
        """Run a single frame."""
        now = self._clock()
        delta = 0.0 if self._last_frame is None else (now - self._last_frame) / 1000.0
        self._last_frame = now

        self._event_bus.emit(tick_event(delta, self._frame_count))
        self.controller.update(now)
        self._frame_count += 1

    async def run(self) -> None:
        """Run frames until stop() is called."""
        self._running = True
        logger.info(f"Frame driver started at {self.fps} fps")

        while self._running:
            self.step()
            await asyncio.sleep(1.0 / self.fps)

        logger.info(f"Frame driver stopped after {self._frame_count} frames")

    async def run_until_finished(self) -> None:
        """Run frames while the wheel is spinning."""
        self._running = True
        while self._running and self.controller.current_state is SpinState.SPINNING:
            self.step()
            await asyncio.sleep(1.0 / self.fps)
        self._running = False

    def stop(self) -> None:
        """Stop the frame loop after the current frame."""
        self._running = False
