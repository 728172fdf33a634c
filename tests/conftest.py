import random

import pytest

from luckywheel.core.events import EventBus
from luckywheel.wheel.commentary import CommentaryCoordinator
from luckywheel.wheel.controller import SpinController
from luckywheel.wheel.inventory import PrizeTemplate


class FakeAudio:
    """Records every cue instead of playing it."""

    def __init__(self):
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, args))

    def start_ambience(self, track=None, duration_hint=8.0):
        self._record("start_ambience", track, duration_hint)

    def stop_ambience(self):
        self._record("stop_ambience")

    def play_tick(self):
        self._record("play_tick")

    def play_win_cue(self):
        self._record("play_win_cue")

    def set_volumes(self, music, effects):
        self._record("set_volumes", music, effects)

    def set_muted(self, muted):
        self._record("set_muted", muted)

    def names(self):
        return [name for name, _ in self.calls]


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms
        return self.now


class FixedRandom(random.Random):
    """random() always returns value; shuffle keeps the input order."""

    def __init__(self, value=0.1):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value

    def shuffle(self, x):
        pass


@pytest.fixture
def audio():
    return FakeAudio()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rng():
    # 0.1 stops the wheel at 4536 degrees: slice 0 of three under the pointer
    return FixedRandom(0.1)


@pytest.fixture
def templates():
    return [PrizeTemplate(name="A", count=2), PrizeTemplate(name="B", count=1)]


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def make_controller(templates, audio, clock, rng, event_bus):
    def _make(generator=None, template="Hi {name}, you won {prize}!", prizes=None, timeout=60.0):
        commentary = CommentaryCoordinator(
            template=template,
            generator=generator,
            event_bus=event_bus,
            timeout=timeout,
        )
        return SpinController(
            templates if prizes is None else prizes,
            audio=audio,
            commentary=commentary,
            event_bus=event_bus,
            rng=rng,
            clock=clock,
        )

    return _make


@pytest.fixture
def controller(make_controller):
    return make_controller()
