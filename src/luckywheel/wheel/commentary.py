"""Congratulation messages for spin winners.

The instant message is the operator template with placeholders filled in
and is available the moment the wheel stops. An optional generator can
later supply a livelier text; it replaces the instant message only while
the spin it was requested for is still the current one.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence

from luckywheel.core.errors import EnrichmentFailure
from luckywheel.core.events import Event, EventBus, EventType, commentary_event
from luckywheel.wheel.inventory import PrizeInstance

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = (
    "Xin chúc mừng {name} đã cực kỳ may mắn nhận được {prize}! "
    "Chúc bạn một ngày tuyệt vời!"
)

_PLACEHOLDER = re.compile(r"\{(name|prize)\}")

# generate(prize_name, remaining_prize_names, participant_name) -> text
CommentaryGenerator = Callable[[str, List[str], str], Awaitable[str]]


def render_message(template: str, name: str, prize: str) -> str:
    """Fill every {name} and {prize} placeholder in template.

    Substitution is a single pass, so placeholder-like text inside the
    name or prize is left as is.
    """
    values = {"name": name, "prize": prize}
    return _PLACEHOLDER.sub(lambda m: values[m.group(1)], template)


class EnrichmentStatus(Enum):
    """Progress of the generated message for a spin."""

    PENDING = "pending"
    RESOLVED = "resolved"
    DISCARDED = "discarded"


@dataclass
class SpinRecord:
    """Outcome of one completed spin.

    Attributes:
        token: Spin token the record belongs to
        participant: Name captured when the spin started
        prize: The instance that was won
        message: Text currently shown for this spin
        enrichment: Generated message status, None if never requested
    """

    token: int
    participant: str
    prize: PrizeInstance
    message: str
    enrichment: Optional[EnrichmentStatus] = None


class CommentaryCoordinator:
    """Owns the displayed message and reconciles late generator results."""

    def __init__(
        self,
        template: str = DEFAULT_TEMPLATE,
        generator: Optional[CommentaryGenerator] = None,
        enabled: bool = True,
        event_bus: Optional[EventBus] = None,
        timeout: float = 60.0,
    ) -> None:
        self._template = template
        self._generator = generator
        self._enabled = enabled
        self._event_bus = event_bus
        self._timeout = timeout

        self._record: Optional[SpinRecord] = None
        self._task: Optional[asyncio.Task] = None
        self._template_listeners: List[Callable[[str], None]] = []

    @property
    def template(self) -> str:
        """Operator template used for the next instant message."""
        return self._template

    @template.setter
    def template(self, value: str) -> None:
        self._template = value
        for listener in list(self._template_listeners):
            try:
                listener(value)
            except Exception as e:
                logger.error(f"Template listener failed: {e}")

    def on_template_changed(self, callback: Callable[[str], None]) -> None:
        """Call callback(template) whenever the operator template changes."""
        self._template_listeners.append(callback)

    @property
    def enabled(self) -> bool:
        """True if generated messages will be requested."""
        return self._enabled and self._generator is not None

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def record(self) -> Optional[SpinRecord]:
        return self._record

    @property
    def text(self) -> str:
        """Message to display, empty while no result is shown."""
        return self._record.message if self._record else ""

    @property
    def is_pending(self) -> bool:
        return self._record is not None and self._record.enrichment is EnrichmentStatus.PENDING

    def compose(self, participant: str, prize_name: str) -> str:
        """Instant message for a winner."""
        return render_message(self.template, participant, prize_name)

    def begin(self, record: SpinRecord) -> None:
        """Make record the current result, dropping the previous one."""
        self.discard()
        self._record = record

    def discard(self) -> None:
        """Drop the current result and any generation still in flight."""
        record = self._record
        if record is not None and record.enrichment is EnrichmentStatus.PENDING:
            record.enrichment = EnrichmentStatus.DISCARDED
            logger.debug(f"Discarded pending commentary for spin {record.token}")

        if self._task is not None and not self._task.done():
            self._task.cancel()

        self._record = None
        self._task = None

    def request_enrichment(
        self,
        record: SpinRecord,
        remaining_prizes: Sequence[str],
    ) -> Optional[asyncio.Task]:
        """Start generating a richer message for record.

        Fire and forget: the caller never awaits the returned task.

        Returns:
            The generation task, or None if nothing was started
        """
        if not self.enabled:
            return None

        if record is not self._record:
            logger.debug(f"Not enriching superseded spin {record.token}")
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, keeping the template message")
            return None

        record.enrichment = EnrichmentStatus.PENDING
        self._task = loop.create_task(self._enrich(record, list(remaining_prizes)))
        return self._task

    async def _enrich(self, record: SpinRecord, remaining_prizes: List[str]) -> bool:
        self._emit(Event(EventType.AI_REQUEST_START, data={"token": record.token}, source="commentary"))

        try:
            text = await asyncio.wait_for(
                self._generator(record.prize.name, remaining_prizes, record.participant),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Commentary timed out after {self._timeout}s for spin {record.token}")
            self._fail(record, "timeout")
            return False
        except EnrichmentFailure as e:
            logger.warning(f"Commentary generation failed: {e}")
            self._fail(record, str(e))
            return False
        except Exception as e:
            logger.error(f"Commentary generator error: {e}")
            self._fail(record, str(e))
            return False

        return self.apply(record.token, text)

    def apply(self, token: int, text: Optional[str]) -> bool:
        """Show generated text for spin token if that spin is still current.

        Returns:
            True if the displayed message was replaced
        """
        record = self._record
        if record is None or record.token != token or record.enrichment is not EnrichmentStatus.PENDING:
            logger.info(f"Dropping stale commentary for spin {token}")
            return False

        text = (text or "").strip()
        if not text:
            self._fail(record, "empty response")
            return False

        record.message = text
        record.enrichment = EnrichmentStatus.RESOLVED
        logger.info(f"Commentary updated for spin {token}")

        self._emit(Event(EventType.AI_REQUEST_COMPLETE, data={"token": token}, source="commentary"))
        self._emit(commentary_event(token, text))
        return True

    def _fail(self, record: SpinRecord, reason: str) -> None:
        if record.enrichment is EnrichmentStatus.PENDING:
            record.enrichment = EnrichmentStatus.DISCARDED
        self._emit(Event(
            EventType.AI_REQUEST_ERROR,
            data={"token": record.token, "reason": reason},
            source="commentary",
        ))

    def _emit(self, event: Event) -> None:
        if self._event_bus is not None:
            self._event_bus.emit(event)
