"""Winner commentary using Gemini.

Writes a short, lively congratulation for the person who just won,
teasing the prizes still left on the wheel.
"""

import logging
from collections import Counter
from typing import List, Optional, Sequence

from luckywheel.ai.client import GeminiClient, GeminiModel, get_gemini_client
from luckywheel.core.errors import EnrichmentFailure

logger = logging.getLogger(__name__)


COMMENTATOR_SYSTEM_VI = """Bạn là MC dẫn chương trình vòng quay may mắn tại một buổi tiệc công ty. Giọng điệu sôi nổi, hài hước, thân thiện.

Quy tắc:
- Viết đúng 2 đến 3 câu bằng tiếng Việt.
- Gọi tên người thắng và nhắc đúng tên phần quà.
- Có thể trêu nhẹ về những phần quà còn lại trên vòng quay.
- Không dùng markdown, không dùng dấu ngoặc kép, không xuống dòng."""

COMMENTATOR_SYSTEM_EN = """You are the host of a lucky wheel draw at a company party. Upbeat, playful, warm.

Rules:
- Write exactly 2 to 3 sentences in English.
- Name the winner and mention the exact prize name.
- You may tease the prizes still left on the wheel.
- No markdown, no quotation marks, no line breaks."""


def summarize_remaining(prize_names: Sequence[str], limit: int = 8) -> str:
    """Compact "name x count" list of the prizes still on the wheel."""
    counts = Counter(prize_names)
    if not counts:
        return "-"
    parts = [f"{name} x{count}" for name, count in counts.most_common(limit)]
    if len(counts) > limit:
        parts.append("...")
    return ", ".join(parts)


class CommentaryService:
    """Generates winner commentary with Gemini.

    generate() matches the commentary coordinator's generator signature.
    The style hint is the operator's congratulation template, passed so
    the model picks up its tone.
    """

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        model: GeminiModel | str = GeminiModel.FLASH,
        language: str = "vi",
        style_hint: Optional[str] = None,
    ):
        self._client = client or get_gemini_client()
        self._model = model
        self._language = language
        self._style_hint = style_hint

    @property
    def is_available(self) -> bool:
        """Check if commentary can be generated."""
        return self._client.is_available

    @property
    def style_hint(self) -> Optional[str]:
        return self._style_hint

    @style_hint.setter
    def style_hint(self, value: Optional[str]) -> None:
        self._style_hint = value

    def _system_prompt(self) -> str:
        return COMMENTATOR_SYSTEM_EN if self._language == "en" else COMMENTATOR_SYSTEM_VI

    def build_prompt(self, prize_name: str, remaining: Sequence[str], participant: str) -> str:
        """Build the user prompt for one winner."""
        parts = [
            f"Winner: {participant}\n",
            f"Prize won: {prize_name}\n",
            f"Prizes still on the wheel: {summarize_remaining(remaining)}\n",
        ]
        if self._style_hint:
            parts.append(f"Match the tone of the host's own message: {self._style_hint}\n")
        parts.append("Congratulate the winner now:")
        return "".join(parts)

    async def generate(self, prize_name: str, remaining: List[str], participant: str) -> str:
        """Generate commentary for a winner.

        Raises:
            EnrichmentFailure: If the model is unavailable or returned nothing
        """
        if not self.is_available:
            raise EnrichmentFailure("AI commentary unavailable (no API key)")

        prompt = self.build_prompt(prize_name, remaining, participant)
        response = await self._client.generate_text(
            prompt=prompt,
            model=self._model,
            system_instruction=self._system_prompt(),
            category="commentary",
        )

        text = self._clean(response or "")
        if not text:
            raise EnrichmentFailure("Empty commentary response")

        logger.info(f"Commentary generated for {participant}: {len(text)} chars")
        return text

    @staticmethod
    def _clean(text: str) -> str:
        """Flatten to a single line and strip wrapping quotes."""
        text = " ".join(text.split())
        return text.strip("\"'“”«» ")
