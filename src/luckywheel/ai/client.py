"""Gemini text client for winner commentary.

The google-genai SDK is synchronous; each request runs in a worker thread
so the frame loop keeps turning while the model thinks.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from google import genai
from google.genai import types

from luckywheel.ai.logging import get_ai_logger

logger = logging.getLogger(__name__)


class GeminiModel(Enum):
    """Models suited to short congratulation lines."""

    FLASH = "gemini-2.5-flash"
    FLASH_LITE = "gemini-2.5-flash-lite"


@dataclass
class GeminiConfig:
    """Connection and sampling options."""

    api_key: str
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay: float = 1.0
    temperature: float = 0.9
    max_output_tokens: int = 512

    @classmethod
    def from_settings(cls, ai: Any) -> "GeminiConfig":
        """Build from the AI section of the application settings."""
        return cls(
            api_key=ai.gemini_api_key,
            timeout=ai.request_timeout,
            max_retries=ai.max_retries,
            retry_delay=ai.retry_delay,
            temperature=ai.temperature,
            max_output_tokens=ai.max_output_tokens,
        )


def _is_overloaded(error: Exception) -> bool:
    message = str(error).lower()
    return "503" in message or "overloaded" in message or "unavailable" in message


class GeminiClient:
    """Async text generation over the Gemini SDK.

    Failures never raise: timeouts and overload responses are retried with
    a growing delay, anything else is logged, and None is returned.
    """

    def __init__(self, config: Optional[GeminiConfig] = None):
        if config is None:
            config = GeminiConfig(api_key=os.environ.get("GEMINI_API_KEY", ""))
        if not config.api_key:
            logger.warning("No Gemini API key, AI commentary is off")

        self.config = config
        self._sdk: Optional[genai.Client] = None

    @property
    def is_available(self) -> bool:
        return bool(self.config.api_key)

    def _connect(self) -> Optional[genai.Client]:
        if self._sdk is None and self.is_available:
            try:
                self._sdk = genai.Client(api_key=self.config.api_key)
                logger.info("Connected to Gemini")
            except Exception as e:
                logger.error(f"Gemini connection failed: {e}")
        return self._sdk

    async def generate_text(
        self,
        prompt: str,
        model: GeminiModel | str = GeminiModel.FLASH,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        category: str = "text",
    ) -> Optional[str]:
        """Generate a completion for prompt.

        Args:
            prompt: User prompt
            model: Model enum or raw model name
            system_instruction: System prompt, if any
            temperature: Sampling temperature (config default if None)
            max_tokens: Output token cap (config default if None)
            category: Label for the generation log

        Returns:
            The generated text, or None if every attempt failed
        """
        sdk = self._connect()
        if sdk is None:
            return None

        model_name = model.value if isinstance(model, GeminiModel) else model
        request_config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.config.temperature if temperature is None else temperature,
            max_output_tokens=max_tokens or self.config.max_output_tokens,
        )

        for attempt in range(1, self.config.max_retries + 1):
            try:
                response = await asyncio.wait_for(
                    asyncio.to_thread(
                        sdk.models.generate_content,
                        model=model_name,
                        contents=prompt,
                        config=request_config,
                    ),
                    timeout=self.config.timeout,
                )
            except asyncio.TimeoutError:
                logger.warning(f"{model_name} timed out ({attempt}/{self.config.max_retries})")
                continue
            except Exception as e:
                if not _is_overloaded(e):
                    logger.error(f"{model_name} request failed: {e}")
                    return None
                logger.warning(f"{model_name} overloaded ({attempt}/{self.config.max_retries})")
                await asyncio.sleep(self.config.retry_delay * attempt)
                continue

            text = getattr(response, "text", None)
            if text:
                get_ai_logger().log_text_generation(
                    category=category,
                    prompt=prompt,
                    response=text,
                    model=model_name,
                    metadata={"system_instruction": system_instruction, "attempt": attempt},
                )
                return text
            logger.warning(f"{model_name} returned no text ({attempt}/{self.config.max_retries})")

        logger.error(f"{model_name} gave up after {self.config.max_retries} attempts")
        return None


_client: Optional[GeminiClient] = None


def get_gemini_client(config: Optional[GeminiConfig] = None) -> GeminiClient:
    """Shared client; config only applies to the first call."""
    global _client
    if _client is None:
        _client = GeminiClient(config)
    return _client
