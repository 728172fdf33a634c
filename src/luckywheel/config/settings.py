"""
LuckyWheel settings.

Read from LUCKYWHEEL_* environment variables and an optional .env file;
the Gemini key keeps its usual GEMINI_API_KEY name.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from luckywheel.wheel.commentary import DEFAULT_TEMPLATE


class SpinSettings(BaseSettings):
    """Wheel animation settings."""

    model_config = SettingsConfigDict(env_prefix="LUCKYWHEEL_SPIN_", extra="ignore")

    duration_ms: float = Field(default=8000.0, gt=0)
    min_rotations: float = Field(default=12.0, ge=0)
    rotation_spread: float = Field(default=5.0, ge=0)
    fps: int = Field(default=60, ge=1, le=240)


class AudioSettings(BaseSettings):
    """Sound settings."""

    model_config = SettingsConfigDict(env_prefix="LUCKYWHEEL_AUDIO_", extra="ignore")

    enabled: bool = True
    music_volume: float = Field(default=0.5, ge=0.0, le=1.0)
    effects_volume: float = Field(default=0.5, ge=0.0, le=1.0)
    muted: bool = False

    # Played while the wheel spins; synthesized drum roll if unset
    ambience_track: Optional[Path] = None
    ambience_duration: int = Field(default=8, ge=3, le=30)  # seconds


class AISettings(BaseSettings):
    """AI commentary settings."""

    model_config = SettingsConfigDict(env_prefix="LUCKYWHEEL_AI_", extra="ignore")

    gemini_api_key: str = Field(default="", validation_alias="GEMINI_API_KEY")
    enabled: bool = True

    commentary_model: str = "gemini-2.5-flash"
    temperature: float = 0.9
    max_output_tokens: int = 512

    # Timeouts
    request_timeout: float = 30.0
    enrichment_timeout: float = 60.0

    # Retry settings
    max_retries: int = 3
    retry_delay: float = 1.0

    # Generation log (None disables it)
    log_dir: Optional[Path] = None


class Settings(BaseSettings):
    """Top-level settings with one nested section per subsystem."""

    model_config = SettingsConfigDict(
        env_prefix="LUCKYWHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False
    language: Literal["vi", "en"] = "vi"

    congrats_template: str = DEFAULT_TEMPLATE

    # YAML prize list; built-in defaults if unset
    prizes_file: Optional[Path] = None

    # Nested settings
    spin: SpinSettings = Field(default_factory=SpinSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    ai: AISettings = Field(default_factory=AISettings)

    @property
    def ai_available(self) -> bool:
        """Check if AI commentary can be requested."""
        return self.ai.enabled and bool(self.ai.gemini_api_key)


@lru_cache
def get_settings() -> Settings:
    """Settings loaded once per process."""
    return Settings()
