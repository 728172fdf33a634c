"""Configuration for LuckyWheel."""

from luckywheel.config.prizes import DEFAULT_PRIZES, load_prizes
from luckywheel.config.settings import Settings, get_settings

__all__ = ["DEFAULT_PRIZES", "load_prizes", "Settings", "get_settings"]
