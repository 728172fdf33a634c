"""AI module for LuckyWheel - Gemini integration for winner commentary."""

from luckywheel.ai.client import GeminiClient, GeminiConfig, GeminiModel, get_gemini_client
from luckywheel.ai.commentary import CommentaryService

__all__ = [
    # Client
    "GeminiClient",
    "GeminiConfig",
    "GeminiModel",
    "get_gemini_client",
    # Commentary
    "CommentaryService",
]
