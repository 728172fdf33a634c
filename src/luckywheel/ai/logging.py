"""On-disk record of AI commentary.

One JSON file per generation, grouped by day, so an operator can review
what the host said after the event:

    <log_dir>/2026-01-31/commentary_203015_ab12cd34.json
"""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class AILogger:
    """Generation log; a no-op until it is given a directory."""

    def __init__(self, log_dir: Optional[Path] = None):
        self.log_dir = Path(log_dir) if log_dir else None

    @property
    def enabled(self) -> bool:
        return self.log_dir is not None

    def log_text_generation(
        self,
        category: str,
        prompt: str,
        response: str,
        model: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Write one generation.

        Returns:
            The entry id, or "" when disabled or the write failed
        """
        if not self.enabled:
            return ""

        now = datetime.now()
        entry_id = f"{now:%H%M%S}_{uuid.uuid4().hex[:8]}"
        entry = {
            "id": entry_id,
            "timestamp": now.isoformat(),
            "category": category,
            "model": model,
            "prompt": prompt,
            "response": response,
            "metadata": metadata or {},
        }

        path = self.log_dir / f"{now:%Y-%m-%d}" / f"{category}_{entry_id}.json"
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(entry, ensure_ascii=False, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error(f"Could not write AI log {path}: {e}")
            return ""

        logger.debug(f"AI generation logged: {path.name}")
        return entry_id


_ai_logger: Optional[AILogger] = None


def get_ai_logger(log_dir: Optional[Path] = None) -> AILogger:
    """Shared logger; log_dir only applies to the first call."""
    global _ai_logger
    if _ai_logger is None:
        _ai_logger = AILogger(log_dir)
        if log_dir:
            logger.info(f"AI generations logged to {log_dir}")
    return _ai_logger
