import json
import logging
import os
from typing import Any, Dict, Optional

from cgpa_tracker import config

logger = logging.getLogger(__name__)

# -------------------------------
# Data persistence (local JSON file)
# -------------------------------

class JsonFileStore:
    """Keeps the whole application state in one JSON document."""

    def __init__(self, path: Optional[str] = None):
        self.path = path or config.DATA_FILE

    def load(self) -> Optional[Dict[str, Any]]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            logger.exception("Failed to load saved data from %s", self.path)
            return None
        if not isinstance(data, dict):
            logger.error("Ignoring saved data in %s: expected a JSON object", self.path)
            return None
        return data

    def save(self, data: Dict[str, Any]) -> bool:
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save data to %s", self.path)
            self._discard(tmp_path)
            return False
        return True

    @staticmethod
    def _discard(tmp_path: str) -> None:
        try:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        except OSError:
            logger.warning("Could not remove partial file %s", tmp_path)
