"""JSON-file stand-in for the browser's local storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "vault_token"
REPO_KEY = "vault_repo"
GEMINI_KEY = "vault_gemini"
WEBHOOK_KEY = "vault_webhook"
PINS_KEY = "vault_pins"
NOTIFICATIONS_KEY = "vault_notifs"

SETTINGS_KEYS = (TOKEN_KEY, REPO_KEY, GEMINI_KEY, WEBHOOK_KEY)


class LocalStateStore:
    """
    Persist small UI-owned values under fixed keys in a single JSON document.

    Core services receive configuration explicitly; only the config loader,
    the notification log and the pin routes talk to this store.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning(f"Ignoring unreadable local state at {self.path}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        if value is None:
            data.pop(key, None)
        else:
            data[key] = value
        self._save(data)

    def load_settings(self) -> Dict[str, Optional[str]]:
        """Return the saved connection settings (credential, repo, AI key, webhook)."""
        data = self._load()
        return {key: data.get(key) for key in SETTINGS_KEYS}

    def save_settings(self, **values: Optional[str]) -> None:
        data = self._load()
        for key, value in values.items():
            if key not in SETTINGS_KEYS:
                raise KeyError(f"Unknown settings key: {key}")
            if value:
                data[key] = value
            else:
                data.pop(key, None)
        self._save(data)

    # Pinned notes (newest first)

    def get_pins(self) -> List[Dict[str, Any]]:
        return list(self.get(PINS_KEY, []))

    def add_pin(self, pin: Dict[str, Any]) -> List[Dict[str, Any]]:
        pins = [pin] + self.get_pins()
        self.set(PINS_KEY, pins)
        return pins

    def remove_pin(self, index: int) -> List[Dict[str, Any]]:
        pins = self.get_pins()
        if index < 0 or index >= len(pins):
            raise IndexError(f"No pin at index {index}")
        pins.pop(index)
        self.set(PINS_KEY, pins)
        return pins

    # Notification log (newest first, bounded)

    def get_notifications(self) -> List[Dict[str, Any]]:
        return list(self.get(NOTIFICATIONS_KEY, []))

    def prepend_notification(self, record: Dict[str, Any], limit: int) -> List[Dict[str, Any]]:
        notifications = ([record] + self.get_notifications())[:limit]
        self.set(NOTIFICATIONS_KEY, notifications)
        return notifications


__all__ = [
    "LocalStateStore",
    "TOKEN_KEY",
    "REPO_KEY",
    "GEMINI_KEY",
    "WEBHOOK_KEY",
    "PINS_KEY",
    "NOTIFICATIONS_KEY",
]
