"""
Prompt Store - Persist saved assistant prompts across sessions.

Storage is a small JSON file holding string values by key, the same shape as
browser local storage. The prompt list lives under a fixed key as a
JSON-encoded list of strings.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol

from livepreview.config import get_config


logger = logging.getLogger(__name__)


PROMPTS_KEY = "customPrompts"


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]:
        ...

    def set_item(self, key: str, value: str) -> None:
        ...


class JsonFileStore:
    """Key-value store backed by a JSON object on disk."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else get_config().prompt_store_path
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)


class MemoryStore:
    """In-process key-value store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value


def load_prompts(store: KeyValueStore) -> List[str]:
    """Read the saved prompt list. Missing or malformed data yields an empty list."""
    raw = store.get_item(PROMPTS_KEY)
    if not raw:
        return []
    try:
        prompts = json.loads(raw)
    except json.JSONDecodeError:
        return []
    if not isinstance(prompts, list):
        return []
    return [p for p in prompts if isinstance(p, str)]


def save_prompts(store: KeyValueStore, prompts: List[str]) -> None:
    """Replace the saved prompt list."""
    store.set_item(PROMPTS_KEY, json.dumps(list(prompts)))
