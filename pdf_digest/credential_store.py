"""
Credential persistence.

The last-used API key is kept in a small key-value store so the user does
not have to paste it again. The store is injected; the credential store
itself only knows the key name it owns.
"""
import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "gemini_api_key"


class KeyValueStore(ABC):
    """Minimal string key-value capability."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store a value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete a value; missing keys are ignored."""


class MemoryStore(KeyValueStore):
    """Process-local store, mostly for tests and one-off CLI runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """Thread-safe store backed by a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable key-value file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        temp_path.replace(self.path)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._read().get(key)
            return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)


class CredentialStore:
    """Remembers the last-used API key."""

    def __init__(self, store: KeyValueStore, key: str = CREDENTIAL_KEY):
        self.store = store
        self.key = key
        self._current: Optional[str] = None

    def load(self) -> Optional[str]:
        """Load the last saved credential; call once at start-up."""
        self._current = self.store.get(self.key)
        return self._current

    def save(self, value: Optional[str]) -> None:
        """Persist *value*; a blank value forgets the stored credential."""
        if value and value.strip():
            self._current = value.strip()
            self.store.set(self.key, self._current)
        else:
            self.clear()

    def clear(self) -> None:
        self._current = None
        self.store.remove(self.key)

    @property
    def current(self) -> Optional[str]:
        return self._current

    @property
    def has_credential(self) -> bool:
        return bool(self._current)
