from __future__ import annotations
import copy
import json
import logging
import os
from typing import Any, Dict, Protocol

logger = logging.getLogger(__name__)

class KeyValueStore(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any) -> bool: ...

    def remove(self, key: str) -> bool: ...

class MemoryStore:
    """Process-local store. Values are JSON round-tripped like the file store."""

    def __init__(self, data: Dict[str, Any] | None = None):
        self._data: Dict[str, str] = {}
        for key, value in (data or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.error("Corrupted value under key '%s'", key)
            return default

    def set(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value)
            return True
        except (TypeError, ValueError) as exc:
            logger.error("Error writing key '%s': %s", key, exc)
            return False

    def remove(self, key: str) -> bool:
        self._data.pop(key, None)
        return True


_MISSING = object()


class JsonFileStore:
    """One JSON file per key under ``directory``.

    Each file is read at most once and then served from memory; ``set`` and
    ``remove`` write through. Keeping every key in its own file means a stats
    update never rewrites the cached dictionary corpus. A missing or corrupted
    file reads as absent; write failures are logged and reported as ``False``.
    """

    def __init__(self, directory: str):
        self.directory = directory
        self._cache: Dict[str, Any] = {}

    def _path(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def _read(self, key: str) -> Any:
        path = self._path(key)
        if not os.path.exists(path):
            return _MISSING
        try:
            with open(path, 'r', encoding='utf-8') as fh:
                return json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("Store file %s unreadable, ignoring it: %s", path, exc)
            return _MISSING

    def _write(self, key: str, value: Any) -> bool:
        path = self._path(key)
        tmp = f"{path}.tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp, 'w', encoding='utf-8') as fh:
                json.dump(value, fh)
            os.replace(tmp, path)
            return True
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error writing store file %s: %s", path, exc)
            return False

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._cache:
            self._cache[key] = self._read(key)
        value = self._cache[key]
        if value is _MISSING:
            return default
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> bool:
        if not self._write(key, value):
            return False
        self._cache[key] = copy.deepcopy(value)
        return True

    def remove(self, key: str) -> bool:
        self._cache[key] = _MISSING
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.error("Error removing store file for '%s': %s", key, exc)
            return False
        return True
