# bizdocs/infrastructure/store/backends.py
"""
String key/value backends for the document store.

Each document kind lives under one key as a JSON array, so a backend only
needs get/set/delete of strings.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

import redis

logger = logging.getLogger("store.backends")


class KeyValueBackend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryBackend:
    """Dict-backed; used by tests and one-off scripts."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class JsonFileBackend:
    """
    All keys in one JSON object on disk.

    Writes go to a temp file in the same directory followed by
    ``os.replace`` so readers never see a half-written file.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _load_for_write(self) -> dict[str, str]:
        try:
            return self._load()
        except ValueError as exc:
            logger.warning("Store file %s is unreadable (%s); starting a fresh one", self.path, exc)
            return {}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            value = self._load().get(key)
        return value if value is None or isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load_for_write()
            data[key] = value
            self._dump(data)

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._load_for_write()
            if data.pop(key, None) is not None:
                self._dump(data)


class RedisBackend:
    """Plain Redis strings under ``<prefix><key>``."""

    def __init__(self, redis_url: str, prefix: str = "", client: Optional[redis.Redis] = None):
        if not redis_url and client is None:
            raise RuntimeError("REDIS_URL is not set")
        self._r = client or redis.Redis.from_url(redis_url, decode_responses=True)
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        return self._r.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        self._r.set(self._key(key), value)

    def delete(self, key: str) -> None:
        self._r.delete(self._key(key))
