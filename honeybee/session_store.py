# HONEYBEE/backend/honeybee/session_store.py : persistence of the signed-in employee

"""
Session store.

Holds exactly one serialized EmployeeSnapshot under a fixed key. Loading never
raises: missing, unreadable or unparsable content is reported as absent, so a
format change simply invalidates old sessions. Saving and clearing log storage
failures instead of propagating them.
"""

import logging
import re
import time
from pathlib import Path
from typing import Dict, Optional

import redis

from honeybee import config
from honeybee.schemas.schemas import EmployeeSnapshot

logger = logging.getLogger(__name__)

# Process-wide storage shared by MemorySessionStore instances
_MEMORY_STORAGE: Dict[str, str] = {}
# key -> expiry timestamp, for entries saved with a TTL
_MEMORY_EXPIRY: Dict[str, float] = {}

# Failures of the underlying storage, reported as "absent" rather than raised
STORAGE_ERRORS = (OSError, redis.RedisError)


def _now() -> float:
    return time.time()


def _parse(raw) -> Optional[EmployeeSnapshot]:
    if raw is None:
        return None
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return EmployeeSnapshot.model_validate_json(raw)
    except ValueError as e:
        logger.info(f"Discarding unreadable session: {e}")
        return None


class SessionStore:
    """Base class; subclasses implement the raw read/write/delete of one key"""

    def __init__(self, key: str = None):
        self.key = key or config.SESSION_KEY

    def save(self, snapshot: EmployeeSnapshot) -> None:
        try:
            self._write(snapshot.model_dump_json())
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not persist session {self.key}: {e}")

    def load(self) -> Optional[EmployeeSnapshot]:
        try:
            raw = self._read()
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not read session {self.key}: {e}")
            return None
        return _parse(raw)

    def clear(self) -> None:
        try:
            self._delete()
        except STORAGE_ERRORS as e:
            logger.warning(f"Could not clear session {self.key}: {e}")

    def _read(self):
        raise NotImplementedError

    def _write(self, payload: str) -> None:
        raise NotImplementedError

    def _delete(self) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    """Process-local sessions; with a TTL, expired entries are dropped on read and on every save"""

    def __init__(
        self,
        key: str = None,
        storage: Optional[Dict[str, str]] = None,
        ttl: int = None,
        expiry: Optional[Dict[str, float]] = None,
    ):
        super().__init__(key)
        if storage is None:
            self.storage = _MEMORY_STORAGE
            self.expiry = _MEMORY_EXPIRY if expiry is None else expiry
        else:
            self.storage = storage
            self.expiry = {} if expiry is None else expiry
        self.ttl = config.SESSION_TTL_SECONDS if ttl is None else ttl

    def _read(self):
        expires_at = self.expiry.get(self.key)
        if expires_at is not None and expires_at <= _now():
            self._delete()
            return None
        return self.storage.get(self.key)

    def _write(self, payload: str) -> None:
        self._evict_expired()
        self.storage[self.key] = payload
        if self.ttl:
            self.expiry[self.key] = _now() + self.ttl
        else:
            self.expiry.pop(self.key, None)

    def _delete(self) -> None:
        self.storage.pop(self.key, None)
        self.expiry.pop(self.key, None)

    def _evict_expired(self) -> None:
        now = _now()
        for key in [k for k, expires_at in self.expiry.items() if expires_at <= now]:
            self.storage.pop(key, None)
            self.expiry.pop(key, None)


class FileSessionStore(SessionStore):
    """One JSON file per key inside a directory; with a TTL, a file older than it is expired"""

    def __init__(self, key: str = None, directory: str = None, ttl: int = None):
        super().__init__(key)
        self.directory = Path(directory or config.SESSION_DIR)
        self.ttl = config.SESSION_TTL_SECONDS if ttl is None else ttl

    @property
    def path(self) -> Path:
        safe_key = re.sub(r"[^A-Za-z0-9_.-]", "_", self.key)
        return self.directory / f"{safe_key}.json"

    def _is_expired(self, path: Path) -> bool:
        return bool(self.ttl) and path.stat().st_mtime + self.ttl <= _now()

    def _read(self):
        if not self.path.exists():
            return None
        if self._is_expired(self.path):
            self._delete()
            return None
        return self.path.read_text(encoding="utf-8")

    def _write(self, payload: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._evict_expired()
        self.path.write_text(payload, encoding="utf-8")

    def _delete(self) -> None:
        self.path.unlink(missing_ok=True)

    def _evict_expired(self) -> None:
        if not self.ttl:
            return
        for path in self.directory.glob("*.json"):
            if self._is_expired(path):
                path.unlink(missing_ok=True)


class RedisSessionStore(SessionStore):
    def __init__(self, key: str = None, client=None, ttl: int = None):
        super().__init__(key)
        self.client = client if client is not None else get_redis_client()
        self.ttl = config.SESSION_TTL_SECONDS if ttl is None else ttl

    def _read(self):
        return self.client.get(self.key)

    def _write(self, payload: str) -> None:
        if self.ttl:
            self.client.set(self.key, payload, ex=self.ttl)
        else:
            self.client.set(self.key, payload)

    def _delete(self) -> None:
        self.client.delete(self.key)


_redis_client = None


def get_redis_client():
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.Redis.from_url(config.REDIS_URL)
    return _redis_client


def session_store_for(token: str) -> SessionStore:
    """Builds the configured backend for one bearer token"""
    key = f"{config.SESSION_KEY}:{token}"
    backend = config.SESSION_BACKEND
    if backend == "redis":
        return RedisSessionStore(key)
    if backend == "file":
        return FileSessionStore(key)
    if backend != "memory":
        logger.warning(f"Unknown SESSION_BACKEND {backend!r}, using memory")
    return MemorySessionStore(key)

