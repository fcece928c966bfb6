# tikerama/services/storage_service.py
import json
import threading
import time

import redis

from tikerama.utils.retry import redis_retry
from tikerama.utils.settings import REDIS_URL, SESSION_TTL_SECONDS, STORAGE_BACKEND
from tikerama.utils.logging import get_logger

logger = get_logger(__name__)

SESSION_NAMESPACE = "session"
LOCAL_NAMESPACE = "local"

_redis_client = None


def get_redis():
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.Redis.from_url(REDIS_URL, decode_responses=True)
    return _redis_client


class StorageService:
    """
    Key-value storage of one storefront session, kept in redis.
    -session storage: keys expire after ttl, refreshed on every write
    -local storage: ttl None, keys survive until removed
    """

    def __init__(self, session_id: str, namespace: str, ttl: int | None = None, client=None):
        self.session_id = session_id
        self.namespace = namespace
        self.ttl = ttl
        self.redis = client if client is not None else get_redis()

    def _key(self, key: str) -> str:
        #session:abc123:tikerama-cart
        return f"{self.namespace}:{self.session_id}:{key}"

    @redis_retry()
    def get_item(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    @redis_retry()
    def set_item(self, key: str, value: str) -> None:
        logger.debug(f"Storage write {self._key(key)}")
        self.redis.set(name=self._key(key), value=value, ex=self.ttl)

    @redis_retry()
    def remove_item(self, key: str) -> None:
        self.redis.delete(self._key(key))

    def get_json(self, key: str):
        raw = self.get_item(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Corrupted value under {self._key(key)}, ignoring it")
            return None

    def set_json(self, key: str, value) -> None:
        self.set_item(key, json.dumps(value))


class MemoryStorage(StorageService):
    """
    Same contract as StorageService, backed by a dict of key -> (value, expires_at).
    Keys written with a ttl expire like redis keys; expired ones are purged on access.
    """

    _shared: dict = {}
    _shared_lock = threading.Lock()

    def __init__(self, session_id: str, namespace: str, ttl: int | None = None, data: dict | None = None, clock=time.time):
        self.session_id = session_id
        self.namespace = namespace
        self.ttl = ttl
        self.data = data if data is not None else self._shared
        self.clock = clock

    def _purge_expired(self, now: float) -> None:
        expired = [k for k, (_, expires_at) in self.data.items() if expires_at is not None and expires_at <= now]
        for k in expired:
            del self.data[k]

    def get_item(self, key: str) -> str | None:
        with self._shared_lock:
            self._purge_expired(self.clock())
            entry = self.data.get(self._key(key))
        return entry[0] if entry else None

    def set_item(self, key: str, value: str) -> None:
        expires_at = self.clock() + self.ttl if self.ttl else None
        with self._shared_lock:
            self.data[self._key(key)] = (value, expires_at)

    def remove_item(self, key: str) -> None:
        with self._shared_lock:
            self.data.pop(self._key(key), None)


def _make_storage(session_id: str, namespace: str, ttl: int | None) -> StorageService:
    if STORAGE_BACKEND == "memory":
        return MemoryStorage(session_id, namespace, ttl)
    return StorageService(session_id, namespace, ttl)


def session_storage(session_id: str) -> StorageService:
    return _make_storage(session_id, SESSION_NAMESPACE, SESSION_TTL_SECONDS)


def local_storage(session_id: str) -> StorageService:
    return _make_storage(session_id, LOCAL_NAMESPACE, None)
