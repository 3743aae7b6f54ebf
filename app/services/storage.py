# app/services/storage.py
"""
Magazyny klucz/wartosc po stronie klienta.

Kazdy kupujacy ma dwa niezalezne zakresy pod tymi samymi kluczami
(cartItems, buyNowItem):
- persistent: przezywa restart przegladarki, bez wygasania,
- session: zwiazany z jedna sesja, wygasa po SESSION_TTL_SECONDS.
"""
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Optional

import redis

from app.utils.retry import redis_retry
from app.utils.settings import REDIS_URL, SESSION_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(ABC):
    name = "storage"

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        ...


class RedisStorage(KeyValueStorage):
    """
    -jeden namespace na zakres (np. local:<shopper>, session:<session>)
    -ttl=None znaczy bez wygasania
    -tenacity ponawia bledy redisa, potem wyjatek leci wyzej
    """

    def __init__(self, client: redis.Redis, namespace: str, ttl: Optional[int] = None):
        self.redis = client
        self.namespace = namespace
        self.ttl = ttl
        self.name = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @redis_retry()
    def get_item(self, key: str) -> Optional[str]:
        return self.redis.get(self._key(key))

    @redis_retry()
    def set_item(self, key: str, value: str) -> None:
        #SET session:abc:cartItems "[...]" EX 86400
        self.redis.set(name=self._key(key), value=value, ex=self.ttl)

    @redis_retry()
    def remove_item(self, key: str) -> None:
        self.redis.delete(self._key(key))


@lru_cache(maxsize=None)
def redis_client(url: Optional[str] = None) -> redis.Redis:
    return redis.Redis.from_url(url or REDIS_URL, decode_responses=True)


def persistent_scope(client: redis.Redis, shopper_id: str) -> RedisStorage:
    return RedisStorage(client, f"local:{shopper_id}")


def session_scope(client: redis.Redis, session_id: str) -> RedisStorage:
    return RedisStorage(client, f"session:{session_id}", ttl=SESSION_TTL_SECONDS)
