"""Хранилище ключ-значение: Redis или память процесса, с одинаковым поведением."""

from __future__ import annotations

import copy
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

from redis.exceptions import RedisError

from redis_db import create_redis

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Ошибка ввода-вывода бэкенда хранилища."""

    def __init__(self, operation: str, key: str, cause: Exception | None = None):
        self.operation = operation
        self.key = key
        self.cause = cause
        super().__init__(f"{operation} '{key}' не выполнен: {cause}")


class BaseStore(ABC):
    """Общий контракт хранилища: has/get/set в пространстве имён name."""

    backend = "base"

    def __init__(self, name: str = "stats"):
        self.name = name

    @abstractmethod
    async def has(self, key: str) -> bool:
        pass

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        pass

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        pass

    async def close(self) -> None:
        return None


class MemoryStore(BaseStore):
    """Словарь в памяти процесса. Значения копируются при чтении и записи."""

    backend = "memory"

    def __init__(self, name: str = "stats"):
        super().__init__(name)
        self._data: dict[str, Any] = {}

    async def has(self, key: str) -> bool:
        return key in self._data

    async def get(self, key: str) -> Any | None:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class RedisStore(BaseStore):
    """
    Redis-бэкенд. Ключ в Redis: "{name}:{key}", значение хранится в JSON,
    чтобы числа и словари возвращались в том же виде, что и у MemoryStore.
    """

    backend = "redis"

    def __init__(self, client, name: str = "stats"):
        super().__init__(name)
        self._client = client

    def _key(self, key: str) -> str:
        return f"{self.name}:{key}"

    async def has(self, key: str) -> bool:
        try:
            return bool(await self._client.exists(self._key(key)))
        except (RedisError, OSError) as e:
            raise StoreError("has", key, e) from e

    async def get(self, key: str) -> Any | None:
        try:
            raw = await self._client.get(self._key(key))
        except (RedisError, OSError) as e:
            raise StoreError("get", key, e) from e
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as e:
            raise StoreError("get", key, e) from e

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._client.set(self._key(key), json.dumps(value))
        except (RedisError, OSError) as e:
            raise StoreError("set", key, e) from e

    async def close(self) -> None:
        try:
            await self._client.aclose()
        except (RedisError, OSError):
            logger.exception("❌ [STORE] Ошибка закрытия соединения с Redis")


def create_store(name: str = "stats", redis_url: str | None = None) -> BaseStore:
    """
    Выбирает бэкенд один раз при создании: Redis, если задан REDIS_URL,
    иначе словарь в памяти.
    """
    if redis_url:
        store: BaseStore = RedisStore(create_redis(redis_url), name)
    else:
        store = MemoryStore(name)
    logger.info("📦 [STORE] Хранилище '%s' использует бэкенд: %s", name, store.backend)
    return store
