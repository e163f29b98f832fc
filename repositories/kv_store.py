"""
Durable key/value stores the cart is persisted to.

Backends implement get/set/delete of string values under string keys:
- InMemoryKeyValueStore: process-local dict (tests, kiosks without persistence)
- RedisKeyValueStore: redis-py client, survives restarts of the host
"""

from typing import Protocol

from redis import Redis


class KeyValueStore(Protocol):

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryKeyValueStore:

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class RedisKeyValueStore:
    """
    Redis-backed store.

    The client must be created with decode_responses=True so reads return str.
    """

    def __init__(self, redis: Redis):
        self.redis = redis

    @classmethod
    def from_config(cls) -> "RedisKeyValueStore":
        import config

        return cls(Redis(
            host=config.REDIS_HOST,
            port=config.REDIS_PORT,
            password=config.REDIS_PASSWORD,
            decode_responses=True
        ))

    def get(self, key: str) -> str | None:
        return self.redis.get(key)

    def set(self, key: str, value: str) -> None:
        self.redis.set(key, value)

    def delete(self, key: str) -> None:
        self.redis.delete(key)
