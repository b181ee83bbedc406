"""Distributed coordination store boundary.

The secret coordinator only needs ``get`` and ``set`` on a shared key-value
store. Store failures are surfaced as StoreUnavailableError so callers can
tell an unreachable or read-only store apart from programming errors.
"""

import logging
from typing import Protocol

import redis

logger = logging.getLogger(__name__)


class StoreUnavailableError(Exception):
    """The coordination store could not be read or written."""

    def __init__(self, message: str, *, read_only: bool = False):
        super().__init__(message)
        self.read_only = read_only


class CoordinationStore(Protocol):
    """Shared key-value store used as the cross-process source of truth."""

    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...


class RedisCoordinationStore:
    """CoordinationStore backed by a redis-py client.

    Keys are written without any application namespace so every process of
    the fleet sees the same entry.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_kwargs(cls, **kwargs) -> "RedisCoordinationStore":
        """Create a store from redis connection keyword arguments."""
        return cls(redis.Redis(**kwargs))

    def get(self, name: str) -> str | None:
        try:
            value = self.client.get(name)
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError(f"Failed to read {name} from redis: {e}") from e
        except OSError as e:
            raise StoreUnavailableError(f"Redis unreachable while reading {name}: {e}") from e

        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError as e:
                # Never a valid secret, so callers see it as malformed.
                logger.warning(f"Redis value for {name} is not valid UTF-8 ({e})")
                return value.decode("utf-8", errors="replace")
        return value

    def set(self, name: str, value: str) -> None:
        try:
            self.client.set(name, value)
        except redis.exceptions.ReadOnlyError as e:
            raise StoreUnavailableError(f"Redis is read-only, cannot write {name}", read_only=True) from e
        except redis.exceptions.RedisError as e:
            raise StoreUnavailableError(f"Failed to write {name} to redis: {e}") from e
        except OSError as e:
            raise StoreUnavailableError(f"Redis unreachable while writing {name}: {e}") from e

    def close(self) -> None:
        self.client.close()
