"""Shared application secret coordination."""

from .coordinator import (
    REVALIDATE_SECONDS,
    STORE_SECRET_KEY,
    SecretCoordinator,
    SecretState,
    generate_secret,
    is_valid_secret,
)
from .store import CoordinationStore, RedisCoordinationStore, StoreUnavailableError

__all__ = [
    "SecretCoordinator",
    "SecretState",
    "CoordinationStore",
    "RedisCoordinationStore",
    "StoreUnavailableError",
    "generate_secret",
    "is_valid_secret",
    "REVALIDATE_SECONDS",
    "STORE_SECRET_KEY",
]
