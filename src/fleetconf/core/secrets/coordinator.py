"""
Fleet-wide application secret.

The SecretCoordinator hands out one 128 character hex secret that every
process sharing the same Redis agrees on:

1. A valid ``secret_key_base`` setting is trusted as-is.
2. With Redis disabled, a random secret is generated for this process only.
3. Otherwise Redis holds the secret under ``SECRET_TOKEN``; a missing or
   malformed entry is replaced by a freshly generated one (last writer wins).

Processes that adopted the Redis value re-check the store at most every
``REVALIDATE_SECONDS`` and re-seed it when the entry disappeared. A store that
cannot be reached during the first acquisition never fails the caller; the
process falls back to a secret of its own.
"""

import enum
import logging
import re
import secrets
import time
from collections.abc import Callable

from ..config.coercion import is_present
from ..config.settings import ResolvedSettings
from .store import CoordinationStore, StoreUnavailableError

logger = logging.getLogger(__name__)

VALID_SECRET_KEY = re.compile(r"\A[0-9a-f]{128}\Z")

# Named SECRET_TOKEN rather than SECRET_KEY_BASE for compatibility with
# fleets that already store it under that name.
STORE_SECRET_KEY = "SECRET_TOKEN"

REVALIDATE_SECONDS = 30


class SecretState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOCAL_TRUSTED = "local_trusted"
    CACHE_BACKED = "cache_backed"


def generate_secret() -> str:
    """Return a fresh 128 character lowercase hex secret."""
    return secrets.token_hex(64)


def is_valid_secret(value: object) -> bool:
    return isinstance(value, str) and VALID_SECRET_KEY.match(value) is not None


class SecretCoordinator:
    """Derives and maintains the shared application secret.

    Args:
        settings: Resolved settings, consulted for ``secret_key_base``.
        store: Coordination store, or None when Redis is disabled.
        store_enabled: Callable returning False when Redis access is skipped.
        clock: Time source in seconds, injectable for tests.
    """

    def __init__(
        self,
        settings: ResolvedSettings,
        store: CoordinationStore | None = None,
        store_enabled: Callable[[], bool] | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.settings = settings
        self.store = store
        self._store_enabled = store_enabled or (lambda: True)
        self._clock = clock
        self._secret: str | None = None
        self._state = SecretState.UNINITIALIZED
        self._last_validated: float | None = None

    @property
    def state(self) -> SecretState:
        return self._state

    @property
    def uses_store(self) -> bool:
        return self.store is not None and self._store_enabled()

    def secret_key_base(self) -> str:
        """Return the shared secret, acquiring or revalidating it as needed."""
        if self._secret is not None:
            if self._state is SecretState.CACHE_BACKED:
                self._revalidate()
            return self._secret

        try:
            secret = self._acquire()
        except StoreUnavailableError as e:
            logger.warning(
                f"Coordination store unavailable ({e}), using a process-local secret"
            )
            secret = generate_secret()
            self._state = SecretState.LOCAL_TRUSTED
            self._last_validated = None

        self._warn_if_replaced(secret)
        self._secret = secret
        return secret

    def reset(self) -> None:
        """Drop the cached secret. Intended for test isolation."""
        self._secret = None
        self._state = SecretState.UNINITIALIZED
        self._last_validated = None

    def _acquire(self) -> str:
        configured = self.settings.get("secret_key_base")
        if is_valid_secret(configured):
            self._state = SecretState.LOCAL_TRUSTED
            return configured

        if not self.uses_store:
            logger.debug("Coordination store disabled, generating a process-local secret")
            self._state = SecretState.LOCAL_TRUSTED
            return generate_secret()

        assert self.store is not None
        token = self.store.get(STORE_SECRET_KEY)
        if not is_valid_secret(token):
            token = generate_secret()
            logger.info("No valid shared secret in coordination store, seeding a new one")
            self.store.set(STORE_SECRET_KEY, token)

        self._state = SecretState.CACHE_BACKED
        self._last_validated = self._clock()
        return token

    def _revalidate(self) -> None:
        now = self._clock()
        if self._last_validated is not None and now - self._last_validated <= REVALIDATE_SECONDS:
            return

        self._last_validated = now
        assert self.store is not None
        try:
            token = self.store.get(STORE_SECRET_KEY)
            if token is None:
                logger.warning("Shared secret vanished from coordination store, re-seeding it")
                self.store.set(STORE_SECRET_KEY, self._secret)
        except StoreUnavailableError as e:
            logger.warning(f"Could not revalidate shared secret: {e}")

    def _warn_if_replaced(self, secret: str) -> None:
        configured = self.settings.get("secret_key_base")
        if is_present(configured) and secret != configured:
            logger.warning("secret_key_base setting is invalid, it was re-generated")
