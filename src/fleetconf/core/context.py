"""
Process-wide configuration context.

ConfigContext is built once at startup and passed to whatever needs settings,
the shared secret or connection descriptors. It owns:

- the active source provider and the memoized settings above it
- the secret coordinator
- the ``skip_db`` / ``skip_redis`` switches used by tooling that runs
  without backing services

Tests create their own context (usually with the blank provider) or call
``reset()`` between cases instead of mutating module globals.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .config import (
    BlankProvider,
    ConfigValue,
    DefaultsRegistry,
    EnvProvider,
    FileProvider,
    ResolvedSettings,
    SourceProvider,
    load_defaults,
)
from .connections import (
    TEST_ENVIRONMENT,
    DatabaseDescriptor,
    LocalFileSystem,
    RedisDescriptor,
    S3Settings,
    build_database_descriptor,
    build_message_bus_descriptor,
    build_redis_descriptor,
    cdn_hostnames,
    smtp_settings,
)
from .secrets import CoordinationStore, RedisCoordinationStore, SecretCoordinator

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("/etc/fleetconf/fleet.conf")
ENVIRONMENT_VARIABLE = "FLEETCONF_ENV"


def current_environment() -> str:
    return os.environ.get(ENVIRONMENT_VARIABLE, "production")


class ConfigContext:
    """
    Holds every piece of process-wide configuration state.

    ## Usage

    ```python
    from fleetconf import ConfigContext

    context = ConfigContext.configure(path="/etc/fleetconf/fleet.conf")
    context.get("db_host")
    context.secret_key_base()
    context.database_config()
    ```

    When the settings file is missing, the environment provider is used. Under
    the ``test`` environment the blank provider is used unless asked otherwise.

    ## Coordination store

    The secret coordinator talks to the main Redis. By default a client is
    created lazily from ``redis_config()``; pass ``store`` to inject one.
    """

    def __init__(
        self,
        provider: SourceProvider,
        defaults: DefaultsRegistry | None = None,
        environment: str | None = None,
        store: CoordinationStore | None = None,
        fs: LocalFileSystem | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.provider = provider
        self.environment = environment or current_environment()
        self.settings = ResolvedSettings(provider, defaults if defaults is not None else load_defaults())
        self.fs = fs or LocalFileSystem()
        self.environ = environ
        self.skip_db = False
        self.skip_redis = False
        self._store = store
        self.s3 = S3Settings(self.settings)
        self.secrets = SecretCoordinator(
            self.settings,
            store=None,
            store_enabled=lambda: not self.skip_redis,
        )
        logger.debug(f"Configured {provider.name} provider for {self.environment} environment")

    @classmethod
    def configure(
        cls,
        path: str | Path | None = None,
        use_blank_provider: bool | None = None,
        environment: str | None = None,
        **kwargs: Any,
    ) -> "ConfigContext":
        """Select the source provider and build a context around it.

        Args:
            path: Settings file, defaults to ``/etc/fleetconf/fleet.conf``.
            use_blank_provider: Force the blank provider. Defaults to True under
                                the test environment.
            environment: Environment name, defaults to ``FLEETCONF_ENV`` or ``production``.
        """
        environment = environment or current_environment()
        if use_blank_provider is None:
            use_blank_provider = environment == TEST_ENVIRONMENT

        provider: SourceProvider
        if use_blank_provider:
            provider = BlankProvider()
        else:
            provider = FileProvider.from_path(path or DEFAULT_SETTINGS_PATH) or EnvProvider()
        logger.info(f"Using {provider.name} settings provider")
        return cls(provider, environment=environment, **kwargs)

    def get(self, key: str) -> ConfigValue:
        return self.settings.get(key)

    def register(self, key: str, default: ConfigValue) -> None:
        self.settings.register(key, default)

    def add_default(self, key: str, default: ConfigValue) -> None:
        self.settings.add_default(key, default)

    @property
    def store(self) -> CoordinationStore:
        if self._store is None:
            self._store = RedisCoordinationStore.from_kwargs(**self.redis_config().to_kwargs())
        return self._store

    def secret_key_base(self) -> str:
        """Return the fleet-wide application secret."""
        if self.secrets.store is None and not self.skip_redis:
            self.secrets.store = self.store
        return self.secrets.secret_key_base()

    def database_config(self, variables_overrides: Mapping[str, Any] | None = None) -> dict[str, dict]:
        """Database settings keyed by environment name, as connection pools expect."""
        return {self.environment: self.database_descriptor(variables_overrides).to_kwargs()}

    def database_descriptor(self, variables_overrides: Mapping[str, Any] | None = None) -> DatabaseDescriptor:
        return build_database_descriptor(
            self.settings, variables_overrides, environ=self.environ, fs=self.fs
        )

    def redis_config(self) -> RedisDescriptor:
        return build_redis_descriptor(
            self.settings, self.environment, environ=self.environ, fs=self.fs
        )

    def message_bus_redis_config(self) -> RedisDescriptor:
        return build_message_bus_descriptor(
            self.settings, self.environment, environ=self.environ, fs=self.fs
        )

    def cdn_hostnames(self) -> list[str]:
        return cdn_hostnames(self.settings)

    def smtp_settings(self) -> dict[str, Any] | None:
        return smtp_settings(self.settings)

    def use_s3(self) -> bool:
        return self.s3.use_s3()

    def s3_bucket_name(self) -> str | None:
        return self.s3.bucket_name()

    def load_plugins(self) -> bool:
        flag = os.environ.get("LOAD_PLUGINS")
        if flag == "1":
            return True
        if flag == "0":
            return False
        return self.environment != TEST_ENVIRONMENT

    def reset(self) -> None:
        """Forget cached settings, the secret and S3 state. Intended for tests."""
        self.settings.reset()
        self.secrets.reset()
        self.s3.reset()

    def close(self) -> None:
        if isinstance(self._store, RedisCoordinationStore):
            self._store.close()
        self._store = None
        self.secrets.store = None

    def __enter__(self) -> "ConfigContext":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
