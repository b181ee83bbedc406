"""
No-op provider used for isolated test runs.
"""

import os

from ..coercion import ConfigValue
from .base import SourceProvider
from .env import DEFAULT_ENV_PREFIX


class BlankProvider(SourceProvider):
    """Provider that answers every lookup with the default.

    ``redis_port`` is the one exception: test runners point the suite at a
    throwaway Redis through ``FLEETCONF_REDIS_PORT``, so that key still reads
    the environment.
    """

    ENV_PASSTHROUGH_KEY = "redis_port"

    def __init__(self, prefix: str = DEFAULT_ENV_PREFIX):
        self.prefix = prefix

    @property
    def name(self) -> str:
        return "blank"

    def lookup(self, key: str, default: ConfigValue) -> ConfigValue:
        if key == self.ENV_PASSTHROUGH_KEY:
            value = os.environ.get(f"{self.prefix}{key.upper()}")
            if value is not None:
                return self.resolve(value)
        return self.resolve(default)

    def keys(self) -> set[str]:
        return set()
