"""
Environment-backed provider.

This module provides the EnvProvider class, which reads settings from
prefixed environment variables such as ``FLEETCONF_DB_HOST``.
"""

import logging
import os

from ..coercion import ConfigValue
from .base import SourceProvider

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "FLEETCONF_"


class EnvProvider(SourceProvider):
    """Provider reading a live view of the process environment.

    The key ``db_host`` maps to ``FLEETCONF_DB_HOST``. A variable that is set,
    even to the empty string, wins over the default.
    """

    def __init__(self, prefix: str = DEFAULT_ENV_PREFIX):
        self.prefix = prefix

    @property
    def name(self) -> str:
        return "env"

    def env_name(self, key: str) -> str:
        return f"{self.prefix}{key.upper()}"

    def lookup(self, key: str, default: ConfigValue) -> ConfigValue:
        value = os.environ.get(self.env_name(key))
        if value is None:
            return self.resolve(default)
        return self.resolve(value)

    def keys(self) -> set[str]:
        return {
            name[len(self.prefix) :].lower()
            for name in os.environ
            if name.startswith(self.prefix) and len(name) > len(self.prefix)
        }
