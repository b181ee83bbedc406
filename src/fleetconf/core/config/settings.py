"""Memoized settings accessor.

ResolvedSettings sits above the defaults registry and the active source
provider. Each key is resolved on first access and cached for the lifetime of
the object; the provider is consulted at most once per key.
"""

import logging
from typing import Any

from .coercion import ConfigValue, is_present
from .defaults import DefaultsRegistry
from .providers import SourceProvider

logger = logging.getLogger(__name__)

# Cached in place of None so "resolved to nothing" is distinguishable from
# "not resolved yet".
_MISSING: Any = object()


class ResolvedSettings:
    """Per-key memoized view over defaults and one source provider.

    Example:
        ```python
        settings = ResolvedSettings(EnvProvider(), load_defaults())
        settings.get("db_pool")   # provider consulted
        settings.get("db_pool")   # served from cache
        ```
    """

    def __init__(self, provider: SourceProvider, defaults: DefaultsRegistry):
        self.provider = provider
        self.defaults = defaults
        self._cache: dict[str, Any] = {}
        self._surface: set[str] = defaults.keys() | provider.keys()

    def get(self, key: str) -> ConfigValue:
        """Return the resolved value for a key, or None."""
        value = self._cache.get(key)
        if value is None:
            value = self.provider.lookup(key, self.defaults.get(key))
            if value is None:
                value = _MISSING
            self._cache[key] = value
            logger.debug(f"Resolved setting {key} via {self.provider.name} provider")
        return None if value is _MISSING else value

    def __getitem__(self, key: str) -> ConfigValue:
        return self.get(key)

    def is_present(self, key: str) -> bool:
        return is_present(self.get(key))

    def keys(self) -> set[str]:
        """Every key of the settings surface (defaults plus provider keys)."""
        return set(self._surface)

    def keys_with_prefix(self, prefix: str) -> list[str]:
        return sorted(key for key in self._surface if key.startswith(prefix))

    def __contains__(self, key: object) -> bool:
        return key in self._surface

    def register(self, key: str, default: ConfigValue) -> None:
        """Add a key with a default to the surface, dropping any cached value."""
        self.defaults.put(key, default)
        self._surface.add(key)
        self._cache.pop(key, None)

    def add_default(self, key: str, default: ConfigValue) -> None:
        """Register a default only for keys the surface does not know yet."""
        if key not in self._surface:
            self.register(key, default)

    def reset(self) -> None:
        """Forget every cached value. Intended for test isolation."""
        self._cache.clear()
