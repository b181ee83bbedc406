"""Bundled baseline settings.

The defaults table ships inside the package as ``defaults.conf`` and is parsed
with the same FileProvider used for site settings files.
"""

import logging
from importlib import resources
from pathlib import Path

from .coercion import ConfigValue
from .providers import FileProvider

logger = logging.getLogger(__name__)

DEFAULTS_RESOURCE = "defaults.conf"


class DefaultsRegistry:
    """Key to default value table loaded once at configuration time."""

    def __init__(self, defaults: dict[str, ConfigValue] | None = None):
        self._defaults: dict[str, ConfigValue] = dict(defaults or {})

    @classmethod
    def from_provider(cls, provider: FileProvider | None) -> "DefaultsRegistry":
        if provider is None:
            return cls()
        return cls({key: provider.lookup(key, None) for key in provider.keys()})

    def get(self, key: str) -> ConfigValue:
        return self._defaults.get(key)

    def put(self, key: str, default: ConfigValue) -> None:
        self._defaults[key] = default

    def keys(self) -> set[str]:
        return set(self._defaults)

    def __contains__(self, key: object) -> bool:
        return key in self._defaults

    def __len__(self) -> int:
        return len(self._defaults)


def load_defaults(path: str | Path | None = None) -> DefaultsRegistry:
    """Load the baseline defaults table.

    Args:
        path: Optional path to an alternative defaults file. When omitted the
              bundled ``defaults.conf`` resource is used.

    Returns:
        DefaultsRegistry with one entry per key in the file. A missing file
        yields an empty registry.
    """
    if path is not None:
        provider = FileProvider.from_path(path)
        if provider is None:
            logger.warning(f"Defaults file not found at {path}, continuing without defaults")
        return DefaultsRegistry.from_provider(provider)

    resource = resources.files(__package__).joinpath(DEFAULTS_RESOURCE)
    text = resource.read_text(encoding="utf-8")
    registry = DefaultsRegistry.from_provider(FileProvider.from_text(text, path=str(resource)))
    logger.debug(f"Loaded {len(registry)} bundled defaults")
    return registry
