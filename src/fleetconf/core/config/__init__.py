"""
Layered settings resolution.

Settings are resolved from two layers:

1. **Defaults**: the bundled ``defaults.conf`` table, loaded once
2. **Source provider**: exactly one active origin per context

## Source Providers

- `FileProvider`: flat ``key = value`` file such as ``/etc/fleetconf/fleet.conf``
- `EnvProvider`: ``FLEETCONF_<KEY>`` environment variables
- `BlankProvider`: defaults only, for isolated test runs

## Quick Start

```python
from fleetconf.core.config import EnvProvider, ResolvedSettings, load_defaults

settings = ResolvedSettings(EnvProvider(), load_defaults())
settings.get("db_pool")  # 8 unless FLEETCONF_DB_POOL is set
```

Raw values are coerced the same way for every provider: ``"true"`` and
``"false"`` become booleans, digit-only values become integers, everything else
is kept as a string. Each key is resolved once and cached.
"""

from .coercion import ConfigValue, coerce, is_present
from .defaults import DefaultsRegistry, load_defaults
from .providers import BlankProvider, EnvProvider, FileProvider, SourceProvider
from .settings import ResolvedSettings

__all__ = [
    # Types
    "ConfigValue",
    # Providers
    "SourceProvider",
    "FileProvider",
    "EnvProvider",
    "BlankProvider",
    # Resolution
    "DefaultsRegistry",
    "ResolvedSettings",
    # Utilities
    "coerce",
    "is_present",
    "load_defaults",
]
