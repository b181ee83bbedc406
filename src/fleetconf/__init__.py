"""fleetconf - settings resolution and secret coordination for application fleets.

## Modules

### Settings (`fleetconf.core.config`)
Bundled defaults layered under one source provider (file, environment or
blank), resolved once per key.

### Shared secret (`fleetconf.core.secrets`)
One 128 character hex application secret agreed on by every process sharing
a Redis, with local fallback when Redis is unavailable.

### Connections (`fleetconf.core.connections`)
PostgreSQL and Redis connection descriptors, including TLS material.

## Quick Start

```python
from fleetconf import ConfigContext

context = ConfigContext.configure()
pool_config = context.database_config()
secret = context.secret_key_base()
```
"""

from .core import PACKAGE_VERSION, ConfigContext

__version__ = PACKAGE_VERSION

__all__ = ["ConfigContext", "__version__"]
