"""Core fleetconf modules.

This package contains settings resolution, shared secret coordination and
connection descriptor synthesis, tied together by ConfigContext.
"""

from .context import ConfigContext
from .version import PACKAGE_NAME, PACKAGE_VERSION, get_package_info

__all__ = [
    "ConfigContext",
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "get_package_info",
]
