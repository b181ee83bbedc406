"""
Providers subpackage.

This subpackage contains the source provider implementations a
ConfigContext can be configured with.
"""

from .base import SourceProvider
from .blank import BlankProvider
from .env import DEFAULT_ENV_PREFIX, EnvProvider
from .file import FileProvider

__all__ = ["SourceProvider", "FileProvider", "EnvProvider", "BlankProvider", "DEFAULT_ENV_PREFIX"]
