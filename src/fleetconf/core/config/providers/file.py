"""
File-backed provider.

This module provides the FileProvider class for reading flat ``key = value``
settings files such as ``fleet.conf``.
"""

import logging
import re
from pathlib import Path

from ..coercion import ConfigValue
from .base import SourceProvider

logger = logging.getLogger(__name__)


class FileProvider(SourceProvider):
    """Provider backed by a flat ``key = value`` settings file.

    Supported syntax, one setting per line:

        db_host = "db.internal"
        db_name = 'fleet'
        db_pool = 25   # bare values stop at the comment marker
        # whole-line comments are ignored

    A key that is present in the file always wins over the caller's default,
    even when its value is empty.
    """

    LINE_PATTERN = re.compile(
        r"""\A\s*([a-z_]+[a-z0-9_]*)\s*=\s*("([^"]*)"|'([^']*)'|[^#]*)"""
    )

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.data: dict[str, str] = {}

    @classmethod
    def from_path(cls, path: str | Path) -> "FileProvider | None":
        """Parse a settings file, returning None when it does not exist."""
        path = Path(path)
        if not path.exists():
            logger.debug(f"Settings file not found at {path}")
            return None

        provider = cls(path)
        provider.read()
        return provider

    @classmethod
    def from_text(cls, text: str, path: str | Path = "<memory>") -> "FileProvider":
        """Build a provider from already-loaded file contents."""
        provider = cls(path)
        provider.parse(text)
        return provider

    @property
    def name(self) -> str:
        return "file"

    def read(self) -> None:
        self.parse(self.path.read_text(encoding="utf-8"))
        logger.debug(f"Loaded {len(self.data)} settings from {self.path}")

    def parse(self, text: str) -> None:
        for line in text.splitlines():
            match = self.LINE_PATTERN.match(line)
            if not match:
                continue
            key = match.group(1).strip()
            single_quoted = match.group(4)
            double_quoted = match.group(3)
            raw = single_quoted if single_quoted is not None else double_quoted
            if raw is None:
                raw = match.group(2)
            self.data[key] = raw.strip()

    def lookup(self, key: str, default: ConfigValue) -> ConfigValue:
        if key in self.data:
            return self.resolve(self.data[key])
        return self.resolve(default)

    def keys(self) -> set[str]:
        return set(self.data)
