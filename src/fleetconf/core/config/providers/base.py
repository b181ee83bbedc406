"""
Base class for settings source providers.

A source provider answers lookups from exactly one concrete origin (a file,
the process environment, or nothing at all). Every provider shares the same
coercion rules, so callers never need to know where a value came from.
"""

from abc import ABC, abstractmethod

from ..coercion import ConfigValue, coerce


class SourceProvider(ABC):
    """
    Abstract base class for settings source providers.

    ## Implementation Requirements

    - `name`: Return a short identifier used in log messages
    - `lookup`: Return the coerced value for a key, or the coerced default.
      Must never raise for an unknown key.
    - `keys`: Return every key this source can answer for. The union of these
      keys and the bundled defaults defines the full settings surface.

    ## Example

    ```python
    class DictProvider(SourceProvider):
        def __init__(self, data):
            self._data = data

        @property
        def name(self) -> str:
            return "dict"

        def lookup(self, key, default):
            if key in self._data:
                return self.resolve(self._data[key])
            return self.resolve(default)

        def keys(self):
            return set(self._data)
    ```
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this provider."""
        pass

    @abstractmethod
    def lookup(self, key: str, default: ConfigValue) -> ConfigValue:
        """Look up a key, falling back to the default."""
        pass

    @abstractmethod
    def keys(self) -> set[str]:
        """List every key this provider can answer for."""
        pass

    @staticmethod
    def resolve(value: ConfigValue) -> ConfigValue:
        """Apply the shared coercion rules to a raw value."""
        return coerce(value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"
