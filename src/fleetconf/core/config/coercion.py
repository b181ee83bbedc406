"""Value coercion shared by every source provider.

Raw settings arrive as strings. They are converted by fixed syntactic rules:

- ``"true"`` / ``"false"`` become booleans
- a value made only of digits (surrounding whitespace ignored) becomes an int
- anything else is kept as-is, including the empty string
- ``None`` stays ``None`` so "absent" never collapses into ``""``
"""

import re
from typing import Union

ConfigValue = Union[str, int, bool, None]

_INTEGER_PATTERN = re.compile(r"\A([0-9]+)\Z")


def coerce(value: ConfigValue) -> ConfigValue:
    """Coerce a raw setting into its typed value."""
    if not isinstance(value, str):
        return value

    if value == "true":
        return True
    if value == "false":
        return False

    match = _INTEGER_PATTERN.match(value.strip())
    if match:
        return int(match.group(1))

    return value


def is_present(value: ConfigValue) -> bool:
    """Return True when a value carries information.

    ``None``, ``False`` and blank strings are treated as not present. ``0`` is present.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True
