"""Base Pydantic models for fleetconf.

This module provides the base model class that all fleetconf Pydantic models inherit from.
It establishes consistent configuration across all models:

- Strict field validation (no extra fields allowed)
- Consistent serialization behavior for driver keyword arguments

Example:
    >>> from fleetconf.models import FleetBaseModel
    >>>
    >>> class Endpoint(FleetBaseModel):
    ...     host: str
    ...     port: int | None = None
    >>>
    >>> Endpoint(host="db1").to_kwargs()
    {'host': 'db1'}
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class FleetBaseModel(BaseModel):
    """Base model for all fleetconf Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Descriptors are handed to drivers and must not drift afterwards

    Models carrying third-party objects (certificates, keys) opt into
    ``arbitrary_types_allowed`` on their own.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    def to_kwargs(self) -> dict[str, Any]:
        """Dump the model as a plain dictionary, leaving out unset (None) fields."""
        return self.model_dump(exclude_none=True)
