"""
Base model and configuration for Place Lookup.

All request, response and upstream payload models derive from
``BaseLookupModel`` so they share validation and serialization settings.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseLookupModel(BaseModel):
    """
    Base model for all Place Lookup data structures.

    Unknown keys are ignored so upstream payloads can grow without breaking
    decoding, and fields may be populated either by name or by alias.
    """

    model_config = ConfigDict(
        # Enable validation on assignment
        validate_assignment=True,
        # Allow extra fields for flexibility with external APIs
        extra="ignore",
        # Accept both snake_case names and camelCase aliases
        populate_by_name=True,
        # Validate default values
        validate_default=True,
    )

    def model_dump_wire(self) -> dict[str, Any]:
        """Serialize to the JSON shape returned to API callers."""
        return self.model_dump(mode="json", by_alias=True)
