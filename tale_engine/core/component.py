"""
Component base classes for data-only records.

Components are pure data containers. Game rules live in plain functions
and systems that take components as input, which keeps:
- Serialization trivial (model_dump / model_validate)
- Snapshots cheap (clone before a transition, swap on success)
- Testing easy

Usage:
    class Wallet(Component):
        gold: int = 0

    class Location(ContentModel):
        id: str
        display_name: str     # parsed from "displayName"
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Component(BaseModel):
    """
    Base class for mutable runtime records.

    Uses Pydantic for:
    - Validation on construction and assignment
    - JSON serialization of session snapshots
    - Default values

    Field names are snake_case in Python and camelCase on the wire, so a
    snapshot written by model_dump(by_alias=True) reads the same as the
    script documents it was built from.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra='forbid',
        use_enum_values=False,
    )

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)

    def to_payload(self) -> dict:
        """Dump to a JSON-compatible dict using wire (camelCase) names."""
        return self.model_dump(mode='json', by_alias=True)


class ContentModel(Component):
    """
    Base class for immutable authored content.

    Script documents come from external tools, so unknown keys are
    ignored rather than rejected. Instances are frozen once parsed.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='ignore',
        frozen=True,
    )
