"""
Shared pydantic base for formcraft records.

Python attributes are snake_case; the JSON wire format is camelCase.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FormcraftModel(BaseModel):
    """Base model: camelCase aliases, accepts either naming on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-ready dictionary using wire (camelCase) names."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def wire_name(cls, field_name: str) -> str:
        """Wire name of a field, accepting the attribute, wire or any legacy input name."""
        for name, info in cls.model_fields.items():
            alias = info.serialization_alias or info.alias or name
            accepted = {name, alias}
            if isinstance(info.validation_alias, AliasChoices):
                accepted.update(c for c in info.validation_alias.choices if isinstance(c, str))
            elif isinstance(info.validation_alias, str):
                accepted.add(info.validation_alias)
            if field_name in accepted:
                return alias
        return field_name
