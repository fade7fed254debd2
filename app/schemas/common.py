"""Shared pydantic base classes and field types."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from app.utils.timestamps import to_iso_z

# Datetimes serialize as 2026-10-20T00:00:00.000Z in JSON
UtcTimestamp = Annotated[
    datetime,
    PlainSerializer(to_iso_z, return_type=str, when_used="json"),
]


class CamelModel(BaseModel):
    """Model exchanged as camelCase JSON (API bodies and stored records).

    Python code uses snake_case attribute names; ``populate_by_name`` lets
    services build instances either way.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_record(self) -> dict:
        """Serialize for storage in the key-value store."""
        return self.model_dump(mode="json", by_alias=True)
