"""Base model with common configuration for API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel as PydanticBaseModel
from pydantic import ConfigDict


class BaseModel(PydanticBaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_row(self, columns: list[str]) -> dict[str, Any]:
        """Convert model to row dict for table output."""
        data = self.to_dict()
        return {col: data.get(col, "") for col in columns}
