"""Domain models for ic_items — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.ic_common.datetime_utils import parse_iso

NAME_MAX_LENGTH = 255


@dataclass
class Item:
    id: int
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe snapshot used for cache entries."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            description=data.get("description"),
            created_at=parse_iso(data["created_at"]),
            updated_at=parse_iso(data["updated_at"]),
        )
