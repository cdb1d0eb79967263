"""Pydantic schemas for ic_items API requests and responses."""

from pydantic import BaseModel, Field, model_validator

from src.ic_items.domain.models import NAME_MAX_LENGTH, Item

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ItemCreateRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    description: str = Field(..., min_length=1)


class ItemUpdateRequest(BaseModel):
    """Partial update: omitted fields keep their stored values."""

    name: str | None = Field(None, min_length=1, max_length=NAME_MAX_LENGTH)
    description: str | None = Field(None, min_length=1)

    @model_validator(mode="after")
    def at_least_one_field(self) -> "ItemUpdateRequest":
        if self.name is None and self.description is None:
            raise ValueError("At least one valid field (name or description) is required")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ItemResponse(BaseModel):
    id: int
    name: str
    description: str | None
    created_at: str  # ISO8601 string
    updated_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, item: Item) -> "ItemResponse":
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            created_at=item.created_at.isoformat(),
            updated_at=item.updated_at.isoformat(),
        )


class ItemListResponse(BaseModel):
    items: list[ItemResponse]
    count: int
