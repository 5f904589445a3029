"""Label schemas for validation and responses."""

from datetime import datetime

from pydantic import BaseModel, Field


class LabelCreate(BaseModel):
    """Label creation data."""

    source_location_id: int = Field(..., ge=1)
    destination_location_id: int = Field(..., ge=1)
    cable_type_id: int | None = Field(None, ge=1)
    type: str = Field("cable", min_length=1, max_length=32)
    notes: str | None = None


class LabelUpdate(BaseModel):
    """Label update data; references and numbering are immutable."""

    type: str | None = Field(None, min_length=1, max_length=32)
    notes: str | None = None


class LabelResponse(BaseModel):
    """Label response data."""

    id: int
    site_id: int
    ref_number: int
    ref_string: str
    source_location_id: int
    destination_location_id: int
    cable_type_id: int | None
    type: str
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BulkDeleteRequest(BaseModel):
    """Ids to delete in one transaction."""

    ids: list[int] = Field(..., min_length=1, max_length=1000)


class BulkDeleteResult(BaseModel):
    """Outcome of a bulk delete."""

    requested: int
    deleted: int


class LabelPage(BaseModel):
    """One page of labels."""

    items: list[LabelResponse]
    total: int
