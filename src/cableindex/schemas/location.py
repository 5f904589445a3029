"""Location schemas for validation and responses.

Each location template is its own model; ``LocationCreate`` is the tagged
union of them, discriminated on ``template_type``.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Discriminator, Field, Tag, field_validator

from cableindex.models import LocationTemplate

Coordinate = Annotated[str, Field(min_length=1, max_length=50)]


def _must_be_blank(value: str | None, template: str) -> None:
    if value is not None and value.strip():
        raise ValueError(f"must be empty for {template} locations")


class _LocationFields(BaseModel):
    model_config = {"str_strip_whitespace": True}

    floor: Coordinate
    label: str | None = Field(None, max_length=255)

    @field_validator("label")
    @classmethod
    def blank_label_is_none(cls, value: str | None) -> str | None:
        return value or None


class DatacentreLocationCreate(_LocationFields):
    """Rack position: floor, suite, row and rack are all required."""

    template_type: Literal["DATACENTRE"] = "DATACENTRE"
    suite: Coordinate
    row: Coordinate
    rack: Coordinate
    area: str | None = None

    @field_validator("area")
    @classmethod
    def no_area(cls, value: str | None) -> None:
        _must_be_blank(value, "Datacentre")
        return None


class DomesticLocationCreate(_LocationFields):
    """Free-form area: floor and area are required."""

    template_type: Literal["DOMESTIC"]
    area: Annotated[str, Field(min_length=1, max_length=64)]
    suite: str | None = None
    row: str | None = None
    rack: str | None = None

    @field_validator("suite", "row", "rack")
    @classmethod
    def no_rack_coordinates(cls, value: str | None) -> None:
        _must_be_blank(value, "Domestic")
        return None


def _template_tag(value) -> str:
    # Missing template defaults to DATACENTRE, as older clients never send it.
    if isinstance(value, dict):
        tag = value.get("template_type") or LocationTemplate.DATACENTRE
    else:
        tag = getattr(value, "template_type", LocationTemplate.DATACENTRE)
    return tag.value if isinstance(tag, LocationTemplate) else str(tag)


LocationCreate = Annotated[
    Union[
        Annotated[DatacentreLocationCreate, Tag("DATACENTRE")],
        Annotated[DomesticLocationCreate, Tag("DOMESTIC")],
    ],
    Discriminator(_template_tag),
]


class LocationUpdate(BaseModel):
    """Location update data.

    Unset fields keep their stored value. The merged location is validated
    against its template again, so switching template means clearing the
    coordinates the new template forbids.
    """

    template_type: Literal["DATACENTRE", "DOMESTIC"] | None = None
    floor: str | None = Field(None, max_length=50)
    suite: str | None = Field(None, max_length=50)
    row: str | None = Field(None, max_length=50)
    rack: str | None = Field(None, max_length=50)
    area: str | None = Field(None, max_length=64)
    label: str | None = Field(None, max_length=255)


class LocationResponse(BaseModel):
    """Location response data."""

    id: int
    site_id: int
    template_type: LocationTemplate
    floor: str
    suite: str | None
    row: str | None
    rack: str | None
    area: str | None
    label: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class LocationUsageResponse(BaseModel):
    """Location with the number of records referencing it per role."""

    location: LocationResponse
    usage: dict[str, int]
