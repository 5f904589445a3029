"""Catalog schemas (cable types, SID types, device/CPU models, VLANs)."""

from datetime import datetime

from pydantic import BaseModel, Field


class CatalogEntryCreate(BaseModel):
    """Fields shared by every named catalog entry."""

    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)


class CableTypeCreate(CatalogEntryCreate):
    """Cable type creation data."""

    pass


class SidTypeCreate(CatalogEntryCreate):
    """SID type creation data."""

    pass


class DeviceModelCreate(CatalogEntryCreate):
    """Device model creation data."""

    manufacturer: str | None = Field(None, max_length=255)


class CpuModelCreate(CatalogEntryCreate):
    """CPU model creation data."""

    manufacturer: str | None = Field(None, max_length=255)
    cpu_cores: int | None = Field(None, ge=1)
    cpu_threads: int | None = Field(None, ge=1)


class VlanCreate(CatalogEntryCreate):
    """VLAN creation data."""

    vlan_id: int = Field(..., ge=1, le=4094)


class CatalogEntryUpdate(BaseModel):
    """Fields shared by every catalog entry update; unset fields are kept."""

    model_config = {"str_strip_whitespace": True}

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)


class CableTypeUpdate(CatalogEntryUpdate):
    """Cable type update data."""

    pass


class SidTypeUpdate(CatalogEntryUpdate):
    """SID type update data."""

    pass


class DeviceModelUpdate(CatalogEntryUpdate):
    manufacturer: str | None = Field(None, max_length=255)


class CpuModelUpdate(CatalogEntryUpdate):
    manufacturer: str | None = Field(None, max_length=255)
    cpu_cores: int | None = Field(None, ge=1)
    cpu_threads: int | None = Field(None, ge=1)


class VlanUpdate(CatalogEntryUpdate):
    vlan_id: int | None = Field(None, ge=1, le=4094)


class CatalogEntryResponse(BaseModel):
    """Catalog entry response data; kind-specific fields are optional."""

    id: int
    site_id: int
    name: str
    description: str | None = None
    manufacturer: str | None = None
    cpu_cores: int | None = None
    cpu_threads: int | None = None
    vlan_id: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
