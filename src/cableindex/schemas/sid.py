"""SID schemas for validation and responses."""

from datetime import datetime

from pydantic import BaseModel, Field

from cableindex.models import SidNoteType


class SidCreate(BaseModel):
    """SID creation data."""

    sid_type_id: int | None = Field(None, ge=1)
    device_model_id: int | None = Field(None, ge=1)
    cpu_model_id: int | None = Field(None, ge=1)
    location_id: int | None = Field(None, ge=1)
    rack_u: str | None = Field(None, max_length=16)
    hostname: str | None = Field(None, max_length=255)
    serial_number: str | None = Field(None, max_length=255)
    status: str | None = Field(None, max_length=64)
    cpu_count: int | None = Field(None, ge=0)
    ram_gb: float | None = Field(None, ge=0)
    os_name: str | None = None
    os_version: str | None = None
    mgmt_ip: str | None = None
    mgmt_mac: str | None = None


class SidResponse(SidCreate):
    """SID response data."""

    id: int
    site_id: int
    sid_number: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class NicCreate(BaseModel):
    """NIC creation data."""

    name: str = Field(..., min_length=1, max_length=255)
    mac_address: str | None = None
    ip_address: str | None = None
    site_vlan_id: int | None = Field(None, ge=1)


class NicResponse(NicCreate):
    """NIC response data."""

    id: int
    sid_id: int

    model_config = {"from_attributes": True}


class NoteCreate(BaseModel):
    """Note creation data."""

    note_text: str = Field(..., min_length=1)
    type: SidNoteType = SidNoteType.NOTE
    pinned: bool = False


class NoteResponse(NoteCreate):
    """Note response data."""

    id: int
    sid_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class SidDetailResponse(SidResponse):
    """SID with its NICs and notes."""

    nics: list[NicResponse] = Field(default_factory=list)
    notes: list[NoteResponse] = Field(default_factory=list)
