"""SQLAlchemy ORM models."""

from cableindex.models.base import Base, TimestampMixin
from cableindex.models.catalog import (
    CableType,
    ReferenceKind,
    SidCpuModel,
    SidDeviceModel,
    SidType,
    SiteVlan,
)
from cableindex.models.counter import SequenceKind, SiteCounter
from cableindex.models.label import Label
from cableindex.models.location import LocationTemplate, SiteLocation, coords_key
from cableindex.models.sid import Sid, SidNic, SidNote, SidNoteType
from cableindex.models.site import Site

__all__ = [
    "Base",
    "TimestampMixin",
    "Site",
    "SiteCounter",
    "SequenceKind",
    "SiteLocation",
    "LocationTemplate",
    "coords_key",
    "ReferenceKind",
    "CableType",
    "SidType",
    "SidDeviceModel",
    "SidCpuModel",
    "SiteVlan",
    "Label",
    "Sid",
    "SidNic",
    "SidNote",
    "SidNoteType",
]
