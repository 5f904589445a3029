"""Pydantic schemas for validation and serialization."""

from cableindex.schemas.catalog import (
    CableTypeCreate,
    CableTypeUpdate,
    CatalogEntryCreate,
    CatalogEntryResponse,
    CatalogEntryUpdate,
    CpuModelCreate,
    CpuModelUpdate,
    DeviceModelCreate,
    DeviceModelUpdate,
    SidTypeCreate,
    SidTypeUpdate,
    VlanCreate,
    VlanUpdate,
)
from cableindex.schemas.deletion import (
    DeleteStrategy,
    DeletionResult,
    ReassignRequest,
    UsageBreakdown,
    resolve_strategy,
)
from cableindex.schemas.label import (
    BulkDeleteRequest,
    BulkDeleteResult,
    LabelCreate,
    LabelPage,
    LabelResponse,
    LabelUpdate,
)
from cableindex.schemas.location import (
    DatacentreLocationCreate,
    DomesticLocationCreate,
    LocationCreate,
    LocationResponse,
    LocationUsageResponse,
    LocationUpdate,
)
from cableindex.schemas.sid import (
    NicCreate,
    NicResponse,
    NoteCreate,
    NoteResponse,
    SidCreate,
    SidDetailResponse,
    SidResponse,
)
from cableindex.schemas.site import SiteCreate, SiteResponse, SiteUpdate

__all__ = [
    "SiteCreate",
    "SiteUpdate",
    "SiteResponse",
    "LocationCreate",
    "DatacentreLocationCreate",
    "DomesticLocationCreate",
    "LocationUpdate",
    "LocationResponse",
    "LocationUsageResponse",
    "CatalogEntryCreate",
    "CatalogEntryUpdate",
    "CatalogEntryResponse",
    "CableTypeCreate",
    "CableTypeUpdate",
    "SidTypeCreate",
    "SidTypeUpdate",
    "DeviceModelCreate",
    "DeviceModelUpdate",
    "CpuModelCreate",
    "CpuModelUpdate",
    "VlanCreate",
    "VlanUpdate",
    "LabelCreate",
    "LabelPage",
    "LabelUpdate",
    "LabelResponse",
    "BulkDeleteRequest",
    "BulkDeleteResult",
    "SidCreate",
    "SidDetailResponse",
    "SidResponse",
    "NicCreate",
    "NicResponse",
    "NoteCreate",
    "NoteResponse",
    "DeleteStrategy",
    "UsageBreakdown",
    "DeletionResult",
    "ReassignRequest",
    "resolve_strategy",
]
