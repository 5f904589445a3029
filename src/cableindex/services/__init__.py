"""Business logic services."""

from cableindex.services.catalog_service import CatalogService
from cableindex.services.deletion_service import DeletionEngine
from cableindex.services.label_service import LabelService, format_ref
from cableindex.services.lifecycle_service import LifecycleService, RecordKind
from cableindex.services.location_service import LocationService
from cableindex.services.sequence_service import SequenceAllocator
from cableindex.services.sid_service import SidService
from cableindex.services.site_service import SiteService
from cableindex.services.usage_service import UsageCounter

__all__ = [
    "CatalogService",
    "DeletionEngine",
    "LabelService",
    "LifecycleService",
    "LocationService",
    "RecordKind",
    "SequenceAllocator",
    "SidService",
    "SiteService",
    "UsageCounter",
    "format_ref",
]
