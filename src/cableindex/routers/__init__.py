"""HTTP routers."""

from cableindex.routers.catalog import router as catalog_router
from cableindex.routers.labels import router as labels_router
from cableindex.routers.locations import router as locations_router
from cableindex.routers.sids import router as sids_router
from cableindex.routers.sites import router as sites_router

__all__ = [
    "catalog_router",
    "labels_router",
    "locations_router",
    "sids_router",
    "sites_router",
]
