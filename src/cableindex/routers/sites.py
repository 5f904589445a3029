"""Sites router: site management and sequence counters."""

from fastapi import APIRouter, HTTPException, status

from cableindex.core.dependencies import DbSession, LifecycleDep
from cableindex.models import SequenceKind
from cableindex.schemas import SiteCreate, SiteResponse, SiteUpdate
from cableindex.services import SiteService

router = APIRouter(prefix="/sites", tags=["sites"])


@router.get("", response_model=list[SiteResponse])
async def list_sites(db: DbSession):
    """List all sites."""
    return await SiteService(db).get_all()


@router.post("", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
async def create_site(data: SiteCreate, lifecycle: LifecycleDep):
    """Create a site."""
    return await lifecycle.create_site(data)


@router.get("/{site_id}", response_model=SiteResponse)
async def get_site(site_id: int, db: DbSession):
    """Get a site."""
    site = await SiteService(db).get_by_id(site_id)
    if not site:
        raise HTTPException(status_code=404, detail="Site not found")
    return site


@router.patch("/{site_id}", response_model=SiteResponse)
async def update_site(site_id: int, data: SiteUpdate, lifecycle: LifecycleDep):
    """Update a site's name, code or description."""
    return await lifecycle.update_site(site_id, data)


@router.delete("/{site_id}")
async def delete_site(site_id: int, lifecycle: LifecycleDep, cascade: bool = False):
    """Delete a site; with ``cascade`` its records are removed too."""
    removed = await lifecycle.delete_site(site_id, cascade=cascade)
    return {"site_id": site_id, "removed": removed}


@router.post("/{site_id}/counters/{kind}/next")
async def allocate_next(site_id: int, kind: SequenceKind, lifecycle: LifecycleDep):
    """Draw the next number of a site counter without creating a record."""
    value = await lifecycle.allocate_sequence(site_id, kind)
    return {"site_id": site_id, "kind": kind.value, "value": value}


@router.get("/{site_id}/counters/{kind}")
async def peek_counter(site_id: int, kind: SequenceKind, lifecycle: LifecycleDep):
    """Show the number the next allocation of a site counter would return."""
    value = await lifecycle.peek_sequence(site_id, kind)
    return {"site_id": site_id, "kind": kind.value, "next_value": value}
