"""SIDs router for numbered devices, NICs and notes."""

from fastapi import APIRouter, HTTPException, Query, status

from cableindex.core.dependencies import DbSession, LifecycleDep
from cableindex.schemas import (
    BulkDeleteRequest,
    BulkDeleteResult,
    NicCreate,
    NicResponse,
    NoteCreate,
    NoteResponse,
    SidCreate,
    SidDetailResponse,
    SidResponse,
)
from cableindex.services import SidService, SiteService

router = APIRouter(prefix="/sites/{site_id}/sids", tags=["sids"])


@router.get("", response_model=list[SidResponse])
async def list_sids(
    site_id: int,
    db: DbSession,
    location_id: int | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=10, le=500),
):
    """List SIDs of a site."""
    await SiteService(db).require(site_id)
    sids, _ = await SidService(db).get_all(
        site_id,
        location_id=location_id,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    return sids


@router.post("", response_model=SidResponse, status_code=status.HTTP_201_CREATED)
async def create_sid(site_id: int, data: SidCreate, lifecycle: LifecycleDep):
    """Create a SID with the next device number of the site."""
    return await lifecycle.create_sid(site_id, data)


@router.post("/bulk-delete", response_model=BulkDeleteResult)
async def bulk_delete_sids(site_id: int, data: BulkDeleteRequest, lifecycle: LifecycleDep):
    """Delete many SIDs with their NICs and notes; ids from other sites are ignored."""
    deleted = await lifecycle.delete_sids(site_id, data.ids)
    return BulkDeleteResult(requested=len(set(data.ids)), deleted=deleted)


@router.get("/{sid_id}", response_model=SidDetailResponse)
async def get_sid(site_id: int, sid_id: int, db: DbSession):
    """Get a SID with its NICs and notes."""
    sid_service = SidService(db)
    sid = await sid_service.get_by_id(site_id, sid_id)
    if not sid:
        raise HTTPException(status_code=404, detail="SID not found")

    return SidDetailResponse(
        **SidResponse.model_validate(sid).model_dump(),
        nics=[NicResponse.model_validate(nic) for nic in await sid_service.get_nics(sid)],
        notes=[NoteResponse.model_validate(note) for note in await sid_service.get_notes(sid)],
    )


@router.post("/{sid_id}/nics", response_model=NicResponse, status_code=status.HTTP_201_CREATED)
async def add_nic(site_id: int, sid_id: int, data: NicCreate, lifecycle: LifecycleDep):
    """Attach a NIC to a SID."""
    return await lifecycle.add_nic(site_id, sid_id, data)


@router.post("/{sid_id}/notes", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def add_note(site_id: int, sid_id: int, data: NoteCreate, lifecycle: LifecycleDep):
    """Attach a note to a SID."""
    return await lifecycle.add_note(site_id, sid_id, data)
