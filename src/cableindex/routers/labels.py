"""Labels router for numbered cable labels."""

from fastapi import APIRouter, HTTPException, Query, status

from cableindex.core.dependencies import DbSession, LifecycleDep
from cableindex.schemas import (
    BulkDeleteRequest,
    BulkDeleteResult,
    LabelCreate,
    LabelPage,
    LabelResponse,
    LabelUpdate,
)
from cableindex.services import LabelService, SiteService

router = APIRouter(prefix="/sites/{site_id}/labels", tags=["labels"])


@router.get("", response_model=LabelPage)
async def list_labels(
    site_id: int,
    db: DbSession,
    search: str | None = None,
    location_id: int | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=500),
):
    """List labels of a site, newest first."""
    await SiteService(db).require(site_id)

    offset = (page - 1) * page_size
    labels, total = await LabelService(db).get_all(
        site_id,
        search=search,
        location_id=location_id,
        limit=page_size,
        offset=offset,
    )
    return {"items": labels, "total": total}


@router.post("", response_model=LabelResponse, status_code=status.HTTP_201_CREATED)
async def create_label(site_id: int, data: LabelCreate, lifecycle: LifecycleDep):
    """Create a label with the next reference number of the site."""
    return await lifecycle.create_label(site_id, data)


@router.post("/bulk-delete", response_model=BulkDeleteResult)
async def bulk_delete_labels(site_id: int, data: BulkDeleteRequest, lifecycle: LifecycleDep):
    """Delete many labels in one transaction; ids from other sites are ignored."""
    deleted = await lifecycle.delete_labels(site_id, data.ids)
    return BulkDeleteResult(requested=len(set(data.ids)), deleted=deleted)


@router.get("/{label_id}", response_model=LabelResponse)
async def get_label(site_id: int, label_id: int, db: DbSession):
    """Get a label."""
    label = await LabelService(db).get_by_id(site_id, label_id)
    if not label:
        raise HTTPException(status_code=404, detail="Label not found")
    return label


@router.patch("/{label_id}", response_model=LabelResponse)
async def update_label(site_id: int, label_id: int, data: LabelUpdate, lifecycle: LifecycleDep):
    """Update a label's type or notes."""
    return await lifecycle.update_label(site_id, label_id, data)


@router.delete("/{label_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_label(site_id: int, label_id: int, lifecycle: LifecycleDep):
    """Delete a label. Its reference number is not reissued."""
    await lifecycle.delete_label(site_id, label_id)
