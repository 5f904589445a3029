"""Catalog router for cable types, SID types, device/CPU models and VLANs."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, status

from cableindex.core.dependencies import DbSession, LifecycleDep
from cableindex.models import ReferenceKind
from cableindex.schemas import (
    CatalogEntryResponse,
    DeleteStrategy,
    DeletionResult,
    UsageBreakdown,
    resolve_strategy,
)
from cableindex.services import CatalogService, SiteService, UsageCounter

router = APIRouter(prefix="/sites/{site_id}/catalog", tags=["catalog"])


def _catalog_kind(kind: ReferenceKind) -> ReferenceKind:
    # Locations have their own router.
    if kind == ReferenceKind.LOCATION:
        raise HTTPException(status_code=404, detail="Unknown catalog")
    return kind


@router.get("/{kind}", response_model=list[CatalogEntryResponse])
async def list_entries(site_id: int, kind: ReferenceKind, db: DbSession):
    """List the entries of one catalog."""
    kind = _catalog_kind(kind)
    await SiteService(db).require(site_id)
    return await CatalogService(db).get_all(site_id, kind)


@router.post("/{kind}", response_model=CatalogEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    site_id: int,
    kind: ReferenceKind,
    lifecycle: LifecycleDep,
    fields: dict[str, Any] = Body(...),
):
    """Create a catalog entry."""
    kind = _catalog_kind(kind)
    return await lifecycle.create_record(site_id, kind.value, fields)


@router.patch("/{kind}/{entry_id}", response_model=CatalogEntryResponse)
async def update_entry(
    site_id: int,
    kind: ReferenceKind,
    entry_id: int,
    lifecycle: LifecycleDep,
    fields: dict[str, Any] = Body(...),
):
    """Update a catalog entry."""
    kind = _catalog_kind(kind)
    return await lifecycle.update_catalog_entry(site_id, kind, entry_id, fields)


@router.get("/{kind}/{entry_id}/usage", response_model=UsageBreakdown)
async def entry_usage(site_id: int, kind: ReferenceKind, entry_id: int, db: DbSession):
    """Count the records referencing a catalog entry."""
    kind = _catalog_kind(kind)
    return await UsageCounter(db).count(site_id, kind, entry_id)


@router.delete("/{kind}/{entry_id}", response_model=DeletionResult)
async def delete_entry(
    site_id: int,
    kind: ReferenceKind,
    entry_id: int,
    lifecycle: LifecycleDep,
    strategy: DeleteStrategy | None = None,
    cascade: str | None = None,
    replacement_id: int | None = None,
):
    """Delete a catalog entry using a deletion strategy."""
    kind = _catalog_kind(kind)
    return await lifecycle.delete_referenced_row(
        site_id,
        kind,
        entry_id,
        strategy=resolve_strategy(strategy, cascade),
        replacement_id=replacement_id,
    )
