"""Locations router for site locations and their deletion."""

from typing import Any

from fastapi import APIRouter, Body, status

from cableindex.core.dependencies import DbSession, LifecycleDep
from cableindex.models import ReferenceKind
from cableindex.schemas import (
    DeleteStrategy,
    DeletionResult,
    LocationResponse,
    LocationUpdate,
    LocationUsageResponse,
    ReassignRequest,
    UsageBreakdown,
    resolve_strategy,
)
from cableindex.services import LocationService, RecordKind, SiteService, UsageCounter

router = APIRouter(prefix="/sites/{site_id}/locations", tags=["locations"])


@router.get("", response_model=list[LocationResponse])
async def list_locations(site_id: int, db: DbSession):
    """List locations of a site."""
    await SiteService(db).require(site_id)
    return await LocationService(db).get_all(site_id)


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    site_id: int,
    lifecycle: LifecycleDep,
    fields: dict[str, Any] = Body(...),
):
    """Create a location; ``template_type`` selects the required coordinates."""
    return await lifecycle.create_record(site_id, RecordKind.LOCATION, fields)


@router.get("/usage", response_model=list[LocationUsageResponse])
async def list_location_usage(site_id: int, db: DbSession):
    """List locations with their usage counts."""
    await SiteService(db).require(site_id)
    return await LocationService(db).get_with_usage_counts(site_id)


@router.patch("/{location_id}", response_model=LocationResponse)
async def update_location(
    site_id: int,
    location_id: int,
    data: LocationUpdate,
    lifecycle: LifecycleDep,
):
    """Update a location; the template rules and coordinate uniqueness are checked again."""
    return await lifecycle.update_location(site_id, location_id, data)


@router.get("/{location_id}/usage", response_model=UsageBreakdown)
async def location_usage(site_id: int, location_id: int, db: DbSession):
    """Count the records referencing a location."""
    return await UsageCounter(db).count(site_id, ReferenceKind.LOCATION, location_id)


@router.delete("/{location_id}", response_model=DeletionResult)
async def delete_location(
    site_id: int,
    location_id: int,
    lifecycle: LifecycleDep,
    strategy: DeleteStrategy | None = None,
    cascade: str | None = None,
    target_location_id: int | None = None,
):
    """Delete a location.

    ``auto`` refuses while the location is referenced, ``reassign`` moves
    references to ``target_location_id``, ``cascade`` removes them.
    """
    return await lifecycle.delete_referenced_row(
        site_id,
        ReferenceKind.LOCATION,
        location_id,
        strategy=resolve_strategy(strategy, cascade),
        replacement_id=target_location_id,
    )


@router.post("/{location_id}/reassign-and-delete", response_model=DeletionResult)
async def reassign_and_delete_location(
    site_id: int,
    location_id: int,
    data: ReassignRequest,
    lifecycle: LifecycleDep,
):
    """Move every reference to another location, then delete this one."""
    return await lifecycle.delete_referenced_row(
        site_id,
        ReferenceKind.LOCATION,
        location_id,
        strategy=DeleteStrategy.REASSIGN,
        replacement_id=data.replacement_id,
    )
