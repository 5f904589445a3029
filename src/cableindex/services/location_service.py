"""Location service for managing site locations."""

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import DuplicateKey, NotFound, ValidationFailed
from cableindex.models import Label, LocationTemplate, Sid, SiteLocation, coords_key
from cableindex.schemas import (
    DatacentreLocationCreate,
    DomesticLocationCreate,
    LocationCreate,
    LocationUpdate,
)

LOCATION_FIELDS = ("floor", "suite", "row", "rack", "area", "label")

location_adapter = TypeAdapter(LocationCreate)


class LocationService:
    """Service for location CRUD operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, site_id: int) -> list[SiteLocation]:
        """Get all locations of a site."""
        result = await self.db.execute(
            select(SiteLocation)
            .where(SiteLocation.site_id == site_id)
            .order_by(
                SiteLocation.floor,
                SiteLocation.suite,
                SiteLocation.row,
                SiteLocation.rack,
                SiteLocation.area,
                SiteLocation.id,
            )
        )
        return list(result.scalars().all())

    async def get_by_id(self, site_id: int, location_id: int) -> SiteLocation | None:
        """Get a location by ID within a site."""
        result = await self.db.execute(
            select(SiteLocation).where(
                SiteLocation.id == location_id, SiteLocation.site_id == site_id
            )
        )
        return result.scalar_one_or_none()

    async def get_by_coords(self, site_id: int, key: str) -> SiteLocation | None:
        """Get the location occupying a normalized coordinate key."""
        result = await self.db.execute(
            select(SiteLocation).where(
                SiteLocation.site_id == site_id, SiteLocation.coords_key == key
            )
        )
        return result.scalar_one_or_none()

    async def create(
        self,
        site_id: int,
        data: DatacentreLocationCreate | DomesticLocationCreate,
    ) -> SiteLocation:
        """Create a new location.

        Raises:
            DuplicateKey: If another location in the site has the same coordinates
        """
        template = LocationTemplate(data.template_type)
        key = coords_key(template, data.floor, data.suite, data.row, data.rack, data.area)

        existing = await self.get_by_coords(site_id, key)
        if existing:
            raise DuplicateKey(
                "A location with these coordinates already exists",
                {"existing_id": existing.id, "coords": key},
            )

        location = SiteLocation(
            site_id=site_id,
            template_type=template,
            floor=data.floor,
            suite=data.suite,
            row=data.row,
            rack=data.rack,
            area=data.area,
            label=data.label,
            coords_key=key,
        )
        self.db.add(location)
        await self.db.flush()
        return location

    async def update(self, site_id: int, location_id: int, data: LocationUpdate) -> SiteLocation:
        """Update an existing location.

        The stored fields merged with the update are validated against the
        template rules again and the coordinate key is recomputed.

        Raises:
            NotFound: If the location is not in the site
            ValidationFailed: If the merged fields break the template rules
            DuplicateKey: If another location in the site has the new coordinates
        """
        location = await self.get_by_id(site_id, location_id)
        if location is None:
            raise NotFound(f"location {location_id} not found", {"id": location_id})

        merged = {field: getattr(location, field) for field in LOCATION_FIELDS}
        merged["template_type"] = LocationTemplate(location.template_type).value
        merged.update(data.model_dump(exclude_unset=True))

        try:
            validated = location_adapter.validate_python(merged)
        except ValidationError as e:
            raise ValidationFailed(
                "Invalid location fields",
                e.errors(include_url=False, include_context=False, include_input=False),
            ) from e

        template = LocationTemplate(validated.template_type)
        key = coords_key(
            template, validated.floor, validated.suite, validated.row, validated.rack, validated.area
        )
        if key != location.coords_key:
            existing = await self.get_by_coords(site_id, key)
            if existing and existing.id != location.id:
                raise DuplicateKey(
                    "A location with these coordinates already exists",
                    {"existing_id": existing.id, "coords": key},
                )

        location.template_type = template
        for field in LOCATION_FIELDS:
            setattr(location, field, getattr(validated, field))
        location.coords_key = key

        await self.db.flush()
        return location

    async def get_with_usage_counts(self, site_id: int) -> list[dict]:
        """Get all locations of a site with their reference counts."""
        source = (
            select(Label.source_location_id.label("location_id"), func.count(Label.id).label("n"))
            .where(Label.site_id == site_id)
            .group_by(Label.source_location_id)
            .subquery()
        )
        destination = (
            select(
                Label.destination_location_id.label("location_id"), func.count(Label.id).label("n")
            )
            .where(Label.site_id == site_id)
            .group_by(Label.destination_location_id)
            .subquery()
        )
        installed = (
            select(Sid.location_id.label("location_id"), func.count(Sid.id).label("n"))
            .where(Sid.site_id == site_id, Sid.location_id.is_not(None))
            .group_by(Sid.location_id)
            .subquery()
        )

        query = (
            select(
                SiteLocation,
                func.coalesce(source.c.n, 0).label("source"),
                func.coalesce(destination.c.n, 0).label("destination"),
                func.coalesce(installed.c.n, 0).label("installation"),
            )
            .outerjoin(source, SiteLocation.id == source.c.location_id)
            .outerjoin(destination, SiteLocation.id == destination.c.location_id)
            .outerjoin(installed, SiteLocation.id == installed.c.location_id)
            .where(SiteLocation.site_id == site_id)
            .order_by(SiteLocation.id)
        )

        result = await self.db.execute(query)
        rows = result.all()

        return [
            {
                "location": row.SiteLocation,
                "usage": {
                    "source": row.source,
                    "destination": row.destination,
                    "installation": row.installation,
                },
            }
            for row in rows
        ]
