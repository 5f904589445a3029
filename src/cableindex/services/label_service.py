"""Label service for numbered cable labels."""

import logging

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import NotFound
from cableindex.models import CableType, Label, SequenceKind, SiteLocation
from cableindex.schemas import LabelCreate, LabelUpdate
from cableindex.services.reference_graph import require_reference
from cableindex.services.sequence_service import SequenceAllocator
from cableindex.services.site_service import SiteService

logger = logging.getLogger(__name__)


def format_ref(site_code: str, ref_number: int, padding: int = 4) -> str:
    """Display string for a label reference number, e.g. ``LON1-0042``."""
    return f"{site_code}-{ref_number:0{padding}d}"


class LabelService:
    """Service for label CRUD operations."""

    def __init__(self, db: AsyncSession, ref_padding: int = 4):
        self.db = db
        self.ref_padding = ref_padding

    async def get_all(
        self,
        site_id: int,
        search: str | None = None,
        location_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Label], int]:
        """Get labels of a site with optional filtering."""
        filters = [Label.site_id == site_id]

        if search:
            pattern = f"%{search}%"
            filters.append(or_(Label.ref_string.ilike(pattern), Label.notes.ilike(pattern)))
        if location_id:
            filters.append(
                or_(
                    Label.source_location_id == location_id,
                    Label.destination_location_id == location_id,
                )
            )

        total_result = await self.db.execute(select(func.count(Label.id)).where(*filters))
        total = total_result.scalar_one()

        result = await self.db.execute(
            select(Label)
            .where(*filters)
            .order_by(Label.ref_number.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all()), total

    async def get_by_id(self, site_id: int, label_id: int) -> Label | None:
        """Get a label by ID within a site."""
        result = await self.db.execute(
            select(Label).where(Label.id == label_id, Label.site_id == site_id)
        )
        return result.scalar_one_or_none()

    async def create(self, site_id: int, data: LabelCreate) -> Label:
        """Create a label with the next reference number of its site.

        References are checked before a number is drawn, so a label that
        cannot be inserted never consumes one.
        """
        site = await SiteService(self.db).require(site_id)

        await require_reference(
            self.db, SiteLocation, site_id, data.source_location_id, "source_location_id"
        )
        await require_reference(
            self.db, SiteLocation, site_id, data.destination_location_id, "destination_location_id"
        )
        await require_reference(self.db, CableType, site_id, data.cable_type_id, "cable_type_id")

        ref_number = await SequenceAllocator(self.db).allocate_next(site_id, SequenceKind.LABEL_REF)

        label = Label(
            site_id=site_id,
            ref_number=ref_number,
            ref_string=format_ref(site.code, ref_number, self.ref_padding),
            source_location_id=data.source_location_id,
            destination_location_id=data.destination_location_id,
            cable_type_id=data.cable_type_id,
            type=data.type,
            notes=data.notes,
        )
        self.db.add(label)
        await self.db.flush()

        logger.debug(f"Created label {label.ref_string} in site {site_id}")
        return label

    async def update(self, site_id: int, label_id: int, data: LabelUpdate) -> Label:
        """Update a label's descriptive fields."""
        label = await self.get_by_id(site_id, label_id)
        if label is None:
            raise NotFound(f"label {label_id} not found", {"id": label_id})

        update_data = data.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if field == "type" and value is None:
                continue
            setattr(label, field, value)

        await self.db.flush()
        return label

    async def delete_many(self, site_id: int, label_ids: list[int]) -> int:
        """Delete the given labels of a site; ids from other sites are ignored."""
        if not label_ids:
            return 0

        result = await self.db.execute(
            delete(Label)
            .where(Label.site_id == site_id, Label.id.in_(set(label_ids)))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
