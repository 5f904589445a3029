"""SID service for numbered devices and their NICs and notes."""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import NotFound
from cableindex.models import (
    SequenceKind,
    Sid,
    SidCpuModel,
    SidDeviceModel,
    SidNic,
    SidNote,
    SidType,
    SiteLocation,
    SiteVlan,
)
from cableindex.schemas import NicCreate, NoteCreate, SidCreate
from cableindex.services.reference_graph import require_reference
from cableindex.services.sequence_service import SequenceAllocator
from cableindex.services.site_service import SiteService

logger = logging.getLogger(__name__)


class SidService:
    """Service for SID CRUD operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(
        self,
        site_id: int,
        location_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Sid], int]:
        """Get SIDs of a site, optionally only those installed at a location."""
        filters = [Sid.site_id == site_id]
        if location_id:
            filters.append(Sid.location_id == location_id)

        total_result = await self.db.execute(select(func.count(Sid.id)).where(*filters))
        total = total_result.scalar_one()

        result = await self.db.execute(
            select(Sid).where(*filters).order_by(Sid.sid_number).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), total

    async def get_by_id(self, site_id: int, sid_id: int) -> Sid | None:
        """Get a SID by ID within a site."""
        result = await self.db.execute(select(Sid).where(Sid.id == sid_id, Sid.site_id == site_id))
        return result.scalar_one_or_none()

    async def require(self, site_id: int, sid_id: int) -> Sid:
        """Get a SID by ID, raising NotFound if missing."""
        sid = await self.get_by_id(site_id, sid_id)
        if sid is None:
            raise NotFound(f"sid {sid_id} not found", {"id": sid_id})
        return sid

    async def create(self, site_id: int, data: SidCreate) -> Sid:
        """Create a SID with the next device number of its site."""
        await SiteService(self.db).require(site_id)

        await require_reference(self.db, SidType, site_id, data.sid_type_id, "sid_type_id")
        await require_reference(
            self.db, SidDeviceModel, site_id, data.device_model_id, "device_model_id"
        )
        await require_reference(self.db, SidCpuModel, site_id, data.cpu_model_id, "cpu_model_id")
        await require_reference(self.db, SiteLocation, site_id, data.location_id, "location_id")

        sid_number = await SequenceAllocator(self.db).allocate_next(
            site_id, SequenceKind.SID_NUMBER
        )

        sid = Sid(site_id=site_id, sid_number=sid_number, **data.model_dump())
        self.db.add(sid)
        await self.db.flush()

        logger.debug(f"Created SID {sid_number} in site {site_id}")
        return sid

    async def get_nics(self, sid: Sid) -> list[SidNic]:
        """Get the NICs of a SID."""
        result = await self.db.execute(
            select(SidNic).where(SidNic.sid_id == sid.id).order_by(SidNic.name, SidNic.id)
        )
        return list(result.scalars().all())

    async def add_nic(self, site_id: int, sid_id: int, data: NicCreate) -> SidNic:
        """Attach a NIC, checking its VLAN belongs to the same site."""
        sid = await self.require(site_id, sid_id)
        await require_reference(self.db, SiteVlan, site_id, data.site_vlan_id, "site_vlan_id")

        nic = SidNic(site_id=site_id, sid_id=sid.id, **data.model_dump())
        self.db.add(nic)
        await self.db.flush()
        return nic

    async def get_notes(self, sid: Sid) -> list[SidNote]:
        """Get the notes of a SID, pinned first."""
        result = await self.db.execute(
            select(SidNote)
            .where(SidNote.sid_id == sid.id)
            .order_by(SidNote.pinned.desc(), SidNote.created_at.desc(), SidNote.id.desc())
        )
        return list(result.scalars().all())

    async def add_note(self, site_id: int, sid_id: int, data: NoteCreate) -> SidNote:
        """Attach a note to a SID."""
        sid = await self.require(site_id, sid_id)

        note = SidNote(site_id=site_id, sid_id=sid.id, **data.model_dump())
        self.db.add(note)
        await self.db.flush()
        return note

    async def delete_many(self, site_id: int, sid_ids: list[int]) -> int:
        """Delete SIDs of a site with their NICs and notes.

        Ids from other sites are ignored.
        """
        if not sid_ids:
            return 0

        owned = select(Sid.id).where(Sid.site_id == site_id, Sid.id.in_(set(sid_ids)))

        for child in (SidNic, SidNote):
            await self.db.execute(
                delete(child)
                .where(child.sid_id.in_(owned))
                .execution_options(synchronize_session=False)
            )

        result = await self.db.execute(
            delete(Sid)
            .where(Sid.site_id == site_id, Sid.id.in_(set(sid_ids)))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
