"""Record lifecycle: transactional create and delete of site records.

Each public method runs in its own session and transaction taken from the
session factory. Errors propagate after the transaction has rolled back,
so a failed operation leaves no partial mutation behind.
"""

import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cableindex.config import Settings, SiteConfig, get_settings
from cableindex.core.database import is_unique_violation
from cableindex.core.errors import DuplicateKey, NotFound, ValidationFailed
from cableindex.models import (
    Label,
    ReferenceKind,
    SequenceKind,
    Sid,
    SidNic,
    SidNote,
    Site,
    SiteLocation,
)
from cableindex.schemas import (
    CableTypeCreate,
    CatalogEntryCreate,
    CpuModelCreate,
    DeleteStrategy,
    DeletionResult,
    DeviceModelCreate,
    LabelCreate,
    LabelUpdate,
    LocationCreate,
    LocationUpdate,
    NicCreate,
    NoteCreate,
    SidCreate,
    SidTypeCreate,
    SiteCreate,
    SiteUpdate,
    UsageBreakdown,
    VlanCreate,
)
from cableindex.services.catalog_service import CATALOG_UPDATE_SCHEMAS, CatalogService
from cableindex.services.deletion_service import DeletionEngine
from cableindex.services.label_service import LabelService
from cableindex.services.location_service import LocationService
from cableindex.services.sequence_service import SequenceAllocator
from cableindex.services.sid_service import SidService
from cableindex.services.site_service import SiteService
from cableindex.services.usage_service import UsageCounter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RecordKind(str, Enum):
    """Kinds of record accepted by ``create_record``."""

    LABEL = "label"
    SID = "sid"
    LOCATION = "location"
    CABLE_TYPE = "cable_type"
    SID_TYPE = "sid_type"
    DEVICE_MODEL = "device_model"
    CPU_MODEL = "cpu_model"
    VLAN = "vlan"


RECORD_ADAPTERS: dict[RecordKind, TypeAdapter] = {
    RecordKind.LABEL: TypeAdapter(LabelCreate),
    RecordKind.SID: TypeAdapter(SidCreate),
    RecordKind.LOCATION: TypeAdapter(LocationCreate),
    RecordKind.CABLE_TYPE: TypeAdapter(CableTypeCreate),
    RecordKind.SID_TYPE: TypeAdapter(SidTypeCreate),
    RecordKind.DEVICE_MODEL: TypeAdapter(DeviceModelCreate),
    RecordKind.CPU_MODEL: TypeAdapter(CpuModelCreate),
    RecordKind.VLAN: TypeAdapter(VlanCreate),
}


class LifecycleService:
    """Entry point for every mutation of site records."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: Settings | None = None,
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession, None]:
        """Session with an open transaction, committed on clean exit."""
        async with self.session_factory() as session:
            async with session.begin():
                yield session

    # Sites

    async def create_site(self, data: SiteCreate) -> Site:
        async with self.transaction() as db:
            return await SiteService(db).create(data)

    async def update_site(self, site_id: int, data: SiteUpdate) -> Site:
        async with self._unique_violation("site", site_id):
            async with self.transaction() as db:
                return await SiteService(db).update(site_id, data)

    async def ensure_sites(self, sites: list[SiteConfig]) -> list[Site]:
        """Create or update the sites declared in configuration."""
        async with self.transaction() as db:
            service = SiteService(db)
            return [
                await service.ensure_from_config(site.name, site.code, site.description)
                for site in sites
            ]

    async def delete_site(self, site_id: int, cascade: bool = False) -> dict[str, int]:
        """Delete a site; blocked by its records unless *cascade*."""
        async with self.transaction() as db:
            return await SiteService(db).delete(site_id, cascade=cascade)

    # Sequences and usage

    async def allocate_sequence(self, site_id: int, kind: SequenceKind) -> int:
        """Draw a number without creating a record; the number is consumed."""
        async with self.transaction() as db:
            return await SequenceAllocator(db).allocate_next(site_id, kind)

    async def peek_sequence(self, site_id: int, kind: SequenceKind) -> int:
        """Number the next allocation would return; nothing is consumed."""
        async with self.transaction() as db:
            return await SequenceAllocator(db).peek(site_id, kind)

    async def count_usage(self, site_id: int, kind: ReferenceKind, row_id: int) -> UsageBreakdown:
        async with self.transaction() as db:
            return await UsageCounter(db).count(site_id, kind, row_id)

    # Creation

    async def create_record(self, site_id: int, kind: RecordKind | str, fields: dict[str, Any]):
        """Validate *fields* for *kind* and create the record.

        Raises:
            ValidationFailed: Unknown kind or fields rejected by its schema
            InvalidReference: A referenced row is missing from the site
        """
        try:
            kind = RecordKind(kind)
        except ValueError:
            raise ValidationFailed(f"Unknown record kind: {kind}") from None

        try:
            data = RECORD_ADAPTERS[kind].validate_python(fields)
        except ValidationError as e:
            raise ValidationFailed(
                f"Invalid {kind.value} fields",
                e.errors(include_url=False, include_context=False, include_input=False),
            ) from e

        if kind == RecordKind.LABEL:
            return await self.create_label(site_id, data)
        if kind == RecordKind.SID:
            return await self.create_sid(site_id, data)
        if kind == RecordKind.LOCATION:
            return await self.create_location(site_id, data)
        return await self.create_catalog_entry(site_id, ReferenceKind(kind.value), data)

    async def create_location(self, site_id: int, data) -> SiteLocation:
        async with self._unique_violation("location", site_id):
            async with self.transaction() as db:
                await SiteService(db).require(site_id)
                return await LocationService(db).create(site_id, data)

    async def create_catalog_entry(
        self, site_id: int, kind: ReferenceKind, data: CatalogEntryCreate
    ):
        async with self._unique_violation(ReferenceKind(kind).value, site_id):
            async with self.transaction() as db:
                await SiteService(db).require(site_id)
                return await CatalogService(db).create(site_id, kind, data)

    async def create_label(self, site_id: int, data: LabelCreate) -> Label:
        padding = self.settings.sequences.ref_padding
        label = await self._create_numbered(
            site_id,
            SequenceKind.LABEL_REF,
            lambda db: LabelService(db, ref_padding=padding).create(site_id, data),
        )
        logger.info(f"Created label {label.ref_string} in site {site_id}")
        return label

    async def create_sid(self, site_id: int, data: SidCreate) -> Sid:
        sid = await self._create_numbered(
            site_id,
            SequenceKind.SID_NUMBER,
            lambda db: SidService(db).create(site_id, data),
        )
        logger.info(f"Created SID {sid.sid_number} in site {site_id}")
        return sid

    async def _create_numbered(
        self,
        site_id: int,
        kind: SequenceKind,
        create: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """Run *create* in a transaction, retrying on a duplicate number.

        A duplicate means rows were written around the counter. Each retry
        runs in a fresh transaction that first moves the counter past the
        highest value in use.
        """
        attempts = self.settings.sequences.duplicate_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                async with self.transaction() as db:
                    if attempt > 1:
                        await SequenceAllocator(db).resync(site_id, kind)
                    return await create(db)
            except IntegrityError as e:
                if not is_unique_violation(e):
                    raise
                logger.warning(
                    f"Duplicate {kind.value} in site {site_id} "
                    f"(attempt {attempt}/{attempts}): {e.orig}"
                )

        raise DuplicateKey(
            f"Could not allocate a unique {kind.value}",
            {"site_id": site_id, "kind": kind.value, "attempts": attempts},
        )

    @asynccontextmanager
    async def _unique_violation(self, what: str, site_id: int) -> AsyncGenerator[None, None]:
        # A concurrent insert can slip past the pre-insert uniqueness check.
        try:
            yield
        except IntegrityError as e:
            if not is_unique_violation(e):
                raise
            raise DuplicateKey(
                f"{what} conflicts with an existing row", {"site_id": site_id}
            ) from e

    # Updates and sub-records

    async def update_label(self, site_id: int, label_id: int, data: LabelUpdate) -> Label:
        async with self.transaction() as db:
            return await LabelService(db).update(site_id, label_id, data)

    async def update_location(
        self, site_id: int, location_id: int, data: LocationUpdate
    ) -> SiteLocation:
        async with self._unique_violation("location", site_id):
            async with self.transaction() as db:
                return await LocationService(db).update(site_id, location_id, data)

    async def update_catalog_entry(
        self, site_id: int, kind: ReferenceKind | str, entry_id: int, fields: dict[str, Any]
    ):
        """Validate *fields* against the catalog's update schema and apply them.

        Raises:
            ValidationFailed: Not a catalog kind, or fields rejected by its schema
            NotFound: The entry is not in the site
            DuplicateKey: The new name (or VLAN number) is taken in the site
        """
        try:
            kind = ReferenceKind(kind)
        except ValueError:
            raise ValidationFailed(f"Unknown catalog kind: {kind}") from None
        if kind not in CATALOG_UPDATE_SCHEMAS:
            raise ValidationFailed(f"{kind.value} is not a catalog kind")

        try:
            data = CATALOG_UPDATE_SCHEMAS[kind].model_validate(fields)
        except ValidationError as e:
            raise ValidationFailed(
                f"Invalid {kind.value} fields",
                e.errors(include_url=False, include_context=False, include_input=False),
            ) from e

        async with self._unique_violation(kind.value, site_id):
            async with self.transaction() as db:
                await SiteService(db).require(site_id)
                return await CatalogService(db).update(site_id, kind, entry_id, data)

    async def add_nic(self, site_id: int, sid_id: int, data: NicCreate) -> SidNic:
        async with self.transaction() as db:
            return await SidService(db).add_nic(site_id, sid_id, data)

    async def add_note(self, site_id: int, sid_id: int, data: NoteCreate) -> SidNote:
        async with self.transaction() as db:
            return await SidService(db).add_note(site_id, sid_id, data)

    # Deletion

    async def delete_referenced_row(
        self,
        site_id: int,
        kind: ReferenceKind,
        row_id: int,
        strategy: DeleteStrategy = DeleteStrategy.AUTO,
        replacement_id: int | None = None,
    ) -> DeletionResult:
        """Delete a location or catalog row, counting usage in the same transaction."""
        async with self.transaction() as db:
            return await DeletionEngine(db).delete(
                site_id, kind, row_id, strategy=strategy, replacement_id=replacement_id
            )

    async def delete_label(self, site_id: int, label_id: int) -> None:
        async with self.transaction() as db:
            deleted = await LabelService(db).delete_many(site_id, [label_id])
            if not deleted:
                raise NotFound(f"label {label_id} not found", {"id": label_id})
        logger.info(f"Deleted label {label_id} in site {site_id}")

    async def delete_labels(self, site_id: int, label_ids: list[int]) -> int:
        """Delete every listed label that belongs to the site."""
        async with self.transaction() as db:
            await SiteService(db).require(site_id)
            deleted = await LabelService(db).delete_many(site_id, label_ids)
        logger.info(f"Bulk deleted {deleted}/{len(set(label_ids))} labels in site {site_id}")
        return deleted

    async def delete_sids(self, site_id: int, sid_ids: list[int]) -> int:
        """Delete every listed SID that belongs to the site, with NICs and notes."""
        async with self.transaction() as db:
            await SiteService(db).require(site_id)
            deleted = await SidService(db).delete_many(site_id, sid_ids)
        logger.info(f"Bulk deleted {deleted}/{len(set(sid_ids))} SIDs in site {site_id}")
        return deleted
