"""Per-site sequence allocation for label reference and SID numbers.

The counter row for a (site, kind) pair is the only coordination point:
it is seeded once with an insert-or-ignore, then locked, read and bumped
inside the caller's transaction. Commit or rollback is the caller's
responsibility, so an aborted insert also gives its number back.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import SiteNotFound
from cableindex.models import Label, SequenceKind, Sid, Site, SiteCounter

logger = logging.getLogger(__name__)

# Column holding the values already issued for each kind
SEQUENCE_COLUMNS = {
    SequenceKind.LABEL_REF: (Label, Label.ref_number),
    SequenceKind.SID_NUMBER: (Sid, Sid.sid_number),
}


class SequenceAllocator:
    """Issues the next unused number of a site counter."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def allocate_next(self, site_id: int, kind: SequenceKind) -> int:
        """Claim the next value for (site_id, kind).

        Args:
            site_id: Site owning the counter
            kind: Which counter to draw from

        Returns:
            The allocated value. The counter row stays locked until the
            surrounding transaction ends.

        Raises:
            SiteNotFound: If the site does not exist
        """
        kind = SequenceKind(kind)
        await self._require_site(site_id)

        current = await self._lock_counter(site_id, kind)
        if current is None:
            await self._seed_counter(site_id, kind)
            current = await self._lock_counter(site_id, kind)

        await self.db.execute(
            update(SiteCounter)
            .where(SiteCounter.site_id == site_id, SiteCounter.kind == kind.value)
            .values(next_value=current + 1)
            .execution_options(synchronize_session=False)
        )

        logger.debug(f"Allocated {kind.value}={current} for site {site_id}")
        return current

    async def peek(self, site_id: int, kind: SequenceKind) -> int:
        """Value the next allocation would return, without locking."""
        kind = SequenceKind(kind)
        await self._require_site(site_id)

        result = await self.db.execute(
            select(SiteCounter.next_value).where(
                SiteCounter.site_id == site_id, SiteCounter.kind == kind.value
            )
        )
        current = result.scalar_one_or_none()
        if current is None:
            return await self._highest_allocated(site_id, kind) + 1
        return current

    async def resync(self, site_id: int, kind: SequenceKind) -> int:
        """Move the counter past every value already in use.

        Only ever raises ``next_value``. Returns the value the next
        allocation will receive.
        """
        kind = SequenceKind(kind)
        await self._require_site(site_id)

        current = await self._lock_counter(site_id, kind)
        if current is None:
            await self._seed_counter(site_id, kind)
            current = await self._lock_counter(site_id, kind)

        floor = await self._highest_allocated(site_id, kind) + 1
        if floor > current:
            await self.db.execute(
                update(SiteCounter)
                .where(SiteCounter.site_id == site_id, SiteCounter.kind == kind.value)
                .values(next_value=floor)
                .execution_options(synchronize_session=False)
            )
            logger.warning(
                f"Counter {kind.value} for site {site_id} was behind; moved {current} -> {floor}"
            )
            return floor
        return current

    async def _require_site(self, site_id: int) -> None:
        result = await self.db.execute(select(Site.id).where(Site.id == site_id))
        if result.scalar_one_or_none() is None:
            raise SiteNotFound(site_id)

    async def _lock_counter(self, site_id: int, kind: SequenceKind) -> int | None:
        result = await self.db.execute(
            select(SiteCounter.next_value)
            .where(SiteCounter.site_id == site_id, SiteCounter.kind == kind.value)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    async def _highest_allocated(self, site_id: int, kind: SequenceKind) -> int:
        model, column = SEQUENCE_COLUMNS[kind]
        result = await self.db.execute(
            select(func.coalesce(func.max(column), 0)).where(model.site_id == site_id)
        )
        return int(result.scalar_one())

    async def _seed_counter(self, site_id: int, kind: SequenceKind) -> None:
        """Create the counter row unless a concurrent caller already has."""
        seed = await self._highest_allocated(site_id, kind) + 1
        values = {"site_id": site_id, "kind": kind.value, "next_value": seed}
        dialect = self.db.get_bind().dialect.name

        if dialect == "postgresql":
            stmt = postgresql.insert(SiteCounter).values(**values).on_conflict_do_nothing(
                index_elements=["site_id", "kind"]
            )
        elif dialect in ("mysql", "mariadb"):
            insert_stmt = mysql.insert(SiteCounter).values(**values)
            stmt = insert_stmt.on_duplicate_key_update(next_value=SiteCounter.next_value)
        else:
            stmt = sqlite.insert(SiteCounter).values(**values).on_conflict_do_nothing(
                index_elements=["site_id", "kind"]
            )

        await self.db.execute(stmt)
        logger.debug(f"Seeded {kind.value} counter for site {site_id} at {seed}")
