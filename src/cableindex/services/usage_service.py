"""Usage counting for locations and catalog rows."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import NotFound
from cableindex.models import ReferenceKind, SiteCounter
from cableindex.schemas import UsageBreakdown
from cableindex.services.reference_graph import (
    REFERENCE_ROLES,
    SITE_TEARDOWN_ORDER,
    target_model,
)


class UsageCounter:
    """Counts records referencing a row, inside the caller's transaction."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def count(self, site_id: int, kind: ReferenceKind, row_id: int) -> UsageBreakdown:
        """Usage breakdown for a row that must exist in the site.

        Raises:
            NotFound: If the row is absent or belongs to another site
        """
        kind = ReferenceKind(kind)
        model = target_model(kind)

        result = await self.db.execute(
            select(model.id).where(model.id == row_id, model.site_id == site_id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFound(
                f"{kind.value} {row_id} not found", {"kind": kind.value, "id": row_id}
            )

        return await self.count_references(site_id, kind, row_id)

    async def count_references(
        self, site_id: int, kind: ReferenceKind, row_id: int
    ) -> UsageBreakdown:
        """Per-role reference counts, without checking the row itself."""
        kind = ReferenceKind(kind)
        counts = {}

        for role in REFERENCE_ROLES[kind]:
            result = await self.db.execute(
                select(func.count()).select_from(role.model).where(*role.criteria(site_id, row_id))
            )
            counts[role.name] = result.scalar_one()

        return UsageBreakdown(kind=kind, row_id=row_id, counts=counts)

    async def count_site_dependents(self, site_id: int) -> dict[str, int]:
        """Rows owned by a site, keyed by table name, zero counts omitted.

        Sequence counters are bookkeeping, not records, and are not counted.
        """
        counts = {}
        for model in SITE_TEARDOWN_ORDER:
            if model is SiteCounter:
                continue
            result = await self.db.execute(
                select(func.count()).select_from(model).where(model.site_id == site_id)
            )
            total = result.scalar_one()
            if total:
                counts[model.__tablename__] = total
        return counts
