"""Strategy-driven deletion of locations and catalog rows.

A row that labels, SIDs or NICs still point at is never removed while
those references exist. Depending on the requested strategy the engine
either refuses (``auto``), repoints every reference at a replacement row
(``reassign``), or removes the referencing records first (``cascade``).

Everything runs in the caller's transaction: the target row is locked,
usage is counted, referencing rows are updated or deleted, and the target
is removed. If any step fails the caller rolls back and nothing changes.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import InUse, InvalidReplacement, NotFound
from cableindex.models import Base, ReferenceKind
from cableindex.schemas import DeleteStrategy, DeletionResult
from cableindex.services.reference_graph import (
    CHILD_ROWS,
    REFERENCE_ROLES,
    ReferenceRole,
    target_model,
)
from cableindex.services.usage_service import UsageCounter

logger = logging.getLogger(__name__)


class DeletionEngine:
    """Deletes a referenced row according to a deletion strategy."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.usage_counter = UsageCounter(db)

    async def delete(
        self,
        site_id: int,
        kind: ReferenceKind,
        row_id: int,
        strategy: DeleteStrategy = DeleteStrategy.AUTO,
        replacement_id: int | None = None,
    ) -> DeletionResult:
        """Delete *row_id* using *strategy*.

        Args:
            site_id: Site the row must belong to
            kind: Which kind of row is being deleted
            row_id: Id of the row to delete
            strategy: What to do with records that still reference the row
            replacement_id: Row that takes over the references (reassign only)

        Returns:
            DeletionResult with the strategy that ran, the usage seen before
            any mutation, and per-role reassigned/deleted counts

        Raises:
            NotFound: The row does not exist in the site
            InUse: ``auto`` was requested and the row is referenced
            InvalidReplacement: ``reassign`` without a valid replacement
        """
        kind = ReferenceKind(kind)
        strategy = DeleteStrategy(strategy)
        model = target_model(kind)

        locked = await self._lock_rows(
            model,
            site_id,
            row_id,
            replacement_id if strategy == DeleteStrategy.REASSIGN else None,
        )
        if row_id not in locked:
            raise NotFound(f"{kind.value} {row_id} not found", {"kind": kind.value, "id": row_id})

        if strategy == DeleteStrategy.REASSIGN:
            self._check_replacement(kind, row_id, replacement_id, locked)

        usage = await self.usage_counter.count_references(site_id, kind, row_id)

        reassigned: dict[str, int] = {}
        deleted: dict[str, int] = {}

        if usage.total == 0:
            strategy_used = DeleteStrategy.AUTO
        elif strategy == DeleteStrategy.AUTO:
            raise InUse(usage, f"{kind.value} {row_id} is referenced by existing records")
        elif strategy == DeleteStrategy.REASSIGN:
            reassigned = await self._reassign(site_id, kind, row_id, replacement_id)
            strategy_used = DeleteStrategy.REASSIGN
        else:
            deleted = await self._cascade(site_id, kind, row_id)
            strategy_used = DeleteStrategy.CASCADE

        result = await self.db.execute(
            delete(model)
            .where(model.id == row_id, model.site_id == site_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFound(f"{kind.value} {row_id} not found", {"kind": kind.value, "id": row_id})

        logger.info(
            f"Deleted {kind.value} {row_id} in site {site_id} "
            f"(strategy={strategy_used.value}, usage={usage.counts}, "
            f"reassigned={reassigned}, deleted={deleted})"
        )

        return DeletionResult(
            strategy_used=strategy_used,
            usage=usage,
            reassigned=reassigned,
            deleted=deleted,
            replacement_id=replacement_id if strategy_used == DeleteStrategy.REASSIGN else None,
        )

    async def _lock_rows(
        self,
        model: type[Base],
        site_id: int,
        row_id: int,
        replacement_id: int | None,
    ) -> set[int]:
        """Lock the target (and replacement) rows, lowest id first."""
        ids = [row_id]
        if replacement_id is not None and replacement_id != row_id:
            ids.append(replacement_id)

        result = await self.db.execute(
            select(model.id)
            .where(model.site_id == site_id, model.id.in_(ids))
            .order_by(model.id)
            .with_for_update()
        )
        return set(result.scalars().all())

    @staticmethod
    def _check_replacement(
        kind: ReferenceKind,
        row_id: int,
        replacement_id: int | None,
        locked: set[int],
    ) -> None:
        if replacement_id is None:
            raise InvalidReplacement(
                "A replacement id is required for reassignment", {"kind": kind.value}
            )
        if replacement_id == row_id:
            raise InvalidReplacement(
                "Replacement must be different from the row being deleted",
                {"kind": kind.value, "replacement_id": replacement_id},
            )
        if replacement_id not in locked:
            raise InvalidReplacement(
                f"Replacement {kind.value} {replacement_id} not found in this site",
                {"kind": kind.value, "replacement_id": replacement_id},
            )

    async def _reassign(
        self, site_id: int, kind: ReferenceKind, row_id: int, replacement_id: int
    ) -> dict[str, int]:
        counts = {}
        for role in REFERENCE_ROLES[kind]:
            result = await self.db.execute(
                update(role.model)
                .where(*role.criteria(site_id, row_id))
                .values({role.column.key: replacement_id})
                .execution_options(synchronize_session=False)
            )
            counts[role.name] = result.rowcount
        return counts

    async def _cascade(self, site_id: int, kind: ReferenceKind, row_id: int) -> dict[str, int]:
        counts = {}
        for role in REFERENCE_ROLES[kind]:
            counts[role.name] = await self._delete_referencing(role, site_id, row_id)
        return counts

    async def _delete_referencing(self, role: ReferenceRole, site_id: int, row_id: int) -> int:
        """Delete rows referencing *row_id* in *role*, children first."""
        owners = select(role.model.id).where(*role.criteria(site_id, row_id))

        for child_model, owner_column in CHILD_ROWS.get(role.model, ()):
            await self.db.execute(
                delete(child_model)
                .where(owner_column.in_(owners))
                .execution_options(synchronize_session=False)
            )

        result = await self.db.execute(
            delete(role.model)
            .where(*role.criteria(site_id, row_id))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
