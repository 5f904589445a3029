"""Deletion strategy, usage breakdown and deletion result schemas."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field

from cableindex.models import ReferenceKind


class DeleteStrategy(str, Enum):
    """How to treat records still referencing a row being deleted."""

    AUTO = "auto"  # delete only when unused, otherwise block
    REASSIGN = "reassign"
    CASCADE = "cascade"


def resolve_strategy(
    strategy: DeleteStrategy | None = None,
    cascade: str | bool | None = None,
) -> DeleteStrategy:
    """Normalize request flags into a single strategy.

    The legacy ``cascade=true`` flag wins over ``strategy``; anything else
    falls back to the requested strategy, or ``auto``.
    """
    if isinstance(cascade, str):
        cascade = cascade.strip().lower() == "true"
    if cascade:
        return DeleteStrategy.CASCADE
    return strategy or DeleteStrategy.AUTO


class UsageBreakdown(BaseModel):
    """Per-role count of records referencing one row."""

    kind: ReferenceKind
    row_id: int
    counts: dict[str, int] = Field(default_factory=dict)

    @computed_field
    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def __getitem__(self, role: str) -> int:
        return self.counts[role]


class DeletionResult(BaseModel):
    """What a deletion actually did."""

    strategy_used: DeleteStrategy
    usage: UsageBreakdown
    reassigned: dict[str, int] = Field(default_factory=dict)
    deleted: dict[str, int] = Field(default_factory=dict)
    replacement_id: int | None = None


class ReassignRequest(BaseModel):
    """Body for reassign-and-delete."""

    replacement_id: int = Field(..., ge=1)
