"""Which tables point at locations and catalog rows, and in which role.

The usage counter, deletion engine and site teardown all walk these maps;
adding a new referencing column means adding one ``ReferenceRole`` here.
"""

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute

from cableindex.core.errors import InvalidReference
from cableindex.models import (
    Base,
    CableType,
    Label,
    ReferenceKind,
    Sid,
    SidCpuModel,
    SidDeviceModel,
    SidNic,
    SidNote,
    SidType,
    SiteCounter,
    SiteLocation,
    SiteVlan,
)


@dataclass(frozen=True)
class ReferenceRole:
    """One foreign-key column that can point at a target row."""

    name: str
    model: type[Base]
    column: InstrumentedAttribute

    def criteria(self, site_id: int, row_id: int) -> tuple:
        return (self.model.site_id == site_id, self.column == row_id)


TARGET_MODELS: dict[ReferenceKind, type[Base]] = {
    ReferenceKind.LOCATION: SiteLocation,
    ReferenceKind.CABLE_TYPE: CableType,
    ReferenceKind.SID_TYPE: SidType,
    ReferenceKind.DEVICE_MODEL: SidDeviceModel,
    ReferenceKind.CPU_MODEL: SidCpuModel,
    ReferenceKind.VLAN: SiteVlan,
}

REFERENCE_ROLES: dict[ReferenceKind, tuple[ReferenceRole, ...]] = {
    ReferenceKind.LOCATION: (
        ReferenceRole("source", Label, Label.source_location_id),
        ReferenceRole("destination", Label, Label.destination_location_id),
        ReferenceRole("installation", Sid, Sid.location_id),
    ),
    ReferenceKind.CABLE_TYPE: (ReferenceRole("labels", Label, Label.cable_type_id),),
    ReferenceKind.SID_TYPE: (ReferenceRole("sids", Sid, Sid.sid_type_id),),
    ReferenceKind.DEVICE_MODEL: (ReferenceRole("sids", Sid, Sid.device_model_id),),
    ReferenceKind.CPU_MODEL: (ReferenceRole("sids", Sid, Sid.cpu_model_id),),
    ReferenceKind.VLAN: (ReferenceRole("nics", SidNic, SidNic.site_vlan_id),),
}

# Rows owned by a referencing row; they are removed before their owner.
CHILD_ROWS: dict[type[Base], tuple[tuple[type[Base], InstrumentedAttribute], ...]] = {
    Sid: ((SidNic, SidNic.sid_id), (SidNote, SidNote.sid_id)),
}

# Order for removing everything a site owns: children before parents.
SITE_TEARDOWN_ORDER: tuple[type[Base], ...] = (
    SidNote,
    SidNic,
    Sid,
    Label,
    SiteLocation,
    CableType,
    SidType,
    SidDeviceModel,
    SidCpuModel,
    SiteVlan,
    SiteCounter,
)


def target_model(kind: ReferenceKind) -> type[Base]:
    """Model class for a reference kind."""
    return TARGET_MODELS[ReferenceKind(kind)]


async def require_reference(
    db: AsyncSession,
    model: type[Base],
    site_id: int,
    row_id: int | None,
    field: str,
) -> None:
    """Check that *row_id* exists in the site and hold it until commit.

    A shared row lock (``FOR SHARE``, where the store has one) keeps a
    concurrent deletion from removing the row before our insert commits.
    ``None`` means the optional reference is unset.
    """
    if row_id is None:
        return

    result = await db.execute(
        select(model.id)
        .where(model.id == row_id, model.site_id == site_id)
        .with_for_update(read=True)
    )
    if result.scalar_one_or_none() is None:
        raise InvalidReference(field, row_id)
