"""Catalog service for cable types, SID types, device/CPU models and VLANs."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import DuplicateKey, NotFound
from cableindex.models import Base, ReferenceKind, SiteVlan
from cableindex.schemas import (
    CableTypeCreate,
    CableTypeUpdate,
    CatalogEntryCreate,
    CatalogEntryUpdate,
    CpuModelCreate,
    CpuModelUpdate,
    DeviceModelCreate,
    DeviceModelUpdate,
    SidTypeCreate,
    SidTypeUpdate,
    VlanCreate,
    VlanUpdate,
)
from cableindex.services.reference_graph import target_model

CATALOG_SCHEMAS: dict[ReferenceKind, type[CatalogEntryCreate]] = {
    ReferenceKind.CABLE_TYPE: CableTypeCreate,
    ReferenceKind.SID_TYPE: SidTypeCreate,
    ReferenceKind.DEVICE_MODEL: DeviceModelCreate,
    ReferenceKind.CPU_MODEL: CpuModelCreate,
    ReferenceKind.VLAN: VlanCreate,
}

CATALOG_UPDATE_SCHEMAS: dict[ReferenceKind, type[CatalogEntryUpdate]] = {
    ReferenceKind.CABLE_TYPE: CableTypeUpdate,
    ReferenceKind.SID_TYPE: SidTypeUpdate,
    ReferenceKind.DEVICE_MODEL: DeviceModelUpdate,
    ReferenceKind.CPU_MODEL: CpuModelUpdate,
    ReferenceKind.VLAN: VlanUpdate,
}


def catalog_model(kind: ReferenceKind) -> type[Base]:
    """Model for a catalog kind; locations are not a catalog."""
    kind = ReferenceKind(kind)
    if kind not in CATALOG_SCHEMAS:
        raise ValueError(f"{kind.value} is not a catalog kind")
    return target_model(kind)


def unique_field(model: type[Base]) -> str:
    """Column that must be unique per site: the VLAN number, otherwise the name."""
    return "vlan_id" if model is SiteVlan else "name"


class CatalogService:
    """Service for catalog CRUD operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self, site_id: int, kind: ReferenceKind) -> list[Base]:
        """Get all entries of one catalog in a site."""
        model = catalog_model(kind)
        order = model.vlan_id if model is SiteVlan else model.name
        result = await self.db.execute(
            select(model).where(model.site_id == site_id).order_by(order, model.id)
        )
        return list(result.scalars().all())

    async def get_by_id(self, site_id: int, kind: ReferenceKind, entry_id: int) -> Base | None:
        """Get a catalog entry by ID within a site."""
        model = catalog_model(kind)
        result = await self.db.execute(
            select(model).where(model.id == entry_id, model.site_id == site_id)
        )
        return result.scalar_one_or_none()

    async def create(self, site_id: int, kind: ReferenceKind, data: CatalogEntryCreate) -> Base:
        """Create a catalog entry.

        Raises:
            DuplicateKey: If the name (or VLAN number) is taken in the site
        """
        model = catalog_model(kind)
        field = unique_field(model)
        await self._ensure_unique(site_id, kind, field, getattr(data, field))

        entry = model(site_id=site_id, **data.model_dump())
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def update(
        self, site_id: int, kind: ReferenceKind, entry_id: int, data: CatalogEntryUpdate
    ) -> Base:
        """Update a catalog entry.

        Raises:
            NotFound: If the entry is not in the site
            DuplicateKey: If the new name (or VLAN number) is taken in the site
        """
        entry = await self.get_by_id(site_id, kind, entry_id)
        if entry is None:
            raise NotFound(
                f"{ReferenceKind(kind).value} {entry_id} not found", {"id": entry_id}
            )

        # name and vlan_id are NOT NULL
        update_data = {
            name: value
            for name, value in data.model_dump(exclude_unset=True).items()
            if value is not None or name not in ("name", "vlan_id")
        }
        field = unique_field(type(entry))
        if field in update_data and update_data[field] != getattr(entry, field):
            await self._ensure_unique(site_id, kind, field, update_data[field], exclude_id=entry.id)

        for name, value in update_data.items():
            setattr(entry, name, value)

        await self.db.flush()
        return entry

    async def _ensure_unique(
        self,
        site_id: int,
        kind: ReferenceKind,
        field: str,
        value,
        exclude_id: int | None = None,
    ) -> None:
        model = catalog_model(kind)
        query = select(model.id).where(model.site_id == site_id, getattr(model, field) == value)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)

        existing = await self.db.execute(query)
        if existing.scalars().first() is not None:
            raise DuplicateKey(
                f"{ReferenceKind(kind).value} must be unique per site",
                {"kind": ReferenceKind(kind).value, field: value},
            )
