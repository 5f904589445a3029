"""Site service for managing tenant sites."""

import logging

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from cableindex.core.errors import DuplicateKey, InUse, SiteNotFound
from cableindex.models import Site
from cableindex.schemas import SiteCreate, SiteUpdate
from cableindex.services.reference_graph import SITE_TEARDOWN_ORDER
from cableindex.services.usage_service import UsageCounter

logger = logging.getLogger(__name__)


class SiteService:
    """Service for site CRUD operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_all(self) -> list[Site]:
        """Get all sites."""
        result = await self.db.execute(select(Site).order_by(Site.name))
        return list(result.scalars().all())

    async def get_by_id(self, site_id: int) -> Site | None:
        """Get a site by ID."""
        result = await self.db.execute(select(Site).where(Site.id == site_id))
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> Site | None:
        """Get a site by its code."""
        result = await self.db.execute(select(Site).where(Site.code == code.upper()))
        return result.scalar_one_or_none()

    async def require(self, site_id: int) -> Site:
        """Get a site by ID, raising SiteNotFound if missing."""
        site = await self.get_by_id(site_id)
        if site is None:
            raise SiteNotFound(site_id)
        return site

    async def create(self, data: SiteCreate) -> Site:
        """Create a new site."""
        existing = await self.db.execute(
            select(Site).where(or_(Site.name == data.name, Site.code == data.code))
        )
        if existing.scalars().first() is not None:
            raise DuplicateKey(
                "A site with this name or code already exists",
                {"name": data.name, "code": data.code},
            )

        site = Site(name=data.name, code=data.code, description=data.description)
        self.db.add(site)
        await self.db.flush()
        return site

    async def update(self, site_id: int, data: SiteUpdate) -> Site:
        """Update an existing site.

        Labels keep the reference strings they were issued with when the
        code changes; only new labels use the new code.

        Raises:
            SiteNotFound: If the site does not exist
            DuplicateKey: If another site already has the new name or code
        """
        site = await self.require(site_id)

        update_data = data.model_dump(exclude_unset=True)
        # name and code are NOT NULL
        unique = {
            field: update_data.pop(field)
            for field in ("name", "code")
            if field in update_data
        }
        unique = {field: value for field, value in unique.items() if value is not None}

        if unique:
            existing = await self.db.execute(
                select(Site.id).where(
                    or_(*(getattr(Site, field) == value for field, value in unique.items())),
                    Site.id != site_id,
                )
            )
            if existing.scalars().first() is not None:
                raise DuplicateKey("A site with this name or code already exists", unique)
            update_data.update(unique)

        for field, value in update_data.items():
            setattr(site, field, value)

        await self.db.flush()
        logger.info(f"Updated site {site_id}: {sorted(update_data)}")
        return site

    async def ensure_from_config(self, name: str, code: str, description: str | None) -> Site:
        """Ensure a site exists from config, creating if necessary."""
        site = await self.get_by_code(code)

        if site:
            # Update if needed
            if site.name != name or site.description != description:
                site.name = name
                site.description = description
                await self.db.flush()
        else:
            site = await self.create(SiteCreate(name=name, code=code, description=description))

        return site

    async def delete(self, site_id: int, cascade: bool = False) -> dict[str, int]:
        """Delete a site, refusing while it owns rows unless *cascade*.

        Returns:
            Rows removed per table (empty for an unused site)
        """
        result = await self.db.execute(select(Site.id).where(Site.id == site_id).with_for_update())
        if result.scalar_one_or_none() is None:
            raise SiteNotFound(site_id)

        dependents = await UsageCounter(self.db).count_site_dependents(site_id)
        if dependents and not cascade:
            raise InUse(dependents, "Site still owns records")

        removed = {}
        for model in SITE_TEARDOWN_ORDER:
            result = await self.db.execute(
                delete(model)
                .where(model.site_id == site_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount:
                removed[model.__tablename__] = result.rowcount

        await self.db.execute(
            delete(Site).where(Site.id == site_id).execution_options(synchronize_session=False)
        )
        logger.info(f"Deleted site {site_id} (removed={removed})")
        return removed
