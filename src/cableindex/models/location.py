"""Structured physical locations within a site."""

from enum import Enum

from sqlalchemy import ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cableindex.models.base import Base, TimestampMixin


class LocationTemplate(str, Enum):
    """Which positional attributes a location uses."""

    DATACENTRE = "DATACENTRE"  # floor + suite + row + rack
    DOMESTIC = "DOMESTIC"  # floor + area


def coords_key(
    template_type: LocationTemplate,
    floor: str,
    suite: str | None = None,
    row: str | None = None,
    rack: str | None = None,
    area: str | None = None,
) -> str:
    """Normalized positional tuple used for per-site uniqueness."""
    if template_type == LocationTemplate.DOMESTIC:
        parts = [floor, area]
    else:
        parts = [floor, suite, row, rack]
    return "|".join([template_type.value] + [(p or "").strip() for p in parts])


class SiteLocation(Base, TimestampMixin):
    """A rack position or free-form area inside a site."""

    __tablename__ = "site_locations"
    __table_args__ = (
        UniqueConstraint("site_id", "coords_key", name="uq_site_locations_coords"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    template_type: Mapped[LocationTemplate] = mapped_column(
        String(16), default=LocationTemplate.DATACENTRE, nullable=False
    )

    floor: Mapped[str] = mapped_column(String(50), nullable=False)
    suite: Mapped[str | None] = mapped_column(String(50), nullable=True)
    row: Mapped[str | None] = mapped_column(String(50), nullable=True)
    rack: Mapped[str | None] = mapped_column(String(50), nullable=True)
    area: Mapped[str | None] = mapped_column(String(64), nullable=True)

    label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    coords_key: Mapped[str] = mapped_column(String(300), nullable=False)

    def __repr__(self) -> str:
        return f"<SiteLocation {self.id}: {self.coords_key}>"
