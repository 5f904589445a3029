"""Site catalogs referenced by labels, SIDs and NICs."""

from enum import Enum

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cableindex.models.base import Base, TimestampMixin


class ReferenceKind(str, Enum):
    """Kind of row that labels, SIDs or NICs point at."""

    LOCATION = "location"
    CABLE_TYPE = "cable_type"
    SID_TYPE = "sid_type"
    DEVICE_MODEL = "device_model"
    CPU_MODEL = "cpu_model"
    VLAN = "vlan"


class CableType(Base, TimestampMixin):
    """Cable type used by labels (e.g., CAT6, OM4)."""

    __tablename__ = "cable_types"
    __table_args__ = (UniqueConstraint("site_id", "name", name="uq_cable_types_site_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<CableType {self.id}: {self.name}>"


class SidType(Base, TimestampMixin):
    """Device category (server, switch, PDU...)."""

    __tablename__ = "sid_types"
    __table_args__ = (UniqueConstraint("site_id", "name", name="uq_sid_types_site_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SidType {self.id}: {self.name}>"


class SidDeviceModel(Base, TimestampMixin):
    """Hardware model of a device."""

    __tablename__ = "sid_device_models"
    __table_args__ = (
        UniqueConstraint("site_id", "name", name="uq_sid_device_models_site_name"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    manufacturer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SidDeviceModel {self.id}: {self.name}>"


class SidCpuModel(Base, TimestampMixin):
    """CPU model installed in a device."""

    __tablename__ = "sid_cpu_models"
    __table_args__ = (UniqueConstraint("site_id", "name", name="uq_sid_cpu_models_site_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    manufacturer: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cpu_cores: Mapped[int | None] = mapped_column(Integer, nullable=True)
    cpu_threads: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SidCpuModel {self.id}: {self.name}>"


class SiteVlan(Base, TimestampMixin):
    """VLAN defined for a site; unique by VLAN number."""

    __tablename__ = "site_vlans"
    __table_args__ = (UniqueConstraint("site_id", "vlan_id", name="uq_site_vlans_site_vlan"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vlan_id: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<SiteVlan {self.id}: {self.vlan_id} {self.name}>"
