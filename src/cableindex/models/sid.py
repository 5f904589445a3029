"""SID (device) model with its NIC and note sub-records."""

from enum import Enum

from sqlalchemy import Boolean, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cableindex.models.base import Base, TimestampMixin


class SidNoteType(str, Enum):
    """Kind of SID note."""

    NOTE = "NOTE"
    CRITICAL = "CRITICAL"


class Sid(Base, TimestampMixin):
    """Tracked device, numbered per site."""

    __tablename__ = "sids"
    __table_args__ = (UniqueConstraint("site_id", "sid_number", name="uq_sids_site_number"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Allocated from the site's sid_number counter
    sid_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Catalog references
    sid_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sid_types.id"), nullable=True, index=True
    )
    device_model_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sid_device_models.id"), nullable=True, index=True
    )
    cpu_model_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sid_cpu_models.id"), nullable=True, index=True
    )

    # Installation location
    location_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("site_locations.id"), nullable=True, index=True
    )
    rack_u: Mapped[str | None] = mapped_column(String(16), nullable=True)

    hostname: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    serial_number: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Hardware
    cpu_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    ram_gb: Mapped[float | None] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=True)

    # Software
    os_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    os_version: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Networking
    mgmt_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    mgmt_mac: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<Sid {self.id}: #{self.sid_number}>"

    @property
    def display_name(self) -> str:
        return self.hostname or f"SID {self.sid_number}"


class SidNic(Base, TimestampMixin):
    """Network interface of a SID."""

    __tablename__ = "sid_nics"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sid_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sids.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mac_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    site_vlan_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("site_vlans.id"), nullable=True, index=True
    )

    def __repr__(self) -> str:
        return f"<SidNic {self.id}: {self.name}>"


class SidNote(Base, TimestampMixin):
    """Free-text note attached to a SID."""

    __tablename__ = "sid_notes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sid_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sids.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[SidNoteType] = mapped_column(String(16), default=SidNoteType.NOTE, nullable=False)
    note_text: Mapped[str] = mapped_column(Text, nullable=False)
    pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<SidNote {self.id} for SID {self.sid_id}>"
