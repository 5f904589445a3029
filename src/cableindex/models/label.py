"""Cable label model."""

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from cableindex.models.base import Base, TimestampMixin


class Label(Base, TimestampMixin):
    """Cable run between two locations, numbered per site."""

    __tablename__ = "labels"
    __table_args__ = (UniqueConstraint("site_id", "ref_number", name="uq_labels_site_ref"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Allocated from the site's label_ref counter
    ref_number: Mapped[int] = mapped_column(Integer, nullable=False)
    ref_string: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    source_location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("site_locations.id"), nullable=False, index=True
    )
    destination_location_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("site_locations.id"), nullable=False, index=True
    )
    cable_type_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("cable_types.id"), nullable=True, index=True
    )

    type: Mapped[str] = mapped_column(String(32), default="cable", nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Label {self.id}: {self.ref_string}>"
