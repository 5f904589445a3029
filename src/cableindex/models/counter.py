"""Per-site sequence counters."""

from enum import Enum

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from cableindex.models.base import Base


class SequenceKind(str, Enum):
    """Category of identifier issued from a site counter."""

    LABEL_REF = "label_ref"
    SID_NUMBER = "sid_number"


class SiteCounter(Base):
    """Next unissued value for one (site, kind) pair."""

    __tablename__ = "site_counters"

    site_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("sites.id", ondelete="CASCADE"), primary_key=True
    )
    kind: Mapped[SequenceKind] = mapped_column(String(32), primary_key=True)
    next_value: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def __repr__(self) -> str:
        return f"<SiteCounter {self.site_id}/{self.kind}: {self.next_value}>"
