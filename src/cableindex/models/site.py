"""Site model: the tenant boundary every other row is scoped to."""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from cableindex.models.base import Base, TimestampMixin


class Site(Base, TimestampMixin):
    """Organizational site owning locations, catalogs, labels and SIDs."""

    __tablename__ = "sites"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Site {self.id}: {self.code}>"
