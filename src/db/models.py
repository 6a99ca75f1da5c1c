"""SQLAlchemy models for camping trip persistence."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    people: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    days: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    conditions_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    meals_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (Index("idx_trips_owner", "owner_id"),)

    def __repr__(self) -> str:
        return f"<Trip {self.id} owner={self.owner_id} name={self.name!r}>"
