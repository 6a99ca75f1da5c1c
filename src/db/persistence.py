"""Async owner-scoped CRUD for trip records."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.db.models import Base, Trip, utcnow
from src.state import Conditions, TripPatch, TripRecord

logger = logging.getLogger(__name__)


def apply_patch(record: TripRecord, patch: TripPatch, now: datetime | None = None) -> TripRecord:
    """Return a copy of record with the patch applied and updated_at refreshed."""
    updated = TripRecord(**record)
    for key, value in patch.items():
        if key in TripPatch.__annotations__:
            updated[key] = value
    updated["updated_at"] = now or utcnow()
    return updated


def _to_db_time(value: datetime) -> datetime:
    """SQLite has no timezone support; store UTC without tzinfo."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _from_db_time(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _to_record(row: Trip) -> TripRecord:
    return TripRecord(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        people=row.people,
        days=row.days,
        conditions=Conditions(**json.loads(row.conditions_json)),
        meals=json.loads(row.meals_json),
        created_at=_from_db_time(row.created_at),
        updated_at=_from_db_time(row.updated_at),
    )


def _write_record(row: Trip, record: TripRecord) -> None:
    row.name = record["name"]
    row.people = record["people"]
    row.days = record["days"]
    row.conditions_json = json.dumps(record["conditions"], ensure_ascii=False)
    row.meals_json = json.dumps(record["meals"], ensure_ascii=False)
    row.updated_at = _to_db_time(record["updated_at"])


class TripRepository:
    """Async repository for Trip CRUD backed by SQLAlchemy.

    Every query is filtered by owner_id; a trip owned by someone else behaves
    exactly like a missing one.
    """

    def __init__(self, database_url: str) -> None:
        self.engine = create_async_engine(database_url, echo=False)
        self.async_session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    async def init_db(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialised.")

    async def _get_row(self, session: AsyncSession, owner_id: str, trip_id: int) -> Trip | None:
        result = await session.execute(
            select(Trip).where(Trip.id == trip_id, Trip.owner_id == owner_id)
        )
        return result.scalar_one_or_none()

    async def create_trip(self, record: TripRecord) -> TripRecord:
        """Insert a new trip. The id is assigned here; any id on the input is ignored."""
        async with self.async_session() as session:
            row = Trip(
                owner_id=record["owner_id"],
                created_at=_to_db_time(record["created_at"]),
            )
            _write_record(row, record)
            session.add(row)
            await session.commit()
            await session.refresh(row)
            logger.info("Created trip %s for user %s", row.id, row.owner_id)
            return _to_record(row)

    async def get_trip(self, owner_id: str, trip_id: int) -> TripRecord | None:
        async with self.async_session() as session:
            row = await self._get_row(session, owner_id, trip_id)
            return _to_record(row) if row else None

    async def list_trips(self, owner_id: str) -> list[TripRecord]:
        async with self.async_session() as session:
            result = await session.execute(
                select(Trip).where(Trip.owner_id == owner_id).order_by(Trip.id)
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def count_trips(self, owner_id: str) -> int:
        async with self.async_session() as session:
            result = await session.execute(
                select(func.count()).select_from(Trip).where(Trip.owner_id == owner_id)
            )
            return result.scalar_one()

    async def update_trip(self, owner_id: str, trip_id: int, patch: TripPatch) -> None:
        """Apply a partial update. A missing trip is a silent no-op."""
        async with self.async_session() as session:
            row = await self._get_row(session, owner_id, trip_id)
            if row is None:
                logger.info("Update skipped, trip %s not found for user %s", trip_id, owner_id)
                return
            _write_record(row, apply_patch(_to_record(row), patch))
            await session.commit()

    async def delete_trip(self, owner_id: str, trip_id: int) -> None:
        """Delete a trip. A missing trip is a silent no-op."""
        async with self.async_session() as session:
            result = await session.execute(
                delete(Trip).where(Trip.id == trip_id, Trip.owner_id == owner_id)
            )
            await session.commit()
            if result.rowcount:
                logger.info("Deleted trip %s for user %s", trip_id, owner_id)

    async def close(self) -> None:
        await self.engine.dispose()
