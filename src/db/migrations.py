"""Database initialisation — creates tables at startup."""

from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import make_url

from src.db.persistence import TripRepository


async def init_db(database_url: str) -> TripRepository:
    """Create tables and return a ready-to-use repository."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    repo = TripRepository(database_url)
    await repo.init_db()
    return repo
