from __future__ import annotations
from typing import Any, AsyncGenerator
from sqlalchemy import JSON, pool
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from eduvault.config import settings

class Base(DeclarativeBase):
    pass

def _engine_kwargs(url: str) -> dict[str, Any]:
    # SQLite (tests, local demos) gets a fresh connection per checkout
    if url.startswith("sqlite"):
        return {"poolclass": pool.NullPool}
    return {}

engine = create_async_engine(settings.database_url, future=True, echo=False, **_engine_kwargs(settings.database_url))
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)

async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session

# JSONB on Postgres, plain JSON elsewhere
JSONDoc = JSON().with_variant(JSONB(), "postgresql")
