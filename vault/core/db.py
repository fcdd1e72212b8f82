# vault/core/db.py
from collections.abc import AsyncGenerator
from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from vault.core.config import settings

# same names as the hand-written migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

def build_engine(url: str) -> AsyncEngine:
    # pre-ping only matters for pooled server connections (MySQL drops idle ones)
    if make_url(url).get_backend_name() == "sqlite":
        return create_async_engine(url, echo=False)
    return create_async_engine(url, echo=False, pool_pre_ping=True, pool_recycle=3600)

engine = build_engine(settings.async_database_url)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request; whatever was not committed is rolled back on close."""
    async with SessionLocal() as session:
        yield session
