"""Async Postgres engine for the counseling store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from healthcoach.config import settings

_SYNC_SCHEMES = ("postgres://", "postgresql://", "postgresql+psycopg2://")


def async_database_url(url: str) -> str:
    """Point Heroku/Render style postgres URLs at the asyncpg driver."""
    for scheme in _SYNC_SCHEMES:
        if url.startswith(scheme):
            return "postgresql+asyncpg://" + url[len(scheme):]
    return url


engine = create_async_engine(async_database_url(settings.database_url), pool_pre_ping=True)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:  # type: ignore[misc]
    """One session per request; the store commits its own writes."""
    async with async_session() as session:
        yield session
