import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from platecoach.core.settings import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


# Global engine/session factory
_async_engine: Optional[AsyncEngine] = None
_async_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _build_engine(url: str) -> AsyncEngine:
    # asyncpg rejects libpq style query options, translate the ones we know
    if "asyncpg" in url:
        u = make_url(url)
        q = dict(u.query)
        connect_args = {}

        if "sslmode" in q:
            mode = q.pop("sslmode")
            if mode in ("require", "verify-full"):
                connect_args["ssl"] = "require"
            elif mode == "disable":
                connect_args["ssl"] = False

        q.pop("channel_binding", None)

        u = u._replace(query=q)
        return create_async_engine(u, connect_args=connect_args, echo=False, pool_pre_ping=True)

    return create_async_engine(url, echo=False, pool_pre_ping=True)


def init_db() -> None:
    global _async_engine, _async_session_factory

    url = get_settings().database_url
    safe_url = url.split("@")[-1] if "@" in url else url
    logger.info("Connecting to database: %s", safe_url)

    _async_engine = _build_engine(url)
    _async_session_factory = async_sessionmaker(_async_engine, expire_on_commit=False)


def get_engine() -> Optional[AsyncEngine]:
    return _async_engine


async def create_tables() -> None:
    # Register the mapped tables on Base.metadata
    import platecoach.models  # noqa: F401

    if _async_engine:
        async with _async_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)


async def dispose_db() -> None:
    global _async_engine, _async_session_factory

    if _async_engine:
        await _async_engine.dispose()
    _async_engine = None
    _async_session_factory = None


async def check_db_health() -> dict:
    if not _async_engine:
        return {"ok": False, "error": "Database not initialised"}

    try:
        async with _async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"ok": True, "driver": _async_engine.driver}
    except Exception as e:
        logger.error("DB Health Check Failed: %s", e)
        return {"ok": False, "error": str(e)}


def get_session_factory() -> Optional[async_sessionmaker[AsyncSession]]:
    return _async_session_factory
