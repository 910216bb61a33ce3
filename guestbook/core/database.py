# guestbook/core/database.py
import asyncio
import logging
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from guestbook.core.config import settings

logging.basicConfig(level=logging.DEBUG if settings.DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


def engine_options(url: str) -> Dict[str, Any]:
    """
    Engine keyword arguments per backend. Postgres gets a pinged pool;
    SQLite gets cross-thread access, and an in-memory database is pinned
    to a single connection so every session sees the same tables.
    """
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
        options["poolclass"] = StaticPool
    return options


engine = create_async_engine(
    settings.ASYNC_DATABASE_URL,
    echo=False,
    **engine_options(settings.ASYNC_DATABASE_URL),
)

# expire_on_commit=False: entries stay readable after the engine commits
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)

Base = declarative_base()


async def get_db():
    """One session per request; anything left uncommitted on error is rolled back."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise
        finally:
            await session.close()


async def wait_for_db(retries: Optional[int] = None, delay: Optional[float] = None):
    """Block until the entry store answers a trivial query."""
    retries = retries or settings.DB_CONNECT_RETRIES
    delay = settings.DB_CONNECT_DELAY if delay is None else delay
    logger.info(f"⏳ Waiting for entry store... (Max retries: {retries})")

    for attempt in range(1, retries + 1):
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("✅ Entry store is ready!")
            return
        except (SQLAlchemyError, OSError) as e:
            if attempt == retries:
                logger.error(f"❌ Entry store unreachable after {retries} attempts: {e}")
                raise
            logger.warning(f"⚠️ Entry store not ready yet. Retrying in {delay}s... ({attempt}/{retries})")
            await asyncio.sleep(delay)
