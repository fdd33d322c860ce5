import logging
from pathlib import Path

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from medrecords.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

_url = make_url(settings.DATABASE_URL)
_is_sqlite = _url.get_backend_name() == "sqlite"

if _is_sqlite:
    # SQLite connections are cheap; NullPool keeps them off any particular event loop
    engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, poolclass=NullPool)
else:
    engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, pool_size=10, max_overflow=20)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


if _is_sqlite:
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # Cascade deletes on notes/summaries depend on this pragma
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Base(DeclarativeBase):
    pass


def _ensure_sqlite_directory() -> None:
    database = _url.database
    if not database or database == ":memory:":
        return
    Path(database).parent.mkdir(parents=True, exist_ok=True)


async def init_db() -> None:
    """Create all tables. Raises if the store is unreachable."""
    import medrecords.models  # noqa: F401 — register ORM models with Base.metadata

    if _is_sqlite:
        _ensure_sqlite_directory()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized (%s)", _url.render_as_string(hide_password=True))


async def check_connection() -> bool:
    """Test database connectivity for health checks."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.warning("Database connectivity check failed", exc_info=True)
        return False


async def get_db() -> AsyncSession:
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
