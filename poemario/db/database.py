from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy import inspect, select, func
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from poemario.core.config import Settings
from poemario.logs import debug_logger


TABLES = ("autores", "categorias", "etiquetas", "poemas", "poema_etiquetas")


def _connect_args(database_url: str, timeout: float) -> dict:
    """Таймаут выполнения запроса в терминах конкретного драйвера"""
    if not timeout:
        return {}
    driver = make_url(database_url).drivername
    if driver.endswith("asyncpg"):
        return {
            "command_timeout": timeout,
            "server_settings": {"statement_timeout": str(int(timeout * 1000))},
        }
    if driver.startswith("sqlite"):
        return {"timeout": timeout}
    return {}


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine; lifecycle is owned by the application lifespan"""
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        future=True,
        poolclass=NullPool,
        connect_args=_connect_args(settings.DATABASE_URL, settings.STATEMENT_TIMEOUT_SECONDS),
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


# Dependency for FastAPI
async def get_async_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(engine: AsyncEngine) -> None:
    """Создание отсутствующих таблиц"""
    async with engine.begin() as conn:
        # Import here to avoid circular imports
        from poemario.db.models import Base
        await conn.run_sync(Base.metadata.create_all)


def _existing_tables(sync_conn) -> set:
    return set(inspect(sync_conn).get_table_names())


async def check_database_status(engine: AsyncEngine) -> dict:
    """Проверка соединения, наличия таблиц и данных"""
    from poemario.models import Author

    status = {
        "database_connected": False,
        "tables_created": False,
        "data_inserted": False,
    }
    try:
        async with engine.connect() as conn:
            status["database_connected"] = True
            existing = await conn.run_sync(_existing_tables)
            status["missing_tables"] = [table for table in TABLES if table not in existing]
            status["tables_created"] = not status["missing_tables"]
            if status["tables_created"]:
                total = await conn.scalar(select(func.count()).select_from(Author))
                status["data_inserted"] = bool(total)
    except Exception as e:
        debug_logger.error(f"Проверка состояния БД завершилась ошибкой: {e}")
        status["error"] = str(e)
    return status
