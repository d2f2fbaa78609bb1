from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import os
from pathlib import Path

from fastapi import FastAPI, Request
from alembic.config import Config
from alembic import command

from poemario import __version__
from poemario.db import build_engine, build_session_factory, check_database_status, init_db
from poemario.db.seed import seed_sample_data
from poemario.core import Settings, get_settings
from poemario.core.exceptions import register_exception_handlers
from poemario.core.middleware import PreflightCORSMiddleware, RequestLoggingMiddleware
from poemario.api.v1 import api_router
from poemario.api.admin import admin_router
from poemario.query.envelope import success_response
from poemario.logs.server_log import api_logger

ALEMBIC_INI = os.path.join(Path(__file__).parent.parent, "alembic.ini")


def _upgrade(connection, alembic_cfg: Config) -> None:
    # Миграции выполняются на соединении приложения, env.py его переиспользует
    alembic_cfg.attributes["connection"] = connection
    command.upgrade(alembic_cfg, "head")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    # Lifespan event handler
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        engine = build_engine(settings)
        app.state.engine = engine
        app.state.session_factory = build_session_factory(engine)
        try:
            if settings.RUN_MIGRATIONS:
                alembic_cfg = Config(ALEMBIC_INI)
                alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
                async with engine.begin() as conn:
                    await conn.run_sync(_upgrade, alembic_cfg)
                api_logger.info("Database migrations applied")

            # Initialize database on startup
            await init_db(engine)

            if settings.SEED_SAMPLE_DATA:
                async with app.state.session_factory() as session:
                    if await seed_sample_data(session):
                        api_logger.info("Sample data inserted")
        except Exception as e:
            api_logger.error(f"Error initializing database: {e}")
            await engine.dispose()
            raise

        yield

        # Clean up resources on shutdown
        await engine.dispose()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="API de poemas: catálogo público de solo lectura y CRUD de administración",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.api_version = settings.API_VERSION

    # Configure CORS
    app.add_middleware(
        PreflightCORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=settings.ALLOWED_METHODS,
        allow_headers=["*"],
        max_age=3600,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    # Include API routers
    app.include_router(api_router)
    app.include_router(admin_router)

    @app.get("/")
    async def root(request: Request):
        """Health check endpoint"""
        api_logger.info(f"Received health check request: {request.method} {request.url}")
        return success_response(
            {"message": f"{settings.PROJECT_NAME} is running"},
            version=settings.API_VERSION,
        )

    @app.get("/health")
    async def health(request: Request):
        """Состояние БД: соединение, таблицы и данные"""
        status = await check_database_status(request.app.state.engine)
        return success_response(status, version=settings.API_VERSION)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    print("\033[1;36m" + "=" * 50 + "\033[0m")  # Cyan
    print("\033[1;36m" + f"  Запуск {settings.PROJECT_NAME}" + "\033[0m")  # Cyan
    print("\033[1;36m" + "=" * 50 + "\033[0m")  # Cyan

    api_logger.info("Сервер запускается на http://0.0.0.0:8000")

    # Запускаем uvicorn с настройкой логирования
    uvicorn.run(
        "poemario.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
