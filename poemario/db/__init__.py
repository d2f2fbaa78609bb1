from poemario.db.database import (
    build_engine,
    build_session_factory,
    check_database_status,
    get_async_session,
    init_db,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "check_database_status",
    "get_async_session",
    "init_db",
]
