import os
import tempfile

import pytest

# Логи тестов не должны попадать в каталог пакета
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="poemario-logs-"))


@pytest.fixture
def settings(tmp_path):
    from poemario.core.config import Settings
    return Settings(
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'poemario_test.db'}",
        RUN_MIGRATIONS=False,
        SEED_SAMPLE_DATA=True,
        DEBUG=False,
    )


@pytest.fixture
def client(settings):
    """Приложение на временной SQLite с демо-данными; lifespan выполняется в with"""
    from fastapi.testclient import TestClient
    from poemario.main import create_app

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
