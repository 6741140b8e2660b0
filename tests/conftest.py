from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote potluck seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from potluck.core.config import Settings  # noqa: E402
from potluck.repositories.json_storage import JsonFileStorage  # noqa: E402
from potluck.repositories.sql_repository import SQLStorage  # noqa: E402


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        app_env="test",
        database_url="",
        data_file=str(tmp_path / "potluck.json"),
        admin_password="s3cret",
        static_dir=str(tmp_path / "dist"),
        log_level="INFO",
        host="127.0.0.1",
        port=3000,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture()
def json_storage(tmp_path):
    storage = JsonFileStorage(tmp_path / "potluck.json")
    storage.ensure_schema()
    yield storage
    storage.close()


@pytest.fixture()
def sql_storage(tmp_path):
    """SQLite temporário; engine descartado no teardown para não bloquear o arquivo no Windows."""
    storage = SQLStorage(f"sqlite:///{tmp_path / 'test.db'}")
    storage.ensure_schema()
    yield storage
    storage.close()


@pytest.fixture(params=["json", "sql"])
def storage(request):
    """Runs a test once per backend."""
    return request.getfixturevalue(f"{request.param}_storage")
