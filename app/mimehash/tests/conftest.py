"""Shared pytest fixtures for app.mimehash tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from app.mimehash.catalog import Category
from app.mimehash.rows import RegistryRow
from app.mimehash.table import SharedTable, TranslationTable

_ENV_KEYS = (
    "MIMEHASH_HOST",
    "MIMEHASH_PORT",
    "MIMEHASH_REGISTRY_URL",
    "MIMEHASH_USER_AGENT",
    "MIMEHASH_REFRESH_INTERVAL",
    "MIMEHASH_REFRESH_TIMEOUT",
    "MIMEHASH_MAX_PAYLOAD_SIZE",
    "MIMEHASH_DEBUG",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    dotenv = tmp_path / ".env"
    monkeypatch.setenv("DOTENV_PATH", str(dotenv))
    return dotenv


@pytest.fixture(autouse=True)
def _reset_settings(_isolate_env: Path):
    from app.mimehash.config import settings

    settings.reset_cfg()
    yield
    settings.reset_cfg()


@pytest.fixture()
def dotenv_path(_isolate_env: Path) -> Path:
    return _isolate_env


@pytest.fixture()
def small_table() -> TranslationTable:
    table = TranslationTable()
    table.insert(Category.IMAGE, RegistryRow(name="png", template="image/png"))
    table.insert(Category.TEXT, RegistryRow(name="plain"))
    table.insert(Category.APPLICATION, RegistryRow(name="json", template="application/json"))
    return table


@pytest.fixture()
def shared_table(small_table: TranslationTable) -> SharedTable:
    return SharedTable(small_table)
