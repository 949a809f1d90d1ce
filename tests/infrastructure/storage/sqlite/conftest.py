"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import followups.infrastructure.storage.sqlite.connection as conn_module
from followups.infrastructure.storage.sqlite.connection import close_pool
from followups.infrastructure.storage.sqlite.migrations.migrator import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> AsyncGenerator[Path, None]:
    """Create a temporary database with every migration applied."""
    await initialize_database(temp_db_path)
    yield temp_db_path


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def global_pool(mock_settings) -> AsyncGenerator[None, None]:
    """Route the module-level pool to the temp database for store tests."""
    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        yield
        await close_pool()


@pytest.fixture
async def seeded_client(global_pool) -> str:
    """Insert client ``c1`` for user ``u1`` so foreign keys resolve."""
    from followups.core.entities.client import Client
    from followups.infrastructure.storage.sqlite.client_store import SQLiteClientStore

    await SQLiteClientStore().create(Client(id="c1", user_id="u1", name="Acme"))
    return "c1"
