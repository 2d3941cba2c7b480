"""Shared fixtures for task board tests."""

import pytest
import pytest_asyncio

from taskboard import config as config_module
from taskboard.models.database import init_db
from taskboard.services.board import BoardController
from taskboard.store import MemoryStore, SQLAlchemyStore


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Start each test without a cached config or TASKBOARD_* overrides."""
    monkeypatch.setattr(config_module, "_config", None)
    for name in (
        "TASKBOARD_CONFIG",
        "TASKBOARD_DB_PATH",
        "TASKBOARD_DB_BACKEND",
        "TASKBOARD_LOG_LEVEL",
        "TASKBOARD_STRICT_REFERENCES",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    """SQLAlchemyStore with temp database."""
    engine = await init_db(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    store = SQLAlchemyStore(engine)
    yield store
    await store.close()


@pytest_asyncio.fixture(params=["sqlite", "memory"])
async def store(request, tmp_path):
    """Each store backend in turn."""
    if request.param == "memory":
        yield MemoryStore()
        return

    engine = await init_db(f"sqlite+aiosqlite:///{tmp_path / 'board.db'}")
    store = SQLAlchemyStore(engine)
    yield store
    await store.close()


@pytest_asyncio.fixture
async def board(store):
    """Initialized BoardController over each store backend."""
    controller = BoardController(store)
    await controller.initialize()
    return controller


def titles(board, list_id):
    return [t.title for t in board.projection.tickets_by_list[list_id]]


def orders(board, list_id):
    return [t.order for t in board.projection.tickets_by_list[list_id]]
