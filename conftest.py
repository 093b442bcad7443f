import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine

ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Provide sane defaults for the database settings so tests can import the app without a .env
os.environ.setdefault("DB_HOST", "127.0.0.1")
os.environ.setdefault("DB_PORT", "3306")
os.environ.setdefault("DB_USER", "graph")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_NAME", "graph_test")

from nodegraph.core.config import Settings
from nodegraph.db.schema import metadata


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """SQLite file with the nodes and connections tables already created."""
    path = tmp_path / "graph.db"
    engine = create_engine(f"sqlite:///{path}")
    metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def sync_engine(db_path: Path):
    """Synchronous engine for seeding and inspecting rows outside the app."""
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def test_settings(db_path: Path) -> Settings:
    return Settings(DATABASE_URL=f"sqlite+aiosqlite:///{db_path}")
