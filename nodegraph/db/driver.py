# nodegraph/db/driver.py
import enum
import logging

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from nodegraph.core.exceptions import DatabaseUnavailableException

logger = logging.getLogger(__name__)

class DatabaseState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    CONNECTED = "connected"
    CLOSED = "closed"

class Database:
    """Owns the single engine shared by every request for the process lifetime."""

    def __init__(self, url: str):
        self.url = url
        self.state = DatabaseState.UNINITIALIZED
        self._engine: AsyncEngine | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self.state is not DatabaseState.CONNECTED or self._engine is None:
            raise RuntimeError(f"Database is {self.state.value}, not connected.")
        return self._engine

    async def connect(self) -> "Database":
        if self.state is not DatabaseState.UNINITIALIZED:
            raise RuntimeError(f"Database is already {self.state.value}.")

        engine = create_async_engine(self.url)
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Database is not accessible: %s", exc)
            await engine.dispose()
            raise DatabaseUnavailableException(f"Database is not accessible: {exc}") from exc

        self._engine = engine
        self.state = DatabaseState.CONNECTED
        logger.info("Successfully connected to the database.")
        return self

    async def close(self) -> None:
        if self.state is not DatabaseState.CONNECTED:
            return
        await self._engine.dispose()
        self._engine = None
        self.state = DatabaseState.CLOSED
        logger.info("Database connection closed.")

def get_database(request: Request) -> Database:
    return request.app.state.database
