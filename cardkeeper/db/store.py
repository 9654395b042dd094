"""
Persisted object store.

Each call opens its own session and commits its own transaction, so a
caller always reads the full current value and writes back a full value.
Any database failure surfaces as StorageError; a failed write leaves the
stored value as it was.
"""

import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cardkeeper.db.operations import delete_objects, get_object, put_object
from cardkeeper.models.failure import StorageError

logger = logging.getLogger(__name__)


class ObjectStore:
    """Key/value store of JSON documents backed by the stored_objects table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default if there is none."""
        try:
            async with self._session_factory() as session:
                stored = await get_object(session, key)
        except SQLAlchemyError as e:
            logger.error("Failed to load %s: %s", key, e)
            raise StorageError(key, detail=str(e)) from e

        if stored is None or stored.value is None:
            return default
        return stored.value

    async def save(self, key: str, value: Any) -> None:
        """Replace the value stored under key."""
        try:
            async with self._session_factory() as session, session.begin():
                await put_object(session, key, value)
        except SQLAlchemyError as e:
            logger.error("Failed to save %s: %s", key, e)
            raise StorageError(key, detail=str(e)) from e

    async def clear(self, keys: list[str]) -> int:
        """Delete the given keys. Returns how many were present."""
        try:
            async with self._session_factory() as session, session.begin():
                return await delete_objects(session, keys)
        except SQLAlchemyError as e:
            logger.error("Failed to clear %s: %s", keys, e)
            raise StorageError(", ".join(keys), detail=str(e)) from e
