"""
Database CRUD operations.

Provides async functions for reading, writing, and deleting stored
JSON documents by key.
"""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cardkeeper.models.db import StoredObjectDB


async def get_object(session: AsyncSession, key: str) -> StoredObjectDB | None:
    """
    Get a stored document by key.

    Returns None if nothing is stored under this key.
    """
    result = await session.execute(select(StoredObjectDB).where(StoredObjectDB.key == key))
    return result.scalar_one_or_none()


async def put_object(session: AsyncSession, key: str, value: Any) -> StoredObjectDB:
    """
    Insert or replace the document stored under key.

    The whole value is written; nothing is merged with the previous one.
    """
    existing = await get_object(session, key)

    if existing:
        existing.value = value
        await session.flush()
        return existing

    stored = StoredObjectDB(key=key, value=value)
    session.add(stored)
    await session.flush()
    return stored


async def delete_objects(session: AsyncSession, keys: list[str]) -> int:
    """
    Delete the documents stored under the given keys.

    Returns the number of deleted records.
    """
    result = await session.execute(delete(StoredObjectDB).where(StoredObjectDB.key.in_(keys)))
    # rowcount is available on DELETE results; type stubs incomplete for async
    return int(result.rowcount)  # type: ignore[attr-defined]
