"""User settings persistence."""

import logging

from pydantic import ValidationError

from cardkeeper.config import ALL_KEYS, SETTINGS_KEY
from cardkeeper.db.store import ObjectStore
from cardkeeper.models.settings import UserSettings

logger = logging.getLogger(__name__)


async def load_settings(store: ObjectStore) -> UserSettings:
    """Stored settings, or defaults when none are stored or they are unreadable."""
    raw = await store.load(SETTINGS_KEY)
    if raw is None:
        return UserSettings()
    try:
        return UserSettings.model_validate(raw)
    except ValidationError as e:
        logger.warning("Stored settings are invalid, using defaults: %s", e)
        return UserSettings()


async def save_settings(store: ObjectStore, user_settings: UserSettings) -> UserSettings:
    await store.save(SETTINGS_KEY, user_settings.model_dump())
    return user_settings


async def clear_all_data(store: ObjectStore) -> int:
    """Delete the collection, decks, and settings."""
    removed = await store.clear(list(ALL_KEYS))
    logger.info("Cleared all stored data (%d keys)", removed)
    return removed
