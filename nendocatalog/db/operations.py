"""
Key-value store operations.

Provides async functions for reading and writing the local snapshot:
user collections and display/language preferences.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nendocatalog.models.criteria import DisplayMode
from nendocatalog.models.db import KeyValueDB
from nendocatalog.models.user_collections import UserCollections

logger = logging.getLogger(__name__)

USER_DATA_KEY = "nendoroidUserData"
DX_MODE_KEY = "dxMode"
SHOW_VARIANT_KEY = "showDXVariant"
LANGUAGE_KEY = "preferredLanguage"


# --- Generic Operations ---


async def get_value(session: AsyncSession, key: str) -> Any | None:
    """
    Get a stored value by key.

    Returns None if the key has never been written.
    """
    result = await session.execute(select(KeyValueDB).where(KeyValueDB.key == key))
    entry = result.scalar_one_or_none()
    return entry.value if entry else None


async def set_value(session: AsyncSession, key: str, value: Any) -> KeyValueDB:
    """Insert or replace the value stored under key."""
    result = await session.execute(select(KeyValueDB).where(KeyValueDB.key == key))
    entry = result.scalar_one_or_none()

    if entry:
        entry.value = value
    else:
        entry = KeyValueDB(key=key, value=value)
        session.add(entry)

    await session.flush()
    return entry


# --- User Collections ---


async def load_user_collections(session: AsyncSession) -> UserCollections:
    """
    Load owned/wishlist ids.

    Missing or malformed data yields empty collections.
    """
    stored = await get_value(session, USER_DATA_KEY)
    if stored is None:
        return UserCollections()
    if not isinstance(stored, dict):
        logger.warning("Stored user data is not an object, resetting: %r", type(stored).__name__)
        return UserCollections()
    for field_name in ("owned", "wishlist"):
        ids = stored.get(field_name)
        if ids is not None and not isinstance(ids, list):
            logger.warning(
                "Stored %s ids are not a list, resetting: %r", field_name, type(ids).__name__
            )
            return UserCollections()
    return UserCollections.from_dict(stored)


async def save_user_collections(session: AsyncSession, collections: UserCollections) -> None:
    """Persist owned/wishlist ids."""
    await set_value(session, USER_DATA_KEY, collections.to_dict())


# --- Preferences ---


async def load_display_mode(session: AsyncSession) -> DisplayMode | None:
    """Stored display mode, or None if never set."""
    stored = await get_value(session, DX_MODE_KEY)
    if stored is None:
        return None
    return DisplayMode.parse(str(stored))


async def load_show_variant(session: AsyncSession) -> bool | None:
    stored = await get_value(session, SHOW_VARIANT_KEY)
    if stored is None:
        return None
    return bool(stored)


async def load_language(session: AsyncSession) -> str | None:
    stored = await get_value(session, LANGUAGE_KEY)
    return str(stored) if stored else None


async def save_display_mode(session: AsyncSession, mode: DisplayMode) -> None:
    await set_value(session, DX_MODE_KEY, mode.value)


async def save_show_variant(session: AsyncSession, show_variant: bool) -> None:
    await set_value(session, SHOW_VARIANT_KEY, show_variant)


async def save_language(session: AsyncSession, language: str) -> None:
    await set_value(session, LANGUAGE_KEY, language)
