from nendocatalog.db.database import get_session, init_db, store_session
from nendocatalog.db.operations import (
    get_value,
    load_display_mode,
    load_language,
    load_show_variant,
    load_user_collections,
    save_display_mode,
    save_language,
    save_show_variant,
    save_user_collections,
    set_value,
)

__all__ = [
    "get_session",
    "get_value",
    "init_db",
    "load_display_mode",
    "load_language",
    "load_show_variant",
    "load_user_collections",
    "save_display_mode",
    "save_language",
    "save_show_variant",
    "save_user_collections",
    "set_value",
    "store_session",
]
