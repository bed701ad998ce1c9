"""
Language override loading.

Overrides live next to the catalog as inventory-{lang}.json, an object
keyed by record id.
"""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# code -> (English name, native name)
LANGUAGES: dict[str, tuple[str, str]] = {
    "en": ("English", "English"),
    "zh": ("Chinese (Simplified)", "简体中文"),
    "zh_TW": ("Chinese (Traditional)", "繁體中文"),
    "ja": ("Japanese", "日本語"),
}

FALLBACK_LANGUAGE = "en"


def normalize_language(lang: str | None) -> str:
    """
    Map a requested language to a supported code.

    Accepts browser-style tags ("ja-JP" -> "ja", "zh-TW" -> "zh_TW").
    Unsupported codes fall back to English.
    """
    if not lang:
        return FALLBACK_LANGUAGE
    normalized = lang.replace("-", "_")
    if normalized in LANGUAGES:
        return normalized
    base = normalized.split("_")[0]
    if base in LANGUAGES:
        return base
    logger.warning("Language %s not supported, falling back to %s", lang, FALLBACK_LANGUAGE)
    return FALLBACK_LANGUAGE


def load_language_overrides(lang: str, data_dir: Path) -> dict[str, dict[str, Any]]:
    """
    Load field overrides for a language.

    A missing or unreadable file yields no overrides; records then show
    their own values.
    """
    path = data_dir / f"inventory-{lang}.json"
    if not path.exists():
        logger.debug("No overrides file for %s at %s", lang, path)
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Error loading overrides for %s: %s", lang, e)
        return {}

    if not isinstance(raw, dict):
        logger.error("Overrides for %s must be a JSON object keyed by record id", lang)
        return {}

    return {str(k): v for k, v in raw.items() if isinstance(v, dict)}
