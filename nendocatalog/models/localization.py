"""
Per-language overrides for record text fields.

Overrides are keyed by record id and never touch the base record. A
LocalizedView is the derived read model the filter engine and views use.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from nendocatalog.models.record import Record

# {record_id: {"name": ..., "fandom": ..., "description": ..., "parts": [...]}}
LanguageOverrides = Mapping[str, Mapping[str, Any]]


@dataclass(frozen=True, slots=True)
class LocalizedView:
    """Record text fields after applying the current language's overrides."""

    record: Record
    name: str
    fandom: str
    description: str
    parts: tuple[str, ...]
    series: str | None = None


def localize(record: Record, overrides: LanguageOverrides | None) -> LocalizedView:
    """
    Apply language overrides to a record.

    Absent or empty override fields fall back to the record's own value.
    Parts are replaced only when the override supplies a list.
    """
    entry = overrides.get(record.id) if overrides else None
    if not entry:
        return LocalizedView(
            record=record,
            name=record.name,
            fandom=record.fandom,
            description=record.description,
            parts=record.parts,
        )

    parts = entry.get("parts")
    return LocalizedView(
        record=record,
        name=entry.get("name") or record.name,
        fandom=entry.get("fandom") or record.fandom,
        description=entry.get("description") or record.description,
        parts=tuple(parts) if isinstance(parts, list) else record.parts,
        series=entry.get("series") or None,
    )


def translated_fandom(
    fandom: str, records: list[Record], overrides: LanguageOverrides | None
) -> str:
    """
    Localized label for a raw fandom name.

    Uses the override of the first record carrying that fandom; falls back
    to the raw name.
    """
    if not records or not overrides:
        return fandom
    for record in records:
        if record.fandom == fandom:
            entry = overrides.get(record.id)
            if entry and entry.get("fandom"):
                return str(entry["fandom"])
            break
    return fandom
