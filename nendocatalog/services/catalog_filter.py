"""
Catalog filter service.

Evaluates filter criteria over the displayed set.

Supports queries like:
- "Everything from Hatsune Miku" -> fandom="Hatsune Miku"
- "Figures with pink or blue hair" -> hair_colors={"pink", "blue"}
- "Figures that come with a microphone and a leek" -> parts={"Microphone", "Leek"}
- "Numbers 1500 to 1600" -> id_min=1500, id_max=1600
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from nendocatalog.models.criteria import FilterCriteria
from nendocatalog.models.localization import LanguageOverrides, localize, translated_fandom
from nendocatalog.models.record import Record
from nendocatalog.services.id_matching import numeric_id

logger = logging.getLogger(__name__)


def filter_records(
    displayed: Sequence[Record],
    criteria: FilterCriteria,
    overrides: LanguageOverrides | None = None,
) -> list[Record]:
    """
    Filter the displayed set.

    All clauses are ANDed together - a record must pass every specified
    clause. Output keeps input order; inputs are not modified.

    Args:
        displayed: Records visible in the current display mode
        criteria: Filter criteria; unset fields are ignored
        overrides: Current language's field overrides

        search: Case-insensitive substring of localized name, localized
                fandom, or raw id
        fandom: Exact raw or localized fandom
        gender: Exact raw gender
        id_min / id_max: Inclusive range over the record's numeric id or
                its linked record's numeric id
        hair_colors / clothes_colors: Record must have AT LEAST one
        parts: Record must have ALL, under raw or localized names

    Returns:
        Records passing every clause
    """
    if not displayed:
        logger.warning("Catalog is empty. Filtering will return no results.")
        return []

    search = criteria.search.lower()
    results: list[Record] = []

    for record in displayed:
        view = localize(record, overrides)

        # Apply search filter (current language)
        if search:
            if not (
                search in view.name.lower()
                or search in view.fandom.lower()
                or search in record.id.lower()
            ):
                continue

        # Apply fandom filter (either naming)
        if criteria.fandom and criteria.fandom not in (view.fandom, record.fandom):
            continue

        # Apply gender filter
        if criteria.gender and record.gender != criteria.gender:
            continue

        # Apply id range (own number or linked number)
        if criteria.has_id_range() and not _in_id_range(record, criteria):
            continue

        # Apply colour filters - AT LEAST one matching colour
        if criteria.hair_colors and criteria.hair_colors.isdisjoint(record.hair_color):
            continue
        if criteria.clothes_colors and criteria.clothes_colors.isdisjoint(record.clothes_color):
            continue

        # Apply parts filter - ALL requested parts, raw or localized
        if criteria.parts:
            if not all(p in record.parts or p in view.parts for p in criteria.parts):
                continue

        results.append(record)

    return results


def _in_id_range(record: Record, criteria: FilterCriteria) -> bool:
    low = criteria.id_min if criteria.id_min is not None else float("-inf")
    high = criteria.id_max if criteria.id_max is not None else float("inf")

    for number in (numeric_id(record.id), numeric_id(record.linked_id)):
        if number is not None and low <= number <= high:
            return True
    return False


@dataclass
class FandomOption:
    """A fandom filter choice."""

    value: str
    label: str


@dataclass
class FilterOptions:
    """Choices for populating filter controls."""

    fandoms: list[FandomOption]
    genders: list[str]
    hair_colors: list[str]
    clothes_colors: list[str]
    parts: list[str]


def get_filter_options(
    records: Sequence[Record],
    overrides: LanguageOverrides | None = None,
) -> FilterOptions:
    """
    Collect sorted unique filter values from the catalog.

    Fandoms carry their localized label; fandoms whose label is blank are
    left out.
    """
    record_list = list(records)
    fandoms: list[FandomOption] = []
    for fandom in sorted({r.fandom for r in record_list}):
        label = translated_fandom(fandom, record_list, overrides)
        if label.strip():
            fandoms.append(FandomOption(value=fandom, label=label))

    return FilterOptions(
        fandoms=fandoms,
        genders=sorted({r.gender for r in record_list if r.gender}),
        hair_colors=sorted({c for r in record_list for c in r.hair_color}),
        clothes_colors=sorted({c for r in record_list for c in r.clothes_color}),
        parts=sorted({p for r in record_list for p in r.parts}),
    )
