import re
from dataclasses import dataclass, field
from enum import Enum


class DisplayMode(str, Enum):
    """How base/DX pairs are shown."""

    # Every record is its own entry
    SEPARATE = "separate"
    # Only base records are listed; the DX record hangs off its base
    LINKED = "linked"

    @classmethod
    def parse(cls, value: str | None) -> "DisplayMode":
        """
        Parse a stored mode value.

        "variant" is the legacy name for linked mode. Unknown values fall
        back to separate.
        """
        if value in ("linked", "variant"):
            return cls.LINKED
        return cls.SEPARATE


def parse_bound(value: int | str | None) -> int | None:
    """
    Parse an id-range bound.

    Strings use their leading integer ("12abc" -> 12); anything
    unparseable means the bound is unset.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = re.match(r"^\s*([+-]?\d+)", str(value))
    if match:
        return int(match.group(1))
    return None


@dataclass(frozen=True)
class FilterCriteria:
    """
    Catalog filter criteria.

    Empty strings, empty sets and None bounds leave a field unconstrained.
    Colour filters are OR within a field; parts are AND.
    """

    search: str = ""
    fandom: str = ""
    gender: str = ""
    hair_colors: frozenset[str] = field(default_factory=frozenset)
    clothes_colors: frozenset[str] = field(default_factory=frozenset)
    parts: frozenset[str] = field(default_factory=frozenset)
    id_min: int | None = None
    id_max: int | None = None

    @classmethod
    def build(
        cls,
        search: str | None = None,
        fandom: str | None = None,
        gender: str | None = None,
        hair_colors: list[str] | None = None,
        clothes_colors: list[str] | None = None,
        parts: list[str] | None = None,
        id_min: int | str | None = None,
        id_max: int | str | None = None,
    ) -> "FilterCriteria":
        """Build criteria from loosely typed input (query strings, form fields)."""
        return cls(
            search=search or "",
            fandom=fandom or "",
            gender=gender or "",
            hair_colors=frozenset(hair_colors or ()),
            clothes_colors=frozenset(clothes_colors or ()),
            parts=frozenset(parts or ()),
            id_min=parse_bound(id_min),
            id_max=parse_bound(id_max),
        )

    def has_id_range(self) -> bool:
        return self.id_min is not None or self.id_max is not None

    def is_active(self) -> bool:
        """True if any field constrains the result."""
        return bool(
            self.search.strip()
            or self.fandom.strip()
            or self.gender.strip()
            or self.hair_colors
            or self.clothes_colors
            or self.parts
            or self.has_id_range()
        )
