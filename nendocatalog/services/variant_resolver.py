"""
Variant resolver.

Links base records to their DX variants and decides which records are
listed for a display mode. Links are matched through linkedId: the DX
version of base record B is the DX record whose linkedId is B.id, and the
plain version of DX record D is the base record whose linkedId is D.id.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from nendocatalog.models.criteria import DisplayMode
from nendocatalog.models.record import Record


def get_displayed_set(records: Sequence[Record], mode: DisplayMode) -> list[Record]:
    """
    Records listed before any filter is applied.

    separate: every record.
    linked: base records only, in catalog order.
    """
    if mode is DisplayMode.LINKED:
        return [r for r in records if not r.is_dx]
    return list(records)


@dataclass(frozen=True, slots=True)
class VariantLinks:
    """Display attributes derived from a record's base/DX links."""

    is_dx: bool
    has_dx: bool
    # Shown only outside linked mode
    linked_id: str | None
    show_dx_indicator: bool
    is_standalone_dx: bool


@dataclass
class VariantIndex:
    """
    linkedId -> {base, dx} lookup, built once per catalog load.

    Assumes the catalog passed ingestion checks: at most one base and one
    DX record per linkedId. If duplicates slip through, the first wins.
    """

    _dx_by_link: dict[str, Record] = field(default_factory=dict)
    _base_by_link: dict[str, Record] = field(default_factory=dict)

    @classmethod
    def build(cls, records: Sequence[Record]) -> "VariantIndex":
        index = cls()
        for record in records:
            if not record.linked_id:
                continue
            bucket = index._dx_by_link if record.is_dx else index._base_by_link
            bucket.setdefault(record.linked_id, record)
        return index

    def get_dx_version(self, record_id: str) -> Record | None:
        """DX record linked to record_id, if any."""
        return self._dx_by_link.get(record_id)

    def get_plain_version(self, record_id: str) -> Record | None:
        """Base record linked to record_id, if any."""
        return self._base_by_link.get(record_id)

    def has_dx_version(self, record_id: str) -> bool:
        return record_id in self._dx_by_link

    def resolve_shown(self, record: Record, mode: DisplayMode, show_variant: bool) -> Record:
        """
        Record to open when a listed entry is selected.

        In linked mode with show_variant on, a base record with a DX version
        opens as the DX record.
        """
        if mode is DisplayMode.LINKED and show_variant:
            dx = self.get_dx_version(record.id)
            if dx is not None:
                return dx
        return record

    def links_for(self, record: Record, mode: DisplayMode) -> VariantLinks:
        has_dx = not record.is_dx and self.has_dx_version(record.id)
        return VariantLinks(
            is_dx=record.is_dx,
            has_dx=has_dx,
            linked_id=record.linked_id if mode is not DisplayMode.LINKED else None,
            show_dx_indicator=mode is DisplayMode.LINKED and has_dx,
            is_standalone_dx=record.is_dx and not record.linked_id,
        )
