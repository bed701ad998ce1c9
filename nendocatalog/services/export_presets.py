"""
Export presets.

Each preset picks which of the filtered records go into the image and how
the grid is laid out.
"""

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from nendocatalog.models.record import Record
from nendocatalog.models.user_collections import UserCollections
from nendocatalog.rendering.grid import GridOptions, GridStyle
from nendocatalog.services.stats import select_owned, select_owned_or_wishlisted


class ExportPresetName(str, Enum):
    ALL = "all"
    OWNED_WISHLIST = "owned_wishlist"
    OWNED_CATALOG = "owned_catalog"


@dataclass(frozen=True)
class ExportPreset:
    """Item selection plus grid layout for one export button."""

    name: ExportPresetName
    columns: int
    cell_size: int
    style: GridStyle
    filename_prefix: str
    select: Callable[[Sequence[Record], UserCollections], list[Record]]

    def options(self, image_timeout: float = 4.0) -> GridOptions:
        return GridOptions(
            columns=self.columns,
            cell_size=self.cell_size,
            style=self.style,
            image_timeout=image_timeout,
        )

    def filename(self, now: float | None = None) -> str:
        """{prefix}-{epoch millis}.png"""
        millis = int((time.time() if now is None else now) * 1000)
        return f"{self.filename_prefix}-{millis}.png"


def _everything(items: Sequence[Record], _collections: UserCollections) -> list[Record]:
    return list(items)


PRESETS: dict[ExportPresetName, ExportPreset] = {
    ExportPresetName.ALL: ExportPreset(
        name=ExportPresetName.ALL,
        columns=20,
        cell_size=64,
        style=GridStyle.SIMPLE,
        filename_prefix="nendoroid-grid",
        select=_everything,
    ),
    ExportPresetName.OWNED_WISHLIST: ExportPreset(
        name=ExportPresetName.OWNED_WISHLIST,
        columns=10,
        cell_size=96,
        style=GridStyle.SIMPLE,
        filename_prefix="nendoroid-owned-wishlist",
        select=select_owned_or_wishlisted,
    ),
    ExportPresetName.OWNED_CATALOG: ExportPreset(
        name=ExportPresetName.OWNED_CATALOG,
        columns=4,
        cell_size=160,
        style=GridStyle.CATALOG,
        filename_prefix="nendoroid-owned-catalog",
        select=select_owned,
    ),
}


def get_preset(name: str | ExportPresetName) -> ExportPreset:
    """
    Look up a preset by name.

    Raises:
        ValueError: If the name is not a known preset
    """
    return PRESETS[ExportPresetName(name)]
