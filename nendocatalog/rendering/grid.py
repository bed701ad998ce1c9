"""
Grid export rasterizer.

Composes catalog records into a single PNG. Two cell styles:

- simple: a coloured square per record. Owned records use the box colour,
  wishlisted records a lightened box colour, everything else neutral grey.
  The id is drawn in black or white, whichever reads better on the fill.
- catalog: the record's photo above an id bar in the box colour. Photos are
  loaded one cell at a time, each with its own timeout; a failed or late
  load is replaced by a placeholder block and never stops the export.
"""

import asyncio
import io
import logging
import math
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path

import httpx
from PIL import Image, ImageDraw, ImageFont

from nendocatalog.config import MAX_RASTER_DIMENSION, MIN_CELL_SIZE
from nendocatalog.models.failure import ExportEncodingError, GridTooLargeError, NothingToExportError
from nendocatalog.models.record import Record
from nendocatalog.models.user_collections import UserCollections
from nendocatalog.rendering.colors import lighten_color, text_color_for
from nendocatalog.rendering.images import PhotoLoader, fit_size
from nendocatalog.services.id_matching import IdMatcher

logger = logging.getLogger(__name__)

PhotoSource = Callable[[str], Awaitable[Image.Image | None]]

BACKGROUND = "#ffffff"
UNOWNED_FILL = "#e0e0e0"
BORDER_COLOR = "#ffffff"
BAR_TEXT_COLOR = "#ffffff"

# Id bar height relative to the cell (22px at the 160px catalog preset)
BAR_FRACTION = 0.1375
# Inset of the photo from the cell edge
PHOTO_INSET = 6
# Inset of the placeholder block inside the padded cell
PLACEHOLDER_INSET = 4


class GridStyle(str, Enum):
    """Per-cell layout."""

    SIMPLE = "simple"
    CATALOG = "catalog"


@dataclass(frozen=True)
class GridOptions:
    """Export layout options."""

    columns: int = 20
    cell_size: int = 64
    padding: int = 1
    style: GridStyle = GridStyle.SIMPLE
    wishlist_lighten: float = 0.4
    placeholder_lighten: float = 0.4
    image_timeout: float = 4.0
    max_dimension: int = MAX_RASTER_DIMENSION
    min_cell_size: int = MIN_CELL_SIZE


@dataclass(frozen=True)
class GridLayout:
    """Resolved canvas geometry."""

    columns: int
    rows: int
    cell_size: int
    width: int
    height: int

    def cell_origin(self, index: int) -> tuple[int, int]:
        """Top-left corner of the cell at a row-major index."""
        row, col = divmod(index, self.columns)
        return (col * self.cell_size, row * self.cell_size)


def compute_grid_layout(
    count: int,
    columns: int,
    cell_size: int,
    max_dimension: int = MAX_RASTER_DIMENSION,
    min_cell_size: int = MIN_CELL_SIZE,
) -> GridLayout:
    """
    Resolve rows, cell size and canvas size for count items.

    If the canvas would exceed max_dimension on either side, the cell is
    scaled down uniformly (never below min_cell_size).

    Raises:
        GridTooLargeError: If the grid exceeds max_dimension even at min_cell_size
    """
    columns = max(1, columns)
    rows = max(1, math.ceil(count / columns))

    width = columns * cell_size
    height = rows * cell_size

    if width > max_dimension or height > max_dimension:
        scale = min(max_dimension / width, max_dimension / height)
        cell_size = max(min_cell_size, math.floor(cell_size * scale))
        width = columns * cell_size
        height = rows * cell_size
        if width > max_dimension or height > max_dimension:
            raise GridTooLargeError(count, columns, max_dimension)

    return GridLayout(columns=columns, rows=rows, cell_size=cell_size, width=width, height=height)


@lru_cache(maxsize=32)
def _load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Try common sans-serif fonts, fall back to Pillow's bundled font."""
    candidates = [
        "DejaVuSans.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/System/Library/Fonts/Helvetica.ttc",
        "arial.ttf",
    ]
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default(size)


def _draw_centered_text(
    draw: ImageDraw.ImageDraw,
    center: tuple[float, float],
    text: str,
    fill: str,
    font_size: int,
) -> None:
    font = _load_font(font_size)
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = center[0] - (right - left) / 2 - left
    y = center[1] - (bottom - top) / 2 - top
    draw.text((x, y), text, fill=fill, font=font)


def _inner_box(x: int, y: int, cell: int, inset: int) -> tuple[int, int, int, int]:
    # PIL rectangles are inclusive of both corners
    return (x + inset, y + inset, x + cell - inset - 1, y + cell - inset - 1)


def _draw_simple_cell(
    draw: ImageDraw.ImageDraw,
    origin: tuple[int, int],
    cell: int,
    padding: int,
    item_id: str,
    fill: str,
) -> None:
    x, y = origin
    draw.rectangle(_inner_box(x, y, cell, padding), fill=fill, outline=BORDER_COLOR, width=1)
    _draw_centered_text(
        draw,
        (x + cell / 2, y + cell / 2),
        item_id,
        text_color_for(fill),
        max(10, math.floor(cell * 0.28)),
    )


def _draw_catalog_cell(
    canvas: Image.Image,
    draw: ImageDraw.ImageDraw,
    origin: tuple[int, int],
    cell: int,
    padding: int,
    item: Record,
    photo: Image.Image | None,
    placeholder_lighten: float,
) -> None:
    x, y = origin
    bar = max(1, round(cell * BAR_FRACTION))

    draw.rectangle(_inner_box(x, y, cell, padding), fill=BACKGROUND)

    avail_w = cell - PHOTO_INSET * 2
    avail_h = cell - PHOTO_INSET * 2 - bar
    drawn = False
    if photo is not None and avail_w > 0 and avail_h > 0:
        w, h = fit_size(photo.width, photo.height, avail_w, avail_h)
        if w > 0 and h > 0:
            scaled = photo
            if (w, h) != photo.size:
                scaled = photo.resize((w, h), Image.Resampling.LANCZOS)
            position = (x + (cell - w) // 2, y + PHOTO_INSET)
            mask = scaled if scaled.mode == "RGBA" else None
            canvas.paste(scaled, position, mask)
            drawn = True

    if not drawn:
        inset = padding + PLACEHOLDER_INSET
        x0, y0 = x + inset, y + inset
        x1, y1 = x + cell - inset - 1, y + cell - inset - bar - 1
        if x1 >= x0 and y1 >= y0:
            fill = lighten_color(item.box_color, placeholder_lighten)
            draw.rectangle((x0, y0, x1, y1), fill=fill)

    # Bar and text always draw in a parseable colour
    box = lighten_color(item.box_color, 0.0)
    bar_top = y + cell - bar - padding
    draw.rectangle((x + padding, bar_top, x + cell - padding - 1, bar_top + bar - 1), fill=box)
    _draw_centered_text(
        draw,
        (x + cell / 2, bar_top + bar / 2),
        item.id,
        BAR_TEXT_COLOR,
        max(10, math.floor(bar * 0.6)),
    )


async def load_photo(source: str | None, loader: PhotoSource, timeout: float) -> Image.Image | None:
    """
    Race one photo load against its timeout.

    Returns None on missing source, failure or timeout. A load that misses
    the deadline is cancelled and its result discarded.
    """
    if not source:
        return None
    try:
        return await asyncio.wait_for(loader(source), timeout=timeout)
    except asyncio.TimeoutError:
        logger.debug("Photo load timed out after %.1fs: %s", timeout, source)
    except (httpx.HTTPError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.debug("Photo load failed for %s: %s", source, e)
    return None


def encode_png(canvas: Image.Image) -> bytes:
    """
    Encode the canvas as PNG.

    Raises:
        ExportEncodingError: If encoding fails or yields no bytes
    """
    out = io.BytesIO()
    try:
        canvas.save(out, format="PNG")
    except (OSError, ValueError) as e:
        raise ExportEncodingError(detail=f"{type(e).__name__}: {e}") from e
    data = out.getvalue()
    if not data:
        raise ExportEncodingError(detail="Encoder produced no data")
    return data


async def render_grid(
    items: Sequence[Record],
    collections: UserCollections,
    options: GridOptions | None = None,
    loader: PhotoSource | None = None,
    photo_dir: Path | None = None,
) -> bytes:
    """
    Render records into a PNG grid.

    Args:
        items: Records in row-major order
        collections: Owned/wishlist ids, used to colour simple cells
        options: Layout options; defaults to a 20-column simple grid
        loader: Photo source for catalog cells. Defaults to an httpx-backed
                PhotoLoader created for this call.
        photo_dir: Base directory for relative photo paths (default loader only)

    Returns:
        PNG bytes

    Raises:
        NothingToExportError: If items is empty
        GridTooLargeError: If the grid cannot fit the raster limit
        ExportEncodingError: If the image could not be encoded
    """
    options = options or GridOptions()
    if not items:
        raise NothingToExportError()

    layout = compute_grid_layout(
        len(items),
        options.columns,
        options.cell_size,
        max_dimension=options.max_dimension,
        min_cell_size=options.min_cell_size,
    )

    if options.style is GridStyle.CATALOG and loader is None:
        async with httpx.AsyncClient(
            timeout=options.image_timeout, follow_redirects=True
        ) as client:
            photo_loader = PhotoLoader(client, photo_dir)
            return await _compose(items, collections, options, layout, photo_loader)
    return await _compose(items, collections, options, layout, loader)


async def _compose(
    items: Sequence[Record],
    collections: UserCollections,
    options: GridOptions,
    layout: GridLayout,
    loader: PhotoSource | None,
) -> bytes:
    canvas = Image.new("RGB", (layout.width, layout.height), BACKGROUND)
    draw = ImageDraw.Draw(canvas)

    owned = IdMatcher.from_ids(collections.owned)
    wishlist = IdMatcher.from_ids(collections.wishlist)
    cell = layout.cell_size
    placeholders = 0

    for index, item in enumerate(items):
        origin = layout.cell_origin(index)

        if options.style is GridStyle.CATALOG:
            photo = None
            if loader is not None:
                photo = await load_photo(item.official_photo, loader, options.image_timeout)
            if photo is None:
                placeholders += 1
            _draw_catalog_cell(
                canvas,
                draw,
                origin,
                cell,
                options.padding,
                item,
                photo,
                options.placeholder_lighten,
            )
        else:
            if owned.matches(item.id):
                fill = lighten_color(item.box_color, 0.0)
            elif wishlist.matches(item.id):
                fill = lighten_color(item.box_color, options.wishlist_lighten)
            else:
                fill = UNOWNED_FILL
            _draw_simple_cell(draw, origin, cell, options.padding, item.id, fill)

    data = await asyncio.to_thread(encode_png, canvas)
    logger.info(
        "Rendered %s grid: items=%d cols=%d rows=%d cell=%d placeholders=%d bytes=%d",
        options.style.value,
        len(items),
        layout.columns,
        layout.rows,
        cell,
        placeholders,
        len(data),
    )
    return data
