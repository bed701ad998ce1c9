"""Tests for the grid export rasterizer."""

import asyncio
import io
import struct
import zlib
from pathlib import Path

import httpx
import pytest
import respx
from PIL import Image

from nendocatalog.models.failure import GridTooLargeError, NothingToExportError
from nendocatalog.models.record import Record
from nendocatalog.models.user_collections import UserCollections
from nendocatalog.rendering.colors import hex_to_rgb, lighten_color
from nendocatalog.rendering.grid import (
    UNOWNED_FILL,
    GridOptions,
    GridStyle,
    compute_grid_layout,
    encode_png,
    load_photo,
    render_grid,
)
from nendocatalog.rendering.images import PhotoLoader, fit_size


def _open(data: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(data))
    image.load()
    return image.convert("RGB")


def _png_bytes(size: tuple[int, int], color: str) -> bytes:
    out = io.BytesIO()
    Image.new("RGB", size, color).save(out, format="PNG")
    return out.getvalue()


def _png_header_only(width: int, height: int) -> bytes:
    """PNG signature plus an IHDR chunk and nothing else."""
    ihdr = b"IHDR" + struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    crc = struct.pack(">I", zlib.crc32(ihdr) & 0xFFFFFFFF)
    return b"\x89PNG\r\n\x1a\n" + struct.pack(">I", len(ihdr) - 4) + ihdr + crc


class TestComputeGridLayout:
    def test_rows_round_up(self) -> None:
        layout = compute_grid_layout(47, columns=20, cell_size=64)

        assert layout.rows == 3
        assert (layout.width, layout.height) == (1280, 192)

    def test_at_least_one_row_and_column(self) -> None:
        layout = compute_grid_layout(0, columns=0, cell_size=64)

        assert layout.columns == 1
        assert layout.rows == 1

    def test_cell_origin_is_row_major(self) -> None:
        layout = compute_grid_layout(47, columns=20, cell_size=64)

        assert layout.cell_origin(0) == (0, 0)
        assert layout.cell_origin(21) == (64, 64)

    def test_oversized_grid_is_scaled_down(self) -> None:
        layout = compute_grid_layout(2000, columns=4, cell_size=160)

        assert layout.height <= 8192
        assert layout.width <= 8192
        assert layout.cell_size == 16
        assert layout.cell_size >= 8

    def test_wide_grid_is_scaled_to_fit(self) -> None:
        layout = compute_grid_layout(100, columns=1000, cell_size=64)

        assert layout.cell_size == 8
        assert layout.width == 8000

    def test_unfittable_grid_raises(self) -> None:
        with pytest.raises(GridTooLargeError):
            compute_grid_layout(10000, columns=1, cell_size=64)


class TestFitSize:
    def test_scales_down_keeping_aspect(self) -> None:
        assert fit_size(200, 100, 100, 100) == (100, 50)

    def test_never_upscales(self) -> None:
        assert fit_size(50, 40, 100, 100) == (50, 40)

    def test_invalid_size(self) -> None:
        assert fit_size(0, 10, 100, 100) == (0, 0)


class TestEncodePng:
    def test_png_signature(self) -> None:
        data = encode_png(Image.new("RGB", (4, 4), "#ffffff"))

        assert data.startswith(b"\x89PNG\r\n\x1a\n")


class TestRenderSimple:
    async def test_empty_items_raise(self) -> None:
        with pytest.raises(NothingToExportError):
            await render_grid([], UserCollections())

    async def test_canvas_size(self, records: list[Record]) -> None:
        data = await render_grid(records, UserCollections(), GridOptions(columns=4, cell_size=32))

        image = _open(data)
        assert image.size == (128, 64)

    async def test_cell_fills_follow_ownership(self, by_id: dict[str, Record]) -> None:
        items = [by_id["1580"], by_id["1580DX"], by_id["1200"], by_id["1201"]]
        collections = UserCollections(owned=["1580"], wishlist=["1200"])

        data = await render_grid(items, collections, GridOptions(columns=2, cell_size=40))

        image = _open(data)
        # owned
        assert image.getpixel((5, 5)) == hex_to_rgb("#39c5bb")
        # owned through its legacy numeric id
        assert image.getpixel((45, 5)) == hex_to_rgb("#2a9d8f")
        # wishlisted
        assert image.getpixel((5, 45)) == hex_to_rgb(lighten_color("#4a6fe3", 0.4))
        # neither
        assert image.getpixel((45, 45)) == hex_to_rgb(UNOWNED_FILL)

    async def test_unused_cells_stay_background(self, by_id: dict[str, Record]) -> None:
        options = GridOptions(columns=2, cell_size=40)

        data = await render_grid([by_id["1200"]] * 3, UserCollections(), options)

        image = _open(data)
        assert image.getpixel((45, 45)) == (255, 255, 255)


class TestRenderCatalog:
    @pytest.fixture
    def options(self) -> GridOptions:
        return GridOptions(columns=2, cell_size=160, style=GridStyle.CATALOG, image_timeout=0.05)

    async def test_photo_and_placeholder(self, by_id, options) -> None:
        async def loader(source: str) -> Image.Image:
            return Image.new("RGBA", (100, 100), (255, 0, 0, 255))

        items = [by_id["1580"], by_id["1200"]]

        data = await render_grid(items, UserCollections(), options, loader=loader)

        image = _open(data)
        assert image.size == (320, 160)
        # photo centred under the top inset
        assert image.getpixel((80, 56)) == (255, 0, 0)
        # id bar in the box colour
        assert image.getpixel((5, 150)) == hex_to_rgb("#39c5bb")
        # 1200 has no photo: placeholder block in a lightened box colour
        assert image.getpixel((170, 10)) == hex_to_rgb(lighten_color("#4a6fe3", 0.4))
        assert image.getpixel((165, 150)) == hex_to_rgb("#4a6fe3")

    async def test_slow_photo_becomes_placeholder(self, by_id, options) -> None:
        async def slow_loader(source: str) -> Image.Image:
            await asyncio.sleep(5)
            return Image.new("RGBA", (100, 100), (255, 0, 0, 255))

        data = await render_grid([by_id["1580"]], UserCollections(), options, loader=slow_loader)

        image = _open(data)
        assert image.getpixel((10, 10)) == hex_to_rgb(lighten_color("#39c5bb", 0.4))

    async def test_failed_photo_becomes_placeholder(self, by_id, options) -> None:
        async def broken_loader(source: str) -> Image.Image:
            raise OSError("cannot identify image file")

        data = await render_grid([by_id["1580"]], UserCollections(), options, loader=broken_loader)

        image = _open(data)
        assert image.getpixel((10, 10)) == hex_to_rgb(lighten_color("#39c5bb", 0.4))

    async def test_invalid_box_colour_uses_neutral_gray(self, options) -> None:
        item = Record(id="5", box_color="not-a-colour")

        data = await render_grid([item], UserCollections(), options)

        image = _open(data)
        assert image.getpixel((5, 150)) == hex_to_rgb("#888888")


class TestLoadPhoto:
    async def test_missing_source(self) -> None:
        async def loader(source: str) -> Image.Image:
            raise AssertionError("loader should not be called")

        assert await load_photo(None, loader, timeout=1.0) is None

    async def test_timeout_returns_none(self) -> None:
        async def loader(source: str) -> Image.Image:
            await asyncio.sleep(5)
            return Image.new("RGBA", (1, 1))

        assert await load_photo("x.png", loader, timeout=0.01) is None


class TestPhotoLoader:
    @respx.mock
    async def test_fetches_url(self) -> None:
        respx.get("https://example.com/1580.png").mock(
            return_value=httpx.Response(200, content=_png_bytes((30, 20), "#ff0000"))
        )

        async with httpx.AsyncClient() as client:
            image = await PhotoLoader(client)("https://example.com/1580.png")

        assert image is not None
        assert image.size == (30, 20)
        assert image.mode == "RGBA"

    @respx.mock
    async def test_http_error_is_a_failed_load(self) -> None:
        respx.get("https://example.com/missing.png").mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as client:
            photo = await load_photo("https://example.com/missing.png", PhotoLoader(client), 1.0)

        assert photo is None

    async def test_relative_path_uses_base_dir(self, tmp_path: Path) -> None:
        (tmp_path / "photos").mkdir()
        (tmp_path / "photos" / "1580.png").write_bytes(_png_bytes((12, 8), "#00ff00"))

        async with httpx.AsyncClient() as client:
            image = await PhotoLoader(client, tmp_path)("photos/1580.png")

        assert image is not None
        assert image.size == (12, 8)

    async def test_undecodable_bytes(self, tmp_path: Path) -> None:
        (tmp_path / "bad.png").write_bytes(b"not an image")

        async with httpx.AsyncClient() as client:
            photo = await load_photo("bad.png", PhotoLoader(client, tmp_path), 1.0)

        assert photo is None

    async def test_oversized_header_is_a_failed_load(self, tmp_path: Path) -> None:
        """A header declaring 20000x20000 pixels is refused, not decoded."""
        (tmp_path / "big.png").write_bytes(_png_header_only(20000, 20000))

        async with httpx.AsyncClient() as client:
            photo = await load_photo("big.png", PhotoLoader(client, tmp_path), 1.0)

        assert photo is None
