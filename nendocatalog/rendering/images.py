"""
Photo loading for catalog-style exports.

PhotoLoader fetches and decodes one photo. It applies no deadline of its
own: the grid renderer races each load against its timeout.
"""

import asyncio
import io
import logging
from pathlib import Path

import httpx
from PIL import Image

logger = logging.getLogger(__name__)

USER_AGENT = "nendocatalog/0.1 (+grid export)"


def decode_image(data: bytes) -> Image.Image:
    """
    Decode image bytes to RGBA.

    Raises:
        OSError: If the bytes are not a readable image
        Image.DecompressionBombError: If the header declares an oversized image
    """
    with Image.open(io.BytesIO(data)) as img:
        img.load()
        return img.convert("RGBA")


class PhotoLoader:
    """
    Loads photos from http(s) URLs or local paths.

    Relative paths resolve against base_dir.
    """

    def __init__(self, client: httpx.AsyncClient, base_dir: Path | None = None) -> None:
        self.client = client
        self.base_dir = base_dir

    async def __call__(self, source: str) -> Image.Image | None:
        """
        Fetch and decode a photo.

        Raises:
            httpx.HTTPError: If the request fails
            OSError: If the file is missing or the bytes are not an image
        """
        if source.startswith(("http://", "https://")):
            response = await self.client.get(source, headers={"User-Agent": USER_AGENT})
            response.raise_for_status()
            data = response.content
        else:
            path = Path(source)
            if not path.is_absolute() and self.base_dir is not None:
                path = self.base_dir / path
            data = await asyncio.to_thread(path.read_bytes)

        return await asyncio.to_thread(decode_image, data)


def fit_size(width: int, height: int, max_width: int, max_height: int) -> tuple[int, int]:
    """
    Scale (width, height) to fit inside the box, keeping aspect ratio.

    Never upscales. Result is at least 1x1.
    """
    if width <= 0 or height <= 0:
        return (0, 0)
    ratio = min(max_width / width, max_height / height, 1.0)
    return (max(1, round(width * ratio)), max(1, round(height * ratio)))
