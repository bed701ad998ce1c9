"""Grid rasterizer and the color and image helpers it uses."""

from nendocatalog.rendering.colors import (
    hex_to_rgb,
    lighten_color,
    relative_luminance,
    rgb_to_hex,
    text_color_for,
)
from nendocatalog.rendering.grid import (
    GridLayout,
    GridOptions,
    GridStyle,
    compute_grid_layout,
    encode_png,
    render_grid,
)
from nendocatalog.rendering.images import PhotoLoader, decode_image, fit_size

__all__ = [
    "GridLayout",
    "GridOptions",
    "GridStyle",
    "PhotoLoader",
    "compute_grid_layout",
    "decode_image",
    "encode_png",
    "fit_size",
    "hex_to_rgb",
    "lighten_color",
    "relative_luminance",
    "render_grid",
    "rgb_to_hex",
    "text_color_for",
]
