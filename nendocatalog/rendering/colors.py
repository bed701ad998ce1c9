"""Colour helpers for export cells."""

import re

from nendocatalog.config import NEUTRAL_GRAY

_HEX = re.compile(r"^[0-9a-fA-F]+$")

# Relative luminance above which overlay text is drawn black
TEXT_LUMINANCE_THRESHOLD = 0.5


def hex_to_rgb(value: str | None) -> tuple[int, int, int] | None:
    """
    Parse "#rgb" or "#rrggbb" (the "#" is optional).

    Returns None for anything else.
    """
    if not value:
        return None
    s = str(value).strip().lstrip("#")
    if not _HEX.match(s):
        return None
    if len(s) == 3:
        return (int(s[0] * 2, 16), int(s[1] * 2, 16), int(s[2] * 2, 16))
    if len(s) == 6:
        return (int(s[0:2], 16), int(s[2:4], 16), int(s[4:6], 16))
    return None


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#" + "".join(f"{max(0, min(255, round(v))):02x}" for v in (r, g, b))


def _rgb_or_gray(value: str | None) -> tuple[int, int, int]:
    return hex_to_rgb(value) or hex_to_rgb(NEUTRAL_GRAY) or (136, 136, 136)


def lighten_color(value: str | None, amount: float) -> str:
    """
    Blend a colour toward white.

    amount 0 keeps the colour, 1 gives white. Unparseable colours are
    treated as neutral grey.
    """
    r, g, b = _rgb_or_gray(value)
    return rgb_to_hex(
        r + (255 - r) * amount,
        g + (255 - g) * amount,
        b + (255 - b) * amount,
    )


def relative_luminance(value: str | None) -> float:
    """sRGB relative luminance in [0, 1]."""

    def linear(channel: int) -> float:
        c = channel / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (linear(c) for c in _rgb_or_gray(value))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def text_color_for(fill: str | None) -> str:
    """Black on light fills, white on dark ones."""
    return "#000000" if relative_luminance(fill) > TEXT_LUMINANCE_THRESHOLD else "#ffffff"
