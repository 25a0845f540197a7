# gvg_renderer/color.py
"""
Color codec for packed 0xRRGGBBAA colors.

Decomposes packed colors into 8-bit channels and adjusts brightness in HSV
space for the glow passes.
"""
import colorsys
from typing import Tuple, Union

RGBA = Tuple[int, int, int, int]


def decompose(color: int) -> RGBA:
    """
    Splits a packed 32-bit color into (red, green, blue, alpha) bytes.

    Examples:
        >>> decompose(0xFF8000C0)
        (255, 128, 0, 192)
    """
    color = int(color)
    return (color >> 24) & 0xFF, (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF


def parse_color(value: Union[int, str]) -> int:
    """
    Converts an int or a hex string ('#RRGGBBAA', '0xRRGGBBAA', '#RRGGBB') to a packed color.

    Six-digit strings are treated as opaque.

    Raises:
        ValueError: If the value is not a valid color
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a color: {value!r}")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"Packed color out of range: {value:#x}")
        return value
    if isinstance(value, str):
        digits = value.strip()
        if digits.startswith("#"):
            digits = digits[1:]
        elif digits.lower().startswith("0x"):
            digits = digits[2:]
        if len(digits) == 6:
            digits += "ff"
        if len(digits) == 8:
            try:
                return int(digits, 16)
            except ValueError:
                pass
    raise ValueError(f"Not a color: {value!r}")


def _to_byte(channel: float) -> int:
    return min(255, max(0, int(round(channel * 255.0))))


def brighten(multiplier: float, red: int, green: int, blue: int, alpha: int,
             saturation_from_value: bool = False) -> RGBA:
    """
    Scales the HSV value of an 8-bit color, clamping it at 1.0.

    Hue is preserved and alpha is passed through unchanged. With
    `saturation_from_value` the scaled value is also used as the new
    saturation, matching colors produced by earlier GVG renderers.

    Args:
        multiplier: Non-negative factor applied to V
        red, green, blue, alpha: Channels in [0, 255]
        saturation_from_value: Reproduce the legacy saturation behaviour

    Returns:
        (red, green, blue, alpha) tuple of ints

    Raises:
        ValueError: If multiplier is negative

    Examples:
        >>> brighten(1.0, 200, 40, 40, 255)
        (200, 40, 40, 255)
        >>> brighten(0.5, 200, 40, 40, 255)
        (100, 20, 20, 255)
    """
    if multiplier < 0:
        raise ValueError(f"Brightness multiplier must be non-negative, got {multiplier!r}")
    h, s, v = colorsys.rgb_to_hsv(red / 255.0, green / 255.0, blue / 255.0)
    v *= multiplier
    if v > 1.0:
        v = 1.0
    if saturation_from_value:
        s = v
    r, g, b = colorsys.hsv_to_rgb(h, s, v)
    return _to_byte(r), _to_byte(g), _to_byte(b), alpha
