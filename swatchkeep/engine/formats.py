# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Parsing hex input and rendering colors as format strings.

Rendered strings are part of the persisted history, so their shape must
not drift between releases. Precision is fixed per format:

    hex    #ff0000
    rgb    rgb(255, 0, 0)
    hsl    hsl(0.0 100.0% 50.0%)
    oklch  oklch(62.8% 0.2577 29.23)
    oklab  oklab(62.8% 0.2249 0.1258)
    lab    lab(54.3 80.8 69.9)
    lch    lch(54.3 107 40.9)
    p3     color(display-p3 0.9175 0.2003 0.1386)

Hues with no meaning (achromatic colors) render as ``none`` in oklch/lch
and as ``0.0`` in hsl. No coordinate ever renders as ``NaN``.
"""

from __future__ import annotations

import math
from typing import Union

from swatchkeep.engine.colorspace import convert, srgb_to_hex, srgb_to_hsl
from swatchkeep.errors import InvalidColorFormat
from swatchkeep.schema import (
    FORMAT_IDS,
    HEX_RE,
    Color,
    ColorSpace,
    FormatId,
    FormatSnapshot,
)


# Chroma below which hue is reported as "none"
OKLCH_ACHROMATIC = 0.0002
LCH_ACHROMATIC = 0.02

# Significant digits per format
_PRECISION = {
    FormatId.OKLCH: 4,
    FormatId.OKLAB: 4,
    FormatId.LAB: 3,
    FormatId.LCH: 3,
    FormatId.P3: 4,
}

ColorLike = Union[Color, str]


# =============================================================================
# Numeric helpers
# =============================================================================


def normalize_hue(value: float) -> float:
    """Wrap a hue in degrees into [0, 360). NaN becomes 0."""
    if value is None or math.isnan(value):
        return 0.0
    return ((value % 360.0) + 360.0) % 360.0


def _clamp(value: float, low: float, high: float) -> float:
    if math.isnan(value):
        return low
    return min(high, max(low, value))


def _round_half_up(value: float, places: int) -> float:
    multiplier = 10.0 ** places
    return math.floor(value * multiplier + 0.5) / multiplier


def _to_precision(value: float, precision: int) -> float:
    """
    Round to ``precision`` significant digits counted from the integer part.

    Numbers below 1 keep ``precision`` decimal places, so 0.25768 → 0.2577
    and 62.7955 → 62.8. Ties round up.
    """
    if not math.isfinite(value) or value == 0:
        return 0.0
    integer = int(value)
    digits = len(str(abs(integer))) if integer else 0
    return _round_half_up(value, precision - digits)


def _format_number(value: float, precision: int) -> str:
    rounded = _to_precision(value, precision)
    if rounded == 0:
        return "0"  # also catches -0.0
    text = repr(rounded)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _format_hue(hue: float, chroma: float, threshold: float, precision: int) -> str:
    if math.isnan(chroma) or chroma < threshold:
        return "none"
    return _format_number(normalize_hue(_to_precision(normalize_hue(hue), precision)), precision)


# =============================================================================
# Hex input
# =============================================================================


def normalize_hex(value: str) -> str:
    """
    Trim, lower-case and prefix ``#``.

    Purely syntactic: ``"ABC"`` becomes ``"#abc"`` and ``"xyz"`` becomes
    ``"#xyz"``. Validity is checked by :func:`parse_color`.
    """
    if not isinstance(value, str):
        raise InvalidColorFormat(value)
    normalized = value.strip().lower()
    return normalized if normalized.startswith("#") else f"#{normalized}"


def parse_color(value: str) -> Color:
    """
    Parse 3- or 6-digit hex, with or without ``#``, into an sRGB color.

    Raises:
        InvalidColorFormat: if ``value`` is not recognizable hex
    """
    normalized = normalize_hex(value)
    match = HEX_RE.match(normalized)
    if match is None:
        raise InvalidColorFormat(value)

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(d * 2 for d in digits)

    return Color(
        space=ColorSpace.SRGB,
        coords=tuple(int(digits[i:i + 2], 16) / 255.0 for i in (0, 2, 4)),
    )


def canonical_hex(value: str) -> str:
    """
    Return the canonical ``#rrggbb`` form of a hex string.

    Raises:
        InvalidColorFormat: if ``value`` is not recognizable hex
    """
    return srgb_to_hex(parse_color(value).coords)


def _as_color(color: ColorLike) -> Color:
    if isinstance(color, Color):
        return color
    return parse_color(color)


# =============================================================================
# Rendering
# =============================================================================


def _render_rgb(color: Color) -> str:
    r, g, b = (
        int(math.floor(_clamp(c, 0.0, 1.0) * 255.0 + 0.5))
        for c in convert(color, ColorSpace.SRGB).coords
    )
    return f"rgb({r}, {g}, {b})"


def _render_hsl(color: Color) -> str:
    r, g, b = (_clamp(c, 0.0, 1.0) for c in convert(color, ColorSpace.SRGB).coords)
    h, s, l = srgb_to_hsl(r, g, b)
    hue = normalize_hue(_round_half_up(normalize_hue(h), 1))
    saturation = _round_half_up(_clamp(s * 100.0, 0.0, 100.0), 1)
    lightness = _round_half_up(_clamp(l * 100.0, 0.0, 100.0), 1)
    return f"hsl({hue:.1f} {saturation:.1f}% {lightness:.1f}%)"


def _render_oklch(color: Color) -> str:
    p = _PRECISION[FormatId.OKLCH]
    L, C, H = convert(color, ColorSpace.OKLCH).coords
    return (
        f"oklch({_format_number(L * 100.0, p)}% {_format_number(C, p)} "
        f"{_format_hue(H, C, OKLCH_ACHROMATIC, p)})"
    )


def _render_oklab(color: Color) -> str:
    p = _PRECISION[FormatId.OKLAB]
    L, a, b = convert(color, ColorSpace.OKLAB).coords
    return f"oklab({_format_number(L * 100.0, p)}% {_format_number(a, p)} {_format_number(b, p)})"


def _render_lab(color: Color) -> str:
    p = _PRECISION[FormatId.LAB]
    L, a, b = convert(color, ColorSpace.LAB).coords
    return f"lab({_format_number(L, p)} {_format_number(a, p)} {_format_number(b, p)})"


def _render_lch(color: Color) -> str:
    p = _PRECISION[FormatId.LCH]
    L, C, H = convert(color, ColorSpace.LCH).coords
    return (
        f"lch({_format_number(L, p)} {_format_number(C, p)} "
        f"{_format_hue(H, C, LCH_ACHROMATIC, p)})"
    )


def _render_p3(color: Color) -> str:
    p = _PRECISION[FormatId.P3]
    r, g, b = convert(color, ColorSpace.P3).coords
    return f"color(display-p3 {_format_number(r, p)} {_format_number(g, p)} {_format_number(b, p)})"


_RENDERERS = {
    FormatId.HEX: lambda color: srgb_to_hex(convert(color, ColorSpace.SRGB).coords),
    FormatId.RGB: _render_rgb,
    FormatId.HSL: _render_hsl,
    FormatId.OKLCH: _render_oklch,
    FormatId.OKLAB: _render_oklab,
    FormatId.LAB: _render_lab,
    FormatId.LCH: _render_lch,
    FormatId.P3: _render_p3,
}


def render_as(color: ColorLike, fmt: Union[FormatId, str]) -> str:
    """
    Render a color in one output format.

    Args:
        color: A Color, or a hex string (parsed with :func:`parse_color`)
        fmt: Target format

    Raises:
        InvalidColorFormat: if ``color`` is an unparseable string
        ValueError: if ``fmt`` is not a known format
    """
    return _RENDERERS[FormatId(fmt)](_as_color(color))


def get_all_formats(color: ColorLike) -> FormatSnapshot:
    """
    Render a color in every output format.

    Raises:
        InvalidColorFormat: if ``color`` is an unparseable string
    """
    parsed = _as_color(color)
    return FormatSnapshot(**{fmt.value: render_as(parsed, fmt) for fmt in FORMAT_IDS})


def is_light_color(value: str) -> bool:
    """
    True if text on this color should be dark.

    Uses YIQ brightness, (299 R + 587 G + 114 B) / 1000 > 128 on 0-255
    channels. Unparseable input counts as dark.
    """
    try:
        r, g, b = (c * 255.0 for c in parse_color(value).coords)
    except InvalidColorFormat:
        return False
    return (r * 299.0 + g * 587.0 + b * 114.0) / 1000.0 > 128.0
