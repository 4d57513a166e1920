# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Gamut mapping into sRGB.

Every stored color needs an sRGB hex identity, even when it was built in a
wider space (OKLCH, Lab, Display-P3). Colors outside sRGB are brought
inside by reducing OKLCH chroma at constant lightness and hue, which keeps
the perceived color far closer than clamping each channel on its own.

The search follows the CSS Color Module Level 4 gamut mapping algorithm:
binary search on chroma, accepting a channel-clipped candidate as soon as
it is within one just-noticeable difference of the chroma-reduced color.
"""

from __future__ import annotations

import numpy as np

from swatchkeep.engine.colorspace import convert, delta_e_ok, srgb_to_hex
from swatchkeep.schema import Color, ColorSpace, GamutResult


# Just-noticeable difference in OKLab ΔE
JND = 0.02

# Chroma search resolution
CHROMA_EPSILON = 0.0001

# Slack allowed on each channel when testing gamut membership
GAMUT_EPSILON = 1e-6

_WHITE = Color(ColorSpace.SRGB, (1.0, 1.0, 1.0))
_BLACK = Color(ColorSpace.SRGB, (0.0, 0.0, 0.0))


def is_in_gamut(
    color: Color,
    space: ColorSpace = ColorSpace.SRGB,
    epsilon: float = GAMUT_EPSILON,
) -> bool:
    """True if ``color`` is displayable in ``space`` (sRGB or Display-P3)."""
    space = ColorSpace(space)
    if space not in (ColorSpace.SRGB, ColorSpace.P3):
        raise ValueError(f"Gamut checks need an RGB space, got {space.value}")
    coords = np.array(convert(color, space).coords)
    return bool(np.all(coords >= -epsilon) and np.all(coords <= 1.0 + epsilon))


def clip_srgb(color: Color) -> Color:
    """Clamp each sRGB channel of ``color`` to [0, 1]."""
    coords = np.clip(np.array(convert(color, ColorSpace.SRGB).coords), 0.0, 1.0)
    return Color(ColorSpace.SRGB, tuple(float(c) for c in coords))


def _result(color: Color, clipped: bool) -> GamutResult:
    srgb = clip_srgb(color)
    return GamutResult(hex=srgb_to_hex(srgb.coords), clipped=clipped, color=srgb)


def map_to_displayable(color: Color) -> GamutResult:
    """
    Map ``color`` into the sRGB gamut.

    In-gamut colors are returned unchanged with ``clipped=False``.
    Otherwise chroma is reduced at constant OKLCH lightness and hue;
    lightness at or beyond the ends of the range maps to white or black.

    Args:
        color: Color in any supported space

    Returns:
        GamutResult with the sRGB color, its hex and whether it moved
    """
    if is_in_gamut(color):
        return _result(color, clipped=False)

    L, C, H = convert(color, ColorSpace.OKLCH).coords
    L, C, H = (0.0 if np.isnan(v) else v for v in (L, C, H))

    if L >= 1.0:
        return _result(_WHITE, clipped=True)
    if L <= 0.0:
        return _result(_BLACK, clipped=True)

    current = Color(ColorSpace.OKLCH, (L, C, H))
    clipped = clip_srgb(current)
    if delta_e_ok(clipped, current) < JND:
        return _result(clipped, clipped=True)

    low, high = 0.0, C
    low_in_gamut = True
    while high - low > CHROMA_EPSILON:
        chroma = (low + high) / 2.0
        current = Color(ColorSpace.OKLCH, (L, chroma, H))

        if low_in_gamut and is_in_gamut(current):
            low = chroma
            continue

        clipped = clip_srgb(current)
        error = delta_e_ok(clipped, current)
        if error < JND:
            if JND - error < CHROMA_EPSILON:
                return _result(clipped, clipped=True)
            low_in_gamut = False
            low = chroma
        else:
            high = chroma

    # low is either in gamut or within one JND once clipped
    return _result(Color(ColorSpace.OKLCH, (L, low, H)), clipped=True)
