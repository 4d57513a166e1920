# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Color space conversions.

Every conversion goes through linear sRGB:

    sRGB ⇄ Linear sRGB ⇄ OKLab ⇄ OKLCH
                      ⇄ XYZ (D65) ⇄ Linear P3 ⇄ Display-P3
                      ⇄ XYZ (D65) ⇄ XYZ (D50) ⇄ CIE Lab ⇄ CIE LCH

References:
- OKLab: https://bottosson.github.io/posts/oklab/
- CSS Color Module Level 4, sample code for color conversions
  (sRGB/P3 primaries, Bradford D65→D50, CIE Lab)

Nothing here clamps. Out-of-gamut inputs produce out-of-range outputs so
that callers can detect and map them (see :mod:`swatchkeep.engine.gamut`).
All conversions are pure NumPy for determinism.
"""

from __future__ import annotations

import math

import numpy as np
from numpy.typing import NDArray

from swatchkeep.schema import Color, ColorSpace


# =============================================================================
# sRGB ↔ Linear RGB (shared by sRGB and Display-P3)
# =============================================================================


def srgb_to_linear(srgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert gamma-encoded sRGB values to linear light.

    sRGB uses a piecewise gamma curve:
    - For values <= 0.04045: linear/12.92
    - For values > 0.04045: ((value + 0.055) / 1.055) ^ 2.4

    The curve is mirrored for negative values so that out-of-gamut
    channels survive a round trip.
    """
    srgb = np.asarray(srgb, dtype=np.float64)
    magnitude = np.abs(srgb)
    linear = np.where(
        magnitude <= 0.04045,
        magnitude / 12.92,
        np.power((magnitude + 0.055) / 1.055, 2.4)
    )
    return np.sign(srgb) * linear


def linear_to_srgb(linear: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert linear light to gamma-encoded sRGB.

    Inverse of srgb_to_linear. Not clipped.
    """
    linear = np.asarray(linear, dtype=np.float64)
    magnitude = np.abs(linear)
    srgb = np.where(
        magnitude <= 0.0031308,
        magnitude * 12.92,
        1.055 * np.power(magnitude, 1.0 / 2.4) - 0.055
    )
    return np.sign(linear) * srgb


# =============================================================================
# Linear RGB ↔ OKLab
# =============================================================================

# Matrices from https://bottosson.github.io/posts/oklab/

# Linear sRGB to LMS (cone responses)
_M1 = np.array([
    [0.4122214708, 0.5363325363, 0.0514459929],
    [0.2119034982, 0.6806995451, 0.1073969566],
    [0.0883024619, 0.2817188376, 0.6299787005],
], dtype=np.float64)

# LMS to OKLab
_M2 = np.array([
    [0.2104542553, 0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050, 0.4505937099],
    [0.0259040371, 0.7827717662, -0.8086757660],
], dtype=np.float64)

# Inverse matrices
_M1_INV = np.linalg.inv(_M1)
_M2_INV = np.linalg.inv(_M2)


def linear_rgb_to_oklab(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert linear sRGB to OKLab.

    Args:
        rgb: Array of shape (..., 3) with linear RGB values

    Returns:
        Array of shape (..., 3) with OKLab values (L, a, b)
    """
    rgb = np.asarray(rgb, dtype=np.float64)
    lms = np.einsum('...j,ij->...i', rgb, _M1)
    # cbrt keeps the sign for out-of-gamut colors
    lms_cbrt = np.cbrt(lms)
    return np.einsum('...j,ij->...i', lms_cbrt, _M2)


def oklab_to_linear_rgb(lab: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert OKLab to linear sRGB.

    Args:
        lab: Array of shape (..., 3) with OKLab values (L, a, b)

    Returns:
        Array of shape (..., 3) with linear RGB values (unclipped)
    """
    lab = np.asarray(lab, dtype=np.float64)
    lms_cbrt = np.einsum('...j,ij->...i', lab, _M2_INV)
    lms = lms_cbrt ** 3
    return np.einsum('...j,ij->...i', lms, _M1_INV)


# =============================================================================
# Rectangular ↔ Polar (OKLab ↔ OKLCH, Lab ↔ LCH)
# =============================================================================


def lab_to_polar(lab: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert any (L, a, b) space to its cylindrical (L, C, H) form.

    H is in degrees [0, 360). For a = b = 0 the hue is 0.
    """
    lab = np.asarray(lab, dtype=np.float64)

    L = lab[..., 0]
    a = lab[..., 1]
    b = lab[..., 2]

    C = np.sqrt(a**2 + b**2)
    H = np.degrees(np.arctan2(b, a)) % 360.0

    return np.stack([L, C, H], axis=-1)


def polar_to_lab(lch: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert (L, C, H) with H in degrees back to (L, a, b)."""
    lch = np.asarray(lch, dtype=np.float64)

    L = lch[..., 0]
    C = lch[..., 1]
    H_rad = np.radians(lch[..., 2])

    return np.stack([L, C * np.cos(H_rad), C * np.sin(H_rad)], axis=-1)


# OKLCH and CIE LCH share the same polar transform
oklab_to_oklch = lab_to_polar
oklch_to_oklab = polar_to_lab


# =============================================================================
# Linear RGB ↔ CIE XYZ
# =============================================================================

# Linear sRGB to XYZ (D65)
_SRGB_TO_XYZ = np.array([
    [0.41239079926595934, 0.357584339383878, 0.1804807884018343],
    [0.21263900587151027, 0.715168678767756, 0.07219231536073371],
    [0.01933081871559182, 0.11919477979462598, 0.9505321522496607],
], dtype=np.float64)

# Linear Display-P3 to XYZ (D65)
_P3_TO_XYZ = np.array([
    [0.4865709486482162, 0.26566769316909306, 0.1982172852343625],
    [0.2289745640697488, 0.6917385218365064, 0.079286914093745],
    [0.0, 0.04511338185890264, 1.043944368900976],
], dtype=np.float64)

# Bradford chromatic adaptation D65 → D50
_D65_TO_D50 = np.array([
    [1.0479298208405488, 0.022946793341019088, -0.05019222954313557],
    [0.029627815688159344, 0.990434484573249, -0.01707382502938514],
    [-0.009243058152591178, 0.015055144896577895, 0.7518742899580008],
], dtype=np.float64)

_XYZ_TO_SRGB = np.linalg.inv(_SRGB_TO_XYZ)
_XYZ_TO_P3 = np.linalg.inv(_P3_TO_XYZ)
_D50_TO_D65 = np.linalg.inv(_D65_TO_D50)

# D50 reference white from its chromaticity (x=0.3457, y=0.3585)
D50_WHITE = np.array([0.3457 / 0.3585, 1.0, (1.0 - 0.3457 - 0.3585) / 0.3585])


def _apply(matrix: NDArray[np.float64], values: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.einsum('...j,ij->...i', np.asarray(values, dtype=np.float64), matrix)


def linear_srgb_to_xyz(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    return _apply(_SRGB_TO_XYZ, rgb)


def xyz_to_linear_srgb(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    return _apply(_XYZ_TO_SRGB, xyz)


def linear_p3_to_xyz(rgb: NDArray[np.float64]) -> NDArray[np.float64]:
    return _apply(_P3_TO_XYZ, rgb)


def xyz_to_linear_p3(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    return _apply(_XYZ_TO_P3, xyz)


def xyz_d65_to_d50(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    return _apply(_D65_TO_D50, xyz)


def xyz_d50_to_d65(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    return _apply(_D50_TO_D65, xyz)


# =============================================================================
# XYZ (D50) ↔ CIE Lab
# =============================================================================

_LAB_EPSILON = 216.0 / 24389.0
_LAB_KAPPA = 24389.0 / 27.0


def xyz_d50_to_lab(xyz: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Convert XYZ relative to D50 to CIE Lab.

    Returns:
        Array of shape (..., 3) with L in [0, 100] for real colors
    """
    scaled = np.asarray(xyz, dtype=np.float64) / D50_WHITE
    f = np.where(
        scaled > _LAB_EPSILON,
        np.cbrt(scaled),
        (_LAB_KAPPA * scaled + 16.0) / 116.0,
    )
    L = 116.0 * f[..., 1] - 16.0
    a = 500.0 * (f[..., 0] - f[..., 1])
    b = 200.0 * (f[..., 1] - f[..., 2])
    return np.stack([L, a, b], axis=-1)


def lab_to_xyz_d50(lab: NDArray[np.float64]) -> NDArray[np.float64]:
    """Convert CIE Lab to XYZ relative to D50."""
    lab = np.asarray(lab, dtype=np.float64)
    L = lab[..., 0]

    fy = (L + 16.0) / 116.0
    fx = lab[..., 1] / 500.0 + fy
    fz = fy - lab[..., 2] / 200.0

    x = np.where(fx ** 3 > _LAB_EPSILON, fx ** 3, (116.0 * fx - 16.0) / _LAB_KAPPA)
    y = np.where(L > _LAB_KAPPA * _LAB_EPSILON, fy ** 3, L / _LAB_KAPPA)
    z = np.where(fz ** 3 > _LAB_EPSILON, fz ** 3, (116.0 * fz - 16.0) / _LAB_KAPPA)

    return np.stack([x, y, z], axis=-1) * D50_WHITE


# =============================================================================
# sRGB → HSL
# =============================================================================


def srgb_to_hsl(r: float, g: float, b: float) -> tuple[float, float, float]:
    """
    Convert an sRGB triple in [0, 1] to HSL.

    Returns:
        (H, S, L) with H in degrees, S and L in [0, 1].
        Greys have hue 0.
    """
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2.0
    delta = high - low

    if delta == 0.0:
        return 0.0, 0.0, lightness

    if lightness in (0.0, 1.0):
        saturation = 0.0
    else:
        saturation = (high - lightness) / min(lightness, 1.0 - lightness)

    if high == r:
        hue = (g - b) / delta + (6.0 if g < b else 0.0)
    elif high == g:
        hue = (b - r) / delta + 2.0
    else:
        hue = (r - g) / delta + 4.0

    return hue * 60.0, saturation, lightness


# =============================================================================
# Hex
# =============================================================================


def srgb_to_hex(srgb: NDArray[np.float64]) -> str:
    """
    Convert an sRGB triple to a canonical ``#rrggbb`` string.

    Channels are clamped to [0, 1] and rounded half-up to 0-255.
    """
    channels = np.clip(np.nan_to_num(np.asarray(srgb, dtype=np.float64)), 0.0, 1.0)
    r, g, b = (int(math.floor(c * 255.0 + 0.5)) for c in channels)
    return f"#{r:02x}{g:02x}{b:02x}"


# =============================================================================
# Color ↔ Color
# =============================================================================


def _to_linear_srgb(color: Color) -> NDArray[np.float64]:
    # Undefined coordinates (NaN hue, NaN chroma) count as 0
    coords = np.nan_to_num(np.array(color.coords, dtype=np.float64), nan=0.0)
    space = color.space

    if space is ColorSpace.SRGB:
        return srgb_to_linear(coords)
    if space is ColorSpace.P3:
        return xyz_to_linear_srgb(linear_p3_to_xyz(srgb_to_linear(coords)))
    if space is ColorSpace.OKLAB:
        return oklab_to_linear_rgb(coords)
    if space is ColorSpace.OKLCH:
        return oklab_to_linear_rgb(oklch_to_oklab(coords))
    if space is ColorSpace.LAB:
        return xyz_to_linear_srgb(xyz_d50_to_d65(lab_to_xyz_d50(coords)))
    if space is ColorSpace.LCH:
        return xyz_to_linear_srgb(xyz_d50_to_d65(lab_to_xyz_d50(polar_to_lab(coords))))
    raise ValueError(f"Unsupported color space: {space}")


def _from_linear_srgb(linear: NDArray[np.float64], space: ColorSpace) -> NDArray[np.float64]:
    if space is ColorSpace.SRGB:
        return linear_to_srgb(linear)
    if space is ColorSpace.P3:
        return linear_to_srgb(xyz_to_linear_p3(linear_srgb_to_xyz(linear)))
    if space is ColorSpace.OKLAB:
        return linear_rgb_to_oklab(linear)
    if space is ColorSpace.OKLCH:
        return oklab_to_oklch(linear_rgb_to_oklab(linear))
    if space is ColorSpace.LAB:
        return xyz_d50_to_lab(xyz_d65_to_d50(linear_srgb_to_xyz(linear)))
    if space is ColorSpace.LCH:
        return lab_to_polar(xyz_d50_to_lab(xyz_d65_to_d50(linear_srgb_to_xyz(linear))))
    raise ValueError(f"Unsupported color space: {space}")


def convert(color: Color, space: ColorSpace) -> Color:
    """
    Express ``color`` in another color space.

    Returns the input unchanged when it is already in ``space``.
    Out-of-gamut results are returned as-is, never clipped.
    """
    space = ColorSpace(space)
    if color.space is space:
        return color
    coords = _from_linear_srgb(_to_linear_srgb(color), space)
    return Color(space=space, coords=tuple(float(c) for c in coords))


# =============================================================================
# ΔE Distance (Perceptual Color Difference)
# =============================================================================


def delta_e_ok(first: Color, second: Color) -> float:
    """
    Perceptual difference between two colors, as Euclidean distance in OKLab.

    Reference thresholds (0-1 scale):
    - ΔE ≈ 0.02: barely perceptible
    - ΔE ≈ 0.04: noticeable difference
    - ΔE ≈ 0.08+: clearly different colors
    """
    lab1 = np.array(convert(first, ColorSpace.OKLAB).coords)
    lab2 = np.array(convert(second, ColorSpace.OKLAB).coords)
    return float(np.sqrt(np.sum((lab1 - lab2) ** 2)))
