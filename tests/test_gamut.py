# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""Tests for sRGB gamut checks and gamut mapping."""

import pytest

from swatchkeep.engine.colorspace import convert
from swatchkeep.engine.formats import parse_color
from swatchkeep.engine.gamut import clip_srgb, is_in_gamut, map_to_displayable
from swatchkeep.schema import Color, ColorSpace, GamutResult


class TestIsInGamut:

    def test_parsed_hex_in_gamut(self):
        assert is_in_gamut(parse_color("#3366cc"))

    def test_extreme_srgb_in_gamut(self):
        assert is_in_gamut(parse_color("#ffffff"))
        assert is_in_gamut(parse_color("#000000"))

    def test_high_chroma_oklch_out_of_gamut(self):
        assert not is_in_gamut(Color(ColorSpace.OKLCH, (0.5, 0.5, 30.0)))

    def test_p3_red_outside_srgb_inside_p3(self):
        p3_red = Color(ColorSpace.P3, (1.0, 0.0, 0.0))
        assert not is_in_gamut(p3_red)
        assert is_in_gamut(p3_red, ColorSpace.P3)

    def test_non_rgb_space_rejected(self):
        with pytest.raises(ValueError, match="RGB space"):
            is_in_gamut(parse_color("#ffffff"), ColorSpace.LAB)


class TestMapToDisplayable:

    def test_in_gamut_unchanged(self):
        color = parse_color("#3366cc")
        result = map_to_displayable(color)
        assert isinstance(result, GamutResult)
        assert result.clipped is False
        assert result.hex == "#3366cc"
        assert result.color == color

    def test_in_gamut_from_other_space(self):
        oklch = convert(parse_color("#3366cc"), ColorSpace.OKLCH)
        result = map_to_displayable(oklch)
        assert result.clipped is False
        assert result.hex == "#3366cc"

    def test_out_of_gamut_oklch_is_clipped(self):
        result = map_to_displayable(Color(ColorSpace.OKLCH, (0.5, 0.5, 30.0)))
        assert result.clipped is True
        assert is_in_gamut(result.color)
        assert is_in_gamut(parse_color(result.hex))

    def test_chroma_reduced_not_hue(self):
        result = map_to_displayable(Color(ColorSpace.OKLCH, (0.5, 0.5, 30.0)))
        L, C, H = convert(result.color, ColorSpace.OKLCH).coords
        assert C < 0.5
        assert H == pytest.approx(30.0, abs=10.0)
        assert L == pytest.approx(0.5, abs=0.05)

    def test_lightness_kept_within_jnd(self):
        mapped = map_to_displayable(Color(ColorSpace.OKLCH, (0.7, 0.4, 150.0)))
        assert mapped.clipped is True
        L = convert(mapped.color, ColorSpace.OKLCH).coords[0]
        assert L == pytest.approx(0.7, abs=0.03)

    def test_over_bright_maps_to_white(self):
        result = map_to_displayable(Color(ColorSpace.OKLCH, (1.2, 0.1, 100.0)))
        assert result.clipped is True
        assert result.hex == "#ffffff"

    def test_negative_lightness_maps_to_black(self):
        result = map_to_displayable(Color(ColorSpace.OKLCH, (-0.1, 0.2, 100.0)))
        assert result.clipped is True
        assert result.hex == "#000000"

    def test_out_of_range_lab(self):
        result = map_to_displayable(Color(ColorSpace.LAB, (50.0, 150.0, 0.0)))
        assert result.clipped is True
        assert is_in_gamut(parse_color(result.hex))

    def test_nan_hue(self):
        result = map_to_displayable(Color(ColorSpace.OKLCH, (0.5, 0.5, float("nan"))))
        assert result.clipped is True
        assert result.hex.startswith("#")

    def test_p3_green(self):
        result = map_to_displayable(Color(ColorSpace.P3, (0.0, 1.0, 0.0)))
        assert result.clipped is True
        assert is_in_gamut(result.color)


class TestClipSRGB:

    def test_clamps_each_channel(self):
        clipped = clip_srgb(Color(ColorSpace.SRGB, (1.3, -0.2, 0.5)))
        assert clipped.coords == (1.0, 0.0, 0.5)

    def test_converts_first(self):
        clipped = clip_srgb(Color(ColorSpace.OKLCH, (0.5, 0.5, 30.0)))
        assert clipped.space is ColorSpace.SRGB
        assert all(0.0 <= c <= 1.0 for c in clipped.coords)
