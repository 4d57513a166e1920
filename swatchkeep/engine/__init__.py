# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Color engine for Swatchkeep.

Pure, deterministic conversion between a picked color and its format
strings, plus gamut mapping. No state and no I/O.
"""

from swatchkeep.engine.colorspace import convert, delta_e_ok
from swatchkeep.engine.factory import build_entry, create_entry, new_entry_id, utc_timestamp
from swatchkeep.engine.formats import (
    canonical_hex,
    get_all_formats,
    is_light_color,
    normalize_hex,
    normalize_hue,
    parse_color,
    render_as,
)
from swatchkeep.engine.gamut import clip_srgb, is_in_gamut, map_to_displayable

__all__ = [
    # Parsing
    "normalize_hex",
    "parse_color",
    "canonical_hex",
    # Rendering
    "render_as",
    "get_all_formats",
    "normalize_hue",
    "is_light_color",
    # Conversion
    "convert",
    "delta_e_ok",
    # Gamut
    "is_in_gamut",
    "clip_srgb",
    "map_to_displayable",
    # Entries
    "create_entry",
    "build_entry",
    "new_entry_id",
    "utc_timestamp",
]
