# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
History schema v2: canonical types for picked colors.

Design principles:
- Immutable: All types are frozen dataclasses
- Identity: A color's identity is its canonical ``#rrggbb`` hex string.
  Every other representation is derived from it.
- Complete: A FormatSnapshot always carries every FormatId, never a subset
- Serializable: ``to_dict()`` produces the exact JSON shape that is persisted

Persisted entry shape (camelCase keys, as written by every release since v2)::

    {
      "id": "0b8c...",
      "createdAt": "2026-10-19T12:00:00.000Z",
      "sourceHex": "#ff0000",
      "formatAtPick": "oklch",
      "valueAtPick": "oklch(62.8% 0.2577 29.23)",
      "values": {"hex": "#ff0000", "rgb": "rgb(255, 0, 0)", ...}
    }

Schema v1 stored a bare list of hex strings under a different key. It is
only ever read (see :mod:`swatchkeep.storage.history`), never written.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping, Optional, Union


# =============================================================================
# Canonical Hex
# =============================================================================

CANONICAL_HEX_RE = re.compile(r"^#[0-9a-f]{6}$")


def is_canonical_hex(value: object) -> bool:
    """True if ``value`` is a lowercase ``#rrggbb`` string."""
    return isinstance(value, str) and CANONICAL_HEX_RE.match(value) is not None


# =============================================================================
# Output Formats
# =============================================================================


class FormatId(str, Enum):
    """
    Output formats a picked color is rendered in.

    Declaration order is the display order. Storage never depends on it.
    """
    HEX = "hex"
    RGB = "rgb"
    HSL = "hsl"
    OKLCH = "oklch"
    OKLAB = "oklab"
    LAB = "lab"
    LCH = "lch"
    P3 = "p3"

    def __str__(self) -> str:
        return self.value


FORMAT_IDS: tuple[FormatId, ...] = tuple(FormatId)

FORMAT_LABELS: dict[FormatId, str] = {
    FormatId.HEX: "HEX",
    FormatId.RGB: "RGB",
    FormatId.HSL: "HSL",
    FormatId.OKLCH: "OKLCH",
    FormatId.OKLAB: "OKLab",
    FormatId.LAB: "Lab",
    FormatId.LCH: "LCH",
    FormatId.P3: "Display-P3",
}

_FORMAT_VALUES = frozenset(f.value for f in FORMAT_IDS)


def is_format_id(value: object) -> bool:
    """True if ``value`` names a known output format."""
    if isinstance(value, FormatId):
        return True
    return isinstance(value, str) and value in _FORMAT_VALUES


# =============================================================================
# Internal Color Values
# =============================================================================


class ColorSpace(Enum):
    """Color spaces the engine can convert between."""
    SRGB = "srgb"
    P3 = "p3"
    OKLAB = "oklab"
    OKLCH = "oklch"
    LAB = "lab"  # CIE Lab, D50
    LCH = "lch"  # CIE LCh(ab), D50


@dataclass(frozen=True, slots=True)
class Color:
    """
    A color as three coordinates in a given space.

    Coordinates are not range-checked: an OKLCH triple may describe a color
    outside every display gamut. Use ``map_to_displayable`` to bring it
    back to sRGB.

    Attributes:
        space: The space the coordinates are expressed in
        coords: Native coordinates, e.g. (r, g, b) in [0, 1] for sRGB,
            (L, C, H) with L in [0, 1] and H in degrees for OKLCH,
            (L, a, b) with L in [0, 100] for CIE Lab
    """
    space: ColorSpace
    coords: tuple[float, float, float]

    def __post_init__(self) -> None:
        if len(self.coords) != 3:
            raise ValueError(f"Color needs 3 coordinates, got {len(self.coords)}")
        object.__setattr__(self, "coords", tuple(float(c) for c in self.coords))


@dataclass(frozen=True, slots=True)
class GamutResult:
    """
    Outcome of mapping a color into the sRGB gamut.

    Attributes:
        hex: Canonical hex of the displayable color
        clipped: True if the input was outside sRGB and had to be moved
        color: The displayable color in sRGB, channels in [0, 1]
    """
    hex: str
    clipped: bool
    color: Color


# =============================================================================
# Format Snapshot
# =============================================================================


@dataclass(frozen=True, slots=True)
class FormatSnapshot:
    """
    Rendering of one color in every output format, taken at one instant.

    One field per FormatId, so a snapshot can never be partial.
    Index it with a FormatId (or its string value)::

        snapshot[FormatId.RGB]  # "rgb(255, 0, 0)"
        snapshot["hex"]         # "#ff0000"
    """
    hex: str
    rgb: str
    hsl: str
    oklch: str
    oklab: str
    lab: str
    lch: str
    p3: str

    def __post_init__(self) -> None:
        for fmt in FORMAT_IDS:
            value = getattr(self, fmt.value)
            if not isinstance(value, str):
                raise ValueError(
                    f"Snapshot value for '{fmt.value}' must be a string, "
                    f"got {type(value).__name__}"
                )

    def __getitem__(self, fmt: Union[FormatId, str]) -> str:
        return getattr(self, FormatId(fmt).value)

    def __iter__(self) -> Iterator[FormatId]:
        return iter(FORMAT_IDS)

    def __len__(self) -> int:
        return len(FORMAT_IDS)

    def items(self) -> Iterator[tuple[FormatId, str]]:
        for fmt in FORMAT_IDS:
            yield fmt, getattr(self, fmt.value)

    def to_dict(self) -> dict[str, str]:
        """Serialize to a plain ``{format: value}`` dictionary."""
        return {fmt.value: value for fmt, value in self.items()}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FormatSnapshot:
        """
        Deserialize from dictionary.

        The keys must be exactly the known format ids. Missing or extra
        keys raise ValueError.
        """
        keys = set(data)
        if keys != _FORMAT_VALUES:
            missing = sorted(_FORMAT_VALUES - keys)
            extra = sorted(str(k) for k in keys - _FORMAT_VALUES)
            raise ValueError(
                f"Snapshot keys do not match formats (missing={missing}, extra={extra})"
            )
        return cls(**{key: data[key] for key in _FORMAT_VALUES})


# =============================================================================
# History Entry
# =============================================================================


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """
    One picked color, as persisted.

    Entries are value objects: created once at pick time and never changed.

    Attributes:
        id: Opaque unique identifier
        created_at: ISO-8601 UTC timestamp of the pick
        source_hex: Canonical hex of the picked color
        format_at_pick: Output format selected when the color was picked
        value_at_pick: Rendering in ``format_at_pick``; always equals
            ``values[format_at_pick]``
        values: Rendering in every format at pick time
    """
    id: str
    created_at: str
    source_hex: str
    format_at_pick: FormatId
    value_at_pick: str
    values: FormatSnapshot

    def __post_init__(self) -> None:
        """Validate entry invariants."""
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("id must be a non-empty string")
        if not isinstance(self.created_at, str) or not self.created_at:
            raise ValueError("created_at must be a non-empty string")
        if not is_canonical_hex(self.source_hex):
            raise ValueError(f"source_hex must be canonical #rrggbb, got {self.source_hex!r}")
        object.__setattr__(self, "format_at_pick", FormatId(self.format_at_pick))
        if self.value_at_pick != self.values[self.format_at_pick]:
            raise ValueError(
                f"value_at_pick {self.value_at_pick!r} does not match "
                f"values[{self.format_at_pick.value!r}]"
            )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the persisted dictionary shape."""
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "sourceHex": self.source_hex,
            "formatAtPick": self.format_at_pick.value,
            "valueAtPick": self.value_at_pick,
            "values": self.values.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HistoryEntry:
        """
        Deserialize from the persisted dictionary shape.

        Strict: any missing or invalid field raises (KeyError, ValueError or
        TypeError). Use :func:`swatchkeep.schema.classify_record` to read
        untrusted data.
        """
        return cls(
            id=data["id"],
            created_at=data["createdAt"],
            source_hex=data["sourceHex"],
            format_at_pick=FormatId(data["formatAtPick"]),
            value_at_pick=data["valueAtPick"],
            values=FormatSnapshot.from_dict(data["values"]),
        )


def coerce_format(value: object, default: Optional[FormatId] = None) -> Optional[FormatId]:
    """Return ``value`` as a FormatId, or ``default`` if it is not one."""
    if is_format_id(value):
        return FormatId(value)
    return default
