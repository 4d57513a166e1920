# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Structural validation of persisted history records.

Stored data may come from any earlier release, or be damaged. Each raw
element is classified into exactly one of:

- CurrentRecord: already a complete, valid v2 entry. Kept as-is.
- RepairableRecord: has a usable color but is missing or has invalid
  fields. The caller rebuilds the rest from the color.
- UnusableRecord: nothing to recover. Dropped.

Classification never raises.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from swatchkeep.schema.history_entry import HistoryEntry


# Accepted hex syntax: 3 or 6 digits, optional leading '#', any case
HEX_RE = re.compile(r"^#?([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)

# Fields that may hold a color, in order of preference
_COLOR_FIELDS = ("sourceHex", "hex", "color")


def looks_like_hex(value: object) -> bool:
    """True if ``value`` is a string the engine can parse as hex."""
    return isinstance(value, str) and HEX_RE.match(value.strip()) is not None


@dataclass(frozen=True, slots=True)
class CurrentRecord:
    """A record that already satisfies the current entry schema."""
    entry: HistoryEntry


@dataclass(frozen=True, slots=True)
class RepairableRecord:
    """
    A record with a usable color but an incomplete or stale shape.

    Attributes:
        color: The raw color text found in the record
        fields: The original record (empty for bare-string elements)
    """
    color: str
    fields: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class UnusableRecord:
    """A record with no recoverable color."""
    reason: str


RecordState = Union[CurrentRecord, RepairableRecord, UnusableRecord]


def _find_color(raw: Mapping[str, Any]) -> Optional[str]:
    candidate = raw.get("sourceHex")
    if looks_like_hex(candidate):
        return candidate
    values = raw.get("values")
    if isinstance(values, Mapping) and looks_like_hex(values.get("hex")):
        return values["hex"]
    for name in _COLOR_FIELDS[1:]:
        if looks_like_hex(raw.get(name)):
            return raw[name]
    return None


def classify_record(raw: object) -> RecordState:
    """Classify one raw persisted element."""
    if isinstance(raw, str):
        if looks_like_hex(raw):
            return RepairableRecord(color=raw)
        return UnusableRecord(reason="string is not a hex color")

    if not isinstance(raw, Mapping):
        return UnusableRecord(reason=f"unexpected {type(raw).__name__}")

    try:
        return CurrentRecord(entry=HistoryEntry.from_dict(raw))
    except (KeyError, TypeError, ValueError):
        pass

    color = _find_color(raw)
    if color is None:
        return UnusableRecord(reason="no usable color field")
    return RepairableRecord(color=color, fields=raw)
