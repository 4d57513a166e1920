# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Schema definitions for picked colors and their history.

All types in this module are immutable (frozen dataclasses).
Once an entry is produced, it is a record of a pick and cannot be altered.
"""

from swatchkeep.schema.history_entry import (
    CANONICAL_HEX_RE,
    FORMAT_IDS,
    FORMAT_LABELS,
    Color,
    ColorSpace,
    FormatId,
    FormatSnapshot,
    GamutResult,
    HistoryEntry,
    coerce_format,
    is_canonical_hex,
    is_format_id,
)
from swatchkeep.schema.records import (
    HEX_RE,
    CurrentRecord,
    RecordState,
    RepairableRecord,
    UnusableRecord,
    classify_record,
    looks_like_hex,
)

__all__ = [
    # Formats
    "FormatId",
    "FORMAT_IDS",
    "FORMAT_LABELS",
    "is_format_id",
    "coerce_format",
    # Color values
    "Color",
    "ColorSpace",
    "GamutResult",
    "CANONICAL_HEX_RE",
    "HEX_RE",
    "is_canonical_hex",
    "looks_like_hex",
    # Persisted types
    "FormatSnapshot",
    "HistoryEntry",
    # Record validation
    "CurrentRecord",
    "RepairableRecord",
    "UnusableRecord",
    "RecordState",
    "classify_record",
]
