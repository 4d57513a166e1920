# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Swatchkeep -- Color pick history with multi-format rendering.

Turns a picked color into every common CSS color notation and keeps a
bounded, newest-first history of picks that survives schema changes
between releases.

Quick start::

    import asyncio
    from swatchkeep import HistoryStore, MemoryStore

    async def main():
        store = HistoryStore(MemoryStore())
        await store.record_pick("#3366cc")
        for entry in await store.get_history():
            print(entry.value_at_pick, entry.values.oklch)

    asyncio.run(main())
"""

from __future__ import annotations

import logging

__version__ = "2.0.0"

from swatchkeep.config import HistoryConfig
from swatchkeep.engine import (
    create_entry,
    get_all_formats,
    map_to_displayable,
    normalize_hex,
    normalize_hue,
    parse_color,
    render_as,
)
from swatchkeep.errors import (
    InvalidColorFormat,
    PersistenceError,
    PersistenceTimeout,
    SwatchkeepError,
)
from swatchkeep.schema import (
    FORMAT_IDS,
    FORMAT_LABELS,
    Color,
    ColorSpace,
    FormatId,
    FormatSnapshot,
    HistoryEntry,
)
from swatchkeep.storage import HistoryStore, JsonFileStore, KeyValueStore, MemoryStore

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core API
    "HistoryStore",
    "HistoryConfig",
    "create_entry",
    "get_all_formats",
    "render_as",
    "parse_color",
    "normalize_hex",
    "normalize_hue",
    "map_to_displayable",
    # Types (commonly needed)
    "FormatId",
    "FORMAT_IDS",
    "FORMAT_LABELS",
    "FormatSnapshot",
    "HistoryEntry",
    "Color",
    "ColorSpace",
    # Backends
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    # Errors
    "SwatchkeepError",
    "InvalidColorFormat",
    "PersistenceError",
    "PersistenceTimeout",
    # Version
    "__version__",
]
