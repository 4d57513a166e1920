# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Configuration for the history store.

Storage keys are part of the persisted format. Changing them orphans data
written by earlier releases, so the legacy key must stay readable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from swatchkeep.schema import FormatId


# Persisted keys
HISTORY_KEY = "color_history"
FORMAT_KEY = "active_output_format"
LEGACY_HISTORY_KEY = "color_hex_code"  # flat list of hex strings, pre-1.0

# Oldest entries beyond this are evicted on write
HISTORY_LIMIT = 1000

# Seconds to wait for a single backend call
DEFAULT_TIMEOUT = 5.0

DEFAULT_FORMAT = FormatId.HEX

# Substituted when a captured color cannot be parsed
DEFAULT_SOURCE_HEX = "#000000"

# Creation time given to repaired records that lost theirs
LEGACY_CREATED_AT = "1970-01-01T00:00:00.000Z"


@dataclass(frozen=True)
class HistoryConfig:
    """Settings for a :class:`~swatchkeep.storage.HistoryStore`."""

    # Maximum number of entries kept, newest first
    history_limit: int = HISTORY_LIMIT

    # Per-call bound on backend I/O; None waits forever
    timeout: Optional[float] = DEFAULT_TIMEOUT

    history_key: str = HISTORY_KEY
    format_key: str = FORMAT_KEY
    legacy_key: str = LEGACY_HISTORY_KEY

    default_format: FormatId = DEFAULT_FORMAT

    def __post_init__(self) -> None:
        if self.history_limit < 1:
            raise ValueError(f"history_limit must be >= 1, got {self.history_limit}")
        if self.timeout is not None and self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        object.__setattr__(self, "default_format", FormatId(self.default_format))
