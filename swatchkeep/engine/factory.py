# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Building history entries from freshly picked colors.

A pick must never vanish: if the picked value cannot be parsed, the entry
is built from DEFAULT_SOURCE_HEX instead of raising.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional, Union

from swatchkeep.config import DEFAULT_SOURCE_HEX
from swatchkeep.engine.formats import canonical_hex, get_all_formats
from swatchkeep.errors import InvalidColorFormat
from swatchkeep.schema import FormatId, HistoryEntry

logger = logging.getLogger(__name__)


def new_entry_id() -> str:
    """Generate a fresh opaque entry id."""
    return str(uuid.uuid4())


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """
    Format ``moment`` (default: now) as ISO-8601 UTC with milliseconds.

    Example: ``2026-10-19T12:00:00.000Z``
    """
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _source_hex(value: str) -> str:
    try:
        return canonical_hex(value)
    except InvalidColorFormat:
        logger.warning("Unparseable picked color %r, using %s", value, DEFAULT_SOURCE_HEX)
        return DEFAULT_SOURCE_HEX


def build_entry(
    source_hex: str,
    format_at_pick: Union[FormatId, str],
    *,
    entry_id: str,
    created_at: str,
) -> HistoryEntry:
    """
    Build an entry with a known id and timestamp.

    Used when rebuilding a stored record that already has an identity.
    ``source_hex`` is canonicalized, with the same fallback as
    :func:`create_entry`.
    """
    fmt = FormatId(format_at_pick)
    normalized = _source_hex(source_hex)
    values = get_all_formats(normalized)
    return HistoryEntry(
        id=entry_id,
        created_at=created_at,
        source_hex=normalized,
        format_at_pick=fmt,
        value_at_pick=values[fmt],
        values=values,
    )


def create_entry(
    source_hex: str,
    format_at_pick: Union[FormatId, str] = FormatId.HEX,
) -> HistoryEntry:
    """
    Create a history entry for a color picked just now.

    Args:
        source_hex: The picked color as 3- or 6-digit hex. Unparseable
            values are replaced by DEFAULT_SOURCE_HEX.
        format_at_pick: Output format selected by the user

    Returns:
        A new entry with a fresh id and the current UTC timestamp

    Raises:
        ValueError: if ``format_at_pick`` is not a known format
    """
    return build_entry(
        source_hex,
        format_at_pick,
        entry_id=new_entry_id(),
        created_at=utc_timestamp(),
    )
