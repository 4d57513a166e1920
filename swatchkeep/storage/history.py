# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Persisted color history and output-format preference.

Reads tolerate anything earlier releases may have written. For the history
key the order of precedence is:

1. Records in the current schema are returned as they are.
2. Records with a usable color but a stale or damaged shape are rebuilt
   from that color (not written back until the next mutation).
3. Records with no usable color are dropped.
4. If nothing survives, the v1 flat list of hex strings is migrated once:
   it is written as current-schema history and the v1 key is deleted.
5. Otherwise the history is empty.

A damaged record never fails a read. Only backend failures propagate, as
PersistenceError (or PersistenceTimeout).

Every public coroutine runs under one lock per store instance (and per
running event loop), so callers
sharing an instance cannot lose each other's updates. Separate instances
over the same backend can still race: the last full-collection write wins.
"""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
import uuid
from typing import Any, Awaitable, Optional, TypeVar, Union

from swatchkeep.config import LEGACY_CREATED_AT, HistoryConfig
from swatchkeep.engine.factory import build_entry, create_entry
from swatchkeep.engine.formats import get_all_formats
from swatchkeep.errors import PersistenceError, PersistenceTimeout
from swatchkeep.schema import (
    CurrentRecord,
    FormatId,
    HistoryEntry,
    RepairableRecord,
    classify_record,
    coerce_format,
    looks_like_hex,
)
from swatchkeep.storage.base import Keys, KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Namespace for ids derived from the content of repaired records
_REPAIR_NAMESPACE = uuid.UUID("5b0f7a52-3c1e-4d55-9a57-6d1e7c2f4b10")


def _derived_id(position: int, raw: Any) -> str:
    content = json.dumps(raw, sort_keys=True, default=str)
    return str(uuid.uuid5(_REPAIR_NAMESPACE, f"{position}:{content}"))


class HistoryStore:
    """
    CRUD over the persisted pick history and the active output format.

    Args:
        backend: Key-value store to persist into
        config: Keys, cap and timeout (defaults if None)

    Example:
        >>> store = HistoryStore(MemoryStore())
        >>> entry = store.create_entry("#ff0000", await store.get_active_format())
        >>> history = await store.add_entry(entry)
    """

    # Pure helpers, exposed for the UI layer
    create_entry = staticmethod(create_entry)
    get_all_formats = staticmethod(get_all_formats)

    def __init__(self, backend: KeyValueStore, config: Optional[HistoryConfig] = None) -> None:
        self.backend = backend
        self.config = config or HistoryConfig()
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _loop_lock(self) -> asyncio.Lock:
        # An asyncio.Lock is bound to the first loop that waits on it
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    # -------------------------------------------------------------------------
    # Backend access
    # -------------------------------------------------------------------------

    async def _call(self, operation: str, awaitable: Awaitable[T]) -> T:
        timeout = self.config.timeout
        try:
            if timeout is None:
                return await awaitable
            return await asyncio.wait_for(awaitable, timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Backend '%s' timed out after %ss", operation, timeout)
            raise PersistenceTimeout(operation, timeout) from e
        except PersistenceError:
            raise
        except Exception as e:
            logger.warning("Backend '%s' failed: %s", operation, e)
            raise PersistenceError(operation, str(e)) from e

    async def _get(self, keys: Keys) -> dict[str, Any]:
        return await self._call("get", self.backend.get(keys))

    async def _set(self, items: dict[str, Any]) -> None:
        await self._call("set", self.backend.set(items))

    async def _remove(self, keys: Keys) -> None:
        await self._call("remove", self.backend.remove(keys))

    async def _write_history(self, entries: list[HistoryEntry]) -> None:
        await self._set({self.config.history_key: [e.to_dict() for e in entries]})

    # -------------------------------------------------------------------------
    # Reading and repair
    # -------------------------------------------------------------------------

    def _repair(
        self,
        position: int,
        record: RepairableRecord,
        fallback: FormatId,
        seen: set[str],
    ) -> HistoryEntry:
        fields = record.fields
        entry_id = fields.get("id")
        if not isinstance(entry_id, str) or not entry_id or entry_id in seen:
            entry_id = _derived_id(position, fields or record.color)
        created_at = fields.get("createdAt")
        if not isinstance(created_at, str) or not created_at:
            created_at = LEGACY_CREATED_AT
        return build_entry(
            record.color,
            coerce_format(fields.get("formatAtPick"), fallback),
            entry_id=entry_id,
            created_at=created_at,
        )

    def _sanitize(self, raw: Any, fallback: FormatId) -> list[HistoryEntry]:
        if not isinstance(raw, list):
            if raw is not None:
                logger.warning("Ignoring history of type %s", type(raw).__name__)
            return []

        entries: list[HistoryEntry] = []
        seen: set[str] = set()
        for position, item in enumerate(raw):
            state = classify_record(item)
            if isinstance(state, CurrentRecord):
                entry = state.entry
                if entry.id in seen:
                    logger.debug("Record %d reuses id %s, assigning a new one", position, entry.id)
                    entry = dataclasses.replace(entry, id=_derived_id(position, item))
            elif isinstance(state, RepairableRecord):
                logger.debug("Repairing record %d from color %r", position, state.color)
                entry = self._repair(position, state, fallback, seen)
            else:
                logger.warning("Dropping history record %d: %s", position, state.reason)
                continue
            seen.add(entry.id)
            entries.append(entry)
        return entries

    async def _migrate_legacy(self, fallback: FormatId) -> list[HistoryEntry]:
        key = self.config.legacy_key
        raw = (await self._get(key)).get(key)
        if raw is None:
            return []
        if isinstance(raw, str):
            raw = [raw]
        elif not isinstance(raw, list):
            logger.warning("Ignoring legacy history of type %s", type(raw).__name__)
            raw = []

        entries = []
        for value in raw:
            if not looks_like_hex(value):
                logger.warning("Dropping legacy color %r", value)
                continue
            entries.append(create_entry(value, fallback))
        entries = entries[:self.config.history_limit]

        # New history first: if removing the old key fails, the next read
        # still prefers the migrated data
        if entries:
            await self._write_history(entries)
        await self._remove(key)
        logger.info("Migrated %d legacy colors to %s", len(entries), self.config.history_key)
        return entries

    async def _read_history(self) -> list[HistoryEntry]:
        cfg = self.config
        stored, preference = await asyncio.gather(
            self._get(cfg.history_key),
            self._get(cfg.format_key),
        )
        fallback = coerce_format(preference.get(cfg.format_key), cfg.default_format)

        entries = self._sanitize(stored.get(cfg.history_key), fallback)
        if entries:
            return entries[:cfg.history_limit]
        return await self._migrate_legacy(fallback)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    async def get_history(self) -> list[HistoryEntry]:
        """
        Return the history, newest first.

        May migrate v1 data on first call (see module docstring).

        Raises:
            PersistenceError: if the backend fails
        """
        async with self._loop_lock():
            return await self._read_history()

    async def count(self) -> int:
        """Number of entries in the history."""
        return len(await self.get_history())

    async def add_entry(self, entry: HistoryEntry) -> list[HistoryEntry]:
        """
        Insert ``entry`` at the front and evict the oldest beyond the cap.

        An existing entry with the same id is replaced.

        Returns:
            The history as persisted, newest first
        """
        if not isinstance(entry, HistoryEntry):
            raise TypeError(f"Expected HistoryEntry, got {type(entry).__name__}")
        async with self._loop_lock():
            history = await self._read_history()
            history = [entry] + [e for e in history if e.id != entry.id]
            history = history[:self.config.history_limit]
            await self._write_history(history)
            return history

    async def record_pick(self, source_hex: str) -> list[HistoryEntry]:
        """Create an entry for a picked color in the active format and add it."""
        fmt = await self.get_active_format()
        return await self.add_entry(create_entry(source_hex, fmt))

    async def remove_entry(self, entry_id: str) -> list[HistoryEntry]:
        """
        Remove the entry with ``entry_id``.

        Unknown ids are ignored and nothing is written.

        Returns:
            The remaining history, newest first
        """
        async with self._loop_lock():
            history = await self._read_history()
            remaining = [e for e in history if e.id != entry_id]
            if len(remaining) != len(history):
                await self._write_history(remaining)
            return remaining

    async def clear_history(self) -> None:
        """Delete the history, including any unmigrated v1 data."""
        async with self._loop_lock():
            await self._remove([self.config.history_key, self.config.legacy_key])

    # -------------------------------------------------------------------------
    # Output format preference
    # -------------------------------------------------------------------------

    async def get_active_format(self) -> FormatId:
        """
        Return the selected output format.

        An absent or unknown stored value is replaced by the default, and
        the default is written back.
        """
        key = self.config.format_key
        async with self._loop_lock():
            raw = (await self._get(key)).get(key)
            fmt = coerce_format(raw)
            if fmt is None:
                fmt = self.config.default_format
                if raw is not None:
                    logger.warning("Unknown output format %r, resetting to %s", raw, fmt.value)
                await self._set({key: fmt.value})
            return fmt

    async def set_active_format(self, fmt: Union[FormatId, str]) -> None:
        """
        Persist the selected output format.

        Raises:
            ValueError: if ``fmt`` is not a known format
        """
        fmt = FormatId(fmt)
        async with self._loop_lock():
            await self._set({self.config.format_key: fmt.value})
