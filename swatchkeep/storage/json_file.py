# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Key-value store kept in a single JSON file.

File I/O runs in a worker thread so the event loop is never blocked.
Writes go to a sibling temporary file that then replaces the original,
so a crash mid-write leaves the previous contents intact.
"""

from __future__ import annotations

import asyncio
import json
import os
import threading
from pathlib import Path
from typing import Any, Mapping, Union

from swatchkeep.storage.base import Keys, key_list


class JsonFileStore:
    """
    :class:`~swatchkeep.storage.base.KeyValueStore` backed by a JSON object file.

    A missing file reads as an empty store. A file that does not hold a
    JSON object raises ValueError.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        os.replace(tmp, self.path)

    def _get(self, keys: list[str]) -> dict[str, Any]:
        with self._lock:
            data = self._read()
        return {k: data[k] for k in keys if k in data}

    def _set(self, items: dict[str, Any]) -> None:
        # Fail on unserializable values before touching the file
        items = json.loads(json.dumps(items))
        with self._lock:
            data = self._read()
            data.update(items)
            self._write(data)

    def _remove(self, keys: list[str]) -> None:
        with self._lock:
            data = self._read()
            if not any(k in data for k in keys):
                return
            for key in keys:
                data.pop(key, None)
            self._write(data)

    async def get(self, keys: Keys) -> dict[str, Any]:
        return await asyncio.to_thread(self._get, key_list(keys))

    async def set(self, items: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._set, dict(items))

    async def remove(self, keys: Keys) -> None:
        await asyncio.to_thread(self._remove, key_list(keys))
