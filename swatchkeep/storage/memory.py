# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""In-process key-value store."""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

from swatchkeep.storage.base import Keys, key_list


def _json_copy(value: Any) -> Any:
    # Only JSON-serializable values are accepted, and nothing is shared
    return json.loads(json.dumps(value))


class MemoryStore:
    """
    Dictionary-backed :class:`~swatchkeep.storage.base.KeyValueStore`.

    Values are copied through JSON on the way in and out, so the store
    behaves like a real serializing backend.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: dict[str, Any] = _json_copy(dict(initial)) if initial else {}

    async def get(self, keys: Keys) -> dict[str, Any]:
        return {k: _json_copy(self._data[k]) for k in key_list(keys) if k in self._data}

    async def set(self, items: Mapping[str, Any]) -> None:
        self._data.update(_json_copy(dict(items)))

    async def remove(self, keys: Keys) -> None:
        for key in key_list(keys):
            self._data.pop(key, None)

    def snapshot(self) -> dict[str, Any]:
        """Copy of everything stored, for inspection."""
        return _json_copy(self._data)
