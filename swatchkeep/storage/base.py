# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""Key-value persistence protocol consumed by the history store."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, Union, runtime_checkable

Keys = Union[str, Iterable[str]]


@runtime_checkable
class KeyValueStore(Protocol):
    """
    Asynchronous string-keyed store of JSON-serializable values.

    Each call is atomic on its own. There are no transactions across
    calls: two read-modify-write sequences can interleave, and the last
    ``set`` wins.
    """

    async def get(self, keys: Keys) -> dict[str, Any]:
        """Return the values stored under ``keys``; absent keys are omitted."""
        ...

    async def set(self, items: Mapping[str, Any]) -> None:
        """Store every item in ``items``."""
        ...

    async def remove(self, keys: Keys) -> None:
        """Delete ``keys``; deleting an absent key is not an error."""
        ...


def key_list(keys: Keys) -> list[str]:
    """Normalize a key or iterable of keys to a list."""
    if isinstance(keys, str):
        return [keys]
    return list(keys)
