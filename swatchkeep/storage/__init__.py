# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""
Persistence for Swatchkeep.

The history store talks to any object implementing the KeyValueStore
protocol. Two backends ship with the package:

1. MemoryStore -- In-process, for tests and short-lived sessions
2. JsonFileStore -- A single JSON file on disk
"""

from swatchkeep.storage.base import KeyValueStore
from swatchkeep.storage.history import HistoryStore
from swatchkeep.storage.json_file import JsonFileStore
from swatchkeep.storage.memory import MemoryStore

__all__ = [
    "HistoryStore",
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
]
