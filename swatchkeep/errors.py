# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""Exception types raised by Swatchkeep."""

from __future__ import annotations


class SwatchkeepError(Exception):
    """Base class for all Swatchkeep errors."""


class InvalidColorFormat(SwatchkeepError, ValueError):
    """A string could not be parsed as any recognized color representation."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Unrecognized color value: {value!r}")


class PersistenceError(SwatchkeepError):
    """The key-value backend failed while performing ``operation``."""

    def __init__(self, operation: str, message: str = "") -> None:
        self.operation = operation
        detail = f": {message}" if message else ""
        super().__init__(f"Persistence operation '{operation}' failed{detail}")


class PersistenceTimeout(PersistenceError):
    """The key-value backend did not answer within the configured timeout."""

    def __init__(self, operation: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(operation, f"no response after {timeout:g}s")
