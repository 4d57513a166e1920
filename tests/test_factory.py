# Copyright (c) 2026 Swatchkeep
# SPDX-License-Identifier: MIT

"""Tests for history entry construction."""

import logging
import re
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from swatchkeep.config import DEFAULT_SOURCE_HEX
from swatchkeep.engine import build_entry, create_entry, new_entry_id, utc_timestamp
from swatchkeep.engine.formats import get_all_formats
from swatchkeep.schema import FormatId, HistoryEntry


TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestUtcTimestamp:

    def test_format(self):
        moment = datetime(2026, 3, 4, 5, 6, 7, 891000, tzinfo=timezone.utc)
        assert utc_timestamp(moment) == "2026-03-04T05:06:07.891Z"

    def test_other_zone_converted_to_utc(self):
        moment = datetime(2026, 3, 4, 7, 6, 7, tzinfo=timezone(timedelta(hours=2)))
        assert utc_timestamp(moment) == "2026-03-04T05:06:07.000Z"

    def test_now(self):
        assert TIMESTAMP_RE.match(utc_timestamp())


class TestNewEntryId:

    def test_unique(self):
        assert len({new_entry_id() for _ in range(100)}) == 100

    def test_is_uuid(self):
        uuid.UUID(new_entry_id())


class TestCreateEntry:

    def test_basic(self):
        entry = create_entry("#FF0000", FormatId.OKLCH)
        assert isinstance(entry, HistoryEntry)
        assert entry.source_hex == "#ff0000"
        assert entry.format_at_pick is FormatId.OKLCH
        assert entry.value_at_pick == "oklch(62.8% 0.2577 29.23)"
        assert entry.values == get_all_formats("#ff0000")
        assert TIMESTAMP_RE.match(entry.created_at)

    def test_default_format_is_hex(self):
        entry = create_entry("abc")
        assert entry.format_at_pick is FormatId.HEX
        assert entry.value_at_pick == "#aabbcc"
        assert entry.source_hex == "#aabbcc"

    def test_value_at_pick_matches_values(self):
        for fmt in FormatId:
            entry = create_entry("#3366cc", fmt)
            assert entry.value_at_pick == entry.values[fmt]

    def test_fresh_ids(self):
        assert create_entry("#3366cc").id != create_entry("#3366cc").id

    def test_unparseable_color_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING, logger="swatchkeep.engine.factory"):
            entry = create_entry("not a color", FormatId.RGB)
        assert entry.source_hex == DEFAULT_SOURCE_HEX
        assert entry.value_at_pick == "rgb(0, 0, 0)"
        assert "not a color" in caplog.text

    def test_unknown_format_rejected(self):
        with pytest.raises(ValueError):
            create_entry("#ffffff", "cmyk")


class TestBuildEntry:

    def test_keeps_identity(self):
        entry = build_entry(
            "#00ff00",
            "lab",
            entry_id="legacy-1",
            created_at="1970-01-01T00:00:00.000Z",
        )
        assert entry.id == "legacy-1"
        assert entry.created_at == "1970-01-01T00:00:00.000Z"
        assert entry.format_at_pick is FormatId.LAB
        assert entry.value_at_pick == entry.values.lab
