"""
Unit tests for the history manager.
"""

from datetime import datetime

import pytest

import config
from history_manager import HistoryManager, HistoryRecord


def make_record(i, explanation=None):
    return HistoryRecord(expression=f"{i} + 1", result=str(i + 1),
                         created_at=datetime(2026, 1, 1, 12, 0, i % 60),
                         explanation=explanation)


class TestHistoryManager:

    def test_starts_empty(self):
        history = HistoryManager()
        assert len(history) == 0
        assert history.list() == ()

    def test_newest_first(self):
        history = HistoryManager()
        history.append(make_record(1))
        history.append(make_record(2))
        assert [r.expression for r in history.list()] == ["2 + 1", "1 + 1"]

    def test_cap_evicts_oldest(self):
        history = HistoryManager()
        records = [make_record(i) for i in range(config.MAX_HISTORY_ITEMS + 1)]
        for record in records:
            history.append(record)
        listed = history.list()
        assert len(listed) == 50
        assert listed[0] is records[-1]
        assert records[0] not in listed
        assert listed[-1] is records[1]

    def test_no_deduplication(self):
        history = HistoryManager()
        record = make_record(3)
        history.append(record)
        history.append(record)
        assert len(history) == 2

    def test_clear(self):
        history = HistoryManager()
        for i in range(5):
            history.append(make_record(i))
        history.clear()
        assert len(history) == 0
        history.clear()
        assert history.list() == ()

    def test_list_is_a_snapshot(self):
        history = HistoryManager()
        history.append(make_record(1))
        snapshot = history.list()
        history.append(make_record(2))
        assert len(snapshot) == 1
        with pytest.raises(AttributeError):
            snapshot.append(make_record(3))

    def test_records_are_immutable(self):
        record = make_record(1)
        with pytest.raises(AttributeError):
            record.result = "99"

    def test_to_dict(self):
        record = make_record(5, explanation="Five plus one.")
        assert record.to_dict() == {
            'expression': "5 + 1",
            'result': "6",
            'timestamp': "2026-01-01T12:00:05",
            'explanation': "Five plus one.",
        }

    def test_custom_cap(self):
        history = HistoryManager(max_items=2)
        for i in range(4):
            history.append(make_record(i))
        assert [r.result for r in history.list()] == ["4", "3"]
