"""
History Manager for SmartCalc
Keeps the session's finished calculations, newest first
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import config


@dataclass(frozen=True)
class HistoryRecord:
    expression: str
    result: str
    created_at: datetime
    explanation: Optional[str] = None

    def to_dict(self):
        return {
            'expression': self.expression,
            'result': self.result,
            'timestamp': self.created_at.isoformat(timespec="seconds"),
            'explanation': self.explanation,
        }


class HistoryManager:
    def __init__(self, max_items=config.MAX_HISTORY_ITEMS):
        self.max_items = max_items
        self._records = []

    def __len__(self):
        return len(self._records)

    def append(self, record):
        """Add a record to the front, evicting the oldest beyond the cap"""
        self._records.insert(0, record)
        del self._records[self.max_items:]

    def clear(self):
        """Clear all calculation history"""
        self._records.clear()

    def list(self):
        """Snapshot of the history, most recent first"""
        return tuple(self._records)
