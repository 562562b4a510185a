from __future__ import annotations
from typing import Iterable, Iterator
from wingo.core.records import OutcomeRecord


class DataBuffer:
    """Newest-first window of outcome records, unique by period id.

    `ingest` inserts each unseen record at the head in the order given, so
    callers pass a batch oldest-first. Overflow drops records from the tail.
    """

    def __init__(self, capacity: int = 200):
        self.capacity = capacity
        self._records: list[OutcomeRecord] = []
        self._periods: set[str] = set()

    def ingest(self, records: Iterable[OutcomeRecord]) -> int:
        added = 0
        for rec in records:
            if rec.period_id in self._periods:
                continue
            self._records.insert(0, rec)
            self._periods.add(rec.period_id)
            added += 1
        if len(self._records) > self.capacity:
            for old in self._records[self.capacity:]:
                self._periods.discard(old.period_id)
            del self._records[self.capacity:]
        return added

    def clear(self):
        self._records.clear()
        self._periods.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[OutcomeRecord]:
        return iter(self._records)

    def __contains__(self, period_id: str) -> bool:
        return period_id in self._periods

    def get(self, period_id: str) -> OutcomeRecord | None:
        if period_id not in self._periods:
            return None
        return next(r for r in self._records if r.period_id == period_id)

    @property
    def latest(self) -> OutcomeRecord | None:
        return self._records[0] if self._records else None

    @property
    def period_ids(self) -> list[str]:
        return [r.period_id for r in self._records]

    def head(self, n: int) -> list[OutcomeRecord]:
        return self._records[:n]

    def records(self) -> list[OutcomeRecord]:
        return list(self._records)

    def digits(self) -> list[int]:
        return [r.digit for r in self._records]

    def bits(self) -> list[int]:
        return [r.bit for r in self._records]
