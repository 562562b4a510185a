from __future__ import annotations
from typing import Iterable, Sequence
import logging

from wingo.analytics.stats import DigitCounts
from wingo.core.records import BIG, SMALL, ModelVote, OutcomeRecord, to_label

logger = logging.getLogger(__name__)

SEQUENCE_LENGTHS = (3, 4, 5, 6, 7, 8)
MIN_OCCURRENCES = 3


class PatternTable:
    """Digit-string -> histogram of the digit that follows it in buffer order."""

    def __init__(self, lengths: Iterable[int] = SEQUENCE_LENGTHS):
        self.lengths = tuple(lengths)
        self.entries: dict[str, DigitCounts] = {}

    def reset(self):
        self.entries = {}

    def rebuild(self, digits: Sequence[int]):
        # full rebuild, stale keys must not survive a retrain
        self.reset()
        for L in self.lengths:
            for i in range(len(digits) - L):
                key = ''.join(str(d) for d in digits[i:i + L])
                self.entries.setdefault(key, DigitCounts()).add(digits[i + L])
        logger.info("patterns trained: %d unique keys", len(self.entries))

    def get(self, key: str) -> DigitCounts | None:
        return self.entries.get(key)

    def __len__(self):
        return len(self.entries)

    def __contains__(self, key: str):
        return key in self.entries


def predict_pattern(records: Sequence[OutcomeRecord], table: PatternTable) -> ModelVote:
    digits = [r.digit for r in records]
    best_conf = 0.0
    best_pred = None
    # ascending L; strict '>' keeps the first qualifying length on a tie
    for L in table.lengths:
        if len(digits) < L + 1:
            continue
        stats = table.get(''.join(str(d) for d in digits[:L]))
        if stats is None or stats.total < MIN_OCCURRENCES:
            continue
        digit, count = stats.majority()
        conf = count / stats.total
        if conf > best_conf:
            best_conf = conf
            best_pred = to_label(digit)
    if best_pred:
        return ModelVote(best_pred, best_conf, 'pattern')

    recent_big = sum(1 for r in records[:10] if r.label == BIG)
    return ModelVote(BIG if recent_big >= 5 else SMALL, 0.52, 'pattern_fallback')
