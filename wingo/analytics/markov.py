from __future__ import annotations
from typing import Sequence
import logging

from wingo.analytics.stats import DigitCounts
from wingo.core.records import ModelVote, OutcomeRecord, flip, to_label

logger = logging.getLogger(__name__)

MIN_TRANSITIONS = 2


def state_key(digits: Sequence[int]) -> str:
    return '-'.join(str(d) for d in digits)


class MarkovTable:
    """Digit-level Markov chains of order 1..K sharing one table."""

    def __init__(self, order: int = 3):
        self.K = order
        self.C: dict[str, DigitCounts] = {}

    def reset(self):
        self.C = {}

    def push(self, state: Sequence[int], nxt: int):
        self.C.setdefault(state_key(state), DigitCounts()).add(nxt)

    def build_from(self, digits: Sequence[int]):
        self.reset()
        for k in range(1, self.K + 1):
            for i in range(len(digits) - k):
                self.push(digits[i:i + k], digits[i + k])
        logger.info("markov chains trained: %d states (order=%d)", len(self.C), self.K)

    def get(self, key: str) -> DigitCounts | None:
        return self.C.get(key)

    def __len__(self):
        return len(self.C)

    def __contains__(self, key: str):
        return key in self.C


def predict_markov(records: Sequence[OutcomeRecord], table: MarkovTable) -> ModelVote:
    digits = [r.digit for r in records]
    for order in range(table.K, 0, -1):
        if len(digits) < order + 1:
            continue
        stats = table.get(state_key(digits[:order]))
        if stats is None or stats.total < MIN_TRANSITIONS:
            continue
        digit, count = stats.majority()
        return ModelVote(to_label(digit), count / stats.total, f'markov_order{order}')
    # anti-persistence guess, not a learned signal
    return ModelVote(flip(records[0].label), 0.51, 'markov_fallback')
