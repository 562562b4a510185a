from __future__ import annotations
from dataclasses import dataclass, field
from typing import Sequence
import logging

from wingo.analytics.stats import ratio_of_ones
from wingo.core.records import BIG, SMALL, ModelVote

logger = logging.getLogger(__name__)

SHORT, MEDIUM, LONG = 10, 30, 60
REVERSAL_GAP = 0.3


@dataclass
class TrendWindows:
    short: list[int] = field(default_factory=list)
    medium: list[int] = field(default_factory=list)
    long: list[int] = field(default_factory=list)

    @classmethod
    def from_bits(cls, bits: Sequence[int]) -> TrendWindows:
        bits = list(bits)
        return cls(bits[:SHORT], bits[:MEDIUM], bits[:LONG])


def predict_trend(windows: TrendWindows) -> ModelVote:
    s = ratio_of_ones(windows.short)
    m = ratio_of_ones(windows.medium)
    l = ratio_of_ones(windows.long)
    deviation = abs(s - m)
    if deviation > REVERSAL_GAP:
        # short-term run away from the medium mean: bet on reversal
        label = SMALL if s > m else BIG
        conf = min(deviation + 0.20, 0.75)
    else:
        blend = s * 0.5 + m * 0.3 + l * 0.2
        label = BIG if blend >= 0.5 else SMALL
        conf = abs(blend - 0.5) * 2 + 0.05
    return ModelVote(label, max(0.52, min(conf, 0.78)), 'trend')
