from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence
import logging

from wingo.analytics.stats import EPS, assess_randomness, mean_std
from wingo.core.records import OutcomeRecord, utcnow

logger = logging.getLogger(__name__)

NEUTRAL = 'NEUTRAL'


@dataclass(frozen=True)
class MarketState:
    volatility: float = 0.0
    bias: float = 0.5
    entropy: float = 0.0
    recent_trend: str = NEUTRAL
    confidence: float = 0.5
    randomness_quality: float = 1.0
    is_exploitable: bool = False
    runs_z: float = 0.0
    spectral_bias: float = 0.0
    last_update: datetime | None = None


def classify_trend(recent_bits: Sequence[int]) -> str:
    big = sum(recent_bits)
    if big >= 7:
        return 'STRONG_BIG'
    if big >= 6:
        return 'BIAS_BIG'
    if big <= 3:
        return 'STRONG_SMALL'
    if big <= 4:
        return 'BIAS_SMALL'
    return NEUTRAL


def analyze_market_state(records: Sequence[OutcomeRecord], previous: MarketState,
                         min_records: int = 30, window: int = 50) -> MarketState:
    """Regime descriptor over the newest `window` records.

    Below `min_records` the entropy and runs figures are too noisy, so
    `previous` is returned as is.
    """
    if len(records) < min_records:
        return previous
    recent = records[:min(window, len(records))]
    bits = [r.bit for r in recent]
    digits = [r.digit for r in recent]

    mean, std = mean_std(digits)
    bias = sum(bits) / len(bits)
    rnd = assess_randomness(bits, digits)
    confidence = 1 - abs(bias - 0.5) * 2

    state = MarketState(
        volatility=std / (mean + EPS),
        bias=bias,
        entropy=rnd.entropy,
        recent_trend=classify_trend(bits[:10]),
        confidence=max(0.3, min(0.9, confidence)),
        randomness_quality=rnd.quality,
        is_exploitable=rnd.is_exploitable,
        runs_z=rnd.runs_z,
        spectral_bias=rnd.spectral_bias,
        last_update=utcnow(),
    )
    logger.debug("market state: trend=%s entropy=%.3f runs_z=%.2f exploitable=%s",
                 state.recent_trend, state.entropy, state.runs_z, state.is_exploitable)
    return state
