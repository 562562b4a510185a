from typing import Sequence
import math

from wingo.analytics.market import MarketState
from wingo.core.records import BIG, SMALL, ModelVote, OutcomeRecord


def predict_quantum(records: Sequence[OutcomeRecord], market: MarketState) -> ModelVote:
    """Entropy-damped frequency signal.

    The BIG frequency is written as an amplitude, then mixed with a flat 0.5
    prior using decoherence = 1 - entropy: a near-random market pulls the
    estimate back to a coin flip. Heuristic, kept as is for compatibility.
    """
    p_big = sum(r.bit for r in records) / len(records) if records else 0.5
    amp_big = math.sqrt(p_big)
    decoherence = 1 - market.entropy
    observed = (amp_big * amp_big) * decoherence + 0.5 * (1 - decoherence)
    conf = abs(observed - 0.5) * 2 + 0.05
    return ModelVote(BIG if observed >= 0.5 else SMALL, min(conf, 0.80), 'quantum')
