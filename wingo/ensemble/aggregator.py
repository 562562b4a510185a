from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Sequence
import logging
import math

from wingo.analytics.frequency import predict_frequency
from wingo.analytics.market import MarketState
from wingo.analytics.markov import predict_markov
from wingo.analytics.patterns import predict_pattern
from wingo.analytics.quantum import predict_quantum
from wingo.analytics.trend import predict_trend
from wingo.core.context import ForecastContext
from wingo.core.errors import EmptyBufferError
from wingo.core.records import BIG, SMALL, ModelVote, OutcomeRecord, flip
from wingo.ensemble.weights import FALLBACK_WEIGHT, RunStreak

logger = logging.getLogger(__name__)

Predictor = Callable[[ForecastContext, Sequence[OutcomeRecord]], ModelVote]

NORMAL = 'NORMAL'
MARTINGALE_SAFE = 'MARTINGALE_SAFE'
CAUTION = 'CAUTION'
ANTI_TREND = 'ANTI_TREND'

# (tier, min confidence %, min agreement, recommendation), checked top-down
TIERS = (
    ('ULTRA_HIGH', 78, 0.8, '💎💎 MAX CONFIDENCE'),
    ('HIGH', 70, 0.7, '🎯 HIGH CONFIDENCE'),
    ('MEDIUM', 63, 0.6, '✅ MEDIUM CONFIDENCE'),
    ('LOW', 55, 0.0, '⚠️ LOW CONFIDENCE'),
)
VERY_LOW = ('VERY_LOW', '🔴 VERY LOW - PROCEED WITH CAUTION')

DEFAULT_REASON = "Default prediction based on ensemble"


def _percent(x: float) -> int:
    return int(math.floor(x * 100 + 0.5))


@dataclass(frozen=True)
class EnsembleDecision:
    prediction: str
    confidence: float
    tier: str
    recommendation: str
    agreement: float
    market_condition: str
    model_outputs: dict[str, ModelVote]
    weights: dict[str, float]
    reasoning: tuple[str, ...]
    raw_prediction: str = BIG
    recovery_mode: str = NORMAL

    @property
    def confidence_percent(self) -> int:
        return _percent(self.confidence)

    @property
    def agreement_percent(self) -> int:
        return _percent(self.agreement)

    @property
    def reasoning_text(self) -> str:
        return '; '.join(self.reasoning) + '.'

    def to_dict(self) -> dict:
        return {
            'prediction': self.prediction,
            'confidence': self.confidence_percent,
            'tier': self.tier,
            'recommendation': self.recommendation,
            'agreement': self.agreement_percent,
            'market_condition': self.market_condition,
            'recovery_mode': self.recovery_mode,
            'model_outputs': {k: v.to_dict() for k, v in self.model_outputs.items()},
            'weights': dict(self.weights),
            'reasoning': self.reasoning_text,
        }


def recovery_mode(streak: RunStreak, market: MarketState) -> str:
    losses = streak.consecutive_losses
    if losses >= 3 and market.volatility < 0.5:
        return MARTINGALE_SAFE
    if losses >= 2 and not market.is_exploitable:
        return CAUTION
    if losses >= 2 and 'STRONG' in market.recent_trend:
        return ANTI_TREND
    return NORMAL


def apply_recovery_mode(label: str, mode: str) -> str:
    return flip(label) if mode == ANTI_TREND else label


def classify_tier(confidence_pct: float, agreement: float) -> tuple[str, str]:
    for tier, min_conf, min_agree, text in TIERS:
        if confidence_pct >= min_conf and agreement >= min_agree:
            return tier, text
    return VERY_LOW


def shape_confidence(raw: float, agreement: float, market: MarketState, streak: RunStreak) -> float:
    conf = raw
    if agreement >= 0.8:
        conf += 0.08
    elif agreement >= 0.6:
        conf += 0.04
    if not market.is_exploitable:
        conf *= 0.85
    if market.volatility > 0.6:
        conf *= 0.90
    if streak.consecutive_wins >= 5:
        conf += 0.05
    if streak.consecutive_losses >= 1:
        conf -= 0.05
    return max(0.50, min(0.92, conf))


def default_predictors() -> list[tuple[str, Predictor]]:
    return [
        ('pattern', lambda ctx, recs: predict_pattern(recs, ctx.patterns)),
        ('markov', lambda ctx, recs: predict_markov(recs, ctx.markov)),
        ('frequency', lambda ctx, recs: predict_frequency(recs)),
        ('neural', lambda ctx, recs: ctx.recurrent.predict(recs)),
        ('trend', lambda ctx, recs: predict_trend(ctx.trend)),
        ('quantum', lambda ctx, recs: predict_quantum(recs, ctx.market)),
    ]


class EnsembleAggregator:
    def __init__(self, context: ForecastContext, predictors: list[tuple[str, Predictor]] | None = None):
        self.ctx = context
        self.models = predictors if predictors is not None else default_predictors()

    def votes(self, records: Sequence[OutcomeRecord]) -> dict[str, ModelVote]:
        return {name: fn(self.ctx, records) for name, fn in self.models}

    def predict(self) -> EnsembleDecision:
        ctx = self.ctx
        records = ctx.buffer.records()
        if not records:
            raise EmptyBufferError("no outcome records ingested yet")

        outputs = self.votes(records)
        weights = ctx.weights.snapshot()
        big_score = small_score = 0.0
        for name, vote in outputs.items():
            score = (vote.confidence or 0.5) * weights.get(name, FALLBACK_WEIGHT)
            if vote.prediction == BIG:
                big_score += score
            else:
                small_score += score
        total = big_score + small_score
        raw_label = BIG if big_score > small_score else SMALL
        raw_conf = max(big_score, small_score) / total if total > 0 else 0.5

        big_votes = sum(1 for v in outputs.values() if v.prediction == BIG)
        agreement = max(big_votes, len(outputs) - big_votes) / len(outputs) if outputs else 0.5

        market, streak = ctx.market, ctx.streak
        conf = shape_confidence(raw_conf, agreement, market, streak)
        mode = recovery_mode(streak, market)
        tier, recommendation = classify_tier(conf * 100, agreement)

        reasons = []
        if market.is_exploitable:
            reasons.append("Exploitable randomness detected")
        if agreement >= 0.7:
            reasons.append("Strong model consensus")
        if streak.consecutive_wins >= 5:
            reasons.append("High-win streak active")
        if mode != NORMAL:
            reasons.append(f"Recovery mode: {mode}")
        if not reasons:
            reasons.append(DEFAULT_REASON)

        decision = EnsembleDecision(
            prediction=apply_recovery_mode(raw_label, mode),
            confidence=conf,
            tier=tier,
            recommendation=recommendation,
            agreement=agreement,
            market_condition=market.recent_trend,
            model_outputs=outputs,
            weights=weights,
            reasoning=tuple(reasons),
            raw_prediction=raw_label,
            recovery_mode=mode,
        )
        logger.info("ensemble: %s %d%% tier=%s agreement=%d%% mode=%s",
                    decision.prediction, decision.confidence_percent, tier, decision.agreement_percent, mode)
        return decision
