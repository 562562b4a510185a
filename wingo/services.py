from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional
import logging
import threading
import uuid

from sqlmodel import Session

from wingo.config import Settings, settings as default_settings
from wingo.core.context import ForecastContext
from wingo.core.errors import NotReadyError
from wingo.core.records import OutcomeRecord, utcnow
from wingo.db import crud
from wingo.ensemble.aggregator import EnsembleAggregator, EnsembleDecision
from wingo.ensemble.trainer import Trainer
from wingo.feed import DrawFeed, next_period

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 200


@dataclass
class TrackedPrediction:
    period: str
    decision: EnsembleDecision
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: str = 'Pending'
    actual: str | None = None
    actual_number: int | None = None
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        d = self.decision.to_dict()
        d.update({
            'id': self.id,
            'period': self.period,
            'status': self.status,
            'actual': self.actual,
            'actual_number': self.actual_number,
            'created_at': self.created_at.isoformat(),
        })
        return d


class PredictionService:
    """Drives one stream: fetch -> ingest -> train -> predict -> resolve."""

    def __init__(self, settings: Settings = default_settings, feed: DrawFeed | None = None,
                 context: ForecastContext | None = None):
        self.settings = settings
        self.ctx = context or ForecastContext.from_settings(settings)
        self.trainer = Trainer(self.ctx)
        self.aggregator = EnsembleAggregator(self.ctx)
        self.feed = feed or DrawFeed()
        self.predictions: list[TrackedPrediction] = []  # newest first
        self.seen_periods: set[str] = set()
        self.total_predictions = 0
        self.total_wins = 0
        self.total_losses = 0
        self.predictions_since_update = 0
        self._lock = threading.RLock()

    # ---------------- state ----------------
    def restore(self, session: Session):
        weights, perf = crud.load_weights(session)
        if weights:
            self.ctx.weights.load(weights, perf)
        row = crud.get_stats(session)
        self.total_predictions = row.total_predictions
        self.total_wins = row.total_wins
        self.total_losses = row.total_losses
        self.ctx.streak.consecutive_wins = row.consecutive_wins
        self.ctx.streak.consecutive_losses = row.consecutive_losses
        logger.info("restored state: %d predictions, %d wins, %d losses",
                    self.total_predictions, self.total_wins, self.total_losses)

    def _persist(self, session: Session):
        crud.save_weights(session, self.ctx.weights.weights, self.ctx.weights.performance)
        crud.save_stats(
            session,
            total_predictions=self.total_predictions,
            total_wins=self.total_wins,
            total_losses=self.total_losses,
            consecutive_wins=self.ctx.streak.consecutive_wins,
            consecutive_losses=self.ctx.streak.consecutive_losses,
        )

    # ---------------- ingestion ----------------
    def ingest(self, records: Iterable[OutcomeRecord]) -> int:
        with self._lock:
            added = self.ctx.buffer.ingest(records)
            if added:
                logger.info("buffer: %d new records (%d total)", added, len(self.ctx.buffer))
                self.trainer.run()
            return added

    def refresh(self, session: Optional[Session] = None) -> int:
        latest = self.feed.fetch_latest()
        if not latest:
            return 0
        with self._lock:
            added = self.ingest(latest)
            self.resolve(session)
            self.sync_periods(latest, session)
            return added

    def sync_periods(self, latest: list[OutcomeRecord], session: Optional[Session] = None) -> bool:
        """Drop pending predictions if the feed moved past the predicted period.

        `latest` is oldest-first. Returns True when a desync was handled.
        """
        if not latest or not self.predictions:
            return False
        last = self.predictions[0]
        if last.status != 'Pending':
            return False
        try:
            expected = next_period(latest[-1].period_id)
        except ValueError:
            logger.warning("cannot derive next period from %r", latest[-1].period_id)
            return False
        if last.period == expected:
            return False

        logger.warning("period mismatch: expected %s, last predicted %s", expected, last.period)
        with self._lock:
            for p in self.predictions:
                if p.status == 'Pending':
                    p.status = 'Skipped'
            self.predictions = [p for p in self.predictions if p.status != 'Skipped']
            self.seen_periods.clear()
            if session is not None:
                crud.skip_pending(session)
        return True

    # ---------------- prediction ----------------
    def predict(self, session: Optional[Session] = None) -> TrackedPrediction:
        with self._lock:
            buf = self.ctx.buffer
            if len(buf) < self.settings.min_data_for_prediction:
                raise NotReadyError(f"need {self.settings.min_data_for_prediction} records, have {len(buf)}")
            period = next_period(buf.latest.period_id)
            if period in self.seen_periods:
                existing = next((p for p in self.predictions if p.period == period), None)
                if existing is not None:
                    return existing

            tracked = TrackedPrediction(period=period, decision=self.aggregator.predict())
            if session is not None:
                row = crud.save_prediction(session, period, tracked.decision)
                tracked.id = row.id
            self.predictions.insert(0, tracked)
            del self.predictions[HISTORY_LIMIT:]
            self.seen_periods.add(period)
            self.total_predictions += 1
            return tracked

    # ---------------- learning ----------------
    def resolve(self, session: Optional[Session] = None) -> list[TrackedPrediction]:
        resolved = []
        with self._lock:
            for p in reversed(self.predictions):
                if p.status != 'Pending':
                    continue
                rec = self.ctx.buffer.get(p.period)
                if rec is None:
                    continue
                won = p.decision.prediction == rec.label
                p.status = 'Win' if won else 'Loss'
                p.actual = rec.label
                p.actual_number = rec.digit
                if won:
                    self.total_wins += 1
                else:
                    self.total_losses += 1
                self.ctx.streak.record(won)
                for name, vote in p.decision.model_outputs.items():
                    self.ctx.weights.update(name, vote.prediction == rec.label)
                self.predictions_since_update += 1
                if session is not None:
                    crud.resolve_prediction(session, p.id, rec.label, rec.digit)
                logger.info("period %s resolved: %s (predicted %s, actual %s/%d)",
                            p.period, p.status, p.decision.prediction, rec.label, rec.digit)
                resolved.append(p)

            if resolved and session is not None:
                self._persist(session)
            if self.predictions_since_update >= self.settings.model_update_after:
                self.predictions_since_update = 0
                self.trainer.run()
        return resolved

    def learning_cycle(self, session: Optional[Session] = None) -> int:
        added = self.refresh(session)
        if not added:
            self.trainer.run()
        return added

    def train(self) -> bool:
        return self.trainer.run()

    # ---------------- read models ----------------
    def stats(self) -> dict:
        resolved = self.total_wins + self.total_losses
        m = self.ctx.market
        return {
            'total_predictions': self.total_predictions,
            'wins': self.total_wins,
            'losses': self.total_losses,
            'winrate': self.total_wins / resolved if resolved else 0.0,
            'consecutive_wins': self.ctx.streak.consecutive_wins,
            'consecutive_losses': self.ctx.streak.consecutive_losses,
            'buffer_size': len(self.ctx.buffer),
            'is_training': self.trainer.is_training,
            'market': {
                'volatility': m.volatility,
                'bias': m.bias,
                'entropy': m.entropy,
                'recent_trend': m.recent_trend,
                'confidence': m.confidence,
                'randomness_quality': m.randomness_quality,
                'is_exploitable': m.is_exploitable,
                'runs_z': m.runs_z,
                'spectral_bias': m.spectral_bias,
                'last_update': m.last_update.isoformat() if m.last_update else None,
            },
        }

    def weights(self) -> dict:
        w = self.ctx.weights
        return {
            name: {
                'weight': w.weights[name],
                'wins': p.wins,
                'total': p.total,
                'recent_accuracy': p.recent_accuracy,
            }
            for name, p in w.performance.items()
        }

    def history(self, limit: int = 50) -> list[dict]:
        return [p.to_dict() for p in self.predictions[:limit]]
