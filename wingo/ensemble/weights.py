from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping
import logging

logger = logging.getLogger(__name__)

ACCURACY_DECAY = 0.9
WEIGHT_INERTIA = 0.7
FALLBACK_WEIGHT = 0.15


@dataclass
class ModelPerformance:
    wins: int = 0
    total: int = 0
    recent_accuracy: float = 0.5


@dataclass
class RunStreak:
    consecutive_wins: int = 0
    consecutive_losses: int = 0

    def record(self, won: bool):
        if won:
            self.consecutive_wins += 1
            self.consecutive_losses = 0
        else:
            self.consecutive_losses += 1
            self.consecutive_wins = 0


class WeightAdapter:
    """Online re-weighting of ensemble members from resolved outcomes.

    Each model keeps an exponentially-weighted accuracy. After every update
    the live weight moves 30% of the way toward that model's share of the
    summed accuracies, then the whole vector is renormalised.
    """

    def __init__(self, initial_weights: Mapping[str, float]):
        self.weights: dict[str, float] = dict(initial_weights)
        self.performance: dict[str, ModelPerformance] = {name: ModelPerformance() for name in self.weights}

    def update(self, model_name: str, was_correct: bool) -> bool:
        perf = self.performance.get(model_name)
        if perf is None:
            return False
        perf.total += 1
        if was_correct:
            perf.wins += 1
        perf.recent_accuracy = perf.recent_accuracy * ACCURACY_DECAY + (1.0 if was_correct else 0.0) * (1 - ACCURACY_DECAY)

        total_acc = sum(p.recent_accuracy for p in self.performance.values())
        n = len(self.performance)
        for name, p in self.performance.items():
            target = p.recent_accuracy / total_acc if total_acc > 0 else 1.0 / n
            self.weights[name] = self.weights.get(name, FALLBACK_WEIGHT) * WEIGHT_INERTIA + target * (1 - WEIGHT_INERTIA)
        self._renormalize()
        logger.info("model weights updated - %s: %.1f%%", model_name, self.weights[model_name] * 100)
        return True

    def _renormalize(self):
        total = sum(self.weights.values())
        for name in self.weights:
            self.weights[name] = self.weights[name] / total if total > 0 else FALLBACK_WEIGHT

    def load(self, weights: Mapping[str, float], performance: Mapping[str, ModelPerformance]):
        for name, w in weights.items():
            if name in self.weights:
                self.weights[name] = w
        for name, p in performance.items():
            if name in self.performance:
                self.performance[name] = p

    def snapshot(self) -> dict[str, float]:
        return dict(self.weights)
