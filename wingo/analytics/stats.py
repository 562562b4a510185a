from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence
import math
import numpy as np

EPS = 0.001


@dataclass
class DigitCounts:
    """Next-digit histogram for one context key."""
    counts: list[int] = field(default_factory=lambda: [0] * 10)
    total: int = 0

    def add(self, digit: int):
        self.counts[digit] += 1
        self.total += 1

    def majority(self) -> tuple[int, int]:
        # lowest digit wins a tie
        best = max(self.counts)
        return self.counts.index(best), best

    def confidence(self) -> float:
        if self.total == 0:
            return 0.0
        return self.majority()[1] / self.total


def mean_std(values: Sequence[float]) -> tuple[float, float]:
    if len(values) == 0:
        return 0.0, 0.0
    arr = np.asarray(values, dtype=float)
    # population std
    return float(arr.mean()), float(arr.std())


def shannon_entropy(values: Sequence) -> float:
    n = len(values)
    if n == 0:
        return 0.0
    H = 0.0
    for c in Counter(values).values():
        p = c / n
        H -= p * math.log2(p)
    return H


def ratio_of_ones(bits: Sequence[int]) -> float:
    return sum(bits) / (len(bits) or 1)


@dataclass
class RunsTest:
    runs: int
    expected: float
    z_score: float


def runs_test(bits: Sequence[int]) -> RunsTest:
    """Wald-Wolfowitz style runs count on a 0/1 sequence.

    The variance term is `2·n0·n1·(2·n0·n1 − n) / (n²·(n − 1))`, which uses
    n where the textbook formula has n0 + n1 (identical for binary input).
    """
    n = len(bits)
    if n < 10:
        return RunsTest(0, 0.0, 0.0)
    runs = 1
    for i in range(1, n):
        if bits[i] != bits[i - 1]:
            runs += 1
    n1 = sum(1 for b in bits if b == 1)
    n0 = n - n1
    expected = (2 * n0 * n1) / n + 1
    variance = (2 * n0 * n1 * (2 * n0 * n1 - n)) / (n ** 2 * (n - 1))
    z = (runs - expected) / math.sqrt(variance) if variance > 0 else 0.0
    return RunsTest(runs, expected, z)


def spectral_bias(values: Sequence[int]) -> float:
    """Share of consecutive differences with magnitude >= 3."""
    diffs = [values[i + 1] - values[i] for i in range(len(values) - 1)]
    high = sum(1 for d in diffs if abs(d) >= 3)
    return high / (len(diffs) or 1)


@dataclass
class RandomnessReport:
    entropy: float
    runs_z: float
    spectral_bias: float
    is_exploitable: bool
    quality: float


def assess_randomness(bits: Sequence[int], digits: Sequence[int]) -> RandomnessReport:
    H = shannon_entropy(bits)
    rt = runs_test(bits)
    return RandomnessReport(
        entropy=H,
        runs_z=rt.z_score,
        spectral_bias=spectral_bias(digits),
        is_exploitable=H < 0.92 and abs(rt.z_score) > 1.96,
        # binary alphabet: max entropy is log2(2) == 1
        quality=1 - H / math.log2(2),
    )
