from __future__ import annotations
from typing import Sequence
import logging
import numpy as np

from wingo.core.records import BIG, SMALL, ModelVote, OutcomeRecord

logger = logging.getLogger(__name__)

GATES = ('i', 'f', 'o', 'c')


def sigmoid(x):
    return 1.0 / (1.0 + np.exp(-np.clip(x, -700, 700)))


class RecurrentCell:
    """LSTM-style cell with random, never-trained weights.

    Only the hidden and cell vectors evolve; they carry over between calls,
    so the output depends on every window seen so far. Treat it as a
    bounded pseudo-recurrent signal generator rather than a fitted model.
    """

    def __init__(self, input_size: int, hidden_size: int, rng: np.random.Generator | None = None,
                 scale: float = 0.1):
        rng = rng or np.random.default_rng()
        self.input_size = input_size
        self.hidden_size = hidden_size
        self.W = {g: rng.uniform(-scale, scale, (hidden_size, input_size)) for g in GATES}
        self.U = {g: rng.uniform(-scale, scale, (hidden_size, hidden_size)) for g in GATES}
        self.b = {g: np.zeros(hidden_size) for g in GATES}
        self.hidden = np.zeros(hidden_size)
        self.cell = np.zeros(hidden_size)

    def _affine(self, g: str, x: np.ndarray) -> np.ndarray:
        return self.W[g] @ x + self.U[g] @ self.hidden + self.b[g]

    def step(self, x: Sequence[float]) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        i = sigmoid(self._affine('i', x))
        f = sigmoid(self._affine('f', x))
        c_hat = np.tanh(self._affine('c', x))
        o = sigmoid(self._affine('o', x))
        cell = f * self.cell + i * c_hat
        self.hidden = o * np.tanh(cell)
        self.cell = cell
        return self.hidden


class RecurrentModel:
    def __init__(self, input_size: int = 20, hidden_size: int = 15, seed: int | None = None):
        self.input_size = input_size
        self.hidden_size = hidden_size
        self.seed = seed
        self.cell: RecurrentCell | None = None

    def predict(self, records: Sequence[OutcomeRecord]) -> ModelVote:
        if len(records) < self.input_size:
            return ModelVote(BIG, 0.50, 'lstm_insufficient')
        if self.cell is None:
            # first call only allocates the cell
            self.cell = RecurrentCell(self.input_size, self.hidden_size, np.random.default_rng(self.seed))
            logger.info("recurrent cell created (%dx%d)", self.hidden_size, self.input_size)
            return ModelVote(BIG, 0.50, 'lstm_uninitialized')

        hidden = self.cell.step([r.bit for r in records[:self.input_size]])
        out = float(sigmoid(hidden.mean()))
        conf = abs(out - 0.5) * 2
        return ModelVote(BIG if out >= 0.5 else SMALL, min(conf + 0.10, 0.80), 'lstm')
