from __future__ import annotations
from dataclasses import dataclass, field

from wingo.analytics.market import MarketState
from wingo.analytics.markov import MarkovTable
from wingo.analytics.patterns import PatternTable
from wingo.analytics.recurrent import RecurrentModel
from wingo.analytics.trend import TrendWindows
from wingo.config import DEFAULT_WEIGHTS, Settings
from wingo.core.buffer import DataBuffer
from wingo.ensemble.weights import RunStreak, WeightAdapter


@dataclass
class ForecastContext:
    """All mutable forecasting state for one stream.

    The buffer is written only by ingestion, the tables and market state
    only by the trainer, weights and streak only by outcome resolution.
    """
    buffer: DataBuffer = field(default_factory=DataBuffer)
    patterns: PatternTable = field(default_factory=PatternTable)
    markov: MarkovTable = field(default_factory=MarkovTable)
    trend: TrendWindows = field(default_factory=TrendWindows)
    market: MarketState = field(default_factory=MarketState)
    recurrent: RecurrentModel = field(default_factory=RecurrentModel)
    weights: WeightAdapter = field(default_factory=lambda: WeightAdapter(DEFAULT_WEIGHTS))
    streak: RunStreak = field(default_factory=RunStreak)
    market_min_records: int = 30
    market_window: int = 50

    @classmethod
    def from_settings(cls, s: Settings) -> ForecastContext:
        return cls(
            buffer=DataBuffer(s.buffer_capacity),
            patterns=PatternTable(s.sequence_lengths),
            markov=MarkovTable(s.markov_order),
            recurrent=RecurrentModel(s.lstm_input_size, s.lstm_hidden_size, seed=s.lstm_seed),
            weights=WeightAdapter(s.initial_weights),
            market_min_records=s.market_min_records,
            market_window=s.market_window,
        )
