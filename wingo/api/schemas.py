from pydantic import BaseModel
from typing import Optional


class ModelOutputOut(BaseModel):
    prediction: str
    confidence: float
    source: str


class PredictOut(BaseModel):
    id: str
    period: str
    prediction: str
    confidence: int
    tier: str
    recommendation: str
    agreement: int
    market_condition: str
    recovery_mode: str
    model_outputs: dict[str, ModelOutputOut]
    weights: dict[str, float]
    reasoning: str
    status: str
    actual: Optional[str] = None
    actual_number: Optional[int] = None
    created_at: str


class MarketOut(BaseModel):
    volatility: float
    bias: float
    entropy: float
    recent_trend: str
    confidence: float
    randomness_quality: float
    is_exploitable: bool
    runs_z: float
    spectral_bias: float
    last_update: Optional[str]


class StatsOut(BaseModel):
    total_predictions: int
    wins: int
    losses: int
    winrate: float
    consecutive_wins: int
    consecutive_losses: int
    buffer_size: int
    is_training: bool
    market: MarketOut


class WeightOut(BaseModel):
    weight: float
    wins: int
    total: int
    recent_accuracy: float


class HistoryOut(BaseModel):
    items: list[PredictOut]


class TrainOut(BaseModel):
    trained: bool


class RefreshOut(BaseModel):
    added: int
    buffer_size: int
