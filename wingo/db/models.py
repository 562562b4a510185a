from datetime import datetime, timezone
from sqlmodel import SQLModel, Field
import uuid


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Prediction(SQLModel, table=True):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    period: str = Field(index=True)
    prediction: str  # 'BIG' | 'SMALL'
    confidence: int
    tier: str
    recommendation: str
    agreement: int
    market_condition: str
    recovery_mode: str = "NORMAL"
    reasoning: str = ""
    status: str = Field(default="Pending", index=True)  # Pending | Win | Loss | Skipped
    actual: str | None = None
    actual_number: int | None = None
    created_at: datetime = Field(default_factory=_now, index=True)
    updated_at: datetime = Field(default_factory=_now)


class ModelWeight(SQLModel, table=True):
    model_name: str = Field(primary_key=True)
    weight: float
    wins: int = 0
    total: int = 0
    recent_accuracy: float = 0.5
    last_updated: datetime = Field(default_factory=_now)


class SystemStats(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    total_predictions: int = 0
    total_wins: int = 0
    total_losses: int = 0
    consecutive_wins: int = 0
    consecutive_losses: int = 0
    last_updated: datetime = Field(default_factory=_now)
