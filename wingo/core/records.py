from __future__ import annotations
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone

BIG = 'BIG'
SMALL = 'SMALL'


def to_label(digit: int) -> str:
    return BIG if digit >= 5 else SMALL


def to_bit(digit: int) -> int:
    return 1 if digit >= 5 else 0


def flip(label: str) -> str:
    return SMALL if label == BIG else BIG


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OutcomeRecord:
    """One resolved draw. `period_id` is the uniqueness key."""
    period_id: str
    digit: int
    label: str
    bit: int
    observed_at: datetime = field(default_factory=utcnow)

    @classmethod
    def from_digit(cls, period_id: str, digit: int, observed_at: datetime | None = None) -> OutcomeRecord:
        return cls(
            period_id=str(period_id),
            digit=digit,
            label=to_label(digit),
            bit=to_bit(digit),
            observed_at=observed_at or utcnow(),
        )


@dataclass(frozen=True)
class ModelVote:
    prediction: str
    confidence: float
    source: str

    def to_dict(self) -> dict:
        return asdict(self)
