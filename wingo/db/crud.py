from typing import Mapping, Optional
from sqlmodel import Session, select
from wingo.db.models import Prediction, ModelWeight, SystemStats, _now
from wingo.ensemble.aggregator import EnsembleDecision
from wingo.ensemble.weights import ModelPerformance


# Prediction helpers

def save_prediction(session: Session, period: str, d: EnsembleDecision) -> Prediction:
    pred = Prediction(
        period=period,
        prediction=d.prediction,
        confidence=d.confidence_percent,
        tier=d.tier,
        recommendation=d.recommendation,
        agreement=d.agreement_percent,
        market_condition=d.market_condition,
        recovery_mode=d.recovery_mode,
        reasoning=d.reasoning_text,
    )
    session.add(pred)
    session.commit()
    session.refresh(pred)
    return pred


def get_prediction(session: Session, pred_id: str) -> Optional[Prediction]:
    return session.get(Prediction, pred_id)


def resolve_prediction(session: Session, pred_id: str, actual: str, actual_number: int) -> Optional[Prediction]:
    pred = session.get(Prediction, pred_id)
    if pred is None:
        return None
    pred.actual = actual
    pred.actual_number = actual_number
    pred.status = 'Win' if pred.prediction == actual else 'Loss'
    pred.updated_at = _now()
    session.add(pred)
    session.commit()
    session.refresh(pred)
    return pred


def skip_pending(session: Session) -> int:
    rows = session.exec(select(Prediction).where(Prediction.status == 'Pending')).all()
    for row in rows:
        row.status = 'Skipped'
        row.updated_at = _now()
        session.add(row)
    session.commit()
    return len(rows)


def history(session: Session, limit: int = 50) -> list[Prediction]:
    return session.exec(select(Prediction).order_by(Prediction.created_at.desc()).limit(limit)).all()


# Learning state

def save_weights(session: Session, weights: Mapping[str, float], performance: Mapping[str, ModelPerformance]):
    for name, w in weights.items():
        perf = performance.get(name) or ModelPerformance()
        row = session.get(ModelWeight, name) or ModelWeight(model_name=name, weight=w)
        row.weight = w
        row.wins = perf.wins
        row.total = perf.total
        row.recent_accuracy = perf.recent_accuracy
        row.last_updated = _now()
        session.add(row)
    session.commit()


def load_weights(session: Session) -> tuple[dict[str, float], dict[str, ModelPerformance]]:
    rows = session.exec(select(ModelWeight)).all()
    weights = {r.model_name: r.weight for r in rows}
    perf = {r.model_name: ModelPerformance(r.wins, r.total, r.recent_accuracy) for r in rows}
    return weights, perf


def get_stats(session: Session) -> SystemStats:
    row = session.exec(select(SystemStats).limit(1)).first()
    return row or SystemStats()


def save_stats(session: Session, **fields) -> SystemStats:
    row = get_stats(session)
    for k, v in fields.items():
        setattr(row, k, v)
    row.last_updated = _now()
    session.add(row)
    session.commit()
    session.refresh(row)
    return row
