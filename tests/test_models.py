import random

import numpy as np
import pytest

from wingo.analytics.frequency import predict_frequency
from wingo.analytics.market import MarketState
from wingo.analytics.quantum import predict_quantum
from wingo.analytics.recurrent import RecurrentModel
from wingo.analytics.trend import TrendWindows, predict_trend
from wingo.core.records import OutcomeRecord


def _in_buffer_order(digits):
    return [OutcomeRecord.from_digit(str(1000 - i), d) for i, d in enumerate(digits)]


# frequency

def test_frequency_insufficient():
    vote = predict_frequency(_in_buffer_order([9] * 9))
    assert (vote.prediction, vote.confidence, vote.source) == ('BIG', 0.50, 'frequency_insufficient')


def test_frequency_all_big_is_capped():
    vote = predict_frequency(_in_buffer_order([8] * 30))
    assert vote.prediction == 'BIG'
    assert vote.confidence == 0.75


def test_frequency_short_and_long_windows_disagree():
    # 10-window: 6 BIG (weak BIG); 20-window: 6 BIG (stronger SMALL)
    digits = [9] * 6 + [1] * 4 + [1] * 10
    vote = predict_frequency(_in_buffer_order(digits))
    assert vote.prediction == 'SMALL'
    assert vote.confidence == pytest.approx(0.55)


# trend

def test_trend_alternating_is_near_neutral():
    bits = [1, 0] * 30
    vote = predict_trend(TrendWindows.from_bits(bits))
    assert vote.prediction == 'BIG'
    assert vote.confidence == 0.52


def test_trend_reversal():
    bits = [1] * 10 + [0] * 50
    vote = predict_trend(TrendWindows.from_bits(bits))
    assert vote.prediction == 'SMALL'
    assert vote.confidence == 0.75


def test_trend_blend_capped():
    vote = predict_trend(TrendWindows.from_bits([1] * 60))
    assert (vote.prediction, vote.confidence) == ('BIG', 0.78)


def test_trend_empty_windows():
    vote = predict_trend(TrendWindows())
    assert vote.prediction == 'SMALL'
    assert 0.52 <= vote.confidence <= 0.78


# quantum

def test_quantum_max_entropy_is_flat():
    vote = predict_quantum(_in_buffer_order([9] * 10), MarketState(entropy=1.0))
    assert vote.prediction == 'BIG'
    assert vote.confidence == pytest.approx(0.05)


def test_quantum_zero_entropy_follows_frequency():
    vote = predict_quantum(_in_buffer_order([9] * 10), MarketState(entropy=0.0))
    assert (vote.prediction, vote.confidence) == ('BIG', 0.80)


def test_quantum_partial_decoherence():
    digits = [9, 9] + [1] * 8
    vote = predict_quantum(_in_buffer_order(digits), MarketState(entropy=0.5))
    assert vote.prediction == 'SMALL'
    assert vote.confidence == pytest.approx(0.35)


# recurrent

def test_recurrent_insufficient():
    model = RecurrentModel()
    vote = model.predict(_in_buffer_order([9] * 19))
    assert vote.to_dict() == {'prediction': 'BIG', 'confidence': 0.50, 'source': 'lstm_insufficient'}
    assert model.cell is None


def test_recurrent_lazy_then_recurrent_state():
    model = RecurrentModel(seed=7)
    recs = _in_buffer_order([9, 1] * 10)
    first = model.predict(recs)
    assert first.source == 'lstm_uninitialized'
    assert model.cell is not None
    assert not model.cell.hidden.any()

    v1 = model.predict(recs)
    h1 = model.cell.hidden.copy()
    v2 = model.predict(recs)
    assert v1.source == v2.source == 'lstm'
    # same input, different output state: hidden/cell carry over between calls
    assert not np.allclose(h1, model.cell.hidden)
    for v in (v1, v2):
        assert 0.10 <= v.confidence <= 0.80


def test_recurrent_seeded_is_reproducible():
    recs = _in_buffer_order([9, 1, 1] * 10)
    a, b = RecurrentModel(seed=3), RecurrentModel(seed=3)
    for _ in range(3):
        assert a.predict(recs) == b.predict(recs)


# caps over arbitrary data

def test_confidence_caps_hold():
    rng = random.Random(11)
    for n in (1, 5, 12, 25, 40, 80):
        recs = _in_buffer_order([rng.randrange(10) for _ in range(n)])
        m = MarketState(entropy=rng.random())
        f = predict_frequency(recs)
        assert 0.0 <= f.confidence <= 0.75
        t = predict_trend(TrendWindows.from_bits(r.bit for r in recs))
        assert 0.52 <= t.confidence <= 0.78
        q = predict_quantum(recs, m)
        assert 0.0 <= q.confidence <= 0.80
