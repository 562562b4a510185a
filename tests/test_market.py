import pytest
from wingo.analytics.market import MarketState, analyze_market_state, classify_trend
from wingo.analytics.stats import runs_test, shannon_entropy, spectral_bias


def test_small_buffer_keeps_previous_state(make_buffer):
    prev = MarketState(bias=0.7)
    buf = make_buffer([7, 2] * 14)
    assert analyze_market_state(buf.records(), prev) is prev


def test_alternating_is_not_exploitable(make_buffer):
    buf = make_buffer([7, 2] * 30)
    m = analyze_market_state(buf.records(), MarketState())
    assert m.entropy == pytest.approx(1.0)
    assert m.bias == pytest.approx(0.5)
    assert m.is_exploitable is False
    assert m.recent_trend == 'NEUTRAL'
    assert m.randomness_quality == pytest.approx(0.0)
    assert m.confidence == pytest.approx(0.9)
    # alternation gives far too many runs
    assert m.runs_z > 1.96
    assert m.spectral_bias == pytest.approx(1.0)
    assert m.last_update is not None


def test_clustered_market_is_exploitable(make_buffer):
    buf = make_buffer([2] * 10 + [7] * 40)
    m = analyze_market_state(buf.records(), MarketState())
    assert m.bias == pytest.approx(0.8)
    assert m.entropy < 0.92
    assert m.runs_z < -1.96
    assert m.is_exploitable is True
    assert m.recent_trend == 'STRONG_BIG'
    assert m.confidence == pytest.approx(0.4)


def test_only_recent_window_used(make_buffer):
    # 100 old SMALLs then 50 BIGs: the 50-window sees only BIG
    buf = make_buffer([1] * 100 + [8] * 50)
    m = analyze_market_state(buf.records(), MarketState())
    assert m.bias == 1.0
    assert m.entropy == 0.0
    assert m.confidence == pytest.approx(0.3)


@pytest.mark.parametrize("big,label", [
    (10, 'STRONG_BIG'), (7, 'STRONG_BIG'), (6, 'BIAS_BIG'), (5, 'NEUTRAL'),
    (4, 'BIAS_SMALL'), (3, 'STRONG_SMALL'), (0, 'STRONG_SMALL'),
])
def test_classify_trend(big, label):
    assert classify_trend([1] * big + [0] * (10 - big)) == label


def test_runs_test_short_sequence():
    assert runs_test([1, 0, 1]).z_score == 0.0


def test_runs_test_constant_sequence():
    rt = runs_test([1] * 20)
    assert rt.runs == 1
    assert rt.z_score == 0.0


def test_entropy_and_spectral():
    assert shannon_entropy([]) == 0.0
    assert shannon_entropy([0, 1, 0, 1]) == pytest.approx(1.0)
    assert spectral_bias([0, 5, 6, 2]) == pytest.approx(2 / 3)
    assert spectral_bias([3]) == 0.0
