from wingo.analytics.markov import MarkovTable, predict_markov
from wingo.analytics.stats import DigitCounts
from wingo.core.records import OutcomeRecord


def _in_buffer_order(digits):
    return [OutcomeRecord.from_digit(str(100 - i), d) for i, d in enumerate(digits)]


def test_build_counts_all_orders():
    mk = MarkovTable(order=3)
    mk.build_from([1, 2, 1, 2, 1])
    assert mk.get("1").counts[2] == 2
    assert mk.get("1-2").counts[1] == 2
    assert mk.get("1-2-1").total == 1
    assert mk.get("2-1-2").total == 1


def test_build_resets():
    mk = MarkovTable()
    mk.build_from([3, 3, 3, 3])
    mk.build_from([4, 4, 4, 4])
    assert "3" not in mk
    assert len(mk) == 3


def test_order3_hit():
    mk = MarkovTable(order=3)
    mk.C["5-5-5"] = DigitCounts([0, 0, 0, 0, 0, 9, 0, 0, 0, 0], 9)
    vote = predict_markov(_in_buffer_order([5, 5, 5, 1]), mk)
    assert vote.prediction == 'BIG'
    assert vote.confidence == 1.0
    assert vote.source == 'markov_order3'


def test_falls_through_to_lower_order():
    mk = MarkovTable(order=3)
    mk.C["3"] = DigitCounts([2, 0, 0, 0, 0, 0, 0, 1, 0, 0], 3)
    mk.C["3-4-5"] = DigitCounts([0, 0, 0, 0, 0, 0, 0, 0, 0, 1], 1)  # below threshold
    vote = predict_markov(_in_buffer_order([3, 4, 5, 6]), mk)
    assert vote.source == 'markov_order1'
    assert vote.prediction == 'SMALL'
    assert abs(vote.confidence - 2 / 3) < 1e-9


def test_fallback_is_opposite_of_last():
    vote = predict_markov(_in_buffer_order([7, 1]), MarkovTable())
    assert (vote.prediction, vote.confidence, vote.source) == ('SMALL', 0.51, 'markov_fallback')
    vote = predict_markov(_in_buffer_order([2]), MarkovTable())
    assert vote.prediction == 'BIG'
