from wingo.analytics.market import MarketState
from wingo.core.context import ForecastContext
from wingo.ensemble import trainer as trainer_mod
from wingo.ensemble.trainer import Trainer


def _context(make_buffer, digits):
    return ForecastContext(buffer=make_buffer(digits))


def test_run_rebuilds_everything(make_buffer):
    ctx = _context(make_buffer, [i % 10 for i in range(80)])
    assert Trainer(ctx).run() is True
    assert len(ctx.patterns) > 0
    assert len(ctx.markov) > 0
    assert (len(ctx.trend.short), len(ctx.trend.medium), len(ctx.trend.long)) == (10, 30, 60)
    assert ctx.market.last_update is not None


def test_small_buffer_keeps_market(make_buffer):
    ctx = _context(make_buffer, [1, 2, 3, 4, 5])
    prev = ctx.market
    assert Trainer(ctx).run() is True
    assert ctx.market is prev
    assert ctx.trend.long == [1, 0, 0, 0, 0]


def test_retrain_clears_stale_patterns(make_buffer, make_records):
    ctx = _context(make_buffer, [9] * 40)
    t = Trainer(ctx)
    t.run()
    assert "999" in ctx.patterns
    ctx.buffer.clear()
    ctx.buffer.ingest(make_records([1] * 40, start=500))
    t.run()
    assert "999" not in ctx.patterns
    assert "9-9" not in ctx.markov


def test_single_flight(make_buffer):
    ctx = _context(make_buffer, [i % 10 for i in range(40)])
    t = Trainer(ctx)
    patterns = ctx.patterns
    t._lock.acquire()
    try:
        assert t.is_training
        assert t.run() is False
        assert ctx.patterns is patterns
    finally:
        t._lock.release()
    assert t.run() is True


def test_failure_keeps_previous_state(make_buffer, make_records, monkeypatch):
    ctx = _context(make_buffer, [i % 10 for i in range(40)])
    t = Trainer(ctx)
    t.run()
    patterns, markov, market = ctx.patterns, ctx.markov, ctx.market

    def boom(*a, **kw):
        raise RuntimeError("analysis exploded")

    monkeypatch.setattr(trainer_mod, "analyze_market_state", boom)
    ctx.buffer.ingest(make_records([5] * 10, start=900))
    assert t.run() is False
    assert ctx.patterns is patterns and ctx.markov is markov and ctx.market is market
    assert not t.is_training
    assert isinstance(ctx.market, MarketState)
