from __future__ import annotations
import logging
import threading
import time

from wingo.analytics.market import analyze_market_state
from wingo.analytics.markov import MarkovTable
from wingo.analytics.patterns import PatternTable
from wingo.analytics.trend import TrendWindows
from wingo.core.context import ForecastContext

logger = logging.getLogger(__name__)


class Trainer:
    """Rebuilds pattern/markov/trend state from the buffer.

    Only one pass runs at a time; an overlapping call returns False at once
    and the caller keeps using the current state. New tables are built off
    to the side and swapped in only when the whole pass succeeds.
    """

    def __init__(self, context: ForecastContext):
        self.ctx = context
        self._lock = threading.Lock()

    @property
    def is_training(self) -> bool:
        return self._lock.locked()

    def run(self) -> bool:
        if not self._lock.acquire(blocking=False):
            logger.info("training already in progress, skipping")
            return False
        t0 = time.perf_counter()
        try:
            ctx = self.ctx
            records = ctx.buffer.records()
            digits = [r.digit for r in records]

            patterns = PatternTable(ctx.patterns.lengths)
            patterns.rebuild(digits)
            markov = MarkovTable(ctx.markov.K)
            markov.build_from(digits)
            trend = TrendWindows.from_bits(r.bit for r in records)
            market = analyze_market_state(records, ctx.market, ctx.market_min_records, ctx.market_window)

            ctx.patterns, ctx.markov, ctx.trend, ctx.market = patterns, markov, trend, market
            logger.info("model training complete (%d records, %.0fms)",
                        len(records), (time.perf_counter() - t0) * 1000)
            return True
        except Exception:
            logger.exception("model training failed, keeping previous state")
            return False
        finally:
            self._lock.release()
