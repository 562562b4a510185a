from __future__ import annotations
from datetime import datetime, timezone
from typing import Callable
import logging
import math
import time

import requests

from wingo.config import settings
from wingo.core.errors import FeedError
from wingo.core.records import OutcomeRecord, utcnow
from wingo.core.validation import is_valid_digit, is_valid_period

logger = logging.getLogger(__name__)


def draw_feed_url(now: datetime | None = None, base: str | None = None) -> str:
    """URL of the past-100-draws snapshot for the current one-minute draw."""
    now = now or datetime.now(timezone.utc)
    date_str = now.strftime("%Y%m%d")
    draw = (now.hour * 60 + now.minute) % 1440
    return f"{base or settings.feed_base_url}/WinGo_1_{date_str}10001{draw:04d}_past100_draws"


def next_period(period_id: str) -> str:
    # numeric ids, width preserved: "0099" -> "0100"
    if not is_valid_period(period_id):
        raise ValueError(f"not a numeric period id: {period_id!r}")
    return str(int(period_id) + 1).zfill(len(period_id))


def _parse_number(number) -> int | None:
    # 7, "7" and 7.0 all mean digit 7; booleans and NaN/inf are rejected
    if isinstance(number, bool):
        return None
    if isinstance(number, float):
        return int(number) if math.isfinite(number) else None
    try:
        return int(str(number).strip())
    except ValueError:
        return None


def parse_feed(payload) -> list[OutcomeRecord]:
    """Validate a newest-first feed payload; returns records oldest-first."""
    if not isinstance(payload, list):
        raise FeedError("invalid feed response format")
    out: list[OutcomeRecord] = []
    seen: set[str] = set()
    observed = utcnow()
    for item in payload:
        if not isinstance(item, dict):
            continue
        period = item.get('issueNumber')
        content = item.get('content')
        number = content.get('number') if isinstance(content, dict) else None
        if not period or number is None or str(period) in seen:
            continue
        if not is_valid_period(str(period)):
            continue
        digit = _parse_number(number)
        if digit is None or not is_valid_digit(digit):
            continue
        seen.add(str(period))
        out.append(OutcomeRecord.from_digit(str(period), digit, observed))
    out.reverse()
    return out


class DrawFeed:
    def __init__(self, url_factory: Callable[[], str] = draw_feed_url,
                 attempts: int | None = None, delay: float | None = None, timeout: float | None = None,
                 http: requests.Session | None = None):
        self.url_factory = url_factory
        self.attempts = settings.retry_attempts if attempts is None else attempts
        self.delay = settings.retry_delay if delay is None else delay
        self.timeout = settings.fetch_timeout if timeout is None else timeout
        self.http = http or requests.Session()

    def fetch_latest(self) -> list[OutcomeRecord]:
        """Fetch and validate the latest draws. Never raises; [] on failure."""
        last_error: Exception | None = None
        for attempt in range(self.attempts + 1):
            url = self.url_factory()
            try:
                logger.info("fetching draws from %s", url)
                r = self.http.get(url, timeout=self.timeout)
                r.raise_for_status()
                records = parse_feed(r.json())
                logger.info("fetched %d valid records", len(records))
                return records
            except (requests.RequestException, ValueError, FeedError) as e:
                last_error = e
                if attempt < self.attempts:
                    time.sleep(self.delay * (attempt + 1))
        logger.error("failed to fetch draws after %d attempts: %s", self.attempts, last_error)
        return []
