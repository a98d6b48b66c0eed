"""
Bucket Aggregation

Folds a time-ordered OHLCV series into fixed-width time buckets.
Pure functions; re-run from scratch whenever the source changes.
"""

import logging
from typing import Sequence

from chartengine.schemas.market import OHLCV
from chartengine.services.base import InvalidParameterError

logger = logging.getLogger(__name__)


def bucket_key(time: int, interval_seconds: int) -> int:
    """Start of the bucket containing `time` (floored epoch)."""
    return (time // interval_seconds) * interval_seconds


def validate_interval(interval_seconds: int) -> int:
    """
    Raises:
        InvalidParameterError: interval is not a positive whole number of seconds
    """
    if isinstance(interval_seconds, bool) or not isinstance(interval_seconds, int):
        raise InvalidParameterError(
            "BucketAggregator",
            f"Interval must be an integer number of seconds, got {interval_seconds!r}",
        )
    if interval_seconds <= 0:
        raise InvalidParameterError(
            "BucketAggregator",
            f"Interval must be positive, got {interval_seconds}",
        )
    return interval_seconds


def aggregate(data: Sequence[OHLCV], interval_seconds: int) -> list[OHLCV]:
    """
    Aggregate candles into buckets of `interval_seconds`.

    Consecutive candles sharing a bucket key form one bar:
    first open, max high, min low, last close, summed volume.
    The source is assumed time-ordered, so grouping is one left-to-right pass.
    The list position of each bucket is its new sequential index.

    Returns an empty list for empty input or a non-positive interval.
    """
    if not data or interval_seconds <= 0:
        return []

    buckets: list[OHLCV] = []
    current_key = None
    members: list[OHLCV] = []

    for candle in data:
        key = bucket_key(candle.time, interval_seconds)
        if key == current_key:
            members.append(candle)
            continue
        if current_key is not None:
            buckets.append(_fold(current_key, members))
        current_key = key
        members = [candle]

    # Flush last bucket
    buckets.append(_fold(current_key, members))

    logger.debug(
        f"Aggregated {len(data)} bars into {len(buckets)} x {interval_seconds}s buckets"
    )
    return buckets


def _fold(key: int, members: list[OHLCV]) -> OHLCV:
    return OHLCV(
        time=key,
        open=members[0].open,
        high=max(c.high for c in members),
        low=min(c.low for c in members),
        close=members[-1].close,
        volume=sum(c.volume for c in members),
    )
