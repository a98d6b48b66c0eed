"""
Tests for bucket aggregation.
"""

import pytest

from chartengine.schemas.market import OHLCV
from chartengine.services.aggregation import aggregate, bucket_key, validate_interval
from chartengine.services.base import InvalidParameterError


class TestAggregate:
    """aggregate(data, interval_seconds)."""

    def test_two_one_second_bars_into_one_bucket(self):
        bars = [
            OHLCV(time=0, open=1, high=2, low=0.5, close=1.5, volume=10),
            OHLCV(time=1, open=1.5, high=2.5, low=1, close=2, volume=5),
        ]
        result = aggregate(bars, 2)

        assert result == [OHLCV(time=0, open=1, high=2.5, low=0.5, close=2, volume=15)]

    def test_empty_input(self):
        assert aggregate([], 60) == []

    @pytest.mark.parametrize("interval", [0, -60])
    def test_non_positive_interval(self, make_bar, interval):
        assert aggregate([make_bar(100, 1.0)], interval) == []

    def test_same_spacing_is_identity(self, make_bar):
        bars = [
            make_bar(0, 11.0, open_=10.0, high=12.0, low=9.0, volume=100),
            make_bar(60, 12.0, open_=11.0, high=13.0, low=10.0, volume=200),
            make_bar(120, 13.0, open_=12.0, high=14.0, low=11.0, volume=150),
        ]
        assert aggregate(bars, 60) == bars

    def test_seconds_to_minutes(self, make_bar):
        bars = []
        for i in range(120):
            price = float(100 + (i % 10))
            bars.append(
                make_bar(i, price + 1, open_=price, high=price + 5, low=price - 3, volume=10)
            )

        result = aggregate(bars, 60)

        assert [b.time for b in result] == [0, 60]
        for bucket, start in zip(result, (0, 60)):
            members = bars[start : start + 60]
            assert bucket.open == members[0].open
            assert bucket.close == members[-1].close
            assert bucket.high == max(m.high for m in members)
            assert bucket.low == min(m.low for m in members)
            assert bucket.volume == sum(m.volume for m in members) == 600

    def test_unaligned_bars_floor_to_bucket_start(self, make_bar):
        bars = [make_bar(t, float(t)) for t in (59, 60, 119, 120)]
        result = aggregate(bars, 60)

        assert [b.time for b in result] == [0, 60, 120]
        assert result[1].open == 60.0
        assert result[1].close == 119.0

    def test_gaps_do_not_create_empty_buckets(self, make_bar):
        bars = [make_bar(0, 1.0), make_bar(600, 2.0)]
        assert [b.time for b in aggregate(bars, 60)] == [0, 600]

    def test_rerun_is_deterministic(self, noisy_bars):
        assert aggregate(noisy_bars, 7 * 86400) == aggregate(noisy_bars, 7 * 86400)


class TestBucketKey:
    def test_floors(self):
        assert bucket_key(119, 60) == 60
        assert bucket_key(120, 60) == 120

    def test_negative_time_floors_down(self):
        assert bucket_key(-1, 60) == -60


class TestValidateInterval:
    def test_accepts_positive_int(self):
        assert validate_interval(60) == 60

    @pytest.mark.parametrize("interval", [0, -1, 1.5, True, "60"])
    def test_rejects(self, interval):
        with pytest.raises(InvalidParameterError):
            validate_interval(interval)
