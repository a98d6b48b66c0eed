"""
Shared fixtures for the chart engine test suite.
"""

import numpy as np
import pytest

from chartengine.core.config import Settings
from chartengine.schemas.market import OHLCV
from chartengine.services.indicators.calculations import OHLCVData

DAY = 86400


def _bar(time, close, open_=None, high=None, low=None, volume=1.0):
    open_ = close if open_ is None else open_
    high = max(open_, close) if high is None else high
    low = min(open_, close) if low is None else low
    return OHLCV(time=time, open=open_, high=high, low=low, close=close, volume=volume)


def _bars(closes, start=0, step=DAY, volume=1.0):
    return [
        _bar(start + i * step, float(close), volume=volume)
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def make_bar():
    """Factory: make_bar(time, close, open_=, high=, low=, volume=)."""
    return _bar


@pytest.fixture
def make_bars():
    """Factory: make_bars(closes, start=0, step=86400, volume=1.0)."""
    return _bars


@pytest.fixture
def ramp_bars():
    """20 daily bars with closes 10, 11, ..., 29."""
    return _bars(range(10, 30))


@pytest.fixture
def noisy_bars():
    """200 daily bars of a seeded random walk with varying volume."""
    rng = np.random.default_rng(42)
    closes = 100 + np.cumsum(rng.normal(0, 1, 200))
    spreads = np.abs(rng.normal(0, 0.5, 200))
    volumes = rng.integers(0, 1000, 200)
    bars = []
    for i in range(200):
        close = float(closes[i])
        open_ = float(closes[i - 1]) if i > 0 else close
        bars.append(
            OHLCV(
                time=i * DAY,
                open=open_,
                high=max(open_, close) + float(spreads[i]),
                low=min(open_, close) - float(spreads[i]),
                close=close,
                volume=float(volumes[i]),
            )
        )
    return bars


@pytest.fixture
def noisy_data(noisy_bars):
    return OHLCVData.from_candles(noisy_bars)


@pytest.fixture
def engine_settings():
    return Settings(
        base_interval_seconds=1,
        default_aggregation_seconds=None,
        effect_throttle_ms=200,
    )


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
