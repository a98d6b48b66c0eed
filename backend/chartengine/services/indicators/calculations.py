"""
Technical Indicator Calculations

Pure Python/NumPy implementations of technical indicators.
All math is deterministic: the same input array always yields a bit-identical output.

Every function returns arrays aligned with its input, NaN where the look-back
window is not available. Callers drop the NaN positions; they are never padding.
"""

import numpy as np
from dataclasses import dataclass
from typing import Sequence

from chartengine.schemas.market import OHLCV


@dataclass
class OHLCVData:
    """OHLCV data arrays for calculations."""

    timestamps: np.ndarray
    opens: np.ndarray
    highs: np.ndarray
    lows: np.ndarray
    closes: np.ndarray
    volumes: np.ndarray

    def __len__(self) -> int:
        return len(self.timestamps)

    @classmethod
    def from_candles(cls, candles: Sequence[OHLCV]) -> "OHLCVData":
        """Convert OHLCV list to numpy arrays."""
        return cls(
            timestamps=np.array([c.time for c in candles], dtype=np.int64),
            opens=np.array([c.open for c in candles], dtype=np.float64),
            highs=np.array([c.high for c in candles], dtype=np.float64),
            lows=np.array([c.low for c in candles], dtype=np.float64),
            closes=np.array([c.close for c in candles], dtype=np.float64),
            volumes=np.array([c.volume for c in candles], dtype=np.float64),
        )


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average."""
    result = np.full(len(data), np.nan)
    if period <= 0 or len(data) < period:
        return result

    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average."""
    result = np.full(len(data), np.nan)
    if period <= 0 or len(data) < period:
        return result

    multiplier = 2 / (period + 1)

    # Seed with the plain average of the first window
    result[period - 1] = np.mean(data[:period])

    for i in range(period, len(data)):
        result[i] = (data[i] - result[i - 1]) * multiplier + result[i - 1]

    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index (Wilder smoothing).

    An average loss of zero saturates at 100, flat prices included.
    """
    result = np.full(len(closes), np.nan)
    if period <= 0 or len(closes) < period + 1:
        return result

    deltas = np.diff(closes)

    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = np.sum(gains[:period]) / period
    avg_loss = np.sum(losses[:period]) / period

    result[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def macd(
    closes: np.ndarray,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    MACD (Moving Average Convergence Divergence).

    The signal line is an EMA over the computable part of the MACD line only,
    so its seed is the plain average of the first signal_period MACD values.

    Returns: (macd_line, signal_line, histogram)
    """
    fast_ema = ema(closes, fast_period)
    slow_ema = ema(closes, slow_period)

    macd_line = fast_ema - slow_ema

    signal_line = np.full(len(closes), np.nan)
    valid = ~np.isnan(macd_line)
    signal_line[valid] = ema(macd_line[valid], signal_period)

    histogram = macd_line - signal_line

    return macd_line, signal_line, histogram


def macd_min_length(fast_period: int, slow_period: int, signal_period: int) -> int:
    """Source bars needed before the first histogram value exists."""
    return max(fast_period, slow_period) + signal_period - 1


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands.

    Uses the population standard deviation of the window (divide by period).

    Returns: (upper, middle, lower)
    """
    middle = sma(closes, period)

    std = np.full(len(closes), np.nan)
    if period > 0:
        for i in range(period - 1, len(closes)):
            std[i] = np.std(closes[i - period + 1 : i + 1])

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return upper, middle, lower


# =============================================================================
# VOLUME INDICATORS
# =============================================================================


def vwap(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, volumes: np.ndarray
) -> np.ndarray:
    """
    Volume Weighted Average Price.

    Cumulative from the first bar of the array; NaN until some volume has traded.
    """
    typical_price = (highs + lows + closes) / 3
    cumulative_tpv = np.cumsum(typical_price * volumes)
    cumulative_volume = np.cumsum(volumes)

    result = np.full(len(closes), np.nan)
    traded = cumulative_volume > 0
    result[traded] = cumulative_tpv[traded] / cumulative_volume[traded]

    return result
