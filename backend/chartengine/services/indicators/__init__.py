"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorConfig mapping + base OHLCV series
    Output: list[SeriesEffect]

RESPONSIBILITIES:
    - Calculate SMA, EMA, VWAP, RSI, MACD and Bollinger Bands
    - Keep realized series in step with the enabled configuration
    - Emit create / update / remove effects for the chart host

PURE PYTHON - No I/O.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from chartengine.services.indicators.interface import IndicatorServiceInterface
from chartengine.services.indicators.service import IndicatorSeriesManager
from chartengine.services.indicators.series import compute_series

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorSeriesManager",
    "compute_series",
]
