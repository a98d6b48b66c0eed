"""
Indicator Series Builders

Turns the aligned arrays from calculations.py into time-keyed point series.
A point exists only where the source bar at that time has a full look-back
window; shorter inputs produce an empty series for every line of the indicator.
"""

import logging
from typing import Union

import numpy as np

from chartengine.schemas.indicators import (
    BollingerBandsConfig,
    BollingerSeriesData,
    EMAConfig,
    HistogramDirection,
    HistogramPoint,
    IndicatorConfig,
    IndicatorKind,
    IndicatorPoint,
    LineSeriesData,
    MACDConfig,
    MACDSeriesData,
    RSIConfig,
    SMAConfig,
    VWAPConfig,
)
from chartengine.services.base import MalformedConfigError
from chartengine.services.indicators.calculations import (
    OHLCVData,
    bollinger_bands,
    ema,
    macd,
    macd_min_length,
    rsi,
    sma,
    vwap,
)

logger = logging.getLogger(__name__)

SeriesPayload = Union[LineSeriesData, MACDSeriesData, BollingerSeriesData]


def _to_points(timestamps: np.ndarray, values: np.ndarray) -> list[IndicatorPoint]:
    mask = ~np.isnan(values)
    return [
        IndicatorPoint(time=int(t), value=float(v))
        for t, v in zip(timestamps[mask], values[mask])
    ]


def _to_histogram(timestamps: np.ndarray, values: np.ndarray) -> list[HistogramPoint]:
    mask = ~np.isnan(values)
    return [
        HistogramPoint(
            time=int(t),
            value=float(v),
            direction=(
                HistogramDirection.POSITIVE if v >= 0 else HistogramDirection.NEGATIVE
            ),
        )
        for t, v in zip(timestamps[mask], values[mask])
    ]


# =============================================================================
# SINGLE-LINE INDICATORS
# =============================================================================


def sma_series(data: OHLCVData, period: int = 20) -> LineSeriesData:
    return LineSeriesData(points=_to_points(data.timestamps, sma(data.closes, period)))


def ema_series(data: OHLCVData, period: int = 12) -> LineSeriesData:
    return LineSeriesData(points=_to_points(data.timestamps, ema(data.closes, period)))


def vwap_series(data: OHLCVData) -> LineSeriesData:
    values = vwap(data.highs, data.lows, data.closes, data.volumes)
    return LineSeriesData(points=_to_points(data.timestamps, values))


def rsi_series(data: OHLCVData, period: int = 14) -> LineSeriesData:
    return LineSeriesData(points=_to_points(data.timestamps, rsi(data.closes, period)))


# =============================================================================
# MULTI-LINE INDICATORS
# =============================================================================


def macd_series(
    data: OHLCVData,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDSeriesData:
    """MACD line, signal line and directional histogram."""
    if min(fast_period, slow_period, signal_period) <= 0:
        return MACDSeriesData()
    if len(data) < macd_min_length(fast_period, slow_period, signal_period):
        return MACDSeriesData()

    macd_line, signal_line, histogram = macd(
        data.closes, fast_period, slow_period, signal_period
    )
    return MACDSeriesData(
        macd=_to_points(data.timestamps, macd_line),
        signal=_to_points(data.timestamps, signal_line),
        histogram=_to_histogram(data.timestamps, histogram),
    )


def bollinger_series(
    data: OHLCVData, period: int = 20, std_dev_multiplier: float = 2.0
) -> BollingerSeriesData:
    """Upper, middle (SMA) and lower bands on the same time axis."""
    if period <= 0 or len(data) < period:
        return BollingerSeriesData()

    upper, middle, lower = bollinger_bands(data.closes, period, std_dev_multiplier)
    return BollingerSeriesData(
        upper=_to_points(data.timestamps, upper),
        middle=_to_points(data.timestamps, middle),
        lower=_to_points(data.timestamps, lower),
    )


# =============================================================================
# DISPATCH
# =============================================================================


def compute_series(config: IndicatorConfig, data: OHLCVData) -> SeriesPayload:
    """
    Run the calculation selected by the config's kind.

    Raises:
        MalformedConfigError: config is not one of the known kinds
    """
    if isinstance(config, SMAConfig):
        result = sma_series(data, config.parameters.period)
    elif isinstance(config, EMAConfig):
        result = ema_series(data, config.parameters.period)
    elif isinstance(config, VWAPConfig):
        result = vwap_series(data)
    elif isinstance(config, RSIConfig):
        result = rsi_series(data, config.parameters.period)
    elif isinstance(config, MACDConfig):
        params = config.parameters
        result = macd_series(
            data, params.fast_period, params.slow_period, params.signal_period
        )
    elif isinstance(config, BollingerBandsConfig):
        params = config.parameters
        result = bollinger_series(data, params.period, params.std_dev_multiplier)
    else:
        raise MalformedConfigError(
            "IndicatorMath",
            f"No calculation for indicator kind {getattr(config, 'kind', None)!r}",
        )

    if result.is_empty:
        logger.debug(
            f"{IndicatorKind(config.kind).value} {config.id}: insufficient data "
            f"({len(data)} bars)"
        )
    return result
