"""
Chart Engine Schema Contracts

This module defines all contracts between the engine and its chart host.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from chartengine.schemas.market import (
    OHLCV,
    ChartTimeInterval,
    TickStatus,
)
from chartengine.schemas.indicators import (
    IndicatorKind,
    IndicatorConfig,
    IndicatorSettings,
    SMAConfig,
    EMAConfig,
    VWAPConfig,
    RSIConfig,
    MACDConfig,
    BollingerBandsConfig,
    IndicatorPoint,
    HistogramPoint,
    LineSeriesData,
    MACDSeriesData,
    BollingerSeriesData,
    PlacementHint,
    RealizedSeries,
    SeriesCreated,
    SeriesUpdated,
    SeriesRemoved,
    SeriesEffect,
    TickResult,
    parse_indicator_config,
)

__all__ = [
    # Market
    "OHLCV",
    "ChartTimeInterval",
    "TickStatus",
    # Indicators
    "IndicatorKind",
    "IndicatorConfig",
    "IndicatorSettings",
    "SMAConfig",
    "EMAConfig",
    "VWAPConfig",
    "RSIConfig",
    "MACDConfig",
    "BollingerBandsConfig",
    "IndicatorPoint",
    "HistogramPoint",
    "LineSeriesData",
    "MACDSeriesData",
    "BollingerSeriesData",
    "PlacementHint",
    "RealizedSeries",
    # Effects
    "SeriesCreated",
    "SeriesUpdated",
    "SeriesRemoved",
    "SeriesEffect",
    "TickResult",
    "parse_indicator_config",
]
