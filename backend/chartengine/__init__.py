"""
Chart Indicator Engine

Technical-indicator computation and live-series reconciliation for price charts.
"""

from chartengine.services.chart import ChartEngine, EffectThrottle

__all__ = ["ChartEngine", "EffectThrottle"]
