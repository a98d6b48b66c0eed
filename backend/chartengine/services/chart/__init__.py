"""
Chart Engine Service

CONTRACT:
    Input:  base series, live ticks, indicator config, aggregation interval
    Output: list[SeriesEffect] per call (also pushed to callbacks)
"""

from chartengine.services.chart.engine import ChartEngine
from chartengine.services.chart.throttle import EffectThrottle

__all__ = ["ChartEngine", "EffectThrottle"]
