"""
CONTRACT 1: Price Data

Input: raw OHLCV bars from the chart host (historical block or live ticks)
Output: validated, time-ordered base series

Bars are keyed by integer epoch seconds. The time value is the join key
for every derived series.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class ChartTimeInterval(str, Enum):
    """Display resolutions offered by the chart."""

    S1 = "1s"
    M1 = "1m"
    H1 = "1h"
    D1 = "1d"

    @property
    def seconds(self) -> int:
        return _INTERVAL_SECONDS[self]

    @classmethod
    def filtered(cls, minimum_seconds: int) -> list["ChartTimeInterval"]:
        """Intervals no finer than the feed's base resolution."""
        return [interval for interval in cls if interval.seconds >= minimum_seconds]

    @classmethod
    def from_seconds(cls, seconds: int) -> Optional["ChartTimeInterval"]:
        for interval in cls:
            if interval.seconds == seconds:
                return interval
        return None


_INTERVAL_SECONDS = {
    ChartTimeInterval.S1: 1,
    ChartTimeInterval.M1: 60,
    ChartTimeInterval.H1: 3600,
    ChartTimeInterval.D1: 86400,
}


class TickStatus(str, Enum):
    APPENDED = "appended"
    REVISED = "revised"
    REJECTED = "rejected"


# =============================================================================
# OHLCV
# =============================================================================


class OHLCV(BaseModel):
    """Single candlestick data point."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    time: int = Field(..., description="Epoch seconds, unique within a series")
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0, ge=0)

