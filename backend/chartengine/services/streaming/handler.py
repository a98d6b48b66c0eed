"""
Streaming Update Handler

Maintains the authoritative base series (historical block + live ticks)
and keeps indicator series in step with it.

Tick handling:
- Same timestamp as an existing bar: replace it (bar revision, last write wins)
- Newer than the last bar: append
- Older than the last bar and not an existing timestamp: reject, no mutation
"""

import logging
from typing import Callable, Optional, Sequence

from chartengine.schemas.market import OHLCV, TickStatus
from chartengine.schemas.indicators import SeriesEffect, TickResult
from chartengine.services.base import BaseService, OutOfOrderTickError
from chartengine.services.indicators.interface import IndicatorServiceInterface

logger = logging.getLogger(__name__)

SeriesTransform = Callable[[list[OHLCV]], list[OHLCV]]


class StreamingUpdateHandler(BaseService[OHLCV, TickResult]):
    """
    Applies live ticks to the base series.

    Usage:
        handler = StreamingUpdateHandler(manager)
        handler.load(history)
        result = handler.apply_tick(bar)   # raises OutOfOrderTickError on stale ticks

    Indicators are recomputed against display_series(), which is the base series
    passed through the optional transform (e.g. re-bucketing to a coarser interval).
    """

    def __init__(
        self,
        manager: IndicatorServiceInterface,
        transform: Optional[SeriesTransform] = None,
    ):
        self._manager = manager
        self._transform = transform
        self._bars: list[OHLCV] = []
        self._index_by_time: dict[int, int] = {}

    @property
    def name(self) -> str:
        return "StreamingUpdateHandler"

    @property
    def base_series(self) -> list[OHLCV]:
        return list(self._bars)

    @property
    def last_time(self) -> Optional[int]:
        return self._bars[-1].time if self._bars else None

    def set_transform(self, transform: Optional[SeriesTransform]) -> None:
        self._transform = transform

    def display_series(self) -> list[OHLCV]:
        """Base series as the indicators should see it."""
        bars = list(self._bars)
        if self._transform is None:
            return bars
        return self._transform(bars)

    def load(self, points: Sequence[OHLCV]) -> None:
        """
        Replace the entire base series.

        Duplicate timestamps keep the last bar; bars are ordered by time.
        """
        by_time: dict[int, OHLCV] = {}
        for point in points:
            by_time[point.time] = point

        ordered = [by_time[t] for t in sorted(by_time)]
        if len(ordered) != len(points) or any(
            a.time != b.time for a, b in zip(ordered, points)
        ):
            logger.warning(
                f"Base series was not strictly increasing; normalized "
                f"{len(points)} bars to {len(ordered)}"
            )

        self._bars = ordered
        self._index_by_time = {bar.time: i for i, bar in enumerate(ordered)}
        logger.info(f"Loaded base series with {len(ordered)} bars")

    def execute(self, input_data: OHLCV) -> TickResult:
        return self.apply_tick(input_data)

    def apply_tick(self, point: OHLCV) -> TickResult:
        """
        Apply one tick and recompute indicators.

        Raises:
            OutOfOrderTickError: tick is older than the last bar and revises nothing
        """
        status = self._mutate(point)
        effects = self.recompute()
        return TickResult(status=status, time=point.time, effects=effects)

    def recompute(self) -> list[SeriesEffect]:
        """Single recompute entry point: full recompute over the display series."""
        return self._manager.recompute(self.display_series())

    def _mutate(self, point: OHLCV) -> TickStatus:
        existing = self._index_by_time.get(point.time)
        if existing is not None:
            self._bars[existing] = point
            return TickStatus.REVISED

        last_time = self.last_time
        if last_time is not None and point.time < last_time:
            raise OutOfOrderTickError(
                self.name,
                f"Tick at {point.time} is older than last bar at {last_time}",
                details={"time": point.time, "last_time": last_time},
            )

        self._index_by_time[point.time] = len(self._bars)
        self._bars.append(point)
        return TickStatus.APPENDED
