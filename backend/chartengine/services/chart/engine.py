"""
Chart Engine

Host-facing boundary of the indicator engine. One instance per chart.

Inputs (from host):
    load_base_series, apply_tick, set_indicator_config, set_aggregation_interval

Outputs (to host):
    SeriesCreated / SeriesUpdated / SeriesRemoved effects, returned from every
    call and also pushed to registered callbacks.

Mutating calls must be serialized by the caller; the engine is not thread-safe.
"""

import logging
from functools import partial
from typing import Callable, Optional, Sequence, Union

from chartengine.core.config import Settings, get_settings
from chartengine.schemas.market import OHLCV, ChartTimeInterval, TickStatus
from chartengine.schemas.indicators import (
    IndicatorConfig,
    RealizedSeries,
    SeriesEffect,
    TickResult,
)
from chartengine.services.aggregation import aggregate, validate_interval
from chartengine.services.base import InvalidParameterError, OutOfOrderTickError
from chartengine.services.chart.throttle import EffectThrottle
from chartengine.services.indicators import IndicatorSeriesManager
from chartengine.services.indicators.interface import ConfigInput
from chartengine.services.streaming import StreamingUpdateHandler

logger = logging.getLogger(__name__)

EffectCallback = Callable[[list[SeriesEffect]], None]


class ChartEngine:
    """
    Indicator engine for one price chart.

    Usage:
        engine = ChartEngine()
        engine.add_effect_callback(render)
        engine.set_indicator_config({"sma": {"kind": "SMA", "enabled": True}})
        engine.load_base_series(history)
        result = engine.apply_tick(bar)
        engine.set_aggregation_interval(ChartTimeInterval.M1)

    With a throttle, updates are emitted on the leading edge of each window; the
    last update of a burst is held until the next call. Hosts must call
    flush_effects() when the feed goes idle to draw it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        throttle: Optional[EffectThrottle] = None,
        throttle_updates: bool = False,
    ):
        self._settings = settings or get_settings()
        if throttle is None and throttle_updates:
            throttle = EffectThrottle(window_ms=self._settings.effect_throttle_ms)
        self._manager = IndicatorSeriesManager()
        self._stream = StreamingUpdateHandler(self._manager)
        self._throttle = throttle
        self._callbacks: list[EffectCallback] = []
        self._interval: Optional[int] = None

        default_interval = self._settings.default_aggregation_seconds
        if default_interval is not None:
            try:
                self._use_interval(validate_interval(default_interval))
            except InvalidParameterError as e:
                logger.warning(f"Ignoring default aggregation interval: {e.message}")

    # ============ State (read-only copies) ============

    @property
    def base_series(self) -> list[OHLCV]:
        return self._stream.base_series

    @property
    def display_series(self) -> list[OHLCV]:
        return self._stream.display_series()

    @property
    def realized(self) -> dict[str, RealizedSeries]:
        return self._manager.realized

    @property
    def indicator_config(self) -> dict[str, IndicatorConfig]:
        return self._manager.config

    @property
    def aggregation_interval(self) -> Optional[int]:
        """Active bucket width in seconds, None when showing the base series."""
        return self._interval

    @property
    def available_intervals(self) -> list[ChartTimeInterval]:
        return ChartTimeInterval.filtered(self._settings.base_interval_seconds)

    # ============ Inputs ============

    def load_base_series(self, points: Sequence[OHLCV]) -> list[SeriesEffect]:
        """Replace the base series and recompute every enabled indicator."""
        self._stream.load(points)
        return self._dispatch(self._stream.recompute())

    def apply_tick(self, point: OHLCV) -> TickResult:
        """Apply one live bar; stale ticks come back with status REJECTED."""
        try:
            result = self._stream.apply_tick(point)
        except OutOfOrderTickError as e:
            logger.warning(f"Rejected tick: {e.message}")
            return TickResult(status=TickStatus.REJECTED, time=point.time)

        self._dispatch(result.effects)
        return result

    def set_indicator_config(self, config: ConfigInput) -> list[SeriesEffect]:
        """Replace the indicator configuration and reconcile."""
        effects = self._manager.reconcile(config, self._stream.display_series())
        return self._dispatch(effects)

    def set_aggregation_interval(
        self, seconds: Optional[Union[int, ChartTimeInterval]]
    ) -> list[SeriesEffect]:
        """
        Switch display resolution and recompute indicators on the re-bucketed series.

        None (or the feed's base interval) shows the base series unaggregated.
        An invalid interval changes nothing and returns no effects.
        """
        if isinstance(seconds, ChartTimeInterval):
            seconds = seconds.seconds
        if seconds is not None:
            try:
                validate_interval(seconds)
            except InvalidParameterError as e:
                logger.warning(f"Aggregation interval unchanged: {e.message}")
                return []

        self._use_interval(seconds)
        logger.info(f"Aggregation interval set to {seconds or 'base'}")
        return self._dispatch(self._stream.recompute())

    def clear_indicators(self) -> list[SeriesEffect]:
        """Remove all indicator series and forget the configuration."""
        return self._dispatch(self._manager.clear())

    # ============ Outputs ============

    def add_effect_callback(self, callback: EffectCallback) -> None:
        """Add a callback to be called with each batch of effects."""
        self._callbacks.append(callback)

    def remove_effect_callback(self, callback: EffectCallback) -> None:
        """Remove an effect callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def flush_effects(self) -> list[SeriesEffect]:
        """Push updates held back by the throttle to the callbacks."""
        if self._throttle is None:
            return []
        pending = self._throttle.flush()
        self._notify(pending)
        return pending

    # ============ Internals ============

    def _use_interval(self, seconds: Optional[int]) -> None:
        if seconds is None or seconds == self._settings.base_interval_seconds:
            self._interval = None
            self._stream.set_transform(None)
        else:
            self._interval = seconds
            self._stream.set_transform(partial(aggregate, interval_seconds=seconds))

    def _dispatch(self, effects: list[SeriesEffect]) -> list[SeriesEffect]:
        outgoing = self._throttle.push(effects) if self._throttle else effects
        self._notify(outgoing)
        return effects

    def _notify(self, effects: list[SeriesEffect]) -> None:
        if not effects:
            return
        for callback in self._callbacks:
            try:
                callback(effects)
            except Exception as e:
                logger.error(f"Effect callback error: {e}")
