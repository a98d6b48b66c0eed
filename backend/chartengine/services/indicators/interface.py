"""
Indicator Series Manager Interface

Defines the contract for the indicator reconciliation layer.
"""

from abc import abstractmethod
from typing import Iterable, Mapping, Optional, Sequence, Union

from chartengine.services.base import BaseService
from chartengine.schemas.market import OHLCV
from chartengine.schemas.indicators import (
    IndicatorConfig,
    IndicatorSettings,
    RealizedSeries,
    SeriesEffect,
)

ConfigInput = Union[Mapping[str, Union[IndicatorConfig, dict]], IndicatorSettings]


class IndicatorServiceInterface(BaseService[Sequence[OHLCV], list[SeriesEffect]]):
    """
    Indicator Series Manager Contract.

    INPUT: configuration snapshot + base OHLCV series
        - config: id -> IndicatorConfig (or JSON-shaped dict)
        - source: time-ordered OHLCV bars

    OUTPUT: list[SeriesEffect]
        - one created / updated / removed effect per indicator id per pass
    """

    @property
    def name(self) -> str:
        return "IndicatorSeriesManager"

    @abstractmethod
    def execute(self, input_data: Sequence[OHLCV]) -> list[SeriesEffect]:
        """Recompute every active indicator against a new source series."""
        pass

    @abstractmethod
    def reconcile(
        self, config: ConfigInput, source: Sequence[OHLCV]
    ) -> list[SeriesEffect]:
        """
        Make realized series match the configuration.

        Args:
            config: full configuration snapshot (replaces the previous one)
            source: base series to compute against

        Returns:
            Effects for the host, removals first
        """
        pass

    @abstractmethod
    def recompute(
        self, source: Sequence[OHLCV], ids: Optional[Iterable[str]] = None
    ) -> list[SeriesEffect]:
        """Recompute active indicators (all, or only `ids`) under the current config."""
        pass

    @abstractmethod
    def clear(self) -> list[SeriesEffect]:
        """Remove every realized series and forget the configuration."""
        pass

    @property
    @abstractmethod
    def realized(self) -> dict[str, RealizedSeries]:
        """Copy of the realized series keyed by indicator id."""
        pass
