"""
CONTRACT 2: Indicator Engine

Input: IndicatorConfig set + base OHLCV series
Output: SeriesEffect stream (created / updated / removed)

This module only declares shapes and defaults.
All math lives in services/indicators/calculations.py.
"""

import logging
from enum import Enum
from typing import Annotated, Literal, Optional, Union
from uuid import uuid4
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from chartengine.schemas.market import TickStatus

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorKind(str, Enum):
    SMA = "SMA"
    EMA = "EMA"
    VWAP = "VWAP"
    RSI = "RSI"
    MACD = "MACD"
    BOLLINGER_BANDS = "BollingerBands"

    @property
    def is_overlay(self) -> bool:
        """Whether the indicator draws on the price scale or needs its own pane."""
        return PLACEMENT_HINTS[self].pane == Pane.OVERLAY

    @property
    def default_color(self) -> str:
        return DEFAULT_COLORS[self]


class Pane(str, Enum):
    OVERLAY = "overlay"
    SEPARATE = "separate"


class HistogramDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


DEFAULT_COLORS = {
    IndicatorKind.SMA: "#FF9800",
    IndicatorKind.EMA: "#2196F3",
    IndicatorKind.VWAP: "#9C27B0",
    IndicatorKind.RSI: "#4CAF50",
    IndicatorKind.MACD: "#E91E63",
    IndicatorKind.BOLLINGER_BANDS: "#DDA0DD",
}


# =============================================================================
# INPUT: Parameters (defaults baked in per kind)
# =============================================================================


class _Parameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class SMAParameters(_Parameters):
    period: int = 20


class EMAParameters(_Parameters):
    period: int = 12


class VWAPParameters(_Parameters):
    pass


class RSIParameters(_Parameters):
    period: int = 14


class MACDParameters(_Parameters):
    fast_period: int = Field(default=12, alias="fastPeriod")
    slow_period: int = Field(default=26, alias="slowPeriod")
    signal_period: int = Field(default=9, alias="signalPeriod")


class BollingerBandsParameters(_Parameters):
    period: int = 20
    std_dev_multiplier: float = Field(
        default=2.0, alias="stdDevMultiplier", allow_inf_nan=False
    )


# =============================================================================
# INPUT: IndicatorConfig (tagged by kind)
# =============================================================================


class _IndicatorConfigBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    enabled: bool = False

    @property
    def indicator_kind(self) -> IndicatorKind:
        return IndicatorKind(self.kind)


class SMAConfig(_IndicatorConfigBase):
    kind: Literal["SMA"] = "SMA"
    parameters: SMAParameters = Field(default_factory=SMAParameters)
    color: str = DEFAULT_COLORS[IndicatorKind.SMA]


class EMAConfig(_IndicatorConfigBase):
    kind: Literal["EMA"] = "EMA"
    parameters: EMAParameters = Field(default_factory=EMAParameters)
    color: str = DEFAULT_COLORS[IndicatorKind.EMA]


class VWAPConfig(_IndicatorConfigBase):
    kind: Literal["VWAP"] = "VWAP"
    parameters: VWAPParameters = Field(default_factory=VWAPParameters)
    color: str = DEFAULT_COLORS[IndicatorKind.VWAP]


class RSIConfig(_IndicatorConfigBase):
    kind: Literal["RSI"] = "RSI"
    parameters: RSIParameters = Field(default_factory=RSIParameters)
    color: str = DEFAULT_COLORS[IndicatorKind.RSI]


class MACDConfig(_IndicatorConfigBase):
    kind: Literal["MACD"] = "MACD"
    parameters: MACDParameters = Field(default_factory=MACDParameters)
    color: str = DEFAULT_COLORS[IndicatorKind.MACD]


class BollingerBandsConfig(_IndicatorConfigBase):
    kind: Literal["BollingerBands"] = "BollingerBands"
    parameters: BollingerBandsParameters = Field(
        default_factory=BollingerBandsParameters
    )
    color: str = DEFAULT_COLORS[IndicatorKind.BOLLINGER_BANDS]


IndicatorConfig = Annotated[
    Union[
        SMAConfig,
        EMAConfig,
        VWAPConfig,
        RSIConfig,
        MACDConfig,
        BollingerBandsConfig,
    ],
    Field(discriminator="kind"),
]

CONFIG_TYPES: dict[IndicatorKind, type] = {
    IndicatorKind.SMA: SMAConfig,
    IndicatorKind.EMA: EMAConfig,
    IndicatorKind.VWAP: VWAPConfig,
    IndicatorKind.RSI: RSIConfig,
    IndicatorKind.MACD: MACDConfig,
    IndicatorKind.BOLLINGER_BANDS: BollingerBandsConfig,
}

_config_adapter = TypeAdapter(IndicatorConfig)


def parse_indicator_config(raw) -> IndicatorConfig:
    """
    Validate one configuration entry.

    Accepts an already-built config model or a JSON-shaped dict.
    Raises pydantic.ValidationError for unknown kinds or bad parameters.
    """
    if isinstance(raw, _IndicatorConfigBase):
        return raw
    return _config_adapter.validate_python(raw)


class IndicatorSettings(BaseModel):
    """Container for all indicator configurations."""

    indicators: list[IndicatorConfig] = Field(default_factory=list)

    @property
    def enabled_indicators(self) -> list[IndicatorConfig]:
        return [ind for ind in self.indicators if ind.enabled]

    def as_mapping(self) -> dict[str, IndicatorConfig]:
        return {ind.id: ind for ind in self.indicators}

    @classmethod
    def default(cls) -> "IndicatorSettings":
        """One disabled config of every kind."""
        return cls(indicators=[config_type() for config_type in CONFIG_TYPES.values()])

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: Optional[Union[str, bytes]]) -> "IndicatorSettings":
        """Decode stored settings, falling back to defaults on bad input."""
        if not data:
            return cls.default()
        try:
            return cls.model_validate_json(data)
        except ValidationError as e:
            logger.warning(f"Stored indicator settings unreadable, using defaults: {e}")
            return cls.default()


# =============================================================================
# OUTPUT: Realized Series
# =============================================================================


class IndicatorPoint(BaseModel):
    """Single derived value at a source bar's time."""

    model_config = ConfigDict(frozen=True)

    time: int
    value: float


class HistogramPoint(IndicatorPoint):
    """MACD histogram bar with its display direction."""

    direction: HistogramDirection


class LineSeriesData(BaseModel):
    shape: Literal["line"] = "line"
    points: list[IndicatorPoint] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.points


class MACDSeriesData(BaseModel):
    shape: Literal["macd"] = "macd"
    macd: list[IndicatorPoint] = Field(default_factory=list)
    signal: list[IndicatorPoint] = Field(default_factory=list)
    histogram: list[HistogramPoint] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.macd


class BollingerSeriesData(BaseModel):
    shape: Literal["bands"] = "bands"
    upper: list[IndicatorPoint] = Field(default_factory=list)
    middle: list[IndicatorPoint] = Field(default_factory=list)
    lower: list[IndicatorPoint] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.middle


SeriesData = Annotated[
    Union[LineSeriesData, MACDSeriesData, BollingerSeriesData],
    Field(discriminator="shape"),
]


class PlacementHint(BaseModel):
    """Where the host should draw a newly created series."""

    model_config = ConfigDict(frozen=True)

    pane: Pane
    price_scale_id: str
    scale_margin_top: float = Field(..., ge=0, le=1)
    scale_margin_bottom: float = Field(..., ge=0, le=1)
    value_range: Optional[tuple[float, float]] = Field(
        default=None, description="Fixed bounds for oscillators, None if unbounded"
    )


_OVERLAY_PLACEMENT = PlacementHint(
    pane=Pane.OVERLAY,
    price_scale_id="right",
    scale_margin_top=0.1,
    scale_margin_bottom=0.3,
)

PLACEMENT_HINTS = {
    IndicatorKind.SMA: _OVERLAY_PLACEMENT,
    IndicatorKind.EMA: _OVERLAY_PLACEMENT,
    IndicatorKind.VWAP: _OVERLAY_PLACEMENT,
    IndicatorKind.BOLLINGER_BANDS: _OVERLAY_PLACEMENT,
    IndicatorKind.RSI: PlacementHint(
        pane=Pane.SEPARATE,
        price_scale_id="rsi",
        scale_margin_top=0.85,
        scale_margin_bottom=0.02,
        value_range=(0.0, 100.0),
    ),
    IndicatorKind.MACD: PlacementHint(
        pane=Pane.SEPARATE,
        price_scale_id="macd",
        scale_margin_top=0.9,
        scale_margin_bottom=0.02,
    ),
}


class RealizedSeries(BaseModel):
    """Indicator output currently shown by the host."""

    id: str
    kind: IndicatorKind
    data: SeriesData
    color: str
    placement: PlacementHint


# =============================================================================
# OUTPUT: Effects
# =============================================================================


class SeriesCreated(BaseModel):
    type: Literal["series_created"] = "series_created"
    id: str
    kind: IndicatorKind
    data: SeriesData
    color: str
    placement: PlacementHint


class SeriesUpdated(BaseModel):
    type: Literal["series_updated"] = "series_updated"
    id: str
    kind: IndicatorKind
    data: SeriesData


class SeriesRemoved(BaseModel):
    type: Literal["series_removed"] = "series_removed"
    id: str


SeriesEffect = Annotated[
    Union[SeriesCreated, SeriesUpdated, SeriesRemoved],
    Field(discriminator="type"),
]


class TickResult(BaseModel):
    """
    Outcome of applying one live tick.

    status tells the host whether the bar was appended, revised in place
    or rejected (out of order). effects is empty for rejected ticks.
    """

    status: TickStatus
    time: int
    effects: list[SeriesEffect] = Field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.status != TickStatus.REJECTED
