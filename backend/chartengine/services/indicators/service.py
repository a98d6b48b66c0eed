"""
Indicator Series Manager Implementation

Owns the active indicator configuration and the realized series derived from it.
Every pass is a full recompute from the source series, so calling reconcile
twice with the same inputs yields identical data (updates only).
"""

import logging
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ValidationError

from chartengine.schemas.market import OHLCV
from chartengine.schemas.indicators import (
    PLACEMENT_HINTS,
    IndicatorConfig,
    IndicatorKind,
    IndicatorSettings,
    RealizedSeries,
    SeriesCreated,
    SeriesEffect,
    SeriesRemoved,
    SeriesUpdated,
    parse_indicator_config,
)
from chartengine.services.base import MalformedConfigError, ServiceError
from chartengine.services.indicators.calculations import OHLCVData
from chartengine.services.indicators.interface import (
    ConfigInput,
    IndicatorServiceInterface,
)
from chartengine.services.indicators.series import compute_series

logger = logging.getLogger(__name__)


class IndicatorSeriesManager(IndicatorServiceInterface):
    """
    Indicator Series Manager.

    State:
        _config_by_id: last accepted configuration (malformed entries dropped)
        _realized_by_id: series currently shown by the host

    One instance per chart; nothing here is shared between instances.
    """

    def __init__(self):
        self._config_by_id: dict[str, IndicatorConfig] = {}
        self._realized_by_id: dict[str, RealizedSeries] = {}

    @property
    def config(self) -> dict[str, IndicatorConfig]:
        return dict(self._config_by_id)

    @property
    def enabled_ids(self) -> list[str]:
        return [cid for cid, cfg in self._config_by_id.items() if cfg.enabled]

    @property
    def realized(self) -> dict[str, RealizedSeries]:
        return {
            cid: series.model_copy(deep=True)
            for cid, series in self._realized_by_id.items()
        }

    def execute(self, input_data: Sequence[OHLCV]) -> list[SeriesEffect]:
        """Recompute every active indicator against a new source series."""
        return self.recompute(input_data)

    def reconcile(
        self, config: ConfigInput, source: Sequence[OHLCV]
    ) -> list[SeriesEffect]:
        """Replace the configuration, then realize it against `source`."""
        self._config_by_id = self._parse_config(config)
        return self._realize(source)

    def recompute(
        self, source: Sequence[OHLCV], ids: Optional[Iterable[str]] = None
    ) -> list[SeriesEffect]:
        """
        Recompute under the current configuration.

        With `ids`, only those enabled indicators are recomputed and nothing is
        removed; without it this is a full reconciliation pass.
        """
        only = set(ids) if ids is not None else None
        return self._realize(source, only=only)

    def clear(self) -> list[SeriesEffect]:
        """Remove every realized series and forget the configuration."""
        logger.info(f"Clearing {len(self._realized_by_id)} indicator series")
        effects: list[SeriesEffect] = [
            SeriesRemoved(id=cid) for cid in self._realized_by_id
        ]
        self._realized_by_id.clear()
        self._config_by_id.clear()
        return effects

    # ============ Internals ============

    def _parse_config(self, config: ConfigInput) -> dict[str, IndicatorConfig]:
        """Validate each entry on its own; a bad entry never rejects the batch."""
        if isinstance(config, IndicatorSettings):
            config = config.as_mapping()

        parsed: dict[str, IndicatorConfig] = {}
        for cid, raw in config.items():
            try:
                parsed[cid] = self._parse_entry(cid, raw)
            except MalformedConfigError as e:
                logger.warning(f"Ignoring indicator {cid}: {e.message}")
        return parsed

    def _parse_entry(self, cid: str, raw) -> IndicatorConfig:
        if not isinstance(cid, str):
            raise MalformedConfigError(
                self.name, f"indicator id must be a string, got {type(cid).__name__}"
            )
        if isinstance(raw, BaseModel):
            raw = raw.model_dump()
        if isinstance(raw, dict):
            raw = {**raw, "id": cid}
        try:
            entry = parse_indicator_config(raw)
        except ValidationError as e:
            raise MalformedConfigError(
                self.name,
                f"invalid configuration ({e.error_count()} errors)",
                details={"errors": e.errors(include_url=False)},
            )
        return entry

    def _realize(
        self, source: Sequence[OHLCV], only: Optional[set] = None
    ) -> list[SeriesEffect]:
        effects: list[SeriesEffect] = []
        enabled = self.enabled_ids

        if only is None:
            keep = set(enabled) if source else set()
            for cid in list(self._realized_by_id):
                if cid not in keep:
                    effects.append(self._remove(cid))

        if not source:
            return effects

        data = OHLCVData.from_candles(source)
        for cid in enabled:
            if only is not None and cid not in only:
                continue
            cfg = self._config_by_id[cid]
            try:
                series_data = compute_series(cfg, data)
                effects.extend(self._store(cfg, series_data))
            except ServiceError as e:
                logger.warning(f"Indicator {cid} skipped: {e.message}")
                if cid in self._realized_by_id:
                    effects.append(self._remove(cid))
                continue
            except Exception:
                logger.exception(f"Error calculating indicator {cid}")
                if cid in self._realized_by_id:
                    effects.append(self._remove(cid))
                continue

        return effects

    def _store(self, cfg: IndicatorConfig, series_data) -> list[SeriesEffect]:
        """
        Record the new data and describe the change for the host.

        Normally one effect per id. A kind or color change is the one exception:
        the host cannot restyle a drawn series in place, so the id gets a removal
        followed by a creation in the same pass.
        """
        kind = IndicatorKind(cfg.kind)
        placement = PLACEMENT_HINTS[kind]
        # Build before touching state so a failure leaves this id as it was
        realized = RealizedSeries(
            id=cfg.id,
            kind=kind,
            data=series_data,
            color=cfg.color,
            placement=placement,
        )
        existing = self._realized_by_id.get(cfg.id)
        effects: list[SeriesEffect] = []

        if existing is not None and (existing.kind != kind or existing.color != cfg.color):
            # Kind or color changed under the same id: host must redraw from scratch
            effects.append(self._remove(cfg.id))
            existing = None

        self._realized_by_id[cfg.id] = realized

        if existing is None:
            logger.info(f"Created {kind.value} series {cfg.id}")
            effects.append(
                SeriesCreated(
                    id=cfg.id,
                    kind=kind,
                    data=series_data,
                    color=cfg.color,
                    placement=placement,
                )
            )
        else:
            effects.append(SeriesUpdated(id=cfg.id, kind=kind, data=series_data))
        return effects

    def _remove(self, cid: str) -> SeriesRemoved:
        del self._realized_by_id[cid]
        logger.info(f"Removed indicator series {cid}")
        return SeriesRemoved(id=cid)
