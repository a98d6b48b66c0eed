"""
Tests for StreamingUpdateHandler tick handling.
"""

import pytest

from chartengine.schemas.indicators import SeriesCreated, SeriesUpdated
from chartengine.schemas.market import TickStatus
from chartengine.services.base import OutOfOrderTickError
from chartengine.services.indicators import IndicatorSeriesManager
from chartengine.services.streaming import StreamingUpdateHandler

CONFIG = {
    "sma": {"kind": "SMA", "enabled": True, "parameters": {"period": 5}},
    "macd": {"kind": "MACD", "enabled": True},
    "bb": {"kind": "BollingerBands", "enabled": True},
    "vwap": {"kind": "VWAP", "enabled": True},
}


@pytest.fixture
def manager():
    return IndicatorSeriesManager()


@pytest.fixture
def handler(manager):
    return StreamingUpdateHandler(manager)


class TestApplyTick:
    """apply_tick(point)."""

    def test_append(self, handler, make_bars, make_bar):
        handler.load(make_bars([1, 2, 3], step=60))

        result = handler.apply_tick(make_bar(180, 4.0))

        assert result.status == TickStatus.APPENDED
        assert result.accepted
        assert [b.time for b in handler.base_series] == [0, 60, 120, 180]

    def test_revise_last_bar(self, handler, make_bars, make_bar):
        handler.load(make_bars([1, 2, 3], step=60))

        result = handler.apply_tick(make_bar(120, 9.0))

        assert result.status == TickStatus.REVISED
        assert len(handler.base_series) == 3
        assert handler.base_series[-1].close == 9.0

    def test_revise_older_bar(self, handler, make_bars, make_bar):
        handler.load(make_bars([1, 2, 3], step=60))

        handler.apply_tick(make_bar(60, 7.0))

        assert [b.close for b in handler.base_series] == [1.0, 7.0, 3.0]

    def test_out_of_order_rejected_without_mutation(self, handler, make_bars, make_bar):
        handler.load(make_bars([1, 2, 3], step=60))
        before = handler.base_series

        with pytest.raises(OutOfOrderTickError):
            handler.apply_tick(make_bar(90, 5.0))

        assert handler.base_series == before

    def test_execute_applies_tick(self, handler, make_bar):
        assert handler.execute(make_bar(0, 1.0)).status == TickStatus.APPENDED
        assert handler.name == "StreamingUpdateHandler"

    def test_first_tick_on_empty_series(self, handler, make_bar):
        result = handler.apply_tick(make_bar(500, 1.0))

        assert result.status == TickStatus.APPENDED
        assert handler.last_time == 500

    def test_effects_follow_configuration(self, handler, manager, make_bars, make_bar):
        handler.load(make_bars(range(10), step=60))
        manager.reconcile({"sma": CONFIG["sma"]}, handler.display_series())

        result = handler.apply_tick(make_bar(600, 10.0))

        assert len(result.effects) == 1
        assert isinstance(result.effects[0], SeriesUpdated)
        assert result.effects[0].data.points[-1].time == 600
        assert result.effects[0].data.points[-1].value == 8.0

    def test_indicator_fills_in_after_minimum_length(
        self, handler, manager, make_bars, make_bar
    ):
        handler.load(make_bars([1, 2, 3], step=60))
        created = manager.reconcile({"sma": CONFIG["sma"]}, handler.display_series())

        assert isinstance(created[0], SeriesCreated)
        assert created[0].data.is_empty

        handler.apply_tick(make_bar(180, 4.0))
        result = handler.apply_tick(make_bar(240, 5.0))

        points = result.effects[0].data.points
        assert [(p.time, p.value) for p in points] == [(240, 3.0)]


class TestLoad:
    def test_sorts_and_keeps_last_duplicate(self, handler, make_bar):
        handler.load([make_bar(120, 3.0), make_bar(0, 1.0), make_bar(120, 4.0)])

        assert [(b.time, b.close) for b in handler.base_series] == [(0, 1.0), (120, 4.0)]

    def test_replaces_previous_series(self, handler, make_bars):
        handler.load(make_bars([1, 2, 3]))
        handler.load(make_bars([5]))

        assert len(handler.base_series) == 1

    def test_base_series_is_a_copy(self, handler, make_bars):
        handler.load(make_bars([1, 2, 3]))
        handler.base_series.clear()

        assert len(handler.base_series) == 3


class TestStreamedMatchesLoaded:
    """Ticking bars in one by one ends where a one-shot load ends."""

    def test_identical_realized_series(self, noisy_bars):
        streamed_manager = IndicatorSeriesManager()
        streamed = StreamingUpdateHandler(streamed_manager)
        streamed.load(noisy_bars[:50])
        streamed_manager.reconcile(CONFIG, streamed.display_series())
        for bar in noisy_bars[50:]:
            streamed.apply_tick(bar)

        loaded_manager = IndicatorSeriesManager()
        loaded = StreamingUpdateHandler(loaded_manager)
        loaded.load(noisy_bars)
        loaded_manager.reconcile(CONFIG, loaded.display_series())

        assert streamed.base_series == loaded.base_series
        assert streamed_manager.realized == loaded_manager.realized

    def test_revisions_match_final_values(self, noisy_bars, make_bar):
        revised_manager = IndicatorSeriesManager()
        revised = StreamingUpdateHandler(revised_manager)
        revised.load(noisy_bars)
        revised_manager.reconcile(CONFIG, revised.display_series())

        last = noisy_bars[-1]
        for close in (last.close + 3, last.close - 2, last.close + 1):
            revised.apply_tick(
                make_bar(last.time, close, open_=last.open, volume=last.volume)
            )

        final = noisy_bars[:-1] + [
            make_bar(last.time, last.close + 1, open_=last.open, volume=last.volume)
        ]
        reference = IndicatorSeriesManager()
        reference.reconcile(CONFIG, final)

        assert revised_manager.realized == reference.realized


class TestTransform:
    def test_display_series_uses_transform(self, manager, make_bars):
        handler = StreamingUpdateHandler(manager, transform=lambda bars: bars[-1:])
        handler.load(make_bars([1, 2, 3]))

        assert [b.close for b in handler.display_series()] == [3.0]
        assert len(handler.base_series) == 3
