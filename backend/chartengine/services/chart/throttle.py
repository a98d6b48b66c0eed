"""
Effect Throttle

Coalesces high-rate update effects before they reach a rendering surface.
Creation and removal effects are never delayed; updates go out at most once
per window, keeping only the newest update per indicator id.
"""

import time
from typing import Callable, Optional

from chartengine.schemas.indicators import SeriesEffect, SeriesRemoved, SeriesUpdated


class EffectThrottle:
    """
    Usage:
        throttle = EffectThrottle(window_ms=200)
        render(throttle.push(effects))   # call on every batch
        render(throttle.flush())         # when the host is idle
    """

    def __init__(
        self,
        window_ms: int = 200,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._window = window_ms / 1000.0
        self._clock = clock
        self._pending: dict[str, SeriesUpdated] = {}
        self._last_emit: Optional[float] = None

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def push(self, effects: list[SeriesEffect]) -> list[SeriesEffect]:
        """Queue a batch and return whatever may be emitted now."""
        out: list[SeriesEffect] = []
        for effect in effects:
            if isinstance(effect, SeriesUpdated):
                self._pending[effect.id] = effect
                continue
            if isinstance(effect, SeriesRemoved):
                self._pending.pop(effect.id, None)
            out.append(effect)

        if self._pending and self._window_elapsed():
            out.extend(self.flush())
        return out

    def flush(self) -> list[SeriesEffect]:
        """Emit all pending updates regardless of the window."""
        out: list[SeriesEffect] = list(self._pending.values())
        self._pending.clear()
        self._last_emit = self._clock()
        return out

    def _window_elapsed(self) -> bool:
        if self._window <= 0 or self._last_emit is None:
            return True
        return self._clock() - self._last_emit >= self._window
