"""Signal sources — where drift and novelty values come from.

The health cycle perturbs component load and efficiency, and the
emergence detector scores novelty, from a signal source rather than
calling ``random`` directly. Swap in ``ScriptedSignalSource`` for
deterministic tests, or a telemetry-backed source in production.
"""

from __future__ import annotations

import random
from typing import Iterable, Protocol


class SignalSource(Protocol):
    def uniform(self, low: float, high: float) -> float:
        """A value in [low, high]."""
        ...


class RandomSignalSource:
    """Pseudo-random signals, optionally seeded."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def uniform(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)


class ScriptedSignalSource:
    """Replays fixed unit values, scaled into each requested range.

    A value of 0.5 lands mid-range, so ``ScriptedSignalSource([0.5])``
    produces zero drift. The script repeats when exhausted.
    """

    def __init__(self, values: Iterable[float]) -> None:
        self._values = [min(1.0, max(0.0, v)) for v in values] or [0.5]
        self._index = 0

    def uniform(self, low: float, high: float) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return low + (high - low) * value

    @property
    def calls(self) -> int:
        return self._index
