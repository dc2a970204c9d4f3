"""
Injected seams for time and randomness.

Decision modules and the turn loop take these as constructor arguments,
so tests can pass a fixed clock or a scripted random source.
"""

import random
from datetime import datetime, timedelta
from typing import List, Optional, Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int:
        """Integer in [a, b], both ends inclusive."""
        ...


class SystemClock:
    def now(self) -> datetime:
        return datetime.utcnow()


class FixedClock:
    """A clock that only moves when told to."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)


class ScriptedRandom:
    """Replays a fixed sequence of values, clamped into each requested range."""

    def __init__(self, values: List[int]):
        if not values:
            raise ValueError("ScriptedRandom needs at least one value")
        self._values = list(values)
        self._index = 0

    def randint(self, a: int, b: int) -> int:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return max(a, min(b, value))


def seeded_random(seed: Optional[int]) -> random.Random:
    return random.Random(seed)
