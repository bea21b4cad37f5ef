from __future__ import annotations

from typing import Iterable, Iterator, List

from ..errors import InvalidParameter


DEFAULT_WINDOW_SIZE = 7


class MovingAverage:
    """Trailing moving average over a fixed-capacity circular buffer.

    Each call to :meth:`consume` returns the mean of the last
    ``min(count, window)`` values, the current one included. Until ``window``
    values have been seen the average grows with the data (warm-up); after
    that it is always taken over exactly ``window`` values (steady state).

    Not safe for sharing between callers; one report owns one instance.
    """

    def __init__(self, window: int) -> None:
        if isinstance(window, bool) or not isinstance(window, int) or window <= 0:
            raise InvalidParameter(f"window size must be a positive integer, got {window!r}")
        self._window: int = window
        self._buffer: List[float] = []
        self._cursor: int = 0
        self._sum: float = 0.0
        self._count: int = 0

    @property
    def window(self) -> int:
        return self._window

    @property
    def count(self) -> int:
        return self._count

    @property
    def warmed_up(self) -> bool:
        return self._count >= self._window

    def consume(self, value: float) -> float:
        if self._count < self._window:
            self._buffer.append(value)
            self._sum += value
            self._count += 1
            return self._sum / self._count

        self._buffer[self._cursor] = value
        self._cursor = (self._cursor + 1) % self._window
        # Re-sum the whole window instead of sum -= evicted; no drift on long series.
        self._sum = sum(self._buffer)
        self._count += 1
        return self._sum / self._window


def moving_averages(values: Iterable[float], window: int = DEFAULT_WINDOW_SIZE) -> Iterator[float]:
    """Lazily map each value to its trailing average.

    The engine is built eagerly, so a bad window fails here rather than on the
    first ``next()``.
    """
    engine = MovingAverage(window)
    return (engine.consume(value) for value in values)
