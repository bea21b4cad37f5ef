from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from ..data.store import MeasurementStore
from .moving_average import DEFAULT_WINDOW_SIZE, MovingAverage


logger = logging.getLogger(__name__)


@dataclass
class HistoryRow:
    id: int
    day: date
    value: float
    average: float


@dataclass
class Summary:
    day: date
    value: float  # latest raw measurement
    average: float  # smoothed weight at that day
    window: int
    count: int


def history(store: MeasurementStore, window: int = DEFAULT_WINDOW_SIZE) -> List[HistoryRow]:
    """Pair every measurement, oldest first, with its trailing moving average.

    The engine is built before the store is read, so an invalid window fails
    without producing any rows.
    """
    engine = MovingAverage(window)
    rows: List[HistoryRow] = []
    for m in store.measurements():
        rows.append(HistoryRow(id=m.id, day=m.day, value=m.value, average=engine.consume(m.value)))
    logger.debug("Built history report", extra={"rows": len(rows), "window": window})
    return rows


def summary(store: MeasurementStore, window: int = DEFAULT_WINDOW_SIZE) -> Optional[Summary]:
    """Current weight: the smoothed value at the latest measurement."""
    rows = history(store, window)
    if not rows:
        return None
    last = rows[-1]
    return Summary(day=last.day, value=last.value, average=last.average, window=window, count=len(rows))
