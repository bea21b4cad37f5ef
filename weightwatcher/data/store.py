from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from ..errors import (
    DataFileExists,
    DataFileNotFound,
    InvalidParameter,
    MalformedDataFile,
    MeasurementNotFound,
)


logger = logging.getLogger(__name__)

COLUMNS = ["id", "day", "value"]
DATE_FORMAT = "%Y-%m-%d"


@dataclass(frozen=True)
class Measurement:
    id: int
    day: date
    value: float


class MeasurementStore:
    """CSV-backed store of dated weight measurements.

    File layout is a header row ``id,day,value`` followed by one row per
    measurement, days as ``YYYY-MM-DD``. Every mutation rewrites the whole
    file; the data set is a few thousand rows at most.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path).expanduser()

    def init(self) -> None:
        if self.path.exists():
            raise DataFileExists(self.path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._write_frame(pd.DataFrame(columns=COLUMNS))
        logger.info("Initialized data file", extra={"path": str(self.path)})

    def measurements(self) -> List[Measurement]:
        """All measurements sorted by day, ties broken by id."""
        df = self._read_frame()
        df = df.sort_values(["day", "id"], kind="mergesort")
        return [
            Measurement(id=int(row.id), day=row.day, value=float(row.value))
            for row in df.itertuples(index=False)
        ]

    def exists(self, measurement_id: int) -> bool:
        df = self._read_frame()
        return bool((df["id"] == measurement_id).any())

    def get(self, measurement_id: int) -> Measurement:
        df = self._read_frame()
        match = df[df["id"] == measurement_id]
        if match.empty:
            raise MeasurementNotFound(measurement_id)
        row = match.iloc[0]
        return Measurement(id=int(row["id"]), day=row["day"], value=float(row["value"]))

    def add(self, day: date, value: float) -> Measurement:
        _check_value(value)
        df = self._read_frame()
        new_id = int(df["id"].max()) + 1 if not df.empty else 1
        row = pd.DataFrame([{"id": new_id, "day": day, "value": float(value)}], columns=COLUMNS)
        df = row if df.empty else pd.concat([df, row], ignore_index=True)
        self._write_frame(df)
        logger.info("Added measurement", extra={"id": new_id, "day": day.isoformat(), "value": value})
        return Measurement(id=new_id, day=day, value=float(value))

    def update(
        self,
        measurement_id: int,
        day: Optional[date] = None,
        value: Optional[float] = None,
    ) -> Measurement:
        if value is not None:
            _check_value(value)
        df = self._read_frame()
        mask = df["id"] == measurement_id
        if not mask.any():
            raise MeasurementNotFound(measurement_id)
        if day is not None:
            df.loc[mask, "day"] = day
        if value is not None:
            df.loc[mask, "value"] = float(value)
        self._write_frame(df)
        row = df[mask].iloc[0]
        logger.info("Updated measurement", extra={"id": measurement_id})
        return Measurement(id=measurement_id, day=row["day"], value=float(row["value"]))

    def remove(self, measurement_id: int) -> None:
        df = self._read_frame()
        mask = df["id"] == measurement_id
        if not mask.any():
            raise MeasurementNotFound(measurement_id)
        self._write_frame(df[~mask])
        logger.info("Removed measurement", extra={"id": measurement_id})

    # ───────────────────────────── file i/o ─────────────────────────────
    def _read_frame(self) -> pd.DataFrame:
        if not self.path.exists():
            raise DataFileNotFound(self.path)
        try:
            df = pd.read_csv(self.path, dtype={"id": "int64", "value": "float64", "day": "string"})
        except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as exc:
            raise MalformedDataFile(f"cannot read {self.path}: {exc}") from exc

        if list(df.columns) != COLUMNS:
            raise MalformedDataFile(
                f"{self.path}: expected columns {','.join(COLUMNS)}, got {','.join(map(str, df.columns))}"
            )
        if df["id"].duplicated().any():
            raise MalformedDataFile(f"{self.path}: duplicate measurement ids")
        try:
            days = pd.to_datetime(df["day"], format=DATE_FORMAT, errors="raise")
        except (ValueError, TypeError) as exc:
            raise MalformedDataFile(f"{self.path}: invalid date: {exc}") from exc
        if days.isna().any():
            raise MalformedDataFile(f"{self.path}: missing date")
        df["day"] = days.dt.date
        values = df["value"]
        if values.isna().any() or (values.abs() == float("inf")).any():
            raise MalformedDataFile(f"{self.path}: missing or non-finite weight")
        logger.debug("Loaded data file", extra={"path": str(self.path), "rows": len(df)})
        return df

    def _write_frame(self, df: pd.DataFrame) -> None:
        out = df[COLUMNS].copy()
        out["day"] = [d.strftime(DATE_FORMAT) for d in out["day"]]
        out.to_csv(self.path, index=False)


def _check_value(value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameter(f"weight must be a positive number, got {value!r}")
