from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import math

from tabchart.config import ColumnSpec
from tabchart.dataset import DEFAULT_X_LABEL, DEFAULT_Y_LABEL, AxisHeader, DataPoint, Dataset


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Extraction:
    dataset: Dataset
    dropped_by_shape: int = 0
    dropped_by_value: int = 0

    @property
    def header(self) -> AxisHeader:
        return self.dataset.header


def extract_dataset(table: Sequence[Sequence[str]], columns: ColumnSpec | None = None) -> Extraction:
    spec = columns if columns is not None else ColumnSpec()
    if not table:
        LOGGER.warning("Table is empty or could not be parsed.")
        return Extraction(dataset=Dataset())

    rows = [row for row in table if len(row) == spec.column_count]
    dropped_by_shape = len(table) - len(rows)
    if not rows:
        LOGGER.warning("No rows with exactly %d columns found.", spec.column_count)
        return Extraction(dataset=Dataset(header=_fallback_header(table[0], spec)), dropped_by_shape=dropped_by_shape)
    if dropped_by_shape:
        LOGGER.warning("Dropped %d rows without exactly %d columns.", dropped_by_shape, spec.column_count)

    header_row = rows[0]
    header = AxisHeader(
        x_label=header_row[spec.x_index] or DEFAULT_X_LABEL,
        y_label=header_row[spec.y_index] or DEFAULT_Y_LABEL,
    )

    points: list[DataPoint] = []
    dropped_by_value = 0
    for index, row in enumerate(rows[1:], start=1):
        raw_x = row[spec.x_index]
        raw_y = row[spec.y_index]
        x = coerce_number(raw_x)
        y = coerce_number(raw_y)
        if x is None or y is None:
            dropped_by_value += 1
            LOGGER.warning("Skipping row %d: invalid numeric data (%r, %r)", index, raw_x, raw_y)
            continue
        points.append(DataPoint(x=x, y=y))

    LOGGER.info("Processed %d valid data points.", len(points))
    return Extraction(
        dataset=Dataset(points=tuple(points), header=header),
        dropped_by_shape=dropped_by_shape,
        dropped_by_value=dropped_by_value,
    )


def coerce_number(raw: str) -> float | None:
    """Parse a cell as a finite decimal literal, or return None."""
    text = raw.strip()
    if not text or "_" in text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _fallback_header(first_row: Sequence[str], spec: ColumnSpec) -> AxisHeader:
    if len(first_row) > max(spec.x_index, spec.y_index):
        return AxisHeader(x_label=first_row[spec.x_index], y_label=first_row[spec.y_index])
    return AxisHeader()
