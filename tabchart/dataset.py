from __future__ import annotations

from dataclasses import dataclass
import math

import numpy as np


DEFAULT_X_LABEL = "X-Axis"
DEFAULT_Y_LABEL = "Y-Axis"


@dataclass(frozen=True)
class DataPoint:
    x: float
    y: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"data point must be finite: ({self.x!r}, {self.y!r})")


@dataclass(frozen=True)
class AxisHeader:
    x_label: str = DEFAULT_X_LABEL
    y_label: str = DEFAULT_Y_LABEL


@dataclass(frozen=True)
class Dataset:
    points: tuple[DataPoint, ...] = ()
    header: AxisHeader = AxisHeader()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    def sorted_by_x(self) -> "Dataset":
        # sorted() is stable, so points sharing an x keep their file order.
        ordered = tuple(sorted(self.points, key=lambda p: p.x))
        return Dataset(points=ordered, header=self.header)

    def as_arrays(self) -> tuple[np.ndarray, np.ndarray]:
        xs = np.fromiter((p.x for p in self.points), dtype=np.float64, count=len(self.points))
        ys = np.fromiter((p.y for p in self.points), dtype=np.float64, count=len(self.points))
        return xs, ys
