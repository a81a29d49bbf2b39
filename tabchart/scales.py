from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import math
import sys

import numpy as np

from tabchart.dataset import Dataset


DEFAULT_NICE_COUNT = 10
DEFAULT_DOMAIN = (0.0, 1.0)

_E10 = math.sqrt(50.0)
_E5 = math.sqrt(10.0)
_E2 = math.sqrt(2.0)


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    range: tuple[float, float]

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (*self.domain, *self.range)):
            raise ValueError(f"scale bounds must be finite: domain={self.domain} range={self.range}")

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return float(r0)
        return float(r0 + _unit(value, d0, d1) * (r1 - r0))

    def map(self, values: np.ndarray) -> np.ndarray:
        d0, d1 = self.domain
        r0, r1 = self.range
        arr = np.asarray(values, dtype=np.float64)
        if d1 == d0:
            return np.full(arr.shape, float(r0), dtype=np.float64)
        return r0 + _unit(arr, d0, d1) * (r1 - r0)

    def ticks(self, count: int) -> np.ndarray:
        return generate_nice_ticks(self.domain[0], self.domain[1], count)

    def tick_labels(self, count: int) -> list[str]:
        return format_ticks_for_axis(self.ticks(count))


@dataclass(frozen=True)
class ScalePair:
    x: LinearScale
    y: LinearScale


def build_scales(
    dataset: Dataset,
    plot_width: float,
    plot_height: float,
    *,
    nice_count: int = DEFAULT_NICE_COUNT,
) -> ScalePair:
    if plot_width <= 0 or plot_height <= 0:
        raise ValueError("plot width/height must be > 0")
    xs, ys = dataset.as_arrays()
    x_domain = nice_domain(*data_extent(xs), count=nice_count)
    y_domain = nice_domain(*data_extent(ys), count=nice_count)
    return ScalePair(
        x=LinearScale(domain=x_domain, range=(0.0, float(plot_width))),
        # Screen y grows downward, so the domain minimum sits at the bottom.
        y=LinearScale(domain=y_domain, range=(float(plot_height), 0.0)),
    )


def data_extent(values: np.ndarray) -> tuple[float, float]:
    if values.size == 0:
        return DEFAULT_DOMAIN
    return (float(np.min(values)), float(np.max(values)))


def nice_domain(vmin: float, vmax: float, count: int = DEFAULT_NICE_COUNT) -> tuple[float, float]:
    """Extend [vmin, vmax] outward to round multiples of a 1/2/5 step."""
    if not (math.isfinite(vmin) and math.isfinite(vmax)):
        raise ValueError("domain bounds must be finite")
    if count <= 0:
        raise ValueError("count must be > 0")
    lo, hi = (vmin, vmax) if vmin <= vmax else (vmax, vmin)
    if lo == hi:
        return (float(lo), float(hi))

    start, stop = lo, hi
    prev_step: float | None = None
    for _ in range(10):
        step, inverse = _tick_increment(start, stop, count)
        if step <= 0 or step == prev_step:
            break
        next_start = _snap_down(start, step, inverse)
        next_stop = _snap_up(stop, step, inverse)
        if not (math.isfinite(next_start) and math.isfinite(next_stop)):
            # Rounding outward would leave the float range; keep the last finite bounds.
            break
        start, stop = next_start, next_stop
        prev_step = step
    # Float snapping may land a hair inside the raw extent.
    return (float(min(start, lo)), float(max(stop, hi)))


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    lo, hi = (vmin, vmax) if vmin < vmax else (vmax, vmin)
    step, inverse = _tick_increment(lo, hi, target)
    if step <= 0:
        return np.asarray([], dtype=np.float64)

    if inverse is not None:
        first = math.ceil(lo * inverse)
        last = math.floor(hi * inverse)
        ticks = np.arange(first, last + 1, dtype=np.float64) / inverse
    else:
        first = math.ceil(lo / step)
        last = math.floor(hi / step)
        ticks = np.arange(first, last + 1, dtype=np.float64) * step
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return ticks


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    abs_v = abs(value)
    if abs_v != 0 and (abs_v >= 1e6 or abs_v < 1e-6):
        return f"{value:.4e}"

    decimals = _decimals_from_step(step) if step is not None else 6
    d = Decimal(str(value))
    try:
        q = d.quantize(Decimal("1").scaleb(-decimals))
    except InvalidOperation:
        q = d
    out = format(q, "f")
    if "." in out:
        out = out.rstrip("0").rstrip(".")
    if out == "-0":
        out = "0"
    return out


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _tick_increment(vmin: float, vmax: float, count: int) -> tuple[float, float | None]:
    """Return (step, inverse); inverse is set for sub-unit steps to keep snapping exact."""
    raw = (vmax - vmin) / max(count, 1)
    if not math.isfinite(raw) or raw <= 0:
        return (0.0, None)
    power = math.floor(math.log10(raw))
    magnitude = 10.0**power
    if magnitude == 0.0:
        return (0.0, None)
    error = raw / magnitude
    if error >= _E10:
        factor = 10
    elif error >= _E5:
        factor = 5
    elif error >= _E2:
        factor = 2
    else:
        factor = 1
    if power >= 0:
        step = factor * 10**power
        if step > sys.float_info.max:
            return (0.0, None)
        return (float(step), None)
    scale = 10 ** (-power)
    if scale > sys.float_info.max:
        # Subnormal spans have no representable inverse; snap on the step itself.
        step = factor * 10.0**power
        return (step, None) if step > 0 else (0.0, None)
    inverse = float(scale) / factor
    return (1.0 / inverse, inverse)


def _snap_down(value: float, step: float, inverse: float | None) -> float:
    if inverse is not None:
        return math.floor(value * inverse) / inverse
    return math.floor(value / step) * step


def _snap_up(value: float, step: float, inverse: float | None) -> float:
    if inverse is not None:
        return math.ceil(value * inverse) / inverse
    return math.ceil(value / step) * step


def _decimals_from_step(step: float) -> int:
    if step <= 0 or not np.isfinite(step):
        return 6
    d = Decimal(str(step)).normalize()
    exp = d.as_tuple().exponent
    decimals = max(0, -int(exp))
    return min(12, decimals)


def _unit(value, d0: float, d1: float):
    """Position of `value` within [d0, d1] as a fraction; scalar or ndarray."""
    span = d1 - d0
    if math.isinf(span):
        # The span overflows for domains near the float limits; halve everything first.
        return (value / 2.0 - d0 / 2.0) / (d1 / 2.0 - d0 / 2.0)
    return (value - d0) / span
