from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from tabchart.raster.canvas import RGBA, blend_region


def draw_circles(
    dst: np.ndarray,
    circles: Iterable[tuple[float, float, float]],
    color: RGBA,
    *,
    offset: tuple[float, float] = (0.0, 0.0),
) -> None:
    ox, oy = offset
    for cx, cy, r in circles:
        draw_circle(dst, cx + ox, cy + oy, r, color)


def draw_circle(dst: np.ndarray, cx: float, cy: float, r: float, color: RGBA) -> None:
    """Filled disc with a one-pixel soft edge. Radii <= 0 draw nothing."""
    if r <= 0:
        return
    x0 = max(0, int(np.floor(cx - r - 1)))
    x1 = min(dst.shape[1], int(np.ceil(cx + r + 1)) + 1)
    y0 = max(0, int(np.floor(cy - r - 1)))
    y1 = min(dst.shape[0], int(np.ceil(cy + r + 1)) + 1)
    if x0 >= x1 or y0 >= y1:
        return
    yy, xx = np.mgrid[y0:y1, x0:x1]
    dist = np.hypot(xx + 0.5 - cx, yy + 0.5 - cy)
    coverage = np.clip(r + 0.5 - dist, 0.0, 1.0)
    if not np.any(coverage > 0):
        return
    blend_region(dst[y0:y1, x0:x1], color, coverage)
