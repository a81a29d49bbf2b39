from __future__ import annotations

import numpy as np


RGBA = tuple[int, int, int, int]


def new_canvas(width: int, height: int, color: RGBA = (255, 255, 255, 255)) -> np.ndarray:
    if width <= 0 or height <= 0:
        raise ValueError("canvas width/height must be > 0")
    canvas = np.empty((height, width, 4), dtype=np.uint8)
    canvas[:, :] = np.asarray(color, dtype=np.uint8)
    return canvas


def draw_pixel(dst: np.ndarray, x: int, y: int, color: RGBA, coverage: float = 1.0) -> None:
    if y < 0 or y >= dst.shape[0] or x < 0 or x >= dst.shape[1]:
        return
    blend_region(dst[y : y + 1, x : x + 1], color, coverage)


def draw_hline(dst: np.ndarray, x0: int, x1: int, y: int, color: RGBA) -> None:
    if y < 0 or y >= dst.shape[0]:
        return
    xa = max(0, min(x0, x1))
    xb = min(dst.shape[1] - 1, max(x0, x1))
    if xa > xb:
        return
    blend_region(dst[y : y + 1, xa : xb + 1], color)


def draw_vline(dst: np.ndarray, x: int, y0: int, y1: int, color: RGBA) -> None:
    if x < 0 or x >= dst.shape[1]:
        return
    ya = max(0, min(y0, y1))
    yb = min(dst.shape[0] - 1, max(y0, y1))
    if ya > yb:
        return
    blend_region(dst[ya : yb + 1, x : x + 1], color)


def blend_region(view: np.ndarray, color: RGBA, coverage: float | np.ndarray = 1.0) -> None:
    a = (color[3] / 255.0) * np.asarray(coverage, dtype=np.float32)
    if np.ndim(a) == 2:
        a = a[:, :, None]
    current = view[:, :, :3].astype(np.float32)
    src = np.asarray(color[:3], dtype=np.float32)
    view[:, :, :3] = np.clip(src * a + current * (1.0 - a), 0, 255).astype(np.uint8)
    view[:, :, 3] = 255
