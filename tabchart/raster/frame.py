from __future__ import annotations

from dataclasses import dataclass
import math
from pathlib import Path

import numpy as np
from PIL import Image

from tabchart.raster.canvas import RGBA, draw_hline, draw_vline, new_canvas
from tabchart.raster.draw_lines import draw_polyline
from tabchart.raster.draw_markers import draw_circles
from tabchart.raster.draw_text import draw_text, text_size
from tabchart.scene import AxisFrame, LabelFrame, SceneFrame


@dataclass(frozen=True)
class FrameStyle:
    background: RGBA = (255, 255, 255, 255)
    axis_color: RGBA = (0, 0, 0, 255)
    text_color: RGBA = (0, 0, 0, 255)
    line_color: RGBA = (70, 130, 180, 255)
    point_color: RGBA = (214, 39, 40, 255)
    line_width: int = 2
    tick_size: int = 6
    tick_padding: int = 3
    tick_font_px: float = 10.0
    label_font_px: float = 12.0


def rasterize(frame: SceneFrame, style: FrameStyle | None = None) -> np.ndarray:
    """Paint a resolved scene frame into an (H, W, 4) uint8 canvas."""
    style = style if style is not None else FrameStyle()
    canvas = new_canvas(frame.width, frame.height, color=style.background)
    ox, oy = frame.origin

    for axis in (frame.x_axis, frame.y_axis):
        if axis is not None:
            _draw_axis(canvas, axis, origin=(ox, oy), style=style)
    for label in (frame.x_label, frame.y_label):
        _draw_label(canvas, label, origin=(ox, oy), style=style)

    draw_polyline(canvas, frame.line, style.line_color, width=style.line_width, offset=(ox, oy))
    draw_circles(canvas, ((p.cx, p.cy, p.r) for p in frame.points), style.point_color, offset=(ox, oy))
    return canvas


def write_png(rgba: np.ndarray, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(rgba)).save(out, format="PNG")
    return out


def _draw_axis(canvas: np.ndarray, axis: AxisFrame, *, origin: tuple[float, float], style: FrameStyle) -> None:
    bx = int(round(origin[0] + axis.offset[0]))
    by = int(round(origin[1] + axis.offset[1]))
    r0, r1 = (int(round(v)) for v in axis.range)
    tick_gap = style.tick_size + style.tick_padding
    if axis.orient == "bottom":
        draw_hline(canvas, bx + r0, bx + r1, by, style.axis_color)
        for tick in axis.ticks:
            px = bx + int(round(tick.position))
            draw_vline(canvas, px, by, by + style.tick_size, style.axis_color)
            draw_text(canvas, px, by + tick_gap, tick.label, style.text_color, anchor="middle", font_size_px=style.tick_font_px)
        return

    draw_vline(canvas, bx, by + r0, by + r1, style.axis_color)
    for tick in axis.ticks:
        py = by + int(round(tick.position))
        draw_hline(canvas, bx - style.tick_size, bx, py, style.axis_color)
        _, h = text_size(tick.label, font_size_px=style.tick_font_px)
        draw_text(canvas, bx - tick_gap, py - h // 2, tick.label, style.text_color, anchor="end", font_size_px=style.tick_font_px)


def _draw_label(canvas: np.ndarray, label: LabelFrame, *, origin: tuple[float, float], style: FrameStyle) -> None:
    if not label.text:
        return
    # Label coordinates live in the rotated frame; map the anchor point back to screen space.
    theta = math.radians(label.rotate_deg)
    sx = origin[0] + label.x * math.cos(theta) - label.y * math.sin(theta)
    sy = origin[1] + label.x * math.sin(theta) + label.y * math.cos(theta)
    w, h = text_size(label.text, font_size_px=style.label_font_px, rotate_deg=label.rotate_deg)
    if label.rotate_deg % 180 == 0:
        # Text baseline sits on the anchor point.
        draw_text(canvas, int(round(sx)), int(round(sy)) - h, label.text, style.text_color, anchor="middle", font_size_px=style.label_font_px)
        return
    draw_text(
        canvas,
        int(round(sx)) - w,
        int(round(sy)) - h // 2,
        label.text,
        style.text_color,
        font_size_px=style.label_font_px,
        rotate_deg=label.rotate_deg,
    )
