from .canvas import draw_hline, draw_vline, new_canvas
from .draw_lines import draw_polyline
from .draw_markers import draw_circle, draw_circles
from .draw_text import draw_text, text_size
from .frame import FrameStyle, rasterize, write_png

__all__ = [
    "FrameStyle",
    "draw_circle",
    "draw_circles",
    "draw_hline",
    "draw_polyline",
    "draw_text",
    "draw_vline",
    "new_canvas",
    "rasterize",
    "text_size",
    "write_png",
]
