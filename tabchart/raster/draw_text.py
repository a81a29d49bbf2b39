from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from tabchart.raster.canvas import RGBA, blend_region


TextAnchor = Literal["start", "middle", "end"]

DEFAULT_FONT_FAMILY = "DejaVu Sans"
DEFAULT_FONT_SIZE_PX = 12.0
SANS_FONT_FALLBACK_PATTERNS = (
    "dejavusans",
    "dejavu sans",
    "liberationsans",
    "helvetica",
    "arial",
)
_FONT_DIRS = (
    Path.home() / "Library" / "Fonts",
    Path("/Library/Fonts"),
    Path("/System/Library/Fonts"),
    Path("/usr/share/fonts"),
    Path("/usr/local/share/fonts"),
)


def draw_text(
    dst: np.ndarray,
    x: int,
    y: int,
    text: str,
    color: RGBA,
    *,
    anchor: TextAnchor = "start",
    font_size_px: float = DEFAULT_FONT_SIZE_PX,
    rotate_deg: int = 0,
) -> None:
    """Draw `text` with its box top at `y` and its anchor edge at `x` (both after rotation)."""
    if not text:
        return
    font = _load_font(DEFAULT_FONT_FAMILY, font_size_px)
    mask = _rotate_mask(_render_mask(text, font), rotate_deg=rotate_deg)
    h, w = mask.shape
    if anchor == "middle":
        x -= w // 2
    elif anchor == "end":
        x -= w

    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(dst.shape[1], x + w), min(dst.shape[0], y + h)
    if x1 <= x0 or y1 <= y0:
        return
    coverage = mask[y0 - y : y1 - y, x0 - x : x1 - x].astype(np.float32) / 255.0
    if np.any(coverage > 0):
        blend_region(dst[y0:y1, x0:x1], color, coverage)


def text_size(text: str, *, font_size_px: float = DEFAULT_FONT_SIZE_PX, rotate_deg: int = 0) -> tuple[int, int]:
    font = _load_font(DEFAULT_FONT_FAMILY, font_size_px)
    left, top, right, bottom = font.getbbox(text or "Ag")
    w = max(0, int(right - left)) if text else 0
    h = max(1, int(bottom - top))
    if _normalize_quarter_turns(rotate_deg) % 2 == 1:
        return (h, w)
    return (w, h)


@lru_cache(maxsize=128)
def _render_mask(text: str, font: ImageFont.FreeTypeFont | ImageFont.ImageFont) -> np.ndarray:
    left, top, right, bottom = font.getbbox(text)
    image = Image.new("L", (max(1, int(right - left)), max(1, int(bottom - top))), 0)
    ImageDraw.Draw(image).text((-left, -top), text, fill=255, font=font)
    return np.asarray(image, dtype=np.uint8)


@lru_cache(maxsize=16)
def _load_font(font_family: str, font_size_px: float) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    size = max(1, int(round(font_size_px)))
    font_path = _resolve_font_path(font_family)
    if font_path is None:
        return ImageFont.load_default()
    try:
        return ImageFont.truetype(str(font_path), size=size)
    except OSError:
        return ImageFont.load_default()


def _resolve_font_path(font_family: str) -> Path | None:
    patterns = (font_family.strip().lower(),) + SANS_FONT_FALLBACK_PATTERNS
    candidates: list[Path] = []
    for base in _FONT_DIRS:
        if base.exists():
            for ext in ("*.ttf", "*.otf"):
                candidates.extend(sorted(base.rglob(ext)))
    for pattern in patterns:
        p = pattern.replace(" ", "")
        for path in candidates:
            stem = path.stem.lower().replace(" ", "")
            if stem == p or stem == f"{p}-regular":
                return path
    return None


def _normalize_quarter_turns(rotate_deg: int) -> int:
    if rotate_deg % 90 != 0:
        raise ValueError("rotate_deg must be a multiple of 90")
    return (rotate_deg // 90) % 4


def _rotate_mask(mask: np.ndarray, *, rotate_deg: int) -> np.ndarray:
    # Positive degrees turn clockwise on screen, as in SVG; np.rot90 turns counter-clockwise.
    turns = _normalize_quarter_turns(rotate_deg)
    if turns == 0:
        return mask
    return np.rot90(mask, k=-turns)
