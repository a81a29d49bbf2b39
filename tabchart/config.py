from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
import tomllib
from typing import Any

from tabchart.errors import ConfigError


@dataclass(frozen=True)
class ColumnSpec:
    x_index: int = 2
    y_index: int = 3
    column_count: int = 6

    def __post_init__(self) -> None:
        if self.column_count <= 0:
            raise ValueError("column_count must be > 0")
        if self.x_index < 0 or self.y_index < 0:
            raise ValueError("column indices must be >= 0")
        if self.x_index >= self.column_count or self.y_index >= self.column_count:
            raise ValueError("column indices must be < column_count")


@dataclass(frozen=True)
class Insets:
    top: int = 20
    right: int = 30
    bottom: int = 50
    left: int = 60

    def __post_init__(self) -> None:
        if self.left < 0 or self.right < 0 or self.top < 0 or self.bottom < 0:
            raise ValueError("insets must be >= 0")


@dataclass(frozen=True)
class ChartLayout:
    width: int = 600
    height: int = 400
    margin: Insets = field(default_factory=Insets)
    tick_count: int = 5
    root_id: str = "svgVis"

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("chart width/height must be > 0")
        if self.tick_count <= 0:
            raise ValueError("tick_count must be > 0")
        if self.inner_width <= 0 or self.inner_height <= 0:
            raise ValueError("margins leave no room for the plot area")
        if not self.root_id.strip():
            raise ValueError("root_id must be non-empty")

    @property
    def inner_width(self) -> int:
        return self.width - self.margin.left - self.margin.right

    @property
    def inner_height(self) -> int:
        return self.height - self.margin.top - self.margin.bottom


@dataclass(frozen=True)
class TransitionTimings:
    """Durations in milliseconds. Lines outlast points so the curve settles last."""

    axis_ms: float = 500.0
    point_ms: float = 500.0
    line_ms: float = 750.0
    clear_ms: float = 300.0
    point_radius: float = 4.0

    def __post_init__(self) -> None:
        for name in ("axis_ms", "point_ms", "line_ms", "clear_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")
        if self.point_radius <= 0:
            raise ValueError("point_radius must be > 0")


@dataclass(frozen=True)
class ChartConfig:
    columns: ColumnSpec = field(default_factory=ColumnSpec)
    layout: ChartLayout = field(default_factory=ChartLayout)
    timings: TransitionTimings = field(default_factory=TransitionTimings)

    def with_columns(
        self,
        *,
        x_index: int | None = None,
        y_index: int | None = None,
        column_count: int | None = None,
    ) -> "ChartConfig":
        overrides = {
            key: value
            for key, value in (("x_index", x_index), ("y_index", y_index), ("column_count", column_count))
            if value is not None
        }
        if not overrides:
            return self
        return replace(self, columns=replace(self.columns, **overrides))


def load_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid chart config {config_path}: {exc}") from exc
    return config_from_mapping(raw)


def config_from_mapping(raw: dict[str, Any]) -> ChartConfig:
    _reject_unknown(raw, {"columns", "layout", "timings"}, "config")
    layout_raw = dict(_table(raw, "layout"))
    margin_raw = layout_raw.pop("margin", {})
    if not isinstance(margin_raw, dict):
        raise ConfigError("layout.margin must be a table")
    try:
        columns = _build(ColumnSpec, _table(raw, "columns"), "columns")
        margin = _build(Insets, margin_raw, "layout.margin")
        layout = _build(ChartLayout, layout_raw, "layout", margin=margin)
        timings = _build(TransitionTimings, _table(raw, "timings"), "timings")
    except ConfigError:
        raise
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc
    return ChartConfig(columns=columns, layout=layout, timings=timings)


def _table(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"{name} must be a table")
    return value


def _build(cls: type, values: dict[str, Any], section: str, **extra: Any) -> Any:
    allowed = {f.name for f in fields(cls)} - set(extra)
    _reject_unknown(values, allowed, section)
    return cls(**values, **extra)


def _reject_unknown(values: dict[str, Any], allowed: set[str], section: str) -> None:
    unknown = sorted(set(values) - allowed)
    if unknown:
        raise ConfigError(f"unknown {section} keys: {', '.join(unknown)}")
