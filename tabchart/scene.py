from __future__ import annotations

from dataclasses import dataclass, field
import math
from typing import Literal

from tabchart.config import ChartLayout
from tabchart.scales import LinearScale
from tabchart.transition import AnimatedValue, Transition, Vertex, interpolate_polyline


SceneState = Literal["empty", "populated"]
AxisOrient = Literal["bottom", "left"]


@dataclass(frozen=True)
class AxisTick:
    value: float
    position: float
    label: str


@dataclass(frozen=True)
class AxisFrame:
    css_class: str
    orient: AxisOrient
    offset: tuple[float, float]
    range: tuple[float, float]
    ticks: tuple[AxisTick, ...]


@dataclass(frozen=True)
class LabelFrame:
    css_class: str
    text: str
    x: float
    y: float
    rotate_deg: int


@dataclass(frozen=True)
class PointFrame:
    cx: float
    cy: float
    r: float


@dataclass(frozen=True)
class SceneFrame:
    root_id: str
    width: int
    height: int
    origin: tuple[float, float]
    state: SceneState
    x_axis: AxisFrame | None
    y_axis: AxisFrame | None
    x_label: LabelFrame
    y_label: LabelFrame
    line: tuple[Vertex, ...]
    points: tuple[PointFrame, ...]


@dataclass
class AxisGroup:
    css_class: str
    orient: AxisOrient
    offset: tuple[float, float]
    range: tuple[float, float]
    domain_lo: AnimatedValue | None = None
    domain_hi: AnimatedValue | None = None
    tick_values: tuple[float, ...] = ()
    tick_labels: tuple[str, ...] = ()

    @property
    def configured(self) -> bool:
        return self.domain_lo is not None and self.domain_hi is not None

    def retarget(self, scale: LinearScale, *, tick_count: int, now_ms: float, duration_ms: float) -> None:
        lo, hi = scale.domain
        if self.domain_lo is None or self.domain_hi is None:
            # First configuration has nothing to animate from.
            self.domain_lo = AnimatedValue(target=lo)
            self.domain_hi = AnimatedValue(target=hi)
        else:
            self.domain_lo.animate_to(lo, now_ms=now_ms, duration_ms=duration_ms)
            self.domain_hi.animate_to(hi, now_ms=now_ms, duration_ms=duration_ms)
        self.range = scale.range
        self.tick_values = tuple(float(v) for v in scale.ticks(tick_count))
        self.tick_labels = tuple(scale.tick_labels(tick_count))

    def scale_at(self, now_ms: float) -> LinearScale | None:
        if self.domain_lo is None or self.domain_hi is None:
            return None
        return LinearScale(domain=(self.domain_lo.value_at(now_ms), self.domain_hi.value_at(now_ms)), range=self.range)

    def resolve(self, now_ms: float) -> AxisFrame | None:
        scale = self.scale_at(now_ms)
        if scale is None:
            return None
        r_lo, r_hi = min(self.range), max(self.range)
        tol = 1e-6 * max(1.0, r_hi - r_lo)
        ticks: list[AxisTick] = []
        for value, label in zip(self.tick_values, self.tick_labels, strict=False):
            pos = scale(value)
            if r_lo - tol <= pos <= r_hi + tol:
                ticks.append(AxisTick(value=value, position=pos, label=label))
        return AxisFrame(
            css_class=self.css_class,
            orient=self.orient,
            offset=self.offset,
            range=self.range,
            ticks=tuple(ticks),
        )

    def busy_until(self) -> float:
        return max(
            (v.transition.end_ms for v in (self.domain_lo, self.domain_hi) if v is not None and v.transition is not None),
            default=-math.inf,
        )

    def settle(self) -> None:
        for value in (self.domain_lo, self.domain_hi):
            if value is not None:
                value.settle()


@dataclass
class TextNode:
    css_class: str
    x: float
    y: float
    rotate_deg: int = 0
    text: str = ""

    def resolve(self) -> LabelFrame:
        return LabelFrame(css_class=self.css_class, text=self.text, x=self.x, y=self.y, rotate_deg=self.rotate_deg)


@dataclass
class LinePath:
    css_class: str = "data-line"
    origin: tuple[Vertex, ...] = ()
    target: tuple[Vertex, ...] = ()
    transition: Transition | None = None

    def vertices_at(self, now_ms: float) -> tuple[Vertex, ...]:
        if self.transition is None:
            return self.target
        return interpolate_polyline(self.origin, self.target, self.transition.progress(now_ms))

    def retarget(self, vertices: tuple[Vertex, ...], *, now_ms: float, duration_ms: float) -> None:
        self.origin = self.vertices_at(now_ms)
        self.target = vertices
        self.transition = Transition(start_ms=now_ms, duration_ms=duration_ms)

    def busy_until(self) -> float:
        return self.transition.end_ms if self.transition is not None else -math.inf

    def settle(self) -> None:
        self.origin = self.target
        self.transition = None


@dataclass
class PointMark:
    cx: AnimatedValue
    cy: AnimatedValue
    r: AnimatedValue
    remove_at_ms: float | None = None

    @classmethod
    def entering(cls, cx: float, cy: float) -> "PointMark":
        return cls(cx=AnimatedValue(target=cx), cy=AnimatedValue(target=cy), r=AnimatedValue(target=0.0))

    def resolve(self, now_ms: float) -> PointFrame:
        return PointFrame(cx=self.cx.value_at(now_ms), cy=self.cy.value_at(now_ms), r=self.r.value_at(now_ms))

    def busy_until(self) -> float:
        ends = [v.transition.end_ms for v in (self.cx, self.cy, self.r) if v.transition is not None]
        if self.remove_at_ms is not None:
            ends.append(self.remove_at_ms)
        return max(ends, default=-math.inf)

    def settle(self) -> None:
        self.cx.settle()
        self.cy.settle()
        self.r.settle()


@dataclass
class Scene:
    """Retained chart graph that outlives any single dataset.

    Only the reconciler mutates it; exporters read it through `frame()`.
    """

    layout: ChartLayout
    x_axis: AxisGroup
    y_axis: AxisGroup
    x_label: TextNode
    y_label: TextNode
    line: LinePath = field(default_factory=LinePath)
    points: list[PointMark] = field(default_factory=list)
    exiting: list[PointMark] = field(default_factory=list)

    @classmethod
    def create(cls, layout: ChartLayout | None = None) -> "Scene":
        layout = layout if layout is not None else ChartLayout()
        inner_w = float(layout.inner_width)
        inner_h = float(layout.inner_height)
        return cls(
            layout=layout,
            x_axis=AxisGroup(css_class="x-axis", orient="bottom", offset=(0.0, inner_h), range=(0.0, inner_w)),
            y_axis=AxisGroup(css_class="y-axis", orient="left", offset=(0.0, 0.0), range=(inner_h, 0.0)),
            x_label=TextNode(css_class="x-axis-label", x=inner_w / 2.0, y=inner_h + layout.margin.bottom - 10),
            # Coordinates are in the label's rotated frame.
            y_label=TextNode(
                css_class="y-axis-label",
                x=-inner_h / 2.0,
                y=float(-layout.margin.left + 20),
                rotate_deg=-90,
            ),
        )

    @property
    def state(self) -> SceneState:
        return "populated" if self.points else "empty"

    def advance(self, now_ms: float) -> int:
        """Drop exiting points whose exit transition has finished."""
        kept = [p for p in self.exiting if p.remove_at_ms is None or p.remove_at_ms > now_ms]
        removed = len(self.exiting) - len(kept)
        self.exiting = kept
        return removed

    def busy_until(self) -> float:
        ends = [self.x_axis.busy_until(), self.y_axis.busy_until(), self.line.busy_until()]
        ends.extend(p.busy_until() for p in self.points)
        ends.extend(p.busy_until() for p in self.exiting)
        return max(ends)

    def settle(self) -> None:
        self.x_axis.settle()
        self.y_axis.settle()
        self.line.settle()
        for point in self.points:
            point.settle()
        self.exiting.clear()

    def rendered_point_count(self) -> int:
        return len(self.points) + len(self.exiting)

    def frame(self, now_ms: float) -> SceneFrame:
        self.advance(now_ms)
        points = tuple(p.resolve(now_ms) for p in self.points)
        fading = tuple(p.resolve(now_ms) for p in self.exiting)
        return SceneFrame(
            root_id=self.layout.root_id,
            width=self.layout.width,
            height=self.layout.height,
            origin=(float(self.layout.margin.left), float(self.layout.margin.top)),
            state=self.state,
            x_axis=self.x_axis.resolve(now_ms),
            y_axis=self.y_axis.resolve(now_ms),
            x_label=self.x_label.resolve(),
            y_label=self.y_label.resolve(),
            line=self.line.vertices_at(now_ms),
            points=points + fading,
        )
