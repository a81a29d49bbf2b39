from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Callable


Easing = Callable[[float], float]
Vertex = tuple[float, float]


def ease_cubic_in_out(t: float) -> float:
    t *= 2.0
    if t <= 1.0:
        return (t * t * t) / 2.0
    t -= 2.0
    return (t * t * t + 2.0) / 2.0


def lerp(a: float, b: float, t: float) -> float:
    delta = b - a
    if math.isinf(delta):
        return a * (1.0 - t) + b * t
    return a + delta * t


@dataclass(frozen=True)
class Transition:
    start_ms: float
    duration_ms: float
    ease: Easing = ease_cubic_in_out

    @property
    def end_ms(self) -> float:
        return self.start_ms + self.duration_ms

    def finished(self, now_ms: float) -> bool:
        return now_ms >= self.end_ms

    def progress(self, now_ms: float) -> float:
        if self.duration_ms <= 0 or now_ms >= self.end_ms:
            return 1.0
        if now_ms <= self.start_ms:
            return 0.0
        return self.ease((now_ms - self.start_ms) / self.duration_ms)


@dataclass
class AnimatedValue:
    """A scalar attribute that tweens toward its target value.

    Retargeting mid-flight starts the new tween from the currently displayed value.
    """

    target: float
    origin: float | None = None
    transition: Transition | None = None

    def value_at(self, now_ms: float) -> float:
        if self.transition is None or self.origin is None:
            return self.target
        return lerp(self.origin, self.target, self.transition.progress(now_ms))

    def animate_to(self, target: float, *, now_ms: float, duration_ms: float, ease: Easing = ease_cubic_in_out) -> None:
        self.origin = self.value_at(now_ms)
        self.target = float(target)
        self.transition = Transition(start_ms=now_ms, duration_ms=duration_ms, ease=ease)

    def jump(self, value: float) -> None:
        self.target = float(value)
        self.origin = None
        self.transition = None

    def settled(self, now_ms: float) -> bool:
        return self.transition is None or self.transition.finished(now_ms)

    def settle(self) -> None:
        self.jump(self.target)


def interpolate_polyline(origin: tuple[Vertex, ...], target: tuple[Vertex, ...], t: float) -> tuple[Vertex, ...]:
    """Blend two polylines vertex by vertex.

    The shorter one is padded by repeating its last vertex; an empty side borrows the other
    side's vertices so the shape grows out of (or collapses into) itself.
    """
    if t >= 1.0:
        return target
    if t <= 0.0:
        return origin
    if not origin:
        origin = target
    if not target:
        return origin
    n = max(len(origin), len(target))
    src = _pad(origin, n)
    dst = _pad(target, n)
    return tuple((lerp(a[0], b[0], t), lerp(a[1], b[1], t)) for a, b in zip(src, dst))


def _pad(vertices: tuple[Vertex, ...], n: int) -> tuple[Vertex, ...]:
    if len(vertices) >= n:
        return vertices
    return vertices + (vertices[-1],) * (n - len(vertices))
