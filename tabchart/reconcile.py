from __future__ import annotations

import logging

from tabchart.config import TransitionTimings
from tabchart.dataset import Dataset
from tabchart.scales import ScalePair
from tabchart.scene import PointMark, Scene
from tabchart.transition import Vertex


LOGGER = logging.getLogger(__name__)


def render_dataset(
    scene: Scene,
    dataset: Dataset,
    scales: ScalePair,
    *,
    now_ms: float,
    timings: TransitionTimings | None = None,
) -> None:
    """Bring the scene in line with `dataset`, animating from whatever is on screen."""
    timings = timings if timings is not None else TransitionTimings()
    if dataset.is_empty:
        clear_scene(scene, now_ms=now_ms, timings=timings)
        return
    scene.advance(now_ms)

    tick_count = scene.layout.tick_count
    scene.x_axis.retarget(scales.x, tick_count=tick_count, now_ms=now_ms, duration_ms=timings.axis_ms)
    scene.y_axis.retarget(scales.y, tick_count=tick_count, now_ms=now_ms, duration_ms=timings.axis_ms)
    scene.x_label.text = dataset.header.x_label
    scene.y_label.text = dataset.header.y_label

    xs, ys = dataset.sorted_by_x().as_arrays()
    targets: tuple[Vertex, ...] = tuple(zip(scales.x.map(xs).tolist(), scales.y.map(ys).tolist()))
    _join_points(scene, targets, now_ms=now_ms, timings=timings)
    scene.line.retarget(targets, now_ms=now_ms, duration_ms=timings.line_ms)
    LOGGER.debug("Scene reconciled to %d points.", len(targets))


def clear_scene(scene: Scene, *, now_ms: float, timings: TransitionTimings | None = None) -> None:
    """Fade out points, blank the labels and drop the line. Axes keep their last scale."""
    timings = timings if timings is not None else TransitionTimings()
    LOGGER.info("Clearing visualization...")
    scene.advance(now_ms)
    for point in scene.points:
        _exit_point(scene, point, now_ms=now_ms, duration_ms=timings.clear_ms)
    scene.points = []
    scene.x_label.text = ""
    scene.y_label.text = ""
    if scene.line.target or scene.line.transition is not None:
        scene.line.retarget((), now_ms=now_ms, duration_ms=timings.clear_ms)


def _join_points(scene: Scene, targets: tuple[Vertex, ...], *, now_ms: float, timings: TransitionTimings) -> None:
    # Points pair up by index; there is no data key to re-identify them across loads.
    kept = min(len(scene.points), len(targets))
    for point, (cx, cy) in zip(scene.points[:kept], targets[:kept]):
        point.cx.animate_to(cx, now_ms=now_ms, duration_ms=timings.point_ms)
        point.cy.animate_to(cy, now_ms=now_ms, duration_ms=timings.point_ms)
        point.r.animate_to(timings.point_radius, now_ms=now_ms, duration_ms=timings.point_ms)

    for point in scene.points[kept:]:
        _exit_point(scene, point, now_ms=now_ms, duration_ms=timings.point_ms)

    entered: list[PointMark] = []
    for cx, cy in targets[kept:]:
        point = PointMark.entering(cx, cy)
        point.r.animate_to(timings.point_radius, now_ms=now_ms, duration_ms=timings.point_ms)
        entered.append(point)

    scene.points = scene.points[:kept] + entered


def _exit_point(scene: Scene, point: PointMark, *, now_ms: float, duration_ms: float) -> None:
    point.r.animate_to(0.0, now_ms=now_ms, duration_ms=duration_ms)
    point.remove_at_ms = now_ms + duration_ms
    scene.exiting.append(point)
