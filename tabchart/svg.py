from __future__ import annotations

from pathlib import Path
import xml.etree.ElementTree as ET

from tabchart.scene import AxisFrame, LabelFrame, SceneFrame
from tabchart.transition import Vertex


SVG_NS = "http://www.w3.org/2000/svg"
LINE_STROKE = "steelblue"
POINT_FILL = "red"


def scene_to_svg(frame: SceneFrame) -> str:
    root = ET.Element(
        "svg",
        {
            "xmlns": SVG_NS,
            "id": frame.root_id,
            "viewBox": f"0 0 {frame.width} {frame.height}",
            "preserveAspectRatio": "xMidYMid meet",
            "style": f"max-width: {frame.width}px; height: auto;",
        },
    )
    plot = ET.SubElement(root, "g", {"transform": _translate(*frame.origin)})
    for axis in (frame.x_axis, frame.y_axis):
        if axis is not None:
            _append_axis(plot, axis)
    for label in (frame.x_label, frame.y_label):
        _append_label(plot, label)
    ET.SubElement(
        plot,
        "path",
        {
            "class": "data-line",
            "fill": "none",
            "stroke": LINE_STROKE,
            "stroke-width": "1.5",
            "d": path_data(frame.line),
        },
    )
    for point in frame.points:
        ET.SubElement(
            plot,
            "circle",
            {"class": "data-point", "cx": _num(point.cx), "cy": _num(point.cy), "r": _num(point.r), "fill": POINT_FILL},
        )
    return ET.tostring(root, encoding="unicode")


def write_svg(frame: SceneFrame, path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(scene_to_svg(frame), encoding="utf-8")
    return out


def path_data(vertices: tuple[Vertex, ...]) -> str:
    if not vertices:
        return ""
    head, *rest = vertices
    return f"M{_num(head[0])},{_num(head[1])}" + "".join(f"L{_num(x)},{_num(y)}" for x, y in rest)


def _append_axis(parent: ET.Element, axis: AxisFrame) -> None:
    bottom = axis.orient == "bottom"
    group = ET.SubElement(
        parent,
        "g",
        {
            "class": axis.css_class,
            "transform": _translate(*axis.offset),
            "fill": "none",
            "font-size": "10",
            "text-anchor": "middle" if bottom else "end",
        },
    )
    r0, r1 = axis.range
    domain = f"M{_num(r0)},0H{_num(r1)}" if bottom else f"M0,{_num(r0)}V{_num(r1)}"
    ET.SubElement(group, "path", {"class": "domain", "stroke": "currentColor", "d": domain})
    for tick in axis.ticks:
        offset = (tick.position, 0.0) if bottom else (0.0, tick.position)
        tick_group = ET.SubElement(group, "g", {"class": "tick", "transform": _translate(*offset)})
        if bottom:
            ET.SubElement(tick_group, "line", {"stroke": "currentColor", "y2": "6"})
            text = ET.SubElement(tick_group, "text", {"fill": "currentColor", "y": "9", "dy": "0.71em"})
        else:
            ET.SubElement(tick_group, "line", {"stroke": "currentColor", "x2": "-6"})
            text = ET.SubElement(tick_group, "text", {"fill": "currentColor", "x": "-9", "dy": "0.32em"})
        text.text = tick.label


def _append_label(parent: ET.Element, label: LabelFrame) -> None:
    attrs = {"class": label.css_class, "text-anchor": "middle", "x": _num(label.x), "y": _num(label.y)}
    if label.rotate_deg:
        attrs["transform"] = f"rotate({label.rotate_deg})"
    ET.SubElement(parent, "text", attrs).text = label.text


def _translate(x: float, y: float) -> str:
    return f"translate({_num(x)},{_num(y)})"


def _num(value: float) -> str:
    out = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if out in ("-0", "") else out
