from __future__ import annotations

import argparse
from dataclasses import dataclass
import json
import logging
import math
from pathlib import Path
import sys

import anyio

from tabchart.adapters import extract_dataset, parse_rows
from tabchart.config import ChartConfig, load_config
from tabchart.errors import ChartLoadError
from tabchart.loader import FileSelection, LoadOrchestrator, LoadResult
from tabchart.raster import rasterize, write_png
from tabchart.scales import build_scales
from tabchart.scene import Scene, SceneFrame
from tabchart.svg import write_svg


@dataclass
class _Timeline:
    """Deterministic clock: each load starts once the previous one has settled."""

    now_ms: float = 0.0

    def now(self) -> float:
        return self.now_ms

    def catch_up(self, scene: Scene) -> None:
        busy = scene.busy_until()
        if math.isfinite(busy):
            self.now_ms = max(self.now_ms, busy)


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    config = _resolve_config(args)
    if args.command == "render":
        return _run_render(args, config)
    if args.command == "inspect":
        return _run_inspect(args, config)
    raise RuntimeError(f"unsupported command: {args.command}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tabchart")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Load one or more tables into a chart and export it.")
    render.add_argument("files", type=Path, nargs="+", help="Tables are loaded in order into the same chart.")
    render.add_argument("--out", type=Path, required=True, help="Output path, .svg or .png.")
    render.add_argument(
        "--at-ms",
        type=float,
        default=None,
        help="Sample the chart this many ms after the last load instead of after it settles.",
    )
    _add_config_arguments(render)

    inspect = sub.add_parser("inspect", help="Print a JSON summary of the extracted dataset.")
    inspect.add_argument("file", type=Path)
    _add_config_arguments(inspect)
    return parser


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", type=Path, default=None, help="Chart config TOML file.")
    parser.add_argument("--x-index", type=int, default=None)
    parser.add_argument("--y-index", type=int, default=None)
    parser.add_argument("--column-count", type=int, default=None)


def _resolve_config(args: argparse.Namespace) -> ChartConfig:
    config = load_config(args.config) if args.config is not None else ChartConfig()
    return config.with_columns(x_index=args.x_index, y_index=args.y_index, column_count=args.column_count)


def _run_render(args: argparse.Namespace, config: ChartConfig) -> int:
    suffix = args.out.suffix.lower()
    if suffix not in {".svg", ".png"}:
        raise ValueError(f"unsupported output format: {args.out.suffix or '<none>'} (use .svg or .png)")

    scene = Scene.create(config.layout)
    timeline = _Timeline()
    errors: list[str] = []
    orchestrator = LoadOrchestrator(scene, config, clock=timeline.now, on_error=errors.append)

    async def _load_all() -> tuple[LoadResult, float]:
        result = LoadResult(status="empty")
        started = timeline.now()
        for path in args.files:
            timeline.catch_up(scene)
            started = timeline.now()
            result = await orchestrator.handle_selection(FileSelection([path]))
            print(f"{path}: {result.status} points={len(result.dataset)}")
        return result, started

    result, last_started = anyio.run(_load_all)
    if args.at_ms is None:
        scene.settle()
        frame = scene.frame(timeline.now())
    else:
        frame = scene.frame(last_started + args.at_ms)
    out = _export(frame, args.out)
    print(f"wrote {out}")

    if result.status == "error":
        print(errors[-1] if errors else result.error, file=sys.stderr)
        return 1
    return 0


def _export(frame: SceneFrame, path: Path) -> Path:
    if path.suffix.lower() == ".svg":
        return write_svg(frame, path)
    return write_png(rasterize(frame), path)


def _run_inspect(args: argparse.Namespace, config: ChartConfig) -> int:
    try:
        text = anyio.run(FileSelection([args.file]).read_text)
        extraction = extract_dataset(parse_rows(text), config.columns)
    except ChartLoadError as exc:
        print(f"Error processing file: {exc}", file=sys.stderr)
        return 1
    dataset = extraction.dataset
    scales = build_scales(dataset, config.layout.inner_width, config.layout.inner_height)
    summary = {
        "file": str(args.file),
        "header": {"x": dataset.header.x_label, "y": dataset.header.y_label},
        "points": len(dataset),
        "dropped_by_shape": extraction.dropped_by_shape,
        "dropped_by_value": extraction.dropped_by_value,
        "x_domain": list(scales.x.domain),
        "y_domain": list(scales.y.domain),
    }
    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
