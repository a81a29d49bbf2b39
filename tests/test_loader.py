from __future__ import annotations

from pathlib import Path
import math
import tempfile
import unittest
from unittest import mock

import anyio

from tabchart.dataset import AxisHeader
from tabchart.loader import FileSelection, LoadOrchestrator, LoadResult, TextSelection
from tabchart.raster import rasterize
from tabchart.scene import Scene, SceneFrame


SCENARIO_A = "a,b,c,d,e,f\nh1,h2,Time,Value,h5,h6\nr1,r2,1,10,r5,r6\nr1,r2,2,30,r5,r6"
THREE_POINTS = "h1,h2,X,Y,h5,h6\nr,r,1,1,r,r\nr,r,2,4,r,r\nr,r,3,9,r,r"
ONE_POINT = "h1,h2,X,Y,h5,h6\nr,r,5,5,r,r"


def _frame_coordinates(frame: SceneFrame) -> list[float]:
    values = [v for p in frame.points for v in (p.cx, p.cy, p.r)]
    values.extend(v for vertex in frame.line for v in vertex)
    for axis in (frame.x_axis, frame.y_axis):
        if axis is not None:
            values.extend(t.position for t in axis.ticks)
    return values


class _Clock:
    def __init__(self) -> None:
        self.now_ms = 0.0

    def __call__(self) -> float:
        return self.now_ms


class _GatedSelection:
    def __init__(self, text: str, gate: anyio.Event) -> None:
        self.text = text
        self.gate = gate

    async def read_text(self) -> str:
        await self.gate.wait()
        return self.text


class LoadOrchestratorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.scene = Scene.create()
        self.clock = _Clock()
        self.errors: list[str] = []
        self.orchestrator = LoadOrchestrator(self.scene, clock=self.clock, on_error=self.errors.append)

    def _load(self, selection: object) -> LoadResult:
        return anyio.run(self.orchestrator.handle_selection, selection)

    def test_valid_text_renders_dataset(self) -> None:
        result = self._load(TextSelection(SCENARIO_A))
        self.assertEqual(result.status, "rendered")
        self.assertEqual(len(result.dataset), 2)
        self.assertEqual(result.dataset.header, AxisHeader("c", "d"))
        self.assertIsNotNone(result.scales)
        self.assertEqual(self.scene.state, "populated")
        self.assertEqual(self.scene.x_label.text, "c")
        self.assertEqual(self.errors, [])

    def test_empty_text_clears_without_error(self) -> None:
        self._load(TextSelection(THREE_POINTS))
        self.clock.now_ms = 1000.0
        with self.assertLogs("tabchart.loader", level="WARNING"):
            result = self._load(TextSelection(""))
        self.assertEqual(result.status, "empty")
        self.assertEqual(self.scene.state, "empty")
        self.assertEqual(self.scene.x_label.text, "")
        self.assertEqual(self.errors, [])
        self.assertEqual(self.scene.frame(2000.0).points, ())

    def test_no_file_selected_reports_error(self) -> None:
        self._load(TextSelection(THREE_POINTS))
        result = self._load(FileSelection([]))
        self.assertEqual(result.status, "error")
        self.assertEqual(result.error, "Error processing file: No file selected.")
        self.assertEqual(self.errors, ["Error processing file: No file selected."])
        self.assertEqual(self.scene.state, "empty")

    def test_missing_file_reports_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            result = self._load(FileSelection([Path(tmp) / "missing.csv"]))
        self.assertEqual(result.status, "error")
        self.assertEqual(len(self.errors), 1)
        self.assertIn("missing.csv", self.errors[0])

    def test_undecodable_file_reports_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "binary.csv"
            path.write_bytes(b"\xff\xfe\x00\x81garbage")
            result = self._load(FileSelection([path]))
        self.assertEqual(result.status, "error")
        self.assertTrue(self.errors[0].startswith("Error processing file: Failed to read file content as text"))

    def test_only_first_selected_file_is_read(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            first = Path(tmp) / "first.csv"
            second = Path(tmp) / "second.csv"
            first.write_text(THREE_POINTS, encoding="utf-8")
            second.write_text(ONE_POINT, encoding="utf-8")
            result = self._load(FileSelection([first, second]))
        self.assertEqual(len(result.dataset), 3)

    def test_byte_order_mark_is_stripped_from_files(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "bom.csv"
            path.write_bytes(b"\xef\xbb\xbf" + "t,v\n1,2\n3,4".encode("utf-8"))
            orchestrator = LoadOrchestrator(Scene.create(), clock=self.clock)
            orchestrator.config = orchestrator.config.with_columns(x_index=0, y_index=1, column_count=2)
            result = anyio.run(orchestrator.handle_selection, FileSelection([path]))
        self.assertEqual(result.dataset.header, AxisHeader("t", "v"))
        self.assertEqual(len(result.dataset), 2)

    def test_last_completed_load_wins(self) -> None:
        results: dict[str, LoadResult] = {}

        async def scenario() -> None:
            first_gate, second_gate = anyio.Event(), anyio.Event()
            second_done = anyio.Event()

            async def run(name: str, selection: _GatedSelection, done: anyio.Event | None) -> None:
                results[name] = await self.orchestrator.handle_selection(selection)
                if done is not None:
                    done.set()

            async with anyio.create_task_group() as tg:
                tg.start_soon(run, "first", _GatedSelection(THREE_POINTS, first_gate), None)
                tg.start_soon(run, "second", _GatedSelection(ONE_POINT, second_gate), second_done)
                second_gate.set()
                await second_done.wait()
                first_gate.set()

        anyio.run(scenario)
        self.assertEqual(results["first"].status, "rendered")
        self.assertEqual(results["second"].status, "rendered")
        self.scene.settle()
        self.assertEqual(len(self.scene.points), 3)

    def test_values_near_float_limit_stay_finite(self) -> None:
        result = self._load(TextSelection("h1,h2,X,Y,h5,h6\nr,r,0,0,r,r\nr,r,1,1.7e308,r,r"))
        self.assertEqual(result.status, "rendered")
        assert result.scales is not None
        self.assertTrue(all(math.isfinite(v) for v in result.scales.y.domain))
        self.scene.settle()
        frame = self.scene.frame(0.0)
        self.assertEqual([p.cy for p in frame.points], [330.0, 0.0])
        self.assertTrue(all(math.isfinite(v) for v in _frame_coordinates(frame)))

    def test_overflowing_domain_span_maps_to_finite_coordinates(self) -> None:
        result = self._load(TextSelection("h1,h2,X,Y,h5,h6\nr,r,-1e308,0,r,r\nr,r,1e308,1,r,r"))
        self.assertEqual(result.status, "rendered")
        self.scene.settle()
        frame = self.scene.frame(0.0)
        self.assertEqual([p.cx for p in frame.points], [0.0, 510.0])
        self.assertTrue(all(math.isfinite(v) for v in _frame_coordinates(frame)))
        self.assertEqual(rasterize(frame).shape, (400, 600, 4))

    def test_scale_failure_is_reported_and_clears(self) -> None:
        self._load(TextSelection(THREE_POINTS))
        with mock.patch("tabchart.loader.build_scales", side_effect=ValueError("plot width/height must be > 0")):
            result = self._load(TextSelection(ONE_POINT))
        self.assertEqual(result.status, "error")
        self.assertEqual(self.errors, ["Error processing file: could not scale data: plot width/height must be > 0"])
        self.assertEqual(self.scene.state, "empty")


if __name__ == "__main__":
    unittest.main()
