from __future__ import annotations

import unittest

from tabchart.adapters import coerce_number, extract_dataset, parse_rows
from tabchart.config import ColumnSpec
from tabchart.dataset import AxisHeader, DataPoint


SCENARIO_A = "a,b,c,d,e,f\nh1,h2,Time,Value,h5,h6\nr1,r2,1,10,r5,r6\nr1,r2,2,30,r5,r6"


class ExtractDatasetTests(unittest.TestCase):
    def test_scenario_a_reads_target_columns(self) -> None:
        out = extract_dataset(parse_rows(SCENARIO_A), ColumnSpec(x_index=2, y_index=3, column_count=6))
        self.assertEqual(out.dataset.points, (DataPoint(1.0, 10.0), DataPoint(2.0, 30.0)))
        # Every row is 6 wide, so the first row is the header and the Time/Value row is not numeric.
        self.assertEqual(out.header, AxisHeader("c", "d"))
        self.assertEqual(out.dropped_by_value, 1)
        self.assertEqual(out.dropped_by_shape, 0)

    def test_header_comes_from_first_row_of_required_width(self) -> None:
        text = "exported by logger v2\nh1,h2,Time,Value,h5,h6\nr1,r2,1,10,r5,r6\nr1,r2,2,30,r5,r6"
        out = extract_dataset(parse_rows(text))
        self.assertEqual(out.header, AxisHeader("Time", "Value"))
        self.assertEqual([(p.x, p.y) for p in out.dataset.points], [(1.0, 10.0), (2.0, 30.0)])
        self.assertEqual(out.dropped_by_shape, 1)

    def test_scenario_b_non_numeric_row_is_excluded(self) -> None:
        text = "\n".join(
            [
                "h1,h2,Time,Value,h5,h6",
                "r1,r2,1,10,r5,r6",
                "r1,r2,notanumber,30,r5,r6",
                "r1,r2,3,40,r5,r6",
            ]
        )
        with self.assertLogs("tabchart.adapters.extract", level="WARNING") as logs:
            out = extract_dataset(parse_rows(text))
        self.assertEqual([(p.x, p.y) for p in out.dataset.points], [(1.0, 10.0), (3.0, 40.0)])
        self.assertEqual(out.dropped_by_value, 1)
        self.assertTrue(any("notanumber" in line for line in logs.output))

    def test_empty_cells_are_rejected_not_zeroed(self) -> None:
        text = "h1,h2,X,Y,h5,h6\nr1,r2,,30,r5,r6\nr1,r2,4,,r5,r6\nr1,r2,5,50,r5,r6"
        out = extract_dataset(parse_rows(text))
        self.assertEqual(out.dataset.points, (DataPoint(5.0, 50.0),))

    def test_shape_filter_is_exact(self) -> None:
        rows = [["h1", "h2", "X", "Y", "h5", "h6"]]
        for width in range(4, 10):
            marker = "1" if width == 6 else "999"
            rows.append(["r"] * 2 + [marker, marker] + ["r"] * (width - 4))
        out = extract_dataset(rows)
        self.assertEqual([(p.x, p.y) for p in out.dataset.points], [(1.0, 1.0)])
        self.assertEqual(out.dropped_by_shape, 5)

    def test_scenario_d_falls_back_to_first_raw_row(self) -> None:
        out = extract_dataset(parse_rows("a,b,c,d,e\n1,2,3,4,5"))
        self.assertTrue(out.dataset.is_empty)
        self.assertEqual(out.header, AxisHeader("c", "d"))
        self.assertEqual(out.dropped_by_shape, 2)

    def test_scenario_d_short_first_row_uses_generic_header(self) -> None:
        out = extract_dataset(parse_rows("a,b\n1,2,3,4,5"))
        self.assertTrue(out.dataset.is_empty)
        self.assertEqual(out.header, AxisHeader("X-Axis", "Y-Axis"))

    def test_leading_blank_line_is_the_first_raw_row(self) -> None:
        out = extract_dataset(parse_rows("\nh1,h2,X,Y,h5\n1,2,3,4,5"))
        self.assertTrue(out.dataset.is_empty)
        self.assertEqual(out.header, AxisHeader("X-Axis", "Y-Axis"))
        self.assertEqual(out.dropped_by_shape, 3)

    def test_empty_table_uses_generic_header(self) -> None:
        out = extract_dataset([])
        self.assertTrue(out.dataset.is_empty)
        self.assertEqual(out.header, AxisHeader())

    def test_blank_header_cells_fall_back_to_generic_names(self) -> None:
        out = extract_dataset(parse_rows("a,b,,,e,f\nr1,r2,1,2,r5,r6"))
        self.assertEqual(out.header, AxisHeader("X-Axis", "Y-Axis"))
        self.assertEqual(len(out.dataset), 1)

    def test_custom_column_spec(self) -> None:
        out = extract_dataset(parse_rows("t,v\n0,1.5\n1,2.5"), ColumnSpec(x_index=0, y_index=1, column_count=2))
        self.assertEqual(out.header, AxisHeader("t", "v"))
        self.assertEqual([(p.x, p.y) for p in out.dataset.points], [(0.0, 1.5), (1.0, 2.5)])

    def test_header_only_table_has_no_points(self) -> None:
        out = extract_dataset(parse_rows("h1,h2,Time,Value,h5,h6"))
        self.assertTrue(out.dataset.is_empty)
        self.assertEqual(out.header, AxisHeader("Time", "Value"))


class CoerceNumberTests(unittest.TestCase):
    def test_accepts_decimal_and_scientific_literals(self) -> None:
        self.assertEqual(coerce_number("12.5"), 12.5)
        self.assertEqual(coerce_number(" -3 "), -3.0)
        self.assertEqual(coerce_number("1e3"), 1000.0)
        self.assertEqual(coerce_number(".5"), 0.5)

    def test_rejects_non_numeric_and_non_finite_values(self) -> None:
        for raw in ("", "   ", "abc", "1,5", "nan", "inf", "-Infinity", "1_000", "12px"):
            with self.subTest(raw=raw):
                self.assertIsNone(coerce_number(raw))


class DataPointTests(unittest.TestCase):
    def test_non_finite_components_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            DataPoint(float("nan"), 1.0)
        with self.assertRaises(ValueError):
            DataPoint(1.0, float("inf"))


if __name__ == "__main__":
    unittest.main()
