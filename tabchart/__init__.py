from tabchart.adapters import Extraction, coerce_number, extract_dataset, parse_rows
from tabchart.config import ChartConfig, ChartLayout, ColumnSpec, Insets, TransitionTimings, load_config
from tabchart.dataset import AxisHeader, DataPoint, Dataset
from tabchart.errors import AcquisitionError, ChartLoadError, ConfigError, TableParseError
from tabchart.loader import FileSelection, LoadOrchestrator, LoadResult, TextSelection
from tabchart.reconcile import clear_scene, render_dataset
from tabchart.scales import LinearScale, ScalePair, build_scales, nice_domain
from tabchart.scene import Scene, SceneFrame

__all__ = [
    "AcquisitionError",
    "AxisHeader",
    "ChartConfig",
    "ChartLayout",
    "ChartLoadError",
    "ColumnSpec",
    "ConfigError",
    "DataPoint",
    "Dataset",
    "Extraction",
    "FileSelection",
    "Insets",
    "LinearScale",
    "LoadOrchestrator",
    "LoadResult",
    "ScalePair",
    "Scene",
    "SceneFrame",
    "TableParseError",
    "TextSelection",
    "TransitionTimings",
    "build_scales",
    "clear_scene",
    "coerce_number",
    "extract_dataset",
    "load_config",
    "nice_domain",
    "parse_rows",
    "render_dataset",
]
