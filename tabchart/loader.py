from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
from pathlib import Path
import time
from typing import Callable, Literal, Protocol

import anyio

from tabchart.adapters import extract_dataset, parse_rows
from tabchart.config import ChartConfig
from tabchart.dataset import Dataset
from tabchart.errors import AcquisitionError, ChartLoadError
from tabchart.reconcile import clear_scene, render_dataset
from tabchart.scales import ScalePair, build_scales
from tabchart.scene import Scene


LOGGER = logging.getLogger(__name__)

LoadStatus = Literal["rendered", "empty", "error"]


class TextSource(Protocol):
    async def read_text(self) -> str:
        ...


@dataclass(frozen=True)
class FileSelection:
    """The files picked in one selection event. Only the first one is read."""

    files: Sequence[str | Path] = ()
    encoding: str = "utf-8-sig"

    async def read_text(self) -> str:
        if not self.files:
            raise AcquisitionError("No file selected.")
        path = anyio.Path(self.files[0])
        LOGGER.info("Reading file: %s", path.name)
        try:
            raw = await path.read_bytes()
        except OSError as exc:
            raise AcquisitionError(f"Failed to read file {path.name}: {exc.strerror or exc}") from exc
        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError as exc:
            raise AcquisitionError(f"Failed to read file content as text: {exc.reason}") from exc


@dataclass(frozen=True)
class TextSelection:
    text: str
    name: str = "<memory>"

    async def read_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class LoadResult:
    status: LoadStatus
    dataset: Dataset = field(default_factory=Dataset)
    scales: ScalePair | None = None
    error: str | None = None
    dropped_by_shape: int = 0
    dropped_by_value: int = 0


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class LoadOrchestrator:
    """Runs the parse/extract/scale/reconcile pipeline for each selection event.

    Runs are independent: overlapping selections are not queued, so whichever read
    finishes last decides what the scene shows.
    """

    def __init__(
        self,
        scene: Scene,
        config: ChartConfig | None = None,
        *,
        clock: Callable[[], float] | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self.scene = scene
        self.config = config if config is not None else ChartConfig()
        self._clock = clock or _monotonic_ms
        self._on_error = on_error

    async def handle_selection(self, selection: TextSource) -> LoadResult:
        LOGGER.info("Handling new file...")
        try:
            text = await selection.read_text()
            return self._process(text)
        except ChartLoadError as exc:
            LOGGER.error("Error processing file: %s", exc)
            clear_scene(self.scene, now_ms=self._clock(), timings=self.config.timings)
            message = f"Error processing file: {exc}"
            if self._on_error is not None:
                self._on_error(message)
            return LoadResult(status="error", error=message)

    def _process(self, text: str) -> LoadResult:
        table = parse_rows(text)
        extraction = extract_dataset(table, self.config.columns)
        dataset = extraction.dataset
        if dataset.is_empty:
            LOGGER.warning("No valid data points found after processing.")
            clear_scene(self.scene, now_ms=self._clock(), timings=self.config.timings)
            return LoadResult(
                status="empty",
                dataset=dataset,
                dropped_by_shape=extraction.dropped_by_shape,
                dropped_by_value=extraction.dropped_by_value,
            )

        layout = self.config.layout
        try:
            scales = build_scales(dataset, layout.inner_width, layout.inner_height)
        except ValueError as exc:
            raise ChartLoadError(f"could not scale data: {exc}") from exc
        render_dataset(self.scene, dataset, scales, now_ms=self._clock(), timings=self.config.timings)
        return LoadResult(
            status="rendered",
            dataset=dataset,
            scales=scales,
            dropped_by_shape=extraction.dropped_by_shape,
            dropped_by_value=extraction.dropped_by_value,
        )
