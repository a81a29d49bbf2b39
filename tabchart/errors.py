from __future__ import annotations


class ChartLoadError(RuntimeError):
    """A load attempt failed and the chart has to be cleared."""


class AcquisitionError(ChartLoadError):
    pass


class TableParseError(ChartLoadError):
    pass


class ConfigError(ValueError):
    pass
