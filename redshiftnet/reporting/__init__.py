"""Reporting utilities for redshiftnet."""

from .artifacts import write_manifest, write_mse_trace, write_weights
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter

__all__ = [
    "CsvSink",
    "JsonlSink",
    "PlotAdapter",
    "write_manifest",
    "write_mse_trace",
    "write_weights",
]
