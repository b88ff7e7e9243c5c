"""Reporting utilities for nanonet."""

from .artifacts import write_manifest
from .console import ResultsTable
from .metrics import CsvSink, JsonlSink
from .plots import PlotAdapter

__all__ = ["CsvSink", "JsonlSink", "PlotAdapter", "ResultsTable", "write_manifest"]
