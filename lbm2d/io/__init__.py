"""Output sinks for solver snapshots."""

from .base import OutputSink
from .vtk import VtkWriter
from .plots import FieldPlotWriter

__all__ = ["OutputSink", "VtkWriter", "FieldPlotWriter"]
