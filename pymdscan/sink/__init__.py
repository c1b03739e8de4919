"""
Sink
====

Destinations of committed scan points.
"""

from .base import ResultSink
from .csv import CsvSink, read_scan_csv
from .hdf5 import Hdf5Sink, read_scan
from .memory import MemorySink
