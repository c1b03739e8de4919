"""
Result
======

Points committed by a scan and the summaries scans return.
"""

from .point import ScanPoint
from .scan import Contour, ScanResult, ThresholdBox
