"""
Scan
====

Scans of the negative log-likelihood over parameters of interest, with
the nuisance parameters profiled at each point.
"""

from .algorithms import (
    ALGORITHMS,
    Algorithm,
    Contour2D,
    Cross,
    Grid,
    Grid3x3,
    NoneAlgorithm,
    RandomPoints,
    Singles,
    SmartScan,
    Stitch2D,
    algorithm_from_name,
)
from .box import build_box
from .bracket import BracketResult, bracket_minimum
from .context import ScanContext
from .contour import stitch_contour_2d, trace_contour_2d
from .crossing import find_crossing
from .distribute import PointDistributor, cell_centres
from .grid import scan_grid
from .options import ScanConfigurationError, ScanOptions
from .random_points import scan_random
from .scan import multidim_fit
from .singles import scan_singles
from .smart import smart_scan
from .task import ScanTask, merge_points, partition_ranges, partitioned_fit
