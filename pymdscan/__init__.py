# noqa: D400,D205
"""
pyMDScan
========

Multi-dimensional scans of negative log-likelihoods: grids, contours and
confidence intervals with profiled nuisance parameters.
"""

# isort: off

# make version available
from .version import __version__

# import basic objects into global namespace
from .C import PointStatus
from .model import Model, Parameter, ParameterSnapshot
from .objective import NLLObjective, ObjectiveBase
from .result import Contour, ScanPoint, ScanResult, ThresholdBox
from .sink import CsvSink, Hdf5Sink, MemorySink, ResultSink, read_scan
from .scan import (
    ScanConfigurationError,
    ScanOptions,
    algorithm_from_name,
    multidim_fit,
    partitioned_fit,
)

# import simple modules as submodules
from . import (
    engine,
    logging,
    optimize,
    C,
)

# isort: on

logging.log()
