"""
Constants
=========
Package-wide consistent constant definitions.
"""

from enum import Enum

###############################################################################
# SCAN POINTS

DELTA_NLL = "deltaNLL"  # objective relative to the global best fit
QUANTILE = "quantileExpected"  # probability tag of a committed point
STATUS = "status"  # how a committed point was obtained

# delta NLL committed for points where the objective could not be evaluated
INVALID_DELTA_NLL = 9999.0
INVALID_QUANTILE = 0.0
BEST_FIT_QUANTILE = 1.0


class PointStatus(str, Enum):
    """How a committed scan point was obtained."""

    BEST_FIT = "best_fit"
    PROFILED = "profiled"
    UNPROFILED = "unprofiled"  # fast scan or above the profiling ceiling
    FIT_FAILED = "fit_failed"  # profiling did not converge
    INVALID = "invalid"  # objective evaluation errors, sentinel value
    CROSSING = "crossing"  # threshold crossing found
    RANGE_EDGE = "range_edge"  # no crossing within the parameter bounds
    CONTOUR = "contour"  # accepted point of a traced contour
    INTERVAL = "interval"  # edge of a one-dimensional interval


###############################################################################
# ALGORITHMS

ALGO_NONE = "none"
ALGO_SINGLES = "singles"
ALGO_CROSS = "cross"
ALGO_GRID = "grid"
ALGO_GRID3X3 = "grid3x3"
ALGO_RANDOM = "random"
ALGO_CONTOUR2D = "contour2d"
ALGO_STITCH2D = "stitch2d"
ALGO_SMARTSCAN = "smartscan"

ALL_SAVE_SPECIFIED = "all"  # save all nuisance parameters

###############################################################################
# DEFAULTS

DEFAULT_POINTS = 50
DEFAULT_DISTRIBUTION_POWER = 0.5
DEFAULT_CONFIDENCE_LEVEL = 0.68
DEFAULT_CONTOUR_LEVEL = 1.15
DEFAULT_STEP_FRACTION = 0.1
DEFAULT_CROSSING_TOLERANCE = 1e-4

# one sigma and two sigma coverage of a single gaussian parameter
SINGLES_CL = 0.6827
SINGLES_CL_95 = 0.9545

###############################################################################
# GRID3X3 REFINEMENT

# delta NLL values of the 68% and 95% contours in two dimensions
REFINE_THRESHOLDS = (1.15, 2.995)
REFINE_WINDOW = 0.5
REFINE_OFFSETS = (-1, 0, 1)  # in units of a third of a cell

###############################################################################
# STITCH2D

STITCH_SECTORS = 4
STITCH_PROBE_ANGLE = 0.25 * 3.141592653589793
STITCH_PROBE_SCALE = 2.828427

###############################################################################
# STORAGE

SCAN = "scan"
POI_NAMES = "poi_names"
AUXILIARY_NAMES = "auxiliary_names"
COORDINATES = "coordinates"
AUXILIARY = "auxiliary"
