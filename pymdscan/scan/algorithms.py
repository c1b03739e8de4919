"""
Scan algorithms.

Each algorithm is an immutable strategy object holding only the settings
it uses. :func:`algorithm_from_name` builds one from its name.
"""

import abc
import dataclasses
import logging
from dataclasses import dataclass
from typing import ClassVar, Optional

from ..C import (
    ALGO_CONTOUR2D,
    ALGO_CROSS,
    ALGO_GRID,
    ALGO_GRID3X3,
    ALGO_NONE,
    ALGO_RANDOM,
    ALGO_SINGLES,
    ALGO_SMARTSCAN,
    ALGO_STITCH2D,
    DEFAULT_CONFIDENCE_LEVEL,
    DEFAULT_CONTOUR_LEVEL,
    DEFAULT_DISTRIBUTION_POWER,
    SINGLES_CL,
)
from .box import build_box
from .context import ScanContext
from .contour import stitch_contour_2d, trace_contour_2d
from .grid import n_grid_points, scan_grid
from .options import ScanConfigurationError
from .random_points import scan_random
from .singles import scan_singles
from .smart import n_smart_points, smart_scan

logger = logging.getLogger(__name__)


def _check_confidence_level(confidence_level: float) -> None:
    if not 0 < confidence_level < 1:
        raise ScanConfigurationError(
            f"The confidence level must be in (0, 1), got {confidence_level}."
        )


def _check_distribution_power(distribution_power: float) -> None:
    if distribution_power <= 0:
        raise ScanConfigurationError(
            f"The distribution power must be > 0, got {distribution_power}."
        )


@dataclass(frozen=True)
class Algorithm(abc.ABC):
    """
    Scan algorithm base class.

    Attributes
    ----------
    name:
        Name of the algorithm.
    n_pois:
        Required number of scanned POIs, None for any.
    commits_best_fit:
        Whether the best fit is committed before the scan.
    """

    name: ClassVar[str]
    n_pois: ClassVar[Optional[int]] = None
    commits_best_fit: ClassVar[bool] = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Check the settings, raise ``ScanConfigurationError``."""

    def check_pois(self, n_pois: int) -> None:
        """Check the number of scanned POIs."""
        if n_pois < 1:
            raise ScanConfigurationError("No parameters of interest given.")
        if self.n_pois is not None and n_pois != self.n_pois:
            raise ScanConfigurationError(
                f"{self.name} requires exactly {self.n_pois} parameters of "
                f"interest, got {n_pois}."
            )

    def n_indices(self, n_pois: int, points: int) -> Optional[int]:
        """
        Size of the point index space, for splitting a scan into ranges.

        None if the algorithm cannot be split.
        """
        return None

    @abc.abstractmethod
    def run(self, context: ScanContext):
        """Run the scan and return its summary."""


@dataclass(frozen=True)
class NoneAlgorithm(Algorithm):
    """Only the best fit."""

    name: ClassVar[str] = ALGO_NONE
    commits_best_fit: ClassVar[bool] = False

    def run(self, context: ScanContext) -> dict[str, float]:
        """Log the best fit values of the POIs."""
        best_fit = dict(zip(context.poi_names, context.poi_values()))
        for poi, value in best_fit.items():
            logger.info(f"{poi:>20s} : {value:+8.3f}")
        return best_fit


@dataclass(frozen=True)
class Singles(Algorithm):
    """Profile-likelihood interval of each POI separately."""

    name: ClassVar[str] = ALGO_SINGLES
    confidence_level: float = SINGLES_CL
    do95: bool = False

    def validate(self) -> None:
        """See :meth:`Algorithm.validate`."""
        _check_confidence_level(self.confidence_level)

    def run(self, context: ScanContext):
        """See :func:`scan_singles`."""
        return scan_singles(context, self.confidence_level, self.do95)


@dataclass(frozen=True)
class Cross(Algorithm):
    """Crossings of the confidence threshold along each POI."""

    name: ClassVar[str] = ALGO_CROSS
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL

    def validate(self) -> None:
        """See :meth:`Algorithm.validate`."""
        _check_confidence_level(self.confidence_level)

    def run(self, context: ScanContext):
        """See :func:`build_box`."""
        return build_box(
            context, self.confidence_level, name=self.name, commit_points=True
        )


@dataclass(frozen=True)
class Grid(Algorithm):
    """Regular grid over the POI bounds."""

    name: ClassVar[str] = ALGO_GRID
    distribution_power: float = DEFAULT_DISTRIBUTION_POWER

    def validate(self) -> None:
        """See :meth:`Algorithm.validate`."""
        _check_distribution_power(self.distribution_power)

    def n_indices(self, n_pois: int, points: int) -> int:
        """See :meth:`Algorithm.n_indices`."""
        return n_grid_points(n_pois, points)

    def run(self, context: ScanContext):
        """See :func:`scan_grid`."""
        return scan_grid(context, self.distribution_power, refine=False)


@dataclass(frozen=True)
class Grid3x3(Grid):
    """Two-dimensional grid with refinement of each cell."""

    name: ClassVar[str] = ALGO_GRID3X3
    n_pois: ClassVar[Optional[int]] = 2

    def run(self, context: ScanContext):
        """See :func:`scan_grid`."""
        return scan_grid(context, self.distribution_power, refine=True)


@dataclass(frozen=True)
class RandomPoints(Algorithm):
    """Uniform random points within the POI bounds."""

    name: ClassVar[str] = ALGO_RANDOM
    seed: Optional[int] = None

    def n_indices(self, n_pois: int, points: int) -> Optional[int]:
        """Only seeded scans can be split."""
        return points if self.seed is not None else None

    def run(self, context: ScanContext):
        """See :func:`scan_random`."""
        return scan_random(context, self.seed)


@dataclass(frozen=True)
class Contour2D(Algorithm):
    """Contour points from crossing searches across the confidence box."""

    name: ClassVar[str] = ALGO_CONTOUR2D
    n_pois: ClassVar[Optional[int]] = 2
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL

    def validate(self) -> None:
        """See :meth:`Algorithm.validate`."""
        _check_confidence_level(self.confidence_level)

    def n_indices(self, n_pois: int, points: int) -> int:
        """See :meth:`Algorithm.n_indices`."""
        return points + 1

    def run(self, context: ScanContext):
        """See :func:`trace_contour_2d`."""
        return trace_contour_2d(context, self.confidence_level)


@dataclass(frozen=True)
class Stitch2D(Algorithm):
    """Contour of constant delta NLL by marching around the best fit."""

    name: ClassVar[str] = ALGO_STITCH2D
    n_pois: ClassVar[Optional[int]] = 2
    contour_level: float = DEFAULT_CONTOUR_LEVEL

    def validate(self) -> None:
        """See :meth:`Algorithm.validate`."""
        if self.contour_level <= 0:
            raise ScanConfigurationError(
                f"The contour level must be > 0, got {self.contour_level}."
            )

    def run(self, context: ScanContext):
        """See :func:`stitch_contour_2d`."""
        return stitch_contour_2d(context, self.contour_level)


@dataclass(frozen=True)
class SmartScan(Algorithm):
    """Grid that is dense around the best fit."""

    name: ClassVar[str] = ALGO_SMARTSCAN
    distribution_power: float = DEFAULT_DISTRIBUTION_POWER

    def validate(self) -> None:
        """See :meth:`Algorithm.validate`."""
        _check_distribution_power(self.distribution_power)

    def n_indices(self, n_pois: int, points: int) -> int:
        """See :meth:`Algorithm.n_indices`."""
        return n_smart_points(n_pois, points)

    def run(self, context: ScanContext):
        """See :func:`smart_scan`."""
        return smart_scan(context, self.distribution_power)


ALGORITHMS: dict[str, type[Algorithm]] = {
    cls.name: cls
    for cls in [
        NoneAlgorithm,
        Singles,
        Cross,
        Grid,
        Grid3x3,
        RandomPoints,
        Contour2D,
        Stitch2D,
        SmartScan,
    ]
}


def algorithm_from_name(name: str, **kwargs) -> Algorithm:
    """
    Create an algorithm by name.

    Parameters
    ----------
    name:
        One of ``none``, ``singles``, ``cross``, ``grid``, ``grid3x3``,
        ``random``, ``contour2d``, ``stitch2d``, ``smartscan``.
    kwargs:
        Settings of that algorithm. Settings of other algorithms are
        rejected.

    Returns
    -------
    The algorithm.
    """
    try:
        cls = ALGORITHMS[name.lower()]
    except KeyError:
        raise ScanConfigurationError(
            f"Unknown algorithm {name}, choose one of {list(ALGORITHMS)}."
        ) from None
    allowed = {field.name for field in dataclasses.fields(cls)}
    unknown = set(kwargs) - allowed
    if unknown:
        raise ScanConfigurationError(
            f"Algorithm {cls.name} does not accept {sorted(unknown)}, "
            f"allowed settings are {sorted(allowed)}."
        )
    return cls(**kwargs)
