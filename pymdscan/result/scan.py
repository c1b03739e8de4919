"""Scan summaries."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ..sink import ResultSink


@dataclass(frozen=True)
class ThresholdBox:
    """
    Axis-aligned box enclosing the region below a delta NLL threshold.

    Attributes
    ----------
    name:
        Label of the box.
    cl:
        Confidence level the threshold was derived from.
    bounds:
        Per parameter of interest the ``(lower, upper)`` crossing.
    at_edge:
        Per parameter of interest whether the lower and upper value is the
        parameter bound because no crossing was found.
    """

    name: str
    cl: float
    bounds: Mapping[str, tuple[float, float]]
    at_edge: Mapping[str, tuple[bool, bool]] = field(default_factory=dict)

    def center(self, poi: str) -> float:
        """Midpoint of the box along one axis."""
        lower, upper = self.bounds[poi]
        return 0.5 * (lower + upper)

    def half_width(self, poi: str) -> float:
        """Half the extent of the box along one axis."""
        lower, upper = self.bounds[poi]
        return 0.5 * (upper - lower)


@dataclass(frozen=True)
class Contour:
    """
    An ordered sequence of boundary points of one contour sector.

    Attributes
    ----------
    center:
        Reference point the polar angles are measured from.
    level:
        The delta NLL level traced.
    theta_min, theta_max:
        Opening and closing angle of the sector.
    points:
        Boundary points with strictly increasing polar angle.
    closed:
        Whether the last point reached the closing angle.
    """

    center: tuple[float, float]
    level: float
    theta_min: float
    theta_max: float
    points: tuple[tuple[float, float], ...]
    closed: bool

    def as_array(self) -> np.ndarray:
        """Boundary points as an array of shape (n, 2)."""
        return np.array(self.points, dtype=float).reshape(-1, 2)

    def radii(self) -> np.ndarray:
        """Distances of the boundary points from the center."""
        return np.hypot(*(self.as_array() - np.array(self.center)).T)


class ScanResult(dict):
    """
    Summary of one scan run.

    The committed points themselves went to the sink. Can be used like a
    dict.

    Attributes
    ----------
    algorithm:
        Name of the algorithm run.
    poi_names:
        The scanned parameters of interest.
    best_fit:
        Parameter values at the global best fit.
    nll0:
        Objective value at the best fit.
    n_other_floating:
        Number of other floating POIs, counted as extra degrees of freedom.
    sink:
        The sink the points were committed to.
    summary:
        Algorithm-specific output, e.g. a :class:`ThresholdBox`, a list of
        :class:`Contour` or interval edges.
    """

    def __init__(
        self,
        algorithm: str,
        poi_names: list[str],
        best_fit: dict[str, float],
        nll0: float,
        n_other_floating: int = 0,
        sink: "ResultSink" = None,
        summary=None,
    ):
        super().__init__()
        self.algorithm = algorithm
        self.poi_names = poi_names
        self.best_fit = best_fit
        self.nll0 = nll0
        self.n_other_floating = n_other_floating
        self.sink = sink
        self.summary = summary

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key) from None

    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__
