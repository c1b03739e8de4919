"""State shared by the scan algorithms of one run."""

import logging
from collections.abc import Sequence
from typing import Callable, Optional, Union

import numpy as np

from ..C import (
    BEST_FIT_QUANTILE,
    INVALID_DELTA_NLL,
    INVALID_QUANTILE,
    PointStatus,
)
from ..logging import log_level_active
from ..model import Model, ParameterSnapshot
from ..optimize import Optimizer, OptimizerResult
from ..result import ScanPoint
from ..sink import ResultSink
from ..util import delta_nll_to_pvalue
from .options import ScanOptions

logger = logging.getLogger(__name__)

ProfileRule = Union[None, bool, Callable[[float], bool]]


class ScanContext:
    """
    Everything a scan algorithm needs to evaluate and commit points.

    Parameters
    ----------
    model:
        The model, at the global best fit.
    poi_names:
        The scanned parameters of interest.
    options:
        Scan options.
    optimizer:
        Local optimizer used for profiling.
    sink:
        Destination of committed points, already initialized.
    nll0:
        Objective value at the global best fit.
    n_other_floating:
        Number of other POIs that float, counted as extra degrees of freedom.
    auxiliary_names:
        Parameters whose values are recorded with every point.
    """

    def __init__(
        self,
        model: Model,
        poi_names: Sequence[str],
        options: ScanOptions,
        optimizer: Optimizer,
        sink: ResultSink,
        nll0: float,
        n_other_floating: int = 0,
        auxiliary_names: Sequence[str] = (),
    ):
        self.model = model
        self.poi_names = list(poi_names)
        self.poi_indices = [model.index(name) for name in self.poi_names]
        self.options = options
        self.optimizer = optimizer
        self.sink = sink
        self.nll0 = nll0
        self.n_other_floating = n_other_floating
        self.auxiliary_names = list(auxiliary_names)
        self.n_committed = 0

    @property
    def n_pois(self) -> int:
        """Number of scanned parameters of interest."""
        return len(self.poi_names)

    @property
    def df(self) -> int:
        """Degrees of freedom of the chi2 distribution of a scan point."""
        return self.n_pois + self.n_other_floating

    def poi_bounds(self, j: int) -> tuple[float, float]:
        """Bounds of the `j`-th scanned POI."""
        par = self.model.parameters[self.poi_indices[j]]
        return par.lb, par.ub

    def poi_values(self) -> tuple[float, ...]:
        """Current values of the scanned POIs."""
        return tuple(self.model.x[self.poi_indices])

    def set_pois(self, values: Sequence[float]) -> None:
        """Set the scanned POIs."""
        if len(values) != self.n_pois:
            raise AssertionError(
                f"Expected {self.n_pois} POI values, got {len(values)}."
            )
        self.model.set_x(values, self.poi_indices)

    def fix_pois(self) -> None:
        """Hold all scanned POIs constant."""
        for index in self.poi_indices:
            self.model.fix(index)

    def float_pois(self) -> None:
        """Let all scanned POIs float."""
        for index in self.poi_indices:
            self.model.unfix(index)

    def in_range(self, index: int) -> bool:
        """Whether a point index lies in the configured range."""
        return self.options.in_range(index)

    def pvalue(self, delta_nll: float, df: int = None) -> float:
        """Chi2 survival probability of a delta NLL."""
        if df is None:
            df = self.df
        return delta_nll_to_pvalue(delta_nll, df)

    def make_point(
        self,
        delta_nll: float,
        quantile: float,
        status: PointStatus,
        coordinates: Optional[Sequence[float]] = None,
    ) -> ScanPoint:
        """
        Build a point from the current model state.

        Parameters
        ----------
        delta_nll:
            Objective relative to the best fit.
        quantile:
            Probability tag.
        status:
            How the point was obtained.
        coordinates:
            POI values, defaults to the current ones.
        """
        if coordinates is None:
            coordinates = self.poi_values()
        auxiliary = {
            name: self.model.get_value(name) for name in self.auxiliary_names
        }
        return ScanPoint(
            coordinates=tuple(coordinates),
            delta_nll=float(delta_nll),
            quantile=float(quantile),
            auxiliary=auxiliary,
            status=status,
        )

    def commit(self, point: ScanPoint) -> ScanPoint:
        """Hand a point to the sink."""
        self.sink.commit(point)
        self.n_committed += 1
        if log_level_active(logger, logging.DEBUG):
            logger.debug(
                f"Committed {point.status.value} point "
                f"{point.coordinates}: deltaNLL={point.delta_nll:.6g}, "
                f"quantile={point.quantile:.4g}"
            )
        return point

    def commit_best_fit(self) -> ScanPoint:
        """Commit the best fit with delta NLL 0."""
        return self.commit(
            self.make_point(0.0, BEST_FIT_QUANTILE, PointStatus.BEST_FIT)
        )

    def invalid_point(
        self, coordinates: Optional[Sequence[float]] = None
    ) -> ScanPoint:
        """Sentinel point for a location that cannot be evaluated."""
        return self.make_point(
            INVALID_DELTA_NLL,
            INVALID_QUANTILE,
            PointStatus.INVALID,
            coordinates=coordinates,
        )

    def should_profile(self, delta_nll: float) -> bool:
        """Default profiling rule for an unprofiled delta NLL."""
        if self.options.fast_scan:
            return False
        ceiling = self.options.max_delta_nll_for_prof
        return ceiling is None or delta_nll <= ceiling

    def profile(self, bounded: bool = True) -> OptimizerResult:
        """Minimize over the free parameters, starting from their values."""
        return self.optimizer.minimize(self.model, bounded=bounded)

    def evaluate_point(
        self,
        values: Sequence[float],
        start: Optional[ParameterSnapshot] = None,
        profile: ProfileRule = None,
        commit: bool = True,
    ) -> ScanPoint:
        """
        Evaluate the scanned POIs at `values` and commit the result.

        The objective is evaluated with the nuisance parameters as they are.
        If that fails, the sentinel point is committed. Otherwise the
        nuisance parameters are profiled according to `profile` and the
        (profiled, if successful) delta NLL is committed with its p-value.
        The model is left in the evaluated state.

        Parameters
        ----------
        values:
            POI values.
        start:
            State to restore first.
        profile:
            Whether to profile. Either a bool, a callable taking the
            unprofiled delta NLL, or None for :meth:`should_profile`.
        commit:
            Whether to commit the point or only return it.
        """
        if start is not None:
            self.model.restore(start)
        self.set_pois(values)

        self.model.clear_eval_error_log()
        fval = self.model.evaluate()
        if self.model.n_eval_errors > 0 or not np.isfinite(fval):
            logger.debug(
                f"Objective cannot be evaluated at {tuple(values)}: "
                f"{self.model.objective.last_error}"
            )
            point = self.invalid_point()
            return self.commit(point) if commit else point

        delta_nll = fval - self.nll0
        if profile is None:
            profile = self.should_profile
        if callable(profile):
            profile = profile(delta_nll)

        status = PointStatus.UNPROFILED
        if profile:
            result = self.profile()
            if result.success:
                delta_nll = result.fval - self.nll0
                status = PointStatus.PROFILED
            else:
                logger.warning(
                    f"Profiling failed at {tuple(values)} ({result.message})"
                    f", committing the unprofiled value."
                )
                status = PointStatus.FIT_FAILED

        point = self.make_point(delta_nll, self.pvalue(delta_nll), status)
        return self.commit(point) if commit else point
