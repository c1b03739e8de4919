import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Union

from ..C import (
    DEFAULT_CROSSING_TOLERANCE,
    DEFAULT_POINTS,
    DEFAULT_STEP_FRACTION,
)


class ScanConfigurationError(ValueError):
    """Raised when a scan is set up in a way that cannot work."""


@dataclass(frozen=True)
class ScanOptions:
    """
    Options shared by all scan algorithms.

    Options are immutable; a scan reads them but never changes them.

    Attributes
    ----------
    points:
        Point budget. Grids use ``ceil(points ** (1 / n))`` points per axis,
        contours the number of angles or the probe resolution.
    first_point, last_point:
        Inclusive range of point indices to process. Indices outside are
        skipped, which splits one scan into independent jobs.
        ``last_point=None`` means no upper limit.
    float_other_pois:
        Whether parameters of interest of the model that are not scanned
        float (they count as extra degrees of freedom) or are held constant.
    fast_scan:
        Do not profile, only evaluate the objective with the nuisance
        parameters at the best fit.
    max_delta_nll_for_prof:
        Skip profiling of points whose unprofiled delta NLL exceeds this
        value. ``None`` profiles all points.
    save_specified:
        Names of additional parameters whose values are recorded with
        every point, ``["all"]`` for all nuisance parameters.
    save_inactive_pois:
        Record the values of the model POIs that are not scanned.
    skip_initial_fit:
        Take the current model state as the best fit.
    step_fraction:
        First step of threshold crossing searches, as a fraction of the
        distance to the parameter bound.
    crossing_tolerance:
        Accuracy of threshold crossing searches in the objective.
    progress_bar:
        Whether to show a progress bar for grid-like scans.
    """

    points: int = DEFAULT_POINTS
    first_point: int = 0
    last_point: Optional[int] = None
    float_other_pois: bool = False
    fast_scan: bool = False
    max_delta_nll_for_prof: Optional[float] = None
    save_specified: Sequence[str] = ()
    save_inactive_pois: bool = False
    skip_initial_fit: bool = False
    step_fraction: float = DEFAULT_STEP_FRACTION
    crossing_tolerance: float = DEFAULT_CROSSING_TOLERANCE
    progress_bar: bool = False

    def __post_init__(self):
        save_specified = self.save_specified
        if isinstance(save_specified, str):
            save_specified = [save_specified]
        object.__setattr__(self, "save_specified", tuple(save_specified))
        self.validate()

    @staticmethod
    def create_instance(
        maybe_options: Union["ScanOptions", dict, None],
    ) -> "ScanOptions":
        """
        Return a valid options object.

        Parameters
        ----------
        maybe_options: ScanOptions, dict or None for defaults
        """
        if maybe_options is None:
            return ScanOptions()
        if isinstance(maybe_options, ScanOptions):
            return maybe_options
        try:
            return ScanOptions(**maybe_options)
        except TypeError as err:
            raise ScanConfigurationError(str(err)) from err

    def validate(self):
        """Check if options are valid.

        Raises ``ScanConfigurationError`` if current settings aren't valid.
        """
        if self.points < 1:
            raise ScanConfigurationError("points must be >= 1.")
        if self.first_point < 0:
            raise ScanConfigurationError("first_point must be >= 0.")
        if self.last_point is not None and self.last_point < self.first_point:
            raise ScanConfigurationError(
                "last_point must be >= first_point."
            )
        if (
            self.max_delta_nll_for_prof is not None
            and self.max_delta_nll_for_prof < 0
        ):
            raise ScanConfigurationError(
                "max_delta_nll_for_prof must be >= 0."
            )
        if not 0 < self.step_fraction <= 1:
            raise ScanConfigurationError("step_fraction must be in (0, 1].")
        if self.crossing_tolerance <= 0:
            raise ScanConfigurationError("crossing_tolerance must be > 0.")

    def in_range(self, index: int) -> bool:
        """Whether a point index is to be processed."""
        if index < self.first_point:
            return False
        return self.last_point is None or index <= self.last_point

    def with_range(
        self, first_point: int, last_point: Optional[int]
    ) -> "ScanOptions":
        """Copy with a different index range."""
        return dataclasses.replace(
            self, first_point=first_point, last_point=last_point
        )
