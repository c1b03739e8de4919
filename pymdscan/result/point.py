"""Committed scan points."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from ..C import DELTA_NLL, QUANTILE, STATUS, PointStatus


@dataclass(frozen=True)
class ScanPoint:
    """
    One committed sample of a scan.

    Attributes
    ----------
    coordinates:
        Values of the scanned parameters of interest, in scan order.
    delta_nll:
        Objective relative to the global best fit. Points that could not be
        evaluated carry the sentinel 9999.
    quantile:
        Probability tag: the chi2 survival probability of ``2 * delta_nll``
        for sampled points, ``1 - cl`` for threshold crossings, 1 for the
        best fit and 0 for invalid points.
    auxiliary:
        Values of additionally recorded parameters, read-only.
    status:
        How the point was obtained.
    """

    coordinates: tuple[float, ...]
    delta_nll: float
    quantile: float
    auxiliary: Mapping[str, float] = field(default_factory=dict)
    status: PointStatus = PointStatus.PROFILED

    def __post_init__(self):
        object.__setattr__(
            self, "coordinates", tuple(float(x) for x in self.coordinates)
        )
        object.__setattr__(
            self,
            "auxiliary",
            MappingProxyType(
                {key: float(val) for key, val in self.auxiliary.items()}
            ),
        )

    def __reduce__(self):
        # mapping proxies do not pickle, needed to ship points from workers
        return (
            self.__class__,
            (
                self.coordinates,
                self.delta_nll,
                self.quantile,
                dict(self.auxiliary),
                self.status,
            ),
        )

    def to_dict(self, poi_names: Sequence[str]) -> dict:
        """Flat record with one entry per column."""
        if len(poi_names) != len(self.coordinates):
            raise ValueError(
                f"Expected {len(self.coordinates)} POI names, "
                f"got {len(poi_names)}."
            )
        record = dict(zip(poi_names, self.coordinates))
        record.update(self.auxiliary)
        record[DELTA_NLL] = self.delta_nll
        record[QUANTILE] = self.quantile
        record[STATUS] = self.status.value
        return record
