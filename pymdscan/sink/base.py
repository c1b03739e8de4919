"""Result sink base class."""

import abc
import logging
from collections.abc import Sequence

from ..C import DELTA_NLL, QUANTILE, STATUS
from ..result import ScanPoint

logger = logging.getLogger(__name__)


class ResultSink(abc.ABC):
    """
    Append-only destination of committed scan points.

    A sink is initialized with the column layout of a scan, receives every
    committed :class:`ScanPoint` in commit order and is finalized when the
    scan ends. Several runs with the same layout may commit into one sink,
    e.g. the partitions of a split scan.
    """

    def __init__(self):
        self.poi_names: list[str] = None
        self.auxiliary_names: list[str] = []
        self._n_points: int = 0

    def __len__(self) -> int:
        """Number of committed points."""
        return self._n_points

    @property
    def columns(self) -> list[str]:
        """Column names of a flat record."""
        return [
            *self.poi_names,
            *self.auxiliary_names,
            DELTA_NLL,
            QUANTILE,
            STATUS,
        ]

    def initialize(
        self,
        poi_names: Sequence[str],
        auxiliary_names: Sequence[str] = (),
    ) -> None:
        """
        Declare the column layout.

        Parameters
        ----------
        poi_names:
            Names of the scanned parameters of interest.
        auxiliary_names:
            Names of additionally recorded parameters.
        """
        poi_names = list(poi_names)
        auxiliary_names = list(auxiliary_names)
        if self.poi_names is not None and (
            poi_names != self.poi_names
            or auxiliary_names != self.auxiliary_names
        ):
            raise ValueError(
                f"Sink already initialized with columns {self.poi_names} + "
                f"{self.auxiliary_names}, got {poi_names} + "
                f"{auxiliary_names}."
            )
        first = self.poi_names is None
        self.poi_names = poi_names
        self.auxiliary_names = auxiliary_names
        if first:
            self._initialize()

    def _initialize(self) -> None:
        """Prepare the destination, called once."""

    def commit(self, point: ScanPoint) -> None:
        """Append one point."""
        if self.poi_names is None:
            raise RuntimeError("Sink must be initialized before committing.")
        if len(point.coordinates) != len(self.poi_names):
            raise ValueError(
                f"Point has {len(point.coordinates)} coordinates, expected "
                f"{len(self.poi_names)}."
            )
        self._commit(point)
        self._n_points += 1

    @abc.abstractmethod
    def _commit(self, point: ScanPoint) -> None:
        """Store one validated point."""

    def finalize(self) -> None:
        """Flush whatever is buffered. Called when a scan ends."""
