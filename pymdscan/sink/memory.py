"""In-memory sink."""

from collections.abc import Iterator

import pandas as pd

from ..C import PointStatus
from ..result import ScanPoint
from .base import ResultSink


class MemorySink(ResultSink):
    """Keep committed points in a list."""

    def __init__(self):
        super().__init__()
        self.points: list[ScanPoint] = []

    def _commit(self, point: ScanPoint) -> None:
        self.points.append(point)

    def __iter__(self) -> Iterator[ScanPoint]:
        return iter(self.points)

    def scan_points(self) -> list[ScanPoint]:
        """All points except the best fit."""
        return [p for p in self.points if p.status != PointStatus.BEST_FIT]

    def as_dataframe(self) -> pd.DataFrame:
        """One row per committed point."""
        return pd.DataFrame(
            [p.to_dict(self.poi_names) for p in self.points],
            columns=self.columns,
        )
