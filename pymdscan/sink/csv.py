"""CSV sink."""

import logging
import os

import pandas as pd

from ..result import ScanPoint
from .base import ResultSink

logger = logging.getLogger(__name__)


class CsvSink(ResultSink):
    """
    Append committed points to a CSV file, one row per point.

    Parameters
    ----------
    file:
        CSV file name.
    overwrite:
        Whether to replace an existing file. Otherwise, rows are appended
        to it if its columns match.
    """

    def __init__(self, file: str, overwrite: bool = False):
        super().__init__()
        self.file: str = os.path.abspath(file)
        self.overwrite: bool = overwrite

        dirname = os.path.dirname(self.file)
        os.makedirs(dirname, exist_ok=True)

    def _initialize(self) -> None:
        if os.path.exists(self.file) and not self.overwrite:
            existing = list(pd.read_csv(self.file, nrows=0).columns)
            if existing != self.columns:
                raise RuntimeError(
                    f"File `{self.file}` already exists with columns "
                    f"{existing}. If you wish to overwrite the file, set "
                    f"`overwrite=True`."
                )
            logger.info(f"Appending scan points to {self.file}.")
            return
        pd.DataFrame(columns=self.columns).to_csv(self.file, index=False)

    def _commit(self, point: ScanPoint) -> None:
        pd.DataFrame(
            [point.to_dict(self.poi_names)], columns=self.columns
        ).to_csv(self.file, mode="a", header=False, index=False)


def read_scan_csv(file: str) -> pd.DataFrame:
    """Read the points written by a :class:`CsvSink`."""
    return pd.read_csv(file)
