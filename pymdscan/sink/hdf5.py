"""HDF5 sink."""

import logging
import os
from collections.abc import Collection
from numbers import Number

import h5py
import numpy as np
import pandas as pd

from ..C import (
    AUXILIARY,
    AUXILIARY_NAMES,
    COORDINATES,
    DELTA_NLL,
    POI_NAMES,
    QUANTILE,
    SCAN,
    STATUS,
)
from ..result import ScanPoint
from .base import ResultSink

logger = logging.getLogger(__name__)


def write_string_array(f: h5py.Group, path: str, strings: Collection) -> None:
    """
    Write string array to hdf5.

    Parameters
    ----------
    f:
        h5py.Group where dataset should be created
    path:
        path of the dataset to create
    strings:
        list of strings to be written to f
    """
    dt = h5py.special_dtype(vlen=str)
    dset = f.create_dataset(path, (len(strings),), dtype=dt)

    if len(strings):
        dset[:] = [s.encode("utf8") for s in strings]


def write_float_array(
    f: h5py.Group, path: str, values: Collection[Number], dtype="f8"
) -> None:
    """
    Write float array to hdf5.

    Parameters
    ----------
    f:
        h5py.Group where dataset should be created
    path:
        path of the dataset to create
    values:
        array to write, of any shape
    dtype:
        datatype
    """
    values = np.asarray(values, dtype=dtype)
    dset = f.create_dataset(path, values.shape, dtype=dtype)

    if values.size:
        dset[...] = values


def check_overwrite(f: h5py.Group, overwrite: bool, target: str):
    """
    Check whether target already exists.

    Deletes the target if ``overwrite=True``, raises otherwise.

    Parameters
    ----------
    f:
        file or group where existence of `target` should be checked
    overwrite:
        if ``True``, it deletes the target in ``f``
    target:
        name of the group whose existence is checked
    """
    if target in f:
        if overwrite:
            del f[target]
        else:
            raise RuntimeError(
                f"File `{f.file.filename}` already contains scan results "
                f"in {target}. If you wish to overwrite them, set "
                f"`overwrite=True`."
            )


class Hdf5Sink(ResultSink):
    """
    Store committed points in a group of an HDF5 file.

    Points are collected in memory and written on :meth:`finalize`
    (or :meth:`flush`), as one dataset per column.

    Parameters
    ----------
    file:
        HDF5 file name.
    group:
        Name of the group holding the scan.
    overwrite:
        Whether to replace an existing group of the same name.
    """

    def __init__(self, file: str, group: str = SCAN, overwrite: bool = False):
        super().__init__()
        self.file: str = os.path.abspath(file)
        self.group: str = group
        self.overwrite: bool = overwrite
        self._points: list[ScanPoint] = []

        dirname = os.path.dirname(self.file)
        os.makedirs(dirname, exist_ok=True)

    def _initialize(self) -> None:
        with h5py.File(self.file, "a") as f:
            check_overwrite(f, self.overwrite, self.group)
        # subsequent flushes replace our own group
        self.overwrite = True

    def _commit(self, point: ScanPoint) -> None:
        self._points.append(point)

    def flush(self) -> None:
        """Write all points committed so far."""
        n_points = len(self._points)
        coordinates = np.array(
            [p.coordinates for p in self._points], dtype=float
        ).reshape(n_points, len(self.poi_names))
        auxiliary = np.array(
            [
                [p.auxiliary[name] for name in self.auxiliary_names]
                for p in self._points
            ],
            dtype=float,
        ).reshape(n_points, len(self.auxiliary_names))

        with h5py.File(self.file, "a") as f:
            check_overwrite(f, self.overwrite, self.group)
            g = f.create_group(self.group)
            write_string_array(g, POI_NAMES, self.poi_names)
            write_string_array(g, AUXILIARY_NAMES, self.auxiliary_names)
            write_float_array(g, COORDINATES, coordinates)
            write_float_array(g, AUXILIARY, auxiliary)
            write_float_array(
                g, DELTA_NLL, [p.delta_nll for p in self._points]
            )
            write_float_array(g, QUANTILE, [p.quantile for p in self._points])
            write_string_array(
                g, STATUS, [p.status.value for p in self._points]
            )
            g.attrs["n_points"] = len(self._points)
        logger.debug(f"Wrote {len(self._points)} points to {self.file}.")

    def finalize(self) -> None:
        """See :meth:`ResultSink.finalize`."""
        self.flush()


def _read_strings(dset: h5py.Dataset) -> list[str]:
    return [
        s.decode("utf8") if isinstance(s, bytes) else str(s) for s in dset[:]
    ]


def read_scan(file: str, group: str = SCAN) -> pd.DataFrame:
    """
    Read the points written by a :class:`Hdf5Sink`.

    Parameters
    ----------
    file:
        HDF5 file name.
    group:
        Name of the group holding the scan.

    Returns
    -------
    One row per point, with the same columns as
    :meth:`MemorySink.as_dataframe`.
    """
    with h5py.File(file, "r") as f:
        g = f[group]
        poi_names = _read_strings(g[POI_NAMES])
        auxiliary_names = _read_strings(g[AUXILIARY_NAMES])
        data = {}
        coordinates = g[COORDINATES][()]
        for j, name in enumerate(poi_names):
            data[name] = coordinates[:, j]
        auxiliary = g[AUXILIARY][()]
        for j, name in enumerate(auxiliary_names):
            data[name] = auxiliary[:, j]
        data[DELTA_NLL] = g[DELTA_NLL][()]
        data[QUANTILE] = g[QUANTILE][()]
        data[STATUS] = _read_strings(g[STATUS])
    return pd.DataFrame(data)
