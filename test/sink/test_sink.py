"""Test the result sinks and the scan point records."""

import pickle

import numpy as np
import pandas as pd
import pytest

import pymdscan
from pymdscan import C
from pymdscan.sink import read_scan_csv
from pymdscan.testing import gaussian_model

POINTS = [
    pymdscan.ScanPoint(
        (0.0, 0.0), 0.0, 1.0, {"theta0": 0.1}, pymdscan.PointStatus.BEST_FIT
    ),
    pymdscan.ScanPoint((1.0, -0.5), 0.625, 0.535, {"theta0": 0.9}),
    pymdscan.ScanPoint(
        (4.0, 4.0),
        C.INVALID_DELTA_NLL,
        C.INVALID_QUANTILE,
        {"theta0": 0.0},
        pymdscan.PointStatus.INVALID,
    ),
]


def _fill(sink):
    sink.initialize(["r0", "r1"], ["theta0"])
    for point in POINTS:
        sink.commit(point)
    sink.finalize()
    return sink


def _check_frame(df):
    assert list(df.columns) == [
        "r0",
        "r1",
        "theta0",
        C.DELTA_NLL,
        C.QUANTILE,
        C.STATUS,
    ]
    assert len(df) == len(POINTS)
    assert np.allclose(df["r0"], [0.0, 1.0, 4.0])
    assert np.allclose(df["theta0"], [0.1, 0.9, 0.0])
    assert np.allclose(df[C.DELTA_NLL], [0.0, 0.625, 9999.0])
    assert np.allclose(df[C.QUANTILE], [1.0, 0.535, 0.0])
    assert list(df[C.STATUS]) == ["best_fit", "profiled", "invalid"]


def test_scan_point():
    point = POINTS[1]
    assert point.coordinates == (1.0, -0.5)
    assert point.status == pymdscan.PointStatus.PROFILED
    with pytest.raises(AttributeError):
        point.delta_nll = 1.0
    with pytest.raises(TypeError):
        point.auxiliary["theta0"] = 1.0
    assert pickle.loads(pickle.dumps(point)) == point

    record = point.to_dict(["r0", "r1"])
    assert record["r1"] == -0.5
    assert record[C.STATUS] == "profiled"
    with pytest.raises(ValueError):
        point.to_dict(["r0"])


def test_memory_sink():
    sink = _fill(pymdscan.MemorySink())
    assert len(sink) == 3
    assert list(sink) == POINTS
    assert sink.scan_points() == POINTS[1:]
    _check_frame(sink.as_dataframe())


def test_commit_checks():
    sink = pymdscan.MemorySink()
    with pytest.raises(RuntimeError):
        sink.commit(POINTS[0])
    sink.initialize(["r0"])
    with pytest.raises(ValueError):
        sink.commit(POINTS[0])


def test_reinitialize():
    """A sink accepts several runs with the same layout only."""
    sink = pymdscan.MemorySink()
    sink.initialize(["r0", "r1"], ["theta0"])
    sink.initialize(["r0", "r1"], ["theta0"])
    with pytest.raises(ValueError):
        sink.initialize(["r0", "r1"])


def test_csv_sink(csv_file):
    _fill(pymdscan.CsvSink(csv_file))
    _check_frame(read_scan_csv(csv_file))

    # appending with the same columns
    sink = pymdscan.CsvSink(csv_file)
    sink.initialize(["r0", "r1"], ["theta0"])
    sink.commit(POINTS[1])
    assert len(pd.read_csv(csv_file)) == 4

    # different columns
    with pytest.raises(RuntimeError):
        pymdscan.CsvSink(csv_file).initialize(["r0"])
    sink = pymdscan.CsvSink(csv_file, overwrite=True)
    sink.initialize(["r0"])
    assert len(pd.read_csv(csv_file)) == 0


def test_hdf5_sink(hdf5_file):
    _fill(pymdscan.Hdf5Sink(hdf5_file))
    _check_frame(pymdscan.read_scan(hdf5_file))

    # several scans in one file
    sink = pymdscan.Hdf5Sink(hdf5_file, group="other")
    sink.initialize(["r0", "r1"], ["theta0"])
    sink.commit(POINTS[1])
    sink.finalize()
    assert len(pymdscan.read_scan(hdf5_file, group="other")) == 1
    assert len(pymdscan.read_scan(hdf5_file)) == 3


def test_hdf5_overwrite(hdf5_file):
    _fill(pymdscan.Hdf5Sink(hdf5_file))
    with pytest.raises(RuntimeError):
        pymdscan.Hdf5Sink(hdf5_file).initialize(["r0", "r1"], ["theta0"])

    sink = pymdscan.Hdf5Sink(hdf5_file, overwrite=True)
    sink.initialize(["r0"])
    sink.finalize()
    df = pymdscan.read_scan(hdf5_file)
    assert len(df) == 0
    assert list(df.columns) == ["r0", C.DELTA_NLL, C.QUANTILE, C.STATUS]


def test_scan_into_sinks(hdf5_file, csv_file):
    """A scan writes the same points to every kind of sink."""
    model = gaussian_model(center=(0.0, 0.0))
    sinks = [
        pymdscan.MemorySink(),
        pymdscan.CsvSink(csv_file),
        pymdscan.Hdf5Sink(hdf5_file),
    ]
    for sink in sinks:
        pymdscan.multidim_fit(
            model,
            ["r0", "r1"],
            "grid",
            options={"points": 9, "save_specified": ["all"]},
            sink=sink,
        )
    memory = sinks[0].as_dataframe()
    for df in [read_scan_csv(csv_file), pymdscan.read_scan(hdf5_file)]:
        assert list(df.columns) == list(memory.columns)
        assert np.allclose(df[C.DELTA_NLL], memory[C.DELTA_NLL])
        assert list(df[C.STATUS]) == list(memory[C.STATUS])
