"""Test scans split into index ranges."""

import numpy as np
import pytest

import pymdscan
import pymdscan.engine
from pymdscan.scan import merge_points, partition_ranges, partitioned_fit
from pymdscan.testing import circle_model, gaussian_model

PointStatus = pymdscan.PointStatus


def _assert_same_points(points, other):
    assert len(points) == len(other)
    for point, expected in zip(points, other):
        assert point.status == expected.status
        assert np.allclose(point.coordinates, expected.coordinates)
        assert point.delta_nll == pytest.approx(expected.delta_nll, abs=1e-8)


def test_partition_ranges():
    assert partition_ranges(0, 9, 3) == [(0, 3), (4, 6), (7, 9)]
    assert partition_ranges(5, 6, 1) == [(5, 6)]
    # fewer indices than jobs
    assert partition_ranges(0, 1, 3) == [(0, 0), (1, 1)]
    with pytest.raises(pymdscan.ScanConfigurationError):
        partition_ranges(0, 9, 0)


def test_merge_points():
    best_fit = pymdscan.ScanPoint((0.0,), 0.0, 1.0, {}, PointStatus.BEST_FIT)
    streams = [
        [best_fit, pymdscan.ScanPoint((1.0,), 0.5, 0.3)],
        [best_fit, pymdscan.ScanPoint((2.0,), 2.0, 0.05)],
    ]
    merged = merge_points(streams)
    assert [p.coordinates[0] for p in merged] == [0.0, 1.0, 2.0]


@pytest.mark.parametrize(
    "model,poi_names,algorithm,settings,points",
    [
        (gaussian_model((0.0, 0.0)), ["r0", "r1"], "grid", {}, 16),
        (gaussian_model((0.5,)), ["r0"], "grid", {}, 15),
        (
            gaussian_model((0.5,)),
            ["r0"],
            "grid",
            {"distribution_power": 2.0},
            20,
        ),
        (gaussian_model((0.0, 0.0)), ["r0", "r1"], "grid3x3", {}, 9),
        (gaussian_model((0.0, 0.0)), ["r0", "r1"], "smartscan", {}, 16),
        (gaussian_model((0.0, 0.0)), ["r0", "r1"], "random", {"seed": 1}, 8),
        (circle_model(), ["x", "y"], "contour2d", {}, 6),
    ],
)
def test_partitioned_equals_single(
    model, poi_names, algorithm, settings, points
):
    """The merged ranges reproduce the scan run in one piece."""
    options = {"points": points}
    single = pymdscan.multidim_fit(
        model, poi_names, algorithm, options=options, **settings
    )
    split = partitioned_fit(
        model, poi_names, algorithm, options=options, n_jobs=3, **settings
    )
    _assert_same_points(split.sink.points, single.sink.points)
    assert len(split.summary["partitions"]) == 3
    assert split.sink.points[0].status == PointStatus.BEST_FIT
    assert (
        sum(p.status == PointStatus.BEST_FIT for p in split.sink.points) == 1
    )


@pytest.mark.parametrize(
    "engine",
    [
        pymdscan.engine.MultiThreadEngine(n_threads=2),
        pymdscan.engine.MultiProcessEngine(n_procs=2),
    ],
)
def test_partitioned_engines(engine, hdf5_file):
    model = gaussian_model((0.0, 0.0))
    options = {"points": 9}
    single = pymdscan.multidim_fit(model, ["r0", "r1"], options=options)
    sink = pymdscan.Hdf5Sink(hdf5_file)
    split = partitioned_fit(
        model,
        ["r0", "r1"],
        options=options,
        n_jobs=2,
        engine=engine,
        sink=sink,
    )
    assert split.sink is sink
    df = pymdscan.read_scan(hdf5_file)
    assert len(df) == len(single.sink.points)
    assert np.allclose(
        df[pymdscan.C.DELTA_NLL], [p.delta_nll for p in single.sink.points]
    )


def test_partition_last_point(model_2d):
    split = partitioned_fit(
        model_2d,
        ["r0", "r1"],
        "grid",
        options={"points": 16, "first_point": 4, "last_point": 9},
        n_jobs=2,
    )
    ranges = [
        (p["n_points"], p["n_axis"]) for p in split.summary["partitions"]
    ]
    assert ranges == [(16, 4), (16, 4)]
    assert len(split.sink.scan_points()) == 6


def test_not_partitionable(circle):
    with pytest.raises(pymdscan.ScanConfigurationError):
        partitioned_fit(circle, ["x", "y"], "stitch2d")
    with pytest.raises(pymdscan.ScanConfigurationError):
        partitioned_fit(circle, ["x", "y"], "random")
    with pytest.raises(pymdscan.ScanConfigurationError):
        partitioned_fit(
            circle, ["x", "y"], options={"points": 4, "first_point": 10}
        )
