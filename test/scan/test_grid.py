"""Test the grid scans."""

import itertools

import numpy as np
import pytest

import pymdscan
from pymdscan import C
from pymdscan.scan import cell_centres
from pymdscan.scan.grid import near_refine_threshold
from pymdscan.testing import gaussian_model, invalid_region_model

PointStatus = pymdscan.PointStatus


def _coordinates(points):
    return np.array([p.coordinates for p in points])


def test_grid_2d(model_2d):
    result = pymdscan.multidim_fit(
        model_2d, ["r0", "r1"], "grid", options={"points": 10}
    )
    points = result.sink.scan_points()

    # ceil(sqrt(10)) = 4 cell centres per axis
    assert len(points) == 16
    assert result.summary["n_axis"] == 4
    centres = cell_centres(-5.0, 5.0, 4)
    expected = list(itertools.product(centres, centres))
    assert np.allclose(_coordinates(points), expected)

    for point in points:
        x, y = point.coordinates
        assert point.status == PointStatus.PROFILED
        assert point.delta_nll >= -1e-6
        assert point.delta_nll == pytest.approx(
            0.5 * (x**2 + y**2), abs=1e-5
        )
        assert point.quantile == pytest.approx(
            np.exp(-max(point.delta_nll, 0)), abs=1e-6
        )

    # the best fit comes first
    best_fit = result.sink.points[0]
    assert best_fit.status == PointStatus.BEST_FIT
    assert best_fit.delta_nll == 0.0
    assert best_fit.quantile == 1.0


def test_fast_scan(model_2d):
    result = pymdscan.multidim_fit(
        model_2d,
        ["r0", "r1"],
        "grid",
        options={"points": 9, "fast_scan": True},
    )
    for point in result.sink.scan_points():
        x, y = point.coordinates
        assert point.status == PointStatus.UNPROFILED
        # the nuisance parameter stays at its best fit value
        assert point.delta_nll == pytest.approx(
            0.5 * (x**2 + y**2) + 0.5 * x**2, abs=1e-5
        )


def test_profiling_ceiling(model_2d):
    result = pymdscan.multidim_fit(
        model_2d,
        ["r0", "r1"],
        "grid",
        options={"points": 16, "max_delta_nll_for_prof": 3.0},
    )
    n_unprofiled = n_profiled = 0
    for point in result.sink.scan_points():
        x, y = point.coordinates
        unprofiled = 0.5 * (x**2 + y**2) + 0.5 * x**2
        if point.status == PointStatus.UNPROFILED:
            n_unprofiled += 1
            assert unprofiled > 3.0
            assert point.delta_nll == pytest.approx(unprofiled, abs=1e-5)
        else:
            n_profiled += 1
            assert point.status == PointStatus.PROFILED
            assert unprofiled <= 3.0
            assert point.delta_nll == pytest.approx(
                0.5 * (x**2 + y**2), abs=1e-5
            )
    assert n_unprofiled > 0
    assert n_profiled == 4


def test_invalid_points():
    model = invalid_region_model(x_max=2.0)
    result = pymdscan.multidim_fit(
        model, ["r0", "r1"], "grid", options={"points": 16}
    )
    points = result.sink.scan_points()
    assert len(points) == 16
    for point in points:
        if point.coordinates[0] > 2.0:
            assert point.status == PointStatus.INVALID
            assert point.delta_nll == C.INVALID_DELTA_NLL
            assert point.quantile == C.INVALID_QUANTILE
        else:
            assert point.status == PointStatus.PROFILED
            assert point.delta_nll < C.INVALID_DELTA_NLL
    assert sum(p.status == PointStatus.INVALID for p in points) == 4


def test_grid3x3_counts():
    model = invalid_region_model(x_max=2.0)
    result = pymdscan.multidim_fit(
        model, ["r0", "r1"], "grid3x3", options={"points": 4}
    )
    points = result.sink.scan_points()
    # 2 x 2 cells with 8 neighbours each
    assert len(points) == 36
    # the cells at r0 = 2.5 and their neighbours are sentinels
    invalid = [p for p in points if p.status == PointStatus.INVALID]
    assert len(invalid) == 18
    assert all(p.delta_nll == C.INVALID_DELTA_NLL for p in invalid)


def test_grid3x3_profiling_rule():
    """Neighbours are profiled only close to the 68% and 95% levels."""
    # without coupling, profiling does not change the delta NLL
    model = gaussian_model(center=(0.0, 0.0), coupling=0.0)
    result = pymdscan.multidim_fit(
        model, ["r0", "r1"], "grid3x3", options={"points": 4}
    )
    points = result.sink.scan_points()
    assert len(points) == 36

    n_profiled = 0
    for k in range(0, len(points), 9):
        center, neighbours = points[k], points[k + 1 : k + 9]
        assert center.status == PointStatus.PROFILED
        dx = abs(neighbours[0].coordinates[0] - center.coordinates[0])
        assert dx == pytest.approx(10.0 / 2 / 3)
        for point in neighbours:
            expected = near_refine_threshold(
                center.delta_nll
            ) or near_refine_threshold(point.delta_nll)
            if expected:
                n_profiled += 1
                assert point.status == PointStatus.PROFILED
            else:
                assert point.status == PointStatus.UNPROFILED
    assert n_profiled > 0


def test_grid3x3_requires_two_pois(model_1d):
    with pytest.raises(pymdscan.ScanConfigurationError):
        pymdscan.multidim_fit(model_1d, ["r0"], "grid3x3")


def test_grid_nd():
    model = gaussian_model(center=(0.0, 0.0, 0.0))
    result = pymdscan.multidim_fit(
        model, ["r0", "r1", "r2"], "grid", options={"points": 27}
    )
    points = result.sink.scan_points()
    assert len(points) == 27
    centres = cell_centres(-5.0, 5.0, 3)
    assert np.allclose(
        _coordinates(points), list(itertools.product(centres, repeat=3))
    )
    origin = [p for p in points if np.allclose(p.coordinates, 0.0)]
    assert len(origin) == 1
    assert origin[0].delta_nll == pytest.approx(0.0, abs=1e-6)


def test_grid_1d_uniform(model_1d):
    result = pymdscan.multidim_fit(
        model_1d,
        ["r0"],
        "grid",
        options={"points": 10},
        distribution_power=1.0,
    )
    points = result.sink.scan_points()
    assert np.allclose(_coordinates(points)[:, 0], cell_centres(-5, 5, 10))


def test_grid_1d_around_best_fit(model_1d):
    result = pymdscan.multidim_fit(
        model_1d,
        ["r0"],
        "grid",
        options={"points": 20},
        distribution_power=0.5,
    )
    points = result.sink.scan_points()
    assert len(points) == 20
    x = _coordinates(points)[:, 0]
    # the best fit first, then the right and the left side
    assert x[0] == pytest.approx(0.0, abs=1e-6)
    assert np.all(np.diff(x[1:11]) > 0)
    assert np.all(np.diff(x[11:]) < 0)
    assert x.max() == 5.0
    assert x.min() == -5.0
    assert len(np.unique(x)) == 20
    assert result.summary["bracket"] is None


def test_grid_1d_bracketing():
    model = gaussian_model(center=(1.3,), bound=5.0)
    result = pymdscan.multidim_fit(
        model,
        ["r0"],
        "grid",
        options={"points": 20},
        distribution_power=2.0,
    )
    points = result.sink.scan_points()
    assert len(points) == 20
    bracket = result.summary["bracket"]
    assert bracket.converged
    assert bracket.n_probes < 20
    assert abs(result.summary["origin"] - 1.3) < 10.0 / 20

    # the points after the probes are placed around the origin
    x = _coordinates(points)[bracket.n_probes :, 0]
    assert x[0] == result.summary["origin"]
    for point in points:
        assert point.delta_nll == pytest.approx(
            0.5 * (point.coordinates[0] - 1.3) ** 2, abs=1e-5
        )
