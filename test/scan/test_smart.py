"""Test the smart scan and the random point scan."""

import numpy as np
import pytest

import pymdscan
from pymdscan.testing import gaussian_model


def test_smart_scan(model_2d):
    result = pymdscan.multidim_fit(
        model_2d,
        ["r0", "r1"],
        "smartscan",
        options={"points": 25},
        distribution_power=0.5,
    )
    points = result.sink.scan_points()
    assert len(points) == 25
    assert result.summary["n_axis"] == 5

    for axis in result.summary["axes"]:
        assert len(axis) == 5
        assert np.all(np.diff(axis) > 0)
        assert np.min(np.abs(axis)) < 1e-6
        assert axis[0] == -5.0
        assert -5.0 <= min(axis) and max(axis) <= 5.0

    coordinates = np.array([p.coordinates for p in points])
    for j, axis in enumerate(result.summary["axes"]):
        assert np.allclose(np.unique(coordinates[:, j]), axis)
    for point in points:
        assert point.delta_nll == pytest.approx(
            0.5 * np.sum(np.square(point.coordinates)), abs=1e-5
        )


def test_smart_scan_floor():
    """Points per axis are rounded down."""
    model = gaussian_model(center=(0.0, 0.0, 0.0))
    result = pymdscan.multidim_fit(
        model, ["r0", "r1", "r2"], "smartscan", options={"points": 30}
    )
    assert result.summary["n_axis"] == 3
    assert len(result.sink.scan_points()) == 27


def test_random(model_2d):
    options = {"points": 12}
    result = pymdscan.multidim_fit(
        model_2d, ["r0", "r1"], "random", options=options, seed=3
    )
    points = result.sink.scan_points()
    assert len(points) == 12
    coordinates = np.array([p.coordinates for p in points])
    assert np.all(np.abs(coordinates) <= 5.0)
    assert len(np.unique(coordinates[:, 0])) == 12

    # the same seed visits the same points
    again = pymdscan.multidim_fit(
        model_2d, ["r0", "r1"], "random", options=options, seed=3
    )
    assert np.array_equal(
        coordinates, [p.coordinates for p in again.sink.scan_points()]
    )
    other = pymdscan.multidim_fit(
        model_2d, ["r0", "r1"], "random", options=options, seed=4
    )
    assert not np.array_equal(
        coordinates, [p.coordinates for p in other.sink.scan_points()]
    )
