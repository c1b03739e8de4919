"""Test the threshold crossing search and the confidence box."""

import numpy as np
import pytest

import pymdscan
from pymdscan.scan import find_crossing
from pymdscan.testing import gaussian_model
from pymdscan.util import cl_to_delta_nll


@pytest.mark.parametrize("bound,expected", [(5.0, 1.2), (-5.0, -1.2)])
def test_find_crossing(model_1d, make_context, bound, expected):
    context = make_context(model_1d, ["r0"])
    # the nuisance parameter is profiled, 0.5 * r0 ** 2 = 0.72
    x = find_crossing(context, 0, context.nll0 + 0.72, 0.0, bound)
    assert x == pytest.approx(expected, abs=1e-3)
    assert model_1d.is_fixed("r0")


def test_find_crossing_exact_step(model_1d, make_context):
    context = make_context(model_1d, ["r0"])
    x = find_crossing(context, 0, context.nll0 + 0.5, 0.0, 5.0)
    assert x == pytest.approx(1.0, abs=1e-3)


def test_no_crossing(model_1d, make_context):
    context = make_context(model_1d, ["r0"])
    x = find_crossing(context, 0, context.nll0 + 20.0, 0.0, 5.0)
    assert np.isnan(x)
    # the search ends at the bound
    assert model_1d.get_value("r0") == 5.0
    assert np.isnan(find_crossing(context, 0, 1.0, 5.0, 5.0))


def test_cross():
    """Crossings along each POI, the other POI floating."""
    model = gaussian_model(center=(0.0, 0.0), sigma=(1.0, 2.0))
    result = pymdscan.multidim_fit(
        model, ["r0", "r1"], "cross", confidence_level=0.68
    )
    box = result.summary
    half_width = np.sqrt(2 * cl_to_delta_nll(0.68, 2))

    assert box.bounds["r0"] == pytest.approx(
        (-half_width, half_width), abs=1e-3
    )
    assert box.bounds["r1"] == pytest.approx(
        (-2 * half_width, 2 * half_width), abs=2e-3
    )
    assert box.center("r1") == pytest.approx(0.0, abs=2e-3)
    assert box.at_edge == {"r0": (False, False), "r1": (False, False)}

    points = result.sink.scan_points()
    assert len(points) == 4
    for point in points:
        assert point.status == pymdscan.PointStatus.CROSSING
        assert point.quantile == pytest.approx(0.32)
        assert point.delta_nll == pytest.approx(
            cl_to_delta_nll(0.68, 2), abs=1e-3
        )
    # crossings of r0 are committed with r1 at its profiled value
    assert points[0].coordinates == pytest.approx(
        (-half_width, 0.0), abs=2e-3
    )


def test_cross_range_edge():
    """Without a crossing inside the bounds the box ends at the bound."""
    model = gaussian_model(center=(0.0, 0.0), bound=1.0)
    result = pymdscan.multidim_fit(
        model, ["r0", "r1"], "cross", confidence_level=0.68
    )
    box = result.summary
    assert box.bounds["r0"] == (-1.0, 1.0)
    assert box.at_edge["r0"] == (True, True)

    points = result.sink.scan_points()
    assert [p.status for p in points] == [pymdscan.PointStatus.RANGE_EDGE] * 4
    # p-value of delta NLL 0.5 with 2 degrees of freedom
    assert points[0].delta_nll == pytest.approx(0.5, abs=1e-6)
    assert points[0].quantile == pytest.approx(np.exp(-0.5), abs=1e-5)
