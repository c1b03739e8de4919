"""Test the placement of points along one axis."""

import numpy as np
import pytest

from pymdscan.scan import PointDistributor, cell_centres
from pymdscan.util import integer_root


def test_cell_centres():
    assert np.allclose(cell_centres(0, 1, 4), [0.125, 0.375, 0.625, 0.875])
    assert np.allclose(cell_centres(-5, 5, 1), [0.0])


@pytest.mark.parametrize("power", [0.5, 1.0, 2.0])
def test_values(power):
    """Ordered values from bound to bound, one of them the origin."""
    distributor = PointDistributor(-1.0, 3.0, 1.0, power)
    values = distributor.values(9)
    assert len(values) == 9
    assert np.all(np.diff(values) > 0)
    assert values[0] == -1.0
    assert values[-1] == 3.0
    assert values[4] == 1.0


def test_power_greater_one_dense_at_origin():
    values = PointDistributor(-4.0, 4.0, 0.0, 2.0).values(9)
    spacing = np.diff(values)
    assert spacing[4] < spacing[5] < spacing[6] < spacing[7]
    assert spacing[3] < spacing[2] < spacing[1] < spacing[0]


def test_power_one_uniform():
    values = PointDistributor(-4.0, 4.0, 0.0, 1.0).values(9)
    assert np.allclose(values, np.linspace(-4.0, 4.0, 9))


def test_split():
    """Points split in proportion to the distances to the bounds."""
    distributor = PointDistributor(0.0, 10.0, 2.5, 2.0)
    assert distributor.split(8) == (2, 6)
    assert PointDistributor(0.0, 10.0, 0.0, 2.0).split(5) == (0, 5)
    assert PointDistributor(0.0, 10.0, 10.0, 2.0).split(5) == (5, 0)


def test_invalid():
    with pytest.raises(ValueError):
        PointDistributor(1.0, 1.0, 1.0, 2.0)
    with pytest.raises(ValueError):
        PointDistributor(0.0, 1.0, 2.0, 2.0)
    with pytest.raises(ValueError):
        PointDistributor(0.0, 1.0, 0.5, 0.0)
    distributor = PointDistributor(0.0, 1.0, 0.5, 2.0)
    with pytest.raises(ValueError):
        distributor.value(3, 2, 2)


def test_integer_root():
    assert integer_root(27, 3) == 3
    assert integer_root(28, 3) == 4
    assert integer_root(26, 3, round_up=False) == 2
    assert integer_root(1000, 3) == 10
    assert integer_root(1000, 3, round_up=False) == 10
    assert integer_root(999, 3, round_up=False) == 9
    assert integer_root(50, 2) == 8
    assert integer_root(49, 2) == 7
    assert integer_root(1, 4) == 1
