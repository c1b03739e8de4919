import os
import tempfile

import pytest

import pymdscan
from pymdscan.testing import circle_model, gaussian_model


@pytest.fixture
def hdf5_file():
    """Generate a temporary hdf5 file."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        file = os.path.join(tmp_dir, "file.hdf5")
        yield file


@pytest.fixture
def csv_file():
    """Generate a temporary csv file."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        file = os.path.join(tmp_dir, "scan.csv")
        yield file


@pytest.fixture
def model_1d():
    """One unit gaussian POI at 0, with one nuisance parameter."""
    return gaussian_model(center=(0.0,))


@pytest.fixture
def model_2d():
    """Two unit gaussian POIs at the origin, with one nuisance parameter."""
    return gaussian_model(center=(0.0, 0.0))


@pytest.fixture
def circle():
    """Two POIs with circular contours, no nuisance parameters."""
    return circle_model()


@pytest.fixture
def optimizer():
    """Default local optimizer."""
    return pymdscan.optimize.ScipyOptimizer()


@pytest.fixture
def make_context(optimizer):
    """Factory of scan contexts at the current model state."""

    def _make_context(model, poi_names, **options):
        sink = pymdscan.MemorySink()
        sink.initialize(poi_names)
        return pymdscan.scan.ScanContext(
            model=model,
            poi_names=poi_names,
            options=pymdscan.ScanOptions(**options),
            optimizer=optimizer,
            sink=sink,
            nll0=model.evaluate(),
        )

    return _make_context
