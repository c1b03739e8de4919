"""Scan at uniformly drawn random points."""

import logging
from typing import Optional

import numpy as np

from ..util import tqdm
from .context import ScanContext

logger = logging.getLogger(__name__)


def random_points(
    context: ScanContext, seed: Optional[int] = None
) -> np.ndarray:
    """Draw all points of a random scan, shape (points, n)."""
    rng = np.random.default_rng(seed)
    bounds = np.array([context.poi_bounds(j) for j in range(context.n_pois)])
    return rng.uniform(
        bounds[:, 0], bounds[:, 1], size=(context.options.points, len(bounds))
    )


def scan_random(context: ScanContext, seed: Optional[int] = None) -> dict:
    """
    Evaluate the POIs at random points, uniform within their bounds.

    The full sequence of points is drawn first, so that scans split into
    index ranges with the same seed together visit the same points.

    Parameters
    ----------
    context:
        The scan context, with the model at the best fit.
    seed:
        Seed of the random number generator.
    """
    model = context.model
    samples = random_points(context, seed)
    logger.info(f"Scanning {len(samples)} random points.")

    with model.scoped_state():
        context.fix_pois()
        start = model.snapshot()
        for index, values in enumerate(
            tqdm(samples, enable=context.options.progress_bar)
        ):
            if context.in_range(index):
                context.evaluate_point(values, start)

    return {"n_points": len(samples), "seed": seed}
