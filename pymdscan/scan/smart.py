"""Scan of the neighbourhood of the best fit in any dimension."""

import logging

from ..util import integer_root, tqdm
from .context import ScanContext
from .distribute import PointDistributor

logger = logging.getLogger(__name__)


def n_smart_points(n_pois: int, points: int) -> int:
    """Number of point indices of a smart scan."""
    return integer_root(points, n_pois, round_up=False) ** n_pois


def smart_scan(context: ScanContext, distribution_power: float = 0.5) -> dict:
    """
    Scan a grid that is dense around the best fit.

    Each axis gets ``floor(points ** (1 / n))`` values from a
    :class:`PointDistributor` centred on the best fit, split over both
    sides in proportion to the distances to the bounds. All combinations
    are evaluated like grid points.

    Parameters
    ----------
    context:
        The scan context, with the model at the best fit.
    distribution_power:
        Exponent of the point distribution.

    Returns
    -------
    Summary with the number of points per axis and the axis values.
    """
    model = context.model
    options = context.options
    n = context.n_pois
    n_axis = integer_root(options.points, n, round_up=False)
    n_points = n_axis**n

    origin = context.poi_values()
    distributors = [
        PointDistributor(*context.poi_bounds(j), origin[j], distribution_power)
        for j in range(n)
    ]
    splits = [d.split(n_axis) for d in distributors]
    axes = [
        [d.value(k, n_left, n_right) for k in range(-n_left, n_right)]
        for d, (n_left, n_right) in zip(distributors, splits)
    ]
    logger.info(
        f"Smart scan with {n_axis} points per axis around {origin}."
    )

    with model.scoped_state():
        context.fix_pois()
        start = model.snapshot()
        for index in tqdm(range(n_points), enable=options.progress_bar):
            if not context.in_range(index):
                continue
            values = []
            for j, (d, (n_left, n_right)) in enumerate(
                zip(distributors, splits)
            ):
                signed_index = (index // n_axis**j) % n_axis - n_left
                values.append(d.value(signed_index, n_left, n_right))
            context.evaluate_point(values, start)

    return {"n_points": n_points, "n_axis": n_axis, "axes": axes}
