"""Grid scans in one, two and more dimensions."""

import itertools
import logging

from ..C import REFINE_OFFSETS, REFINE_THRESHOLDS, REFINE_WINDOW, PointStatus
from ..model import ParameterSnapshot
from ..util import integer_root, tqdm
from .bracket import bracket_minimum
from .context import ScanContext
from .distribute import PointDistributor, cell_centres

logger = logging.getLogger(__name__)


def near_refine_threshold(delta_nll: float) -> bool:
    """Whether a delta NLL is close to the 68% or 95% level in 2-D."""
    return min(abs(delta_nll - level) for level in REFINE_THRESHOLDS) < (
        REFINE_WINDOW
    )


def n_grid_points(n_pois: int, points: int) -> int:
    """Number of point indices of a grid scan."""
    if n_pois == 1:
        return points
    return integer_root(points, n_pois) ** n_pois


def scan_grid(
    context: ScanContext,
    distribution_power: float = 0.5,
    refine: bool = False,
) -> dict:
    """
    Scan the POIs on a grid spanning their bounds.

    All scanned POIs are held constant; at each grid point the nuisance
    parameters are profiled starting from the best fit.

    * One POI: points are placed around an origin with a
      :class:`PointDistributor`. With ``distribution_power > 1`` the
      origin is first located with :func:`bracket_minimum`, with
      ``distribution_power < 1`` it is the best fit, and with
      ``distribution_power == 1`` the points are spread uniformly.
    * Two POIs: ``ceil(sqrt(points))`` cell centres per axis. With
      `refine`, each cell is refined by its 8 neighbours at a third of the
      cell size, profiled only close to the 68% and 95% levels.
    * More POIs: ``ceil(points ** (1 / n))`` cell centres per axis, all
      combinations.

    Parameters
    ----------
    context:
        The scan context, with the model at the best fit.
    distribution_power:
        Exponent of the point distribution in one dimension.
    refine:
        Whether to refine 2-D cells.

    Returns
    -------
    Summary of the grid.
    """
    model = context.model
    n = context.n_pois
    with model.scoped_state():
        context.fix_pois()
        start = model.snapshot()
        if n == 1:
            return _scan_1d(context, start, distribution_power)
        if n == 2:
            return _scan_2d(context, start, refine)
        return _scan_nd(context, start)


def _scan_1d(
    context: ScanContext, start: ParameterSnapshot, power: float
) -> dict:
    lower, upper = context.poi_bounds(0)
    points = context.options.points

    if power == 1:
        values = cell_centres(lower, upper, points)
        for index, x in enumerate(values):
            if context.in_range(index):
                context.evaluate_point((x,), start)
        return {"n_points": points, "origin": None, "bracket": None}

    # bracketing probes take the first indices, then right and left side
    counter = itertools.count()

    def probe(x: float) -> float:
        index = next(counter)
        point = context.evaluate_point(
            (x,), start, commit=context.in_range(index)
        )
        return point.delta_nll

    bracket = None
    if power > 1:
        bracket = bracket_minimum(probe, lower, upper, points)
        origin = bracket.minimum
        remaining = points - bracket.n_probes
        logger.info(
            f"Minimum of {context.poi_names[0]} bracketed in "
            f"[{bracket.lower:.6g}, {bracket.upper:.6g}] with "
            f"{bracket.n_probes} points."
        )
    else:
        origin = context.poi_values()[0]
        remaining = points

    if remaining > 0:
        distributor = PointDistributor(lower, upper, origin, power)
        n_left, n_right = distributor.split(remaining - 1)
        order = [0, *range(1, n_right + 1), *range(-1, -n_left - 1, -1)]
        for signed_index in order:
            index = next(counter)
            if context.in_range(index):
                x = distributor.value(signed_index, n_left, n_right)
                context.evaluate_point((x,), start)

    return {"n_points": points, "origin": origin, "bracket": bracket}


def _scan_2d(
    context: ScanContext, start: ParameterSnapshot, refine: bool
) -> dict:
    model = context.model
    options = context.options
    n_axis = integer_root(options.points, 2)
    (x_lo, x_hi), (y_lo, y_hi) = context.poi_bounds(0), context.poi_bounds(1)
    x_values = cell_centres(x_lo, x_hi, n_axis)
    y_values = cell_centres(y_lo, y_hi, n_axis)
    dx = (x_hi - x_lo) / n_axis / 3
    dy = (y_hi - y_lo) / n_axis / 3
    neighbours = [
        (a, b)
        for a in REFINE_OFFSETS
        for b in REFINE_OFFSETS
        if (a, b) != (0, 0)
    ]

    logger.info(
        f"Scanning {n_axis} x {n_axis} grid over {context.poi_names}"
        + (" with 3x3 refinement." if refine else ".")
    )
    for index in tqdm(range(n_axis * n_axis), enable=options.progress_bar):
        if not context.in_range(index):
            continue
        i, j = divmod(index, n_axis)
        x, y = x_values[i], y_values[j]
        center = context.evaluate_point((x, y), start)
        if not refine:
            continue

        if center.status == PointStatus.INVALID:
            for a, b in neighbours:
                context.commit(
                    context.invalid_point((x + a * dx, y + b * dy))
                )
            continue

        force_profile = not options.fast_scan and near_refine_threshold(
            center.delta_nll
        )

        def rule(delta_nll: float) -> bool:
            if options.fast_scan:
                return False
            return force_profile or near_refine_threshold(delta_nll)

        center_state = model.snapshot()
        for a, b in neighbours:
            context.evaluate_point(
                (x + a * dx, y + b * dy), center_state, profile=rule
            )

    return {"n_points": n_axis * n_axis, "n_axis": n_axis}


def _scan_nd(context: ScanContext, start: ParameterSnapshot) -> dict:
    options = context.options
    n = context.n_pois
    n_axis = integer_root(options.points, n)
    axes = [
        cell_centres(*context.poi_bounds(j), n_axis) for j in range(n)
    ]
    n_points = n_axis**n

    logger.info(
        f"Scanning {n_axis}^{n} = {n_points} grid over {context.poi_names}."
    )
    cells = itertools.product(range(n_axis), repeat=n)
    for index, cell in enumerate(
        tqdm(cells, total=n_points, enable=options.progress_bar)
    ):
        if not context.in_range(index):
            continue
        values = [axes[j][k] for j, k in enumerate(cell)]
        context.evaluate_point(values, start)

    return {"n_points": n_points, "n_axis": n_axis}
