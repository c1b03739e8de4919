"""Bracketing of a one-dimensional minimum."""

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BracketResult:
    """
    Outcome of :func:`bracket_minimum`.

    Attributes
    ----------
    lower, upper:
        The last pair of probes, enclosing the minimum.
    minimum:
        Midpoint of the probes, the estimated minimum.
    n_probes:
        Number of objective evaluations.
    converged:
        Whether the probes are closer than the requested precision.
    at_boundary:
        Whether the bracket touches the range limits, so that the minimum
        may lie outside.
    """

    lower: float
    upper: float
    minimum: float
    n_probes: int
    converged: bool
    at_boundary: bool


def bracket_minimum(
    evaluate: Callable[[float], float],
    lower: float,
    upper: float,
    n_points: int,
) -> BracketResult:
    """
    Narrow down the minimum of a unimodal function by interval trisection.

    Each iteration evaluates the function at the two points splitting
    ``[a, b]`` into thirds and drops the third beyond the larger value.
    The search stops once the interval is smaller than
    ``(upper - lower) / n_points`` or after ``n_points // 2`` iterations.

    Parameters
    ----------
    evaluate:
        The function, typically profiling and committing a scan point.
    lower, upper:
        The search range.
    n_points:
        Point budget, defines the precision and bounds the number of
        evaluations.

    Returns
    -------
    The final bracket.
    """
    precision = (upper - lower) / n_points
    a, b = lower, upper
    x1, x2 = lower, upper
    n_probes = 0

    for _ in range(n_points // 2):
        if b - a < precision:
            break
        third = (b - a) / 3
        x1 = a + third
        x2 = b - third
        y1 = evaluate(x1)
        y2 = evaluate(x2)
        n_probes += 2
        if y1 < y2:
            b = x2
        else:
            a = x1

    converged = x2 - x1 <= precision
    if not converged:
        logger.warning(
            f"Minimum bracket [{x1:.6g}, {x2:.6g}] is wider than the "
            f"precision {precision:.6g}. Range too narrow for the number of "
            f"points; increase the points or decrease the range."
        )
    at_boundary = x2 - lower < precision or upper - x1 < precision
    if at_boundary:
        logger.warning(
            f"Minimum bracket [{x1:.6g}, {x2:.6g}] touches the range "
            f"[{lower:.6g}, {upper:.6g}], the minimum may be outside of it."
        )

    return BracketResult(
        lower=x1,
        upper=x2,
        minimum=0.5 * (x1 + x2),
        n_probes=n_probes,
        converged=converged,
        at_boundary=at_boundary,
    )
