"""One-dimensional intervals of each POI."""

import logging

import numpy as np

from ..C import SINGLES_CL_95, PointStatus
from ..util import cl_to_delta_nll
from .context import ScanContext
from .crossing import find_crossing

logger = logging.getLogger(__name__)


def scan_singles(
    context: ScanContext,
    confidence_level: float,
    do95: bool = False,
) -> dict[str, dict[float, tuple[float, float]]]:
    """
    Profile-likelihood interval of each POI, all other parameters floating.

    The interval edges are where the profiled objective rises by half the
    one-dimensional chi2 quantile above the best fit. An edge that is not
    found within the bounds is replaced by the bound. Each edge is
    committed with the other POIs at their best fit values.

    Parameters
    ----------
    context:
        The scan context, with the model at the best fit.
    confidence_level:
        Confidence level of the interval.
    do95:
        Also compute the 95% interval.

    Returns
    -------
    Per POI, the ``(lower, upper)`` interval per confidence level.
    """
    model = context.model
    levels = [confidence_level]
    if do95:
        levels.append(SINGLES_CL_95)

    intervals = {}
    with model.scoped_state() as start:
        best = np.array(context.poi_values())
        for j, poi in enumerate(context.poi_names):
            index = context.poi_indices[j]
            intervals[poi] = {}
            for cl in levels:
                threshold = context.nll0 + cl_to_delta_nll(cl, 1)
                edges = []
                for bound in context.poi_bounds(j):
                    model.restore(start)
                    context.float_pois()
                    x = find_crossing(
                        context, index, threshold, best[j], bound
                    )
                    coordinates = best.copy()
                    if np.isnan(x):
                        x = bound
                        status = PointStatus.RANGE_EDGE
                        delta_nll = model.evaluate() - context.nll0
                        quantile = context.pvalue(delta_nll, df=1)
                    else:
                        model.set_value(index, x)
                        status = PointStatus.INTERVAL
                        delta_nll = model.evaluate() - context.nll0
                        quantile = 1 - cl
                    coordinates[j] = x
                    context.commit(
                        context.make_point(
                            delta_nll, quantile, status, coordinates
                        )
                    )
                    edges.append(float(x))
                intervals[poi][cl] = tuple(edges)

            lower, upper = intervals[poi][confidence_level]
            logger.info(
                f"{poi:>20s} : {best[j]:+8.3f} {lower - best[j]:+6.3f}/"
                f"{upper - best[j]:+6.3f} ({confidence_level:.4g} CL)"
            )

    return intervals
