"""Box enclosing the region below a confidence threshold."""

import logging

import numpy as np

from ..C import PointStatus
from ..result import ThresholdBox
from ..util import cl_to_delta_nll
from .context import ScanContext
from .crossing import find_crossing

logger = logging.getLogger(__name__)


def build_box(
    context: ScanContext,
    confidence_level: float,
    name: str = "box",
    commit_points: bool = True,
) -> ThresholdBox:
    """
    Find the extent of the confidence region along each POI.

    For each scanned POI, the POI is fixed, all other POIs float, and the
    threshold crossing is searched from the best fit towards the lower and
    the upper bound. The threshold is the best fit objective plus half the
    chi2 quantile of `confidence_level` with one degree of freedom per
    scanned and other floating POI.

    Parameters
    ----------
    context:
        The scan context, with the model at the best fit.
    confidence_level:
        Confidence level of the region.
    name:
        Label of the box.
    commit_points:
        Whether to commit the crossings. Found crossings carry the quantile
        ``1 - confidence_level``; where none is found the bound is used and
        committed with its p-value.

    Returns
    -------
    The box.
    """
    model = context.model
    threshold = context.nll0 + cl_to_delta_nll(confidence_level, context.df)
    bounds = {}
    at_edge = {}

    with model.scoped_state() as start:
        for j, poi in enumerate(context.poi_names):
            index = context.poi_indices[j]
            x0 = start.values[index]
            edges = []
            edge_flags = []
            for bound in context.poi_bounds(j):
                model.restore(start)
                context.float_pois()
                x = find_crossing(context, index, threshold, x0, bound)
                if np.isnan(x):
                    x = bound
                    delta_nll = model.evaluate() - context.nll0
                    point = context.make_point(
                        delta_nll,
                        context.pvalue(delta_nll),
                        PointStatus.RANGE_EDGE,
                    )
                    logger.info(
                        f"{name}: no crossing for {poi} towards "
                        f"{bound:.6g}, using the bound."
                    )
                else:
                    model.set_value(index, x)
                    point = context.make_point(
                        model.evaluate() - context.nll0,
                        1 - confidence_level,
                        PointStatus.CROSSING,
                    )
                if commit_points:
                    context.commit(point)
                edges.append(float(x))
                edge_flags.append(point.status == PointStatus.RANGE_EDGE)
            bounds[poi] = tuple(edges)
            at_edge[poi] = tuple(edge_flags)
            logger.info(
                f"{name}: {poi} in [{edges[0]:.6g}, {edges[1]:.6g}] "
                f"at {confidence_level:.4g} CL"
            )

    return ThresholdBox(
        name=name, cl=confidence_level, bounds=bounds, at_edge=at_edge
    )
