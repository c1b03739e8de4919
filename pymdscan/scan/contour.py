"""Two-dimensional confidence contours."""

import logging
import math

import numpy as np

from ..C import (
    STITCH_PROBE_ANGLE,
    STITCH_PROBE_SCALE,
    STITCH_SECTORS,
    PointStatus,
)
from ..result import Contour
from ..util import cl_to_delta_nll, polar_angle
from .box import build_box
from .context import ScanContext
from .crossing import find_crossing
from .options import ScanConfigurationError

logger = logging.getLogger(__name__)


def _check_two_pois(context: ScanContext, algorithm: str) -> None:
    if context.n_pois != 2:
        raise ScanConfigurationError(
            f"{algorithm} requires exactly 2 parameters of interest, got "
            f"{context.n_pois}."
        )


def trace_contour_2d(context: ScanContext, confidence_level: float) -> dict:
    """
    Find contour points by crossing searches along the first POI.

    A :func:`build_box` for the confidence level (not committed) gives the
    extent of the region. The second POI is then fixed at ``points + 1``
    values ``yc + yr * cos(j * pi / points)`` across the box; for each,
    the first POI is re-fitted from its best fit value and the threshold
    crossings towards the box edges are searched and committed with
    quantile ``1 - confidence_level``.

    Returns
    -------
    The box and the committed crossings.
    """
    _check_two_pois(context, "contour2d")
    model = context.model
    points = context.options.points
    ix, iy = context.poi_indices
    name_x, name_y = context.poi_names
    threshold = context.nll0 + cl_to_delta_nll(confidence_level, context.df)

    box = build_box(
        context, confidence_level, name="contour2d", commit_points=False
    )
    y_center = box.center(name_y)
    y_radius = box.half_width(name_y)
    x_min, x_max = box.bounds[name_x]

    crossings = []
    with model.scoped_state() as start:
        x0 = start.values[ix]
        for j in range(points + 1):
            if not context.in_range(j):
                continue
            model.restore(start)
            y = y_center + y_radius * math.cos(j * math.pi / points)
            model.fix(iy, y)
            model.unfix(ix)
            model.set_value(ix, x0)
            context.profile(bounded=False)
            x_center = model.get_value(ix)
            fit_state = model.snapshot()

            for x_edge in (x_max, x_min):
                model.restore(fit_state)
                x = find_crossing(context, ix, threshold, x_center, x_edge)
                if np.isnan(x):
                    continue
                model.set_value(ix, x)
                point = context.commit(
                    context.make_point(
                        model.evaluate() - context.nll0,
                        1 - confidence_level,
                        PointStatus.CROSSING,
                    )
                )
                crossings.append(point.coordinates)
            logger.debug(f"contour2d: {name_y}={y:.6g} done ({j}/{points})")

    return {"box": box, "crossings": crossings}


def stitch_contour_2d(
    context: ScanContext, contour_level: float
) -> list[Contour]:
    """
    Trace a contour of constant delta NLL by marching around the best fit.

    The plane is split into 4 angular sectors. In each sector:

    1. Step outwards from the best fit along the sector's opening angle
       until leaving the POI bounds.
    2. Bisect the radius on the delta NLL against `contour_level` until
       the bracket is narrower than the step.
    3. March along the contour: from the current point, place one probe
       inwards and one outwards, both rotated ahead by 45 degrees, and
       interpolate linearly between them to the level. The interpolated
       point is accepted while its polar angle increases, until the
       sector's closing angle is passed.

    Probes are committed as ordinary scan points, accepted points with
    the status ``CONTOUR`` and delta NLL equal to `contour_level`. The
    march assumes a region that is star-shaped around the best fit.

    Returns
    -------
    One contour per sector.
    """
    _check_two_pois(context, "stitch2d")
    if contour_level <= 0:
        raise ScanConfigurationError("The contour level must be > 0.")

    model = context.model
    points = context.options.points
    (x_lo, x_hi), (y_lo, y_hi) = context.poi_bounds(0), context.poi_bounds(1)
    x0, y0 = context.poi_values()
    step = math.sqrt((x_hi - x_lo) * (y_hi - y_lo) / points)
    quantile = context.pvalue(contour_level)

    def inside(x: float, y: float) -> bool:
        return x_lo <= x <= x_hi and y_lo <= y <= y_hi

    contours = []
    with model.scoped_state():
        context.fix_pois()
        start = model.snapshot()

        def delta_nll(x: float, y: float) -> float:
            return context.evaluate_point((x, y), start).delta_nll

        for sector in range(STITCH_SECTORS):
            theta_min = sector * 2 * math.pi / STITCH_SECTORS
            theta_max = (sector + 1) * 2 * math.pi / STITCH_SECTORS
            cos_t, sin_t = math.cos(theta_min), math.sin(theta_min)

            # outwards until leaving the bounds
            r = step
            while inside(x0 + r * cos_t, y0 + r * sin_t):
                r += step
            r_min, r_max = step, r
            if delta_nll(x0 + r_max * cos_t, y0 + r_max * sin_t) < (
                contour_level
            ):
                logger.warning(
                    f"stitch2d: the contour is not enclosed by the parameter "
                    f"bounds in sector {sector}."
                )

            # bisection on the radius
            n_iterations = 0
            while r_max - r_min > step:
                r = 0.5 * (r_min + r_max)
                if delta_nll(x0 + r * cos_t, y0 + r * sin_t) < contour_level:
                    r_min = r
                else:
                    r_max = r
                n_iterations += 1
                if n_iterations > points // STITCH_SECTORS:
                    logger.warning(
                        f"stitch2d: radius bisection did not converge in "
                        f"sector {sector}, [{r_min:.6g}, {r_max:.6g}]."
                    )
                    break

            probe_length = (
                STITCH_PROBE_SCALE * math.pi * (r_max + r_min) / points
            )
            r = 0.5 * (r_min + r_max)
            x, y = x0 + r * cos_t, y0 + r * sin_t
            theta = polar_angle(x - x0, y - y0)
            boundary = []
            wrapped = False

            # march while the angle increases
            while theta < theta_max:
                x1 = x - probe_length * math.cos(theta - STITCH_PROBE_ANGLE)
                y1 = y - probe_length * math.sin(theta - STITCH_PROBE_ANGLE)
                x2 = x + probe_length * math.cos(theta + STITCH_PROBE_ANGLE)
                y2 = y + probe_length * math.sin(theta + STITCH_PROBE_ANGLE)
                z1 = delta_nll(x1, y1) - contour_level
                z2 = delta_nll(x2, y2) - contour_level
                if z1 == z2:
                    logger.warning(
                        f"stitch2d: probes do not straddle the contour in "
                        f"sector {sector}, stopping at angle {theta:.4g}."
                    )
                    break
                x_new = x1 + (x2 - x1) * z1 / (z1 - z2)
                y_new = y1 + (y2 - y1) * z1 / (z1 - z2)
                theta_new = polar_angle(x_new - x0, y_new - y0)
                if not theta_new > theta:
                    wrapped = theta_new < theta - math.pi
                    break
                context.commit(
                    context.make_point(
                        contour_level,
                        quantile,
                        PointStatus.CONTOUR,
                        coordinates=(x_new, y_new),
                    )
                )
                boundary.append((x_new, y_new))
                x, y, theta = x_new, y_new, theta_new

            closed = theta >= theta_max or (
                wrapped and sector == STITCH_SECTORS - 1
            )
            if not closed:
                logger.warning(
                    f"stitch2d: sector {sector} stopped at angle "
                    f"{theta:.4g} before {theta_max:.4g}."
                )
            contours.append(
                Contour(
                    center=(x0, y0),
                    level=contour_level,
                    theta_min=theta_min,
                    theta_max=theta_max,
                    points=tuple(boundary),
                    closed=closed,
                )
            )
            logger.info(
                f"stitch2d: sector {sector} traced with {len(boundary)} "
                f"points."
            )

    return contours
