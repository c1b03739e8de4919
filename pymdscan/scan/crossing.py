"""Search for the point where the profiled objective crosses a threshold."""

import logging

import numpy as np

from .context import ScanContext

logger = logging.getLogger(__name__)


def _profiled_nll(context: ScanContext, index: int, x: float) -> float:
    """Profiled objective with parameter `index` fixed at `x`."""
    model = context.model
    model.set_value(index, x)
    result = context.profile()
    if result.success:
        return result.fval
    return model.evaluate()


def find_crossing(
    context: ScanContext,
    index: int,
    threshold: float,
    x_start: float,
    x_bound: float,
) -> float:
    """
    Find where the profiled objective along one parameter reaches a level.

    Starting below the threshold at `x_start`, the parameter steps towards
    `x_bound`, profiling all other free parameters at each step. A step that
    overshoots the threshold is taken back and halved, so that the search
    ends in a bisection.

    The parameter is fixed during the search and the model is left at the
    last evaluated state; callers restore it.

    Parameters
    ----------
    context:
        The scan context.
    index:
        Model index of the parameter.
    threshold:
        Absolute objective value to find.
    x_start:
        Start value, where the objective is below the threshold.
    x_bound:
        Limit of the search.

    Returns
    -------
    The crossing, or ``nan`` if the objective stays below the threshold up
    to `x_bound`.
    """
    model = context.model
    options = context.options
    model.fix(index)

    span = x_bound - x_start
    if span == 0:
        return np.nan
    step = options.step_fraction * span
    min_step = (
        options.crossing_tolerance
        * options.step_fraction
        * max(1.0, abs(span))
    )

    x_low = x_start
    low_state = model.snapshot()
    while abs(step) > min_step:
        x_new = x_low + step
        if (x_new - x_bound) * span > 0:
            x_new = x_bound
        fval = _profiled_nll(context, index, x_new)
        if np.isfinite(fval) and abs(fval - threshold) < (
            options.crossing_tolerance
        ):
            return x_new
        if not np.isfinite(fval) or fval > threshold:
            # overshoot, go back and bisect
            step = 0.5 * (x_new - x_low)
            model.restore(low_state)
            continue
        if x_new == x_bound:
            logger.debug(
                f"No crossing of {threshold:.6g} for "
                f"{model.x_names[index]} up to {x_bound:.6g}."
            )
            return np.nan
        x_low = x_new
        low_state = model.snapshot()

    return x_low + step
