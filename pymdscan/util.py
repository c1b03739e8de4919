"""
Utilities
=========

Package-wide utilities.

"""

import math

import numpy as np
import scipy.stats
from tqdm import tqdm as _tqdm


def delta_nll_to_pvalue(delta_nll: float, df: int) -> float:
    """
    Chi2 survival probability of `2 * delta_nll` with `df` degrees of freedom.

    Negative `delta_nll` (numerical noise around the best fit) maps to 1.
    """
    return float(scipy.stats.chi2.sf(2.0 * max(delta_nll, 0.0), df=df))


def cl_to_delta_nll(cl: float, df: int) -> float:
    """
    Transform a confidence level to the corresponding delta NLL threshold.

    Parameters
    ----------
    cl:
        Lower tail probability of the chi2 distribution.
    df:
        Degrees of freedom.

    Returns
    -------
    delta_nll:
        Half the chi2 quantile, i.e. the rise of the negative
        log-likelihood above its minimum.
    """
    return 0.5 * float(scipy.stats.chi2.ppf(cl, df=df))


def integer_root(value: int, n: int, round_up: bool = True) -> int:
    """
    Integer `n`-th root of `value`, rounded up or down.

    Exact for perfect powers, where ``value ** (1 / n)`` may suffer from
    floating point error (e.g. ``27 ** (1 / 3) > 3``).
    """
    if value < 1:
        return 0
    root = max(int(round(value ** (1.0 / n))), 1)
    if round_up:
        while root**n < value:
            root += 1
        while root > 1 and (root - 1) ** n >= value:
            root -= 1
    else:
        while root > 1 and root**n > value:
            root -= 1
        while (root + 1) ** n <= value:
            root += 1
    return root


def polar_angle(dx: float, dy: float) -> float:
    """Polar angle of the vector (dx, dy), in [0, 2 pi)."""
    theta = math.atan2(dy, dx)
    if theta < 0:
        theta += 2 * math.pi
    return theta


def tqdm(*args, enable: bool = None, **kwargs):
    """
    Create a progress bar using tqdm.

    Parameters
    ----------
    args:
        Arguments passed to tqdm.
    enable:
        Whether to enable the progress bar.
        If None, use tqdm defaults.
        Mutually exclusive with `disable`.
    kwargs:
        Keyword arguments passed to tqdm.

    Returns
    -------
    progress_bar:
        A progress bar.
    """
    # leave TQDM_DISABLE and other global settings alone unless asked
    disable = kwargs.pop("disable", None)

    if enable is not None:
        if disable is not None and enable == disable:
            raise ValueError(
                "Contradicting values for `enable` and `disable` passed."
            )
        disable = not enable

    if disable is not None:
        kwargs["disable"] = disable
    return _tqdm(*args, **kwargs)
