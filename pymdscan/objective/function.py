from collections.abc import Sequence
from typing import Callable

import numpy as np

from .base import ObjectiveBase


class NLLObjective(ObjectiveBase):
    """
    Negative log-likelihood given by a plain function.

    Parameters
    ----------
    fun:
        The negative log-likelihood, of the form

            ``fun(x) -> float``

        where x is a 1-D array with shape (n,) holding all model parameters,
        fixed ones included.
    x_names:
        Parameter names. None if no names provided, otherwise a list of str
        of length n.
    """

    def __init__(
        self,
        fun: Callable[[np.ndarray], float],
        x_names: Sequence[str] = None,
    ):
        if not callable(fun):
            raise TypeError("The objective function must be callable.")
        self.fun = fun
        super().__init__(x_names=x_names)

    def call_unprocessed(self, x: np.ndarray) -> float:
        """Call the wrapped function."""
        return self.fun(x)
