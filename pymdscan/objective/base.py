import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

# errors raised by an objective that mark the point as not evaluable
EVALUATION_ERRORS = (
    FloatingPointError,
    OverflowError,
    ValueError,
    ZeroDivisionError,
)


class ObjectiveBase(ABC):
    """
    Abstract negative log-likelihood.

    Wraps the scalar objective to be explored, giving a standardized way of
    calling it. Apart from that, it keeps an evaluation error log: a call
    that raises one of the evaluation errors (``FloatingPointError``,
    ``OverflowError``, ``ValueError``, ``ZeroDivisionError``) or returns a
    non-finite value is counted and yields ``nan``. Scans clear the log
    before evaluating a candidate point and inspect it afterwards.

    Parameters
    ----------
    x_names:
        Parameter names, can be read by the model.
    """

    def __init__(self, x_names: Optional[Sequence[str]] = None):
        self._x_names = list(x_names) if x_names is not None else None
        self.n_fval: int = 0
        self._n_eval_errors: int = 0
        self._last_error: Optional[str] = None

    def __deepcopy__(self, memodict=None) -> "ObjectiveBase":
        other = self.__class__.__new__(self.__class__)
        for key in set(self.__dict__.keys()):
            other.__dict__[key] = copy.deepcopy(self.__dict__[key], memodict)
        return other

    @property
    def x_names(self) -> Optional[list[str]]:
        """Parameter names."""
        return self._x_names

    @abstractmethod
    def call_unprocessed(self, x: np.ndarray) -> float:
        """
        Evaluate the objective at `x`, without error bookkeeping.

        Parameters
        ----------
        x:
            The full parameter vector.
        """

    def __call__(self, x: np.ndarray) -> float:
        """
        Evaluate the objective at `x`.

        Evaluation errors are recorded in the error log and result in
        ``nan``.
        """
        self.n_fval += 1
        try:
            fval = float(self.call_unprocessed(np.asarray(x, dtype=float)))
        except EVALUATION_ERRORS as err:
            self._record_error(f"{type(err).__name__}: {err}", x)
            return np.nan
        if not np.isfinite(fval):
            self._record_error(f"non-finite value {fval}", x)
            return np.nan
        return fval

    def _record_error(self, message: str, x: np.ndarray) -> None:
        self._n_eval_errors += 1
        self._last_error = message
        logger.debug(f"Evaluation error at {np.asarray(x)}: {message}")

    def clear_eval_error_log(self) -> None:
        """Reset the evaluation error log."""
        self._n_eval_errors = 0
        self._last_error = None

    @property
    def n_eval_errors(self) -> int:
        """Number of evaluation errors since the log was last cleared."""
        return self._n_eval_errors

    @property
    def last_error(self) -> Optional[str]:
        """Message of the most recent evaluation error, if any."""
        return self._last_error
