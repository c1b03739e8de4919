import abc
import logging
import time
from functools import wraps

import numpy as np
import scipy.optimize

from ..model import Model
from .result import OptimizerResult

logger = logging.getLogger(__name__)


def time_decorator(minimize):
    """Measure time of optimization.

    Default decorator for the :meth:`Optimizer.minimize` method to take time.
    Currently, the method time.time() is used, which measures
    the wall-clock time.
    """

    @wraps(minimize)
    def wrapped_minimize(self, model: Model, bounded: bool = True):
        start_time = time.time()
        result = minimize(self, model=model, bounded=bounded)
        result.time = time.time() - start_time
        return result

    return wrapped_minimize


def apply_decorator(minimize):
    """Write the optimum back to the model.

    Default decorator for the :meth:`Optimizer.minimize` method. A failed
    optimization leaves the model at its starting values.
    """

    @wraps(minimize)
    def wrapped_minimize(self, model: Model, bounded: bool = True):
        free_indices = model.free_indices
        x0 = model.x[free_indices]
        fval0 = model.evaluate_free(x0)

        if not free_indices:
            result = OptimizerResult(
                x=x0,
                fval=fval0,
                x0=x0,
                fval0=fval0,
                n_fval=1,
                exitflag=0,
                message="No free parameters.",
                optimizer=str(self),
            )
        else:
            result = minimize(self, model=model, bounded=bounded)
            result.x0 = x0
            result.fval0 = fval0
        result.free_indices = free_indices

        # success means a converged, finite optimum
        result.success = (
            result.exitflag == 0
            and result.fval is not None
            and bool(np.isfinite(result.fval))
        )
        if (
            result.success
            and np.isfinite(fval0)
            and result.fval > fval0
        ):
            # nothing better than the start was found
            result.x = x0
            result.fval = fval0
        if result.success:
            model.set_x(result.x, free_indices)
        else:
            logger.debug(
                f"Optimization failed ({result.message}), keeping start."
            )
        return result

    return wrapped_minimize


def minimize_decorator_collection(minimize):
    """Collect all decorators for :meth:`Optimizer.minimize`."""

    @wraps(minimize)
    @apply_decorator
    @time_decorator
    def wrapped_minimize(self, model: Model, bounded: bool = True):
        return minimize(self, model=model, bounded=bounded)

    return wrapped_minimize


class Optimizer(abc.ABC):
    """
    Optimizer base class, not functional on its own.

    An optimizer takes a model and minimizes its objective over the free
    (non-constant) parameters, starting from their current values. The
    optimum is written back to the model. It returns an OptimizerResult,
    whose exitflag is 0 if and only if the optimizer converged.
    """

    def __init__(self):
        """Initialize base class."""

    @abc.abstractmethod
    @minimize_decorator_collection
    def minimize(self, model: Model, bounded: bool = True) -> OptimizerResult:
        """
        Perform optimization.

        Parameters
        ----------
        model:
            The model to optimize. Its free parameters are varied.
        bounded:
            Whether to respect the parameter bounds.
        """

    def get_default_options(self):
        """Create default options specific for the optimizer."""
        return None


class ScipyOptimizer(Optimizer):
    """
    Use the SciPy optimizers.

    Find details on the optimizer and configuration options at:
    :func:`scipy.optimize.minimize`.
    """

    def __init__(
        self,
        method: str = "L-BFGS-B",
        tol: float = None,
        options: dict = None,
    ):
        super().__init__()

        self.method = method

        self.options = options
        if self.options is None:
            self.options = ScipyOptimizer.get_default_options(self)
        self.tol = tol

    def __repr__(self) -> str:
        rep = f"<{self.__class__.__name__} method={self.method}"
        # print everything that is customized
        if self.tol is not None:
            rep += f" tol={self.tol}"
        if self.options is not None:
            rep += f" options={self.options}"
        return rep + ">"

    @minimize_decorator_collection
    def minimize(self, model: Model, bounded: bool = True) -> OptimizerResult:
        """Perform optimization. Parameters: see `Optimizer` documentation."""
        free_indices = model.free_indices
        x0 = model.x[free_indices]
        n_fval_start = model.objective.n_fval

        bounds = None
        if bounded:
            bounds = scipy.optimize.Bounds(
                model.lb[free_indices], model.ub[free_indices]
            )

        def fun(x):
            fval = model.evaluate_free(x)
            # steer the optimizer away from points that cannot be evaluated
            return fval if np.isfinite(fval) else np.inf

        res = scipy.optimize.minimize(
            fun=fun,
            x0=x0,
            method=self.method,
            bounds=bounds,
            options=self.options,
            tol=self.tol,
        )

        fval = float(res.fun)
        if not np.isfinite(fval):
            fval = np.nan
        # converged fits of some methods carry a nonzero status
        exitflag = 0 if res.success else res.status

        return OptimizerResult(
            x=np.array(res.x),
            fval=fval,
            n_fval=model.objective.n_fval - n_fval_start,
            exitflag=exitflag,
            message=str(res.message),
            optimizer=str(self),
        )

    def get_default_options(self):
        """Create default options specific for the optimizer."""
        options = {}
        if self.method.lower() in ("l-bfgs-b", "tnc"):
            options["maxfun"] = 1000
        elif self.method.lower() in ("nelder-mead", "powell"):
            options["maxfev"] = 1000
        return options
