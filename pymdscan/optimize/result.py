"""Local optimization result."""

import numpy as np


class OptimizerResult(dict):
    """
    The result of one local optimization.

    Maps the result objects of the employed optimizers to one format.
    Can be used like a dict.

    Attributes
    ----------
    x:
        The best found values of the free parameters.
    fval:
        The best found function value.
    x0:
        The starting values of the free parameters.
    fval0:
        The function value at `x0`.
    free_indices:
        Model indices the entries of `x` belong to.
    n_fval:
        Number of function evaluations.
    exitflag:
        The exitflag of the optimizer.
    success:
        Whether the optimizer converged (exitflag 0) to a finite optimum.
    time:
        Execution time.
    message:
        Textual comment on the optimization result.
    optimizer:
        The optimizer used.
    """

    def __init__(
        self,
        x: np.ndarray = None,
        fval: float = None,
        x0: np.ndarray = None,
        fval0: float = None,
        free_indices: list[int] = None,
        n_fval: int = None,
        exitflag: int = None,
        success: bool = False,
        time: float = None,
        message: str = None,
        optimizer: str = None,
    ):
        super().__init__()
        self.x: np.ndarray = np.array(x) if x is not None else None
        self.fval: float = fval
        self.x0: np.ndarray = np.array(x0) if x0 is not None else None
        self.fval0: float = fval0
        self.free_indices = free_indices
        self.n_fval: int = n_fval
        self.exitflag: int = exitflag
        self.success: bool = success
        self.time: float = time
        self.message: str = message
        self.optimizer = optimizer

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key) from None

    __setattr__ = dict.__setitem__
    __delattr__ = dict.__delitem__

    def summary(self) -> str:
        """Get a short summary of the object."""
        return (
            f"* success: {self.success}, exitflag: {self.exitflag} "
            f"({self.message})\n"
            f"* fval: {self.fval} (start {self.fval0}), "
            f"n_fval: {self.n_fval}, time: {self.time}s\n"
        )
