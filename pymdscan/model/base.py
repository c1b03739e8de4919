import logging
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Optional, Union

import numpy as np

from ..objective import ObjectiveBase
from .parameter import Parameter, ParameterSnapshot

logger = logging.getLogger(__name__)

ParameterRef = Union[int, str]


class Model:
    """
    The negative log-likelihood together with its parameters.

    A model holds the objective, the parameter values, bounds and constant
    flags, and which parameters are parameters of interest (POIs). All other
    parameters are nuisance parameters. Evaluating the model calls the
    objective at the current values.

    A model is owned by one scan at a time. Every routine that changes
    values or constant flags does so inside :meth:`scoped_state`, which
    restores the previous state on every exit path.

    Parameters
    ----------
    objective:
        The negative log-likelihood.
    lb, ub:
        The lower and upper bounds.
    x0:
        Initial values. Defaults to the centre of the bounds.
    x_names:
        Parameter names. If not given, the objective's names are used,
        otherwise ``x0, x1, ...``.
    poi_names:
        Names of the parameters of interest of the model. Scans pick their
        scanned POIs among them; the remaining ones are "other" POIs.
        Defaults to all parameters.
    x_fixed_names:
        Parameters that are constant from the start.
    """

    def __init__(
        self,
        objective: ObjectiveBase,
        lb: Union[np.ndarray, list[float]],
        ub: Union[np.ndarray, list[float]],
        x0: Union[np.ndarray, list[float], None] = None,
        x_names: Optional[Iterable[str]] = None,
        poi_names: Optional[Iterable[str]] = None,
        x_fixed_names: Optional[Iterable[str]] = None,
    ):
        self.objective = objective

        lb = np.array(lb, dtype=float).flatten()
        ub = np.array(ub, dtype=float).flatten()
        if lb.size != ub.size:
            raise ValueError("lb and ub must have the same size.")
        if x0 is None:
            x0 = 0.5 * (lb + ub)
        x0 = np.array(x0, dtype=float).flatten()
        if x0.size != lb.size:
            raise ValueError("x0 must have the same size as the bounds.")

        if x_names is None:
            x_names = objective.x_names
        if x_names is None:
            x_names = [f"x{j}" for j in range(lb.size)]
        x_names = list(x_names)
        if len(x_names) != lb.size:
            raise ValueError("x_names must be of the same length as lb.")
        if len(set(x_names)) != len(x_names):
            raise ValueError("Parameter names must be unique.")

        self.parameters: list[Parameter] = [
            Parameter(name=name, value=float(x), lb=float(low), ub=float(up))
            for name, x, low, up in zip(x_names, x0, lb, ub)
        ]
        self._index = {par.name: j for j, par in enumerate(self.parameters)}
        for par in self.parameters:
            par.set_value(par.value)

        if poi_names is None:
            poi_names = x_names
        self.poi_names: list[str] = list(poi_names)
        for name in self.poi_names:
            self.index(name)

        for name in x_fixed_names or []:
            self.fix(name)

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} dim={self.dim} "
            f"pois={self.poi_names}>"
        )

    @property
    def dim(self) -> int:
        """Number of parameters, constant ones included."""
        return len(self.parameters)

    @property
    def x_names(self) -> list[str]:
        """Parameter names."""
        return [par.name for par in self.parameters]

    @property
    def x(self) -> np.ndarray:
        """Current parameter values."""
        return np.array([par.value for par in self.parameters])

    @property
    def lb(self) -> np.ndarray:
        """Lower bounds."""
        return np.array([par.lb for par in self.parameters])

    @property
    def ub(self) -> np.ndarray:
        """Upper bounds."""
        return np.array([par.ub for par in self.parameters])

    @property
    def free_indices(self) -> list[int]:
        """Indices of parameters that are not constant."""
        return [
            j for j, par in enumerate(self.parameters) if not par.is_constant
        ]

    @property
    def nuisance_names(self) -> list[str]:
        """Names of all parameters that are not POIs."""
        return [name for name in self.x_names if name not in self.poi_names]

    def index(self, ref: ParameterRef) -> int:
        """Index of a parameter given by name or index."""
        if isinstance(ref, str):
            try:
                return self._index[ref]
            except KeyError:
                raise ValueError(f"Unknown parameter {ref}.") from None
        if not 0 <= ref < self.dim:
            raise ValueError(f"Parameter index {ref} out of range.")
        return int(ref)

    def parameter(self, ref: ParameterRef) -> Parameter:
        """Get a parameter by name or index."""
        return self.parameters[self.index(ref)]

    def get_value(self, ref: ParameterRef) -> float:
        """Current value of one parameter."""
        return self.parameter(ref).value

    def set_value(self, ref: ParameterRef, value: float) -> None:
        """Set the value of one parameter, clipped to its bounds."""
        self.parameter(ref).set_value(value)

    def set_x(self, x: np.ndarray, indices: Sequence[int] = None) -> None:
        """
        Set parameter values.

        Parameters
        ----------
        x:
            The values.
        indices:
            Indices the values belong to. Defaults to all parameters.
        """
        if indices is None:
            indices = range(self.dim)
        for j, value in zip(indices, x):
            self.parameters[j].set_value(value)

    def is_fixed(self, ref: ParameterRef) -> bool:
        """Whether a parameter is constant."""
        return self.parameter(ref).is_constant

    def fix(self, ref: ParameterRef, value: float = None) -> None:
        """Make a parameter constant, optionally setting its value."""
        par = self.parameter(ref)
        if value is not None:
            par.set_value(value)
        par.is_constant = True

    def unfix(self, ref: ParameterRef) -> None:
        """Let a parameter float again."""
        self.parameter(ref).is_constant = False

    def evaluate(self) -> float:
        """Evaluate the objective at the current values."""
        return self.objective(self.x)

    def evaluate_free(self, x_free: np.ndarray) -> float:
        """
        Evaluate the objective with the free parameters set to `x_free`.

        The stored values are not changed.
        """
        x = self.x
        x[self.free_indices] = x_free
        return self.objective(x)

    def clear_eval_error_log(self) -> None:
        """Reset the objective's evaluation error log."""
        self.objective.clear_eval_error_log()

    @property
    def n_eval_errors(self) -> int:
        """Number of evaluation errors since the log was last cleared."""
        return self.objective.n_eval_errors

    def snapshot(self) -> ParameterSnapshot:
        """Copy all values and constant flags."""
        return ParameterSnapshot(
            values=tuple(par.value for par in self.parameters),
            is_constant=tuple(par.is_constant for par in self.parameters),
        )

    def restore(self, snapshot: ParameterSnapshot) -> None:
        """Restore values and constant flags from a snapshot."""
        if len(snapshot.values) != self.dim:
            raise ValueError("Snapshot does not match the model dimension.")
        for par, value, is_constant in zip(
            self.parameters, snapshot.values, snapshot.is_constant
        ):
            par.value = value
            par.is_constant = is_constant

    @contextmanager
    def scoped_state(self) -> Iterator[ParameterSnapshot]:
        """
        Restore the current values and constant flags on exit.

        Yields the snapshot taken on entry, so callers can return to it
        in between.
        """
        snapshot = self.snapshot()
        try:
            yield snapshot
        finally:
            self.restore(snapshot)
