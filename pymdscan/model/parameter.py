from dataclasses import dataclass


@dataclass
class Parameter:
    """
    A model parameter.

    Scans toggle `value` and `is_constant`; both are restored when the
    scan ends.

    Attributes
    ----------
    name:
        Unique parameter name.
    value:
        Current value.
    lb, ub:
        Lower and upper bounds. Scan grids span these bounds.
    is_constant:
        Whether the parameter is excluded from optimization.
    """

    name: str
    value: float
    lb: float
    ub: float
    is_constant: bool = False

    def __post_init__(self):
        if not self.lb <= self.ub:
            raise ValueError(
                f"Parameter {self.name}: lower bound {self.lb} exceeds "
                f"upper bound {self.ub}."
            )

    def set_value(self, value: float) -> None:
        """Set the value, clipped to the bounds."""
        self.value = float(min(max(value, self.lb), self.ub))


@dataclass(frozen=True)
class ParameterSnapshot:
    """Immutable copy of all parameter values and constant flags."""

    values: tuple[float, ...]
    is_constant: tuple[bool, ...]
