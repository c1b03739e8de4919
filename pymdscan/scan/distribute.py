"""Placement of scan points along one axis."""

import numpy as np


def cell_centres(lower: float, upper: float, n_points: int) -> np.ndarray:
    """Centres of `n_points` equal cells covering [lower, upper]."""
    return lower + (np.arange(n_points) + 0.5) * (upper - lower) / n_points


class PointDistributor:
    """
    Non-uniform points along one axis, dense close to an origin.

    Points on either side of the origin follow a power law in the relative
    index ``t = |index| / n_side``:

    * ``power > 1``: ``origin + (bound - origin) * t ** power``, growing
      from the origin towards the bound.
    * ``power <= 1``: ``bound + (origin - bound) * (1 - t) ** power``, the
      same law anchored at the bound and running towards the origin.

    With ``power == 1`` both give uniform spacing on each side. Index 0 is
    the origin, the extreme indices are the bounds.

    Parameters
    ----------
    lower, upper:
        The axis range.
    origin:
        Point the distribution is centred on, within the range.
    power:
        Exponent of the power law, > 0.
    """

    def __init__(
        self, lower: float, upper: float, origin: float, power: float
    ):
        if not lower < upper:
            raise ValueError(f"Empty range [{lower}, {upper}].")
        if not lower <= origin <= upper:
            raise ValueError(
                f"Origin {origin} outside of [{lower}, {upper}]."
            )
        if power <= 0:
            raise ValueError("The distribution power must be > 0.")
        self.lower = float(lower)
        self.upper = float(upper)
        self.origin = float(origin)
        self.power = float(power)

    def split(self, n_points: int) -> tuple[int, int]:
        """
        Split `n_points` into points left and right of the origin.

        The split is proportional to the distances from the origin to the
        bounds.
        """
        fraction = (self.origin - self.lower) / (self.upper - self.lower)
        n_left = int(n_points * fraction)
        return n_left, n_points - n_left

    def value(self, index: int, n_left: int, n_right: int) -> float:
        """
        Coordinate of the point with signed `index`.

        Parameters
        ----------
        index:
            Negative for points left of the origin, positive for points
            right of it, within ``[-n_left, n_right]``.
        n_left, n_right:
            Number of points on either side.
        """
        if index == 0:
            return self.origin
        if index > 0:
            bound, n_side = self.upper, n_right
        else:
            bound, n_side = self.lower, n_left
        if abs(index) > n_side:
            raise ValueError(
                f"Index {index} outside of [{-n_left}, {n_right}]."
            )
        t = abs(index) / n_side
        if self.power > 1:
            return self.origin + (bound - self.origin) * t**self.power
        return bound + (self.origin - bound) * (1 - t) ** self.power

    def values(self, n_points: int) -> np.ndarray:
        """
        `n_points` ordered coordinates, one of them the origin.

        The points other than the origin are split over both sides with
        :meth:`split`.
        """
        if n_points < 1:
            return np.array([])
        n_left, n_right = self.split(n_points - 1)
        return np.array(
            [
                self.value(index, n_left, n_right)
                for index in range(-n_left, n_right + 1)
            ]
        )
