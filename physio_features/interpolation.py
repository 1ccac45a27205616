import numpy as np

from numpy.typing import ArrayLike

from scipy.interpolate import PchipInterpolator
from scipy.interpolate import interp1d
from scipy.interpolate import make_interp_spline

from physio_features.constants import INTERPOLATION_METHODS
from physio_features.exceptions import ConfigurationError
from physio_features.exceptions import PreconditionError

# Minimum number of control points each method needs
_MIN_POINTS = {
    "monotone_cubic": 2,
    "quadratic": 3,
    "b_spline": 3,
    "linear": 2,
}


def interpolate_signal(x: ArrayLike, y: ArrayLike, length: int, method: str = "monotone_cubic") -> np.ndarray:
    """
    Resample control points onto the integer grid ``0, 1, ..., length - 1``.

    Queries outside ``[x[0], x[-1]]`` are clamped to the boundary values. A
    single control point yields a constant signal.

    Args:
        x: Strictly increasing x positions of the control points
        y: Values at the control points
        length: Length of the output signal
        method: One of ``monotone_cubic``, ``quadratic``, ``b_spline`` or ``linear``

    Returns:
        Interpolated signal of the requested length
    """
    if method not in INTERPOLATION_METHODS:
        raise ConfigurationError(
            f"Unknown interpolation method '{method}'. Available methods: {list(INTERPOLATION_METHODS)}",
            parameter = "method"
        )

    x = np.asarray(x, dtype = float)
    y = np.asarray(y, dtype = float)
    if len(x) != len(y):
        raise PreconditionError("x and y must have the same length", details = {"x": len(x), "y": len(y)})
    if len(x) == 0:
        raise PreconditionError("At least one control point is required")
    if length < 0:
        raise PreconditionError(f"length must be non-negative, got {length}")
    if len(x) > 1 and np.any(np.diff(x) <= 0):
        raise PreconditionError("x must be strictly increasing")

    if len(x) == 1:
        return np.full(length, y[0])

    if len(x) < _MIN_POINTS[method]:
        raise PreconditionError(
            f"Method '{method}' needs at least {_MIN_POINTS[method]} control points, got {len(x)}"
        )

    grid = np.clip(np.arange(length, dtype = float), x[0], x[-1])

    if method == "monotone_cubic":
        return PchipInterpolator(x, y, extrapolate = False)(grid)
    if method == "quadratic":
        return interp1d(x, y, kind = "quadratic", assume_sorted = True)(grid)
    if method == "b_spline":
        return make_interp_spline(x, y, k = 2)(grid)
    return np.interp(grid, x, y)
