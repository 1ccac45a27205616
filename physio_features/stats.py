"""Descriptive statistics over one-dimensional sample sequences."""

import numpy as np

from numpy.typing import ArrayLike

from scipy import stats

from physio_features.constants import MAD_SCALE
from physio_features.exceptions import PreconditionError


def _as_samples(data: ArrayLike) -> np.ndarray:
    samples = np.asarray(data, dtype = float).ravel()
    if samples.size == 0:
        raise PreconditionError("data must not be empty")
    return samples


def mean(data: ArrayLike) -> float:
    return float(np.mean(_as_samples(data)))


def variance(data: ArrayLike, ddof: int = 0) -> float:
    """Variance with ``ddof`` delta degrees of freedom."""
    samples = _as_samples(data)
    if ddof >= samples.size:
        raise PreconditionError(
            "Degrees of freedom must be smaller than the sample size",
            details = {"ddof": ddof, "size": int(samples.size)}
        )
    return float(np.var(samples, ddof = ddof))


def std(data: ArrayLike, ddof: int = 0) -> float:
    """Standard deviation with ``ddof`` delta degrees of freedom."""
    return float(np.sqrt(variance(data, ddof)))


def median(data: ArrayLike) -> float:
    return float(np.median(_as_samples(data)))


def percentile(data: ArrayLike, q: float) -> float:
    if not 0 <= q <= 100:
        raise PreconditionError(f"Percentile must lie in [0, 100], got {q}")
    return float(np.percentile(_as_samples(data), q))


def median_absolute_deviation(data: ArrayLike, scale: float = MAD_SCALE) -> float:
    """Median absolute deviation, scaled to match the standard deviation of normal data."""
    return float(stats.median_abs_deviation(_as_samples(data), scale = 1.0) * scale)


def skewness(data: ArrayLike) -> float:
    """Bias-corrected sample skewness."""
    return float(stats.skew(_as_samples(data), bias = False))


def kurtosis(data: ArrayLike) -> float:
    """Bias-corrected sample excess kurtosis."""
    return float(stats.kurtosis(_as_samples(data), fisher = True, bias = False))
