"""
Nonlinear HRV features: Poincaré plot descriptors, heart rate asymmetry and
heart rate fragmentation indices.
"""
import logging
import math
import numpy as np

from numpy.typing import ArrayLike
from typing import Optional

from physio_features import stats
from physio_features.exceptions import PreconditionError
from physio_features.features import HRVFeatures

logger = logging.getLogger(__name__)

SQRT2 = math.sqrt(2.0)


def _ratio(numerator: float, denominator: float) -> float:
    return float(numerator / denominator) if denominator != 0 else math.nan


def run_lengths(indices: np.ndarray) -> np.ndarray:
    """Lengths of the runs of consecutive integers in a sorted index array."""
    indices = np.asarray(indices)
    if len(indices) == 0:
        return np.zeros(0, dtype = int)
    breaks = np.flatnonzero(np.diff(indices) != 1) + 1
    bounds = np.concatenate([[0], breaks, [len(indices)]])
    return np.diff(bounds)


def zero_crossings(data: np.ndarray) -> np.ndarray:
    """Indices ``i`` where the sign changes between ``data[i]`` and ``data[i + 1]``."""
    return np.flatnonzero(np.diff(np.sign(data)) != 0)


def compute_poincare_features(rr_intervals: ArrayLike, features: Optional[HRVFeatures] = None) -> HRVFeatures:
    """SD1, SD2 and the derived Poincaré plot indices."""
    features = features if features is not None else HRVFeatures()
    rri = np.asarray(rr_intervals, dtype = float)
    x, y = rri[:-1], rri[1:]

    sd1 = stats.std((x - y) / SQRT2, ddof = 1)
    sd2 = stats.std((x + y) / SQRT2, ddof = 1)
    features.SD1 = sd1
    features.SD2 = sd2
    features.SD1SD2 = _ratio(sd1, sd2)
    features.S = math.pi * sd1 * sd2

    T = 4 * sd1
    L = 4 * sd2
    features.CSI = _ratio(L, T)
    features.CVI = math.log10(L * T) if L * T > 0 else math.nan
    features.CSI_Modified = _ratio(L ** 2, T)
    return features


def compute_asymmetry_features(rr_intervals: ArrayLike, features: Optional[HRVFeatures] = None) -> HRVFeatures:
    """Guzik's, slope and Porta's indices and the SD1/SD2/SDNN decelerating/accelerating contributions."""
    features = features if features is not None else HRVFeatures()
    rri = np.asarray(rr_intervals, dtype = float)
    N = len(rri) - 1
    x, y = rri[:-1], rri[1:]
    diff = y - x

    decelerate = diff > 0
    accelerate = diff < 0
    no_change = diff == 0

    dist_l2_all = np.abs((x - np.mean(x)) + (y - np.mean(y))) / SQRT2
    dist_all = np.abs(diff) / SQRT2  # distances to the line of identity
    theta_all = np.abs(np.arctan(1.0) - np.arctan(y / x))

    features.GI = _ratio(np.sum(dist_all[decelerate]), np.sum(dist_all)) * 100
    features.SI = _ratio(np.sum(theta_all[decelerate]), np.sum(theta_all)) * 100
    features.PI = _ratio(np.sum(accelerate), N - np.sum(no_change)) * 100

    # Short-term asymmetry
    sd1d = math.sqrt(np.sum(dist_all[decelerate] ** 2) / (N - 1))
    sd1a = math.sqrt(np.sum(dist_all[accelerate] ** 2) / (N - 1))
    sd1I = math.sqrt(sd1d ** 2 + sd1a ** 2)
    features.C1d = _ratio(sd1d, sd1I) ** 2
    features.C1a = _ratio(sd1a, sd1I) ** 2
    features.SD1d = sd1d
    features.SD1a = sd1a

    # Long-term asymmetry
    long_term_dec = np.sum(dist_l2_all[decelerate] ** 2) / (N - 1)
    long_term_acc = np.sum(dist_l2_all[accelerate] ** 2) / (N - 1)
    long_term_no_change = np.sum(dist_l2_all[no_change] ** 2) / (N - 1)
    sd2d = math.sqrt(long_term_dec + 0.5 * long_term_no_change)
    sd2a = math.sqrt(long_term_acc + 0.5 * long_term_no_change)
    sd2I = math.sqrt(sd2d ** 2 + sd2a ** 2)
    features.C2d = _ratio(sd2d, sd2I) ** 2
    features.C2a = _ratio(sd2a, sd2I) ** 2
    features.SD2d = sd2d
    features.SD2a = sd2a

    # Total asymmetry
    sdnnd = math.sqrt(0.5 * (sd1d ** 2 + sd2d ** 2))
    sdnna = math.sqrt(0.5 * (sd1a ** 2 + sd2a ** 2))
    sdnn = math.sqrt(sdnnd ** 2 + sdnna ** 2)
    features.Cd = _ratio(sdnnd, sdnn) ** 2
    features.Ca = _ratio(sdnna, sdnn) ** 2
    features.SDNNd = sdnnd
    features.SDNNa = sdnna
    return features


def compute_fragmentation_features(rr_intervals: ArrayLike, features: Optional[HRVFeatures] = None) -> HRVFeatures:
    """Heart rate fragmentation indices PIP, IALS, PSS and PAS."""
    features = features if features is not None else HRVFeatures()
    rri = np.asarray(rr_intervals, dtype = float)
    diff = np.diff(rri)

    inflections = zero_crossings(diff)
    features.PIP = len(inflections) / len(rri)

    segments = np.concatenate([run_lengths(np.flatnonzero(diff > 0)), run_lengths(np.flatnonzero(diff < 0))])
    features.IALS = _ratio(1.0, np.mean(segments)) if len(segments) else math.nan
    features.PSS = _ratio(np.sum(segments < 3), len(segments))

    alternations = run_lengths(inflections)
    features.PAS = _ratio(np.sum(alternations >= 4), len(alternations))
    return features


def compute_nonlinear_features(rr_intervals: ArrayLike, features: Optional[HRVFeatures] = None) -> HRVFeatures:
    """
    Compute all nonlinear HRV features.

    Args:
        rr_intervals: RR intervals (ms), not interpolated
        features: Accumulator to fill in (a new one if None)

    Returns:
        The accumulator with the nonlinear features set
    """
    features = features if features is not None else HRVFeatures()
    rri = np.asarray(rr_intervals, dtype = float)
    if len(rri) < 3:
        raise PreconditionError(
            "At least three RR intervals are required for nonlinear features", details = {"n_intervals": len(rri)}
        )
    logger.debug("Computing nonlinear features")

    compute_asymmetry_features(rri, features)
    compute_poincare_features(rri, features)
    compute_fragmentation_features(rri, features)
    return features
