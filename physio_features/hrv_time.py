"""Time-domain HRV features, computed from RR intervals in milliseconds."""

import logging
import numpy as np

from numpy.typing import ArrayLike
from typing import Optional

from physio_features import stats
from physio_features.exceptions import PreconditionError
from physio_features.features import HRVFeatures

logger = logging.getLogger(__name__)


def compute_time_features(rr_intervals: ArrayLike, features: Optional[HRVFeatures] = None) -> HRVFeatures:
    """
    Compute time-domain HRV features.

    Args:
        rr_intervals: RR intervals (ms). This must not be an interpolated signal.
        features: Accumulator to fill in (a new one if None)

    Returns:
        The accumulator with the time-domain features set
    """
    features = features if features is not None else HRVFeatures()
    rri = np.asarray(rr_intervals, dtype = float)
    if len(rri) < 3:
        raise PreconditionError(
            "At least three RR intervals are required for time features", details = {"n_intervals": len(rri)}
        )
    logger.debug("Computing time features")

    diff = np.diff(rri)

    features.RMSSD = float(np.sqrt(np.mean(diff ** 2)))
    features.MeanNN = stats.mean(rri)
    features.SDNN = stats.std(rri, ddof = 1)
    features.SDSD = stats.std(diff, ddof = 1)
    features.CVNN = features.SDNN / features.MeanNN
    features.CVSD = features.RMSSD / features.MeanNN

    features.MedianNN = stats.median(rri)
    features.MadNN = stats.median_absolute_deviation(rri)
    features.MCVNN = features.MadNN / features.MedianNN
    features.IQR = stats.percentile(rri, 75) - stats.percentile(rri, 25)

    features.pNN50 = float(np.sum(np.abs(diff) > 50) / len(rri) * 100)
    features.pNN20 = float(np.sum(np.abs(diff) > 20) / len(rri) * 100)
    return features
