import logging
import numpy as np

from numpy.typing import ArrayLike
from typing import Optional

from physio_features import stats
from physio_features.config import SpectralConfig
from physio_features.exceptions import PreconditionError
from physio_features.features import HRVFeatures
from physio_features.hrv_frequency import compute_frequency_features
from physio_features.hrv_nonlinear import compute_nonlinear_features
from physio_features.hrv_time import compute_time_features
from physio_features.rri import compute_heart_rate
from physio_features.rri import extract_rr_intervals
from physio_features.rri import find_peak_indices

logger = logging.getLogger(__name__)


def compute_heart_rate_features(
    peaks: ArrayLike, sampling_rate: float, features: Optional[HRVFeatures] = None
) -> HRVFeatures:
    """Instantaneous heart rate and its summary statistics."""
    features = features if features is not None else HRVFeatures()
    heart_rate = compute_heart_rate(peaks, sampling_rate)

    features.HR = heart_rate
    features.meanHR = stats.mean(heart_rate)
    features.medianHR = stats.median(heart_rate)
    features.maxHR = float(np.max(heart_rate))
    features.minHR = float(np.min(heart_rate))
    features.varHR = stats.variance(heart_rate, ddof = 1)
    features.rangeHR = features.maxHR - features.minHR
    return features


def process_features(
    peaks: ArrayLike,
    sampling_rate: float,
    hr: bool = True,
    nonlinear: bool = True,
    time: bool = True,
    frequency: bool = True,
    features: Optional[HRVFeatures] = None,
    config: Optional[SpectralConfig] = None,
) -> HRVFeatures:
    """
    Compute HRV features from a peak train.

    Stages run in a fixed order (heart rate, nonlinear, time, frequency) and
    each fills in its own fields of the accumulator.

    Args:
        peaks: Boolean peak train, e.g. from
            :func:`physio_features.peaks.process_signal`
        sampling_rate: Sampling rate of the peak train in Hz
        hr: Compute the heart rate features (needs one minute of data)
        nonlinear: Compute the nonlinear features
        time: Compute the time-domain features
        frequency: Compute the frequency-domain features
        features: Accumulator to fill in (a new one if None)
        config: Spectral estimation parameters (defaults if None)

    Returns:
        HRVFeatures accumulator
    """
    features = features if features is not None else HRVFeatures()
    config = config if config is not None else SpectralConfig()
    peaks = np.asarray(peaks, dtype = bool)

    n_peaks = len(find_peak_indices(peaks))
    if n_peaks < 2:
        raise PreconditionError("At least two peaks are required for HRV features", details = {"n_peaks": n_peaks})
    logger.debug("Processing HRV features of %d peaks", n_peaks)

    rr_intervals = extract_rr_intervals(peaks, sampling_rate, interpolate = False)

    if hr:
        compute_heart_rate_features(peaks, sampling_rate, features)
    if nonlinear:
        compute_nonlinear_features(rr_intervals, features)
    if time:
        compute_time_features(rr_intervals, features)
    if frequency:
        resampled = extract_rr_intervals(
            peaks, sampling_rate, interpolate = True, method = config.interpolation_method
        )
        compute_frequency_features(resampled, sampling_rate, features, config)

    return features
