import logging
import numpy as np

from numpy.typing import ArrayLike

from physio_features.exceptions import PreconditionError
from physio_features.interpolation import interpolate_signal

logger = logging.getLogger(__name__)


def find_peak_indices(peaks: ArrayLike) -> np.ndarray:
    """Sample indices of the True entries of a peak train."""
    return np.flatnonzero(np.asarray(peaks, dtype = bool))


def extract_rr_intervals(
    peaks: ArrayLike,
    sampling_rate: float = 1000.0,
    interpolate: bool = False,
    method: str = "monotone_cubic",
) -> np.ndarray:
    """
    Compute RR intervals (ms) from a boolean peak train.

    Args:
        peaks: Boolean peak train, True at each detected beat
        sampling_rate: Sampling rate of the peak train in Hz
        interpolate: Resample the intervals onto one value per sample, from
            index 0 up to (excluding) the last peak
        method: Interpolation method used when ``interpolate`` is True

    Returns:
        RR intervals in milliseconds. Without interpolation this has one
        element fewer than the number of peaks, and is empty for fewer than
        two peaks.
    """
    if sampling_rate <= 0:
        raise PreconditionError(f"sampling_rate must be > 0, got {sampling_rate}")

    peak_indices = find_peak_indices(peaks)
    rri = np.diff(peak_indices) / (sampling_rate / 1000)
    logger.debug("Computed %d RR intervals from %d peaks", len(rri), len(peak_indices))

    if not interpolate:
        return rri

    if len(peak_indices) < 2:
        raise PreconditionError(
            "At least two peaks are required to resample RR intervals",
            details = {"n_peaks": int(len(peak_indices))}
        )

    return interpolate_signal(peak_indices[1:], rri, int(peak_indices[-1]), method)


def compute_heart_rate(peaks: ArrayLike, sampling_rate: float = 1000.0) -> np.ndarray:
    """
    Instantaneous heart rate (bpm) for every sample of a peak train.

    The rate at each beat is interpolated monotonically between beats and
    held constant before the first and after the last beat. The peak train
    must cover at least one minute.
    """
    peaks = np.asarray(peaks, dtype = bool)
    if sampling_rate <= 0:
        raise PreconditionError(f"sampling_rate must be > 0, got {sampling_rate}")

    one_minute_samples = int(np.floor(sampling_rate * 60))
    if len(peaks) < one_minute_samples:
        raise PreconditionError(
            "The peak train must contain at least one minute of samples",
            details = {"samples": len(peaks), "required": one_minute_samples}
        )

    peak_indices = find_peak_indices(peaks)
    if len(peak_indices) < 2:
        raise PreconditionError(
            "At least two peaks are required to compute the heart rate",
            details = {"n_peaks": int(len(peak_indices))}
        )

    rates = 60.0 / (np.diff(peak_indices) / sampling_rate)
    # The first beat has no predecessor and takes the rate of the second
    rates = np.concatenate([[rates[0]], rates])
    return interpolate_signal(peak_indices, rates, len(peaks), "monotone_cubic")
