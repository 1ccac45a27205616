"""
Systolic peak detection on PPG signals.

Implementation of Elgendi M, Norton I, Brearley M, Abbott D, Schuurmans D
(2013) Systolic Peak Detection in Acceleration Photoplethysmograms Measured
from Emergency Responders in Tropical Conditions. PLoS ONE 8(10): e76585.
"""
import logging
import numpy as np

from numpy.typing import ArrayLike
from typing import List
from typing import Optional
from typing import Tuple

from physio_features.config import PeakDetectorConfig
from physio_features.exceptions import InternalConsistencyError
from physio_features.exceptions import PreconditionError
from physio_features.filters import filter_signal

logger = logging.getLogger(__name__)


def odd_window_size(window_size: int) -> int:
    """Return ``window_size`` bumped to the next odd number when it is even."""
    return window_size + ((window_size + 1) % 2)


def moving_average(signal: ArrayLike, window_size: int) -> np.ndarray:
    """
    Centered moving average computed with a running sum.

    The window is forced odd so that it has a center sample. Near the edges
    the window shrinks to the samples that exist, so the output has the
    same length as the input.

    Args:
        signal: Input signal
        window_size: Window length in samples

    Returns:
        Averaged signal
    """
    signal = np.asarray(signal, dtype = float)
    if window_size < 1:
        raise PreconditionError(f"window_size must be at least 1, got {window_size}")

    n = len(signal)
    half = odd_window_size(window_size) // 2
    averaged = np.empty(n)

    first = 0  # inclusive
    last = 0  # exclusive
    current_sum = 0.0
    for index in range(n):
        window_end = min(n, index + half + 1)
        while last < window_end:
            current_sum += signal[last]
            last += 1
        window_start = max(0, index - half)
        while first < window_start:
            current_sum -= signal[first]
            first += 1
        averaged[index] = current_sum / (last - first)

    return averaged


def moving_average_naive(signal: ArrayLike, window_size: int) -> np.ndarray:
    """Same as :func:`moving_average`, recomputing every window from scratch."""
    signal = np.asarray(signal, dtype = float)
    if window_size < 1:
        raise PreconditionError(f"window_size must be at least 1, got {window_size}")

    n = len(signal)
    half = odd_window_size(window_size) // 2
    return np.array([
        np.mean(signal[max(0, index - half):min(n, index + half + 1)]) for index in range(n)
    ])


def find_blocks(mask: np.ndarray) -> List[Tuple[int, int]]:
    """Return ``(start, end)`` pairs (end exclusive) of the runs of True in ``mask``."""
    padded = np.concatenate([[False], np.asarray(mask, dtype = bool), [False]])
    edges = np.flatnonzero(np.diff(padded.astype(np.int8)))
    return list(zip(edges[0::2].tolist(), edges[1::2].tolist()))


def detect_peaks(
    signal: ArrayLike, sampling_rate: float, config: Optional[PeakDetectorConfig] = None
) -> np.ndarray:
    """
    Detect systolic peaks in a band-pass filtered PPG signal.

    Samples where the short moving average of the clipped, squared signal
    rises strictly above the long moving average plus an offset form blocks
    of interest. Blocks strictly wider than the short window keep a single
    peak at their maximum; narrower blocks are treated as noise.

    Args:
        signal: PPG signal band-pass filtered to roughly 0.5-8 Hz
        sampling_rate: Sampling rate in Hz
        config: Detector parameters (defaults if None)

    Returns:
        Boolean array of the same length as ``signal``, True at each peak
    """
    config = config if config is not None else PeakDetectorConfig()
    if sampling_rate <= 0:
        raise PreconditionError(f"sampling_rate must be > 0, got {sampling_rate}")

    signal = np.asarray(signal, dtype = float)
    clipped_squared = np.clip(signal, 0, None) ** 2

    peak_averages = moving_average(clipped_squared, max(1, int(round(sampling_rate * config.peak_window))))
    beat_averages = moving_average(clipped_squared, max(1, int(round(sampling_rate * config.beat_window))))

    if not (len(clipped_squared) == len(peak_averages) == len(beat_averages)):
        raise InternalConsistencyError(
            "Moving average outputs do not match the signal length",
            details = {
                "clipped": len(clipped_squared),
                "peak_averages": len(peak_averages),
                "beat_averages": len(beat_averages),
            }
        )

    systolic_peaks = np.zeros(len(clipped_squared), dtype = bool)
    if len(clipped_squared) == 0:
        return systolic_peaks

    offset_level = np.mean(clipped_squared) * config.beta
    blocks_of_interest = peak_averages > beat_averages + offset_level

    threshold = config.peak_window * sampling_rate
    for start, end in find_blocks(blocks_of_interest):
        if end - start > threshold:
            systolic_peaks[start + int(np.argmax(clipped_squared[start:end]))] = True

    logger.debug("Detected %d peaks in %d samples", int(systolic_peaks.sum()), len(systolic_peaks))
    return systolic_peaks


def clean_signal(signal: ArrayLike, sampling_rate: float, config: Optional[PeakDetectorConfig] = None) -> np.ndarray:
    """Band-pass filter a raw PPG signal with zero phase."""
    config = config if config is not None else PeakDetectorConfig()
    return filter_signal(
        signal,
        sampling_rate,
        lowcut = config.lowcut,
        highcut = config.highcut,
        order = config.filter_order,
        zero_phase = True
    )


def process_signal(signal: ArrayLike, sampling_rate: float, config: Optional[PeakDetectorConfig] = None) -> np.ndarray:
    """Clean a raw PPG signal and detect its systolic peaks."""
    config = config if config is not None else PeakDetectorConfig()
    cleaned = clean_signal(signal, sampling_rate, config)
    return detect_peaks(cleaned, sampling_rate, config)
