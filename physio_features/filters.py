"""Butterworth filtering helpers."""

import numpy as np

from numpy.typing import ArrayLike
from typing import List
from typing import Optional
from typing import Tuple

from scipy import signal

from physio_features.exceptions import ConfigurationError
from physio_features.exceptions import PreconditionError


def sanitize_cutoffs(lowcut: Optional[float] = None, highcut: Optional[float] = None) -> Tuple[List[float], str]:
    """
    Turn a (lowcut, highcut) pair into cutoff frequencies and a filter type.

    A cutoff of ``0`` or ``None`` is treated as absent. Both cutoffs give a
    band-pass filter, or a band-stop filter when ``lowcut > highcut``. A single
    lowcut gives a high-pass filter and a single highcut a low-pass filter.

    Args:
        lowcut: Lower cutoff frequency in Hz
        highcut: Upper cutoff frequency in Hz

    Returns:
        Tuple of (cutoff frequencies, filter type)
    """
    lowcut = lowcut or None
    highcut = highcut or None

    if lowcut is not None and highcut is not None:
        if lowcut > highcut:
            return [highcut, lowcut], "bandstop"
        return [lowcut, highcut], "bandpass"
    if lowcut is not None:
        return [lowcut], "highpass"
    if highcut is not None:
        return [highcut], "lowpass"

    raise ConfigurationError("At least one of lowcut or highcut must be given", parameter = "lowcut")


def butter_sos(
    sampling_rate: float, lowcut: Optional[float] = None, highcut: Optional[float] = None, order: int = 2
) -> np.ndarray:
    """Design a Butterworth filter as second-order sections."""
    if sampling_rate <= 0:
        raise PreconditionError(f"sampling_rate must be > 0, got {sampling_rate}")
    if order < 1:
        raise ConfigurationError(f"order must be at least 1, got {order}", parameter = "order")

    freqs, filter_type = sanitize_cutoffs(lowcut, highcut)
    nyquist = 0.5 * float(sampling_rate)
    for freq in freqs:
        if not 0 < freq < nyquist:
            raise ConfigurationError(
                f"Cutoff frequencies must lie in (0, {nyquist:.3f}) Hz, got {freq}", parameter = "cutoff"
            )

    wn = freqs[0] if len(freqs) == 1 else freqs
    return signal.butter(order, wn, btype = filter_type, fs = sampling_rate, output = "sos")


def filter_signal(
    data: ArrayLike,
    sampling_rate: float,
    lowcut: Optional[float] = None,
    highcut: Optional[float] = None,
    order: int = 2,
    zero_phase: bool = True,
) -> np.ndarray:
    """
    Apply a Butterworth filter to a signal.

    Args:
        data: Input signal
        sampling_rate: Sampling rate in Hz
        lowcut: Lower cutoff in Hz (``None`` for a low-pass filter)
        highcut: Upper cutoff in Hz (``None`` for a high-pass filter)
        order: Filter order
        zero_phase: Run the filter forward and backward to cancel the phase
            delay. When False the filter runs forward only (causal).

    Returns:
        Filtered signal with the same length as the input
    """
    data_arr = np.asarray(data, dtype = float)
    sos = butter_sos(sampling_rate, lowcut, highcut, order)

    if not zero_phase:
        return signal.sosfilt(sos, data_arr)

    # sosfiltfilt pads the edges, very short buffers get a shorter pad
    padlen = min(3 * (2 * len(sos) + 1), max(len(data_arr) - 1, 0))
    return signal.sosfiltfilt(sos, data_arr, padlen = padlen)
