"""
Power spectral density estimation.

Welch's method averages the periodograms of overlapping, tapered segments.
Segment transforms go through :mod:`physio_features.fft`; frequency bins
follow the numpy/scipy conventions.
"""
import logging
from dataclasses import dataclass
import numpy as np

from numpy.typing import ArrayLike
from typing import Iterable
from typing import Optional
from typing import Tuple

from physio_features import fft
from physio_features.constants import FrequencyBand
from physio_features.constants import MIN_PSD_FREQUENCY
from physio_features.exceptions import ConfigurationError
from physio_features.exceptions import PreconditionError

logger = logging.getLogger(__name__)

WINDOW_TYPES = ("hann", "hanning")
SCALINGS = ("density", "spectrum")
PSD_METHODS = ("welch",)


@dataclass(frozen = True)
class PSDResult:
    """Frequency bins (Hz) and the power estimated at each bin."""

    frequencies: np.ndarray
    power: np.ndarray

    def __post_init__(self) -> None:
        if len(self.frequencies) != len(self.power):
            raise PreconditionError(
                "frequencies and power must have the same length",
                details = {"frequencies": len(self.frequencies), "power": len(self.power)}
            )

    def __len__(self) -> int:
        return len(self.frequencies)

    def __iter__(self):
        return iter((self.frequencies, self.power))

    def select(self, low: float, high: float, include_high: bool = False) -> "PSDResult":
        """Return the bins with ``low <= f < high`` (or ``<= high``)."""
        upper = self.frequencies <= high if include_high else self.frequencies < high
        mask = (self.frequencies >= low) & upper
        return PSDResult(self.frequencies[mask], self.power[mask])


def hann_window(length: int, symmetric: bool = True) -> np.ndarray:
    """
    Hann window of the given length.

    The symmetric window ``0.5 - 0.5 * cos(2 * pi * i / (N - 1))`` starts and
    ends at zero and is used for filter design and display. The periodic
    window ``0.5 - 0.5 * cos(2 * pi * i / N)`` is the one used for spectral
    analysis.
    """
    if length < 0:
        raise PreconditionError(f"Window length must be non-negative, got {length}")
    if length == 1:
        return np.ones(1)

    denominator = length - 1 if symmetric else length
    return 0.5 - 0.5 * np.cos(2 * np.pi * np.arange(length) / denominator)


def get_window(window_type: str, length: int) -> np.ndarray:
    """Periodic analysis window of the given type."""
    if window_type not in WINDOW_TYPES:
        raise ConfigurationError(
            f"Unknown window type '{window_type}'. Available window types: {list(WINDOW_TYPES)}",
            parameter = "window_type"
        )
    return hann_window(length, symmetric = False)


def fft_frequencies(n: int, sampling_rate: float) -> np.ndarray:
    """
    Frequency bins of an ``n`` point FFT.

    Positive frequencies come first, followed by the negative ones:
    ``[0, 1, ..., (n - 1) // 2, -(n // 2), ..., -1] * sampling_rate / n``.
    """
    step = sampling_rate / n
    positive = np.arange((n - 1) // 2 + 1)
    negative = np.arange(-(n // 2), 0)
    return np.concatenate([positive, negative]) * step


def rfft_frequencies(n_bins: int, sampling_rate: float) -> np.ndarray:
    """Frequency bins of a one-sided spectrum with ``n_bins`` bins."""
    if n_bins < 2:
        return np.zeros(n_bins)
    return np.arange(n_bins) * (sampling_rate / ((n_bins - 1) * 2))


def trapezoidal(x: ArrayLike, y: ArrayLike) -> float:
    """Area under ``y(x)`` with the trapezoidal rule; 0 for fewer than two points."""
    x = np.asarray(x, dtype = float)
    y = np.asarray(y, dtype = float)
    if len(x) != len(y):
        raise PreconditionError("x and y must have the same length", details = {"x": len(x), "y": len(y)})
    if len(x) < 2:
        return 0.0
    return float(np.sum(np.diff(x) * (y[:-1] + y[1:]) / 2.0))


def band_power(psd_result: PSDResult, band: Tuple[float, float]) -> float:
    """Integrate the power over the bins with ``low <= f < high``."""
    low, high = band
    selected = psd_result.select(low, high)
    return trapezoidal(selected.frequencies, selected.power)


def _segments(signal: np.ndarray, window_size: int, step: int) -> np.ndarray:
    starts = np.arange(0, len(signal) - window_size + 1, step)
    return np.stack([signal[start:start + window_size] for start in starts])


def welch(
    signal: ArrayLike,
    sampling_rate: float,
    window_size: int = 256,
    fft_size: Optional[int] = None,
    overlap: Optional[int] = None,
    window_type: str = "hann",
    scaling: str = "density",
    normalize: bool = True,
    one_sided: bool = True,
) -> PSDResult:
    """
    Estimate the power spectral density with Welch's method.

    Args:
        signal: Input signal
        sampling_rate: Sampling rate in Hz
        window_size: Samples per segment
        fft_size: Length each windowed segment is zero-padded to. Must be a
            power of two; defaults to ``2 * window_size``.
        overlap: Samples shared by consecutive segments; defaults to
            ``window_size // 2``. Trailing samples that do not fill a whole
            segment are dropped.
        window_type: Taper applied to each segment (``hann``)
        scaling: ``density`` (power per Hz) or ``spectrum`` (power)
        normalize: Divide by the maximum bin so the peak power is 1
        one_sided: Return bins ``0 .. fft_size / 2`` only, with the power of
            the dropped negative frequencies folded onto the positive ones

    Returns:
        PSDResult with the frequency bins and averaged power
    """
    signal = np.asarray(signal, dtype = float)
    fft_size = fft_size if fft_size is not None else 2 * window_size
    overlap = overlap if overlap is not None else window_size // 2

    if sampling_rate <= 0:
        raise PreconditionError(f"sampling_rate must be > 0, got {sampling_rate}")
    if window_size < 1 or window_size > len(signal):
        raise PreconditionError(
            "window_size must lie between 1 and the signal length",
            details = {"window_size": window_size, "signal_length": len(signal)}
        )
    if not 0 <= overlap < window_size:
        raise PreconditionError(
            "overlap must be non-negative and smaller than window_size",
            details = {"overlap": overlap, "window_size": window_size}
        )
    if fft_size < window_size or not fft.is_power_of_two(fft_size):
        raise PreconditionError(
            "fft_size must be a power of two no smaller than window_size",
            details = {"fft_size": fft_size, "window_size": window_size}
        )

    window = get_window(window_type, window_size)
    if scaling == "density":
        scale = 1.0 / (sampling_rate * np.sum(window ** 2))
    elif scaling == "spectrum":
        scale = 1.0 / np.sum(window) ** 2
    else:
        raise ConfigurationError(
            f"Unknown scaling '{scaling}'. Available scalings: {list(SCALINGS)}", parameter = "scaling"
        )

    segments = _segments(signal, window_size, window_size - overlap)
    padded = np.zeros((len(segments), fft_size))
    padded[:, :window_size] = segments * window

    periodograms = []
    for segment in padded:
        real, imag = fft.transform(segment, np.zeros(fft_size))
        periodograms.append((real ** 2 + imag ** 2) * scale)
    periodograms = np.array(periodograms)

    if one_sided:
        periodograms = periodograms[:, :fft_size // 2 + 1]
        # DC and the (even length) Nyquist bin have no mirrored counterpart
        last = periodograms.shape[1] - 1 if fft_size % 2 == 0 else periodograms.shape[1]
        periodograms[:, 1:last] *= 2
        frequencies = rfft_frequencies(periodograms.shape[1], sampling_rate)
    else:
        frequencies = fft_frequencies(fft_size, sampling_rate)

    power = periodograms.mean(axis = 0)

    if normalize:
        max_power = power.max()
        if max_power > 0:
            power = power / max_power

    logger.debug(
        "Welch PSD: %d segments of %d samples, fft_size=%d", len(segments), window_size, fft_size
    )
    return PSDResult(frequencies, power)


def psd(
    signal: ArrayLike,
    bands: Iterable[Tuple[float, float]],
    sampling_rate: float,
    method: str = "welch",
    window_type: str = "hann",
    scaling: str = "density",
    normalize: bool = True,
) -> PSDResult:
    """
    PSD of a signal restricted to a collection of frequency bands.

    The signal is mean-centered. The segment length is chosen so that two
    cycles of the lowest band's lower bound (at least 0.001 Hz) fit in one
    segment, capped at half the signal length so that several segments are
    averaged.

    Args:
        signal: Uniformly sampled signal, e.g. resampled RR intervals
        bands: (low, high) frequency bands in Hz
        sampling_rate: Sampling rate in Hz
        method: PSD estimator (``welch``)
        window_type: Taper used by the estimator
        scaling: ``density`` or ``spectrum``
        normalize: Normalize by the maximum power

    Returns:
        PSDResult holding only the bins that fall inside one of the bands
    """
    bands = [FrequencyBand(*band) for band in bands]
    if not bands:
        return PSDResult(np.zeros(0), np.zeros(0))

    if method not in PSD_METHODS:
        raise ConfigurationError(
            f"Unknown PSD method '{method}'. Available methods: {list(PSD_METHODS)}", parameter = "method"
        )

    signal = np.asarray(signal, dtype = float)
    if len(signal) < 4:
        raise PreconditionError("Signal is too short for a PSD estimate", details = {"length": len(signal)})
    centered = signal - np.mean(signal)

    min_frequency = max(min(band.low for band in bands), MIN_PSD_FREQUENCY)
    # Two cycles of the lowest frequency per segment, and at least two segments
    window_size = min(int(2 / min_frequency * sampling_rate), len(signal) // 2)
    fft_size = fft.next_power_of_two(2 * window_size)
    logger.debug(
        "PSD window: %d samples (min frequency %.4f Hz), fft_size=%d", window_size, min_frequency, fft_size
    )

    result = welch(
        centered,
        sampling_rate,
        window_size = window_size,
        fft_size = fft_size,
        window_type = window_type,
        scaling = scaling,
        normalize = normalize,
        one_sided = True
    )

    in_bands = np.zeros(len(result), dtype = bool)
    for band in bands:
        in_bands |= (result.frequencies >= band.low) & (result.frequencies <= band.high)
    return PSDResult(result.frequencies[in_bands], result.power[in_bands])
