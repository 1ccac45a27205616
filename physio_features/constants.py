from typing import NamedTuple


class FrequencyBand(NamedTuple):
    """Frequency band in Hz, ``low`` inclusive and ``high`` exclusive."""

    low: float
    high: float


# HRV frequency bands (Hz)
FREQUENCY_BANDS = {
    "ulf": FrequencyBand(0.0, 0.0033),
    "vlf": FrequencyBand(0.0033, 0.04),
    "lf": FrequencyBand(0.04, 0.15),
    "hf": FrequencyBand(0.15, 0.4),
    "vhf": FrequencyBand(0.4, 0.5)
}

# Elgendi systolic peak detector defaults
PEAK_WINDOW = 0.111  # seconds
BEAT_WINDOW = 0.667  # seconds
PEAK_BETA = 0.02
PPG_LOWCUT = 0.5  # Hz
PPG_HIGHCUT = 8.0  # Hz
PPG_FILTER_ORDER = 3

# Spectral estimation
MIN_PSD_FREQUENCY = 0.001  # Hz
MAX_TRANSFORM_LENGTH = 2 ** 29

# EDA processing
EDA_CLEAN_CUTOFF = 1.0  # Hz
EDA_TONIC_CUTOFF = 0.05  # Hz
SCR_MIN_AMPLITUDE = 0.05  # microsiemens

# Physiological limits used by the simulator
RR_INTERVAL_MIN = 0.3  # seconds
RR_INTERVAL_MAX = 2.0  # seconds
MAD_SCALE = 1.4826

INTERPOLATION_METHODS = ("monotone_cubic", "quadratic", "b_spline", "linear")
