# physio-features: Physiological Rhythm Feature Extraction
#
# Heart rate variability features from photoplethysmogram (PPG) signals and
# electrodermal activity features from galvanic skin response (GSR) signals.

__version__ = "0.1.0"

# Core functionality
from .features import HRVFeatures
from .features import EDAFeatures
from .config import PeakDetectorConfig
from .config import SpectralConfig
from .config import EDAConfig
from .config import PulseConfig
from .config import SignalConfig
from .config import create_preset_config
from .peaks import detect_peaks
from .peaks import process_signal
from .rri import extract_rr_intervals
from .hrv_frequency import compute_frequency_features
from .spectral import PSDResult
from .spectral import psd
from .spectral import welch
from .simulator import Simulation
from .simulator import SimulationResults
from .exceptions import PhysioFeaturesError
from .exceptions import PreconditionError
from .exceptions import ConfigurationError
from .exceptions import InternalConsistencyError
from . import eda
from . import fft
from . import hrv
from .log import get_logger

from numpy.typing import ArrayLike
from typing import Optional

# Constants for advanced users
from .constants import (
    FREQUENCY_BANDS,
    FrequencyBand,
    INTERPOLATION_METHODS,
)

# Module loggers propagate to this one
logger = get_logger()


def extract_hrv_features(
    ppg: ArrayLike,
    sampling_rate: float,
    peak_config: Optional[PeakDetectorConfig] = None,
    spectral_config: Optional[SpectralConfig] = None,
    **kwargs
) -> HRVFeatures:
    """
    Convenience function going from a raw PPG signal to HRV features.

    Args:
        ppg: Raw PPG signal
        sampling_rate: Sampling frequency in Hz
        peak_config: Peak detector configuration
        spectral_config: Spectral estimation configuration
        **kwargs: Stage toggles passed to :func:`physio_features.hrv.process_features`
            (``hr``, ``nonlinear``, ``time``, ``frequency``)

    Returns:
        HRVFeatures accumulator
    """
    peaks = process_signal(ppg, sampling_rate, peak_config)
    return hrv.process_features(peaks, sampling_rate, config = spectral_config, **kwargs)


__all__ = [
    "HRVFeatures",
    "EDAFeatures",
    "PeakDetectorConfig",
    "SpectralConfig",
    "EDAConfig",
    "PulseConfig",
    "SignalConfig",
    "create_preset_config",
    "detect_peaks",
    "process_signal",
    "extract_rr_intervals",
    "compute_frequency_features",
    "PSDResult",
    "psd",
    "welch",
    "Simulation",
    "SimulationResults",
    "PhysioFeaturesError",
    "PreconditionError",
    "ConfigurationError",
    "InternalConsistencyError",
    "eda",
    "fft",
    "hrv",
    "extract_hrv_features",
    "FREQUENCY_BANDS",
    "FrequencyBand",
    "INTERPOLATION_METHODS",
    "get_logger",
]
