from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import fields
import numpy as np
import pandas as pd

from typing import Any
from typing import Dict
from typing import Optional


class _FeatureContainer:
    """Shared helpers for the feature accumulators."""

    def to_dict(self, include_missing: bool = False) -> Dict[str, Any]:
        """Return the computed features as a dictionary."""
        values = asdict(self)
        if include_missing:
            return values
        return {name: value for name, value in values.items() if value is not None}

    def to_series(self) -> pd.Series:
        """Return the scalar features as a ``pandas.Series`` (missing ones as NaN)."""
        scalars = {
            f.name: getattr(self, f.name) for f in fields(self) if not isinstance(getattr(self, f.name), np.ndarray)
        }
        return pd.Series(scalars, dtype = float)

    @property
    def computed(self) -> int:
        """Number of features that have been filled in."""
        return sum(1 for f in fields(self) if getattr(self, f.name) is not None)


@dataclass
class HRVFeatures(_FeatureContainer):
    """Accumulator for heart rate variability features.

    Each pipeline stage fills in its own group of fields; fields of stages
    that did not run stay ``None``.
    """

    # Heart rate
    HR: Optional[np.ndarray] = None
    meanHR: Optional[float] = None
    medianHR: Optional[float] = None
    varHR: Optional[float] = None
    maxHR: Optional[float] = None
    minHR: Optional[float] = None
    rangeHR: Optional[float] = None

    # Nonlinear: asymmetry
    GI: Optional[float] = None
    SI: Optional[float] = None
    PI: Optional[float] = None
    C1d: Optional[float] = None
    C1a: Optional[float] = None
    SD1d: Optional[float] = None
    SD1a: Optional[float] = None
    C2d: Optional[float] = None
    C2a: Optional[float] = None
    SD2d: Optional[float] = None
    SD2a: Optional[float] = None
    Cd: Optional[float] = None
    Ca: Optional[float] = None
    SDNNd: Optional[float] = None
    SDNNa: Optional[float] = None

    # Nonlinear: Poincaré plot
    SD1: Optional[float] = None
    SD2: Optional[float] = None
    SD1SD2: Optional[float] = None
    S: Optional[float] = None
    CSI: Optional[float] = None
    CVI: Optional[float] = None
    CSI_Modified: Optional[float] = None

    # Nonlinear: fragmentation
    PIP: Optional[float] = None
    IALS: Optional[float] = None
    PSS: Optional[float] = None
    PAS: Optional[float] = None

    # Time domain
    RMSSD: Optional[float] = None
    MeanNN: Optional[float] = None
    SDNN: Optional[float] = None
    SDSD: Optional[float] = None
    CVNN: Optional[float] = None
    CVSD: Optional[float] = None
    MedianNN: Optional[float] = None
    MadNN: Optional[float] = None
    MCVNN: Optional[float] = None
    IQR: Optional[float] = None
    pNN50: Optional[float] = None
    pNN20: Optional[float] = None

    # Frequency domain
    ULF: Optional[float] = None
    VLF: Optional[float] = None
    LF: Optional[float] = None
    HF: Optional[float] = None
    VHF: Optional[float] = None
    LFHF: Optional[float] = None
    LFn: Optional[float] = None
    HFn: Optional[float] = None
    LnHF: Optional[float] = None


@dataclass
class EDAFeatures(_FeatureContainer):
    """Accumulator for electrodermal activity features."""

    # Raw signal statistics
    meanEda: Optional[float] = None
    stdEda: Optional[float] = None
    varEda: Optional[float] = None
    minEda: Optional[float] = None
    maxEda: Optional[float] = None
    rangeEda: Optional[float] = None
    skewnessEda: Optional[float] = None
    kurtosisEda: Optional[float] = None

    # Phasic component
    meanPhasicEda: Optional[float] = None
    medianPhasicEda: Optional[float] = None
    stdPhasicEda: Optional[float] = None
    varPhasicEda: Optional[float] = None
    minPhasicEda: Optional[float] = None
    maxPhasicEda: Optional[float] = None
    rangePhasicEda: Optional[float] = None
    skewnessPhasicEda: Optional[float] = None
    kurtosisPhasicEda: Optional[float] = None

    # Tonic component
    meanTonicEda: Optional[float] = None
    medianTonicEda: Optional[float] = None
    stdTonicEda: Optional[float] = None
    varTonicEda: Optional[float] = None
    minTonicEda: Optional[float] = None
    maxTonicEda: Optional[float] = None
    rangeTonicEda: Optional[float] = None
    skewnessTonicEda: Optional[float] = None
    kurtosisTonicEda: Optional[float] = None

    # Skin conductance responses
    peaksEda: Optional[float] = None
    meanPeaksHeightEda: Optional[float] = None
    peaksHeight25Eda: Optional[float] = None
    peaksHeight50Eda: Optional[float] = None
    peaksHeight65Eda: Optional[float] = None
    peaksHeight75Eda: Optional[float] = None
    peaksHeight85Eda: Optional[float] = None
    peaksHeight95Eda: Optional[float] = None
    meanInstantaneousPeaksEda: Optional[float] = None
    instantaneousPeaks25Eda: Optional[float] = None
    instantaneousPeaks50Eda: Optional[float] = None
    instantaneousPeaks65Eda: Optional[float] = None
    instantaneousPeaks75Eda: Optional[float] = None
    instantaneousPeaks85Eda: Optional[float] = None
    instantaneousPeaks95Eda: Optional[float] = None
