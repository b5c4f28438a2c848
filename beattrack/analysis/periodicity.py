"""Frame periodicity analysis: detrended autocorrelation of the envelope."""

import logging

import numpy as np

from beattrack.analysis.dsp import autocorrelate, extract_peaks, moving_average, smooth
from beattrack.analysis.histogram import Histogram
from beattrack.analysis.models import FrameParams, FrameRecord
from beattrack.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def periodicity_curve(
    frame: np.ndarray,
    max_lag: int,
    detrend_window: int = 201,
    smooth_window: int = 41,
) -> np.ndarray:
    """Non-negative periodicity strength per lag for one envelope frame.

    Normalized autocorrelation with the slow drift removed by a moving
    average. The first and last *detrend_window* lags are zeroed because the
    moving average is unreliable there. Silent or constant frames give an
    all-zero curve.
    """
    x = frame - np.mean(frame)
    if np.sum(x ** 2) < 1e-10:
        return np.zeros(max_lag)

    ac = autocorrelate(x, max_lag)
    ac = ac / ac[0]

    ac = ac - moving_average(ac, detrend_window)
    ac[:detrend_window] = 0.0
    ac[-detrend_window:] = 0.0

    ac = smooth(ac, smooth_window)
    return np.maximum(ac, 0.0)


def analyze_frame(
    frame_no: int,
    offset: int,
    frame: np.ndarray,
    params: FrameParams,
    histogram: Histogram,
    settings: Settings = default_settings,
) -> FrameRecord:
    """Compute a frame's periodicity peaks and vote them into *histogram*."""
    ac = periodicity_curve(frame, params.max_lag, settings.detrend_window, settings.smooth_window)
    peaks = extract_peaks(ac, settings.peak_persistence, params.min_peak_distance)
    for lag in peaks:
        histogram.vote_lag(lag)

    logger.debug(f"  frame {frame_no} @ {offset}: peaks {peaks}")
    return FrameRecord(
        frame_no=frame_no,
        offset=offset,
        envelope=frame,
        autocorrelation=ac,
        periodicity_peaks=peaks,
    )
