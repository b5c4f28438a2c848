"""Numeric primitives shared by the analysis stages."""

from __future__ import annotations

import numpy as np
from scipy import signal


def cross_correlate(a: np.ndarray, b: np.ndarray, max_lag: int) -> np.ndarray:
    """Correlation of a against b for lags 0..max_lag-1.

    ``out[k] = sum_t a[t + k] * b[t]``. Lags beyond the overlap are zero.
    """
    out = np.zeros(max_lag)
    if len(a) == 0 or len(b) == 0 or max_lag <= 0:
        return out
    full = signal.correlate(a, b, mode="full")
    zero = len(b) - 1
    positive = full[zero:zero + max_lag]
    out[:len(positive)] = positive
    return out


def autocorrelate(x: np.ndarray, max_lag: int) -> np.ndarray:
    """Autocorrelation of x for lags 0..max_lag-1."""
    return cross_correlate(x, x, max_lag)


def moving_average(x: np.ndarray, window: int) -> np.ndarray:
    """Centered moving average (zero padded at the edges)."""
    if window <= 1:
        return x.copy()
    return np.convolve(x, np.ones(window) / window, mode="same")


def smooth(x: np.ndarray, window: int) -> np.ndarray:
    """Smooth with a normalized Hann window of the given length."""
    if window <= 2:
        return x.copy()
    kernel = signal.windows.hann(window + 2)[1:-1]
    return np.convolve(x, kernel / kernel.sum(), mode="same")


def extract_peaks(
    x: np.ndarray,
    persistence: float,
    min_distance: int | None = None,
) -> list[int]:
    """Indices of local maxima whose prominence is at least
    ``persistence * (max(x) - min(x))``.

    A maximum qualifies only if the signal drops by the threshold on both
    sides before reaching a higher value, or before running off an edge.
    Flat peaks report their middle sample. With *min_distance*, weaker peaks
    closer than that to a stronger one are dropped.

    Returns an increasing list of indices; empty for a flat signal.
    """
    x = np.asarray(x, dtype=float)
    if len(x) == 0:
        return []
    lo, hi = float(np.min(x)), float(np.max(x))
    if hi - lo <= 0:
        return []

    # Pad with the minimum so maxima at the edges can qualify.
    padded = np.concatenate(([lo], x, [lo]))
    peaks, _ = signal.find_peaks(
        padded,
        prominence=persistence * (hi - lo),
        distance=min_distance,
    )
    return [int(p) - 1 for p in peaks]
