"""Multi-scale energy envelope from a discrete wavelet decomposition."""

from __future__ import annotations

import numpy as np
import pywt


def _downsample_to(x: np.ndarray, length: int) -> np.ndarray:
    """Block-average x down to the given length."""
    edges = np.linspace(0, len(x), length + 1).astype(int)
    return np.add.reduceat(x, edges[:-1]) / np.diff(edges)


def channel_envelope(samples: np.ndarray, level: int = 4, wavelet: str = "db4") -> np.ndarray:
    """Sum of the wavelet band magnitudes of one channel.

    Every detail band and the final approximation band are rectified and
    block-averaged to the length of the coarsest band, so one envelope
    sample covers ``2 ** level`` input samples.
    """
    coeffs = pywt.wavedec(samples, wavelet, level=level)
    length = len(coeffs[0])
    envelope = np.zeros(length)
    for band in coeffs:
        envelope += _downsample_to(np.abs(band), length)
    return envelope


def wavelet_envelope(channels: np.ndarray, level: int = 4, wavelet: str = "db4") -> np.ndarray:
    """Channel-averaged energy envelope normalized by its own mean.

    Parameters
    ----------
    channels:
        Array of shape (n_channels, n_samples).
    level:
        Decomposition depth; the envelope rate is ``sr / 2 ** level``.
    wavelet:
        PyWavelets wavelet name.

    Returns
    -------
    np.ndarray
        Non-negative envelope with a mean of 1.0, or all zeros for silence.
    """
    channels = np.atleast_2d(channels)
    envelope = np.mean(
        [channel_envelope(ch, level, wavelet) for ch in channels], axis=0
    )
    mean = float(np.mean(envelope))
    if mean <= 0:
        return np.zeros_like(envelope)
    return envelope / mean
