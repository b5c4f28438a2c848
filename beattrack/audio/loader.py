"""Audio file loading utilities."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import librosa
import numpy as np

from beattrack.errors import DecodeError

logger = logging.getLogger(__name__)


def load_audio(file_path: Union[str, Path]) -> tuple[np.ndarray, int]:
    """Load an audio file at its native sample rate, keeping every channel.

    Parameters
    ----------
    file_path:
        Path to an audio file (WAV or any format librosa can decode).

    Returns
    -------
    tuple[np.ndarray, int]
        A tuple of (channels, sample_rate) where channels has shape
        (n_channels, n_samples).

    Raises
    ------
    DecodeError
        If the file is missing, malformed or contains no samples.
    """
    try:
        audio, sample_rate = librosa.load(file_path, sr=None, mono=False)
    except Exception as e:
        raise DecodeError(f"cannot decode {file_path}: {e}") from e

    channels = np.atleast_2d(audio).astype(np.float64)
    if channels.shape[1] == 0:
        raise DecodeError(f"{file_path} contains no samples")

    logger.info(f"Loaded {file_path}: {channels.shape[0]} channel(s), "
                f"{channels.shape[1]} samples at {sample_rate}Hz")
    return channels, int(sample_rate)
