"""Shared test fixtures for beat tracker tests."""

import numpy as np
import pytest

from beattrack.analysis.histogram import Histogram
from beattrack.analysis.models import FrameParams
from beattrack.config import Settings


def generate_click_track(
    bpm: float,
    duration_seconds: float = 10.0,
    sr: int = 44100,
    beats_per_bar: int = 4,
    accent_ratio: float = 1.0,
) -> np.ndarray:
    """Generate a synthetic mono click track.

    Each click is a 20ms 1 kHz sine burst with an exponential decay.
    """
    n_samples = int(duration_seconds * sr)
    audio = np.zeros(n_samples, dtype=np.float32)

    beat_interval = 60.0 / bpm  # seconds per beat
    click_samples = int(0.02 * sr)

    t_click = np.arange(click_samples) / sr
    click = np.sin(2 * np.pi * 1000 * t_click) * np.exp(-t_click * 100)

    beat = 0
    time = 0.0
    while time < duration_seconds:
        sample_pos = int(time * sr)
        amplitude = accent_ratio if beat % beats_per_bar == 0 else 1.0

        end = min(sample_pos + click_samples, n_samples)
        length = end - sample_pos
        if length > 0:
            audio[sample_pos:end] += click[:length] * amplitude

        time += beat_interval
        beat += 1

    peak = np.max(np.abs(audio))
    if peak > 0:
        audio = audio / peak

    return audio


PULSE_SHAPE = np.array([1.0, 0.75, 0.5, 0.25])


def pulse_envelope(length: int, beat_length: int, beat_offset: int) -> np.ndarray:
    """Noise-free envelope: a decaying pulse at every beat, none cut by the end."""
    env = np.zeros(length)
    for start in range(beat_offset, length - len(PULSE_SHAPE) + 1, beat_length):
        env[start:start + len(PULSE_SHAPE)] = PULSE_SHAPE
    return env


@pytest.fixture
def settings():
    """Default settings."""
    return Settings()


@pytest.fixture
def params(settings):
    """Frame parameters for 44.1 kHz input."""
    return FrameParams.from_settings(settings, 44100)


@pytest.fixture
def histogram(params):
    return Histogram(params.num_bins, params.bin_size)


@pytest.fixture
def click_120():
    """10 seconds of clicks at 120 BPM, 44.1 kHz."""
    return generate_click_track(bpm=120, duration_seconds=10)
