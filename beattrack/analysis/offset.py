"""Beat offset (phase) estimation by correlation with a pulse train."""

from __future__ import annotations

import numpy as np

from beattrack.analysis.dsp import cross_correlate
from beattrack.analysis.models import FrameParams, FrameRecord
from beattrack.config import Settings, settings as default_settings


def _decaying_pulse(width: int) -> np.ndarray:
    return (width - np.arange(width)) / width


def pulse_train(length: int, period: int, width: int = 100) -> np.ndarray:
    """Train of linearly decaying pulses starting at every multiple of *period*."""
    width = max(1, min(width, period))
    pulse = _decaying_pulse(width)
    train = np.zeros(length)
    for start in range(0, length, period):
        end = min(start + width, length)
        train[start:end] = pulse[:end - start]
    return train


def beat_correlation(
    frame: np.ndarray,
    beat_length: int,
    max_lag: int,
    pulse_width: int = 100,
) -> np.ndarray:
    """Correlation of the frame envelope with a phase-zero pulse train."""
    train = pulse_train(len(frame), beat_length, pulse_width)
    return cross_correlate(frame, train, max_lag)


def front_response(
    frame: np.ndarray,
    beat_length: int,
    max_lag: int,
    pulse_width: int = 100,
) -> np.ndarray:
    """Pulse response of the frame folded onto a phase-zero beat comb.

    The frame is filtered causally with the decaying pulse, so at lag ``k``
    the response starts rising at a beat onset rather than ``pulse_width``
    samples ahead of it as :func:`beat_correlation` does.
    """
    width = max(1, min(pulse_width, beat_length))
    filtered = np.convolve(frame, _decaying_pulse(width))[:len(frame)]
    return cross_correlate(filtered, pulse_train(len(frame), beat_length, 1), max_lag)


def peak_offset(xc: np.ndarray, beat_length: int) -> int:
    """Lag of the strongest correlation within one beat (0 if none is positive)."""
    window = xc[:beat_length]
    if len(window) == 0 or np.max(window) <= 0:
        return 0
    return int(np.argmax(window))


def energy_front_offset(
    xc: np.ndarray,
    beat_length: int,
    earliest: int = 0,
    stride: int = 10,
    window: int = 200,
) -> int:
    """Offset of the first rising edge of correlation energy.

    Scans from *earliest* in strides until a window's maximum exceeds the
    average correlation, then returns the first sample in that window above
    the average, folded into one beat. Returns *earliest* if no front is
    found.
    """
    if len(xc) == 0:
        return earliest
    avg = float(np.mean(xc))
    for start in range(earliest, len(xc), stride):
        chunk = xc[start:start + window]
        if np.max(chunk) > avg:
            first = start + int(np.argmax(chunk > avg))
            return first % beat_length
    return earliest


def earliest_allowed(record: FrameRecord, previous: FrameRecord | None, beat_length: int, frame_inc: int) -> int:
    """Earliest offset keeping a full beat after the previous frame's last beat."""
    if previous is None:
        return 0
    gap = previous.last_beat(frame_inc) + beat_length - record.offset
    return min(max(gap, 0), beat_length - 1)


def estimate_offset(
    record: FrameRecord,
    beat_length: int,
    params: FrameParams,
    previous: FrameRecord | None = None,
    settings: Settings = default_settings,
) -> int:
    """Phase of the first beat of a frame, in ``[0, beat_length)``."""
    if settings.phase_strategy == "energy_front":
        xc = front_response(
            record.envelope, beat_length, min(len(record.envelope), 2 * beat_length),
            settings.pulse_width,
        )
        earliest = earliest_allowed(record, previous, beat_length, params.frame_inc)
        return energy_front_offset(
            xc, beat_length, earliest, settings.front_stride, settings.front_window,
        )

    xc = beat_correlation(record.envelope, beat_length, beat_length, settings.pulse_width)
    return peak_offset(xc, beat_length)
