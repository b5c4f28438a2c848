"""Core data models for beat tracking.

All sample quantities are in envelope samples (the wavelet-downsampled
domain) unless a field name says otherwise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from beattrack.config import Settings
from beattrack.errors import ConfigurationError

NO_VALID_PERIODICITY = "no_valid_periodicity"


@dataclass(frozen=True)
class Rhythm:
    """An alternate periodicity candidate of a frame."""
    freq: float  # Hz
    energy: float  # autocorrelation strength at beat_length
    beat_length: int
    beat_offset: int


@dataclass(frozen=True)
class Analyzed:
    """A frame with a selected beat length and phase."""
    beat_length: int
    beat_offset: int
    rhythms: tuple[Rhythm, ...] = ()


@dataclass(frozen=True)
class Unresolved:
    """A frame for which no plausible periodicity was found."""
    reason: str = NO_VALID_PERIODICITY


BeatEstimate = Union[Analyzed, Unresolved]


@dataclass
class FrameRecord:
    """Per-frame analysis state, filled stage by stage."""
    frame_no: int
    offset: int  # start of the frame in the envelope
    envelope: np.ndarray  # read-only view into the whole envelope
    autocorrelation: np.ndarray = field(default_factory=lambda: np.zeros(0))
    periodicity_peaks: list[int] = field(default_factory=list)
    estimate: BeatEstimate | None = None

    @property
    def status(self) -> str:
        if isinstance(self.estimate, Analyzed):
            return "ok"
        return NO_VALID_PERIODICITY

    @property
    def beat_length(self) -> int | None:
        if isinstance(self.estimate, Analyzed):
            return self.estimate.beat_length
        return None

    @property
    def beat_offset(self) -> int | None:
        if isinstance(self.estimate, Analyzed):
            return self.estimate.beat_offset
        return None

    def first_beat(self) -> int:
        if isinstance(self.estimate, Analyzed):
            return self.offset + self.estimate.beat_offset
        return self.offset

    def last_beat(self, frame_inc: int) -> int:
        """Last beat inside the region this frame advances over.

        Walks from the first beat in steps of the beat length while the next
        step stays within ``offset + frame_inc``. Unresolved frames report
        their own offset.
        """
        if not isinstance(self.estimate, Analyzed):
            return self.offset
        step = self.estimate.beat_length
        end = self.offset + frame_inc
        last = self.first_beat()
        while last + step <= end:
            last += step
        return last


@dataclass(frozen=True)
class FrameParams:
    """Sample-domain analysis parameters derived for one sample rate."""
    sample_rate: int
    scale: int  # input samples per envelope sample
    frame_size: int
    frame_inc: int
    max_lag: int
    num_bins: int
    bin_size: int
    min_peak_distance: int | None = None

    @property
    def envelope_rate(self) -> float:
        """Envelope sample rate in Hz."""
        return self.sample_rate / self.scale

    @classmethod
    def from_settings(cls, settings: Settings, sample_rate: int) -> "FrameParams":
        """Derive envelope-domain parameters, rejecting unusable ones.

        Raises ConfigurationError before any analysis takes place.
        """
        if sample_rate <= 0:
            raise ConfigurationError(f"invalid sample rate {sample_rate}")
        if settings.dwt_level < 1:
            raise ConfigurationError(f"dwt_level must be at least 1, got {settings.dwt_level}")
        scale = 2 ** settings.dwt_level

        frame_size = int(settings.frame_seconds * sample_rate) // scale
        frame_inc = int(settings.frame_increment_seconds * sample_rate) // scale
        max_lag = min(int(settings.correlation_seconds * sample_rate) // scale, frame_size)
        if frame_size <= 0:
            raise ConfigurationError(f"frame size resolves to {frame_size} envelope samples")
        if frame_inc <= 0:
            raise ConfigurationError(f"frame increment resolves to {frame_inc} envelope samples")
        if frame_inc > frame_size:
            raise ConfigurationError(
                f"frame increment ({frame_inc}) exceeds frame size ({frame_size})"
            )
        if max_lag <= 2 * settings.detrend_window:
            raise ConfigurationError(
                f"correlation window of {max_lag} lags leaves nothing after "
                f"detrending with a {settings.detrend_window}-sample window"
            )

        num_bins = math.ceil(settings.bins_per_second * settings.correlation_seconds)
        if num_bins <= 0:
            raise ConfigurationError(f"histogram resolves to {num_bins} bins")
        bin_size = math.ceil(settings.correlation_seconds * sample_rate / (num_bins * scale))
        if bin_size <= 0:
            raise ConfigurationError(f"histogram bin size resolves to {bin_size}")

        min_peak_distance = None
        if settings.min_peak_separation is not None:
            min_peak_distance = int(settings.min_peak_separation * sample_rate / scale)
            if min_peak_distance <= 0:
                raise ConfigurationError(
                    f"minimum peak separation of {settings.min_peak_separation}s "
                    f"resolves to {min_peak_distance} envelope samples"
                )

        return cls(
            sample_rate=sample_rate,
            scale=scale,
            frame_size=frame_size,
            frame_inc=frame_inc,
            max_lag=max_lag,
            num_bins=num_bins,
            bin_size=bin_size,
            min_peak_distance=min_peak_distance,
        )
