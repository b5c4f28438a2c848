"""Per-frame beat length selection."""

from __future__ import annotations

from beattrack.analysis.histogram import Histogram
from beattrack.analysis.models import FrameParams, FrameRecord
from beattrack.config import Settings, settings as default_settings


def tempo_range_candidates(
    record: FrameRecord,
    envelope_rate: float,
    min_hz: float = 1.0,
    max_hz: float = 3.06,
) -> list[int]:
    """Peaks whose implied beat frequency lies in the dance-tempo band,
    strongest first (smaller lag first on equal strength)."""
    admissible = [
        lag for lag in record.periodicity_peaks
        if lag > 0 and min_hz <= envelope_rate / lag <= max_hz
    ]
    return sorted(admissible, key=lambda lag: (-record.autocorrelation[lag], lag))


def histogram_candidates(
    record: FrameRecord,
    histogram: Histogram,
    persistence: float = 0.25,
    tolerance: float = 0.15,
) -> list[int]:
    """Peaks that match a histogram tempo hypothesis, best match first.

    Each peak is scored by its smallest relative error against the beat
    length of any histogram peak bin; peaks above *tolerance* are dropped.
    """
    hist_lengths = [histogram.bin_length(b) for b in histogram.peaks(persistence)]
    if not hist_lengths:
        return []

    scored = []
    for lag in record.periodicity_peaks:
        if lag <= 0:
            continue
        error = min(abs(lag - h) / h for h in hist_lengths)
        if error <= tolerance:
            scored.append((error, lag))
    return [lag for _error, lag in sorted(scored)]


def beat_length_candidates(
    record: FrameRecord,
    histogram: Histogram,
    params: FrameParams,
    settings: Settings = default_settings,
) -> list[int]:
    """Ranked beat length candidates for a frame; the first one is selected.

    An empty list means the frame has no valid periodicity.
    """
    if settings.selection_strategy == "histogram":
        return histogram_candidates(
            record, histogram, settings.histogram_persistence, settings.histogram_tolerance,
        )
    return tempo_range_candidates(
        record, params.envelope_rate, settings.min_beat_hz, settings.max_beat_hz,
    )
