"""Tests for beat length selection."""

import numpy as np

from beattrack.analysis.histogram import Histogram
from beattrack.analysis.models import FrameRecord
from beattrack.analysis.selection import (
    beat_length_candidates,
    histogram_candidates,
    tempo_range_candidates,
)

RATE = 2756.25  # 44.1 kHz / 16


def _record(peaks: dict[int, float], length: int = 4134) -> FrameRecord:
    ac = np.zeros(length)
    for lag, strength in peaks.items():
        ac[lag] = strength
    return FrameRecord(
        frame_no=0,
        offset=0,
        envelope=np.zeros(5512),
        autocorrelation=ac,
        periodicity_peaks=sorted(peaks),
    )


def test_tempo_range_picks_strongest_admissible():
    # 400 is too fast (6.9 Hz) even though it is the strongest.
    record = _record({400: 0.9, 1378: 0.5, 2756: 0.3, 3500: 0.8})
    assert tempo_range_candidates(record, RATE) == [1378, 2756]


def test_tempo_range_ties_go_to_smaller_lag():
    record = _record({1000: 0.5, 2000: 0.5})
    assert tempo_range_candidates(record, RATE)[0] == 1000


def test_tempo_range_without_admissible_peaks():
    record = _record({300: 0.9, 3900: 0.4})
    assert tempo_range_candidates(record, RATE) == []


def test_histogram_match_keeps_frame_lag():
    h = Histogram(30, 138)
    for _ in range(4):
        h.vote_lag(1380)
        h.vote_lag(2750)
    record = _record({1300: 0.9, 2600: 0.4})
    # 1300 is 5.8% off 1380, 2600 is 5.5% off 2750
    assert histogram_candidates(record, h, 0.25, 0.15) == [2600, 1300]


def test_histogram_match_rejects_distant_peaks():
    h = Histogram(30, 138)
    for _ in range(4):
        h.vote_lag(1380)
    record = _record({1800: 0.9})
    assert histogram_candidates(record, h, 0.25, 0.15) == []


def test_histogram_match_without_votes():
    record = _record({1378: 0.9})
    assert histogram_candidates(record, Histogram(30, 138)) == []


def test_strategy_switch(settings, params):
    h = Histogram(params.num_bins, params.bin_size)
    for _ in range(3):
        h.vote_lag(1800)
    record = _record({1378: 0.9, 1790: 0.2})

    assert beat_length_candidates(record, h, params, settings)[0] == 1378
    by_hist = settings.model_copy(update={"selection_strategy": "histogram"})
    assert beat_length_candidates(record, h, params, by_hist) == [1790]
