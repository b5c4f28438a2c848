"""Tests for the global tempo histogram."""

import random

import numpy as np
import pytest

from beattrack.analysis.histogram import Histogram
from beattrack.analysis.periodicity import analyze_frame
from tests.conftest import pulse_envelope


def test_vote_and_dominant_bin():
    h = Histogram(num_bins=10, bin_size=100)
    assert h.dominant_bin() is None
    for lag in [250, 260, 520, 270]:
        h.vote_lag(lag)
    assert h.counts.tolist() == [0, 0, 3, 0, 0, 1, 0, 0, 0, 0]
    assert h.dominant_bin() == 2
    assert h.bin_length(2) == pytest.approx(260.0)
    assert h.dominant_length() == pytest.approx(260.0)


def test_dominant_bin_tie_goes_to_lowest():
    h = Histogram(num_bins=10, bin_size=100)
    h.vote(7)
    h.vote(3)
    assert h.dominant_bin() == 3


def test_vote_lag_clamps_to_last_bin():
    h = Histogram(num_bins=4, bin_size=10)
    h.vote_lag(1000)
    assert h.counts[-1] == 1


def test_bin_length_without_votes_is_center():
    h = Histogram(num_bins=4, bin_size=10)
    assert h.bin_length(2) == 25.0


def test_peaks_reports_multiple_hypotheses():
    h = Histogram(num_bins=30, bin_size=138)
    for _ in range(5):
        h.vote(10)
        h.vote(20)
    h.vote(15)
    assert h.peaks(0.25) == [10, 20]


def test_merge_requires_same_binning():
    a = Histogram(10, 100)
    b = Histogram(10, 100)
    b.vote_lag(450)
    a.merge(b)
    assert a.counts[4] == 1
    with pytest.raises(ValueError):
        a.merge(Histogram(12, 100))


def test_voting_is_order_independent(params, settings):
    """Analyzing frames in any order yields the same histogram queries."""
    frames = [
        pulse_envelope(params.frame_size, beat_length, offset)
        for beat_length, offset in [(1378, 0), (1378, 300), (1000, 50), (1700, 900), (1378, 10)]
    ]

    def build(order):
        h = Histogram(params.num_bins, params.bin_size)
        for i in order:
            analyze_frame(i, 0, frames[i], params, h, settings)
        return h

    forward = build(range(len(frames)))
    order = list(range(len(frames)))
    random.Random(7).shuffle(order)
    shuffled = build(order)

    np.testing.assert_array_equal(forward.counts, shuffled.counts)
    assert forward.dominant_bin() == shuffled.dominant_bin()
    assert forward.peaks(0.25) == shuffled.peaks(0.25)
    assert forward.dominant_length() == shuffled.dominant_length()
