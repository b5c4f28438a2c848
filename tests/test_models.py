"""Tests for derived frame parameters and frame records."""

import numpy as np
import pytest

from beattrack.analysis.models import Analyzed, FrameParams, FrameRecord, Unresolved
from beattrack.errors import ConfigurationError


def test_params_at_44100(params):
    assert params.scale == 16
    assert params.frame_size == 5512
    assert params.frame_inc == 5512
    assert params.max_lag == 4134
    assert params.num_bins == 30
    assert params.bin_size == 138
    assert params.envelope_rate == pytest.approx(2756.25)
    assert params.min_peak_distance is None


def test_min_peak_separation_in_envelope_samples(settings):
    p = FrameParams.from_settings(settings.model_copy(update={"min_peak_separation": 0.25}), 44100)
    assert p.min_peak_distance == 689


@pytest.mark.parametrize("update", [
    {"min_peak_separation": 0.0},
    {"min_peak_separation": -1.0},
    {"frame_seconds": 0.0001},
    {"frame_increment_seconds": 2.5},
    {"correlation_seconds": 0.1},
    {"dwt_level": 0},
])
def test_unusable_parameters_raise(settings, update):
    with pytest.raises(ConfigurationError):
        FrameParams.from_settings(settings.model_copy(update=update), 44100)


def test_frame_record_status():
    rec = FrameRecord(0, 0, np.zeros(3))
    assert rec.status == "no_valid_periodicity"
    rec.estimate = Unresolved()
    assert rec.beat_length is None and rec.beat_offset is None
    rec.estimate = Analyzed(beat_length=100, beat_offset=7)
    assert rec.status == "ok"
    assert rec.beat_length == 100
    assert rec.first_beat() == 7
