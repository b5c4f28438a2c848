"""Optional hooks for inspecting intermediate analysis results."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from beattrack.analysis.histogram import Histogram
from beattrack.analysis.models import FrameRecord

if TYPE_CHECKING:
    from beattrack.report.schemas import RhythmTrack

logger = logging.getLogger(__name__)


class AnalysisObserver:
    """No-op observer; subclasses override the hooks they need."""

    def on_envelope(self, envelope: np.ndarray) -> None:
        pass

    def on_frame(self, record: FrameRecord) -> None:
        pass

    def on_histogram(self, histogram: Histogram, peaks: list[int]) -> None:
        pass

    def on_track(self, track: "RhythmTrack", num_samples: int) -> None:
        pass


class PlotDataWriter(AnalysisObserver):
    """Writes plain-text data files for plotting (one value per line)."""

    BEAT_PULSE_SAMPLES = 50

    def __init__(self, out_dir: str | Path = "out"):
        self.out_dir = Path(out_dir)
        self.pulse_height = 1.0
        self.out_dir.mkdir(parents=True, exist_ok=True)

    def _write(self, name: str, data, fmt: str = "%.6f") -> None:
        np.savetxt(self.out_dir / f"{name}.txt", np.asarray(data), fmt=fmt)

    def on_envelope(self, envelope: np.ndarray) -> None:
        self._write("envelope", envelope)
        if len(envelope):
            self.pulse_height = float(np.max(envelope))

    def on_frame(self, record: FrameRecord) -> None:
        n = record.frame_no
        self._write(f"envelope{n:03d}", record.envelope)
        self._write(f"autocorr{n:03d}", record.autocorrelation)
        self._write(f"peaks{n:03d}", record.periodicity_peaks, fmt="%d")

    def on_histogram(self, histogram: Histogram, peaks: list[int]) -> None:
        self._write("histogram", histogram.counts, fmt="%d")
        self._write("histogramPeaks", peaks, fmt="%d")

    def on_track(self, track: "RhythmTrack", num_samples: int) -> None:
        """Synthesize a click signal at the detected beats, at the input rate."""
        beat = np.zeros(num_samples)
        frames = track.frames
        for i, fr in enumerate(frames):
            if fr.beat_length_samples is None or fr.beat_offset_samples is None:
                continue
            if i + 1 < len(frames):
                end = frames[i + 1].frame_offset_samples
            else:
                end = num_samples
            for pos in range(fr.beat_offset_samples, min(end, num_samples), fr.beat_length_samples):
                beat[pos:pos + self.BEAT_PULSE_SAMPLES] = self.pulse_height
        self._write("beat", beat)
        logger.info(f"Plot data written to {self.out_dir}")
