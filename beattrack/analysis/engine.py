"""Beat tracking orchestrator - runs the analysis stages over a whole file."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Union

import librosa
import numpy as np

from beattrack.analysis.continuity import repair_offset
from beattrack.analysis.histogram import Histogram
from beattrack.analysis.models import Analyzed, FrameParams, FrameRecord, Rhythm, Unresolved
from beattrack.analysis.observers import AnalysisObserver
from beattrack.analysis.offset import estimate_offset
from beattrack.analysis.periodicity import analyze_frame
from beattrack.analysis.selection import beat_length_candidates
from beattrack.audio.envelope import wavelet_envelope
from beattrack.audio.loader import load_audio
from beattrack.config import Settings, settings as default_settings
from beattrack.report.schemas import FrameReport, RhythmReport, RhythmTrack

logger = logging.getLogger(__name__)


def frame_offsets(envelope_length: int, frame_size: int, frame_inc: int) -> list[int]:
    """Start offsets of every complete frame."""
    if envelope_length < frame_size:
        return []
    return list(range(0, envelope_length - frame_size + 1, frame_inc))


class BeatTracker:
    """Orchestrates the beat tracking pipeline for one file at a time."""

    def __init__(self, settings: Settings | None = None, observer: AnalysisObserver | None = None):
        self.settings = settings or default_settings
        self.observer = observer or AnalysisObserver()

    def track_file(self, file_path: Union[str, Path]) -> RhythmTrack:
        """Track beats of an audio file."""
        channels, sr = load_audio(file_path)
        return self.track_audio(channels, sr, file_name=str(file_path))

    def track_audio(self, channels: np.ndarray, sr: int, file_name: str = "") -> RhythmTrack:
        """Track beats of pre-loaded audio of shape (n_channels, n_samples)."""
        start = time.perf_counter()
        channels = np.atleast_2d(channels)
        params = FrameParams.from_settings(self.settings, sr)
        logger.info(f"Tracking {channels.shape[1] / sr:.1f}s of audio at {sr}Hz "
                    f"(frame {params.frame_size}, step {params.frame_inc}, "
                    f"max lag {params.max_lag}, {params.num_bins} bins of {params.bin_size})")

        # Step 1: Energy envelope
        logger.info("Step 1: Energy envelope")
        envelope = wavelet_envelope(channels, self.settings.dwt_level, self.settings.wavelet)
        self.observer.on_envelope(envelope)

        # Step 2: Frame periodicity + histogram votes
        logger.info("Step 2: Frame periodicity analysis")
        records, histogram = self.analyze_frames(envelope, params)
        hist_peaks = histogram.peaks(self.settings.histogram_persistence)
        self.observer.on_histogram(histogram, hist_peaks)
        logger.info(f"  {len(records)} frames, {histogram.total_votes} votes, "
                    f"dominant bin {histogram.dominant_bin()}, peaks {hist_peaks}")

        # Step 3: Beat length, offset and continuity, strictly in frame order
        logger.info("Step 3: Beat resolution")
        self.resolve_frames(records, histogram, params)
        n_ok = sum(1 for r in records if isinstance(r.estimate, Analyzed))
        logger.info(f"  {n_ok}/{len(records)} frames resolved")

        track = self.assemble(records, histogram, params, file_name, channels.shape[0])
        self.observer.on_track(track, channels.shape[1])
        logger.info(f"Average {track.average_beats_per_sec:.3f} beats/s "
                    f"in {time.perf_counter() - start:.2f}s")
        return track

    def analyze_frames(self, envelope: np.ndarray, params: FrameParams) -> tuple[list[FrameRecord], Histogram]:
        """Run periodicity analysis on every frame and build the histogram.

        With more than one worker, contiguous chunks of frames are analyzed
        on a thread pool, each chunk voting into its own histogram; the
        partial histograms are merged afterwards.
        """
        offsets = frame_offsets(len(envelope), params.frame_size, params.frame_inc)
        histogram = Histogram(params.num_bins, params.bin_size)
        if not offsets:
            logger.warning(f"Envelope of {len(envelope)} samples is shorter than one frame")
            return [], histogram

        frames = librosa.util.frame(envelope, frame_length=params.frame_size, hop_length=params.frame_inc)
        jobs = [(i, off, frames[:, i]) for i, off in enumerate(offsets)]

        def _run(chunk):
            partial = Histogram(params.num_bins, params.bin_size)
            results = [
                analyze_frame(i, off, frame, params, partial, self.settings)
                for i, off, frame in chunk
            ]
            return results, partial

        workers = max(1, min(self.settings.workers, len(jobs)))
        if workers == 1:
            chunks = [_run(jobs)]
        else:
            size = -(-len(jobs) // workers)
            with ThreadPoolExecutor(max_workers=workers) as pool:
                chunks = list(pool.map(_run, [jobs[i:i + size] for i in range(0, len(jobs), size)]))

        records = []
        for results, partial in chunks:
            records.extend(results)
            histogram.merge(partial)
        return records, histogram

    def resolve_frames(self, records: list[FrameRecord], histogram: Histogram, params: FrameParams) -> None:
        """Select beat length and offset per frame, then repair continuity.

        Each frame may depend on the previous, already finalized frame, so
        this always runs sequentially in frame order.
        """
        previous = None
        for record in records:
            record.estimate = self.resolve_frame(record, histogram, params, previous)
            repair_offset(record, previous, params.frame_inc)
            self.observer.on_frame(record)
            previous = record

    def resolve_frame(
        self,
        record: FrameRecord,
        histogram: Histogram,
        params: FrameParams,
        previous: FrameRecord | None = None,
    ) -> Analyzed | Unresolved:
        candidates = beat_length_candidates(record, histogram, params, self.settings)
        if not candidates:
            logger.debug(f"  frame {record.frame_no}: no valid periodicity")
            return Unresolved()

        beat_length, *alternates = candidates
        beat_offset = estimate_offset(record, beat_length, params, previous, self.settings)
        rhythms = tuple(
            Rhythm(
                freq=params.envelope_rate / lag,
                energy=float(record.autocorrelation[lag]),
                beat_length=lag,
                beat_offset=estimate_offset(record, lag, params, None, self.settings),
            )
            for lag in alternates
        )
        logger.debug(f"  frame {record.frame_no}: beat length {beat_length}, offset {beat_offset}")
        return Analyzed(
            beat_length=beat_length,
            beat_offset=beat_offset,
            rhythms=rhythms,
        )

    @staticmethod
    def assemble(
        records: list[FrameRecord],
        histogram: Histogram,
        params: FrameParams,
        file_name: str,
        num_channels: int,
    ) -> RhythmTrack:
        """Build the report in original sample units."""
        scale = params.scale
        # Mean voted lag of the dominant bin, not dominant_bin * bin_size: the
        # bin center can be a whole bin (about 10% at 120 BPM) off the tempo.
        average_length = histogram.dominant_length()
        if average_length:
            beats_per_sec = params.sample_rate / (scale * average_length)
        else:
            beats_per_sec = 0.0

        frames = []
        for record in records:
            report = FrameReport(
                frame_no=record.frame_no,
                frame_offset_samples=record.offset * scale,
                time_ms=record.offset * scale * 1000.0 / params.sample_rate,
            )
            estimate = record.estimate
            if isinstance(estimate, Analyzed):
                report.beat_offset_samples = (record.offset + estimate.beat_offset) * scale
                report.beat_length_samples = estimate.beat_length * scale
                report.rhythms = [
                    RhythmReport(
                        freq=r.freq,
                        energy=r.energy,
                        beat_length_samples=r.beat_length * scale,
                        beat_offset_samples=(record.offset + r.beat_offset) * scale,
                    )
                    for r in estimate.rhythms
                ]
            frames.append(report)

        return RhythmTrack(
            file_name=file_name,
            sample_rate=params.sample_rate,
            num_channels=num_channels,
            average_beats_per_sec=beats_per_sec,
            frames=frames,
        )
