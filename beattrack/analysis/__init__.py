"""Rhythm estimation stages."""

from beattrack.analysis.continuity import repair_continuity, repair_offset
from beattrack.analysis.engine import BeatTracker
from beattrack.analysis.histogram import Histogram
from beattrack.analysis.models import Analyzed, FrameParams, FrameRecord, Rhythm, Unresolved
from beattrack.analysis.observers import AnalysisObserver, PlotDataWriter
from beattrack.analysis.offset import estimate_offset
from beattrack.analysis.periodicity import analyze_frame
from beattrack.analysis.selection import beat_length_candidates

__all__ = [
    "BeatTracker",
    "Histogram",
    "Analyzed",
    "Unresolved",
    "FrameParams",
    "FrameRecord",
    "Rhythm",
    "AnalysisObserver",
    "PlotDataWriter",
    "analyze_frame",
    "beat_length_candidates",
    "estimate_offset",
    "repair_offset",
    "repair_continuity",
]
