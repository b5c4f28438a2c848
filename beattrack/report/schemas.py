"""Pydantic models for the beat report written to disk."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _ReportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RhythmReport(_ReportModel):
    freq: float
    energy: float
    beat_length_samples: int
    beat_offset_samples: int


class FrameReport(_ReportModel):
    frame_no: int
    frame_offset_samples: int
    beat_offset_samples: int | None = None  # absolute sample of the first beat
    beat_length_samples: int | None = None
    time_ms: float
    rhythms: list[RhythmReport] = []


class RhythmTrack(_ReportModel):
    file_name: str
    sample_rate: int
    num_channels: int
    average_beats_per_sec: float
    frames: list[FrameReport] = []
