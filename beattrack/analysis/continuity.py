"""Continuity repair between consecutive frames' beat trains."""

from __future__ import annotations

from dataclasses import replace

from beattrack.analysis.models import Analyzed, FrameRecord


def repair_offset(record: FrameRecord, previous: FrameRecord | None, frame_inc: int) -> None:
    """Push a frame's first beat at least one beat length past the previous
    frame's last beat.

    *previous* must already be repaired. Unresolved frames are left alone.
    """
    estimate = record.estimate
    if previous is None or not isinstance(estimate, Analyzed):
        return
    last = previous.last_beat(frame_inc)
    beat_offset = estimate.beat_offset
    while record.offset + beat_offset - last < estimate.beat_length:
        beat_offset += estimate.beat_length
    if beat_offset != estimate.beat_offset:
        record.estimate = replace(estimate, beat_offset=beat_offset)


def repair_continuity(records: list[FrameRecord], frame_inc: int) -> list[FrameRecord]:
    """Repair a whole frame sequence in frame order."""
    previous = None
    for record in records:
        repair_offset(record, previous, frame_inc)
        previous = record
    return records
