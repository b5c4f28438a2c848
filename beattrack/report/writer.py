"""Reading and writing beat reports as JSON."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

from beattrack.report.schemas import RhythmTrack

logger = logging.getLogger(__name__)

REPORT_SUFFIX = ".beat.json"


def default_output_path(input_path: Union[str, Path]) -> Path:
    """Input path with its extension replaced by ``.beat.json``."""
    path = Path(input_path)
    return path.with_name(path.stem + REPORT_SUFFIX)


def dumps_report(track: RhythmTrack) -> str:
    return track.model_dump_json(by_alias=True, indent=2)


def loads_report(text: str) -> RhythmTrack:
    return RhythmTrack.model_validate_json(text)


def write_report(track: RhythmTrack, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.write_text(dumps_report(track) + "\n", encoding="utf-8")
    logger.info(f"Wrote {len(track.frames)} frame(s) to {path}")
    return path


def read_report(path: Union[str, Path]) -> RhythmTrack:
    return loads_report(Path(path).read_text(encoding="utf-8"))
