"""Command line entry point: track beats of a WAV file into a JSON report.

Usage:
    beattrack song.wav                          # writes song.beat.json
    beattrack song.wav -o beats.json            # explicit output path
    beattrack song.wav --min-peak-separation 0.25
    beattrack song.wav --plot --plot-dir out    # also write plot data files
"""

import argparse
import logging
import sys
from pathlib import Path

from beattrack.analysis.engine import BeatTracker
from beattrack.analysis.observers import AnalysisObserver, PlotDataWriter
from beattrack.config import settings
from beattrack.errors import BeatTrackError
from beattrack.report.writer import default_output_path, write_report


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="beattrack",
        description="Estimate beat length and beat offsets of a WAV file",
    )
    parser.add_argument("wav", type=Path, help="Input WAV file")
    parser.add_argument("-o", "--output", type=Path, default=None,
                        help="Output JSON path (default: <input>.beat.json)")
    parser.add_argument("--min-peak-separation", type=float, default=None, metavar="SECONDS",
                        help="Minimum time between autocorrelation peaks")
    parser.add_argument("--plot", action="store_true",
                        help="Write data files for plotting")
    parser.add_argument("--plot-dir", type=Path, default=Path("out"),
                        help="Directory for plot data files (default: out)")
    parser.add_argument("--strategy", choices=["tempo_range", "histogram"], default=None,
                        help="Beat length selection strategy")
    parser.add_argument("--phase", choices=["peak", "energy_front"], default=None,
                        help="Beat offset detection strategy")
    parser.add_argument("--workers", type=int, default=None,
                        help="Threads for frame analysis (default: 1)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    overrides = {}
    if args.min_peak_separation is not None:
        overrides["min_peak_separation"] = args.min_peak_separation
    if args.strategy:
        overrides["selection_strategy"] = args.strategy
    if args.phase:
        overrides["phase_strategy"] = args.phase
    if args.workers is not None:
        overrides["workers"] = args.workers
    run_settings = settings.model_copy(update=overrides)

    observer = PlotDataWriter(args.plot_dir) if args.plot else AnalysisObserver()
    output = args.output or default_output_path(args.wav)

    try:
        track = BeatTracker(run_settings, observer).track_file(args.wav)
        write_report(track, output)
    except (BeatTrackError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    print(f"{args.wav}: {track.average_beats_per_sec:.3f} beats/s, "
          f"{len(track.frames)} frames -> {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
