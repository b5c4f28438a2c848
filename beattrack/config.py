"""Application configuration."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Tracker settings with env var overrides."""

    # Envelope
    dwt_level: int = 4
    wavelet: str = "db4"

    # Framing
    frame_seconds: float = 2.0
    frame_increment_seconds: float = 2.0
    correlation_seconds: float = 1.5
    bins_per_second: int = 20

    # Periodicity analysis (envelope samples)
    detrend_window: int = 201
    smooth_window: int = 41
    peak_persistence: float = 0.2
    histogram_persistence: float = 0.25
    min_peak_separation: float | None = None  # seconds

    # Beat length selection
    selection_strategy: Literal["tempo_range", "histogram"] = "tempo_range"
    min_beat_hz: float = 1.0  # 60 BPM
    max_beat_hz: float = 3.06  # ~184 BPM
    histogram_tolerance: float = 0.15

    # Beat offset estimation (envelope samples)
    phase_strategy: Literal["peak", "energy_front"] = "peak"
    pulse_width: int = 100
    front_stride: int = 10
    front_window: int = 200

    # Frame analysis threads (1 = in-process)
    workers: int = 1

    model_config = {"env_prefix": "BEATTRACK_"}


settings = Settings()
