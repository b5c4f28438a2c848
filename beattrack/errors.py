"""Exceptions raised by the beat tracker."""


class BeatTrackError(Exception):
    """Base class for fatal tracker errors."""


class DecodeError(BeatTrackError):
    """The input audio could not be read or holds no samples."""


class ConfigurationError(BeatTrackError):
    """A derived analysis parameter is unusable for the input's sample rate."""
