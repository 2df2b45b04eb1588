"""
Error taxonomy for the analysis pipeline.

Only the decode boundary and the empty-signal guard can fail; every
step after decoding is a deterministic computation.
"""


class AnalysisError(Exception):
    """Base class for all beatcoach errors."""


class ConfigError(AnalysisError, ValueError):
    """Raised when analysis configuration is out of bounds."""


class DecodeError(AnalysisError):
    """Raised when raw bytes cannot be turned into usable sample data."""


class DecodeUnsupportedError(DecodeError):
    """The host has no audio decoding capability."""


class DecodeFormatError(DecodeError):
    """The byte stream is not a supported or valid audio encoding."""

    def __init__(self, message: str = "", detail: str | None = None):
        if not message:
            message = (
                "Could not decode the audio data. "
                "Try a different file or format (wav, flac, ogg)."
            )
        super().__init__(message)
        self.detail = detail


class EmptySignalError(DecodeError):
    """Decoding succeeded but produced no channels or no samples."""
