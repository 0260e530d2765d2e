"""Exception types raised by genai_companion."""


class CompanionError(Exception):
    """Base class for errors raised by this package."""


class NoCredentialsError(CompanionError, ValueError):
    """No usable API key was configured."""


class NoAudioDataError(CompanionError, RuntimeError):
    """The speech model answered without an inline audio payload."""
