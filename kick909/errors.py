from __future__ import annotations


class Kick909Error(Exception):
    """Base error for the kick909 library."""


class InvalidConfigError(Kick909Error):
    """Raised when a config or sample buffer is outside the supported domain."""


class ContainerFormatError(InvalidConfigError):
    """Raised when a value does not fit its fixed-width WAV header field."""


class ContainerWriteError(Kick909Error):
    """Raised when the output sink rejects a write."""
