"""
Exception types raised while loading or saving configurations.
"""

__all__ = [
    "StaticConfigError",
    "DeserializationError",
    "ConfigFormatError",
]

from pathlib import Path


class StaticConfigError(Exception):
    """Base class for all staticconfig failures."""


class DeserializationError(StaticConfigError):
    """A configuration file was found but did not decode into an instance."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ConfigFormatError(StaticConfigError, ValueError):
    """Decoded JSON does not match the shape of the target class."""
