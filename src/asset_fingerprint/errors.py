from __future__ import annotations

from pathlib import Path


class FingerprintError(Exception):
    """Base class for errors raised while fingerprinting a build."""


class ConfigurationError(FingerprintError, ValueError):
    """Invalid options, raised when the plugin is constructed."""


class ManifestParseError(FingerprintError, ValueError):
    """A manifest left over from a previous build could not be read back."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot parse existing manifest {self.path}: {reason}")
