"""Content-hash fingerprinting of build output files.

Renames files to ``name-<hash>.ext`` for cache busting and writes two records
of the renaming: a generic asset map and a Rails/Sprockets compatible
manifest that is merged across builds.
"""

from .build import BuildCoordinator, HostPipeline
from .config import FingerprintOptions
from .engine import FingerprintEngine, FingerprintState
from .errors import ConfigurationError, FingerprintError, ManifestParseError
from .hashing import DISABLED

__all__: list[str] = [
    "DISABLED",
    "BuildCoordinator",
    "ConfigurationError",
    "FingerprintEngine",
    "FingerprintError",
    "FingerprintOptions",
    "FingerprintState",
    "HostPipeline",
    "ManifestParseError",
]
