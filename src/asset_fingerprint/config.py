from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .errors import ConfigurationError
from .exclusion import ExclusionMatcher
from .hashing import HashProvider, hash_provider_for

logger = logging.getLogger(__name__)

DEFAULT_ASSET_MAP_PATH = "assets/assetMap.json"
DEFAULT_MANIFEST_STEM = "assets/manifest"

# camelCase option name -> FingerprintOptions attribute
_OPTION_NAMES: dict[str, str] = {
    "extensions": "extensions",
    "persist": "persist",
    "annotation": "annotation",
    "assetMap": "asset_map",
    "fingerprintAssetMap": "fingerprint_asset_map",
    "generateAssetMap": "generate_asset_map",
    "generateRailsManifest": "generate_rails_manifest",
    "assetMapPath": "asset_map_path",
    "railsManifestPath": "rails_manifest_path",
    "prepend": "prepend",
    "exclude": "exclude",
    "customHash": "custom_hash",
}

_BOOL_OPTIONS = (
    "persist",
    "fingerprint_asset_map",
    "generate_asset_map",
    "generate_rails_manifest",
)


@dataclass(frozen=True, slots=True)
class FingerprintOptions:
    """Options for one fingerprinting plugin instance.

    ``extensions``, ``persist`` and ``annotation`` are read by the host
    pipeline only. ``custom_hash`` is kept exactly as given; use
    :meth:`hasher` to get the selected provider.
    """

    extensions: tuple[str, ...] = ()
    persist: bool = True
    annotation: str | None = None
    asset_map: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    fingerprint_asset_map: bool = False
    generate_asset_map: bool = False
    generate_rails_manifest: bool = False
    asset_map_path: str | None = None
    rails_manifest_path: str | None = None
    prepend: tuple[Any, ...] | None = None
    exclude: tuple[str, ...] | None = None
    custom_hash: Any = ""

    def __post_init__(self) -> None:
        for name in _BOOL_OPTIONS:
            if not isinstance(getattr(self, name), bool):
                raise ConfigurationError(f"{name} must be a boolean")

        if isinstance(self.extensions, str):
            raise ConfigurationError("extensions must be a list of strings, not a string")
        object.__setattr__(self, "extensions", tuple(self.extensions))

        if not isinstance(self.asset_map, Mapping):
            raise ConfigurationError("assetMap must be a mapping of path -> path")
        for key, value in self.asset_map.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ConfigurationError(f"assetMap entries must be strings, got {key!r}: {value!r}")
        object.__setattr__(self, "asset_map", MappingProxyType(dict(self.asset_map)))

        for name in ("asset_map_path", "rails_manifest_path", "annotation"):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, str) or not value):
                raise ConfigurationError(f"{name} must be a non-empty string")

        if self.prepend is not None:
            if isinstance(self.prepend, (str, bytes)) or not isinstance(self.prepend, (list, tuple)):
                raise ConfigurationError("prepend must be a list")
            object.__setattr__(self, "prepend", tuple(self.prepend))

        if self.exclude is not None:
            if isinstance(self.exclude, str):
                raise ConfigurationError("exclude must be a list of patterns, not a string")
            object.__setattr__(self, "exclude", tuple(self.exclude))

        # Fail on bad patterns and hash options now rather than mid-build.
        self.matcher()
        self.hasher()

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any] | None = None) -> FingerprintOptions:
        """Build options from the camelCase names a host passes through.

        ``description`` is the legacy spelling of ``annotation``; unknown keys
        are ignored. Passing ``customHash: None`` explicitly disables
        fingerprinting, leaving it out keeps the MD5 default.
        """

        options = dict(options or {})
        description = options.pop("description", None)
        if options.get("annotation") is None and description is not None:
            options["annotation"] = description

        # Hosts pass their whole option bag; keys meant for them are skipped.
        unknown = sorted(set(options) - set(_OPTION_NAMES))
        if unknown:
            logger.debug("ignoring options not used for fingerprinting: %s", ", ".join(unknown))
            for key in unknown:
                del options[key]

        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            attr = _OPTION_NAMES[key]
            if attr == "custom_hash":
                kwargs[attr] = value
            elif attr in _BOOL_OPTIONS and value is None:
                continue
            elif attr == "extensions":
                kwargs[attr] = value or ()
            elif attr == "asset_map":
                kwargs[attr] = value or {}
            elif attr == "exclude":
                # Anything but a list means "exclude nothing".
                kwargs[attr] = value if isinstance(value, (list, tuple)) else None
            else:
                kwargs[attr] = value
        return cls(**kwargs)

    def matcher(self) -> ExclusionMatcher:
        return ExclusionMatcher(self.exclude)

    def hasher(self) -> HashProvider:
        return hash_provider_for(self.custom_hash)
