from __future__ import annotations

import pytest

from asset_fingerprint.config import FingerprintOptions
from asset_fingerprint.errors import ConfigurationError
from asset_fingerprint.hashing import DISABLED, DefaultHash, DisabledHash, FixedHash


def test_defaults() -> None:
    opts = FingerprintOptions.from_mapping(None)
    assert opts.persist is True
    assert opts.extensions == ()
    assert dict(opts.asset_map) == {}
    assert opts.generate_asset_map is False
    assert opts.generate_rails_manifest is False
    assert opts.prepend is None
    assert isinstance(opts.hasher(), DefaultHash)
    assert not opts.matcher()


def test_camel_case_options_are_mapped() -> None:
    opts = FingerprintOptions.from_mapping(
        {
            "extensions": ["js", "css"],
            "persist": False,
            "assetMap": {"vendor.js": "vendor.js"},
            "fingerprintAssetMap": True,
            "generateAssetMap": True,
            "generateRailsManifest": True,
            "assetMapPath": "assets/map.json",
            "railsManifestPath": "assets/manifest.json",
            "prepend": ["https://cdn.example.com/"],
            "exclude": ["fonts/"],
            "customHash": "v1",
            "description": "fingerprint",
        }
    )
    assert opts.extensions == ("js", "css")
    assert opts.persist is False
    assert dict(opts.asset_map) == {"vendor.js": "vendor.js"}
    assert opts.fingerprint_asset_map is True
    assert opts.asset_map_path == "assets/map.json"
    assert opts.rails_manifest_path == "assets/manifest.json"
    assert opts.prepend == ("https://cdn.example.com/",)
    assert opts.exclude == ("fonts/",)
    assert opts.annotation == "fingerprint"
    assert isinstance(opts.hasher(), FixedHash)


def test_override_table_is_copied() -> None:
    table = {"a.js": "a.js"}
    opts = FingerprintOptions.from_mapping({"assetMap": table})
    table["b.js"] = "b.js"
    assert "b.js" not in opts.asset_map


def test_custom_hash_none_disables_but_absent_does_not() -> None:
    assert isinstance(FingerprintOptions.from_mapping({"customHash": None}).hasher(), DisabledHash)
    assert isinstance(FingerprintOptions(custom_hash=DISABLED).hasher(), DisabledHash)
    assert isinstance(FingerprintOptions.from_mapping({}).hasher(), DefaultHash)


def test_options_meant_for_the_host_are_ignored() -> None:
    opts = FingerprintOptions.from_mapping(
        {"generateRailsManifest": True, "replaceExtensions": ["html"], "enabled": True}
    )
    assert opts.generate_rails_manifest is True


def test_non_list_exclude_means_nothing_excluded() -> None:
    assert FingerprintOptions.from_mapping({"exclude": None}).exclude is None
    assert FingerprintOptions.from_mapping({"exclude": "fonts/"}).exclude is None


@pytest.mark.parametrize(
    "options",
    [
        {"exclude": ["[z-a].js"]},
        {"exclude": [""]},
        {"generateAssetMap": "yes"},
        {"customHash": 12},
        {"assetMap": {"a.js": 1}},
        {"prepend": "not-a-list"},
        {"assetMapPath": ""},
    ],
)
def test_invalid_options_fail_at_construction(options) -> None:
    with pytest.raises(ConfigurationError):
        FingerprintOptions.from_mapping(options)
