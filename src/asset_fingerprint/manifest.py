"""Sprockets-style ``manifest.json`` for Rails asset helpers.

The manifest outlives single builds: each build reads the previous one,
adds or overwrites the entries for files it produced, writes the result
under a new name and removes the old file. Entries for files the current
build did not produce are kept.
"""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from .config import DEFAULT_MANIFEST_STEM, FingerprintOptions
from .engine import FingerprintState
from .errors import ManifestParseError
from .exclusion import ExclusionMatcher
from .hashing import HashProvider
from .stable_json import dumps_stable, read_json, safe_write

logger = logging.getLogger(__name__)

ASSETS_PREFIX = "assets/"
MANIFEST_NAME_RE = re.compile(r"^manifest(-[0-9a-f]+)?\.json$")
DIGEST_RE = re.compile(r"-([0-9a-f]+)\.\w+$")
MULTIPLE_MANIFEST_FILES = "Multiple manifest files found. Using the first one."


def extract_digest(fingerprinted: str) -> str | None:
    m = DIGEST_RE.search(fingerprinted)
    return m.group(1) if m else None


def strip_assets_prefix(path: str) -> str:
    return path[len(ASSETS_PREFIX) :] if path.startswith(ASSETS_PREFIX) else path


def format_mtime(st_mtime: float) -> str:
    # Millisecond UTC timestamp, e.g. 2026-01-22T10:15:30.123Z
    stamp = datetime.fromtimestamp(st_mtime, UTC)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def list_manifest_candidates(output_dir: str | Path, manifest_path: str | None = None) -> list[str]:
    """Sorted names of manifest-like files directly under ``<output_dir>/assets``."""

    assets_dir = Path(output_dir) / "assets"
    try:
        names = sorted(os.listdir(assets_dir))
    except (FileNotFoundError, NotADirectoryError):
        return []

    # A configured path may be given relative to the output dir or to assets/.
    wanted = {manifest_path, strip_assets_prefix(manifest_path)} if manifest_path else set()
    return [name for name in names if name in wanted or MANIFEST_NAME_RE.match(name)]


def find_existing_manifest(output_dir: str | Path, manifest_path: str | None = None) -> str | None:
    """Name of the manifest file left by a previous build, if any.

    When several exist a warning is logged and the lexicographically first
    one is used.
    """

    candidates = list_manifest_candidates(output_dir, manifest_path)
    if not candidates:
        return None
    if len(candidates) > 1:
        logger.warning("%s Candidates: %s; using %s", MULTIPLE_MANIFEST_FILES, candidates, candidates[0])
    return candidates[0]


def load_manifest(path: Path) -> tuple[dict[str, str], dict[str, dict[str, Any]]]:
    try:
        data = read_json(path)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestParseError(path, str(exc)) from exc

    if not isinstance(data, dict):
        raise ManifestParseError(path, "expected a JSON object")
    assets = data.get("assets") or {}
    files = data.get("files") or {}
    if not isinstance(assets, dict) or not isinstance(files, dict):
        raise ManifestParseError(path, "'assets' and 'files' must be JSON objects")
    return assets, files


def file_record(output_dir: Path, fingerprinted: str, logical_path: str) -> dict[str, Any]:
    stats = (output_dir / fingerprinted).stat()
    record: dict[str, Any] = {
        "mtime": format_mtime(stats.st_mtime),
        "logical_path": logical_path,
        "size": stats.st_size,
    }
    digest = extract_digest(fingerprinted)
    if digest is not None:
        record["digest"] = digest
    return record


def merge_manifest(
    state: FingerprintState,
    output_dir: str | Path,
    assets: dict[str, str],
    files: dict[str, dict[str, Any]],
) -> dict[str, Any]:
    out = Path(output_dir)
    for original, fingerprinted in state.asset_map.items():
        if not original.startswith(ASSETS_PREFIX):
            continue
        key = strip_assets_prefix(original)
        value = strip_assets_prefix(fingerprinted)
        # A missing output file raises FileNotFoundError and aborts the build.
        files[value] = file_record(out, fingerprinted, key)
        assets[key] = value
    return {"assets": assets, "files": files}


def resolve_manifest_name(
    contents: bytes,
    options: FingerprintOptions,
    hasher: HashProvider,
    matcher: ExclusionMatcher,
) -> str:
    """Configured name, else ``assets/manifest-<md5>.json``.

    The hash is left out only when an exclude glob matches ``manifest.json``;
    substring patterns such as ``"json"`` do not count here.
    """

    if options.rails_manifest_path:
        return options.rails_manifest_path
    name = DEFAULT_MANIFEST_STEM
    if not matcher.glob_matches("manifest.json"):
        name += "-" + hasher.document_hash(contents)
    return name + ".json"


def write_rails_manifest(
    state: FingerprintState,
    output_dir: str | Path,
    options: FingerprintOptions,
    hasher: HashProvider,
    matcher: ExclusionMatcher,
) -> Path:
    """Merge this build into the previous manifest and write it under a new name.

    Every older manifest file is removed once the new one is on disk, so a
    single manifest remains.
    """

    out = Path(output_dir)
    existing_name = find_existing_manifest(out, options.rails_manifest_path)
    superseded = [out / "assets" / name for name in list_manifest_candidates(out, options.rails_manifest_path)]

    if existing_name is not None:
        assets, files = load_manifest(out / "assets" / existing_name)
    else:
        assets, files = {}, {}

    manifest = merge_manifest(state, out, assets, files)
    contents = dumps_stable(manifest)
    file_name = resolve_manifest_name(contents, options, hasher, matcher)

    written = safe_write(out / file_name, contents)
    logger.info("Wrote manifest %s", written)

    for old in superseded:
        if old.resolve() == written.resolve():
            continue
        old.unlink()
        logger.info("Removed superseded manifest %s", old)
    return written
