from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import DEFAULT_ASSET_MAP_PATH, FingerprintOptions
from .engine import FingerprintState
from .hashing import HashProvider
from .stable_json import dumps_stable, safe_write

logger = logging.getLogger(__name__)


def asset_map_document(state: FingerprintState) -> dict[str, Any]:
    document: dict[str, Any] = {"assets": dict(state.asset_map)}
    if state.prepend is not None:
        document["prepend"] = list(state.prepend)
    return document


def resolve_asset_map_name(contents: bytes, options: FingerprintOptions, hasher: HashProvider) -> str:
    if options.asset_map_path:
        return options.asset_map_path
    if options.fingerprint_asset_map:
        return f"assets/assetMap-{hasher.document_hash(contents)}.json"
    return DEFAULT_ASSET_MAP_PATH


def write_asset_map(
    state: FingerprintState,
    output_dir: str | Path,
    options: FingerprintOptions,
    hasher: HashProvider,
) -> Path:
    """Write ``{"assets": ..., "prepend": ...}`` and register its real filename.

    The filename hash covers the document as serialized before the
    ``assets/assetMap.json`` entry is added, so the file does not describe
    itself. After writing, ``assets/assetMap.json`` maps to the name actually
    used so later steps can find the file from the well-known name.
    """

    contents = dumps_stable(asset_map_document(state))
    file_name = resolve_asset_map_name(contents, options, hasher)

    state.asset_map[DEFAULT_ASSET_MAP_PATH] = file_name
    written = safe_write(Path(output_dir) / file_name, contents)
    logger.info("Wrote asset map %s", written)
    return written
