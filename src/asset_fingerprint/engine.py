from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exclusion import ExclusionMatcher
from .hashing import HashProvider

logger = logging.getLogger(__name__)


def normalize_relpath(relative_path: str | Path) -> str:
    if isinstance(relative_path, Path):
        return relative_path.as_posix()
    return relative_path.replace("\\", "/")


def split_extension(relative_path: str) -> tuple[str, str]:
    """Split off the final extension of the basename (``a.min.js`` -> ``a.min``, ``.js``).

    Dotfiles such as ``.htaccess`` have no extension.
    """

    stem, ext = posixpath.splitext(relative_path)
    return stem, ext


def fingerprinted_path(relative_path: str, digest: str) -> str:
    stem, ext = split_extension(relative_path)
    return f"{stem}-{digest}{ext}"


@dataclass(slots=True)
class FingerprintState:
    """Mapping from original to output path for a single build.

    Each file writes only its own key, so per-file calls need no locking.
    """

    asset_map: dict[str, str] = field(default_factory=dict)
    prepend: tuple[Any, ...] | None = None

    @classmethod
    def seeded(
        cls,
        overrides: Mapping[str, str] | None = None,
        prepend: Iterable[Any] | None = None,
    ) -> FingerprintState:
        return cls(
            asset_map=dict(overrides or {}),
            prepend=None if prepend is None else tuple(prepend),
        )


class FingerprintEngine:
    """Chooses the output path of each file; file contents are never changed."""

    def __init__(
        self,
        state: FingerprintState,
        hasher: HashProvider,
        matcher: ExclusionMatcher,
        *,
        input_dir: str | Path | None = None,
    ) -> None:
        self.state = state
        self.hasher = hasher
        self.matcher = matcher
        self.input_dir = None if input_dir is None else Path(input_dir)
        self._overrides = frozenset(state.asset_map)

    def can_fingerprint_file(self, relative_path: str) -> bool:
        if not self.hasher.enabled:
            return False
        return not self.matcher.is_excluded(normalize_relpath(relative_path))

    def _absolute_path(self, relative_path: str) -> str | None:
        if self.input_dir is None:
            return None
        return str(self.input_dir / relative_path)

    def decide(
        self,
        content: bytes,
        relative_path: str | Path,
        absolute_path: str | Path | None = None,
    ) -> bytes:
        rel = normalize_relpath(relative_path)

        if rel in self._overrides:
            return content

        if self.can_fingerprint_file(rel):
            if absolute_path is None:
                abs_path = self._absolute_path(rel)
            else:
                abs_path = str(absolute_path)
            digest = self.hasher.file_hash(content, abs_path)
            new_path = fingerprinted_path(rel, digest)
        else:
            new_path = rel

        self.state.asset_map[rel] = new_path
        logger.debug("fingerprint %s -> %s", rel, new_path)
        return content

    def dest_path(
        self,
        relative_path: str | Path,
        default: Callable[[str], str] | None = None,
    ) -> str:
        """Output path for a file; valid only after :meth:`decide` ran for it."""

        rel = normalize_relpath(relative_path)
        mapped = self.state.asset_map.get(rel)
        if mapped:
            return mapped
        return default(rel) if default is not None else rel
