from __future__ import annotations

import hashlib
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .errors import ConfigurationError

HashFunction = Callable[[bytes, str | None], str]


class _Disabled:
    _instance: _Disabled | None = None

    def __new__(cls) -> _Disabled:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DISABLED"

    def __bool__(self) -> bool:
        return False


DISABLED = _Disabled()
"""Pass as ``customHash`` to copy every file through under its original name."""


def md5_hex(content: bytes, path: str | Path | None = None) -> str:
    """Default fingerprint: hex MD5 of the file contents.

    ``path`` is accepted for signature compatibility with custom hash functions
    and ignored.
    """

    return hashlib.md5(content).hexdigest()


class HashProvider(Protocol):
    enabled: bool

    def file_hash(self, content: bytes, absolute_path: str | None) -> str: ...

    def document_hash(self, content: bytes) -> str: ...


@dataclass(frozen=True, slots=True)
class DefaultHash:
    enabled: bool = True

    def file_hash(self, content: bytes, absolute_path: str | None) -> str:
        return md5_hex(content)

    def document_hash(self, content: bytes) -> str:
        return md5_hex(content)


@dataclass(frozen=True, slots=True)
class FixedHash:
    """Every fingerprinted file gets the same token, e.g. a release version."""

    value: str
    enabled: bool = True

    def file_hash(self, content: bytes, absolute_path: str | None) -> str:
        return self.value

    def document_hash(self, content: bytes) -> str:
        # Generated documents still get a content hash.
        return md5_hex(content)


@dataclass(frozen=True, slots=True)
class FunctionHash:
    fn: HashFunction
    enabled: bool = True

    def file_hash(self, content: bytes, absolute_path: str | None) -> str:
        return str(self.fn(content, absolute_path))

    def document_hash(self, content: bytes) -> str:
        # Manifest discovery only recognizes hex names.
        return md5_hex(content)


@dataclass(frozen=True, slots=True)
class DisabledHash:
    enabled: bool = False

    def file_hash(self, content: bytes, absolute_path: str | None) -> str:
        raise RuntimeError("fingerprinting is disabled")

    def document_hash(self, content: bytes) -> str:
        return md5_hex(content)


def hash_provider_for(custom_hash: object) -> HashProvider:
    """Select the provider for a ``customHash`` option value.

    Unset or empty string selects MD5, ``DISABLED`` or ``None`` turns
    fingerprinting off, any other string is a fixed token and a callable is
    invoked as ``fn(content, absolute_path)``.
    """

    if custom_hash is DISABLED or custom_hash is None:
        return DisabledHash()
    if isinstance(custom_hash, str):
        return FixedHash(custom_hash) if custom_hash else DefaultHash()
    if callable(custom_hash):
        return FunctionHash(custom_hash)
    raise ConfigurationError(
        f"customHash must be a string, a callable or DISABLED, got {type(custom_hash).__name__}"
    )
