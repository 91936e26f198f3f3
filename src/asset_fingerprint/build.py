from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from .asset_map import write_asset_map
from .config import FingerprintOptions
from .engine import FingerprintEngine, FingerprintState
from .manifest import write_rails_manifest

logger = logging.getLogger(__name__)


class HostPipeline(Protocol):
    """What a host build tool provides.

    ``run`` must call ``engine.decide`` once per routed file, place each file at
    ``engine.dest_path(relative_path)`` and return the output directory. Order
    and parallelism are up to the host; ``run`` returns only when every file
    has been processed.
    """

    def run(self, engine: FingerprintEngine) -> str | Path: ...


class BuildCoordinator:
    def __init__(
        self,
        options: FingerprintOptions | Mapping[str, Any] | None = None,
        *,
        input_dir: str | Path | None = None,
    ) -> None:
        if not isinstance(options, FingerprintOptions):
            options = FingerprintOptions.from_mapping(options)
        self.options = options
        self.input_dir = input_dir
        self.hasher = options.hasher()
        self.matcher = options.matcher()
        self.engine = self.begin_build()

    @property
    def state(self) -> FingerprintState:
        return self.engine.state

    def begin_build(self) -> FingerprintEngine:
        """Start a build with a fresh mapping seeded from the ``assetMap`` option."""

        state = FingerprintState.seeded(self.options.asset_map, self.options.prepend)
        self.engine = FingerprintEngine(state, self.hasher, self.matcher, input_dir=self.input_dir)
        return self.engine

    def finalize(self, output_dir: str | Path) -> dict[str, Path]:
        """Write the enabled end-of-build documents. Call after every file is decided."""

        written: dict[str, Path] = {}
        if self.options.generate_asset_map:
            written["asset_map"] = write_asset_map(self.state, output_dir, self.options, self.hasher)
        if self.options.generate_rails_manifest:
            written["rails_manifest"] = write_rails_manifest(
                self.state, output_dir, self.options, self.hasher, self.matcher
            )
        return written

    def build(self, host: HostPipeline) -> dict[str, Path]:
        engine = self.begin_build()
        output_dir = host.run(engine)
        logger.debug("host processed %d file(s) into %s", len(engine.state.asset_map), output_dir)
        return self.finalize(output_dir)
