from __future__ import annotations

import json
from pathlib import Path

from asset_fingerprint.engine import FingerprintEngine

REPO_ROOT = Path(__file__).resolve().parents[1]

APP_JS = b"console.log(1)"


def load_schema(name: str) -> dict:
    return json.loads((REPO_ROOT / "schemas" / name).read_text(encoding="utf-8"))


def write_tree(root: Path, files: dict[str, bytes]) -> Path:
    for rel, data in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


class CopyTreeHost:
    """Minimal host pipeline used by tests.

    Files whose extension is listed go through the engine, everything else is
    copied under its own name. ``output_dir`` is reused across builds the way a
    deploy directory is.
    """

    def __init__(self, input_dir: Path, output_dir: Path, extensions: tuple[str, ...] = ()) -> None:
        self.input_dir = input_dir
        self.output_dir = output_dir
        self.extensions = extensions

    def _routed(self, rel: str) -> bool:
        if not self.extensions:
            return True
        return rel.rsplit(".", 1)[-1] in self.extensions

    def run(self, engine: FingerprintEngine) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for src in sorted(self.input_dir.rglob("*")):
            if not src.is_file():
                continue
            rel = src.relative_to(self.input_dir).as_posix()
            if self._routed(rel):
                data = engine.decide(src.read_bytes(), rel, src)
                dest = self.output_dir / engine.dest_path(rel)
            else:
                data = src.read_bytes()
                dest = self.output_dir / rel
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(data)
        return self.output_dir
