from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def dumps_stable(data: Any, *, indent: int = 2) -> bytes:
    """Serialize JSON with sorted keys so identical input gives identical bytes.

    Non-ASCII text is kept as-is and encoded as UTF-8.
    """

    return json.dumps(data, indent=indent, sort_keys=True, ensure_ascii=False).encode("utf-8")


def read_json(path: str | Path) -> Any:
    p = Path(path)
    return json.loads(p.read_text(encoding="utf-8"))


def safe_write(path: str | Path, contents: bytes) -> Path:
    """Write bytes, creating the immediate parent directory when it is missing.

    Only the leaf directory is created; a missing grandparent is an error.
    """

    p = Path(path)
    if not p.parent.exists():
        p.parent.mkdir()
    p.write_bytes(contents)
    return p
