"""Filesystem helpers for bulkticket's ``.bt/`` directory.

Example:
    from pathlib import Path
    from bulkticket.state import write_json

    write_json(Path("tickets.json"), [{"title": "Ship checkout"}])
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any


def state_root(base: Path) -> Path:
    return base / ".bt"


def config_path(base: Path) -> Path:
    return state_root(base) / "config.json"


def write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Atomically write *data* as JSON to *path*.

    Writes to a pid-suffixed temporary file in the same directory, then
    renames into place so readers never see a partial write.
    """
    serialized = json.dumps(data, indent=indent or None)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(f".{os.getpid()}.tmp")
    tmp.write_text(f"{serialized}\n", encoding="utf-8")
    os.replace(tmp, path)
