from __future__ import annotations

import os
from pathlib import Path

DEFAULT_BASE_DIR = Path("artifacts") / "runtime"


def default_runtime_dir() -> Path:
    override = os.environ.get("REWIND_BASE_DIR")
    if override:
        return Path(override).expanduser()
    return DEFAULT_BASE_DIR
