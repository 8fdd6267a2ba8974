from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-window",
        action="store_true",
        default=False,
        help="run tests that open a real raylib window (needs a display)",
    )


def pytest_configure(config: pytest.Config) -> None:
    # Ensure the local `src/` tree wins over any other editable install that may exist
    # (e.g. a different git worktree pointing at the same project).
    src_dir = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_dir)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)
    config.addinivalue_line("markers", "window: tests that open a real raylib window (opt-in)")


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-window"):
        return
    skip_window = pytest.mark.skip(reason="use --run-window to run tests that open a raylib window")
    for item in items:
        if "window" in item.keywords:
            item.add_marker(skip_window)
