from __future__ import annotations

__all__ = [
    "app",
    "geom",
    "keys",
]
