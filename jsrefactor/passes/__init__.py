"""Pass modules orchestrated by :mod:`jsrefactor.pipeline`."""

from __future__ import annotations

from . import (
    debug_inject,
    folding,
    normalize_identifiers,
    render,
    renaming,
    rewrite,
    unshorten,
)

__all__ = [
    "debug_inject",
    "folding",
    "normalize_identifiers",
    "render",
    "renaming",
    "rewrite",
    "unshorten",
]
