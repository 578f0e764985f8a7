"""Scope-aware refactoring passes for JavaScript syntax trees."""

from __future__ import annotations

from .exceptions import (
    InconsistentStateError,
    ParseError,
    PipelineExecutionError,
    RefactorError,
    SelectorError,
    UnsupportedSyntaxError,
)
from .id_generator import BaseIdGenerator, MemorableIdGenerator
from .refactor import RefactorQuery, refactor
from .session import RefactorSession

__version__ = "0.1.0"

__all__ = [
    "BaseIdGenerator",
    "InconsistentStateError",
    "MemorableIdGenerator",
    "ParseError",
    "PipelineExecutionError",
    "RefactorError",
    "RefactorQuery",
    "RefactorSession",
    "SelectorError",
    "UnsupportedSyntaxError",
    "refactor",
]
