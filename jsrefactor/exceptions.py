"""Custom exception hierarchy for the refactoring engine."""

from __future__ import annotations

from typing import List, Tuple


class RefactorError(Exception):
    """Base class for all refactoring related errors."""


class ParseError(RefactorError):
    """Raised when the source text is not syntactically valid JavaScript."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        location = f" at {line}:{column}" if line is not None else ""
        super().__init__(f"{message}{location}")
        self.line = line
        self.column = column


class UnsupportedSyntaxError(ParseError):
    """Raised for valid syntax outside the supported script subset."""


class SelectorError(RefactorError):
    """Raised when a node selector cannot be parsed."""


class InconsistentStateError(RefactorError):
    """Raised when scope, parent or lookup data contradict the tree."""


class PipelineExecutionError(RefactorError):
    """Raised when a pipeline pass fails; records where and after how long."""

    def __init__(
        self,
        pass_name: str,
        timings: List[Tuple[str, float]],
        duration: float,
        cause: BaseException,
    ) -> None:
        super().__init__(f"pass {pass_name!r} failed: {cause}")
        self.pass_name = pass_name
        self.timings = timings
        self.duration = duration
        self.cause = cause


__all__ = [
    "RefactorError",
    "ParseError",
    "UnsupportedSyntaxError",
    "SelectorError",
    "InconsistentStateError",
    "PipelineExecutionError",
]
