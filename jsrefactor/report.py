"""Structured refactoring report helpers."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List


@dataclass
class RefactorReport:
    """Summarises a single refactoring run."""

    input_path: str | None = None
    input_length: int = 0
    output_length: int = 0
    folded_nodes: Dict[str, int] = field(default_factory=dict)
    variables_renamed: int = 0
    aliases_unshortened: int = 0
    debug_insertions: int = 0
    seed: int | None = None
    passes_run: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def total_folded(self) -> int:
        return sum(self.folded_nodes.values())

    def to_text(self) -> str:
        """Format the report as a human-readable summary."""

        lines: List[str] = []
        if self.input_path:
            lines.append(f"Input: {self.input_path}")
        lines.append(f"Input length: {self.input_length} chars")
        if self.passes_run:
            lines.append("Passes: " + ", ".join(self.passes_run))
        lines.append(f"Folded nodes: {self.total_folded}")
        for name, count in sorted(self.folded_nodes.items()):
            lines.append(f"  {name}: {count}")
        lines.append(f"Aliases unshortened: {self.aliases_unshortened}")
        seed = f" (seed {self.seed})" if self.seed is not None else ""
        lines.append(f"Variables renamed: {self.variables_renamed}{seed}")
        lines.append(f"Debugger statements inserted: {self.debug_insertions}")
        lines.append(f"Final output length: {self.output_length} chars")
        if self.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)
        if self.errors:
            lines.append("Errors:")
            lines.extend(f"  - {error}" for error in self.errors)
        return "\n".join(lines)

    def to_json(self) -> Dict[str, object]:
        """Return a JSON-serialisable representation."""

        data = asdict(self)
        data["total_folded"] = self.total_folded
        return data


__all__ = ["RefactorReport"]
