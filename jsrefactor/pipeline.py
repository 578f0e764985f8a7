"""Pass-based orchestration for the refactoring pipeline."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from . import utils
from .exceptions import PipelineExecutionError
from .report import RefactorReport
from .session import RefactorSession
from .passes.debug_inject import run as debug_run
from .passes.folding import (
    run_compress_commas,
    run_compress_conditionals,
    run_computed_to_static,
    run_expand_boolean,
)
from .passes.normalize_identifiers import run as normalize_identifiers_run
from .passes.render import run as render_run
from .passes.unshorten import run as unshorten_run

LOG = logging.getLogger(__name__)

PassFn = Callable[["Context"], None]


def _default_report() -> RefactorReport:
    return RefactorReport()


@dataclass
class Context:
    """Shared state threaded through individual pipeline passes."""

    input_path: Path
    raw_input: str = ""
    session: RefactorSession | None = None
    options: Dict[str, Any] = field(default_factory=dict)
    pass_metadata: Dict[str, Any] = field(default_factory=dict)
    output: str = ""
    report: RefactorReport = field(default_factory=_default_report)

    def __post_init__(self) -> None:
        self.input_path = Path(self.input_path)
        if not self.report.input_path:
            self.report.input_path = str(self.input_path)

    # ------------------------------------------------------------------
    def ensure_raw_input(self) -> None:
        if self.raw_input:
            return
        data = utils.safe_read_file(str(self.input_path))
        self.raw_input = data or ""

    def require_session(self) -> RefactorSession:
        """Return the session, parsing the raw input on first use."""

        if self.session is None:
            self.ensure_raw_input()
            self.report.input_length = len(self.raw_input)
            max_rounds = int(self.options.get("max_rounds", 1000))
            self.session = RefactorSession(self.raw_input, max_rounds=max_rounds)
        return self.session

    def record_metadata(self, name: str, metadata: Dict[str, Any]) -> None:
        self.pass_metadata[name] = utils.summarise_metadata(metadata)


class PassRegistry:
    def __init__(self) -> None:
        self._passes: Dict[str, Tuple[int, PassFn]] = {}

    def register_pass(self, name: str, fn: PassFn, order: int) -> None:
        self._passes[name] = (order, fn)

    @property
    def names(self) -> List[str]:
        return [name for _, name in sorted((order, name) for name, (order, _) in self._passes.items())]

    def run_passes(
        self,
        ctx: Context,
        skip: Optional[Iterable[str]] = None,
        only: Optional[Iterable[str]] = None,
    ) -> List[Tuple[str, float]]:
        selected: List[Tuple[int, str, PassFn]] = []
        skip_set = {name.strip() for name in (skip or []) if name}
        only_set = {name.strip() for name in (only or []) if name}

        for name, (order, fn) in self._passes.items():
            if skip_set and name in skip_set:
                continue
            if only_set and name not in only_set:
                continue
            selected.append((order, name, fn))
        selected.sort()

        timings: List[Tuple[str, float]] = []
        for _, name, fn in selected:
            start = time.perf_counter()
            try:
                fn(ctx)
            except Exception as exc:
                duration = time.perf_counter() - start
                LOG.error("pass %s failed after %.3fs: %s", name, duration, exc)
                ctx.report.errors.append(f"{name}: {exc}")
                raise PipelineExecutionError(name, list(timings), duration, exc) from exc
            duration = time.perf_counter() - start
            timings.append((name, duration))
            ctx.report.passes_run.append(name)
            metadata = ctx.pass_metadata.get(name)
            summary_parts: List[str] = []
            if isinstance(metadata, dict):
                for key in ("folded", "unshortened", "renamed", "injected", "length"):
                    value = metadata.get(key)
                    if isinstance(value, int) and not isinstance(value, bool):
                        summary_parts.append(f"{key}={value}")
                if metadata.get("skipped"):
                    summary_parts.append("skipped=true")
            suffix = f" ({', '.join(summary_parts)})" if summary_parts else ""
            LOG.info("pass %s completed in %.3fs%s", name, duration, suffix)
        return timings


PIPELINE = PassRegistry()


# ---------------------------------------------------------------------------
# Pass implementations


def _record_folds(ctx: Context, name: str, metadata: Dict[str, Any]) -> None:
    ctx.record_metadata(name, metadata)
    folded = metadata.get("folded")
    if isinstance(folded, int):
        ctx.report.folded_nodes[name] = folded


def _pass_expand_boolean(ctx: Context) -> None:
    _record_folds(ctx, "expand_boolean", run_expand_boolean(ctx))


def _pass_compress_conditionals(ctx: Context) -> None:
    _record_folds(ctx, "compress_conditionals", run_compress_conditionals(ctx))


def _pass_compress_commas(ctx: Context) -> None:
    _record_folds(ctx, "compress_commas", run_compress_commas(ctx))


def _pass_computed_to_static(ctx: Context) -> None:
    _record_folds(ctx, "computed_to_static", run_computed_to_static(ctx))


def _pass_unshorten(ctx: Context) -> None:
    metadata = unshorten_run(ctx)
    ctx.record_metadata("unshorten", metadata)
    count = metadata.get("unshortened")
    if isinstance(count, int):
        ctx.report.aliases_unshortened += count


def _pass_normalize_identifiers(ctx: Context) -> None:
    metadata = normalize_identifiers_run(ctx)
    ctx.record_metadata("normalize_identifiers", metadata)
    renamed = metadata.get("renamed")
    if isinstance(renamed, int):
        ctx.report.variables_renamed += renamed
    seed = metadata.get("seed")
    if isinstance(seed, int):
        ctx.report.seed = seed


def _pass_debug(ctx: Context) -> None:
    metadata = debug_run(ctx)
    ctx.record_metadata("debug", metadata)
    injected = metadata.get("injected")
    if isinstance(injected, int):
        ctx.report.debug_insertions += injected


def _pass_render(ctx: Context) -> None:
    metadata = render_run(ctx)
    ctx.record_metadata("render", metadata)
    length = metadata.get("length")
    if isinstance(length, int) and length >= 0:
        ctx.report.output_length = length
    if metadata.get("written") is False:
        ctx.report.warnings.append(f"could not write output to {metadata.get('output_path')}")


PIPELINE.register_pass("expand_boolean", _pass_expand_boolean, 10)
PIPELINE.register_pass("compress_conditionals", _pass_compress_conditionals, 20)
PIPELINE.register_pass("compress_commas", _pass_compress_commas, 30)
PIPELINE.register_pass("computed_to_static", _pass_computed_to_static, 40)
PIPELINE.register_pass("unshorten", _pass_unshorten, 50)
PIPELINE.register_pass("normalize_identifiers", _pass_normalize_identifiers, 60)
PIPELINE.register_pass("debug", _pass_debug, 70)
PIPELINE.register_pass("render", _pass_render, 90)


__all__ = ["Context", "PassRegistry", "PIPELINE"]
