from pathlib import Path

import pytest

from jsrefactor import pipeline
from jsrefactor.exceptions import ParseError


def _context(tmp_path: Path, source: str, **options) -> pipeline.Context:
    path = tmp_path / "input.js"
    path.write_text(source, encoding="utf-8")
    return pipeline.Context(input_path=path, options=dict(options))


def test_default_pass_order() -> None:
    assert pipeline.PIPELINE.names == [
        "expand_boolean",
        "compress_conditionals",
        "compress_commas",
        "computed_to_static",
        "unshorten",
        "normalize_identifiers",
        "debug",
        "render",
    ]


def test_full_pipeline_renders_refactored_source(tmp_path: Path) -> None:
    ctx = _context(
        tmp_path,
        'let r = require; var x = !0 ? r("a")["b"] : (1, 2);',
        unshorten_selector='VariableDeclarator[init.name="require"]',
    )
    timings = pipeline.PIPELINE.run_passes(ctx)

    assert [name for name, _ in timings] == pipeline.PIPELINE.names
    assert ctx.output == 'var x = require("a").b;\n'
    assert ctx.report.aliases_unshortened == 1
    assert ctx.report.folded_nodes["expand_boolean"] == 1
    assert ctx.report.folded_nodes["compress_conditionals"] == 1
    assert ctx.report.output_length == len(ctx.output)
    assert ctx.pass_metadata["debug"] == {"skipped": True, "reason": "no selector"}


def test_skip_and_only(tmp_path: Path) -> None:
    ctx = _context(tmp_path, "x = !0;")
    timings = pipeline.PIPELINE.run_passes(ctx, skip=["expand_boolean"])
    assert "expand_boolean" not in [name for name, _ in timings]
    assert ctx.output == "x = !0;\n"

    ctx = _context(tmp_path, "x = !0;")
    timings = pipeline.PIPELINE.run_passes(ctx, only=["expand_boolean", "render"])
    assert [name for name, _ in timings] == ["expand_boolean", "render"]
    assert ctx.output == "x = true;\n"


def test_normalize_and_debug_options(tmp_path: Path) -> None:
    ctx = _context(tmp_path, "function f(a) { return a; }", seed=7, debug_selector="FunctionDeclaration")
    pipeline.PIPELINE.run_passes(ctx)
    assert ctx.report.variables_renamed == 1
    assert ctx.report.seed == 7
    assert ctx.report.debug_insertions == 1
    assert "debugger;" in ctx.output
    assert "$arg0_" in ctx.output
    mapping = ctx.pass_metadata["normalize_identifiers"]["mapping"]
    assert mapping[0]["original"] == "a"


def test_render_writes_output_path(tmp_path: Path) -> None:
    destination = tmp_path / "out" / "result.js"
    ctx = _context(tmp_path, "a['b'];", output_path=str(destination))
    pipeline.PIPELINE.run_passes(ctx)
    assert destination.read_text(encoding="utf-8") == "a.b;\n"
    assert ctx.pass_metadata["render"]["written"] is True


def test_pipeline_execution_error_contains_pass_name(tmp_path: Path) -> None:
    ctx = _context(tmp_path, "x;")

    registry = pipeline.PassRegistry()

    def boom(ctx):
        raise RuntimeError("boom")

    registry.register_pass("test", boom, 10)

    with pytest.raises(pipeline.PipelineExecutionError) as excinfo:
        registry.run_passes(ctx)

    err = excinfo.value
    assert err.pass_name == "test"
    assert err.timings == []
    assert err.duration >= 0.0
    assert isinstance(err.cause, RuntimeError)
    assert ctx.report.errors == ["test: boom"]


def test_parse_errors_surface_through_the_first_pass(tmp_path: Path) -> None:
    ctx = _context(tmp_path, "let = ;")
    with pytest.raises(pipeline.PipelineExecutionError) as excinfo:
        pipeline.PIPELINE.run_passes(ctx)
    assert excinfo.value.pass_name == "expand_boolean"
    assert isinstance(excinfo.value.cause, ParseError)


def test_context_reads_input_lazily(tmp_path: Path) -> None:
    ctx = _context(tmp_path, "a;")
    assert ctx.raw_input == ""
    session = ctx.require_session()
    assert ctx.raw_input == "a;"
    assert ctx.require_session() is session
    assert ctx.report.input_length == 2
