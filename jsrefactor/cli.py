"""Command line entry point for the refactoring pipeline."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import pipeline, utils
from .exceptions import PipelineExecutionError, RefactorError
from .logging_config import close_debug_logger, configure_debug_file_logger, setup_logging
from .profile import TransformProfile, load_profile

LOG = logging.getLogger(__name__)


def _split_list(values: Optional[Sequence[str]]) -> List[str]:
    if not values:
        return []
    parts: List[str] = []
    for value in values:
        parts.extend(part.strip() for part in value.split(",") if part.strip())
    return parts


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsrefactor",
        description="Apply semantics-preserving refactorings to a JavaScript file",
    )
    parser.add_argument("input", help="JavaScript source file")
    parser.add_argument("-o", "--out", "--output", dest="output", help="output file path (default: stdout)")
    parser.add_argument(
        "--pass",
        dest="passes",
        action="append",
        metavar="NAME",
        help="run only this pass (repeatable, comma separated lists accepted)",
    )
    parser.add_argument(
        "--skip",
        action="append",
        metavar="NAME",
        help="skip this pass (repeatable, comma separated lists accepted)",
    )
    parser.add_argument("--seed", type=int, help="seed for generated identifier names")
    parser.add_argument("--unshorten", metavar="SELECTOR", help="alias declarators to inline")
    parser.add_argument("--debug-selector", metavar="SELECTOR", help="functions to prefix with debugger;")
    parser.add_argument("--profile", metavar="PATH", help="JSON transform profile")
    parser.add_argument("--report", metavar="PATH", help="write a JSON run report to PATH")
    parser.add_argument("--timings", action="store_true", help="print pass timings to stderr")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--log-file", metavar="PATH", help="write a debug trace to PATH")
    return parser


def _resolve_profile(parser: argparse.ArgumentParser, args: argparse.Namespace) -> TransformProfile:
    if args.profile:
        try:
            profile = load_profile(args.profile)
        except (OSError, ValueError) as exc:
            parser.error(f"cannot load profile {args.profile}: {exc}")
    else:
        profile = TransformProfile()

    overrides = {}
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.unshorten:
        overrides["unshorten_selector"] = args.unshorten
    if args.debug_selector:
        overrides["debug_selector"] = args.debug_selector
    if args.output:
        overrides["output_path"] = args.output
    if not overrides:
        return profile
    merged = profile.to_dict()
    merged.update(overrides)
    try:
        profile = TransformProfile.from_dict(merged)
    except ValueError as exc:
        parser.error(str(exc))
    return profile


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    trace_logger = None
    if args.log_file:
        trace_logger = configure_debug_file_logger("jsrefactor", Path(args.log_file))
        trace_logger.propagate = True

    try:
        return _run(parser, args)
    finally:
        if trace_logger is not None:
            close_debug_logger(trace_logger)


def _run(parser: argparse.ArgumentParser, args: argparse.Namespace) -> int:
    profile = _resolve_profile(parser, args)

    known = set(pipeline.PIPELINE.names)
    only = _split_list(args.passes) or list(profile.passes or [])
    skip = list(profile.skip) + _split_list(args.skip)
    unknown = sorted(name for name in only + skip if name not in known)
    if unknown:
        parser.error(f"unknown pass(es): {', '.join(unknown)}; choose from {', '.join(pipeline.PIPELINE.names)}")
    if only and "render" not in only:
        only.append("render")

    source_path = Path(args.input)
    source = utils.safe_read_file(str(source_path))
    if source is None:
        print(f"error: cannot read {source_path}", file=sys.stderr)
        return 1

    ctx = pipeline.Context(input_path=source_path, raw_input=source, options=profile.to_options())
    try:
        timings = pipeline.PIPELINE.run_passes(ctx, skip=skip, only=only or None)
    except PipelineExecutionError as err:
        cause = err.cause
        if isinstance(cause, RefactorError):
            print(f"error: {cause}", file=sys.stderr)
        else:
            print(f"error: {err}", file=sys.stderr)
        _write_report(ctx, args.report)
        return 1

    if args.timings:
        print(utils.format_pass_summary(timings), file=sys.stderr)
    _write_report(ctx, args.report)

    if "output_path" not in ctx.options:
        sys.stdout.write(ctx.output)
    elif ctx.pass_metadata.get("render", {}).get("written") is False:
        print(f"error: cannot write {ctx.options['output_path']}", file=sys.stderr)
        return 1
    return 0


def _write_report(ctx: pipeline.Context, path: Optional[str]) -> None:
    if not path:
        return
    payload = json.dumps(ctx.report.to_json(), indent=2, sort_keys=True) + "\n"
    if not utils.safe_write_file(path, payload):
        LOG.warning("could not write report to %s", path)


if __name__ == "__main__":  # pragma: no cover - CLI wrapper
    raise SystemExit(main())
