"""Final rendering pass producing the refactored JavaScript source."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, TYPE_CHECKING

from .. import utils

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..pipeline import Context


LOG = logging.getLogger(__name__)


def _output_path(ctx: "Context") -> Optional[Path]:
    override = ctx.options.get("output_path") if ctx.options else None
    return Path(override) if override else None


def run(ctx: "Context") -> Dict[str, object]:
    session = ctx.require_session()
    indent = str(ctx.options.get("indent", "  "))
    rendered = session.print(indent=indent)
    if rendered:
        rendered += "\n"
    ctx.output = rendered

    metadata: Dict[str, object] = {"length": len(rendered), "encoding": "utf-8"}
    destination = _output_path(ctx)
    if destination is None:
        return metadata

    success = utils.safe_write_file(str(destination), rendered, encoding="utf-8")
    metadata["output_path"] = str(destination)
    metadata["written"] = success
    if not success:
        LOG.warning("failed writing render output to %s", destination)
    return metadata


__all__ = ["run"]
