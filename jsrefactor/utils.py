"""File and metadata helpers shared by the pipeline and the CLI."""

from __future__ import annotations

import logging
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, cast

LOG = logging.getLogger(__name__)


def safe_write_file(filepath: str, content: str, encoding: str = "utf-8") -> bool:
    """Write ``content`` to ``filepath``, creating parent directories."""

    path = Path(filepath)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding=encoding) as handle:
            handle.write(content)
    except OSError as exc:
        LOG.error("Failed to write file '%s': %s", filepath, exc)
        return False
    LOG.debug("Successfully wrote to file '%s'", filepath)
    return True


def safe_read_file(filepath: str, encoding: str = "utf-8") -> Optional[str]:
    """Return the text of ``filepath`` or ``None`` when it cannot be read."""

    path = Path(filepath)
    if not path.is_file():
        LOG.warning("File does not exist or is not a file: '%s'", filepath)
        return None
    try:
        with open(path, "r", encoding=encoding) as handle:
            content = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        LOG.error("Failed to read file '%s': %s", filepath, exc)
        return None
    LOG.debug("Successfully read file '%s' (%d chars)", filepath, len(content))
    return content


def serialise_metadata(value: Any) -> Any:
    """Return a JSON-serialisable representation of ``value``."""

    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, (list, tuple, set)):
        return [serialise_metadata(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): serialise_metadata(item) for key, item in value.items()}
    if is_dataclass(value) and not isinstance(value, type):
        data = asdict(cast(Any, value))
        return {str(key): serialise_metadata(item) for key, item in data.items()}
    return repr(value)


def summarise_metadata(metadata: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a serialisable summary of ``metadata`` suitable for JSON dumps."""

    return {str(key): serialise_metadata(value) for key, value in metadata.items()}


def format_pass_summary(results: Sequence[Tuple[str, float]]) -> str:
    """Format ``results`` as a small table for console output."""

    if not results:
        return ""
    name_width = max(len(name) for name, _ in results)
    lines = [f"{'Pass'.ljust(name_width)}  Duration"]
    for name, duration in results:
        lines.append(f"{name.ljust(name_width)}  {duration:.3f}s")
    return "\n".join(lines)


__all__ = [
    "format_pass_summary",
    "safe_read_file",
    "safe_write_file",
    "serialise_metadata",
    "summarise_metadata",
]
