"""Persist and load transform profiles.

A transform profile is a small JSON document recording which passes to run
and with which parameters (identifier seed, node selectors for the alias
inliner and the debug injector, output path).  Keys this module does not
recognise are kept under ``metadata`` so that profiles written by newer
tools survive a load/save round trip.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping

from .exceptions import SelectorError
from .query import compile_selector

LOGGER = logging.getLogger(__name__)

__all__ = [
    "TransformProfile",
    "load_profile",
    "save_profile",
]

_DEFAULT_VERSION = "1.0"


def _coerce_names(value: Any, label: str) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        value = [part for part in value.split(",")]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{label} must be a list of pass names")
    names: list[str] = []
    for entry in value:
        if not isinstance(entry, str):
            raise ValueError(f"invalid pass name in {label}: {entry!r}")
        name = entry.strip()
        if name:
            names.append(name)
    return names


def _coerce_seed(value: Any) -> int:
    if value is None:
        return 1
    if isinstance(value, bool):
        raise ValueError("seed must be an integer")
    try:
        seed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"seed must be an integer, got {value!r}") from exc
    if seed < 0:
        raise ValueError("seed must not be negative")
    return seed


def _coerce_selector(value: Any, label: str) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"{label} must be a selector string")
    try:
        compile_selector(value)
    except SelectorError as exc:
        raise ValueError(f"{label} is not a valid selector: {exc}") from exc
    return value


def _coerce_metadata(raw: Any, *, extras: Mapping[str, Any]) -> Dict[str, Any]:
    metadata: Dict[str, Any]
    if raw is None:
        metadata = {}
    elif isinstance(raw, Mapping):
        metadata = dict(raw)
    else:
        raise ValueError("metadata must be a mapping if provided")
    for key, value in extras.items():
        metadata.setdefault(key, value)
    return metadata


def _migrate_profile_data(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalise older spellings of profile fields."""

    passes = raw.get("passes")
    if passes is None:
        passes = raw.get("enabled_passes")

    unshorten_selector = raw.get("unshorten_selector")
    debug_selector = raw.get("debug_selector")
    selectors = raw.get("selectors")
    if isinstance(selectors, Mapping):
        if unshorten_selector is None:
            unshorten_selector = selectors.get("unshorten")
        if debug_selector is None:
            debug_selector = selectors.get("debug")

    output_path = raw.get("output_path")
    if output_path is None:
        output_path = raw.get("output")

    recognised = {
        "version",
        "passes",
        "enabled_passes",
        "skip",
        "seed",
        "unshorten_selector",
        "debug_selector",
        "selectors",
        "output_path",
        "output",
        "metadata",
    }
    extras = {k: raw[k] for k in raw.keys() - recognised}

    return {
        "version": str(raw.get("version", _DEFAULT_VERSION)),
        "passes": passes,
        "skip": raw.get("skip"),
        "seed": raw.get("seed"),
        "unshorten_selector": unshorten_selector,
        "debug_selector": debug_selector,
        "output_path": output_path,
        "metadata": _coerce_metadata(raw.get("metadata"), extras=extras),
    }


@dataclass(slots=True)
class TransformProfile:
    """In-memory representation of a transform profile."""

    version: str = _DEFAULT_VERSION
    passes: list[str] | None = None
    skip: list[str] = field(default_factory=list)
    seed: int = 1
    unshorten_selector: str | None = None
    debug_selector: str | None = None
    output_path: str | None = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"version": self.version, "seed": self.seed}
        if self.passes is not None:
            data["passes"] = list(self.passes)
        if self.skip:
            data["skip"] = list(self.skip)
        if self.unshorten_selector:
            data["unshorten_selector"] = self.unshorten_selector
        if self.debug_selector:
            data["debug_selector"] = self.debug_selector
        if self.output_path:
            data["output_path"] = self.output_path
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    def to_options(self) -> Dict[str, Any]:
        """Return the pipeline options described by this profile."""

        options: Dict[str, Any] = {"seed": self.seed}
        if self.unshorten_selector:
            options["unshorten_selector"] = self.unshorten_selector
        if self.debug_selector:
            options["debug_selector"] = self.debug_selector
        if self.output_path:
            options["output_path"] = self.output_path
        return options

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "TransformProfile":
        migrated = _migrate_profile_data(raw)
        output_path = migrated.get("output_path")
        if output_path is not None and not isinstance(output_path, str):
            raise ValueError("output_path must be a string")
        return cls(
            version=migrated["version"],
            passes=_coerce_names(migrated.get("passes"), "passes"),
            skip=_coerce_names(migrated.get("skip"), "skip") or [],
            seed=_coerce_seed(migrated.get("seed")),
            unshorten_selector=_coerce_selector(migrated.get("unshorten_selector"), "unshorten_selector"),
            debug_selector=_coerce_selector(migrated.get("debug_selector"), "debug_selector"),
            output_path=output_path or None,
            metadata=migrated["metadata"],
        )


def save_profile(profile: TransformProfile | Mapping[str, Any], path: Path | str) -> Path:
    """Serialise ``profile`` to ``path``."""

    if isinstance(profile, TransformProfile):
        payload = profile.to_dict()
    elif isinstance(profile, Mapping):
        payload = TransformProfile.from_dict(profile).to_dict()
    else:
        raise TypeError("profile must be a TransformProfile or mapping")

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    LOGGER.info("Transform profile saved to %s", destination)
    return destination


def load_profile(path: Path | str) -> TransformProfile:
    """Load and validate a transform profile from ``path``."""

    source = Path(path)
    data = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValueError("profile JSON must contain an object at the top level")
    return TransformProfile.from_dict(data)
