"""Apply planned variable renames to a session's tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence, TYPE_CHECKING

from .. import js_ast as js
from ..scope import Variable

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..session import RefactorSession


LOG = logging.getLogger(__name__)


@dataclass
class PlannedRename:
    variable: Variable
    new_name: str
    scope_type: str = ""
    original: str = ""

    def __post_init__(self) -> None:
        if not self.original:
            self.original = self.variable.name

    def as_dict(self) -> Dict[str, object]:
        return {
            "original": self.original,
            "renamed": self.new_name,
            "scope": self.scope_type,
            "occurrences": len(self.variable.declarations) + len(self.variable.references),
        }


def _expand_shorthand(session: "RefactorSession", node: js.Node, original: str) -> None:
    """Keep the property key of ``{x}`` style shorthands when ``x`` is renamed."""

    link = session.parent_map.get(id(node))
    if link is None:
        return
    owner = link.parent
    key = js.StaticPropertyName(value=original)
    if isinstance(owner, js.ShorthandProperty):
        expanded: js.Node = js.DataProperty(name=key, expression=node)
    elif isinstance(owner, js.BindingPropertyIdentifier):
        binding: js.Node = node
        if owner.init is not None:
            binding = js.BindingWithDefault(binding=node, init=owner.init)
        expanded = js.BindingPropertyProperty(name=key, binding=binding)
    elif isinstance(owner, js.AssignmentTargetPropertyIdentifier):
        target: js.Node = node
        if owner.init is not None:
            target = js.AssignmentTargetWithDefault(binding=node, init=owner.init)
        expanded = js.AssignmentTargetPropertyProperty(name=key, binding=target)
    else:
        return
    holder = session.parent_of(owner)
    getattr(holder.parent, holder.field)[holder.index] = expanded


def apply_renames(session: "RefactorSession", plan: Sequence[PlannedRename]) -> int:
    """Write every planned name onto all declarations and references.

    Returns the number of variables whose name changed.  Session caches are
    invalidated afterwards.
    """

    renamed = 0
    for item in plan:
        original = item.original
        if item.new_name == original:
            continue
        for node in item.variable.occurrences():
            _expand_shorthand(session, node, original)
            node.name = item.new_name
        LOG.debug("renamed %r -> %r", original, item.new_name)
        item.variable.name = item.new_name
        renamed += 1
    if renamed:
        session.invalidate()
    return renamed


def mapping(plan: Sequence[PlannedRename]) -> List[Dict[str, object]]:
    return [item.as_dict() for item in plan]


__all__ = ["PlannedRename", "apply_renames", "mapping"]
