"""Scope-aware renaming of local bindings to generated names.

Every variable declared below the Script scope receives a name drawn from one
:class:`~jsrefactor.id_generator.MemorableIdGenerator` shared by the whole
pass: ``$arg<position>_<id>`` for parameters and ``$$<id>`` otherwise.  Both
prefixes start with ``$``, a character the walk never emits for anything
else, so generated names cannot collide with each other.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, TYPE_CHECKING

from .. import js_ast as js
from ..exceptions import InconsistentStateError
from ..id_generator import BaseIdGenerator, MemorableIdGenerator
from ..scope import DeclarationType, Scope, ScopeType
from .renaming import PlannedRename, apply_renames, mapping

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..pipeline import Context
    from ..session import ParentLink, RefactorSession


LOG = logging.getLogger(__name__)

_SKIPPED_SCOPES = (ScopeType.GLOBAL, ScopeType.SCRIPT)


def parameter_position(binding: js.Node, parent_map: Mapping[int, "ParentLink"]) -> int:
    """Return the index of the top-level parameter containing ``binding``.

    A rest parameter sits after every regular item, so its position is
    ``len(items)``.  A setter's single parameter is position ``0``.
    """

    node = binding
    while True:
        link = parent_map.get(id(node))
        if link is None:
            raise InconsistentStateError(f"{node.type} is missing from the parent map")
        parent = link.parent
        if isinstance(parent, js.FormalParameters):
            if link.field == "rest":
                return len(parent.items)
            return link.index
        if isinstance(parent, js.Setter) and link.field == "param":
            return 0
        if isinstance(parent, js.FUNCTION_LIKE + (js.Script,)):
            raise InconsistentStateError(f"parameter {binding!r} has no enclosing FormalParameters")
        node = parent


def rename_scope(
    scope: Scope,
    id_generator: BaseIdGenerator,
    parent_map: Mapping[int, "ParentLink"],
    plan: List[PlannedRename],
) -> None:
    """Plan new names for ``scope`` and, depth first, for its descendants."""

    if scope.type not in _SKIPPED_SCOPES:
        for variable in scope.variables.values():
            if not variable.declarations:
                continue
            next_id = id_generator.step().value
            parameter = next(
                (d for d in variable.declarations if d.type is DeclarationType.PARAMETER),
                None,
            )
            if parameter is not None:
                position = parameter_position(parameter.node, parent_map)
                new_name = f"$arg{position}_{next_id}"
            else:
                new_name = f"$${next_id}"
            plan.append(PlannedRename(variable, new_name, scope_type=scope.type.value))
    for child in scope.children:
        rename_scope(child, id_generator, parent_map, plan)


def normalize_identifiers(session: "RefactorSession", seed: int = 1) -> List[PlannedRename]:
    """Rename every local binding of ``session``'s tree; returns the applied plan."""

    table = session.lookup_table
    parent_map = session.parent_map
    plan: List[PlannedRename] = []
    rename_scope(table.scope, MemorableIdGenerator(seed), parent_map, plan)
    renamed = apply_renames(session, plan)
    session.conditional_cleanup()
    LOG.debug("normalize_identifiers renamed %d variable(s) with seed %d", renamed, seed)
    return plan


def run(ctx: "Context") -> Dict[str, object]:
    session = ctx.require_session()
    seed = int(ctx.options.get("seed", 1))
    plan = normalize_identifiers(session, seed=seed)
    return {
        "seed": seed,
        "renamed": len(plan),
        "mapping": mapping(plan),
    }


__all__ = ["normalize_identifiers", "parameter_position", "rename_scope", "run"]
