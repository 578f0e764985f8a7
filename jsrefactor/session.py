"""Buffered mutation session over a parsed script."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from . import js_ast as js
from .codegen import to_source
from .exceptions import InconsistentStateError
from .parser import parse_script
from .query import Selector, query
from .scope import LookupTable, analyze

LOG = logging.getLogger(__name__)

Replacement = Union[js.Node, Callable[[js.Node], Optional[js.Node]]]
Targets = Union[str, Selector, js.Node, Iterable[js.Node]]

_STATEMENT_LISTS = {
    js.Script: "statements",
    js.FunctionBody: "statements",
    js.Block: "statements",
    js.SwitchCase: "consequent",
    js.SwitchDefault: "consequent",
}


@dataclass(frozen=True)
class ParentLink:
    """Where a node lives: ``parent.<field>`` or ``parent.<field>[index]``."""

    parent: js.Node
    field: str
    index: Optional[int] = None


def build_parent_map(root: js.Node) -> Dict[int, ParentLink]:
    parents: Dict[int, ParentLink] = {}
    for node in js.walk(root):
        for name, value in js.iter_fields(node):
            if isinstance(value, js.Node):
                parents[id(value)] = ParentLink(node, name)
            elif isinstance(value, list):
                for index, item in enumerate(value):
                    if isinstance(item, js.Node):
                        parents[id(item)] = ParentLink(node, name, index)
    return parents


class RefactorSession:
    """Own a tree and apply queries and mutations to it.

    Replacements commit as soon as every candidate of a call has been
    computed.  Insertions and deletions are queued until :meth:`commit` (or
    :meth:`conditional_cleanup`) so lookups made while planning stay valid.
    """

    def __init__(self, tree: Union[js.Script, str], *, max_rounds: int = 1000) -> None:
        if isinstance(tree, str):
            tree = parse_script(tree)
        if not isinstance(tree, js.Script):
            raise TypeError(f"Unsupported root: {tree!r}")
        self.tree = tree
        self.max_rounds = max_rounds
        self._parent_map: Optional[Dict[int, ParentLink]] = None
        self._lookup_table: Optional[LookupTable] = None
        self._insertions: List[Tuple[js.Node, js.Node, int]] = []
        self._deletions: List[js.Node] = []

    # ------------------------------------------------------------------
    # Derived data

    @property
    def parent_map(self) -> Dict[int, ParentLink]:
        if self._parent_map is None:
            self._parent_map = build_parent_map(self.tree)
        return self._parent_map

    @property
    def lookup_table(self) -> LookupTable:
        if self._lookup_table is None:
            self._lookup_table = analyze(self.tree)
        return self._lookup_table

    def invalidate(self) -> None:
        self._parent_map = None
        self._lookup_table = None

    def parent_of(self, node: js.Node) -> ParentLink:
        link = self.parent_map.get(id(node))
        if link is None:
            raise InconsistentStateError(f"{node.type} has no parent in the current tree")
        return link

    # ------------------------------------------------------------------
    # Queries

    def query(self, selector: Union[str, Selector]) -> List[js.Node]:
        return query(self.tree, selector)

    def _targets(self, targets: Targets) -> List[js.Node]:
        if isinstance(targets, (str, Selector)):
            return self.query(targets)
        if isinstance(targets, js.Node):
            return [targets]
        return list(targets)

    # ------------------------------------------------------------------
    # Replacement

    def _swap(self, old: js.Node, new: js.Node) -> None:
        if old is self.tree:
            if not isinstance(new, js.Script):
                raise TypeError("the program root can only be replaced by a Script")
            self.tree = new
            return
        link = self.parent_of(old)
        if link.index is None:
            setattr(link.parent, link.field, new)
        else:
            getattr(link.parent, link.field)[link.index] = new

    def _replace(self, nodes: List[js.Node], replacement: Replacement) -> List[Tuple[js.Node, js.Node]]:
        planned: List[Tuple[js.Node, js.Node]] = []
        for node in reversed(nodes):
            new = replacement(node) if callable(replacement) else replacement
            if new is None or new is node:
                continue
            planned.append((node, new))

        for old, new in planned:
            self._swap(old, new)
        if planned:
            self.invalidate()
            LOG.debug("replaced %d of %d node(s)", len(planned), len(nodes))
        return planned

    def replace(self, targets: Targets, replacement: Replacement) -> int:
        """Replace every target; callables may return the node itself to keep it.

        All replacements are computed first, deepest targets first, and then
        swapped in as one batch.  Returns the number of nodes replaced.
        """

        return len(self._replace(self._targets(targets), replacement))

    def attached(self, node: js.Node) -> bool:
        return node is self.tree or id(node) in self.parent_map

    def query_within(self, roots: Iterable[js.Node], selector: Union[str, Selector]) -> List[js.Node]:
        """Matches of ``selector`` inside the still attached ``roots``, in document order."""

        inside = set()
        for root in roots:
            if self.attached(root):
                inside.update(id(node) for node in js.walk(root))
        return [node for node in self.query(selector) if id(node) in inside]

    def replace_recursive(
        self,
        selector: Union[str, Selector],
        replacement: Replacement,
        roots: Optional[List[js.Node]] = None,
    ) -> int:
        """Re-run :meth:`replace` over ``selector`` until a round changes nothing.

        With ``roots`` only matches inside those subtrees are rewritten.  A
        root that is itself replaced is swapped for its replacement in place,
        so the list keeps tracking the selection.
        """

        total = 0
        for round_number in range(1, self.max_rounds + 1):
            if roots is None:
                targets = self.query(selector)
            else:
                targets = self.query_within(roots, selector)
            planned = self._replace(targets, replacement)
            if not planned:
                LOG.debug("replace_recursive converged after %d round(s)", round_number)
                return total
            total += len(planned)
            if roots is not None:
                swapped = {id(old): new for old, new in planned}
                roots[:] = [swapped.get(id(root), root) for root in roots]
        raise InconsistentStateError(
            f"replacements for {selector!r} did not converge within {self.max_rounds} rounds"
        )

    # ------------------------------------------------------------------
    # Queued insertions and deletions

    def prepend(self, target: js.Node, node: js.Node) -> None:
        """Queue ``node`` for insertion right before list element ``target``."""

        self._insertions.append((target, node, 0))

    def insert_after(self, target: js.Node, node: js.Node) -> None:
        self._insertions.append((target, node, 1))

    def queue_deletion(self, node: js.Node) -> None:
        self._deletions.append(node)

    @property
    def pending(self) -> int:
        return len(self._insertions) + len(self._deletions)

    def _list_slot(self, node: js.Node) -> Tuple[List[object], int]:
        link = self.parent_of(node)
        if link.index is None:
            raise InconsistentStateError(
                f"{node.type} in {link.parent.type}.{link.field} is not a list element"
            )
        items = getattr(link.parent, link.field)
        return items, js.index_of(items, node)

    def commit(self) -> int:
        """Apply queued insertions, then queued deletions.  Returns the count."""

        applied = 0
        for target, node, offset in self._insertions:
            items, position = self._list_slot(target)
            items.insert(position + offset, node)
            applied += 1
        self._insertions.clear()
        # Insertions add entries the cached links do not know about.
        self._parent_map = None

        seen = set()
        for node in self._deletions:
            if id(node) in seen:
                continue
            seen.add(id(node))
            link = self.parent_of(node)
            if link.index is not None:
                items = getattr(link.parent, link.field)
                del items[js.index_of(items, node)]
            elif js.is_optional_field(link.parent, link.field):
                setattr(link.parent, link.field, None)
            else:
                raise InconsistentStateError(
                    f"cannot delete required field {link.parent.type}.{link.field}"
                )
            applied += 1
        self._deletions.clear()

        if applied:
            self.invalidate()
            LOG.debug("committed %d queued mutation(s)", applied)
        return applied

    def conditional_cleanup(self) -> int:
        """Commit queued work and remove declarations it left empty."""

        self.commit()
        removed = 0
        for node in list(js.walk(self.tree)):
            list_field = _STATEMENT_LISTS.get(type(node))
            if list_field is not None:
                statements = getattr(node, list_field)
                kept = [statement for statement in statements if not _is_empty_declaration(statement)]
                removed += len(statements) - len(kept)
                statements[:] = kept
            if isinstance(node, js.ForStatement):
                if isinstance(node.init, js.VariableDeclaration) and not node.init.declarators:
                    node.init = None
                    removed += 1
            for name, value in js.iter_fields(node):
                if _is_empty_declaration(value):
                    setattr(node, name, js.EmptyStatement())
                    removed += 1
        if removed:
            self.invalidate()
            LOG.debug("cleanup removed %d empty declaration(s)", removed)
        return removed

    # ------------------------------------------------------------------
    # Output

    def print(self, *, indent: str = "  ") -> str:
        return to_source(self.tree, indent=indent)


def _is_empty_declaration(node: object) -> bool:
    return isinstance(node, js.VariableDeclarationStatement) and not node.declaration.declarators


__all__ = ["ParentLink", "RefactorSession", "build_parent_map"]
