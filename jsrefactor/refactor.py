"""Chainable query interface over a :class:`~jsrefactor.session.RefactorSession`.

``refactor(source)`` returns a :class:`RefactorQuery` selecting the program
root.  Calling the query with a selector narrows the selection; the transform
methods mutate the shared session and return the query so calls can be
chained::

    script = refactor("let a=2,r=require;r()")
    script('VariableDeclarator[init.name="require"]').unshorten()
    script.print()
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Union

from . import js_ast as js
from .passes import debug_inject, folding, normalize_identifiers as normalize
from .passes import unshorten as unshorten_pass
from .query import Selector, query
from .session import RefactorSession

LOG = logging.getLogger(__name__)


class RefactorQuery:
    """A node selection bound to a refactoring session."""

    def __init__(self, session: RefactorSession, nodes: Optional[List[js.Node]] = None) -> None:
        self.session = session
        # ``None`` selects whatever the session's root currently is.
        self._nodes = nodes

    @property
    def nodes(self) -> List[js.Node]:
        if self._nodes is None:
            return [self.session.tree]
        return list(self._nodes)

    def __call__(self, selector: Union[str, Selector]) -> "RefactorQuery":
        return self.query(selector)

    def query(self, selector: Union[str, Selector]) -> "RefactorQuery":
        """Select matching nodes at or below the current selection."""

        if self._nodes is None:
            return RefactorQuery(self.session, self.session.query(selector))
        seen = set()
        found: List[js.Node] = []
        for node in self._nodes:
            for match in query(node, selector):
                if id(match) not in seen:
                    seen.add(id(match))
                    found.append(match)
        return RefactorQuery(self.session, found)

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[js.Node]:
        return iter(self.nodes)

    def first(self) -> Optional[js.Node]:
        nodes = self.nodes
        return nodes[0] if nodes else None

    def raw(self) -> js.Script:
        return self.session.tree

    def print(self, *, indent: str = "  ") -> str:
        return self.session.print(indent=indent)

    # ------------------------------------------------------------------
    # Transforms
    #
    # Folding stays inside the selected subtrees; a selected node that is
    # itself folded is replaced in the selection by its result.

    def debug(self) -> "RefactorQuery":
        debug_inject.inject_debug(self.session, self.nodes)
        return self

    def compress_conditional_expressions(self) -> "RefactorQuery":
        folding.compress_conditional_expressions(self.session, self._nodes)
        return self

    def compress_comma_operators(self) -> "RefactorQuery":
        folding.compress_comma_operators(self.session, self._nodes)
        return self

    def expand_boolean(self) -> "RefactorQuery":
        folding.expand_boolean(self.session, self._nodes)
        return self

    def convert_computed_to_static(self) -> "RefactorQuery":
        folding.convert_computed_to_static(self.session, self._nodes)
        return self

    def unshorten(self) -> "RefactorQuery":
        unshorten_pass.unshorten(self.session, self.nodes)
        return self

    def normalize_identifiers(self, seed: int = 1) -> "RefactorQuery":
        normalize.normalize_identifiers(self.session, seed=seed)
        return self

    def __repr__(self) -> str:
        kinds = ", ".join(node.type for node in self.nodes[:5])
        more = ", ..." if len(self) > 5 else ""
        return f"RefactorQuery([{kinds}{more}])"


def refactor(source: Union[str, js.Script, RefactorSession]) -> RefactorQuery:
    """Parse ``source`` if needed and return a query selecting its root."""

    if isinstance(source, RefactorSession):
        session = source
    else:
        session = RefactorSession(source)
    LOG.debug("refactor session opened on %d top-level statement(s)", len(session.tree.statements))
    return RefactorQuery(session)


__all__ = ["RefactorQuery", "refactor"]
