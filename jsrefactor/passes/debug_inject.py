"""Insert ``debugger;`` as the first statement of selected functions."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, TYPE_CHECKING

from .. import js_ast as js

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ..pipeline import Context
    from ..session import RefactorSession


LOG = logging.getLogger(__name__)

_BLOCK_BODIED = (js.FunctionExpression, js.FunctionDeclaration, js.Method, js.Getter, js.Setter)


def _inject_into_body(session: "RefactorSession", body: js.FunctionBody) -> None:
    if body.statements:
        session.prepend(body.statements[0], js.DebuggerStatement())
    else:
        session.replace(
            body,
            js.FunctionBody(directives=body.directives, statements=[js.DebuggerStatement()]),
        )


def inject_debug(session: "RefactorSession", nodes: Iterable[js.Node]) -> int:
    """Make every selected function-like node stop in the debugger on entry.

    Arrow functions with an expression body get a block body that returns
    the original expression.  Returns the number of functions changed.
    """

    injected = 0
    for node in nodes:
        if isinstance(node, _BLOCK_BODIED):
            _inject_into_body(session, node.body)
        elif isinstance(node, js.ArrowExpression):
            if isinstance(node.body, js.FunctionBody):
                _inject_into_body(session, node.body)
            else:
                session.replace(
                    node.body,
                    js.FunctionBody(
                        statements=[
                            js.DebuggerStatement(),
                            js.ReturnStatement(expression=node.body),
                        ]
                    ),
                )
        else:
            LOG.debug("cannot inject a debugger statement into %s", node.type)
            continue
        injected += 1
    session.commit()
    return injected


def run(ctx: "Context") -> Dict[str, object]:
    selector = ctx.options.get("debug_selector")
    if not selector:
        return {"skipped": True, "reason": "no selector"}
    session = ctx.require_session()
    injected = inject_debug(session, session.query(selector))
    return {"selector": selector, "injected": injected}


__all__ = ["inject_debug", "run"]
