"""Lexical scope analysis for :mod:`jsrefactor.js_ast` scripts.

:func:`analyze` builds a scope tree rooted at a ``Global`` scope whose single
child is the ``Script`` scope holding top-level declarations.  Every binding
and reference node is mapped (by identity) to the :class:`Variable` it
denotes.  References are resolved after the whole tree has been visited so
hoisted declarations bind uses that precede them; names that resolve nowhere
become declaration-less variables of the Global scope.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

from . import js_ast as js
from .exceptions import InconsistentStateError

LOG = logging.getLogger(__name__)


class ScopeType(str, Enum):
    """Kinds of lexical scope."""

    GLOBAL = "Global"
    SCRIPT = "Script"
    FUNCTION = "Function"
    ARROW_FUNCTION = "ArrowFunction"
    FUNCTION_NAME = "FunctionName"
    CLASS_NAME = "ClassName"
    BLOCK = "Block"
    CATCH = "Catch"
    WITH = "With"


class DeclarationType(str, Enum):
    VAR = "Var"
    LET = "Let"
    CONST = "Const"
    FUNCTION_DECLARATION = "FunctionDeclaration"
    FUNCTION_EXPRESSION_NAME = "FunctionExpressionName"
    CLASS_DECLARATION = "ClassDeclaration"
    CLASS_NAME = "ClassName"
    PARAMETER = "Parameter"
    CATCH_PARAMETER = "CatchParameter"


class Accessibility(str, Enum):
    READ = "Read"
    WRITE = "Write"
    READ_WRITE = "ReadWrite"


_VARIABLE_KINDS = {
    "var": DeclarationType.VAR,
    "let": DeclarationType.LET,
    "const": DeclarationType.CONST,
}
_VAR_TARGETS = (ScopeType.FUNCTION, ScopeType.ARROW_FUNCTION, ScopeType.SCRIPT)


@dataclass(eq=False)
class Declaration:
    node: js.Node
    type: DeclarationType


@dataclass(eq=False)
class Reference:
    node: js.Node
    accessibility: Accessibility


@dataclass(eq=False)
class Variable:
    name: str
    declarations: List[Declaration] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)

    def occurrences(self) -> Iterator[js.Node]:
        """Yield every declaration and reference node of the variable."""

        for declaration in self.declarations:
            yield declaration.node
        for reference in self.references:
            yield reference.node


@dataclass(eq=False)
class Scope:
    type: ScopeType
    node: js.Node
    parent: Optional["Scope"] = None
    children: List["Scope"] = field(default_factory=list)
    variables: Dict[str, Variable] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[Variable]:
        scope: Optional[Scope] = self
        while scope is not None:
            variable = scope.variables.get(name)
            if variable is not None:
                return variable
            scope = scope.parent
        return None

    def walk(self) -> Iterator["Scope"]:
        """Pre-order traversal of this scope and its descendants."""

        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class LookupTable:
    """Result of :func:`analyze`: the scope tree plus identity lookups."""

    scope: Scope
    variable_map: Dict[int, Variable] = field(default_factory=dict)
    node_scopes: Dict[int, Scope] = field(default_factory=dict)

    def lookup(self, node: js.Node) -> Variable:
        variable = self.variable_map.get(id(node))
        if variable is None:
            raise InconsistentStateError(f"{node.type} is not bound to any variable")
        return variable

    def scope_for(self, node: js.Node) -> Scope:
        scope = self.node_scopes.get(id(node))
        if scope is None:
            raise InconsistentStateError(f"{node.type} is not part of the analysed tree")
        return scope

    def variables(self) -> Iterator[Variable]:
        for scope in self.scope.walk():
            yield from scope.variables.values()


class _ScopeBuilder:
    def __init__(self, root: js.Script) -> None:
        self.global_scope = Scope(type=ScopeType.GLOBAL, node=root)
        self.current = self.global_scope
        self.table = LookupTable(scope=self.global_scope)
        self.pending: List[Tuple[js.Node, Accessibility, Scope]] = []
        self.block_functions: List[Tuple[js.BindingIdentifier, Scope]] = []
        self.strict = False

    @contextmanager
    def _scope(self, kind: ScopeType, node: js.Node) -> Iterator[Scope]:
        scope = Scope(type=kind, node=node, parent=self.current)
        self.current.children.append(scope)
        previous, self.current = self.current, scope
        try:
            yield scope
        finally:
            self.current = previous

    def _mark(self, node: js.Node) -> None:
        self.table.node_scopes[id(node)] = self.current

    def _var_scope(self) -> Scope:
        scope = self.current
        while scope.type not in _VAR_TARGETS:
            if scope.parent is None:
                raise InconsistentStateError("no function or script scope above declaration")
            scope = scope.parent
        return scope

    # ------------------------------------------------------------------
    # Declarations and references

    def _declare(self, binding: js.BindingIdentifier, kind: DeclarationType, scope: Scope) -> None:
        self._mark(binding)
        variable = scope.variables.get(binding.name)
        if variable is None:
            variable = Variable(name=binding.name)
            scope.variables[binding.name] = variable
        variable.declarations.append(Declaration(node=binding, type=kind))
        self.table.variable_map[id(binding)] = variable

    def _declare_pattern(self, pattern: js.Node, kind: DeclarationType, scope: Scope) -> None:
        self._mark(pattern)
        if isinstance(pattern, js.BindingIdentifier):
            self._declare(pattern, kind, scope)
        elif isinstance(pattern, js.BindingWithDefault):
            self._declare_pattern(pattern.binding, kind, scope)
            self.visit(pattern.init)
        elif isinstance(pattern, js.ObjectBinding):
            for prop in pattern.properties:
                self._mark(prop)
                if isinstance(prop, js.BindingPropertyIdentifier):
                    self._declare(prop.binding, kind, scope)
                    if prop.init is not None:
                        self.visit(prop.init)
                else:
                    self.visit(prop.name)
                    self._declare_pattern(prop.binding, kind, scope)
            if pattern.rest is not None:
                self._declare_pattern(pattern.rest, kind, scope)
        elif isinstance(pattern, js.ArrayBinding):
            for element in pattern.elements:
                if element is not None:
                    self._declare_pattern(element, kind, scope)
            if pattern.rest is not None:
                self._declare_pattern(pattern.rest, kind, scope)
        else:
            raise TypeError(f"Unsupported binding: {pattern!r}")

    def _reference(self, node: js.Node, access: Accessibility) -> None:
        self._mark(node)
        self.pending.append((node, access, self.current))

    def _target(self, target: js.Node, access: Accessibility) -> None:
        self._mark(target)
        if isinstance(target, js.AssignmentTargetIdentifier):
            self._reference(target, access)
        elif isinstance(target, js.StaticMemberAssignmentTarget):
            self.visit(target.object)
        elif isinstance(target, js.ComputedMemberAssignmentTarget):
            self.visit(target.object)
            self.visit(target.expression)
        elif isinstance(target, js.AssignmentTargetWithDefault):
            self._target(target.binding, access)
            self.visit(target.init)
        elif isinstance(target, js.ObjectAssignmentTarget):
            for prop in target.properties:
                self._mark(prop)
                if isinstance(prop, js.AssignmentTargetPropertyIdentifier):
                    self._reference(prop.binding, access)
                    if prop.init is not None:
                        self.visit(prop.init)
                else:
                    self.visit(prop.name)
                    self._target(prop.binding, access)
            if target.rest is not None:
                self._target(target.rest, access)
        elif isinstance(target, js.ArrayAssignmentTarget):
            for element in target.elements:
                if element is not None:
                    self._target(element, access)
            if target.rest is not None:
                self._target(target.rest, access)
        else:
            raise TypeError(f"Unsupported assignment target: {target!r}")

    def _declaration(self, node: js.VariableDeclaration) -> None:
        self._mark(node)
        kind = _VARIABLE_KINDS[node.kind]
        scope = self._var_scope() if kind is DeclarationType.VAR else self.current
        for declarator in node.declarators:
            self._mark(declarator)
            self._declare_pattern(declarator.binding, kind, scope)
            if declarator.init is not None:
                self.visit(declarator.init)

    # ------------------------------------------------------------------
    # Traversal

    def _function(self, node: js.Node, kind: ScopeType) -> None:
        # Body declarations are registered ahead of the parameters.
        strict = self.strict
        with self._scope(kind, node):
            body = node.body
            if isinstance(body, js.FunctionBody) and _uses_strict(body.directives):
                self.strict = True
            self._mark(body)
            if isinstance(body, js.FunctionBody):
                for directive in body.directives:
                    self._mark(directive)
                for statement in body.statements:
                    self.visit(statement)
            else:
                self.visit(body)
            if isinstance(node, js.Setter):
                self._declare_pattern(node.param, DeclarationType.PARAMETER, self.current)
            elif not isinstance(node, js.Getter):
                params = node.params
                self._mark(params)
                for item in params.items:
                    self._declare_pattern(item, DeclarationType.PARAMETER, self.current)
                if params.rest is not None:
                    self._declare_pattern(params.rest, DeclarationType.PARAMETER, self.current)
        self.strict = strict

    def _loop_head(self, node: js.Node) -> None:
        if isinstance(node, js.ForStatement):
            if isinstance(node.init, js.VariableDeclaration):
                self._declaration(node.init)
            elif node.init is not None:
                self.visit(node.init)
            for part in (node.test, node.update):
                if part is not None:
                    self.visit(part)
        else:
            if isinstance(node.left, js.VariableDeclaration):
                self._declaration(node.left)
            else:
                self._target(node.left, Accessibility.WRITE)
            self.visit(node.right)
        self.visit(node.body)

    def _class(self, node: js.ClassDeclaration | js.ClassExpression) -> None:
        strict, self.strict = self.strict, True
        if node.superclass is not None:
            self.visit(node.superclass)
        for element in node.elements:
            self.visit(element)
        self.strict = strict

    def visit(self, node: js.Node) -> None:
        self._mark(node)
        if isinstance(node, js.Script):
            self.strict = _uses_strict(node.directives)
            for directive in node.directives:
                self._mark(directive)
            for statement in node.statements:
                self.visit(statement)
        elif isinstance(node, js.FunctionDeclaration):
            self._declare(node.name, DeclarationType.FUNCTION_DECLARATION, self.current)
            if self.current.type not in _VAR_TARGETS and not self.strict:
                self.block_functions.append((node.name, self.current))
            self._function(node, ScopeType.FUNCTION)
        elif isinstance(node, js.FunctionExpression):
            if node.name is None:
                self._function(node, ScopeType.FUNCTION)
            else:
                with self._scope(ScopeType.FUNCTION_NAME, node):
                    self._declare(node.name, DeclarationType.FUNCTION_EXPRESSION_NAME, self.current)
                    self._function(node, ScopeType.FUNCTION)
        elif isinstance(node, js.ArrowExpression):
            self._function(node, ScopeType.ARROW_FUNCTION)
        elif isinstance(node, (js.Method, js.Getter, js.Setter)):
            self.visit(node.name)
            self._function(node, ScopeType.FUNCTION)
        elif isinstance(node, js.ClassDeclaration):
            self._declare(node.name, DeclarationType.CLASS_DECLARATION, self.current)
            self._class(node)
        elif isinstance(node, js.ClassExpression):
            if node.name is None:
                self._class(node)
            else:
                with self._scope(ScopeType.CLASS_NAME, node):
                    self._declare(node.name, DeclarationType.CLASS_NAME, self.current)
                    self._class(node)
        elif isinstance(node, js.Block):
            with self._scope(ScopeType.BLOCK, node):
                for statement in node.statements:
                    self.visit(statement)
        elif isinstance(node, (js.ForStatement, js.ForInStatement, js.ForOfStatement)):
            head = node.init if isinstance(node, js.ForStatement) else node.left
            if isinstance(head, js.VariableDeclaration) and head.kind != "var":
                with self._scope(ScopeType.BLOCK, node):
                    self._loop_head(node)
            else:
                self._loop_head(node)
        elif isinstance(node, js.SwitchStatement):
            self.visit(node.discriminant)
            with self._scope(ScopeType.BLOCK, node):
                for case in node.cases:
                    self.visit(case)
        elif isinstance(node, js.CatchClause):
            with self._scope(ScopeType.CATCH, node):
                if node.binding is not None:
                    self._declare_pattern(node.binding, DeclarationType.CATCH_PARAMETER, self.current)
                self._mark(node.body)
                for statement in node.body.statements:
                    self.visit(statement)
        elif isinstance(node, js.WithStatement):
            self.visit(node.object)
            with self._scope(ScopeType.WITH, node):
                self.visit(node.body)
        elif isinstance(node, js.VariableDeclaration):
            self._declaration(node)
        elif isinstance(node, js.IdentifierExpression):
            self._reference(node, Accessibility.READ)
        elif isinstance(node, js.AssignmentExpression):
            self._target(node.binding, Accessibility.WRITE)
            self.visit(node.expression)
        elif isinstance(node, js.CompoundAssignmentExpression):
            self._target(node.binding, Accessibility.READ_WRITE)
            self.visit(node.expression)
        elif isinstance(node, js.UpdateExpression):
            self._target(node.operand, Accessibility.READ_WRITE)
        elif isinstance(
            node,
            (js.BindingIdentifier, js.AssignmentTargetIdentifier, js.FormalParameters, js.FunctionBody),
        ):
            raise TypeError(f"{node.type} reached outside of its declaring construct")
        else:
            for child in js.iter_child_nodes(node):
                self.visit(child)

    # ------------------------------------------------------------------
    # Resolution

    def _implicit_arguments(self, scope: Scope) -> Optional[Scope]:
        while scope is not None:
            if scope.type is ScopeType.FUNCTION:
                return scope
            scope = scope.parent
        return None

    def _hoist_block_functions(self) -> None:
        """Bind sloppy-mode block functions in the enclosing function scope too.

        Outside strict code a function declared in a block is also visible to
        the rest of the enclosing function (ECMA-262 Annex B.3.3).  The block's
        variable moves to that scope, merging with a same-named variable
        already there, unless a non-function declaration of the name sits in
        between.
        """

        for binding, block in self.block_functions:
            variable = block.variables.get(binding.name)
            if variable is None or self.table.variable_map.get(id(binding)) is not variable:
                continue
            scope = block.parent
            while scope.type not in _VAR_TARGETS:
                blocker = scope.variables.get(binding.name)
                if blocker is not None and any(
                    d.type is not DeclarationType.FUNCTION_DECLARATION for d in blocker.declarations
                ):
                    break
                scope = scope.parent
            else:
                del block.variables[binding.name]
                target = scope.variables.get(binding.name)
                if target is None:
                    scope.variables[binding.name] = variable
                    continue
                target.declarations.extend(variable.declarations)
                for declaration in variable.declarations:
                    self.table.variable_map[id(declaration.node)] = target

    def resolve(self) -> None:
        self._hoist_block_functions()
        for node, access, scope in self.pending:
            variable = scope.lookup(node.name)
            if variable is None:
                owner = None
                if node.name == "arguments":
                    owner = self._implicit_arguments(scope)
                owner = owner or self.global_scope
                variable = Variable(name=node.name)
                owner.variables[node.name] = variable
            variable.references.append(Reference(node=node, accessibility=access))
            self.table.variable_map[id(node)] = variable


def _uses_strict(directives: List[js.Directive]) -> bool:
    return any(directive.raw_value == "use strict" for directive in directives)


def analyze(tree: js.Script) -> LookupTable:
    """Build the scope tree and identity lookups for ``tree``."""

    if not isinstance(tree, js.Script):
        raise TypeError(f"Unsupported root: {tree!r}")
    builder = _ScopeBuilder(tree)
    with builder._scope(ScopeType.SCRIPT, tree):
        builder.visit(tree)
    builder.resolve()
    table = builder.table
    LOG.debug(
        "scope analysis: %d scope(s), %d bound node(s)",
        sum(1 for _ in table.scope.walk()),
        len(table.variable_map),
    )
    return table


__all__ = [
    "Accessibility",
    "Declaration",
    "DeclarationType",
    "LookupTable",
    "Reference",
    "Scope",
    "ScopeType",
    "Variable",
    "analyze",
]
