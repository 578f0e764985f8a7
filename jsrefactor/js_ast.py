"""Shift-style JavaScript syntax tree nodes.

Every node kind is a slotted dataclass with a fixed field schema.  Marker base
classes (:class:`Expression`, :class:`Statement`, :class:`Binding`, ...) group
kinds by the grammar positions they may occupy; the validator relies on them
to check structural well-formedness.  Dataclass equality compares node kinds
and fields recursively, which lets tests compare a transformed tree against a
freshly parsed expectation.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Iterator, List, Optional, Tuple, Union


class Node:
    """Base class for every syntax tree node."""

    __slots__ = ()

    @property
    def type(self) -> str:
        return type(self).__name__


class Expression(Node):
    __slots__ = ()


class Statement(Node):
    __slots__ = ()


class Binding(Node):
    """Binding patterns: anything that can appear where a name is declared."""

    __slots__ = ()


class AssignmentTarget(Node):
    """Targets of ``=`` and of ``for-in``/``for-of`` heads."""

    __slots__ = ()


class SimpleAssignmentTarget(AssignmentTarget):
    """Targets accepted by compound assignment and update expressions."""

    __slots__ = ()


class PropertyName(Node):
    __slots__ = ()


class ObjectProperty(Node):
    __slots__ = ()


class MethodDefinition(ObjectProperty):
    __slots__ = ()


# ---------------------------------------------------------------------------
# Program


@dataclass(slots=True)
class Directive(Node):
    raw_value: str


@dataclass(slots=True)
class Script(Node):
    directives: List[Directive] = field(default_factory=list)
    statements: List[Statement] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Bindings


@dataclass(slots=True)
class BindingIdentifier(Binding):
    name: str


@dataclass(slots=True)
class BindingWithDefault(Node):
    binding: Binding
    init: Expression


@dataclass(slots=True)
class BindingPropertyIdentifier(Node):
    binding: BindingIdentifier
    init: Optional[Expression] = None


@dataclass(slots=True)
class BindingPropertyProperty(Node):
    name: PropertyName
    binding: Union[Binding, BindingWithDefault]


@dataclass(slots=True)
class ObjectBinding(Binding):
    properties: List[Union[BindingPropertyIdentifier, BindingPropertyProperty]] = field(
        default_factory=list
    )
    rest: Optional[Binding] = None


@dataclass(slots=True)
class ArrayBinding(Binding):
    elements: List[Optional[Union[Binding, BindingWithDefault]]] = field(default_factory=list)
    rest: Optional[Binding] = None


# ---------------------------------------------------------------------------
# Assignment targets


@dataclass(slots=True)
class AssignmentTargetIdentifier(SimpleAssignmentTarget):
    name: str


@dataclass(slots=True)
class StaticMemberAssignmentTarget(SimpleAssignmentTarget):
    object: Node
    property: str


@dataclass(slots=True)
class ComputedMemberAssignmentTarget(SimpleAssignmentTarget):
    object: Node
    expression: Expression


@dataclass(slots=True)
class AssignmentTargetWithDefault(Node):
    binding: AssignmentTarget
    init: Expression


@dataclass(slots=True)
class AssignmentTargetPropertyIdentifier(Node):
    binding: AssignmentTargetIdentifier
    init: Optional[Expression] = None


@dataclass(slots=True)
class AssignmentTargetPropertyProperty(Node):
    name: PropertyName
    binding: Union[AssignmentTarget, AssignmentTargetWithDefault]


@dataclass(slots=True)
class ObjectAssignmentTarget(AssignmentTarget):
    properties: List[
        Union[AssignmentTargetPropertyIdentifier, AssignmentTargetPropertyProperty]
    ] = field(default_factory=list)
    rest: Optional[AssignmentTarget] = None


@dataclass(slots=True)
class ArrayAssignmentTarget(AssignmentTarget):
    elements: List[Optional[Union[AssignmentTarget, AssignmentTargetWithDefault]]] = field(
        default_factory=list
    )
    rest: Optional[AssignmentTarget] = None


# ---------------------------------------------------------------------------
# Functions and classes


@dataclass(slots=True)
class FunctionBody(Node):
    directives: List[Directive] = field(default_factory=list)
    statements: List[Statement] = field(default_factory=list)


@dataclass(slots=True)
class FormalParameters(Node):
    items: List[Union[Binding, BindingWithDefault]] = field(default_factory=list)
    rest: Optional[Binding] = None


@dataclass(slots=True)
class FunctionDeclaration(Statement):
    name: BindingIdentifier
    params: FormalParameters
    body: FunctionBody
    is_async: bool = False
    is_generator: bool = False


@dataclass(slots=True)
class FunctionExpression(Expression):
    params: FormalParameters
    body: FunctionBody
    name: Optional[BindingIdentifier] = None
    is_async: bool = False
    is_generator: bool = False


@dataclass(slots=True)
class ArrowExpression(Expression):
    params: FormalParameters
    body: Union[FunctionBody, Expression]
    is_async: bool = False


@dataclass(slots=True)
class StaticPropertyName(PropertyName):
    value: str


@dataclass(slots=True)
class ComputedPropertyName(PropertyName):
    expression: Expression


@dataclass(slots=True)
class Method(MethodDefinition):
    name: PropertyName
    params: FormalParameters
    body: FunctionBody
    is_async: bool = False
    is_generator: bool = False


@dataclass(slots=True)
class Getter(MethodDefinition):
    name: PropertyName
    body: FunctionBody


@dataclass(slots=True)
class Setter(MethodDefinition):
    name: PropertyName
    param: Union[Binding, BindingWithDefault]
    body: FunctionBody


@dataclass(slots=True)
class ClassElement(Node):
    method: MethodDefinition
    is_static: bool = False


@dataclass(slots=True)
class ClassDeclaration(Statement):
    name: BindingIdentifier
    superclass: Optional[Expression] = None
    elements: List[ClassElement] = field(default_factory=list)


@dataclass(slots=True)
class ClassExpression(Expression):
    name: Optional[BindingIdentifier] = None
    superclass: Optional[Expression] = None
    elements: List[ClassElement] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Expressions


@dataclass(slots=True)
class IdentifierExpression(Expression):
    name: str


@dataclass(slots=True)
class ThisExpression(Expression):
    pass


@dataclass(slots=True)
class Super(Node):
    pass


@dataclass(slots=True)
class NewTargetExpression(Expression):
    pass


@dataclass(slots=True)
class LiteralBooleanExpression(Expression):
    value: bool


@dataclass(slots=True)
class LiteralInfinityExpression(Expression):
    pass


@dataclass(slots=True)
class LiteralNullExpression(Expression):
    pass


@dataclass(slots=True)
class LiteralNumericExpression(Expression):
    value: Union[int, float]


@dataclass(slots=True)
class LiteralRegExpExpression(Expression):
    pattern: str
    flags: str = ""


@dataclass(slots=True)
class LiteralStringExpression(Expression):
    value: str


@dataclass(slots=True)
class TemplateElement(Node):
    raw_value: str


@dataclass(slots=True)
class TemplateExpression(Expression):
    elements: List[Union[TemplateElement, Expression]] = field(default_factory=list)
    tag: Optional[Expression] = None


@dataclass(slots=True)
class SpreadElement(Node):
    expression: Expression


@dataclass(slots=True)
class ArrayExpression(Expression):
    elements: List[Optional[Union[Expression, SpreadElement]]] = field(default_factory=list)


@dataclass(slots=True)
class DataProperty(ObjectProperty):
    name: PropertyName
    expression: Expression


@dataclass(slots=True)
class ShorthandProperty(ObjectProperty):
    name: IdentifierExpression


@dataclass(slots=True)
class SpreadProperty(ObjectProperty):
    expression: Expression


@dataclass(slots=True)
class ObjectExpression(Expression):
    properties: List[ObjectProperty] = field(default_factory=list)


@dataclass(slots=True)
class AssignmentExpression(Expression):
    binding: AssignmentTarget
    expression: Expression


@dataclass(slots=True)
class CompoundAssignmentExpression(Expression):
    binding: SimpleAssignmentTarget
    operator: str
    expression: Expression


@dataclass(slots=True)
class BinaryExpression(Expression):
    left: Expression
    operator: str
    right: Expression


@dataclass(slots=True)
class UnaryExpression(Expression):
    operator: str
    operand: Expression


@dataclass(slots=True)
class UpdateExpression(Expression):
    operator: str
    operand: SimpleAssignmentTarget
    is_prefix: bool = False


@dataclass(slots=True)
class ConditionalExpression(Expression):
    test: Expression
    consequent: Expression
    alternate: Expression


@dataclass(slots=True)
class CallExpression(Expression):
    callee: Node
    arguments: List[Union[Expression, SpreadElement]] = field(default_factory=list)


@dataclass(slots=True)
class NewExpression(Expression):
    callee: Expression
    arguments: List[Union[Expression, SpreadElement]] = field(default_factory=list)


@dataclass(slots=True)
class StaticMemberExpression(Expression):
    object: Node
    property: str


@dataclass(slots=True)
class ComputedMemberExpression(Expression):
    object: Node
    expression: Expression


@dataclass(slots=True)
class YieldExpression(Expression):
    expression: Optional[Expression] = None


@dataclass(slots=True)
class YieldGeneratorExpression(Expression):
    expression: Expression


@dataclass(slots=True)
class AwaitExpression(Expression):
    expression: Expression


# ---------------------------------------------------------------------------
# Statements


@dataclass(slots=True)
class Block(Node):
    statements: List[Statement] = field(default_factory=list)


@dataclass(slots=True)
class BlockStatement(Statement):
    block: Block


@dataclass(slots=True)
class VariableDeclarator(Node):
    binding: Binding
    init: Optional[Expression] = None


@dataclass(slots=True)
class VariableDeclaration(Node):
    kind: str
    declarators: List[VariableDeclarator] = field(default_factory=list)


@dataclass(slots=True)
class VariableDeclarationStatement(Statement):
    declaration: VariableDeclaration


@dataclass(slots=True)
class ExpressionStatement(Statement):
    expression: Expression


@dataclass(slots=True)
class EmptyStatement(Statement):
    pass


@dataclass(slots=True)
class DebuggerStatement(Statement):
    pass


@dataclass(slots=True)
class ReturnStatement(Statement):
    expression: Optional[Expression] = None


@dataclass(slots=True)
class ThrowStatement(Statement):
    expression: Expression


@dataclass(slots=True)
class BreakStatement(Statement):
    label: Optional[str] = None


@dataclass(slots=True)
class ContinueStatement(Statement):
    label: Optional[str] = None


@dataclass(slots=True)
class LabeledStatement(Statement):
    label: str
    body: Statement


@dataclass(slots=True)
class IfStatement(Statement):
    test: Expression
    consequent: Statement
    alternate: Optional[Statement] = None


@dataclass(slots=True)
class WhileStatement(Statement):
    test: Expression
    body: Statement


@dataclass(slots=True)
class DoWhileStatement(Statement):
    body: Statement
    test: Expression


@dataclass(slots=True)
class ForStatement(Statement):
    body: Statement
    init: Optional[Union[VariableDeclaration, Expression]] = None
    test: Optional[Expression] = None
    update: Optional[Expression] = None


@dataclass(slots=True)
class ForInStatement(Statement):
    left: Union[VariableDeclaration, AssignmentTarget]
    right: Expression
    body: Statement


@dataclass(slots=True)
class ForOfStatement(Statement):
    left: Union[VariableDeclaration, AssignmentTarget]
    right: Expression
    body: Statement


@dataclass(slots=True)
class WithStatement(Statement):
    object: Expression
    body: Statement


@dataclass(slots=True)
class SwitchCase(Node):
    test: Expression
    consequent: List[Statement] = field(default_factory=list)


@dataclass(slots=True)
class SwitchDefault(Node):
    consequent: List[Statement] = field(default_factory=list)


@dataclass(slots=True)
class SwitchStatement(Statement):
    discriminant: Expression
    cases: List[Union[SwitchCase, SwitchDefault]] = field(default_factory=list)


@dataclass(slots=True)
class CatchClause(Node):
    body: Block
    binding: Optional[Binding] = None


@dataclass(slots=True)
class TryCatchStatement(Statement):
    body: Block
    catch_clause: CatchClause


@dataclass(slots=True)
class TryFinallyStatement(Statement):
    body: Block
    finalizer: Block
    catch_clause: Optional[CatchClause] = None


# ---------------------------------------------------------------------------
# Traversal helpers

FUNCTION_LIKE = (FunctionDeclaration, FunctionExpression, ArrowExpression, Method, Getter, Setter)

LITERAL_KINDS = (
    LiteralBooleanExpression,
    LiteralInfinityExpression,
    LiteralNullExpression,
    LiteralNumericExpression,
    LiteralRegExpExpression,
    LiteralStringExpression,
)


def iter_fields(node: Node) -> Iterator[Tuple[str, object]]:
    """Yield ``(name, value)`` for every schema field of ``node``."""

    for spec in fields(node):
        yield spec.name, getattr(node, spec.name)


def iter_child_nodes(node: Node) -> Iterator[Node]:
    """Yield direct child nodes in schema order, skipping holes."""

    for _, value in iter_fields(node):
        if isinstance(value, Node):
            yield value
        elif isinstance(value, list):
            for item in value:
                if isinstance(item, Node):
                    yield item


def walk(node: Node) -> Iterator[Node]:
    """Pre-order, document-order traversal of ``node`` and its descendants."""

    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_child_nodes(current))))


def is_optional_field(node: Node, name: str) -> bool:
    """Return ``True`` when the schema allows ``None`` in field ``name``."""

    for spec in fields(node):
        if spec.name == name:
            return spec.default is None
    raise KeyError(f"{node.type} has no field {name!r}")


def is_literal(node: Optional[Node]) -> bool:
    return isinstance(node, LITERAL_KINDS)


def literal_truthiness(node: Node) -> bool:
    """Evaluate the JavaScript truthiness of a literal expression."""

    if isinstance(node, LiteralBooleanExpression):
        return node.value
    if isinstance(node, LiteralNumericExpression):
        return node.value != 0 and node.value == node.value
    if isinstance(node, LiteralStringExpression):
        return node.value != ""
    if isinstance(node, LiteralNullExpression):
        return False
    if isinstance(node, (LiteralInfinityExpression, LiteralRegExpExpression)):
        return True
    raise TypeError(f"Not a literal: {node.type}")


def index_of(items: List[object], node: object) -> int:
    """Identity-based ``list.index``; equal-looking siblings are distinct."""

    for position, item in enumerate(items):
        if item is node:
            return position
    raise ValueError(f"{type(node).__name__} is not in the list")


