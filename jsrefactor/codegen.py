"""Pretty printer turning :mod:`jsrefactor.js_ast` trees back into source."""

from __future__ import annotations

import math
import re
from typing import List, Optional, Sequence

from . import js_ast as js
from .validator import is_identifier_name

SEQUENCE = 0
ASSIGNMENT = 1
CONDITIONAL = 2
PREFIX = 16
POSTFIX = 17
CALL = 19
PRIMARY = 20

BINARY_PRECEDENCE = {
    ",": SEQUENCE,
    "??": 4,
    "||": 4,
    "&&": 5,
    "|": 6,
    "^": 7,
    "&": 8,
    "==": 9,
    "!=": 9,
    "===": 9,
    "!==": 9,
    "<": 10,
    ">": 10,
    "<=": 10,
    ">=": 10,
    "in": 10,
    "instanceof": 10,
    "<<": 11,
    ">>": 11,
    ">>>": 11,
    "+": 12,
    "-": 12,
    "*": 13,
    "/": 13,
    "%": 13,
    "**": 14,
}

_LOGICAL = {"||", "&&"}
_STATEMENT_HEAD = re.compile(r"^(?:\{|(?:async\s+)?function(?![\w$])|class(?![\w$])|let\s*\[)")
_STRING_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def quote_string(value: str) -> str:
    """Return ``value`` as a double-quoted JavaScript string literal."""

    out = []
    for char in value:
        escaped = _STRING_ESCAPES.get(char)
        if escaped is not None:
            out.append(escaped)
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\x{ord(char):02x}")
        else:
            out.append(char)
    return '"' + "".join(out) + '"'


def format_number(value: int | float) -> str:
    if isinstance(value, bool):
        raise TypeError("booleans are not numeric literals")
    if isinstance(value, float):
        if math.isnan(value):
            raise ValueError("NaN has no literal form")
        if math.isinf(value):
            return "2e308"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def format_property_key(value: str) -> str:
    """Render a static property key as an identifier, number or string."""

    if is_identifier_name(value):
        return value
    if value.isdigit() and (value == "0" or not value.startswith("0")):
        return value
    return quote_string(value)


def _expression_precedence(node: js.Node) -> int:
    if isinstance(node, js.BinaryExpression):
        return BINARY_PRECEDENCE[node.operator]
    if isinstance(
        node,
        (
            js.AssignmentExpression,
            js.CompoundAssignmentExpression,
            js.ArrowExpression,
            js.YieldExpression,
            js.YieldGeneratorExpression,
        ),
    ):
        return ASSIGNMENT
    if isinstance(node, js.ConditionalExpression):
        return CONDITIONAL
    if isinstance(node, (js.UnaryExpression, js.AwaitExpression)):
        return PREFIX
    if isinstance(node, js.UpdateExpression):
        return PREFIX if node.is_prefix else POSTFIX
    if isinstance(node, (js.CallExpression, js.StaticMemberExpression, js.ComputedMemberExpression)):
        return CALL
    if isinstance(node, js.NewExpression):
        return CALL
    if isinstance(node, js.TemplateExpression) and node.tag is not None:
        return CALL
    if isinstance(node, js.LiteralNumericExpression) and node.value < 0:
        return PREFIX
    return PRIMARY


def _ends_with_open_if(node: js.Statement) -> bool:
    """True when ``node`` ends in an ``if`` that would capture a following ``else``."""

    while True:
        if isinstance(node, js.IfStatement):
            if node.alternate is None:
                return True
            node = node.alternate
        elif isinstance(
            node,
            (
                js.WhileStatement,
                js.ForStatement,
                js.ForInStatement,
                js.ForOfStatement,
                js.WithStatement,
                js.LabeledStatement,
            ),
        ):
            node = node.body
        else:
            return False


def _has_in_operator(node: js.Node) -> bool:
    return any(
        isinstance(child, js.BinaryExpression) and child.operator == "in" for child in js.walk(node)
    )


def _member_chain_has_call(node: js.Node) -> bool:
    while True:
        if isinstance(node, js.CallExpression):
            return True
        if isinstance(node, (js.StaticMemberExpression, js.ComputedMemberExpression)):
            node = node.object
        elif isinstance(node, js.TemplateExpression) and node.tag is not None:
            node = node.tag
        else:
            return False


class CodeGenerator:
    """Render nodes with ``indent`` per nesting level."""

    def __init__(self, indent: str = "  ") -> None:
        self.indent = indent
        self.level = 0

    @property
    def pad(self) -> str:
        return self.indent * self.level

    # ------------------------------------------------------------------
    # Statements

    def script(self, node: js.Script) -> str:
        lines = [self.directive(directive) for directive in node.directives]
        lines.extend(self.statement(statement) for statement in node.statements)
        return "\n".join(lines)

    def directive(self, node: js.Directive) -> str:
        quote = "'" if '"' in node.raw_value else '"'
        return f"{self.pad}{quote}{node.raw_value}{quote};"

    def body(self, statements: Sequence[js.Statement], directives: Sequence[js.Directive] = ()) -> str:
        if not statements and not directives:
            return "{}"
        self.level += 1
        lines = [self.directive(directive) for directive in directives]
        lines.extend(self.statement(statement) for statement in statements)
        self.level -= 1
        return "{\n" + "\n".join(lines) + "\n" + self.pad + "}"

    def _nested(self, node: js.Statement, force_block: bool = False) -> str:
        """Render a loop or branch body; blocks stay on the header line."""

        if isinstance(node, js.BlockStatement):
            return " " + self.body(node.block.statements)
        if force_block:
            return " " + self.body([node])
        self.level += 1
        text = "\n" + self.statement(node)
        self.level -= 1
        return text

    def statement(self, node: js.Statement) -> str:
        pad = self.pad
        if isinstance(node, js.ExpressionStatement):
            text = self.expression(node.expression, SEQUENCE)
            if _STATEMENT_HEAD.match(text) or isinstance(node.expression, js.LiteralStringExpression):
                text = f"({text})"
            return f"{pad}{text};"
        if isinstance(node, js.VariableDeclarationStatement):
            return f"{pad}{self.declaration(node.declaration)};"
        if isinstance(node, js.FunctionDeclaration):
            return pad + self.function(node)
        if isinstance(node, js.ClassDeclaration):
            return pad + self.class_(node)
        if isinstance(node, js.BlockStatement):
            return pad + self.body(node.block.statements)
        if isinstance(node, js.EmptyStatement):
            return f"{pad};"
        if isinstance(node, js.DebuggerStatement):
            return f"{pad}debugger;"
        if isinstance(node, js.ReturnStatement):
            if node.expression is None:
                return f"{pad}return;"
            return f"{pad}return {self.expression(node.expression, SEQUENCE)};"
        if isinstance(node, js.ThrowStatement):
            return f"{pad}throw {self.expression(node.expression, SEQUENCE)};"
        if isinstance(node, js.BreakStatement):
            return f"{pad}break{' ' + node.label if node.label else ''};"
        if isinstance(node, js.ContinueStatement):
            return f"{pad}continue{' ' + node.label if node.label else ''};"
        if isinstance(node, js.LabeledStatement):
            return f"{pad}{node.label}: {self.statement(node.body).lstrip()}"
        if isinstance(node, js.IfStatement):
            return pad + self._if(node)
        if isinstance(node, js.WhileStatement):
            test = self.expression(node.test, SEQUENCE)
            return f"{pad}while ({test}){self._nested(node.body)}"
        if isinstance(node, js.DoWhileStatement):
            test = self.expression(node.test, SEQUENCE)
            body = self._nested(node.body)
            joiner = " " if isinstance(node.body, js.BlockStatement) else "\n" + pad
            return f"{pad}do{body}{joiner}while ({test});"
        if isinstance(node, js.ForStatement):
            return pad + self._for(node)
        if isinstance(node, (js.ForInStatement, js.ForOfStatement)):
            keyword = "of" if isinstance(node, js.ForOfStatement) else "in"
            if isinstance(node.left, js.VariableDeclaration):
                left = self.declaration(node.left)
            else:
                left = self.target(node.left)
            floor = ASSIGNMENT if keyword == "of" else SEQUENCE
            right = self.expression(node.right, floor)
            return f"{pad}for ({left} {keyword} {right}){self._nested(node.body)}"
        if isinstance(node, js.WithStatement):
            obj = self.expression(node.object, SEQUENCE)
            return f"{pad}with ({obj}){self._nested(node.body)}"
        if isinstance(node, js.SwitchStatement):
            return pad + self._switch(node)
        if isinstance(node, js.TryCatchStatement):
            return f"{pad}try {self.body(node.body.statements)}{self._catch(node.catch_clause)}"
        if isinstance(node, js.TryFinallyStatement):
            catch = self._catch(node.catch_clause) if node.catch_clause is not None else ""
            finalizer = self.body(node.finalizer.statements)
            return f"{pad}try {self.body(node.body.statements)}{catch} finally {finalizer}"
        raise TypeError(f"Unsupported statement: {node!r}")

    def _if(self, node: js.IfStatement) -> str:
        test = self.expression(node.test, SEQUENCE)
        force = node.alternate is not None and _ends_with_open_if(node.consequent)
        text = f"if ({test}){self._nested(node.consequent, force_block=force)}"
        if node.alternate is None:
            return text
        if isinstance(node.consequent, js.BlockStatement) or force:
            text += " else"
        else:
            text += f"\n{self.pad}else"
        if isinstance(node.alternate, js.IfStatement):
            return f"{text} {self._if(node.alternate)}"
        return text + self._nested(node.alternate)

    def _for(self, node: js.ForStatement) -> str:
        if node.init is None:
            init = ""
        elif isinstance(node.init, js.VariableDeclaration):
            init = self.declaration(node.init, for_init=True)
        else:
            init = self.expression(node.init, SEQUENCE)
            if _has_in_operator(node.init) or init.startswith("let"):
                init = f"({init})"
        test = "" if node.test is None else " " + self.expression(node.test, SEQUENCE)
        update = "" if node.update is None else " " + self.expression(node.update, SEQUENCE)
        return f"for ({init};{test};{update}){self._nested(node.body)}"

    def _switch(self, node: js.SwitchStatement) -> str:
        head = f"switch ({self.expression(node.discriminant, SEQUENCE)}) {{"
        lines = [head]
        self.level += 1
        for case in node.cases:
            if isinstance(case, js.SwitchDefault):
                lines.append(f"{self.pad}default:")
            else:
                lines.append(f"{self.pad}case {self.expression(case.test, SEQUENCE)}:")
            self.level += 1
            lines.extend(self.statement(statement) for statement in case.consequent)
            self.level -= 1
        self.level -= 1
        lines.append(f"{self.pad}}}")
        return "\n".join(lines)

    def _catch(self, node: js.CatchClause) -> str:
        binding = "" if node.binding is None else f" ({self.binding(node.binding)})"
        return f" catch{binding} {self.body(node.body.statements)}"

    def declaration(self, node: js.VariableDeclaration, for_init: bool = False) -> str:
        parts = []
        for declarator in node.declarators:
            text = self.binding(declarator.binding)
            if declarator.init is not None:
                init = self.expression(declarator.init, ASSIGNMENT)
                if for_init and _has_in_operator(declarator.init):
                    init = f"({init})"
                text = f"{text} = {init}"
            parts.append(text)
        return f"{node.kind} {', '.join(parts)}"

    # ------------------------------------------------------------------
    # Functions and classes

    def params(self, node: js.FormalParameters) -> str:
        parts = [self.binding(item) for item in node.items]
        if node.rest is not None:
            parts.append("..." + self.binding(node.rest))
        return "(" + ", ".join(parts) + ")"

    def function(self, node: js.FunctionDeclaration | js.FunctionExpression) -> str:
        prefix = "async " if node.is_async else ""
        star = "*" if node.is_generator else ""
        name = f" {node.name.name}" if node.name is not None else ""
        body = self.body(node.body.statements, node.body.directives)
        return f"{prefix}function{star}{name}{self.params(node.params)} {body}"

    def arrow(self, node: js.ArrowExpression) -> str:
        prefix = "async " if node.is_async else ""
        if isinstance(node.body, js.FunctionBody):
            body = self.body(node.body.statements, node.body.directives)
        else:
            body = self.expression(node.body, ASSIGNMENT)
            if body.startswith("{"):
                body = f"({body})"
        return f"{prefix}{self.params(node.params)} => {body}"

    def class_(self, node: js.ClassDeclaration | js.ClassExpression) -> str:
        text = "class"
        if node.name is not None:
            text += f" {node.name.name}"
        if node.superclass is not None:
            text += f" extends {self.expression(node.superclass, CALL)}"
        if not node.elements:
            return text + " {}"
        self.level += 1
        lines = []
        for element in node.elements:
            static = "static " if element.is_static else ""
            lines.append(f"{self.pad}{static}{self.method(element.method)}")
        self.level -= 1
        return text + " {\n" + "\n".join(lines) + "\n" + self.pad + "}"

    def method(self, node: js.MethodDefinition) -> str:
        name = self.property_name(node.name)
        body = self.body(node.body.statements, node.body.directives)
        if isinstance(node, js.Getter):
            return f"get {name}() {body}"
        if isinstance(node, js.Setter):
            return f"set {name}({self.binding(node.param)}) {body}"
        if isinstance(node, js.Method):
            prefix = ("async " if node.is_async else "") + ("*" if node.is_generator else "")
            return f"{prefix}{name}{self.params(node.params)} {body}"
        raise TypeError(f"Unsupported method: {node!r}")

    def property_name(self, node: js.PropertyName) -> str:
        if isinstance(node, js.StaticPropertyName):
            return format_property_key(node.value)
        if isinstance(node, js.ComputedPropertyName):
            return f"[{self.expression(node.expression, ASSIGNMENT)}]"
        raise TypeError(f"Unsupported property name: {node!r}")

    # ------------------------------------------------------------------
    # Bindings and assignment targets

    def binding(self, node: js.Node) -> str:
        if isinstance(node, (js.BindingIdentifier, js.AssignmentTargetIdentifier)):
            return node.name
        if isinstance(node, (js.BindingWithDefault, js.AssignmentTargetWithDefault)):
            return f"{self.binding(node.binding)} = {self.expression(node.init, ASSIGNMENT)}"
        if isinstance(node, (js.ObjectBinding, js.ObjectAssignmentTarget)):
            parts = [self.binding(prop) for prop in node.properties]
            if node.rest is not None:
                parts.append("..." + self.binding(node.rest))
            return "{" + ", ".join(parts) + "}"
        if isinstance(node, (js.BindingPropertyIdentifier, js.AssignmentTargetPropertyIdentifier)):
            text = node.binding.name
            if node.init is not None:
                text += f" = {self.expression(node.init, ASSIGNMENT)}"
            return text
        if isinstance(node, (js.BindingPropertyProperty, js.AssignmentTargetPropertyProperty)):
            return f"{self.property_name(node.name)}: {self.binding(node.binding)}"
        if isinstance(node, (js.ArrayBinding, js.ArrayAssignmentTarget)):
            parts = [self.binding(item) if item is not None else "" for item in node.elements]
            if node.rest is not None:
                parts.append("..." + self.binding(node.rest))
            elif node.elements and node.elements[-1] is None:
                parts.append("")
            return "[" + ", ".join(parts) + "]"
        if isinstance(node, (js.StaticMemberAssignmentTarget, js.ComputedMemberAssignmentTarget)):
            return self.target(node)
        raise TypeError(f"Unsupported binding: {node!r}")

    def target(self, node: js.Node) -> str:
        if isinstance(node, js.StaticMemberAssignmentTarget):
            return f"{self._object(node.object)}.{node.property}"
        if isinstance(node, js.ComputedMemberAssignmentTarget):
            return f"{self._object(node.object)}[{self.expression(node.expression, SEQUENCE)}]"
        return self.binding(node)

    def _object(self, node: js.Node) -> str:
        if isinstance(node, js.Super):
            return "super"
        if isinstance(node, js.LiteralNumericExpression):
            return f"({self.expression(node, SEQUENCE)})"
        return self.expression(node, CALL)

    # ------------------------------------------------------------------
    # Expressions

    def expression(self, node: js.Node, floor: int = SEQUENCE) -> str:
        """Render ``node``, parenthesized when it binds looser than ``floor``."""

        text = self._expression(node)
        if _expression_precedence(node) < floor:
            return f"({text})"
        return text

    def _arguments(self, items: Sequence[js.Node]) -> str:
        return "(" + ", ".join(self._element(item) for item in items) + ")"

    def _element(self, node: Optional[js.Node]) -> str:
        if node is None:
            return ""
        if isinstance(node, js.SpreadElement):
            return "..." + self.expression(node.expression, ASSIGNMENT)
        return self.expression(node, ASSIGNMENT)

    def _binary(self, node: js.BinaryExpression) -> str:
        precedence = BINARY_PRECEDENCE[node.operator]
        if node.operator == ",":
            left = self.expression(node.left, SEQUENCE)
            return f"{left}, {self.expression(node.right, ASSIGNMENT)}"
        if node.operator == "**":
            left = self.expression(node.left, POSTFIX)
            right = self.expression(node.right, precedence)
        else:
            left = self.expression(node.left, precedence)
            right = self.expression(node.right, precedence + 1)
        if node.operator == "??" or node.operator in _LOGICAL:
            left = self._isolate_coalesce(node, node.left, left)
            right = self._isolate_coalesce(node, node.right, right)
        return f"{left} {node.operator} {right}"

    @staticmethod
    def _isolate_coalesce(parent: js.BinaryExpression, child: js.Node, text: str) -> str:
        """``??`` may not be mixed with ``||``/``&&`` without parentheses."""

        if not isinstance(child, js.BinaryExpression) or text.startswith("("):
            return text
        mixed = (parent.operator == "??" and child.operator in _LOGICAL) or (
            parent.operator in _LOGICAL and child.operator == "??"
        )
        return f"({text})" if mixed else text

    def _unary(self, node: js.UnaryExpression) -> str:
        operand = self.expression(node.operand, PREFIX)
        if node.operator.isalpha():
            return f"{node.operator} {operand}"
        if operand.startswith(node.operator[0]) and node.operator in ("-", "+"):
            return f"{node.operator} {operand}"
        return f"{node.operator}{operand}"

    def _template(self, node: js.TemplateExpression) -> str:
        parts = []
        for element in node.elements:
            if isinstance(element, js.TemplateElement):
                parts.append(element.raw_value)
            else:
                parts.append("${" + self.expression(element, SEQUENCE) + "}")
        tag = self.expression(node.tag, CALL) if node.tag is not None else ""
        return tag + "`" + "".join(parts) + "`"

    def _expression(self, node: js.Node) -> str:
        if isinstance(node, js.IdentifierExpression):
            return node.name
        if isinstance(node, js.LiteralBooleanExpression):
            return "true" if node.value else "false"
        if isinstance(node, js.LiteralNullExpression):
            return "null"
        if isinstance(node, js.LiteralInfinityExpression):
            return "2e308"
        if isinstance(node, js.LiteralNumericExpression):
            return format_number(node.value)
        if isinstance(node, js.LiteralStringExpression):
            return quote_string(node.value)
        if isinstance(node, js.LiteralRegExpExpression):
            return f"/{node.pattern}/{node.flags}"
        if isinstance(node, js.ThisExpression):
            return "this"
        if isinstance(node, js.NewTargetExpression):
            return "new.target"
        if isinstance(node, js.TemplateExpression):
            return self._template(node)
        if isinstance(node, js.ArrayExpression):
            parts = [self._element(item) for item in node.elements]
            if node.elements and node.elements[-1] is None:
                parts.append("")
            return "[" + ", ".join(parts) + "]"
        if isinstance(node, js.ObjectExpression):
            return "{" + ", ".join(self._property(prop) for prop in node.properties) + "}"
        if isinstance(node, js.FunctionExpression):
            return self.function(node)
        if isinstance(node, js.ArrowExpression):
            return self.arrow(node)
        if isinstance(node, js.ClassExpression):
            return self.class_(node)
        if isinstance(node, js.CallExpression):
            return self._object(node.callee) + self._arguments(node.arguments)
        if isinstance(node, js.NewExpression):
            callee = self.expression(node.callee, CALL)
            if _member_chain_has_call(node.callee) and not callee.startswith("("):
                callee = f"({callee})"
            return f"new {callee}{self._arguments(node.arguments)}"
        if isinstance(node, js.StaticMemberExpression):
            return f"{self._object(node.object)}.{node.property}"
        if isinstance(node, js.ComputedMemberExpression):
            return f"{self._object(node.object)}[{self.expression(node.expression, SEQUENCE)}]"
        if isinstance(node, js.BinaryExpression):
            return self._binary(node)
        if isinstance(node, js.UnaryExpression):
            return self._unary(node)
        if isinstance(node, js.UpdateExpression):
            operand = self.target(node.operand)
            return f"{node.operator}{operand}" if node.is_prefix else f"{operand}{node.operator}"
        if isinstance(node, js.ConditionalExpression):
            test = self.expression(node.test, CONDITIONAL + 1)
            consequent = self.expression(node.consequent, ASSIGNMENT)
            alternate = self.expression(node.alternate, ASSIGNMENT)
            return f"{test} ? {consequent} : {alternate}"
        if isinstance(node, js.AssignmentExpression):
            return f"{self.target(node.binding)} = {self.expression(node.expression, ASSIGNMENT)}"
        if isinstance(node, js.CompoundAssignmentExpression):
            value = self.expression(node.expression, ASSIGNMENT)
            return f"{self.target(node.binding)} {node.operator} {value}"
        if isinstance(node, js.YieldExpression):
            if node.expression is None:
                return "yield"
            return f"yield {self.expression(node.expression, ASSIGNMENT)}"
        if isinstance(node, js.YieldGeneratorExpression):
            return f"yield* {self.expression(node.expression, ASSIGNMENT)}"
        if isinstance(node, js.AwaitExpression):
            return f"await {self.expression(node.expression, PREFIX)}"
        raise TypeError(f"Unsupported expression: {node!r}")

    def _property(self, node: js.ObjectProperty) -> str:
        if isinstance(node, js.DataProperty):
            value = self.expression(node.expression, ASSIGNMENT)
            return f"{self.property_name(node.name)}: {value}"
        if isinstance(node, js.ShorthandProperty):
            return node.name.name
        if isinstance(node, js.SpreadProperty):
            return "..." + self.expression(node.expression, ASSIGNMENT)
        if isinstance(node, js.MethodDefinition):
            return self.method(node)
        raise TypeError(f"Unsupported property: {node!r}")


def to_source(node: js.Node, *, indent: str = "  ") -> str:
    """Render *node* (a script, statement or expression) as JavaScript."""

    generator = CodeGenerator(indent)
    if isinstance(node, js.Script):
        return generator.script(node)
    if isinstance(node, js.Statement):
        return generator.statement(node)
    if isinstance(node, js.Expression):
        return generator.expression(node)
    raise TypeError(f"Unsupported node: {node!r}")


__all__ = [
    "CodeGenerator",
    "format_number",
    "format_property_key",
    "quote_string",
    "to_source",
]
