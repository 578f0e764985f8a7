"""Parse JavaScript source into :mod:`jsrefactor.js_ast` trees.

Parsing is delegated to :mod:`tree_sitter` with the ``tree-sitter-javascript``
grammar.  The concrete syntax tree it returns is converted into the Shift-style
node model used by the rest of the package: parentheses disappear, comma
sequences become left-nested ``","`` binary expressions, and identifier
occurrences are split into bindings, references and assignment targets.

Only classic scripts are supported.  Modules, JSX, optional chaining, private
class members and BigInt literals raise :class:`UnsupportedSyntaxError`.
"""

from __future__ import annotations

import logging
import math
import re
from functools import lru_cache
from typing import Callable, Dict, List, Optional

import tree_sitter_javascript
from tree_sitter import Language, Parser

from . import js_ast as js
from .exceptions import ParseError, UnsupportedSyntaxError

LOG = logging.getLogger(__name__)

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)
_SIMPLE_ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "v": "\v",
}
_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}

_PATTERN_KINDS = {
    "binding": {
        "identifier": js.BindingIdentifier,
        "object": js.ObjectBinding,
        "array": js.ArrayBinding,
        "default": js.BindingWithDefault,
        "shorthand": js.BindingPropertyIdentifier,
        "pair": js.BindingPropertyProperty,
    },
    "target": {
        "identifier": js.AssignmentTargetIdentifier,
        "object": js.ObjectAssignmentTarget,
        "array": js.ArrayAssignmentTarget,
        "default": js.AssignmentTargetWithDefault,
        "shorthand": js.AssignmentTargetPropertyIdentifier,
        "pair": js.AssignmentTargetPropertyProperty,
    },
}


@lru_cache(maxsize=1)
def _language() -> Language:
    return Language(tree_sitter_javascript.language())


def parse_script(source: str) -> js.Script:
    """Parse ``source`` as a classic script.

    Raises :class:`ParseError` when tree-sitter reports an error or missing
    node anywhere in the tree.
    """

    data = source.encode("utf-8")
    tree = Parser(_language()).parse(data)
    root = tree.root_node
    if root.has_error:
        broken = _first_error(root)
        row, column = broken.start_point[0], broken.start_point[1]
        raise ParseError("syntax error", line=row + 1, column=column + 1)
    return _Converter(data).script(root)


def _first_error(node):
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(reversed(current.children))
    return node


def decode_string_literal(text: str) -> str:
    """Return the cooked value of a quoted JavaScript string literal."""

    body = text[1:-1]

    def repl(match: re.Match[str]) -> str:
        escape = match.group(1)
        if escape in _LINE_CONTINUATIONS:
            return ""
        if escape in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[escape]
        if escape.startswith("u{"):
            return chr(int(escape[2:-1], 16))
        if escape[0] == "u" and len(escape) == 5:
            return chr(int(escape[1:], 16))
        if escape[0] == "x" and len(escape) == 3:
            return chr(int(escape[1:], 16))
        if escape[0] in "01234567":
            return chr(int(escape, 8))
        return escape

    return _ESCAPE_RE.sub(repl, body)


def parse_number(text: str) -> int | float:
    """Return the numeric value of a JavaScript numeric literal."""

    raw = text.replace("_", "")
    if raw.endswith("n"):
        raise UnsupportedSyntaxError(f"BigInt literal {text!r} is not supported")
    prefix = raw[:2].lower()
    if prefix == "0x":
        return int(raw[2:], 16)
    if prefix == "0o":
        return int(raw[2:], 8)
    if prefix == "0b":
        return int(raw[2:], 2)
    if raw.isdigit():
        if len(raw) > 1 and raw[0] == "0" and set(raw) <= set("01234567"):
            return int(raw, 8)
        return int(raw)
    value = float(raw)
    if value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


class _Converter:
    """Convert tree-sitter nodes into :mod:`js_ast` nodes."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._statements: Dict[str, Callable[[object], js.Statement]] = {
            "expression_statement": self._expression_statement,
            "variable_declaration": self._declaration_statement,
            "lexical_declaration": self._declaration_statement,
            "function_declaration": self._function_declaration,
            "generator_function_declaration": self._function_declaration,
            "class_declaration": self._class_declaration,
            "statement_block": self._block_statement,
            "if_statement": self._if_statement,
            "for_statement": self._for_statement,
            "for_in_statement": self._for_in_statement,
            "while_statement": self._while_statement,
            "do_statement": self._do_statement,
            "try_statement": self._try_statement,
            "switch_statement": self._switch_statement,
            "with_statement": self._with_statement,
            "labeled_statement": self._labeled_statement,
            "return_statement": self._return_statement,
            "throw_statement": self._throw_statement,
            "break_statement": self._break_statement,
            "continue_statement": self._continue_statement,
            "debugger_statement": lambda node: js.DebuggerStatement(),
            "empty_statement": lambda node: js.EmptyStatement(),
        }
        self._expressions: Dict[str, Callable[[object], js.Node]] = {
            "parenthesized_expression": self._parenthesized,
            "sequence_expression": self._sequence,
            "identifier": self._identifier,
            "undefined": self._identifier,
            "this": lambda node: js.ThisExpression(),
            "super": lambda node: js.Super(),
            "true": lambda node: js.LiteralBooleanExpression(value=True),
            "false": lambda node: js.LiteralBooleanExpression(value=False),
            "null": lambda node: js.LiteralNullExpression(),
            "number": self._number,
            "string": self._string,
            "template_string": self._template,
            "regex": self._regex,
            "object": self._object,
            "array": self._array,
            "function_expression": self._function_expression,
            "function": self._function_expression,
            "generator_function": self._function_expression,
            "arrow_function": self._arrow_function,
            "class": self._class_expression,
            "call_expression": self._call,
            "new_expression": self._new,
            "member_expression": self._member,
            "subscript_expression": self._subscript,
            "await_expression": self._await,
            "unary_expression": self._unary,
            "update_expression": self._update,
            "binary_expression": self._binary,
            "ternary_expression": self._ternary,
            "assignment_expression": self._assignment,
            "augmented_assignment_expression": self._compound_assignment,
            "yield_expression": self._yield,
            "meta_property": self._meta_property,
        }

    # ------------------------------------------------------------------
    # Helpers

    def _text(self, node) -> str:
        return self._data[node.start_byte : node.end_byte].decode("utf-8")

    @staticmethod
    def _named(node) -> List[object]:
        return [child for child in node.named_children if child.type != "comment"]

    def _first_named(self, node):
        children = self._named(node)
        if not children:
            raise ParseError(f"empty {node.type}", *self._position(node))
        return children[0]

    @staticmethod
    def _position(node) -> tuple[int, int]:
        return node.start_point[0] + 1, node.start_point[1] + 1

    def _unsupported(self, node, what: str | None = None) -> UnsupportedSyntaxError:
        description = what or f"{node.type!r} nodes"
        return UnsupportedSyntaxError(f"{description} are not supported", *self._position(node))

    def _has_token(self, node, token: str, before=None) -> bool:
        for child in node.children:
            if before is not None and child.start_byte >= before.start_byte:
                break
            if child.type == token:
                return True
        return False

    # ------------------------------------------------------------------
    # Program and statements

    def script(self, root) -> js.Script:
        children = [c for c in self._named(root) if c.type != "hash_bang_line"]
        directives, statements = self._prologue(children)
        return js.Script(directives=directives, statements=statements)

    def _prologue(self, nodes) -> tuple[List[js.Directive], List[js.Statement]]:
        directives: List[js.Directive] = []
        index = 0
        while index < len(nodes):
            node = nodes[index]
            if node.type != "expression_statement":
                break
            inner = self._named(node)
            if len(inner) != 1 or inner[0].type != "string":
                break
            directives.append(js.Directive(raw_value=self._text(inner[0])[1:-1]))
            index += 1
        return directives, [self.statement(node) for node in nodes[index:]]

    def statement(self, node) -> js.Statement:
        handler = self._statements.get(node.type)
        if handler is None:
            raise self._unsupported(node)
        return handler(node)

    def _expression_statement(self, node) -> js.ExpressionStatement:
        return js.ExpressionStatement(expression=self.expression(self._first_named(node)))

    def _declaration(self, node) -> js.VariableDeclaration:
        kind = node.children[0].type
        declarators = [
            js.VariableDeclarator(
                binding=self.pattern(child.child_by_field_name("name"), "binding"),
                init=self._optional_expression(child.child_by_field_name("value")),
            )
            for child in self._named(node)
            if child.type == "variable_declarator"
        ]
        return js.VariableDeclaration(kind=kind, declarators=declarators)

    def _declaration_statement(self, node) -> js.VariableDeclarationStatement:
        return js.VariableDeclarationStatement(declaration=self._declaration(node))

    def _function_declaration(self, node) -> js.FunctionDeclaration:
        name = node.child_by_field_name("name")
        return js.FunctionDeclaration(
            name=js.BindingIdentifier(name=self._text(name)),
            params=self.formal_parameters(node.child_by_field_name("parameters")),
            body=self.function_body(node.child_by_field_name("body")),
            is_async=self._has_token(node, "async", before=name),
            is_generator=self._has_token(node, "*", before=name),
        )

    def _class_declaration(self, node) -> js.ClassDeclaration:
        name = node.child_by_field_name("name")
        return js.ClassDeclaration(
            name=js.BindingIdentifier(name=self._text(name)),
            superclass=self._heritage(node),
            elements=self._class_body(node.child_by_field_name("body")),
        )

    def block(self, node) -> js.Block:
        return js.Block(statements=[self.statement(child) for child in self._named(node)])

    def _block_statement(self, node) -> js.BlockStatement:
        return js.BlockStatement(block=self.block(node))

    def _if_statement(self, node) -> js.IfStatement:
        alternative = node.child_by_field_name("alternative")
        alternate = None
        if alternative is not None:
            alternate = self.statement(self._first_named(alternative))
        return js.IfStatement(
            test=self.expression(node.child_by_field_name("condition")),
            consequent=self.statement(node.child_by_field_name("consequence")),
            alternate=alternate,
        )

    def _for_part(self, node):
        if node is None or not node.is_named or node.type == "empty_statement":
            return None
        if node.type in ("variable_declaration", "lexical_declaration"):
            return self._declaration(node)
        if node.type == "expression_statement":
            return self.expression(self._first_named(node))
        return self.expression(node)

    def _for_statement(self, node) -> js.ForStatement:
        return js.ForStatement(
            init=self._for_part(node.child_by_field_name("initializer")),
            test=self._for_part(node.child_by_field_name("condition")),
            update=self._for_part(node.child_by_field_name("increment")),
            body=self.statement(node.child_by_field_name("body")),
        )

    def _for_in_statement(self, node) -> js.Statement:
        if self._has_token(node, "await"):
            raise self._unsupported(node, "for-await loops")
        left_node = node.child_by_field_name("left")
        kind = node.child_by_field_name("kind")
        if kind is not None:
            left = js.VariableDeclaration(
                kind=kind.type,
                declarators=[js.VariableDeclarator(binding=self.pattern(left_node, "binding"))],
            )
        else:
            left = self.pattern(left_node, "target")
        right = self.expression(node.child_by_field_name("right"))
        body = self.statement(node.child_by_field_name("body"))
        if node.child_by_field_name("operator").type == "of":
            return js.ForOfStatement(left=left, right=right, body=body)
        return js.ForInStatement(left=left, right=right, body=body)

    def _while_statement(self, node) -> js.WhileStatement:
        return js.WhileStatement(
            test=self.expression(node.child_by_field_name("condition")),
            body=self.statement(node.child_by_field_name("body")),
        )

    def _do_statement(self, node) -> js.DoWhileStatement:
        return js.DoWhileStatement(
            body=self.statement(node.child_by_field_name("body")),
            test=self.expression(node.child_by_field_name("condition")),
        )

    def _try_statement(self, node) -> js.Statement:
        body = self.block(node.child_by_field_name("body"))
        handler = node.child_by_field_name("handler")
        finalizer = node.child_by_field_name("finalizer")
        catch_clause = None
        if handler is not None:
            parameter = handler.child_by_field_name("parameter")
            catch_clause = js.CatchClause(
                binding=self.pattern(parameter, "binding") if parameter is not None else None,
                body=self.block(handler.child_by_field_name("body")),
            )
        if finalizer is not None:
            return js.TryFinallyStatement(
                body=body,
                catch_clause=catch_clause,
                finalizer=self.block(finalizer.child_by_field_name("body")),
            )
        return js.TryCatchStatement(body=body, catch_clause=catch_clause)

    def _switch_statement(self, node) -> js.SwitchStatement:
        cases: List[js.Node] = []
        for child in self._named(node.child_by_field_name("body")):
            consequent = [
                self.statement(stmt)
                for stmt in child.children_by_field_name("body")
                if stmt.type != "comment"
            ]
            if child.type == "switch_default":
                cases.append(js.SwitchDefault(consequent=consequent))
            else:
                cases.append(
                    js.SwitchCase(
                        test=self.expression(child.child_by_field_name("value")),
                        consequent=consequent,
                    )
                )
        return js.SwitchStatement(
            discriminant=self.expression(node.child_by_field_name("value")),
            cases=cases,
        )

    def _with_statement(self, node) -> js.WithStatement:
        return js.WithStatement(
            object=self.expression(node.child_by_field_name("object")),
            body=self.statement(node.child_by_field_name("body")),
        )

    def _labeled_statement(self, node) -> js.LabeledStatement:
        return js.LabeledStatement(
            label=self._text(node.child_by_field_name("label")),
            body=self.statement(node.child_by_field_name("body")),
        )

    def _return_statement(self, node) -> js.ReturnStatement:
        children = self._named(node)
        expression = self.expression(children[0]) if children else None
        return js.ReturnStatement(expression=expression)

    def _throw_statement(self, node) -> js.ThrowStatement:
        return js.ThrowStatement(expression=self.expression(self._first_named(node)))

    def _label(self, node) -> Optional[str]:
        label = node.child_by_field_name("label")
        return self._text(label) if label is not None else None

    def _break_statement(self, node) -> js.BreakStatement:
        return js.BreakStatement(label=self._label(node))

    def _continue_statement(self, node) -> js.ContinueStatement:
        return js.ContinueStatement(label=self._label(node))

    # ------------------------------------------------------------------
    # Functions and classes

    def function_body(self, node) -> js.FunctionBody:
        directives, statements = self._prologue(self._named(node))
        return js.FunctionBody(directives=directives, statements=statements)

    def formal_parameters(self, node) -> js.FormalParameters:
        params = js.FormalParameters()
        for child in self._named(node):
            if params.rest is not None:
                raise ParseError("rest parameter must be last", *self._position(child))
            if child.type == "rest_pattern":
                params.rest = self.pattern(self._first_named(child), "binding")
            else:
                params.items.append(self.pattern(child, "binding"))
        return params

    def _function_expression(self, node) -> js.FunctionExpression:
        name = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        return js.FunctionExpression(
            name=js.BindingIdentifier(name=self._text(name)) if name is not None else None,
            params=self.formal_parameters(node.child_by_field_name("parameters")),
            body=self.function_body(body),
            is_async=self._has_token(node, "async", before=body),
            is_generator=self._has_token(node, "*", before=body),
        )

    def _arrow_function(self, node) -> js.ArrowExpression:
        single = node.child_by_field_name("parameter")
        if single is not None:
            params = js.FormalParameters(items=[js.BindingIdentifier(name=self._text(single))])
        else:
            params = self.formal_parameters(node.child_by_field_name("parameters"))
        body_node = node.child_by_field_name("body")
        if body_node.type == "statement_block":
            body = self.function_body(body_node)
        else:
            body = self.expression(body_node)
        return js.ArrowExpression(
            params=params,
            body=body,
            is_async=self._has_token(node, "async", before=body_node),
        )

    def _heritage(self, node) -> Optional[js.Expression]:
        for child in self._named(node):
            if child.type == "class_heritage":
                return self.expression(self._first_named(child))
        return None

    def _class_body(self, node) -> List[js.ClassElement]:
        elements: List[js.ClassElement] = []
        for child in self._named(node):
            if child.type != "method_definition":
                raise self._unsupported(child, f"class member {child.type!r}")
            is_static, method = self._method(child)
            elements.append(js.ClassElement(method=method, is_static=is_static))
        return elements

    def _class_expression(self, node) -> js.ClassExpression:
        name = node.child_by_field_name("name")
        return js.ClassExpression(
            name=js.BindingIdentifier(name=self._text(name)) if name is not None else None,
            superclass=self._heritage(node),
            elements=self._class_body(node.child_by_field_name("body")),
        )

    def _method(self, node) -> tuple[bool, js.MethodDefinition]:
        name_node = node.child_by_field_name("name")
        modifiers = {
            child.type
            for child in node.children
            if not child.is_named and child.start_byte < name_node.start_byte
        }
        name = self.property_name(name_node)
        body = self.function_body(node.child_by_field_name("body"))
        params = self.formal_parameters(node.child_by_field_name("parameters"))
        if "get" in modifiers:
            return "static" in modifiers, js.Getter(name=name, body=body)
        if "set" in modifiers:
            if len(params.items) != 1 or params.rest is not None:
                raise ParseError("setter must have exactly one parameter", *self._position(node))
            return "static" in modifiers, js.Setter(name=name, param=params.items[0], body=body)
        method = js.Method(
            name=name,
            params=params,
            body=body,
            is_async="async" in modifiers,
            is_generator="*" in modifiers,
        )
        return "static" in modifiers, method

    def property_name(self, node) -> js.PropertyName:
        if node.type in ("property_identifier", "identifier"):
            return js.StaticPropertyName(value=self._text(node))
        if node.type == "string":
            return js.StaticPropertyName(value=decode_string_literal(self._text(node)))
        if node.type == "number":
            value = parse_number(self._text(node))
            return js.StaticPropertyName(value=_number_key(value))
        if node.type == "computed_property_name":
            return js.ComputedPropertyName(expression=self.expression(self._first_named(node)))
        raise self._unsupported(node, f"property names of kind {node.type!r}")

    # ------------------------------------------------------------------
    # Patterns

    def pattern(self, node, mode: str) -> js.Node:
        """Convert a binding (``mode="binding"``) or assignment target pattern."""

        kinds = _PATTERN_KINDS[mode]
        kind = node.type
        if kind == "parenthesized_expression" and mode == "target":
            return self.pattern(self._first_named(node), mode)
        if kind in ("identifier", "undefined", "shorthand_property_identifier_pattern"):
            return kinds["identifier"](name=self._text(node))
        if kind in ("member_expression", "subscript_expression") and mode == "target":
            return self.simple_target(node)
        if kind == "assignment_pattern":
            return kinds["default"](
                binding=self.pattern(node.child_by_field_name("left"), mode),
                init=self.expression(node.child_by_field_name("right")),
            )
        if kind == "object_pattern":
            return self._object_pattern(node, mode)
        if kind == "array_pattern":
            elements, rest = self._elements(node, lambda child: self.pattern(child, mode), mode)
            return kinds["array"](elements=elements, rest=rest)
        raise self._unsupported(node, f"{kind!r} in a {mode} position")

    def _object_pattern(self, node, mode: str) -> js.Node:
        kinds = _PATTERN_KINDS[mode]
        result = kinds["object"]()
        for child in self._named(node):
            if child.type == "rest_pattern":
                result.rest = self.pattern(self._first_named(child), mode)
            elif child.type == "shorthand_property_identifier_pattern":
                result.properties.append(
                    kinds["shorthand"](binding=kinds["identifier"](name=self._text(child)))
                )
            elif child.type == "object_assignment_pattern":
                left = child.child_by_field_name("left")
                if left.type != "shorthand_property_identifier_pattern":
                    raise self._unsupported(child, "defaults on nested object patterns")
                result.properties.append(
                    kinds["shorthand"](
                        binding=kinds["identifier"](name=self._text(left)),
                        init=self.expression(child.child_by_field_name("right")),
                    )
                )
            elif child.type == "pair_pattern":
                result.properties.append(
                    kinds["pair"](
                        name=self.property_name(child.child_by_field_name("key")),
                        binding=self.pattern(child.child_by_field_name("value"), mode),
                    )
                )
            else:
                raise self._unsupported(child, f"{child.type!r} in an object pattern")
        return result

    def simple_target(self, node) -> js.SimpleAssignmentTarget:
        if node.type == "parenthesized_expression":
            return self.simple_target(self._first_named(node))
        if node.type in ("identifier", "undefined"):
            return js.AssignmentTargetIdentifier(name=self._text(node))
        if node.type == "member_expression":
            member = self._member(node)
            return js.StaticMemberAssignmentTarget(object=member.object, property=member.property)
        if node.type == "subscript_expression":
            member = self._subscript(node)
            return js.ComputedMemberAssignmentTarget(
                object=member.object, expression=member.expression
            )
        raise ParseError(f"invalid assignment target {node.type!r}", *self._position(node))

    def _elements(
        self, node, convert, mode: str = "target"
    ) -> tuple[List[Optional[js.Node]], Optional[js.Node]]:
        """Collect array elements, keeping holes as ``None``."""

        elements: List[Optional[js.Node]] = []
        rest = None
        current = None
        for child in node.children:
            if child.type in ("comment", "["):
                continue
            if child.type == ",":
                elements.append(current)
                current = None
            elif child.type == "]":
                if current is not None:
                    elements.append(current)
            elif child.type == "rest_pattern":
                rest = self.pattern(self._first_named(child), mode)
            else:
                current = convert(child)
        return elements, rest

    # ------------------------------------------------------------------
    # Expressions

    def expression(self, node) -> js.Expression:
        handler = self._expressions.get(node.type)
        if handler is None:
            raise self._unsupported(node)
        return handler(node)

    def _optional_expression(self, node) -> Optional[js.Expression]:
        return self.expression(node) if node is not None else None

    def _callee(self, node) -> js.Node:
        if node.type == "import":
            raise self._unsupported(node, "dynamic import")
        return self.expression(node)

    def _parenthesized(self, node) -> js.Expression:
        return self.expression(self._first_named(node))

    def _sequence(self, node) -> js.Expression:
        operands: List[object] = []
        pending = [node]
        while pending:
            current = pending.pop()
            if current.type == "sequence_expression":
                pending.extend(reversed(self._named(current)))
            else:
                operands.append(current)
        result = self.expression(operands[0])
        for operand in operands[1:]:
            result = js.BinaryExpression(left=result, operator=",", right=self.expression(operand))
        return result

    def _identifier(self, node) -> js.IdentifierExpression:
        return js.IdentifierExpression(name=self._text(node))

    def _number(self, node) -> js.Expression:
        value = parse_number(self._text(node))
        if isinstance(value, float) and math.isinf(value):
            return js.LiteralInfinityExpression()
        return js.LiteralNumericExpression(value=value)

    def _string(self, node) -> js.LiteralStringExpression:
        return js.LiteralStringExpression(value=decode_string_literal(self._text(node)))

    def _template(self, node, tag: Optional[js.Expression] = None) -> js.TemplateExpression:
        elements: List[js.Node] = []
        position = node.start_byte + 1
        for child in node.named_children:
            if child.type != "template_substitution":
                continue
            raw = self._data[position : child.start_byte].decode("utf-8")
            elements.append(js.TemplateElement(raw_value=raw))
            elements.append(self.expression(self._first_named(child)))
            position = child.end_byte
        raw = self._data[position : node.end_byte - 1].decode("utf-8")
        elements.append(js.TemplateElement(raw_value=raw))
        return js.TemplateExpression(tag=tag, elements=elements)

    def _regex(self, node) -> js.LiteralRegExpExpression:
        flags = node.child_by_field_name("flags")
        return js.LiteralRegExpExpression(
            pattern=self._text(node.child_by_field_name("pattern")),
            flags=self._text(flags) if flags is not None else "",
        )

    def _object(self, node) -> js.ObjectExpression:
        properties: List[js.ObjectProperty] = []
        for child in self._named(node):
            if child.type == "pair":
                properties.append(
                    js.DataProperty(
                        name=self.property_name(child.child_by_field_name("key")),
                        expression=self.expression(child.child_by_field_name("value")),
                    )
                )
            elif child.type == "shorthand_property_identifier":
                properties.append(
                    js.ShorthandProperty(name=js.IdentifierExpression(name=self._text(child)))
                )
            elif child.type == "spread_element":
                properties.append(
                    js.SpreadProperty(expression=self.expression(self._first_named(child)))
                )
            elif child.type == "method_definition":
                properties.append(self._method(child)[1])
            else:
                raise self._unsupported(child, f"{child.type!r} in an object literal")
        return js.ObjectExpression(properties=properties)

    def _argument(self, node) -> js.Node:
        if node.type == "spread_element":
            return js.SpreadElement(expression=self.expression(self._first_named(node)))
        return self.expression(node)

    def _array(self, node) -> js.ArrayExpression:
        elements, _ = self._elements(node, self._argument)
        return js.ArrayExpression(elements=elements)

    def _call(self, node) -> js.Expression:
        if node.child_by_field_name("optional_chain") is not None:
            raise self._unsupported(node, "optional chaining")
        callee = self._callee(node.child_by_field_name("function"))
        arguments = node.child_by_field_name("arguments")
        if arguments.type == "template_string":
            return self._template(arguments, tag=callee)
        return js.CallExpression(
            callee=callee,
            arguments=[self._argument(child) for child in self._named(arguments)],
        )

    def _new(self, node) -> js.NewExpression:
        arguments = node.child_by_field_name("arguments")
        return js.NewExpression(
            callee=self.expression(node.child_by_field_name("constructor")),
            arguments=[] if arguments is None else [
                self._argument(child) for child in self._named(arguments)
            ],
        )

    def _member(self, node) -> js.StaticMemberExpression:
        if node.child_by_field_name("optional_chain") is not None:
            raise self._unsupported(node, "optional chaining")
        prop = node.child_by_field_name("property")
        if prop.type == "private_property_identifier":
            raise self._unsupported(prop, "private class members")
        return js.StaticMemberExpression(
            object=self._callee(node.child_by_field_name("object")),
            property=self._text(prop),
        )

    def _subscript(self, node) -> js.ComputedMemberExpression:
        if node.child_by_field_name("optional_chain") is not None:
            raise self._unsupported(node, "optional chaining")
        return js.ComputedMemberExpression(
            object=self._callee(node.child_by_field_name("object")),
            expression=self.expression(node.child_by_field_name("index")),
        )

    def _await(self, node) -> js.AwaitExpression:
        return js.AwaitExpression(expression=self.expression(self._first_named(node)))

    def _unary(self, node) -> js.UnaryExpression:
        return js.UnaryExpression(
            operator=self._text(node.child_by_field_name("operator")),
            operand=self.expression(node.child_by_field_name("argument")),
        )

    def _update(self, node) -> js.UpdateExpression:
        operator = node.child_by_field_name("operator")
        argument = node.child_by_field_name("argument")
        return js.UpdateExpression(
            operator=self._text(operator),
            operand=self.simple_target(argument),
            is_prefix=operator.start_byte < argument.start_byte,
        )

    def _binary(self, node) -> js.BinaryExpression:
        return js.BinaryExpression(
            left=self.expression(node.child_by_field_name("left")),
            operator=self._text(node.child_by_field_name("operator")),
            right=self.expression(node.child_by_field_name("right")),
        )

    def _ternary(self, node) -> js.ConditionalExpression:
        return js.ConditionalExpression(
            test=self.expression(node.child_by_field_name("condition")),
            consequent=self.expression(node.child_by_field_name("consequence")),
            alternate=self.expression(node.child_by_field_name("alternative")),
        )

    def _assignment(self, node) -> js.AssignmentExpression:
        return js.AssignmentExpression(
            binding=self.pattern(node.child_by_field_name("left"), "target"),
            expression=self.expression(node.child_by_field_name("right")),
        )

    def _compound_assignment(self, node) -> js.CompoundAssignmentExpression:
        return js.CompoundAssignmentExpression(
            binding=self.simple_target(node.child_by_field_name("left")),
            operator=self._text(node.child_by_field_name("operator")),
            expression=self.expression(node.child_by_field_name("right")),
        )

    def _yield(self, node) -> js.Expression:
        children = self._named(node)
        if self._has_token(node, "*"):
            return js.YieldGeneratorExpression(expression=self.expression(children[0]))
        return js.YieldExpression(expression=self.expression(children[0]) if children else None)

    def _meta_property(self, node) -> js.NewTargetExpression:
        if self._text(node).replace(" ", "") != "new.target":
            raise self._unsupported(node, "import.meta")
        return js.NewTargetExpression()


def _number_key(value: int | float) -> str:
    """Render a numeric property key the way JavaScript stringifies it."""

    if isinstance(value, int):
        return str(value)
    if math.isinf(value):
        return "Infinity"
    text = repr(value)
    return text[:-2] if text.endswith(".0") else text


__all__ = ["parse_script", "decode_string_literal", "parse_number"]
