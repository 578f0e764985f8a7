"""CSS-like selectors over :mod:`jsrefactor.js_ast` trees.

Supported syntax::

    Kind                       node kind (class name), or ``*``
    [path]                     attribute present and not null
    [path=value]  [path!=value]
    A B   A > B                descendant / child combinators
    A, B                       alternatives

``path`` is a dotted field path; ``type`` resolves to the node kind and
camelCase segments are accepted for snake_case fields (``isPrefix``).  Values
are quoted strings, numbers, ``true``/``false``/``null`` or bare words (treated
as strings).  Numbers never equal booleans.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from . import js_ast as js
from .exceptions import SelectorError

LOG = logging.getLogger(__name__)

_NAME = re.compile(r"[A-Za-z_$][\w$]*")
_NUMBER = re.compile(r"-?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)")
_CAMEL = re.compile(r"(?<!^)(?=[A-Z])")
_MISSING = object()
_KEYWORD_VALUES = {"true": True, "false": False, "null": None}


@dataclass(slots=True)
class Attribute:
    path: Tuple[str, ...]
    operator: Optional[str] = None
    value: object = None

    def matches(self, node: js.Node) -> bool:
        actual = _resolve(node, self.path)
        if self.operator is None:
            return actual is not _MISSING and actual is not None
        equal = actual is not _MISSING and _values_equal(actual, self.value)
        return equal if self.operator == "=" else not equal


@dataclass(slots=True)
class Compound:
    kind: Optional[str] = None
    attributes: List[Attribute] = field(default_factory=list)

    def matches(self, node: js.Node) -> bool:
        if self.kind is not None and node.type != self.kind:
            return False
        return all(attribute.matches(node) for attribute in self.attributes)


@dataclass(slots=True)
class Complex:
    parts: List[Compound]
    combinators: List[str]

    def matches(self, node: js.Node, ancestors: Sequence[js.Node]) -> bool:
        if not self.parts[-1].matches(node):
            return False
        return self._match_left(len(self.parts) - 2, ancestors)

    def _match_left(self, index: int, ancestors: Sequence[js.Node]) -> bool:
        if index < 0:
            return True
        compound = self.parts[index]
        if self.combinators[index] == ">":
            if not ancestors or not compound.matches(ancestors[-1]):
                return False
            return self._match_left(index - 1, ancestors[:-1])
        for depth in range(len(ancestors) - 1, -1, -1):
            if compound.matches(ancestors[depth]) and self._match_left(index - 1, ancestors[:depth]):
                return True
        return False


@dataclass(slots=True)
class Selector:
    source: str
    alternatives: List[Complex]

    def matches(self, node: js.Node, ancestors: Sequence[js.Node] = ()) -> bool:
        return any(alternative.matches(node, ancestors) for alternative in self.alternatives)

    def select(self, root: js.Node) -> List[js.Node]:
        """Return matching nodes under ``root`` (inclusive) in document order."""

        results: List[js.Node] = []
        stack: List[Tuple[js.Node, Tuple[js.Node, ...]]] = [(root, ())]
        while stack:
            node, ancestors = stack.pop()
            if self.matches(node, ancestors):
                results.append(node)
            lineage = ancestors + (node,)
            children = list(js.iter_child_nodes(node))
            stack.extend((child, lineage) for child in reversed(children))
        return results


def _field_name(segment: str) -> str:
    return _CAMEL.sub("_", segment).lower()


def _resolve(node: object, path: Tuple[str, ...]) -> object:
    current = node
    for segment in path:
        if current is None or current is _MISSING:
            return _MISSING
        if segment == "type" and isinstance(current, js.Node):
            current = current.type
            continue
        if isinstance(current, list):
            if segment == "length":
                current = len(current)
                continue
            if not segment.isdigit() or int(segment) >= len(current):
                return _MISSING
            current = current[int(segment)]
            continue
        current = getattr(current, _field_name(segment), _MISSING)
    return current


def _values_equal(actual: object, expected: object) -> bool:
    if isinstance(expected, bool) or isinstance(actual, bool):
        return isinstance(actual, bool) and isinstance(expected, bool) and actual == expected
    if expected is None:
        return actual is None
    if isinstance(expected, (int, float)):
        return isinstance(actual, (int, float)) and actual == expected
    return isinstance(actual, str) and actual == expected


class _SelectorParser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def fail(self, message: str) -> SelectorError:
        return SelectorError(f"{message} at offset {self.pos} in selector {self.text!r}")

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_spaces(self) -> bool:
        start = self.pos
        while self.peek().isspace():
            self.pos += 1
        return self.pos > start

    def expect(self, char: str) -> None:
        if self.peek() != char:
            raise self.fail(f"expected {char!r}")
        self.pos += 1

    def name(self) -> str:
        match = _NAME.match(self.text, self.pos)
        if match is None:
            raise self.fail("expected a name")
        self.pos = match.end()
        return match.group(0)

    def parse(self) -> Selector:
        alternatives = [self.complex()]
        while self.peek() == ",":
            self.pos += 1
            alternatives.append(self.complex())
        if self.pos != len(self.text):
            raise self.fail("unexpected character")
        return Selector(source=self.text, alternatives=alternatives)

    def complex(self) -> Complex:
        self.skip_spaces()
        parts = [self.compound()]
        combinators: List[str] = []
        while True:
            spaced = self.skip_spaces()
            char = self.peek()
            if char == ">":
                self.pos += 1
                self.skip_spaces()
                combinators.append(">")
            elif char in ("", ","):
                break
            elif spaced:
                combinators.append(" ")
            else:
                raise self.fail("unexpected character")
            parts.append(self.compound())
        return Complex(parts=parts, combinators=combinators)

    def compound(self) -> Compound:
        compound = Compound()
        if self.peek() == "*":
            self.pos += 1
        elif _NAME.match(self.text, self.pos):
            kind = self.name()
            if not isinstance(getattr(js, kind, None), type) or not issubclass(
                getattr(js, kind), js.Node
            ):
                raise self.fail(f"unknown node kind {kind!r}")
            compound.kind = kind
        elif self.peek() != "[":
            raise self.fail("expected a node kind, '*' or '['")
        while self.peek() == "[":
            compound.attributes.append(self.attribute())
        return compound

    def attribute(self) -> Attribute:
        self.expect("[")
        self.skip_spaces()
        path = [self.name()]
        while self.peek() == ".":
            self.pos += 1
            path.append(self.name())
        self.skip_spaces()
        attribute = Attribute(path=tuple(path))
        if self.text.startswith("!=", self.pos):
            attribute.operator = "!="
            self.pos += 2
        elif self.peek() == "=":
            attribute.operator = "="
            self.pos += 1
        if attribute.operator is not None:
            self.skip_spaces()
            attribute.value = self.value()
            self.skip_spaces()
        self.expect("]")
        return attribute

    def value(self) -> object:
        quote = self.peek()
        if quote in ("'", '"'):
            end = self.pos + 1
            chars: List[str] = []
            while end < len(self.text) and self.text[end] != quote:
                if self.text[end] == "\\" and end + 1 < len(self.text):
                    end += 1
                chars.append(self.text[end])
                end += 1
            if end >= len(self.text):
                raise self.fail("unterminated string")
            self.pos = end + 1
            return "".join(chars)
        number = _NUMBER.match(self.text, self.pos)
        if number is not None:
            self.pos = number.end()
            text = number.group(0)
            value = float(text)
            return int(value) if value.is_integer() and "." not in text and "e" not in text.lower() else value
        word = self.name()
        return _KEYWORD_VALUES.get(word, word)


@lru_cache(maxsize=256)
def compile_selector(text: str) -> Selector:
    """Parse ``text`` into a reusable :class:`Selector`."""

    if not text or not text.strip():
        raise SelectorError("empty selector")
    return _SelectorParser(text.strip()).parse()


def query(root: js.Node, selector: str | Selector) -> List[js.Node]:
    compiled = compile_selector(selector) if isinstance(selector, str) else selector
    results = compiled.select(root)
    LOG.debug("selector %r matched %d node(s)", compiled.source, len(results))
    return results


__all__ = ["Attribute", "Complex", "Compound", "Selector", "compile_selector", "query"]
