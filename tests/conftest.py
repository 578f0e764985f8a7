"""Test configuration ensuring the project source tree is importable."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)
else:
    idx = sys.path.index(root_str)
    if idx != 0:
        sys.path.insert(0, sys.path.pop(idx))


@pytest.fixture
def parse():
    """Return :func:`jsrefactor.parser.parse_script`, skipping without the grammar."""

    pytest.importorskip("tree_sitter_javascript")
    from jsrefactor.parser import parse_script

    return parse_script


@pytest.fixture
def same_tree(parse):
    """Compare a tree with the parse of ``expected``, showing both as source on failure."""

    from jsrefactor.codegen import to_source

    def check(tree, expected: str) -> None:
        wanted = parse(expected)
        assert to_source(tree) == to_source(wanted)
        assert tree == wanted

    return check


@pytest.fixture
def js_file(tmp_path):
    def write(source: str, name: str = "input.js") -> Path:
        path = tmp_path / name
        path.write_text(source, encoding="utf-8")
        return path

    return write
