"""Shared fixtures for docpair tests."""

import io

import pytest

from scripts.docpair.parser import parse_lines
from scripts.docpair.registry import TypeRegistry
from scripts.docpair.tests.samples import CANVAS_SOURCE, SHAPES_SOURCE
from scripts.docpair.tokenizer import tokenize_text


@pytest.fixture
def sample_source_tree(tmp_path):
    """Create a small C# project with known types."""
    src = tmp_path / "src"
    (src / "Shapes").mkdir(parents=True)
    (src / "Shapes" / "Circle.cs").write_text(SHAPES_SOURCE, encoding="utf-8")
    (src / "Canvas.cs").write_text(CANVAS_SOURCE, encoding="utf-8")

    # Build output should never be picked up
    obj = src / "obj"
    obj.mkdir()
    (obj / "Generated.cs").write_text("class Generated {}\n", encoding="utf-8")

    (src / "notes.txt").write_text("class NotSource\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def registry():
    """A fresh, empty type registry."""
    return TypeRegistry()


@pytest.fixture
def parse_text(registry):
    """Parse source text into classified lines against the registry fixture."""
    def _parse(text, rel_path="Sample.cs"):
        tokens = tokenize_text(text)
        return parse_lines(tokens, io.StringIO(text), registry, rel_path)

    return _parse
