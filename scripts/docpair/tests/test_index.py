"""Tests for the index documents written after a run."""

import json

from scripts.docpair.index import (
    SCHEMA_VERSION,
    build_sections_index,
    build_types_index,
    load_index,
    load_types_index,
    save_index,
)
from scripts.docpair.pipeline import parse_files


class TestSectionsIndex:
    """Tests for build_sections_index."""

    def test_structure(self, sample_source_tree):
        """Each parsed file gets an entry keyed by relative path."""
        src = sample_source_tree / "src"
        result = parse_files([src / "Canvas.cs", src / "Shapes" / "Circle.cs"], sample_source_tree)
        index = build_sections_index(result)

        assert index["schema_version"] == SCHEMA_VERSION
        assert index["file_count"] == 2
        assert set(index["files"]) == {"src/Canvas.cs", "src/Shapes/Circle.cs"}
        assert index["failures"] == []

        entry = index["files"]["src/Shapes/Circle.cs"]
        assert entry["output_path"] == "src/shapes/circle.html"
        assert entry["line_count"] == 20
        assert len(entry["sections"]) == 6
        assert entry["sections"][5]["code_start_line"] == 16

    def test_failures_listed(self, tmp_path):
        """Skipped files appear under failures."""
        (tmp_path / "Bad.cs").write_text("/* never closed\n")
        result = parse_files([tmp_path / "Bad.cs"], tmp_path, on_error="skip")
        index = build_sections_index(result)
        assert index["file_count"] == 0
        assert index["failures"][0]["file"] == "Bad.cs"
        assert index["failures"][0]["error"] == "unterminated_literal"


class TestTypesIndex:
    """Tests for the types index."""

    def test_structure(self, sample_source_tree):
        """The types index lists every declaration."""
        result = parse_files([sample_source_tree / "src" / "Canvas.cs"], sample_source_tree)
        index = build_types_index(result.registry)
        assert index["type_count"] == 4
        assert index["types"][0] == {"name": "Color", "kind": "enum", "file": "src/Canvas.cs", "line": 3}

    def test_save_and_load_registry(self, sample_source_tree, tmp_path):
        """A saved types index loads back into an equal registry."""
        result = parse_files([sample_source_tree / "src" / "Canvas.cs"], sample_source_tree)
        path = tmp_path / "out" / "nested" / "types.json"
        save_index(build_types_index(result.registry), path)

        assert path.exists()
        restored = load_types_index(path)
        assert list(restored) == list(result.registry)


class TestLoadIndex:
    """Tests for load_index."""

    def test_missing_returns_none(self, tmp_path):
        """A missing file loads as None."""
        assert load_index(tmp_path / "nope.json") is None
        assert load_types_index(tmp_path / "nope.json") is None

    def test_corrupt_returns_none(self, tmp_path):
        """Invalid JSON loads as None."""
        path = tmp_path / "types.json"
        path.write_text("{not json")
        assert load_index(path) is None

    def test_roundtrip_json(self, tmp_path):
        """save_index writes plain JSON."""
        path = tmp_path / "index.json"
        save_index({"a": 1}, path)
        assert json.loads(path.read_text()) == {"a": 1}
        assert load_index(path) == {"a": 1}
