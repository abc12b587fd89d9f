"""Tests for template parsing."""

from pathlib import Path

import pytest

from stackref.exceptions import TemplateLoadError, TemplateParseError
from stackref.template import MapNode, ScalarNode, SeqNode, Template, load, parse
from stackref.template.loader import TemplateLoader


@pytest.mark.unit
class TestParse:
    """Test parse()."""

    def test_mapping_root(self):
        template = parse("Parameters:\n  Env:\n    Type: String\n")
        assert isinstance(template, Template)
        assert template.root.keys() == ["Parameters"]
        assert template.section("Parameters").keys() == ["Env"]

    def test_short_form_tag_kept(self):
        template = parse("A: !Ref Bucket\n")
        node = template.root.get("A")
        assert isinstance(node, ScalarNode)
        assert node.tag == "Ref"
        assert node.value == "Bucket"
        assert node.style is None
        # The node starts at its tag
        assert node.offset == 3

    def test_quoted_scalar_style_and_raw(self):
        node = parse('A: !Sub "x-${B}"\n').root.get("A")
        assert node.style == '"'
        assert node.value == "x-${B}"
        assert node.raw == '!Sub "x-${B}"'

    def test_single_quoted_style(self):
        assert parse("A: 'x'\n").root.get("A").style == "'"

    def test_block_scalar_style(self):
        node = parse("A: !Sub |\n  line ${B}\n").root.get("A")
        assert node.style == "|"
        assert node.value == "line ${B}\n"

    def test_tagged_sequence(self):
        node = parse("A: !If [Cond, a, b]\n").root.get("A")
        assert isinstance(node, SeqNode)
        assert node.tag == "If"
        assert [item.value for item in node.items] == ["Cond", "a", "b"]

    def test_core_tags_are_dropped(self):
        node = parse("A: !!str 5\nB: 7\n").root
        assert node.get("A").tag is None
        assert node.get("B").tag is None

    def test_key_offsets(self):
        source = "Resources:\n  Child:\n    Type: x\n"
        entry = parse(source).section("Resources").entry("Child")
        assert source[entry.key_offset : entry.key_offset + 5] == "Child"

    def test_duplicate_keys_last_wins(self):
        root = parse("A: 1\nA: 2\n").root
        assert root.get_str("A") == "2"
        assert root.keys() == ["A", "A"]

    def test_non_scalar_keys_dropped(self):
        root = parse("? [a, b]\n: 1\nB: 2\n").root
        assert root.keys() == ["B"]

    def test_get_str_ignores_tagged_values(self):
        root = parse("A: !Ref B\nC: plain\nD: {x: 1}\n").root
        assert root.get_str("A") is None
        assert root.get_str("C") == "plain"
        assert root.get_str("D") is None
        assert isinstance(root.get_map("D"), MapNode)

    def test_aliases_are_expanded(self):
        root = parse("A: &x {k: v}\nB: *x\n").root
        assert root.get_map("B").get_str("k") == "v"

    def test_empty_document(self):
        template = parse("")
        assert template.root.entries == ()
        assert template.section("Resources") is None

    def test_comment_only_document(self):
        assert parse("# nothing\n").root.keys() == []

    def test_directory_defaults_to_cwd(self):
        assert parse("A: 1\n").directory == Path.cwd()

    def test_directory_of_path(self, temp_dir):
        template = parse("A: 1\n", temp_dir / "stack.yaml")
        assert template.directory == temp_dir
        assert template.path == temp_dir / "stack.yaml"


@pytest.mark.unit
class TestParseErrors:
    """Test documents that cannot be analyzed."""

    def test_syntax_error_has_position(self):
        with pytest.raises(TemplateParseError) as exc_info:
            parse("A: [1, 2\nB: 3\n")
        assert exc_info.value.line is not None
        assert exc_info.value.column is not None

    def test_root_must_be_mapping(self):
        with pytest.raises(TemplateParseError, match="root must be a mapping"):
            parse("- a\n- b\n")

    def test_scalar_root(self):
        with pytest.raises(TemplateParseError):
            parse("just text\n")

    def test_multiple_documents(self):
        with pytest.raises(TemplateParseError):
            parse("A: 1\n---\nB: 2\n")

    def test_recursive_alias(self):
        with pytest.raises(TemplateParseError, match="recursive alias"):
            parse("A: &x [1, *x]\n")

    def test_error_carries_path(self, temp_dir):
        path = temp_dir / "bad.yaml"
        with pytest.raises(TemplateParseError) as exc_info:
            parse("A: [\n", path)
        assert exc_info.value.path == path


@pytest.mark.unit
class TestLoad:
    def test_load_file(self, write_template):
        path = write_template("stack.yaml", "Resources:\n  A:\n    Type: x\n")
        template = load(path)
        assert template.path == path
        assert template.section("Resources").keys() == ["A"]

    def test_missing_file(self, temp_dir):
        with pytest.raises(TemplateLoadError) as exc_info:
            load(temp_dir / "missing.yaml")
        assert exc_info.value.path == temp_dir / "missing.yaml"

    def test_undecodable_file(self, temp_dir):
        path = temp_dir / "binary.yaml"
        path.write_bytes(b"A: \xff\xfe\n")
        with pytest.raises(TemplateLoadError):
            load(path)

    def test_loader_dispose(self):
        loader = TemplateLoader("A: 1\n")
        try:
            assert loader.get_template().root.keys() == ["A"]
        finally:
            loader.dispose()
