"""
Tests for the lexicon and script adapters.
Run with: python -m pytest tests/ -v
"""

import json
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from minimalist import Derivation, Operation, bracket
from minimalist.adapters import (
    LexiconAdapter,
    ScriptAdapter,
    ScriptError,
    get_adapter,
)


SCENARIO_YAML = """\
lexicon: [John, left]
operations:
  - insert 0
  - insert 1
  - {op: select1, index: 0}
  - [select1, 0]
"""


class TestLexiconAdapter:
    """Test lexicon loading."""

    def test_list(self):
        assert LexiconAdapter().parse(["John", "left"]) == ("John", "left")

    def test_mapping(self):
        assert LexiconAdapter().parse({"lexicon": ["who"]}) == ("who",)

    def test_json_string(self):
        assert LexiconAdapter().parse('["John", "likes", "who"]') == ("John", "likes", "who")

    def test_plain_text(self):
        text = "# words\nJohn\n\nlikes  # verb\nwho\n"
        assert LexiconAdapter().parse(text) == ("John", "likes", "who")

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "lexicon.yaml"
        path.write_text("lexicon:\n  - the\n  - boy\n")
        assert LexiconAdapter().parse(path) == ("the", "boy")

    def test_toml_file(self, tmp_path):
        path = tmp_path / "lexicon.toml"
        path.write_text('lexicon = ["the", "boy"]\n')
        assert LexiconAdapter().parse(str(path)) == ("the", "boy")

    def test_text_file(self, tmp_path):
        path = tmp_path / "lexicon.txt"
        path.write_text("John\nleft\n")
        assert LexiconAdapter().parse(path) == ("John", "left")

    def test_forced_format(self):
        assert LexiconAdapter().parse("- John\n- left\n", fmt="yaml") == ("John", "left")

    def test_rejects_non_words(self):
        with pytest.raises(ScriptError):
            LexiconAdapter().parse(["John", 3])
        with pytest.raises(ScriptError):
            LexiconAdapter().parse({"words": ["John"]})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LexiconAdapter().parse_file(tmp_path / "nope.json")

    def test_missing_path_is_not_read_as_text(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LexiconAdapter().parse(str(tmp_path / "lexicon.yaml"))
        with pytest.raises(FileNotFoundError):
            LexiconAdapter().parse(str(tmp_path / "lexicon.txt"))
        with pytest.raises(FileNotFoundError):
            LexiconAdapter().parse(tmp_path / "lexicon.json")

    def test_inline_text_still_parses(self):
        assert LexiconAdapter().parse("John") == ("John",)
        assert LexiconAdapter().parse("the boy") == ("the boy",)

    def test_parse_directory(self, tmp_path, capsys):
        (tmp_path / "a.json").write_text(json.dumps(["John"]))
        (tmp_path / "b.txt").write_text("left\n")
        (tmp_path / "c.json").write_text("{not json")

        results = LexiconAdapter().parse_directory(tmp_path)

        assert results == {"a.json": ("John",), "b.txt": ("left",)}
        assert "Warning" in capsys.readouterr().out


class TestScriptAdapter:
    """Test operation scripts."""

    def test_shapes(self):
        operations = ScriptAdapter().parse([
            {"op": "insert", "index": 0},
            ["select1", 0],
            "select2 3",
            "spellout(1)",
            Operation.select_external(2),
        ])
        assert operations == [
            Operation.insert(0),
            Operation.select_external(0),
            Operation.select_internal(3),
            Operation.select_spellout(1),
            Operation.select_external(2),
        ]

    def test_plain_text(self):
        operations = ScriptAdapter().parse("# build\nselect1 0\nselect3 0  # flatten\n")
        assert operations == [Operation.select_external(0), Operation.select_spellout(0)]

    def test_load_with_lexicon(self, tmp_path):
        path = tmp_path / "scenario.yaml"
        path.write_text(SCENARIO_YAML)

        lexicon, operations = ScriptAdapter().load(path)
        step = Derivation(lexicon).run(operations)

        assert lexicon == ("John", "left")
        assert bracket(step.os) == "[ John [ left ] ]"

    def test_load_json(self):
        source = json.dumps({
            "lexicon": ["John", "left"],
            "operations": [["insert", 0], ["insert", 1], ["select1", 0], ["select1", 0]],
        })
        lexicon, operations = ScriptAdapter().load(source)
        assert len(operations) == 4

    def test_load_toml(self, tmp_path):
        path = tmp_path / "scenario.toml"
        path.write_text('lexicon = ["John"]\noperations = ["insert 0", "select1 0"]\n')

        lexicon, operations = ScriptAdapter().load(path)

        assert lexicon == ("John",)
        assert operations == [Operation.insert(0), Operation.select_external(0)]

    def test_bare_list_has_no_lexicon(self):
        lexicon, operations = ScriptAdapter().load([["select1", 0]])
        assert lexicon == ()
        assert operations == [Operation.select_external(0)]

    def test_unknown_operation(self):
        with pytest.raises(ScriptError) as exc:
            ScriptAdapter().parse(["select1 0", "adjoin 1"])
        assert "Operation 1" in str(exc.value)

    def test_bad_index(self):
        with pytest.raises(ScriptError):
            ScriptAdapter().parse([["select1", "zero"]])
        with pytest.raises(ScriptError):
            ScriptAdapter().parse([{"op": "select1", "index": True}])
        with pytest.raises(ScriptError):
            ScriptAdapter().parse([{"op": "select1", "index": 1.9}])
        with pytest.raises(ScriptError):
            ScriptAdapter().parse(["select1 1.5"])

    def test_whole_number_indices(self):
        operations = ScriptAdapter().parse([
            {"op": "select1", "index": 1.0},
            ["insert", "2"],
            "select2 -1",
        ])
        assert operations == [
            Operation.select_external(1),
            Operation.insert(2),
            Operation.select_internal(-1),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ScriptAdapter().load(str(tmp_path / "missing.txt"))
        with pytest.raises(FileNotFoundError):
            ScriptAdapter().load(str(tmp_path / "missing.yaml"))
        with pytest.raises(FileNotFoundError):
            ScriptAdapter().load(tmp_path / "missing.json")

    def test_malformed_entries(self):
        with pytest.raises(ScriptError):
            ScriptAdapter().parse([{"op": "select1"}])
        with pytest.raises(ScriptError):
            ScriptAdapter().parse([["select1", 0, 1]])
        with pytest.raises(ScriptError):
            ScriptAdapter().parse(["select1"])
        with pytest.raises(ScriptError):
            ScriptAdapter().load({"lexicon": ["John"]})


class TestGetAdapter:
    """Test adapter lookup."""

    def test_known(self):
        assert get_adapter("lexicon") is LexiconAdapter
        assert get_adapter("Script") is ScriptAdapter

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_adapter("xml")


# Run with pytest
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
