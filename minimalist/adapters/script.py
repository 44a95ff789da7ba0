"""
Derivation Script Adapter for minimalist

Reads a sequence of operations (and optionally the lexicon they run
against) so a whole derivation can be written down and replayed.

Accepted shapes for the operations:
- mappings:        [{"op": "insert", "index": 0}, {"op": "select1", "index": 0}]
- pairs:           [["insert", 0], ["select1", 0]]
- strings:         ["insert 0", "select1 0"]
- plain text:      one "name index" per line ('#' starts a comment)

A structured script may wrap them with its lexicon:

    lexicon: [John, left]
    operations:
      - insert 0
      - insert 1
      - select1 0
      - select1 0

Usage:
    adapter = ScriptAdapter()
    lexicon, operations = adapter.load("scenario.yaml")
    Derivation(lexicon).run(operations)
"""

from typing import Any, List, Optional, Tuple
from pathlib import Path
import re

from .base import JSONAdapter, ScriptError
from .lexicon import LexiconAdapter, TEXT_EXTENSIONS, _strip_comment
from minimalist.core import DerivationError, Lexicon, Operation


INDEX_PATTERN = re.compile(r"^-?\d+$")


class ScriptAdapter(JSONAdapter):
    """Adapter for derivation scripts."""

    DOMAIN_NAME = "script"
    SUPPORTED_EXTENSIONS = JSONAdapter.SUPPORTED_EXTENSIONS + TEXT_EXTENSIONS

    def __init__(self):
        self._lexicons = LexiconAdapter()

    def _index(self, position: int, index: Any) -> int:
        """Whole numbers only: ints, integral floats, and digit strings."""
        if isinstance(index, int) and not isinstance(index, bool):
            return index
        if isinstance(index, float) and index.is_integer():
            return int(index)
        if isinstance(index, str) and INDEX_PATTERN.match(index.strip()):
            return int(index.strip())
        raise ScriptError(f"Operation {position}: index must be an integer, got {index!r}")

    def _operation(self, position: int, name: Any, index: Any) -> Operation:
        if not isinstance(name, str):
            raise ScriptError(f"Operation {position}: name must be a string, got {name!r}")
        index = self._index(position, index)
        try:
            return Operation.parse(name, index)
        except DerivationError as e:
            raise ScriptError(f"Operation {position}: {e}") from e

    def parse_entry(self, position: int, entry: Any) -> Operation:
        """Turn one script entry, in any accepted shape, into an Operation."""
        if isinstance(entry, Operation):
            return entry

        if isinstance(entry, dict):
            name = entry.get("op", entry.get("operation"))
            if name is None or "index" not in entry:
                raise ScriptError(f"Operation {position}: needs 'op' and 'index': {entry!r}")
            return self._operation(position, name, entry["index"])

        if isinstance(entry, (list, tuple)):
            if len(entry) != 2:
                raise ScriptError(f"Operation {position}: expected [name, index], got {entry!r}")
            return self._operation(position, entry[0], entry[1])

        if isinstance(entry, str):
            parts = entry.replace(",", " ").replace("(", " ").replace(")", " ").split()
            if len(parts) != 2:
                raise ScriptError(f"Operation {position}: expected 'name index', got {entry!r}")
            return self._operation(position, parts[0], parts[1])

        raise ScriptError(f"Operation {position}: cannot read {entry!r}")

    def parse_text(self, text: str) -> List[Operation]:
        """One operation per non-blank line."""
        lines = [_strip_comment(line) for line in text.splitlines()]
        return self.parse_entries([line for line in lines if line])

    def parse_entries(self, entries: Any) -> List[Operation]:
        if not isinstance(entries, (list, tuple)):
            raise ScriptError(f"Operations must be a list, got {type(entries).__name__}")
        return [self.parse_entry(i, entry) for i, entry in enumerate(entries)]

    def _is_text(self, source: Any) -> bool:
        return self._lexicons._is_text(source)

    def _read_text(self, source: Any) -> str:
        if isinstance(source, Path):
            return source.read_text()
        path = self._as_path(source)
        return path.read_text() if path is not None else source

    def load(self, source: Any, fmt: Optional[str] = None) -> Tuple[Lexicon, List[Operation]]:
        """
        Parse a script and the lexicon it carries.

        Returns:
            (lexicon, operations). The lexicon is empty when the script
            has none.
        """
        if fmt is None:
            self.require_file(source)
        if fmt == "text" or (fmt is None and self._is_text(source)):
            return (), self.parse_text(self._read_text(source))

        data = self.load_structured(source, fmt)
        if isinstance(data, dict):
            if "operations" not in data:
                raise ScriptError("Script mapping has no 'operations' key")
            lexicon = self._lexicons.validate(data["lexicon"]) if "lexicon" in data else ()
            return lexicon, self.parse_entries(data["operations"])

        return (), self.parse_entries(data)

    def parse(self, source: Any, fmt: Optional[str] = None) -> List[Operation]:
        """Parse only the operations of a script."""
        return self.load(source, fmt)[1]
