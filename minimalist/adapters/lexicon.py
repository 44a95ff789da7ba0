"""
Lexicon Adapter for minimalist

Reads a lexicon (the ordered list of words insertion draws from) out of
JSON, YAML, TOML, or plain text.

Accepted shapes:
- a list of strings:            ["John", "likes", "who"]
- a mapping with "lexicon":     {"lexicon": ["John", "likes", "who"]}
- plain text, one item per line ('#' starts a comment)

Usage:
    adapter = LexiconAdapter()
    lexicon = adapter.parse("lexicon.yaml")
    derivation = Derivation(lexicon)
"""

from typing import Any, List, Optional
from pathlib import Path

from .base import JSONAdapter, ScriptError
from minimalist.core import Lexicon


TEXT_EXTENSIONS = [".txt", ".lex"]


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].strip()


class LexiconAdapter(JSONAdapter):
    """Adapter for lexicon files."""

    DOMAIN_NAME = "lexicon"
    SUPPORTED_EXTENSIONS = JSONAdapter.SUPPORTED_EXTENSIONS + TEXT_EXTENSIONS

    def parse_text(self, text: str) -> Lexicon:
        """One lexical item per non-blank line."""
        items = [_strip_comment(line) for line in text.splitlines()]
        return tuple(item for item in items if item)

    def _is_text(self, source: Any) -> bool:
        if isinstance(source, Path):
            return source.suffix.lower() in TEXT_EXTENSIONS
        if isinstance(source, str):
            path = self._as_path(source)
            if path is not None:
                return path.suffix.lower() in TEXT_EXTENSIONS
            return not source.lstrip().startswith(("[", "{"))
        return False

    def validate(self, data: Any) -> Lexicon:
        """Check a loaded value is a list of strings and freeze it."""
        if isinstance(data, dict):
            if "lexicon" not in data:
                raise ScriptError("Lexicon mapping has no 'lexicon' key")
            data = data["lexicon"]

        if not isinstance(data, (list, tuple)):
            raise ScriptError(f"Lexicon must be a list, got {type(data).__name__}")

        items: List[str] = []
        for position, item in enumerate(data):
            if not isinstance(item, str) or not item.strip():
                raise ScriptError(f"Lexicon item {position} is not a word: {item!r}")
            items.append(item.strip())
        return tuple(items)

    def parse(self, source: Any, fmt: Optional[str] = None) -> Lexicon:
        """
        Parse a lexicon from a value, a file, or text.

        fmt forces a format for raw strings ("json", "yaml", "toml", "text").
        """
        if fmt is None:
            self.require_file(source)
        if fmt == "text" or (fmt is None and self._is_text(source)):
            if isinstance(source, Path):
                return self.parse_text(source.read_text())
            path = self._as_path(source)
            return self.parse_text(path.read_text() if path is not None else source)
        return self.validate(self.load_structured(source, fmt))
