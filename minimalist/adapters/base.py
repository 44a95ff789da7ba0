"""
Base Adapter Interface for minimalist

Adapters read the things a derivation is driven by (lexicons and
operation scripts) out of whatever format they were written in.
The derivation engine stays format-agnostic. Formats live here.

Every adapter must:
1. Accept an in-memory value, a file path, or raw text
2. Load the structured content (JSON, YAML, TOML, or plain lines)
3. Validate it and raise ScriptError naming the bad entry
4. Return core values (a Lexicon, a list of Operations)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union
from pathlib import Path
import json

from minimalist.core import DerivationError


class ScriptError(DerivationError):
    """Raised when a lexicon or script source is malformed."""
    pass


class BaseAdapter(ABC):
    """
    Abstract base class for all minimalist adapters.

    Subclasses implement parse() for one kind of content.
    """

    # Override in subclass
    DOMAIN_NAME: str = "base"

    @abstractmethod
    def parse(self, source: Any) -> Any:
        """
        Parse source into core values.

        Args:
            source: In-memory value, file path, or text

        Returns:
            The adapter's core value
        """
        pass

    def parse_many(self, sources: List[Any]) -> List[Any]:
        """Parse multiple sources."""
        return [self.parse(source) for source in sources]


class FileAdapter(BaseAdapter):
    """Base adapter for file-based sources."""

    SUPPORTED_EXTENSIONS: List[str] = []

    def parse_file(self, path: Path) -> Any:
        """Parse a file by path."""
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return self.parse(path)

    def parse_directory(self, directory: Path, recursive: bool = False) -> Dict[str, Any]:
        """Parse all supported files in a directory, keyed by file name."""
        results = {}

        pattern = "**/*" if recursive else "*"
        for ext in self.SUPPORTED_EXTENSIONS:
            for path in sorted(directory.glob(f"{pattern}{ext}")):
                try:
                    results[str(path.relative_to(directory))] = self.parse_file(path)
                except (OSError, DerivationError) as e:
                    print(f"Warning: Failed to parse {path}: {e}")

        return results


class JSONAdapter(FileAdapter):
    """
    Base adapter for structured formats.

    JSON is read with the standard library, YAML with PyYAML, TOML with
    tomllib (or the toml package before Python 3.11).
    """

    SUPPORTED_EXTENSIONS = [".json", ".yaml", ".yml", ".toml"]

    def _as_path(self, source: Union[str, Path]) -> Union[Path, None]:
        if isinstance(source, Path):
            return source
        if "\n" in source or len(source) > 4096:
            return None
        path = Path(source)
        try:
            return path if path.is_file() else None
        except OSError:
            return None

    def require_file(self, source: Any) -> None:
        """
        Raise FileNotFoundError when source names a missing file.

        A one-line string ending in a supported extension is a path,
        not inline content.
        """
        if isinstance(source, Path):
            if not source.is_file():
                raise FileNotFoundError(f"File not found: {source}")
            return
        if not isinstance(source, str) or "\n" in source:
            return
        suffix = Path(source.strip()).suffix.lower()
        if suffix in self.SUPPORTED_EXTENSIONS and self._as_path(source) is None:
            raise FileNotFoundError(f"File not found: {source}")

    def load_json(self, source: Any) -> Any:
        """Load JSON from file path, string, or already-parsed value."""
        if isinstance(source, (dict, list)):
            return source

        if isinstance(source, (str, Path)):
            path = self._as_path(source)
            text = path.read_text() if path is not None else source
            try:
                return json.loads(text)
            except json.JSONDecodeError as e:
                raise ScriptError(f"Invalid JSON: {e}") from e

        raise ScriptError(f"Cannot load JSON from {type(source)}")

    def load_yaml(self, source: Union[str, Path]) -> Any:
        """Load YAML from file path or string."""
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML files: pip install pyyaml")

        path = self._as_path(source)
        text = path.read_text() if path is not None else str(source)
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ScriptError(f"Invalid YAML: {e}") from e

    def load_toml(self, source: Union[str, Path]) -> Any:
        """Load TOML from file path or string."""
        try:
            import tomllib
        except ImportError:
            try:
                import toml as tomllib
            except ImportError:
                raise ImportError("tomllib (Python 3.11+) or toml package required")

        path = self._as_path(source)
        text = path.read_text() if path is not None else str(source)
        try:
            return tomllib.loads(text)
        except ValueError as e:
            raise ScriptError(f"Invalid TOML: {e}") from e

    def load_structured(self, source: Any, fmt: Optional[str] = None) -> Any:
        """
        Load from any supported format.

        The format is fmt if given ("json", "yaml", "toml"), otherwise
        the file suffix, otherwise JSON.
        """
        if isinstance(source, (dict, list, tuple)):
            return source

        if fmt is not None:
            suffix = "." + fmt.lower().lstrip(".")
        elif isinstance(source, (str, Path)):
            path = self._as_path(source)
            suffix = path.suffix.lower() if path is not None else ""
        else:
            suffix = ""

        if suffix in (".yaml", ".yml"):
            return self.load_yaml(source)
        if suffix == ".toml":
            return self.load_toml(source)
        return self.load_json(source)
