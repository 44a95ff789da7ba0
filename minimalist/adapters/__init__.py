"""
minimalist Adapters

Adapters read the inputs of a derivation out of files and strings.
Each adapter accepts an in-memory value, a path, or raw text and
returns core values.

Available adapters:
    - LexiconAdapter: word lists (JSON, YAML, TOML, plain text)
    - ScriptAdapter: operation sequences, optionally with their lexicon

Usage:
    from minimalist.adapters import ScriptAdapter

    lexicon, operations = ScriptAdapter().load("scenario.yaml")
"""

from .base import BaseAdapter, FileAdapter, JSONAdapter, ScriptError
from .lexicon import LexiconAdapter
from .script import ScriptAdapter

__all__ = [
    # Base classes
    "BaseAdapter",
    "FileAdapter",
    "JSONAdapter",
    "ScriptError",

    # Adapters
    "LexiconAdapter",
    "ScriptAdapter",
]

# Convenience mapping
ADAPTERS = {
    "lexicon": LexiconAdapter,
    "lex": LexiconAdapter,
    "words": LexiconAdapter,
    "script": ScriptAdapter,
    "operations": ScriptAdapter,
    "derivation": ScriptAdapter,
}


def get_adapter(name: str) -> type:
    """
    Get adapter class by name.

    Args:
        name: Adapter name (e.g., "lexicon", "script")

    Returns:
        Adapter class

    Example:
        AdapterClass = get_adapter("script")
        operations = AdapterClass().parse("scenario.json")
    """
    name_lower = name.lower()
    if name_lower not in ADAPTERS:
        raise ValueError(f"Unknown adapter: {name}. Available: {list(ADAPTERS.keys())}")
    return ADAPTERS[name_lower]
