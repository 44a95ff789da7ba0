"""
Minimalist: Stepwise Derivation of Syntactic Objects

Build trees the way a minimalist grammar does:
draw atoms from a pool, merge them into one growing structure,
move constituents by re-merging them, and spell finished pieces
back into the pool as single units.

Four operations, one addressing scheme:
    - insert: lexicon -> resource space
    - select1 (external merge): resource space -> operating space
    - select2 (internal merge): movement within the operating space
    - select3 (spellout): operating space -> resource space

Every transition is pure. The Derivation wrapper keeps a
hash-chained log of every step it takes.
"""

__version__ = "0.1.0"

from .core import (
    # Errors
    DerivationError,
    IndexOutOfRange,
    EmptyOperatingSpace,
    InvalidLexiconIndex,
    ConstituentNotFound,

    # Syntactic objects
    Terminal,
    Unary,
    Binary,
    SyntacticObject,
    Lexicon,
    ResourceSpace,
    OperatingSpace,

    # Structure
    merge,
    preorder,
    constituent,
    node_count,
    terminals,
    depth,

    # State and transitions
    DerivationStep,
    RemovalPolicy,
    is_complete,
    insert,
    select_external,
    select_internal,
    select_spellout,
    remove,

    # Operations
    OperationKind,
    Operation,
    apply,

    # Presentation
    bracket,
    linearize,

    # Helpers
    lexicon_of,
    resources_of,
)

from .derivation import (
    DerivationLog,
    LogEntry,
    Transition,
    Derivation,
    create_derivation,
    step_digest,
)

# Import adapters subpackage
from . import adapters

# Short names, as the operations are usually written
select1 = select_external
select2 = select_internal
select3 = select_spellout

__all__ = [
    # Version
    "__version__",

    # Errors
    "DerivationError",
    "IndexOutOfRange",
    "EmptyOperatingSpace",
    "InvalidLexiconIndex",
    "ConstituentNotFound",

    # Syntactic objects
    "Terminal",
    "Unary",
    "Binary",
    "SyntacticObject",
    "Lexicon",
    "ResourceSpace",
    "OperatingSpace",

    # Structure
    "merge",
    "preorder",
    "constituent",
    "node_count",
    "terminals",
    "depth",

    # State and transitions
    "DerivationStep",
    "RemovalPolicy",
    "is_complete",
    "insert",
    "select_external",
    "select_internal",
    "select_spellout",
    "select1",
    "select2",
    "select3",
    "remove",

    # Operations
    "OperationKind",
    "Operation",
    "apply",

    # Presentation
    "bracket",
    "linearize",

    # The wrapper
    "DerivationLog",
    "LogEntry",
    "Transition",
    "Derivation",
    "create_derivation",
    "step_digest",

    # Helpers
    "lexicon_of",
    "resources_of",

    # Adapters
    "adapters",
]
