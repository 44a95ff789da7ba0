"""
Minimalist: Stepwise Derivation of Syntactic Objects

A derivation does not parse a sentence. It builds one.
Start with a pool of atoms, pick them up one at a time, and merge them
into a single growing structure. Move things by re-merging them.
Flatten finished pieces back into the pool and use them as atoms.

This module provides the primitives:
- SyntacticObject: the immutable tree (Terminal, Unary, Binary)
- merge: the only structure-building operation
- preorder: deterministic addressing of every constituent
- DerivationStep: the (resource space, operating space) snapshot
- insert / select_external / select_internal / select_spellout:
  the state transitions
- bracket: the labelled-bracket rendering

Everything here is pure. No I/O, no logging, no mutation.
The Derivation wrapper (minimalist.derivation) keeps the record.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union


# =============================================================================
# ERRORS: Every partial operation fails loudly and by name
# =============================================================================

class DerivationError(ValueError):
    """Base class for everything a derivation step can reject."""
    pass


class IndexOutOfRange(DerivationError, IndexError):
    """Raised when a position does not address anything."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Index {requested} out of range: {available} item(s) available"
        )


class EmptyOperatingSpace(DerivationError):
    """Raised when an operation needs an operating space and there is none."""

    def __init__(self, message: str = "Operating space is empty"):
        super().__init__(message)


class InvalidLexiconIndex(DerivationError, IndexError):
    """Raised when insertion names a lexicon position that does not exist."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Lexicon index {requested} invalid: lexicon has {available} item(s)"
        )


class ConstituentNotFound(DerivationError):
    """Raised when spellout cannot detach a constituent from a Binary node."""

    def __init__(self, constituent: "SyntacticObject"):
        self.constituent = constituent
        super().__init__(
            f"Constituent {bracket(constituent)} is not an immediate daughter "
            f"of the operating space"
        )


# =============================================================================
# SYNTACTIC OBJECT: The recursive tree
# =============================================================================

@dataclass(frozen=True, slots=True)
class Terminal:
    """A leaf. Holds one atomic string."""

    text: str

    def __str__(self) -> str:
        return bracket(self)


@dataclass(frozen=True, slots=True)
class Unary:
    """A node with exactly one daughter."""

    child: "SyntacticObject"

    def __str__(self) -> str:
        return bracket(self)


@dataclass(frozen=True, slots=True)
class Binary:
    """
    A node with two daughters.

    By construction (see merge), `left` is the item that was just
    selected and `right` is what the operating space held before.
    """

    left: "SyntacticObject"
    right: "SyntacticObject"

    def __str__(self) -> str:
        return bracket(self)


SyntacticObject = Union[Terminal, Unary, Binary]

# Lexicon: read-only, addressed by position
Lexicon = Tuple[str, ...]

# Resource space: ordered pool of independently selectable objects
ResourceSpace = Tuple[SyntacticObject, ...]

# Operating space: the one active tree, or nothing yet
OperatingSpace = Optional[SyntacticObject]


def _unknown(so: Any) -> DerivationError:
    return DerivationError(f"Not a syntactic object: {so!r}")


def to_dict(so: SyntacticObject) -> Dict[str, Any]:
    """Serialize a syntactic object to plain data."""
    if isinstance(so, Terminal):
        return {"terminal": so.text}
    if isinstance(so, Unary):
        return {"unary": to_dict(so.child)}
    if isinstance(so, Binary):
        return {"binary": [to_dict(so.left), to_dict(so.right)]}
    raise _unknown(so)


def from_dict(data: Dict[str, Any]) -> SyntacticObject:
    """Deserialize a syntactic object written by to_dict."""
    if not isinstance(data, dict) or len(data) != 1:
        raise DerivationError(f"Cannot read syntactic object from {data!r}")
    if "terminal" in data:
        if not isinstance(data["terminal"], str):
            raise DerivationError(f"Terminal text must be a string: {data!r}")
        return Terminal(data["terminal"])
    if "unary" in data:
        return Unary(from_dict(data["unary"]))
    if "binary" in data:
        daughters = data["binary"]
        if not isinstance(daughters, (list, tuple)) or len(daughters) != 2:
            raise DerivationError(f"Binary node needs exactly two daughters: {data!r}")
        return Binary(from_dict(daughters[0]), from_dict(daughters[1]))
    raise DerivationError(f"Cannot read syntactic object from {data!r}")


# =============================================================================
# MERGE: The single structure-building primitive
# =============================================================================

def merge(xp: SyntacticObject, yp: OperatingSpace = None) -> SyntacticObject:
    """
    Merge xp with yp.

    Merging with nothing is a no-op: merge(xp) is xp.
    Otherwise a new Binary node with xp as first daughter.
    """
    if yp is None:
        return xp
    return Binary(xp, yp)


# =============================================================================
# PREORDER: Addressing every constituent by position
# =============================================================================

def preorder(so: SyntacticObject) -> List[SyntacticObject]:
    """
    Every constituent of so, root first, then daughters left to right.

    Index 0 is always so itself. Recomputed on every call.
    Walks an explicit stack, so depth is bounded by memory only.
    """
    nodes: List[SyntacticObject] = []
    stack = [so]
    while stack:
        node = stack.pop()
        nodes.append(node)
        if isinstance(node, Binary):
            # right first so left is visited first
            stack.append(node.right)
            stack.append(node.left)
        elif isinstance(node, Unary):
            stack.append(node.child)
        elif not isinstance(node, Terminal):
            raise _unknown(node)
    return nodes


def constituent(so: SyntacticObject, n: int) -> SyntacticObject:
    """The constituent at preorder position n."""
    nodes = preorder(so)
    if not (0 <= n < len(nodes)):
        raise IndexOutOfRange(n, len(nodes))
    return nodes[n]


def node_count(so: SyntacticObject) -> int:
    """Terminals plus internal nodes."""
    return len(preorder(so))


def terminals(so: SyntacticObject) -> List[Terminal]:
    """The leaves of so, in preorder."""
    return [node for node in preorder(so) if isinstance(node, Terminal)]


def depth(so: SyntacticObject) -> int:
    """Height of the tree. A terminal has depth 0."""
    deepest = 0
    stack = [(so, 0)]
    while stack:
        node, level = stack.pop()
        deepest = max(deepest, level)
        if isinstance(node, Binary):
            stack.append((node.left, level + 1))
            stack.append((node.right, level + 1))
        elif isinstance(node, Unary):
            stack.append((node.child, level + 1))
        elif not isinstance(node, Terminal):
            raise _unknown(node)
    return deepest


# =============================================================================
# DERIVATION STEP: The state threaded through every transition
# =============================================================================

@dataclass(frozen=True, slots=True)
class DerivationStep:
    """
    One snapshot of a derivation.

    rs: the resource space, most recently inserted first
    os: the operating space, None until the first merge
    """

    rs: ResourceSpace = ()
    os: OperatingSpace = None

    def __post_init__(self):
        if not isinstance(self.rs, tuple):
            object.__setattr__(self, "rs", tuple(self.rs))

    @classmethod
    def initial(cls, items: Sequence[SyntacticObject] = ()) -> "DerivationStep":
        """A fresh step: the given items in the pool, nothing merged yet."""
        return cls(tuple(items), None)

    @property
    def is_complete(self) -> bool:
        return is_complete(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rs": [to_dict(so) for so in self.rs],
            "os": to_dict(self.os) if self.os is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DerivationStep":
        if not isinstance(data, dict) or not isinstance(data.get("rs", []), list):
            raise DerivationError(f"Cannot read derivation step from {data!r}")
        os = data.get("os")
        return cls(
            tuple(from_dict(item) for item in data.get("rs", [])),
            from_dict(os) if os is not None else None,
        )

    def __str__(self) -> str:
        pool = ", ".join(bracket(so) for so in self.rs)
        tree = bracket(self.os) if self.os is not None else "-"
        return f"RS = [{pool}]  OS = {tree}"


def is_complete(step: DerivationStep) -> bool:
    """Nothing left to select and exactly one tree built."""
    return len(step.rs) == 0 and step.os is not None


# =============================================================================
# TRANSITIONS: One step in, one step out
# =============================================================================

class RemovalPolicy(Enum):
    """
    What spellout does when a Binary operating space has no immediate
    daughter equal to the spelled-out constituent.
    """
    STRICT = auto()    # raise ConstituentNotFound
    LENIENT = auto()   # leave the operating space as it was


def insert(lexicon: Sequence[str], index: int, rs: ResourceSpace) -> ResourceSpace:
    """Put lexicon[index] in front of the resource space as a Terminal."""
    if not (0 <= index < len(lexicon)):
        raise InvalidLexiconIndex(index, len(lexicon))
    return (Terminal(lexicon[index]),) + tuple(rs)


def select_external(n: int, step: DerivationStep) -> DerivationStep:
    """
    External merge (select1).

    Take rs[n] out of the pool and merge it with the operating space.
    The first call on an empty operating space just installs the item.
    """
    rs = step.rs
    if not (0 <= n < len(rs)):
        raise IndexOutOfRange(n, len(rs))
    removed = rs[n]
    return DerivationStep(rs[:n] + rs[n + 1:], merge(removed, step.os))


def select_internal(n: int, step: DerivationStep) -> DerivationStep:
    """
    Internal merge (select2): movement.

    Re-merge preorder(os)[n] with the whole operating space. The
    original occurrence stays where it was. n = 0 merges the tree with
    itself.
    """
    if step.os is None:
        raise EmptyOperatingSpace()
    target = constituent(step.os, n)
    return DerivationStep(step.rs, merge(target, step.os))


def remove(
    xp: SyntacticObject,
    os: OperatingSpace,
    policy: RemovalPolicy = RemovalPolicy.STRICT,
) -> OperatingSpace:
    """
    Detach xp from the operating space.

    Deliberately shallow: only the whole tree or one of the two
    daughters of a Binary root can be detached. A Unary root is never
    searched below itself.
    """
    if os is None:
        return None
    if xp == os:
        return None
    if isinstance(os, (Terminal, Unary)):
        return os
    if isinstance(os, Binary):
        if xp == os.left:
            return os.right
        if xp == os.right:
            return os.left
        if policy is RemovalPolicy.LENIENT:
            return os
        raise ConstituentNotFound(xp)
    raise _unknown(os)


def select_spellout(
    n: int,
    step: DerivationStep,
    policy: RemovalPolicy = RemovalPolicy.STRICT,
) -> DerivationStep:
    """
    Spellout (select3).

    Push preorder(os)[n] into the front of the resource space as one
    unit and detach it from the operating space.
    """
    if step.os is None:
        raise EmptyOperatingSpace()
    xp = constituent(step.os, n)
    return DerivationStep((xp,) + step.rs, remove(xp, step.os, policy))


# =============================================================================
# OPERATIONS: The typed request set a driver issues
# =============================================================================

class OperationKind(Enum):
    """The finite set of things a derivation can do."""
    INSERT = auto()
    SELECT_EXTERNAL = auto()
    SELECT_INTERNAL = auto()
    SELECT_SPELLOUT = auto()


# Script spellings -> kinds
OPERATION_ALIASES = {
    "insert": OperationKind.INSERT,
    "lex": OperationKind.INSERT,
    "select1": OperationKind.SELECT_EXTERNAL,
    "external": OperationKind.SELECT_EXTERNAL,
    "select_external": OperationKind.SELECT_EXTERNAL,
    "select2": OperationKind.SELECT_INTERNAL,
    "internal": OperationKind.SELECT_INTERNAL,
    "select_internal": OperationKind.SELECT_INTERNAL,
    "move": OperationKind.SELECT_INTERNAL,
    "select3": OperationKind.SELECT_SPELLOUT,
    "spellout": OperationKind.SELECT_SPELLOUT,
    "select_spellout": OperationKind.SELECT_SPELLOUT,
}


@dataclass(frozen=True, slots=True)
class Operation:
    """One request: what to do, and at which position."""

    kind: OperationKind
    index: int

    @classmethod
    def insert(cls, index: int) -> "Operation":
        return cls(OperationKind.INSERT, index)

    @classmethod
    def select_external(cls, n: int) -> "Operation":
        return cls(OperationKind.SELECT_EXTERNAL, n)

    @classmethod
    def select_internal(cls, n: int) -> "Operation":
        return cls(OperationKind.SELECT_INTERNAL, n)

    @classmethod
    def select_spellout(cls, n: int) -> "Operation":
        return cls(OperationKind.SELECT_SPELLOUT, n)

    @classmethod
    def parse(cls, name: str, index: int) -> "Operation":
        """Build an operation from a script name like 'select1'."""
        kind = OPERATION_ALIASES.get(name.strip().lower())
        if kind is None:
            raise DerivationError(
                f"Unknown operation: {name}. "
                f"Available: {sorted(OPERATION_ALIASES)}"
            )
        return cls(kind, index)

    def __str__(self) -> str:
        return f"{self.kind.name}({self.index})"


def apply(
    operation: Operation,
    step: DerivationStep,
    lexicon: Sequence[str] = (),
    policy: RemovalPolicy = RemovalPolicy.STRICT,
) -> DerivationStep:
    """Apply one operation to a step and return the next step."""
    kind = operation.kind
    if kind is OperationKind.INSERT:
        return DerivationStep(insert(lexicon, operation.index, step.rs), step.os)
    if kind is OperationKind.SELECT_EXTERNAL:
        return select_external(operation.index, step)
    if kind is OperationKind.SELECT_INTERNAL:
        return select_internal(operation.index, step)
    if kind is OperationKind.SELECT_SPELLOUT:
        return select_spellout(operation.index, step, policy)
    raise DerivationError(f"Unhandled operation: {operation}")


# =============================================================================
# PRESENTATION: Labelled brackets
# =============================================================================

def linearize(so: SyntacticObject) -> str:
    """
    The terminals of so as one token, in the order they were merged.

    merge puts the newcomer first, so the earlier material is the
    second daughter and is written first.
    """
    words: List[str] = []
    stack = [so]
    while stack:
        node = stack.pop()
        if isinstance(node, Terminal):
            words.append(node.text)
        elif isinstance(node, Unary):
            stack.append(node.child)
        elif isinstance(node, Binary):
            stack.append(node.left)
            stack.append(node.right)
        else:
            raise _unknown(node)
    return " ".join(words)


def bracket(so: SyntacticObject) -> str:
    """
    Render so as labelled brackets.

    Terminal(t)   -> [ t ]
    Unary(c)      -> [ bracket(c) ]
    Binary(l, r)  -> [ linearize(l) bracket(r) ]

    The first daughter of a Binary node is written as one leaf-like
    token, so a spelled-out unit reads as a single joined word.
    """
    # Strings are emitted as they are; nodes are expanded in place.
    parts: List[str] = []
    stack: List[Any] = [so]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Terminal):
            parts.append(f"[ {item.text} ]")
        elif isinstance(item, Unary):
            stack.extend((" ]", item.child, "[ "))
        elif isinstance(item, Binary):
            stack.extend((" ]", item.right, f"[ {linearize(item.left)} "))
        else:
            raise _unknown(item)
    return "".join(parts)


# =============================================================================
# CONVENIENCE: Quick creation helpers
# =============================================================================

def lexicon_of(*words: str) -> Lexicon:
    """Build a lexicon from words."""
    return tuple(words)


def resources_of(*words: str) -> ResourceSpace:
    """Build a resource space of terminals, in the given order."""
    return tuple(Terminal(word) for word in words)
