"""
Derivation: The driver-side record of a derivation

The core transitions are pure. Something still has to hold the current
step, remember how it got there, and prove that the record was not
edited afterwards. That is this module.

- DerivationLog: append-only hash chain of every applied operation
- step_digest: a fingerprint of each step, recorded with its log entry
- Transition: one logged step (operation, before, after, hash)
- Derivation: threads a DerivationStep through a sequence of operations
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import hashlib
import json
import time

from .core import (
    DerivationError,
    DerivationStep,
    Lexicon,
    Operation,
    OperatingSpace,
    RemovalPolicy,
    ResourceSpace,
    Binary,
    SyntacticObject,
    Terminal,
    Unary,
    apply,
    bracket,
    node_count,
    preorder,
)


# =============================================================================
# STEP DIGESTS: A fingerprint of each state the log vouches for
# =============================================================================

def encode(so: SyntacticObject) -> List[str]:
    """
    Preorder with arity tags: "B", "U", or "T:<text>".

    The arity tags make the listing unambiguous, so equal encodings
    mean equal trees.
    """
    tags = []
    for node in preorder(so):
        if isinstance(node, Binary):
            tags.append("B")
        elif isinstance(node, Unary):
            tags.append("U")
        else:
            tags.append(f"T:{node.text}")
    return tags


def step_digest(step: DerivationStep) -> str:
    """SHA-256 over the encoded resource space and operating space."""
    payload = {
        "rs": [encode(so) for so in step.rs],
        "os": encode(step.os) if step.os is not None else None,
    }
    encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()


# =============================================================================
# DERIVATION LOG: Cryptographic record of every operation
# =============================================================================

@dataclass
class LogEntry:
    """A single entry in the derivation log."""
    index: int
    timestamp: float
    action: str
    args: Tuple[Any, ...]
    prev_hash: str
    hash: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "timestamp": self.timestamp,
            "action": self.action,
            "args": self.args,
            "prev_hash": self.prev_hash,
            "hash": self.hash
        }


class DerivationLog:
    """
    Append-only hash chain.

    Each entry hashes its own content together with the previous
    entry's hash, so editing any entry breaks every link after it.
    """

    GENESIS_HASH = "0" * 64

    def __init__(self):
        self._entries: List[LogEntry] = []

    def _compute_hash(self, payload: Dict[str, Any]) -> str:
        """Compute SHA-256 hash of a payload."""
        encoded = json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()

    @staticmethod
    def _payload(entry_index: int, timestamp: float, action: str,
                 args: Tuple[Any, ...], prev_hash: str) -> Dict[str, Any]:
        return {
            "index": entry_index,
            "timestamp": timestamp,
            "action": action,
            "args": args,
            "prev_hash": prev_hash
        }

    def append(self, action: str, *args: Any) -> LogEntry:
        """Log an action with its arguments."""
        index = len(self._entries)
        timestamp = time.time()
        prev_hash = self._entries[-1].hash if self._entries else self.GENESIS_HASH

        payload = self._payload(index, timestamp, action, args, prev_hash)
        entry = LogEntry(
            index=index,
            timestamp=timestamp,
            action=action,
            args=args,
            prev_hash=prev_hash,
            hash=self._compute_hash(payload)
        )
        self._entries.append(entry)
        return entry

    def verify(self) -> bool:
        """Verify the entire chain is intact."""
        for i, entry in enumerate(self._entries):
            expected_prev = self._entries[i - 1].hash if i > 0 else self.GENESIS_HASH
            if entry.prev_hash != expected_prev:
                return False

            payload = self._payload(
                entry.index, entry.timestamp, entry.action, entry.args, entry.prev_hash
            )
            if self._compute_hash(payload) != entry.hash:
                return False

        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)

    def last(self, n: int = 5) -> List[LogEntry]:
        """Get the last n entries."""
        return self._entries[-n:]

    def find(self, entry_hash: str) -> Optional[LogEntry]:
        """The entry with this hash, if any."""
        for entry in self._entries:
            if entry.hash == entry_hash:
                return entry
        return None


# =============================================================================
# DERIVATION: The driver wrapper
# =============================================================================

@dataclass(frozen=True)
class Transition:
    """One applied operation with the steps on either side of it."""
    operation: Operation
    before: DerivationStep
    after: DerivationStep
    audit_hash: str


class Derivation:
    """
    A running derivation over one lexicon.

    The wrapper owns the only mutable state in the package: the list of
    transitions so far and the log. Each operation either succeeds and
    appends exactly one transition and one log entry, or raises and
    changes nothing.
    """

    def __init__(
        self,
        lexicon: Sequence[str] = (),
        step: Optional[DerivationStep] = None,
        policy: RemovalPolicy = RemovalPolicy.STRICT,
    ):
        self.lexicon: Lexicon = tuple(lexicon)
        self.policy = policy
        self._initial = step if step is not None else DerivationStep()
        self._transitions: List[Transition] = []
        self._log = DerivationLog()

    @property
    def log(self) -> DerivationLog:
        return self._log

    # -------------------------------------------------------------------------
    # STATE
    # -------------------------------------------------------------------------

    @property
    def initial(self) -> DerivationStep:
        return self._initial

    @property
    def step(self) -> DerivationStep:
        if self._transitions:
            return self._transitions[-1].after
        return self._initial

    @property
    def resource_space(self) -> ResourceSpace:
        return self.step.rs

    @property
    def operating_space(self) -> OperatingSpace:
        return self.step.os

    @property
    def is_complete(self) -> bool:
        return self.step.is_complete

    @property
    def history(self) -> Tuple[DerivationStep, ...]:
        """Every step so far, initial step first."""
        return (self._initial,) + tuple(t.after for t in self._transitions)

    @property
    def transitions(self) -> Tuple[Transition, ...]:
        return tuple(self._transitions)

    # -------------------------------------------------------------------------
    # OPERATIONS
    # -------------------------------------------------------------------------

    def apply(self, operation: Operation) -> DerivationStep:
        """Apply one operation, log it, and return the new step."""
        before = self.step
        after = apply(operation, before, self.lexicon, self.policy)

        entry = self._log.append(
            operation.kind.name,
            operation.index,
            len(after.rs),
            bracket(after.os) if after.os is not None else None,
            step_digest(after)
        )
        self._transitions.append(Transition(operation, before, after, entry.hash))
        return after

    def run(self, operations: Iterable[Operation]) -> DerivationStep:
        """Apply operations in order. Stops at the first failure."""
        for operation in operations:
            self.apply(operation)
        return self.step

    def insert(self, index: int) -> DerivationStep:
        return self.apply(Operation.insert(index))

    def select_external(self, n: int) -> DerivationStep:
        return self.apply(Operation.select_external(n))

    def select_internal(self, n: int) -> DerivationStep:
        return self.apply(Operation.select_internal(n))

    def select_spellout(self, n: int) -> DerivationStep:
        return self.apply(Operation.select_spellout(n))

    # Short names, as the operations are usually written
    select1 = select_external
    select2 = select_internal
    select3 = select_spellout

    def rewind(self, k: int = 1) -> DerivationStep:
        """Undo the last k transitions. The log keeps both the originals
        and the rewind itself."""
        if not (0 <= k <= len(self._transitions)):
            raise DerivationError(
                f"Cannot rewind {k} step(s): {len(self._transitions)} recorded"
            )
        if k:
            del self._transitions[-k:]
        self._log.append("REWIND", k, len(self._transitions))
        return self.step

    def replay(self) -> "Derivation":
        """A fresh derivation that reapplies every recorded operation."""
        fresh = Derivation(self.lexicon, self._initial, self.policy)
        fresh.run(t.operation for t in self._transitions)
        return fresh

    def verify(self) -> bool:
        """
        The chain is intact and every recorded transition is vouched for
        by its log entry: same operation, same resulting step.
        """
        if not self._log.verify():
            return False
        for transition in self._transitions:
            entry = self._log.find(transition.audit_hash)
            if entry is None:
                return False
            if entry.action != transition.operation.kind.name:
                return False
            if entry.args[-1] != step_digest(transition.after):
                return False
        return True

    # -------------------------------------------------------------------------
    # STATISTICS
    # -------------------------------------------------------------------------

    def summary(self) -> Dict[str, Any]:
        """Summary statistics."""
        step = self.step
        return {
            "lexicon": len(self.lexicon),
            "steps": len(self._transitions),
            "resource_space": len(step.rs),
            "operating_space_nodes": node_count(step.os) if step.os is not None else 0,
            "complete": step.is_complete,
            "log_entries": len(self._log),
            "chain_valid": self._log.verify(),
            "record_valid": self.verify()
        }

    def __repr__(self) -> str:
        return f"Derivation({self.step})"


# =============================================================================
# CONVENIENCE
# =============================================================================

def create_derivation(
    lexicon: Sequence[str] = (),
    *indices: int,
    policy: RemovalPolicy = RemovalPolicy.STRICT,
) -> Derivation:
    """Create a derivation and insert the given lexicon positions, in order."""
    derivation = Derivation(lexicon, policy=policy)
    for index in indices:
        derivation.insert(index)
    return derivation
