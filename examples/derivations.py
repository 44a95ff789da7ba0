#!/usr/bin/env python3
"""
Minimalist: Three Derivations

This demo walks through the three classic cases:
- External merge only ("John left")
- Movement ("who John likes who")
- A complex specifier built separately and spelled out ("the boy")

Every step is printed. Every step is logged.
"""

import sys
import os

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from minimalist import (
    Derivation,
    DerivationStep,
    Operation,
    Terminal,
    bracket,
    preorder,
    resources_of,
)
from minimalist.adapters import ScriptAdapter


def print_header(title: str) -> None:
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


def print_section(num: int, title: str) -> None:
    print(f"\n[{num}] {title}\n")


def show(derivation: Derivation) -> None:
    for transition in derivation.transitions:
        print(f"   {str(transition.operation):<22} {transition.after}")


def find(so, word: str) -> int:
    """Preorder position of the first terminal spelled `word`."""
    return preorder(so).index(Terminal(word))


# =============================================================================
# PART 1: EXTERNAL MERGE
# =============================================================================

def demonstrate_external_merge():
    print_header("MINIMALIST: THREE DERIVATIONS")

    # -------------------------------------------------------------------------
    print_section(1, "EXTERNAL MERGE: John left")
    # -------------------------------------------------------------------------

    derivation = Derivation(["John", "left"])
    derivation.insert(0)
    derivation.insert(1)
    derivation.select1(0)
    derivation.select1(0)

    show(derivation)
    print(f"\n   Result:   {bracket(derivation.operating_space)}")
    print(f"   Complete: {derivation.is_complete}")


# =============================================================================
# PART 2: MOVEMENT
# =============================================================================

def demonstrate_movement():
    # -------------------------------------------------------------------------
    print_section(2, "INTERNAL MERGE: who moves, and stays")
    # -------------------------------------------------------------------------

    derivation = Derivation(["John", "likes", "who"])
    for index in range(3):
        derivation.insert(index)
    for _ in range(3):
        derivation.select1(0)

    tree = derivation.operating_space
    print(f"   Before movement: {bracket(tree)}")
    for n, node in enumerate(preorder(tree)):
        print(f"      {n}: {bracket(node)}")

    derivation.select2(find(tree, "who"))

    print(f"\n   After movement:  {bracket(derivation.operating_space)}")
    print(f"      (the base occurrence of 'who' is still in place)")


# =============================================================================
# PART 3: SPELLOUT
# =============================================================================

SPECIFIER_SCRIPT = """
# build "the boy" on its own
select1 0
select1 0
# flatten it back into the pool
select3 0
# build the clause
select1 2
select1 1
select1 0
# move who
select2 6
"""


def demonstrate_spellout():
    # -------------------------------------------------------------------------
    print_section(3, "SPELLOUT: a complex specifier as one unit")
    # -------------------------------------------------------------------------

    operations = ScriptAdapter().parse(SPECIFIER_SCRIPT)
    derivation = Derivation(step=DerivationStep.initial(
        resources_of("the", "boy", "like", "who")
    ))
    derivation.run(operations)

    show(derivation)
    print(f"\n   Result:   {bracket(derivation.operating_space)}")

    # -------------------------------------------------------------------------
    print_section(4, "THE RECORD")
    # -------------------------------------------------------------------------

    for entry in derivation.log.last(3):
        print(f"   #{entry.index} {entry.action:<16} {entry.hash[:16]}...")

    replayed = derivation.replay()
    print(f"\n   Replay matches: {replayed.step == derivation.step}")
    for key, value in derivation.summary().items():
        print(f"   {key:<22} {value}")

    # Asking for something that isn't there fails by name
    try:
        derivation.apply(Operation.select_external(0))
    except IndexError as e:
        print(f"\n   select1(0) on an empty pool: {e}")


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    demonstrate_external_merge()
    demonstrate_movement()
    demonstrate_spellout()
