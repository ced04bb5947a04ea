"""Constraint-style evaluation of census inclusion."""

from .constraints import Constraint, ConstraintSystem
from .gadgets import LevelGadget, combine, select
from .inclusion import CircuitResult, InclusionCircuit, derive_public_value

__all__ = [
    "Constraint",
    "ConstraintSystem",
    "LevelGadget",
    "combine",
    "select",
    "CircuitResult",
    "InclusionCircuit",
    "derive_public_value",
]
