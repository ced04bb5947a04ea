"""
Constraint recording for circuit evaluation.

The gadgets compute their outputs directly and record each algebraic
condition a proving backend would enforce, so a caller can see which
condition failed instead of a bare ``False``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Constraint:
    """One recorded condition over field elements."""

    label: str
    kind: str  # "boolean" or "equal"
    satisfied: bool


class ConstraintSystem:
    """Append-only list of constraints evaluated over one field."""

    def __init__(self, modulus: int) -> None:
        self.modulus = modulus
        self._constraints: List[Constraint] = []

    def enforce_boolean(self, value: int, label: str) -> None:
        """value * (value - 1) == 0"""
        p = self.modulus
        satisfied = (value * (value - 1)) % p == 0
        self._constraints.append(Constraint(label, "boolean", satisfied))

    def enforce_equal(self, left: int, right: int, label: str) -> None:
        """left - right == 0"""
        satisfied = (left - right) % self.modulus == 0
        self._constraints.append(Constraint(label, "equal", satisfied))

    @property
    def constraints(self) -> Tuple[Constraint, ...]:
        return tuple(self._constraints)

    @property
    def satisfied(self) -> bool:
        return all(c.satisfied for c in self._constraints)

    def violations(self) -> List[str]:
        return [c.label for c in self._constraints if not c.satisfied]

    def __len__(self) -> int:
        return len(self._constraints)
