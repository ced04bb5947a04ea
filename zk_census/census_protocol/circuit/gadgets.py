"""
Per-level gadgets for the inclusion circuit.

Orientation: bit = 0 puts the accumulator on the left (hash2(acc, sibling)),
bit = 1 puts it on the right (hash2(sibling, acc)). The swap is an arithmetic
blend so the same wiring works in a constraint backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..interfaces import HashFunction
from .constraints import ConstraintSystem


def select(bit: int, if_true: int, if_false: int, modulus: int) -> int:
    """bit * if_true + (1 - bit) * if_false, over the field."""
    return (bit * if_true + (1 - bit) * if_false) % modulus


@dataclass(frozen=True)
class LevelGadget:
    """
    Conditional swap followed by ``hash2`` for one tree level.

    With a constraint system the boolean check on ``bit`` is recorded there;
    without one, a non-boolean bit is rejected immediately.
    """

    level: int
    hash_function: HashFunction

    def combine(
        self,
        acc: int,
        sibling: int,
        bit: int,
        cs: Optional[ConstraintSystem] = None,
    ) -> int:
        p = self.hash_function.modulus
        if cs is None:
            if bit not in (0, 1):
                raise ValueError(f"level {self.level}: bit must be 0 or 1, got {bit!r}")
        else:
            cs.enforce_boolean(bit, f"level[{self.level}].bit")

        left = select(bit, sibling, acc, p)
        right = select(bit, acc, sibling, p)
        return self.hash_function.hash2(left, right)


def combine(acc: int, sibling: int, bit: int, hash_function: HashFunction) -> int:
    """Single-level combine without constraint recording."""
    return LevelGadget(0, hash_function).combine(acc, sibling, bit)
