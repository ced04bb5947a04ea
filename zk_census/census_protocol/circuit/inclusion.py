"""
⚠️ DRAFT — requires crypto review before production use

Census inclusion circuit.

Proves: "I know a secret whose hash1 sits at some position of the census
tree with this root." Evaluation is a fold of one LevelGadget per level:

    acc = hash1(secret)
    for level in 0..depth-1:
        acc = combine(acc, siblings[level], bits[level])
    enforce acc == root

A false statement is a normal outcome: ``verify`` returns False.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Any, Sequence, Tuple

from ..bits import decompose
from ..config import MAX_TREE_DEPTH
from ..exceptions import ConfigurationError, RootMismatch
from ..field import to_field, to_field_tuple
from ..interfaces import HashFunction, ensure_same_parameters
from ..merkle import MerkleTree
from ..statements import InclusionStatement
from ..types import ProofRequest
from .constraints import ConstraintSystem
from .gadgets import LevelGadget

logger = logging.getLogger(__name__)


def derive_public_value(secret_value: Any, hash_function: HashFunction) -> int:
    """Public identity for a secret: hash1(secret)."""
    return hash_function.hash1(
        to_field(secret_value, "secret_value", hash_function.modulus)
    )


@dataclass(frozen=True)
class CircuitResult:
    """Outcome of one circuit evaluation."""

    computed_root: int
    root: int
    bits: Tuple[int, ...]
    constraints: ConstraintSystem

    @property
    def accepted(self) -> bool:
        return self.constraints.satisfied


class InclusionCircuit:
    """
    Root recomputation gadget for a fixed depth and hash.

    The circuit keeps no state between evaluations; the same instance may be
    shared across threads.

    Example:
        >>> circuit = InclusionCircuit.for_tree(tree)
        >>> proof = tree.proof(2)
        >>> circuit.verify(33, proof.siblings, 2, tree.root())
        True
    """

    def __init__(self, hash_function: HashFunction, depth: int) -> None:
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise TypeError(f"depth must be int, got {type(depth).__name__}")
        if not 0 <= depth <= MAX_TREE_DEPTH:
            raise ValueError(f"depth must be in [0, {MAX_TREE_DEPTH}], got {depth}")
        self._hash_function = hash_function
        self._gadgets = tuple(LevelGadget(level, hash_function) for level in range(depth))

    @classmethod
    def for_tree(cls, tree: MerkleTree) -> "InclusionCircuit":
        return cls(tree.hash_function, tree.depth)

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def depth(self) -> int:
        return len(self._gadgets)

    def check_tree(self, tree: MerkleTree) -> None:
        """
        Raises:
            ConfigurationError: If the tree used other hash parameters or
                another depth
        """
        ensure_same_parameters(self._hash_function, tree.hash_function)
        if tree.depth != self.depth:
            raise ConfigurationError(
                f"Circuit depth {self.depth} does not match tree depth {tree.depth}"
            )

    def evaluate(
        self,
        secret_value: Any,
        siblings: Sequence[Any],
        index: int,
        root: Any,
    ) -> CircuitResult:
        """
        Recompute the root and record every constraint.

        Raises:
            ValueError: If siblings do not match the circuit depth or a value
                is not a field element
            OverflowError: If index does not fit in depth bits
        """
        p = self._hash_function.modulus
        siblings = to_field_tuple(siblings, "siblings", p)
        if len(siblings) != self.depth:
            raise ValueError(
                f"Expected {self.depth} siblings, got {len(siblings)}"
            )
        secret_value = to_field(secret_value, "secret_value", p)
        root = to_field(root, "root", p)
        bits = decompose(index, self.depth)

        cs = ConstraintSystem(p)
        packed = sum(bit << level for level, bit in enumerate(bits)) % p
        cs.enforce_equal(packed, index % p, "bits.recompose")

        public_value = self._hash_function.hash1(secret_value)
        computed_root = reduce(
            lambda acc, stage: stage[0].combine(acc, stage[1], stage[2], cs),
            zip(self._gadgets, siblings, bits),
            public_value,
        )
        cs.enforce_equal(computed_root, root, "root")

        return CircuitResult(
            computed_root=computed_root,
            root=root,
            bits=bits,
            constraints=cs,
        )

    def verify(
        self,
        secret_value: Any,
        siblings: Sequence[Any],
        index: int,
        root: Any,
    ) -> bool:
        """
        True when the witness recomputes ``root``.

        Raises:
            OverflowError: If index does not fit in depth bits
        """
        result = self.evaluate(secret_value, siblings, index, root)
        if not result.accepted:
            logger.debug("Inclusion rejected: %s", result.constraints.violations())
        return result.accepted

    def assert_verified(
        self,
        secret_value: Any,
        siblings: Sequence[Any],
        index: int,
        root: Any,
    ) -> CircuitResult:
        """Like ``verify`` but raises RootMismatch on rejection."""
        result = self.evaluate(secret_value, siblings, index, root)
        if not result.accepted:
            raise RootMismatch(
                f"Recomputed root does not match: {result.constraints.violations()}"
            )
        return result

    def verify_request(self, request: ProofRequest) -> bool:
        """
        Verify a proof request built for this circuit's hash.

        Raises:
            ConfigurationError: If the request was built with other hash
                parameters
        """
        self._check_fingerprint(request.hash_name, request.hash_fingerprint)
        return self.verify(request.value, request.siblings, request.key, request.root)

    def verify_statement(self, statement: InclusionStatement) -> bool:
        self._check_fingerprint(statement.hash_name, statement.hash_fingerprint)
        if statement.depth != self.depth:
            raise ConfigurationError(
                f"Statement depth {statement.depth} does not match circuit depth "
                f"{self.depth}"
            )
        return self.verify(
            statement.secret_value, statement.siblings, statement.key, statement.root
        )

    def _check_fingerprint(self, hash_name: str, fingerprint: str) -> None:
        if fingerprint != self._hash_function.fingerprint:
            raise ConfigurationError(
                f"Request built with {hash_name} ({fingerprint[:16]}...), circuit "
                f"uses {self._hash_function.name} "
                f"({self._hash_function.fingerprint[:16]}...)"
            )
