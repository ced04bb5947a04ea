"""
Statement registry for census membership.
Defines statement types, versions, public/witness split and validation.

Position privacy: by default the leaf position is part of the private
witness. Neither the index nor its bits appear in the public inputs unless
the caller opts into ``PositionPolicy.REVEALED``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple

from .field import field_to_bytes
from .types import ProofRequest


class StatementType(Enum):
    """Statement types for census proofs"""

    CENSUS_INCLUSION = "census_inclusion_v1"


class PositionPolicy(Enum):
    """Whether the leaf position is a public input."""

    HIDDEN = "hidden"
    REVEALED = "revealed"


@dataclass
class StatementSpec:
    """
    Specification for a census statement.

    Attributes:
        statement_type: Type identifier
        version: Statement version (for future upgrades)
        public_input_schema: Required fields in public_inputs
        witness_schema: Required witness components (for documentation)
        description: Human-readable statement description
    """

    statement_type: StatementType
    version: int
    public_input_schema: Dict[str, type]
    witness_schema: Dict[str, Any]
    description: str


STATEMENT_REGISTRY: Dict[StatementType, StatementSpec] = {
    StatementType.CENSUS_INCLUSION: StatementSpec(
        statement_type=StatementType.CENSUS_INCLUSION,
        version=1,
        public_input_schema={
            "statement_type": str,
            "statement_version": int,
            "root": bytes,  # Census Merkle root
            "depth": int,
            "hash_name": str,
            "hash_fingerprint": str,
        },
        witness_schema={
            "secret_value": int,
            "key": int,
            "siblings": "Tuple[int, ...]",
        },
        description=(
            "Know a secret whose hash1 is a leaf of the census tree with this root"
        ),
    ),
}


@dataclass(frozen=True)
class InclusionStatement:
    """
    Public inputs plus private witness for one census inclusion check.

    Built from a ``ProofRequest``; stateless and consumed once.
    """

    root: int
    depth: int
    hash_name: str
    hash_fingerprint: str
    secret_value: int
    key: int
    siblings: Tuple[int, ...]
    position_policy: PositionPolicy = PositionPolicy.HIDDEN

    @classmethod
    def from_request(
        cls,
        request: ProofRequest,
        position_policy: PositionPolicy = PositionPolicy.HIDDEN,
    ) -> "InclusionStatement":
        return cls(
            root=request.root,
            depth=request.depth,
            hash_name=request.hash_name,
            hash_fingerprint=request.hash_fingerprint,
            secret_value=request.value,
            key=request.key,
            siblings=request.siblings,
            position_policy=position_policy,
        )

    def public_inputs(self) -> Dict[str, Any]:
        """Values a verifier may see."""
        spec = STATEMENT_REGISTRY[StatementType.CENSUS_INCLUSION]
        inputs: Dict[str, Any] = {
            "statement_type": StatementType.CENSUS_INCLUSION.value,
            "statement_version": spec.version,
            "root": field_to_bytes(self.root),
            "depth": self.depth,
            "hash_name": self.hash_name,
            "hash_fingerprint": self.hash_fingerprint,
        }
        if self.position_policy is PositionPolicy.REVEALED:
            inputs["index"] = self.key
        return inputs

    def witness(self) -> Dict[str, Any]:
        """Values that stay with the prover."""
        return {
            "secret_value": self.secret_value,
            "key": self.key,
            "siblings": self.siblings,
        }


def validate_public_inputs(
    statement_type: StatementType, public_inputs: Dict[str, Any]
) -> None:
    """
    Validate public inputs match statement schema.

    Raises:
        ValueError: If inputs don't match schema
    """
    if statement_type not in STATEMENT_REGISTRY:
        raise ValueError(f"Unknown statement type: {statement_type}")

    spec = STATEMENT_REGISTRY[statement_type]

    for field, expected_type in spec.public_input_schema.items():
        if field not in public_inputs:
            raise ValueError(
                f"Missing required field '{field}' for {statement_type.value}"
            )
        actual_value = public_inputs[field]
        if isinstance(actual_value, bool) or not isinstance(actual_value, expected_type):
            raise ValueError(
                f"Field '{field}' must be {expected_type.__name__}, "
                f"got {type(actual_value).__name__}"
            )

    if public_inputs["statement_type"] != statement_type.value:
        raise ValueError(
            f"Statement type mismatch: expected {statement_type.value}, "
            f"got {public_inputs['statement_type']}"
        )

    if public_inputs["statement_version"] != spec.version:
        raise ValueError(
            f"Statement version mismatch: expected {spec.version}, "
            f"got {public_inputs['statement_version']}"
        )

    # Only present under PositionPolicy.REVEALED
    index = public_inputs.get("index")
    if index is not None and (isinstance(index, bool) or not isinstance(index, int)):
        raise ValueError("Field 'index' must be int")


def get_statement_spec(statement_type: StatementType) -> StatementSpec:
    """Get specification for a statement type"""
    if statement_type not in STATEMENT_REGISTRY:
        raise ValueError(f"Unknown statement type: {statement_type}")
    return STATEMENT_REGISTRY[statement_type]
