"""
⚠️ DRAFT — requires crypto review before production use

Proof request consumed by the inclusion circuit.

A proof request is the prover's full input: the secret value, its position,
the authentication path and the committed root. It contains the private
witness and must never be sent to a verifier; use
``InclusionStatement.public_inputs()`` for what may be published.

Serialization:
    - CBOR with a version field, short keys
    - Field elements as 32-byte big-endian strings
    - JSON-compatible hex view via to_dict()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

import cbor2

from .config import MAX_PROOF_REQUEST_BYTES, PROOF_REQUEST_VERSION
from .exceptions import SerializationError
from .field import field_from_bytes, field_to_bytes, field_to_hex, to_field, to_field_tuple
from .interfaces import HashFunction
from .merkle import MerkleProof


@dataclass(frozen=True)
class ProofRequest:
    """
    Inputs for one inclusion check.

    Attributes:
        key: Leaf position (private)
        value: Secret value whose hash1 is the leaf (private)
        root: Committed census root (public)
        siblings: Authentication path, leaf level first (private)
        hash_name: Backend name used to build the tree
        hash_fingerprint: Parameter fingerprint of that backend
    """

    key: int
    value: int
    root: int
    siblings: Tuple[int, ...]
    hash_name: str
    hash_fingerprint: str

    @property
    def depth(self) -> int:
        return len(self.siblings)

    @classmethod
    def from_proof(
        cls, proof: MerkleProof, hash_function: HashFunction, value: Any = None
    ) -> "ProofRequest":
        """
        Build a request from a Merkle proof.

        Args:
            proof: Proof extracted from the census tree
            hash_function: Backend the tree was built with
            value: Secret value; defaults to ``proof.leaf_preimage``

        Raises:
            ValueError: If no secret value is available
        """
        if value is None:
            value = proof.leaf_preimage
        if value is None:
            raise ValueError("Proof request needs the secret value (leaf preimage)")

        p = hash_function.modulus
        return cls(
            key=proof.index,
            value=to_field(value, "value", p),
            root=proof.root,
            siblings=to_field_tuple(proof.siblings, "siblings", p),
            hash_name=hash_function.name,
            hash_fingerprint=hash_function.fingerprint,
        )

    # ========================================================================
    # SERIALIZATION (CBOR)
    # ========================================================================

    def serialize(self) -> bytes:
        """
        Serialize request to bytes using CBOR.

        Raises:
            SerializationError: If serialization fails
        """
        try:
            data = {
                "v": PROOF_REQUEST_VERSION,
                "k": self.key,
                "x": field_to_bytes(self.value),
                "r": field_to_bytes(self.root),
                "s": [field_to_bytes(sibling) for sibling in self.siblings],
                "h": self.hash_name,
                "f": self.hash_fingerprint,
            }
            return cbor2.dumps(data)
        except (TypeError, ValueError, OverflowError, AttributeError) as exc:
            raise SerializationError(f"Failed to serialize proof request: {exc}") from exc

    @classmethod
    def deserialize(cls, data: bytes) -> "ProofRequest":
        """
        Deserialize request from CBOR bytes.

        Raises:
            SerializationError: If the data is malformed, too large, or of an
                unsupported version
        """
        if len(data) > MAX_PROOF_REQUEST_BYTES:
            raise SerializationError("Proof request exceeds size limit")

        try:
            obj = cbor2.loads(data)
        except Exception as exc:  # noqa: BLE001
            raise SerializationError(f"Failed to deserialize proof request: {exc}") from exc

        if not isinstance(obj, dict):
            raise SerializationError("Invalid proof request: expected a map")

        version = obj.get("v")
        if version != PROOF_REQUEST_VERSION:
            raise SerializationError(
                f"Unsupported proof request version: {version} "
                f"(expected {PROOF_REQUEST_VERSION})"
            )

        missing = [name for name in ("k", "x", "r", "s", "h", "f") if name not in obj]
        if missing:
            raise SerializationError(f"Invalid proof request: missing fields {missing}")

        try:
            key = obj["k"]
            if isinstance(key, bool) or not isinstance(key, int) or key < 0:
                raise ValueError("key must be a non-negative int")
            if not isinstance(obj["s"], list):
                raise ValueError("siblings must be a list")
            if not isinstance(obj["h"], str) or not isinstance(obj["f"], str):
                raise ValueError("hash name and fingerprint must be strings")
            return cls(
                key=key,
                value=field_from_bytes(obj["x"], "value"),
                root=field_from_bytes(obj["r"], "root"),
                siblings=tuple(
                    field_from_bytes(sibling, f"siblings[{idx}]")
                    for idx, sibling in enumerate(obj["s"])
                ),
                hash_name=obj["h"],
                hash_fingerprint=obj["f"],
            )
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"Invalid proof request: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible view with hex-encoded field elements."""
        return {
            "version": PROOF_REQUEST_VERSION,
            "key": self.key,
            "value": field_to_hex(self.value),
            "root": field_to_hex(self.root),
            "siblings": [field_to_hex(sibling) for sibling in self.siblings],
            "hash_name": self.hash_name,
            "hash_fingerprint": self.hash_fingerprint,
        }
