"""
Prototype interface for the algebraic hash shared by tree and circuit.

WARNING: Tree construction and circuit verification must be given hash
instances with identical parameters. Instances compare equal exactly when
their parameter fingerprints match.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod
from typing import Any, Dict

import cbor2

from .exceptions import ConfigurationError


class HashFunction(ABC):
    """
    Collision-resistant hash over a prime field.

    Subclasses provide ``hash1`` (key derivation) and ``hash2`` (node
    combination). Both must be deterministic and ``hash2`` must be
    order-sensitive.
    """

    name: str = "abstract"

    def __init__(self, modulus: int) -> None:
        self._modulus = modulus
        self._fingerprint: str | None = None

    @property
    def modulus(self) -> int:
        return self._modulus

    @abstractmethod
    def hash1(self, x: int) -> int:
        """Hash a single field element."""

    @abstractmethod
    def hash2(self, a: int, b: int) -> int:
        """Hash an ordered pair of field elements."""

    @abstractmethod
    def parameters(self) -> Dict[str, Any]:
        """Every value that influences the output, CBOR-encodable."""

    @property
    def fingerprint(self) -> str:
        """SHA-256 hex digest of the canonical CBOR encoding of ``parameters()``."""
        if self._fingerprint is None:
            encoded = cbor2.dumps(self.parameters(), canonical=True)
            self._fingerprint = hashlib.sha256(encoded).hexdigest()
        return self._fingerprint

    def same_parameters(self, other: "HashFunction") -> bool:
        return isinstance(other, HashFunction) and self.fingerprint == other.fingerprint

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashFunction):
            return NotImplemented
        return self.same_parameters(other)

    def __hash__(self) -> int:
        return hash(self.fingerprint)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(fingerprint={self.fingerprint[:16]}...)"


def ensure_same_parameters(expected: HashFunction, actual: HashFunction) -> None:
    """
    Fail fast when two sides of the protocol disagree on hash parameters.

    Raises:
        ConfigurationError: If the fingerprints differ
    """
    if not expected.same_parameters(actual):
        raise ConfigurationError(
            f"Hash parameter mismatch: {expected.name} "
            f"({expected.fingerprint[:16]}...) vs {actual.name} "
            f"({actual.fingerprint[:16]}...)"
        )
