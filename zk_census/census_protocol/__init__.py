"""Public API for census_protocol.

Hash backends are exported lazily so importing the package does not derive
round constants for backends nobody uses.
"""
from __future__ import annotations

from importlib import import_module

from .bits import decompose, recompose
from .circuit import InclusionCircuit, LevelGadget, derive_public_value
from .exceptions import (
    CensusProtocolError,
    ConfigurationError,
    IndexOutOfRange,
    InvalidLeafCount,
    KeyOverflowError,
    RootMismatch,
    SerializationError,
)
from .factory import get_hash_function
from .feature_flags import get_hash_backend, set_hash_backend
from .interfaces import HashFunction, ensure_same_parameters
from .merkle import MerkleProof, MerkleTree, pad_leaves
from .statements import InclusionStatement, PositionPolicy
from .types import ProofRequest

__all__ = [
    "decompose",
    "recompose",
    "InclusionCircuit",
    "LevelGadget",
    "derive_public_value",
    "CensusProtocolError",
    "ConfigurationError",
    "IndexOutOfRange",
    "InvalidLeafCount",
    "KeyOverflowError",
    "RootMismatch",
    "SerializationError",
    "get_hash_function",
    "get_hash_backend",
    "set_hash_backend",
    "HashFunction",
    "ensure_same_parameters",
    "MerkleProof",
    "MerkleTree",
    "pad_leaves",
    "InclusionStatement",
    "PositionPolicy",
    "ProofRequest",
    "PoseidonHash",
    "MiMCHash",
]

_LAZY_EXPORTS = {
    "PoseidonHash": "hashes.poseidon",
    "MiMCHash": "hashes.mimc",
}


def __getattr__(name: str):
    if name in _LAZY_EXPORTS:
        module = import_module(f"{__name__}.{_LAZY_EXPORTS[name]}")
        value = getattr(module, name)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
