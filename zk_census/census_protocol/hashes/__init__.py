"""Algebraic hash backends."""

import hashlib
from typing import Tuple


def expand_constants(seed: bytes, count: int, modulus: int) -> Tuple[int, ...]:
    """
    Derive ``count`` field elements from a seed.

    SHA-256 in counter mode, each digest reduced modulo the field.
    """
    constants = []
    for counter in range(count):
        digest = hashlib.sha256(seed + counter.to_bytes(4, "big")).digest()
        constants.append(int.from_bytes(digest, "big") % modulus)
    return tuple(constants)
