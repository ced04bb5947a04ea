"""
Range-checked bit decomposition of tree positions.

A key that does not fit in ``depth`` bits is rejected, never truncated: a
truncated key would authenticate a path to a different leaf.
"""

from typing import Sequence, Tuple

from .exceptions import KeyOverflowError


def decompose(key: int, depth: int) -> Tuple[int, ...]:
    """
    Little-endian bit expansion of ``key`` (bit 0 is least significant).

    Args:
        key: Position in [0, 2^depth)
        depth: Number of bits

    Returns:
        Tuple of ``depth`` bits, each 0 or 1

    Raises:
        TypeError: If key or depth is not an int
        ValueError: If depth is negative
        KeyOverflowError: If key is negative or key >= 2^depth
    """
    if isinstance(key, bool) or not isinstance(key, int):
        raise TypeError(f"key must be int, got {type(key).__name__}")
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TypeError(f"depth must be int, got {type(depth).__name__}")
    if depth < 0:
        raise ValueError(f"depth must be non-negative, got {depth}")
    if key < 0 or key >> depth:
        raise KeyOverflowError(f"key {key} does not fit in {depth} bits")

    return tuple((key >> i) & 1 for i in range(depth))


def recompose(bits: Sequence[int]) -> int:
    """Inverse of ``decompose``."""
    key = 0
    for i, bit in enumerate(bits):
        if bit not in (0, 1) or isinstance(bit, bool):
            raise ValueError(f"bits[{i}] must be 0 or 1, got {bit!r}")
        key |= bit << i
    return key
