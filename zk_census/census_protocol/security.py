"""
⚠️ DRAFT — requires crypto review before production use

Secret generation for census members.

This is a PROTOTYPE implementation for testing and validation.
DO NOT use in production without security audit.
"""

import hashlib
import os
import secrets
from typing import Optional

from .config import FIELD_MODULUS

# ============================================================================
# RANDOMNESS SOURCE (Fork-Safe)
# ============================================================================


class RandomnessSource:
    """
    Cryptographically secure randomness with fork detection.

    Prevents randomness reuse if process forks.

    Example:
        >>> rng = RandomnessSource()
        >>> secret = rng.get_random_field_element()
    """

    def __init__(self):
        """Initialize randomness source with fork detection."""
        self._pid = os.getpid()
        self._rng = secrets.SystemRandom()

    def _check_fork(self) -> None:
        if os.getpid() != self._pid:
            self.__init__()

    def get_random_scalar(self, max_value: int) -> int:
        """
        Get random scalar in [0, max_value).

        Args:
            max_value: Upper bound (exclusive)
        """
        self._check_fork()
        return self._rng.randrange(0, max_value)

    def get_random_bytes(self, n: int) -> bytes:
        self._check_fork()
        return secrets.token_bytes(n)

    def get_random_field_element(self, modulus: int = FIELD_MODULUS) -> int:
        """
        Get a random non-zero field element, suitable as a member secret.

        Returns:
            Random value in [1, modulus)
        """
        return 1 + self.get_random_scalar(modulus - 1)


# ============================================================================
# HASH TO FIELD
# ============================================================================


def hash_to_field(
    data: bytes, modulus: int = FIELD_MODULUS, domain_sep: Optional[bytes] = None
) -> int:
    """
    Hash data to a field element with domain separation.

    Args:
        data: Data to hash (must be non-empty)
        modulus: Field characteristic
        domain_sep: Optional domain separator

    Returns:
        Element in [0, modulus)

    Raises:
        ValueError: If inputs are invalid
        TypeError: If inputs are wrong type

    Security Note:
        Reduces a 512-bit digest so the modulo bias is negligible.
    """
    if not isinstance(data, bytes):
        raise TypeError(f"data must be bytes, got {type(data)}")
    if not data:
        raise ValueError("Data cannot be empty")

    if domain_sep:
        if not isinstance(domain_sep, bytes):
            raise TypeError(f"domain_sep must be bytes, got {type(domain_sep)}")
        data = len(domain_sep).to_bytes(4, "big") + domain_sep + data

    digest = hashlib.sha512(data).digest()
    return int.from_bytes(digest, "big") % modulus
