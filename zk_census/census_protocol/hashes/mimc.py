"""
⚠️ DRAFT — requires crypto review before production use

MiMC-7 hash over the BN254 scalar field.

The MiMC block cipher E_k(x) applies ``rounds`` iterations of
x <- (x + k + c_i)^7 and finishes with x + k. Inputs are absorbed in
Miyaguchi–Preneel mode, h <- E_h(m) + h + m, starting from h = arity so that
one- and two-input hashes are domain separated.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from ..config import (
    FIELD_MODULUS,
    MIMC_EXPONENT,
    MIMC_ROUNDS,
    MIMC_SEED,
    validate_field_parameters,
)
from ..exceptions import ConfigurationError
from ..interfaces import HashFunction
from . import expand_constants


class MiMCHash(HashFunction):
    """MiMC-7 in Miyaguchi–Preneel mode."""

    name = "mimc"

    def __init__(
        self,
        *,
        modulus: int = FIELD_MODULUS,
        exponent: int = MIMC_EXPONENT,
        rounds: int = MIMC_ROUNDS,
        seed: bytes = MIMC_SEED,
    ) -> None:
        validate_field_parameters(modulus, exponent)
        if rounds <= 0:
            raise ConfigurationError("MiMC rounds must be positive")
        super().__init__(modulus)
        self._exponent = exponent
        self._seed = seed
        # First constant is zero, as in the original MiMC construction
        self._constants = (0,) + expand_constants(seed, rounds - 1, modulus)

    def encrypt(self, x: int, key: int) -> int:
        p = self._modulus
        for constant in self._constants:
            x = pow((x + key + constant) % p, self._exponent, p)
        return (x + key) % p

    def compress(self, values: Sequence[int]) -> int:
        p = self._modulus
        h = len(values)
        for m in values:
            h = (self.encrypt(m, h) + h + m) % p
        return h

    def hash1(self, x: int) -> int:
        return self.compress((x,))

    def hash2(self, a: int, b: int) -> int:
        return self.compress((a, b))

    def parameters(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "modulus": self._modulus,
            "exponent": self._exponent,
            "rounds": len(self._constants),
            "seed": self._seed,
            "round_constants": list(self._constants),
        }
