"""
⚠️ DRAFT — requires crypto review before production use

Poseidon hash over the BN254 scalar field.

Uses the HADES layout: R_F/2 full rounds, R_P partial rounds, R_F/2 full
rounds. Each round adds round constants, applies the S-box (to every state
element in full rounds, to state[0] only in partial rounds) and multiplies by
an MDS matrix.

Round constants are expanded from ``POSEIDON_SEED`` rather than the Grain LFSR
of the reference paper, so outputs do not match other Poseidon deployments.
The MDS matrix is the Cauchy matrix M[i][j] = 1 / (x_i + y_j) with
x_i = i and y_j = t + j.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from ..config import (
    FIELD_MODULUS,
    POSEIDON_ALPHA,
    POSEIDON_FULL_ROUNDS,
    POSEIDON_PARTIAL_ROUNDS,
    POSEIDON_SEED,
    validate_field_parameters,
)
from ..exceptions import ConfigurationError
from ..interfaces import HashFunction
from . import expand_constants


@dataclass(frozen=True)
class PoseidonParams:
    """Permutation parameters for one state width."""

    width: int
    full_rounds: int
    partial_rounds: int
    alpha: int
    round_constants: Tuple[int, ...]
    mds: Tuple[Tuple[int, ...], ...]

    @classmethod
    def generate(
        cls,
        width: int,
        full_rounds: int,
        partial_rounds: int,
        alpha: int,
        seed: bytes,
        modulus: int,
    ) -> "PoseidonParams":
        if width < 2:
            raise ConfigurationError("Poseidon width must be at least 2")
        if full_rounds <= 0 or full_rounds % 2:
            raise ConfigurationError("Poseidon full rounds must be positive and even")
        if partial_rounds <= 0:
            raise ConfigurationError("Poseidon partial rounds must be positive")

        count = (full_rounds + partial_rounds) * width
        round_constants = expand_constants(
            seed + b"_T" + bytes([width]), count, modulus
        )
        mds = tuple(
            tuple(pow(i + width + j, -1, modulus) for j in range(width))
            for i in range(width)
        )
        return cls(width, full_rounds, partial_rounds, alpha, round_constants, mds)


class PoseidonHash(HashFunction):
    """
    Poseidon with one capacity element.

    ``hash1`` runs the width-2 permutation, ``hash2`` the width-3 one, so the
    two arities never share a permutation instance.

    Example:
        >>> h = PoseidonHash()
        >>> leaf = h.hash1(33)
        >>> parent = h.hash2(leaf, h.hash1(44))
    """

    name = "poseidon"

    def __init__(
        self,
        *,
        modulus: int = FIELD_MODULUS,
        alpha: int = POSEIDON_ALPHA,
        full_rounds: int = POSEIDON_FULL_ROUNDS,
        partial_rounds: Optional[Dict[int, int]] = None,
        seed: bytes = POSEIDON_SEED,
    ) -> None:
        validate_field_parameters(modulus, alpha)
        super().__init__(modulus)
        partial_rounds = dict(partial_rounds or POSEIDON_PARTIAL_ROUNDS)
        missing = {2, 3} - set(partial_rounds)
        if missing:
            raise ConfigurationError(
                f"Poseidon partial rounds missing for widths {sorted(missing)}"
            )
        self._seed = seed
        self._params = {
            width: PoseidonParams.generate(
                width, full_rounds, partial_rounds[width], alpha, seed, modulus
            )
            for width in (2, 3)
        }

    def hash1(self, x: int) -> int:
        return self.permute([0, x], self._params[2])[0]

    def hash2(self, a: int, b: int) -> int:
        return self.permute([0, a, b], self._params[3])[0]

    def permute(self, state: Sequence[int], params: PoseidonParams) -> list:
        p = self._modulus
        if len(state) != params.width:
            raise ValueError(f"state must have {params.width} elements")

        state = [value % p for value in state]
        half = params.full_rounds // 2
        total = params.full_rounds + params.partial_rounds
        constants = params.round_constants

        for rnd in range(total):
            offset = rnd * params.width
            state = [
                (value + constants[offset + i]) % p for i, value in enumerate(state)
            ]
            if rnd < half or rnd >= half + params.partial_rounds:
                state = [pow(value, params.alpha, p) for value in state]
            else:
                state[0] = pow(state[0], params.alpha, p)
            state = [
                sum(m * value for m, value in zip(row, state)) % p
                for row in params.mds
            ]
        return state

    def parameters(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "modulus": self._modulus,
            "seed": self._seed,
            "widths": {
                width: {
                    "full_rounds": params.full_rounds,
                    "partial_rounds": params.partial_rounds,
                    "alpha": params.alpha,
                    "round_constants": list(params.round_constants),
                    "mds": [list(row) for row in params.mds],
                }
                for width, params in self._params.items()
            },
        }
