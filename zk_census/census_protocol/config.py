"""
⚠️ DRAFT — requires crypto review before production use

Field and hash configuration for census membership proofs.

This is a PROTOTYPE implementation for testing and validation.
DO NOT use in production without security audit.

Tree construction and circuit verification both read their parameters from
this module. Changing any value here changes every root and every proof.
"""

from math import gcd

from .exceptions import ConfigurationError

# ============================================================================
# FIELD SELECTION
# ============================================================================

# IMPLEMENTATION: BN254 scalar field
# - Native field of the common pairing-based SNARK backends
# - Poseidon and MiMC parameters are well studied over it

FIELD_NAME = "BN254"
FIELD_MODULUS = (
    21888242871839275222246405745257275088548364400416034343698204186575808495617
)
FIELD_BITS = 254
FIELD_ELEMENT_BYTES = 32  # Canonical big-endian encoding

# ============================================================================
# POSEIDON PARAMETERS
# ============================================================================

# Width t = arity + 1 (one capacity element)
POSEIDON_ALPHA = 5  # S-box x^5, gcd(5, p - 1) = 1 over BN254
POSEIDON_FULL_ROUNDS = 8
POSEIDON_PARTIAL_ROUNDS = {
    2: 56,  # arity 1 (key derivation)
    3: 57,  # arity 2 (node combination)
}

# Round constants are expanded from this seed (nothing-up-my-sleeve)
POSEIDON_SEED = b"ZK_CENSUS_V1_POSEIDON_CONSTANTS"

# ============================================================================
# MIMC PARAMETERS
# ============================================================================

MIMC_EXPONENT = 7  # MiMC-7, gcd(7, p - 1) = 1 over BN254
MIMC_ROUNDS = 91
MIMC_SEED = b"ZK_CENSUS_V1_MIMC_CONSTANTS"

# ============================================================================
# HASH BACKENDS
# ============================================================================

HASH_BACKENDS = ("poseidon", "mimc")
DEFAULT_HASH_BACKEND = "poseidon"

# Parameter fingerprints are SHA-256 over the CBOR encoding of the parameters
FINGERPRINT_HASH = "SHA-256"

# ============================================================================
# TREE LIMITS
# ============================================================================

MAX_TREE_DEPTH = 32  # 2^32 census members
DEFAULT_TREE_DEPTH = 20

# ============================================================================
# PROOF REQUEST SERIALIZATION
# ============================================================================

SERIALIZATION_FORMAT = "CBOR"
PROOF_REQUEST_VERSION = 1
MAX_PROOF_REQUEST_BYTES = 8 * 1024

# ============================================================================
# VALIDATION
# ============================================================================


def is_probable_prime(n: int) -> bool:
    """Fermat check against a few small bases."""
    if n < 2:
        return False
    for base in (2, 3, 5, 7, 11, 13):
        if n % base == 0:
            return n == base
        if pow(base, n - 1, n) != 1:
            return False
    return True


def validate_field_parameters(modulus: int, exponent: int) -> None:
    """
    Check that a field modulus and S-box exponent are usable.

    Raises:
        ConfigurationError: If the modulus is not an odd probable prime above
            2^64 or x^exponent is not a permutation of the field.
    """
    if not isinstance(modulus, int) or modulus <= 2**64:
        raise ConfigurationError(f"Field modulus too small: {modulus!r}")
    if not is_probable_prime(modulus):
        raise ConfigurationError("Field modulus is not prime")
    if exponent < 3 or gcd(exponent, modulus - 1) != 1:
        raise ConfigurationError(
            f"S-box exponent {exponent} is not a permutation of the field"
        )


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        ConfigurationError: If configuration is invalid
    """
    if FIELD_MODULUS.bit_length() != FIELD_BITS:
        raise ConfigurationError("FIELD_BITS does not match FIELD_MODULUS")
    if FIELD_ELEMENT_BYTES * 8 < FIELD_BITS:
        raise ConfigurationError("FIELD_ELEMENT_BYTES too small for the field")

    validate_field_parameters(FIELD_MODULUS, POSEIDON_ALPHA)
    validate_field_parameters(FIELD_MODULUS, MIMC_EXPONENT)

    if POSEIDON_FULL_ROUNDS <= 0 or POSEIDON_FULL_ROUNDS % 2:
        raise ConfigurationError("Poseidon full rounds must be positive and even")
    if sorted(POSEIDON_PARTIAL_ROUNDS) != [2, 3]:
        raise ConfigurationError("Poseidon partial rounds needed for widths 2 and 3")
    if MIMC_ROUNDS <= 0:
        raise ConfigurationError("MiMC rounds must be positive")

    if DEFAULT_HASH_BACKEND not in HASH_BACKENDS:
        raise ConfigurationError(
            f"Default hash backend {DEFAULT_HASH_BACKEND!r} is not registered"
        )
    if not 0 <= DEFAULT_TREE_DEPTH <= MAX_TREE_DEPTH:
        raise ConfigurationError("DEFAULT_TREE_DEPTH outside [0, MAX_TREE_DEPTH]")

    return True


# Auto-validate on import
validate_config()
