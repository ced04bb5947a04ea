"""
⚠️ DRAFT — requires crypto review before production use

Custom exceptions for the census membership protocol.

Input errors also derive from the matching built-in exception so generic
handlers (``except ValueError``) keep working.
"""


class CensusProtocolError(Exception):
    """Base exception for census protocol errors."""

    pass


class InvalidLeafCount(CensusProtocolError, ValueError):
    """Leaf count does not match 2^depth."""

    pass


class IndexOutOfRange(CensusProtocolError, IndexError):
    """Proof requested for an index outside [0, 2^depth)."""

    pass


class KeyOverflowError(CensusProtocolError, OverflowError):
    """Position does not fit losslessly in depth bits."""

    pass


class RootMismatch(CensusProtocolError):
    """Recomputed root differs from the committed root."""

    pass


class ConfigurationError(CensusProtocolError):
    """Configuration error, including mismatched hash parameters."""

    pass


class SerializationError(CensusProtocolError):
    """Proof request could not be encoded or decoded."""

    pass
