"""
zk-census: anonymous census membership over an algebraic Merkle tree.

⚠️ PROOF OF CONCEPT - NOT PRODUCTION READY
"""

__version__ = "0.1.0"

DISCLAIMER = (
    "⚠️  PROTOTYPE: census membership circuits and hash parameters have not "
    "been audited. Do not use to protect real credentials."
)
