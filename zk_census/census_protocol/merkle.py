"""
Merkle tree over an algebraic hash for census membership.

The tree is complete: exactly 2^depth leaves, no odd-level duplication.
Trees are immutable; ``replace`` returns a new snapshot so proofs issued
against an older root stay valid against that root.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from .config import MAX_TREE_DEPTH
from .exceptions import IndexOutOfRange, InvalidLeafCount
from .factory import get_hash_function
from .field import to_field, to_field_tuple
from .interfaces import HashFunction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MerkleProof:
    """
    Authentication path for one leaf.

    Attributes:
        index: Leaf position in [0, 2^depth)
        siblings: siblings[i] is the sibling at level i (leaf level first)
        root: Root of the tree the proof was derived from
        leaf_preimage: Secret whose hash is the leaf, when the caller knows it
    """

    index: int
    siblings: Tuple[int, ...]
    root: int
    leaf_preimage: Optional[int] = None

    @property
    def depth(self) -> int:
        return len(self.siblings)


class MerkleTree:
    """
    Complete binary Merkle tree built bottom-up with ``hash2``.

    levels[0] holds the leaves and levels[depth] the single root, with
    levels[l][i] == hash2(levels[l-1][2i], levels[l-1][2i+1]).

    Example:
        >>> h = get_hash_function()
        >>> leaves = [h.hash1(k) for k in (11, 22, 33, 44)]
        >>> tree = MerkleTree.build(leaves, h)
        >>> proof = tree.proof(2, leaf_preimage=33)
    """

    def __init__(self, levels: Tuple[Tuple[int, ...], ...], hash_function: HashFunction):
        # Use MerkleTree.build(); this does no validation
        self._levels = levels
        self._hash_function = hash_function

    @classmethod
    def build(
        cls,
        leaves: Sequence[Any],
        hash_function: Optional[HashFunction] = None,
        *,
        depth: Optional[int] = None,
        executor: Optional[Executor] = None,
    ) -> "MerkleTree":
        """
        Build a tree from exactly 2^depth leaves.

        Args:
            leaves: Leaf field elements, in census order
            hash_function: Hash backend (feature-flag default when omitted)
            depth: Declared depth; inferred from the leaf count when omitted
            executor: Optional executor; each level's hashes run in parallel
                and a level completes before the next one starts

        Returns:
            MerkleTree

        Raises:
            InvalidLeafCount: If len(leaves) != 2^depth, or no depth can be
                inferred from the count
            ValueError: If depth is outside [0, MAX_TREE_DEPTH] or a leaf is
                not a field element
        """
        if hash_function is None:
            hash_function = get_hash_function()

        count = len(leaves)
        if depth is None:
            if count == 0 or count & (count - 1):
                raise InvalidLeafCount(
                    f"Leaf count {count} is not a power of two"
                )
            depth = count.bit_length() - 1

        if not 0 <= depth <= MAX_TREE_DEPTH:
            raise ValueError(f"depth must be in [0, {MAX_TREE_DEPTH}], got {depth}")
        if count != 1 << depth:
            raise InvalidLeafCount(
                f"Expected {1 << depth} leaves for depth {depth}, got {count}"
            )

        level = to_field_tuple(leaves, "leaves", hash_function.modulus)
        levels = [level]
        for _ in range(depth):
            lefts = level[0::2]
            rights = level[1::2]
            if executor is None:
                level = tuple(map(hash_function.hash2, lefts, rights))
            else:
                level = tuple(executor.map(hash_function.hash2, lefts, rights))
            levels.append(level)

        tree = cls(tuple(levels), hash_function)
        logger.debug(
            "Built Merkle tree: depth=%d leaves=%d root=%x", depth, count, tree.root()
        )
        return tree

    @property
    def depth(self) -> int:
        return len(self._levels) - 1

    @property
    def leaves(self) -> Tuple[int, ...]:
        return self._levels[0]

    @property
    def levels(self) -> Tuple[Tuple[int, ...], ...]:
        return self._levels

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    def root(self) -> int:
        return self._levels[self.depth][0]

    def proof(self, index: int, leaf_preimage: Any = None) -> MerkleProof:
        """
        Extract the authentication path for ``index``.

        Args:
            index: Leaf position
            leaf_preimage: Optional secret to attach to the proof

        Returns:
            MerkleProof with siblings ordered from the leaf level upward

        Raises:
            TypeError: If index is not an int
            IndexOutOfRange: If index is outside [0, 2^depth)
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"index must be int, got {type(index).__name__}")
        if not 0 <= index < len(self.leaves):
            raise IndexOutOfRange(
                f"Leaf index {index} out of range [0, {len(self.leaves)})"
            )

        siblings = tuple(
            self._levels[level][(index >> level) ^ 1] for level in range(self.depth)
        )
        if leaf_preimage is not None:
            leaf_preimage = to_field(
                leaf_preimage, "leaf_preimage", self._hash_function.modulus
            )
        return MerkleProof(
            index=index,
            siblings=siblings,
            root=self.root(),
            leaf_preimage=leaf_preimage,
        )

    def replace(self, index: int, leaf: Any) -> "MerkleTree":
        """Return a new tree with one leaf changed; this tree is untouched."""
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(f"index must be int, got {type(index).__name__}")
        if not 0 <= index < len(self.leaves):
            raise IndexOutOfRange(
                f"Leaf index {index} out of range [0, {len(self.leaves)})"
            )
        leaves = list(self.leaves)
        leaves[index] = leaf
        return MerkleTree.build(leaves, self._hash_function, depth=self.depth)

    def index_of(self, leaf: int) -> int:
        """First position holding ``leaf``."""
        try:
            return self.leaves.index(leaf)
        except ValueError:
            raise ValueError("Leaf is not in the census") from None

    def __len__(self) -> int:
        return len(self.leaves)

    def __repr__(self) -> str:
        root_hex = f"{self.root():064x}"
        return (
            f"MerkleTree(depth={self.depth}, leaves={len(self)}, "
            f"hash={self._hash_function.name}, root={root_hex[:16]}...)"
        )


def pad_leaves(leaves: Sequence[Any], depth: int, filler: int = 0) -> list:
    """
    Pad a census to 2^depth leaves with ``filler``.

    Raises:
        TypeError: If depth is not an int
        ValueError: If depth is outside [0, MAX_TREE_DEPTH]
        InvalidLeafCount: If there are more members than leaf slots
    """
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TypeError(f"depth must be int, got {type(depth).__name__}")
    if not 0 <= depth <= MAX_TREE_DEPTH:
        raise ValueError(f"depth must be in [0, {MAX_TREE_DEPTH}], got {depth}")
    capacity = 1 << depth
    if len(leaves) > capacity:
        raise InvalidLeafCount(
            f"{len(leaves)} members do not fit in a depth-{depth} tree"
        )
    return list(leaves) + [filler] * (capacity - len(leaves))
