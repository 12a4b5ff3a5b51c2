"""SHA-512 Merkle tree using the Roughtime leaf and node tweak values."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable

# RFC 5.3: leaf values are prefixed with 0x00 before hashing.
LEAF_TWEAK = b"\x00"
# RFC 5.3: interior nodes hash 0x01 || left || right.
NODE_TWEAK = b"\x01"
# RFC 5.3: node values are the first 32 bytes of SHA-512.
OUTPUT_LEN = 32
# RFC 5.2.4: the PATH MUST NOT contain more than 32 hash values.
MAX_PATH_DEPTH = 32


def _hash(*parts: bytes) -> bytes:
    digest = hashlib.sha512()
    for part in parts:
        digest.update(part)
    return digest.digest()[:OUTPUT_LEN]


class MerkleTree:
    """Binary hash tree in which each leaf represents one client request.

    Leaves are indexed left to right from zero. Odd-sized levels are padded
    with an all-zero node when the root is computed.
    """

    def __init__(self) -> None:
        self._levels: list[list[bytes]] = [[]]

    def push_leaf(self, data: bytes) -> None:
        """Hash ``data`` as a leaf and append it to the tree."""
        self._levels[0].append(self.hash_leaf(data))

    def reserve(self, num_leaves: int) -> None:
        """Prepare enough levels to hold a tree of ``num_leaves`` leaves."""
        if num_leaves < 0:
            raise ValueError(f"number of leaves cannot be negative: {num_leaves}")
        if num_leaves == 0:
            return
        max_levels = (num_leaves - 1).bit_length() + 1
        while len(self._levels) < max_levels:
            self._levels.append([])

    def get_paths(self, index: int) -> list[bytes]:
        """Return the sibling hashes from leaf ``index`` up to the root."""
        if index < 0:
            raise IndexError(f"leaf index cannot be negative: {index}")

        path: list[bytes] = []
        level = 0
        while level < len(self._levels) and self._levels[level]:
            nodes = self._levels[level]
            sibling = index ^ 1
            if sibling >= len(nodes):
                break
            path.append(nodes[sibling])
            level += 1
            index //= 2

        if level > MAX_PATH_DEPTH:
            raise RuntimeError(f"impossible: PATH depth {level} exceeds {MAX_PATH_DEPTH}")
        return path

    def compute_root(self) -> bytes:
        """Compute every level above the leaves and return the root hash."""
        if not self._levels[0]:
            raise ValueError("Must have at least one leaf to hash!")

        level = 0
        while len(self._levels[level]) > 1:
            below = self._levels[level]
            if len(below) % 2:
                below.append(bytes(OUTPUT_LEN))
            level += 1
            if len(self._levels) <= level:
                self._levels.append([])
            self._levels[level] = [
                _hash(NODE_TWEAK, left, right)
                for left, right in zip(below[::2], below[1::2])
            ]

        return self._levels[level][0]

    def clear(self) -> None:
        """Remove all leaves and computed nodes."""
        for nodes in self._levels:
            nodes.clear()

    def is_empty(self) -> bool:
        """True when the tree holds no leaves."""
        return not self._levels[0]

    def hash_leaf(self, leaf: bytes) -> bytes:
        """Return the tweaked leaf hash of ``leaf``."""
        return _hash(LEAF_TWEAK, leaf)

    def root_from_paths(self, index: int, init_data: bytes, paths: Iterable[bytes]) -> bytes:
        """Recompute a root from leaf data, its index and its sibling path."""
        node = self.hash_leaf(init_data)
        for sibling in paths:
            if index & 1 == 0:
                node = _hash(NODE_TWEAK, node, sibling)
            else:
                node = _hash(NODE_TWEAK, sibling, node)
            index >>= 1
        return node