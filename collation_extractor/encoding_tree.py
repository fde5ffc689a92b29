# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Tree of the byte sequences of a character set.

Each path from the root spells a byte sequence of the character set; the node
at the end of a complete sequence is a leaf and carries the data associated to
it (in practice the UTF-8 encoding of the decoded character). Inner nodes never
carry data, so a byte sequence is decoded by walking the tree until a leaf is
found.
"""

from __future__ import annotations

from collections.abc import Iterator

from .errors import StructuralConflict

MAX_ENCODING_LENGTH = 4
"Longest byte sequence of any supported character set"


class EncodingTree:
    __slots__ = ("nodes", "data", "min", "max")

    def __init__(self) -> None:
        self.nodes: dict[int, EncodingTree] = {}
        self.data: bytes | None = None
        self.min = 0
        self.max = 0

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(data={self.data!r}, nodes={sorted(self.nodes)})"

    @property
    def is_leaf(self) -> bool:
        return self.data is not None and not self.nodes

    def add_child(self, value: int) -> EncodingTree:
        """
        Return the subtree for the given byte, creating it if needed.
        """
        if (subtree := self.nodes.get(value)) is not None:
            return subtree
        if self.data is not None:
            raise StructuralConflict(
                f"Cannot add byte 0x{value:0>2x} under a leaf holding {self.data!r}"
            )
        if not self.nodes:
            self.min = self.max = value
        elif value < self.min:
            self.min = value
        elif value > self.max:
            self.max = value
        child = self.nodes[value] = EncodingTree()
        return child

    def set_data(self, data: bytes) -> None:
        if self.nodes or self.data is not None:
            raise StructuralConflict(
                f"Cannot set {data!r}: node already has "
                + ("children" if self.nodes else f"data {self.data!r}")
            )
        self.data = data

    def child(self, value: int) -> EncodingTree | None:
        return self.nodes.get(value)

    def insert(self, encoding: bytes, data: bytes) -> None:
        if not 0 < len(encoding) <= MAX_ENCODING_LENGTH:
            raise ValueError(f"Unsupported encoding length: {encoding!r}")
        tree = self
        for byte in encoding:
            tree = tree.add_child(byte)
        tree.set_data(data)

    def lookup(self, encoding: bytes) -> bytes | None:
        tree: EncodingTree | None = self
        for byte in encoding:
            if tree is None:
                return None
            tree = tree.child(byte)
        return None if tree is None else tree.data

    def _leaves(self, prefix: bytes, depth: int) -> Iterator[tuple[bytes, bytes]]:
        for value in range(self.min, self.max + 1):
            if (subtree := self.nodes.get(value)) is None:
                continue
            encoding = prefix + bytes((value,))
            if depth == 1:
                if subtree.is_leaf:
                    assert subtree.data is not None
                    yield encoding, subtree.data
            elif subtree.nodes:
                yield from subtree._leaves(encoding, depth - 1)

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        """
        Iterate over all the (encoding, data) pairs, shortest encodings first
        and then in ascending byte order.
        """
        for depth in range(1, MAX_ENCODING_LENGTH + 1):
            yield from self._leaves(b"", depth)
