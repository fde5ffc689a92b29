# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Range-based transcoding between two byte encodings.

Valid byte sequences of a character set are rarely scattered: they come in
blocks that map to blocks of code points. Each block is described as a pair of
hyperrectangles, one for the input encoding and one for the output encoding,
e.g. for ISO-8859-1 to UTF-8:

    [(0x80, 0xff)] -> [(0xc2, 0xc3), (0x80, 0xbf)]

Both hyperrectangles have the same number of points, so the n-th input sequence
corresponds to the n-th output sequence in lexicographic order. The position of
a sequence is computed as a mixed-radix number, where each byte has its own
base equal to the size of its range:

    index = Σ (byte[i] - min[i]) × multiplier[i]

with the multiplier of the last byte being 1 and the multiplier of byte i the
product of the sizes of the ranges of the bytes after it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from functools import reduce
from typing import Self, TypeAlias

from .encoding_tree import MAX_ENCODING_LENGTH

Bound: TypeAlias = tuple[int, int]
"Minimum and maximum (inclusive) of one byte position"

UNMERGEABLE = 2


@dataclass
class RangeBounds:
    bounds: list[Bound]

    def __len__(self) -> int:
        return len(self.bounds)

    def __iter__(self) -> Iterator[Bound]:
        yield from self.bounds

    @classmethod
    def from_bytes(cls, data: bytes) -> Self:
        return cls([(b, b) for b in data])

    @property
    def count(self) -> int:
        "Number of byte sequences in the hyperrectangle"
        return reduce(lambda acc, b: acc * (b[1] - b[0] + 1), self.bounds, 1)

    @staticmethod
    def bounds_contains(l: Bound, r: Bound) -> bool:
        return l[0] <= r[0] and l[1] >= r[1]

    @staticmethod
    def bounds_adjacent(l: Bound, r: Bound) -> bool:
        # Bytes cannot overflow past 0xff
        return l[1] + 1 == r[0] or r[1] + 1 == l[0]

    def differences(self, other: RangeBounds) -> int:
        """
        Count the positions where `other` is not contained in these bounds.

        Only adjacent positions are allowed to differ, and only once; anything
        else is reported as `UNMERGEABLE`.
        """
        if len(self) != len(other):
            return UNMERGEABLE
        differences = 0
        for l, r in zip(self.bounds, other.bounds):
            if self.bounds_contains(l, r):
                continue
            if self.bounds_adjacent(l, r):
                differences += 1
            else:
                return UNMERGEABLE
        return min(differences, UNMERGEABLE)

    def appended_count(self, other: RangeBounds) -> int | None:
        """
        Number of sequences `other` adds to these bounds, or `None` if their
        union would not enumerate these sequences first, in the same order,
        and then exactly those of `other`.

        That holds when `other` is contained (nothing is added), or when both
        bounds are equal except at one position where `other` directly
        follows, and every position before it is a single byte.
        """
        if len(self) != len(other):
            return None
        if all(self.bounds_contains(l, r) for l, r in zip(self.bounds, other.bounds)):
            return 0
        positions = [
            i for i, (l, r) in enumerate(zip(self.bounds, other.bounds)) if l != r
        ]
        if len(positions) != 1:
            return None
        k = positions[0]
        if self.bounds[k][1] + 1 != other.bounds[k][0]:
            return None
        if any(lo != hi for lo, hi in self.bounds[:k]):
            return None
        return other.count

    def union(self, other: RangeBounds) -> RangeBounds:
        return RangeBounds(
            [
                (min(l[0], r[0]), max(l[1], r[1]))
                for l, r in zip(self.bounds, other.bounds)
            ]
        )

    def multipliers(self) -> tuple[int, ...]:
        mults: list[int] = []
        mult = 1
        for lo, hi in reversed(self.bounds):
            mults.append(mult)
            mult *= hi - lo + 1
        return tuple(reversed(mults))


@dataclass(frozen=True)
class RangeEntry:
    input_range: tuple[Bound, ...]
    output_range: tuple[Bound, ...]
    input_multipliers: tuple[int, ...]
    output_multipliers: tuple[int, ...]

    @classmethod
    def from_bounds(cls, input_range: RangeBounds, output_range: RangeBounds) -> Self:
        return cls(
            input_range=tuple(input_range),
            output_range=tuple(output_range),
            input_multipliers=input_range.multipliers(),
            output_multipliers=output_range.multipliers(),
        )

    @property
    def count(self) -> int:
        return RangeBounds(list(self.input_range)).count

    @staticmethod
    def _transcode(
        data: bytes,
        source: Sequence[Bound],
        source_mults: Sequence[int],
        target: Sequence[Bound],
        target_mults: Sequence[int],
    ) -> bytes:
        index = sum((b - lo) * m for b, (lo, _), m in zip(data, source, source_mults))
        out = bytearray()
        for (lo, _), m in zip(target, target_mults):
            digit, index = divmod(index, m)
            out.append(lo + digit)
        return bytes(out)

    def decode(self, data: bytes) -> bytes:
        return self._transcode(
            data,
            self.input_range,
            self.input_multipliers,
            self.output_range,
            self.output_multipliers,
        )

    def encode(self, data: bytes) -> bytes:
        return self._transcode(
            data,
            self.output_range,
            self.output_multipliers,
            self.input_range,
            self.input_multipliers,
        )


def _contains(bounds: Sequence[Bound], data: bytes) -> bool:
    return all(lo <= b <= hi for b, (lo, hi) in zip(data, bounds))


@dataclass(frozen=True)
class RangeMap:
    """
    Bidirectional transcoder: `decode` converts from the input encoding to the
    output encoding and `encode` does the reverse.

    Entries are bucketed by the length of their input (respectively output)
    byte sequences: bucket `n - 1` holds the entries of length `n`.
    """

    input_entries: tuple[tuple[RangeEntry, ...], ...]
    output_entries: tuple[tuple[RangeEntry, ...], ...]

    @property
    def entries(self) -> Iterator[RangeEntry]:
        for bucket in self.input_entries:
            yield from bucket

    def __len__(self) -> int:
        return sum(map(len, self.input_entries))

    def decode(self, data: bytes) -> bytes | None:
        if not 0 < len(data) <= len(self.input_entries):
            return None
        for entry in self.input_entries[len(data) - 1]:
            if _contains(entry.input_range, data):
                return entry.decode(data)
        return None

    def encode(self, data: bytes) -> bytes | None:
        if not 0 < len(data) <= len(self.output_entries):
            return None
        for entry in self.output_entries[len(data) - 1]:
            if _contains(entry.output_range, data):
                return entry.encode(data)
        return None

    def check(
        self, pairs: Iterable[tuple[bytes, bytes]]
    ) -> list[tuple[str, bytes, bytes, bytes | None]]:
        """
        Check both directions for the given pairs and return the mismatches
        """
        errors: list[tuple[str, bytes, bytes, bytes | None]] = []
        for input, output in pairs:
            if (got := self.decode(input)) != output:
                errors.append(("decode", input, output, got))
            if (got := self.encode(output)) != input:
                errors.append(("encode", output, input, got))
        return errors


@dataclass
class RangeMapBuilder:
    """
    Collect equivalent byte sequences and consolidate them into a `RangeMap`.

    Pairs must be added sorted, with all the sequences of a given length given
    contiguously; iterating an `EncodingTree` provides exactly that.
    """

    inputs: list[RangeBounds] = field(default_factory=list)
    outputs: list[RangeBounds] = field(default_factory=list)

    def add(self, input: bytes, output: bytes) -> None:
        if not input:
            return
        self.inputs.append(RangeBounds.from_bytes(input))
        self.outputs.append(RangeBounds.from_bytes(output))

    def extend(self, pairs: Iterable[tuple[bytes, bytes]]) -> Self:
        for input, output in pairs:
            self.add(input, output)
        return self

    def consolidate(self) -> int:
        """
        Merge ranges until no more merge is possible and return the number of
        passes.

        Each range is compared to the previous one, on both sides. They are
        merged only if each side differs in at most one adjacent position and
        the current range appends the same number of sequences on both sides.
        """
        passes = 0
        merged = True
        while merged:
            merged = False
            passes += 1
            inputs: list[RangeBounds] = []
            outputs: list[RangeBounds] = []
            for input, output in zip(self.inputs, self.outputs):
                if inputs:
                    last_input = inputs[-1]
                    last_output = outputs[-1]
                    if (
                        last_input.differences(input) <= 1
                        and last_output.differences(output) <= 1
                    ):
                        added = last_input.appended_count(input)
                        if (
                            added is not None
                            and added == last_output.appended_count(output)
                        ):
                            inputs[-1] = last_input.union(input)
                            outputs[-1] = last_output.union(output)
                            merged = True
                            continue
                inputs.append(input)
                outputs.append(output)
            self.inputs = inputs
            self.outputs = outputs
        return passes

    def build(self) -> RangeMap:
        self.consolidate()
        input_entries: list[list[RangeEntry]] = [[] for _ in range(MAX_ENCODING_LENGTH)]
        output_entries: list[list[RangeEntry]] = [[] for _ in range(MAX_ENCODING_LENGTH)]
        for input, output in zip(self.inputs, self.outputs):
            if len(input) > MAX_ENCODING_LENGTH or len(output) > MAX_ENCODING_LENGTH:
                raise ValueError(f"Unsupported encoding length: {input}, {output}")
            entry = RangeEntry.from_bounds(input, output)
            input_entries[len(input) - 1].append(entry)
            output_entries[len(output) - 1].append(entry)
        return RangeMap(
            input_entries=tuple(map(tuple, input_entries)),
            output_entries=tuple(map(tuple, output_entries)),
        )
