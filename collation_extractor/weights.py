# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Discovery and compression of collation weights.

The collation order is discovered one code point at a time: each new code point
is placed by binary search among the already known weights, using a comparator
backed by the ground-truth oracle. The result is a sequence of rows, where the
index of a row is the weight of all the code points it contains.

Weights are then compressed into ranges:
• Static ranges: consecutive code points sharing the same weight.
• Dynamic ranges: consecutive code points whose weight is the code point plus a
  constant offset, i.e. code points sorted in their numeric order.
"""

from __future__ import annotations

import bisect
import itertools
import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from functools import cached_property
from typing import TypeAlias

from .codepoints import CodePoint
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Comparator: TypeAlias = Callable[[CodePoint, CodePoint], int]

UNKNOWN_WEIGHT = 0x7FFFFFFF
"Weight of the code points absent from the collation; they sort last"

DEFAULT_MIN_DYNAMIC_LENGTH = 3


class OrderCatalog:
    """
    Code points grouped by weight: the index of a row is its weight.

    Code points must be inserted in ascending order.
    """

    def __init__(self, comparator: Comparator | None = None) -> None:
        self.rows: list[list[CodePoint]] = []
        self.comparator = comparator

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[tuple[int, CodePoint]]:
        for weight, row in enumerate(self.rows):
            for cp in row:
                yield weight, cp

    def insert(self, cp: CodePoint) -> int:
        """
        Insert a code point and return its current row index
        """
        if (compare := self.comparator) is None:
            raise ConfigurationError("A comparator must be set before inserting")
        if not self.rows:
            self.rows.append([cp])
            return 0
        low = 0
        high = len(self.rows) - 1
        while low < high:
            mid = (low + high) // 2
            match compare(cp, self.rows[mid][0]):
                case 1:
                    low = mid + 1
                case -1:
                    high = mid
                case 0:
                    self.rows[mid].append(cp)
                    return mid
                case result:
                    raise ValueError(f"Invalid comparison result: {result!r}")
        match compare(cp, self.rows[low][0]):
            case 1:
                self.rows.insert(low + 1, [cp])
                return low + 1
            case -1:
                self.rows.insert(low, [cp])
                return low
            case 0:
                self.rows[low].append(cp)
                return low
            case result:
                raise ValueError(f"Invalid comparison result: {result!r}")

    def weights(self) -> dict[CodePoint, int]:
        return {cp: weight for weight, cp in self}


@dataclass(frozen=True, order=True)
class StaticWeightRange:
    lower: CodePoint
    upper: CodePoint
    weight: int

    def __len__(self) -> int:
        return self.upper - self.lower + 1

    def __contains__(self, cp: int) -> bool:
        return self.lower <= cp <= self.upper


@dataclass(frozen=True, order=True)
class DynamicWeightRange:
    lower: CodePoint
    upper: CodePoint
    offset: int
    "Weight minus code point"

    def __len__(self) -> int:
        return self.upper - self.lower + 1

    def __contains__(self, cp: int) -> bool:
        return self.lower <= cp <= self.upper

    def weight(self, cp: CodePoint) -> int:
        return cp + self.offset


@dataclass(frozen=True)
class CompressedWeights:
    static: tuple[StaticWeightRange, ...]
    dynamic: tuple[DynamicWeightRange, ...]

    @cached_property
    def _static_lowers(self) -> tuple[CodePoint, ...]:
        return tuple(r.lower for r in self.static)

    @cached_property
    def _dynamic_lowers(self) -> tuple[CodePoint, ...]:
        return tuple(r.lower for r in self.dynamic)

    def __len__(self) -> int:
        "Count of code points with a weight"
        return sum(map(len, self.static)) + sum(map(len, self.dynamic))

    def code_points(self) -> Iterator[CodePoint]:
        ranges = sorted(
            itertools.chain(self.static, self.dynamic), key=lambda r: r.lower
        )
        for r in ranges:
            yield from map(CodePoint, range(r.lower, r.upper + 1))

    def lookup(self, cp: CodePoint) -> tuple[int, bool]:
        """
        Return the weight of a code point and whether it is known. Unknown
        code points get `UNKNOWN_WEIGHT`.
        """
        if (n := bisect.bisect_right(self._dynamic_lowers, cp)) and cp in (
            d := self.dynamic[n - 1]
        ):
            return d.weight(cp), True
        if (n := bisect.bisect_right(self._static_lowers, cp)) and cp in (
            s := self.static[n - 1]
        ):
            return s.weight, True
        return UNKNOWN_WEIGHT, False

    def weight(self, cp: CodePoint) -> int:
        return self.lookup(cp)[0]


@dataclass
class RangeCompressor:
    min_dynamic_length: int = DEFAULT_MIN_DYNAMIC_LENGTH
    "Shortest run of code points worth a dynamic range"

    @staticmethod
    def static_ranges(
        weights: Iterable[tuple[int, CodePoint]],
    ) -> list[StaticWeightRange]:
        ranges: list[StaticWeightRange] = []
        for weight, cp in sorted(weights, key=lambda x: x[1]):
            if (
                ranges
                and (last := ranges[-1]).upper + 1 == cp
                and last.weight == weight
            ):
                ranges[-1] = StaticWeightRange(last.lower, cp, weight)
            else:
                ranges.append(StaticWeightRange(cp, cp, weight))
        return ranges

    def _flush(
        self,
        run: list[StaticWeightRange],
        static: list[StaticWeightRange],
        dynamic: list[DynamicWeightRange],
    ) -> None:
        if len(run) >= self.min_dynamic_length:
            dynamic.append(
                DynamicWeightRange(
                    run[0].lower, run[-1].upper, run[0].weight - run[0].lower
                )
            )
        else:
            static.extend(run)
        run.clear()

    def compress(
        self, catalog: OrderCatalog | Iterable[tuple[int, CodePoint]]
    ) -> CompressedWeights:
        static: list[StaticWeightRange] = []
        dynamic: list[DynamicWeightRange] = []
        run: list[StaticWeightRange] = []
        for r in self.static_ranges(catalog):
            if len(r) > 1:
                self._flush(run, static, dynamic)
                static.append(r)
                continue
            if run and not (
                run[-1].upper + 1 == r.lower
                and run[-1].weight - run[-1].lower == r.weight - r.lower
            ):
                self._flush(run, static, dynamic)
            run.append(r)
        self._flush(run, static, dynamic)
        logger.debug(
            "Compressed weights: %d static ranges, %d dynamic ranges",
            len(static),
            len(dynamic),
        )
        return CompressedWeights(static=tuple(sorted(static)), dynamic=tuple(dynamic))
