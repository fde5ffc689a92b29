# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Iteration over the valid Unicode scalar values
"""

from __future__ import annotations

import sys
from typing import NewType, Self

CodePoint = NewType("CodePoint", int)

MAX_CODE_POINT = CodePoint(sys.maxunicode)
SURROGATE_MIN = CodePoint(0xD800)
SURROGATE_MAX = CodePoint(0xDFFF)
CODE_POINT_COUNT = MAX_CODE_POINT + 1 - (SURROGATE_MAX - SURROGATE_MIN + 1)


def is_valid(cp: int) -> bool:
    return 0 <= cp <= MAX_CODE_POINT and not (SURROGATE_MIN <= cp <= SURROGATE_MAX)


class CodePointIterator:
    """
    Ascending iterator over every Unicode scalar value.

    Surrogates are skipped in one step. The iterator can be capped with
    `limit`, which is handy to sample the first code points only, and
    restarted with `reset`.
    """

    def __init__(self, limit: int | None = None) -> None:
        self.limit = limit
        self.reset()

    def reset(self) -> None:
        self._cp = 0
        self._count = 0

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> CodePoint:
        if self.limit is not None and self._count >= self.limit:
            raise StopIteration
        if self._cp > MAX_CODE_POINT:
            raise StopIteration
        if SURROGATE_MIN <= self._cp <= SURROGATE_MAX:
            self._cp = SURROGATE_MAX + 1
        cp = CodePoint(self._cp)
        self._cp += 1
        self._count += 1
        return cp

    def __len__(self) -> int:
        if self.limit is None:
            return CODE_POINT_COUNT
        return min(self.limit, CODE_POINT_COUNT)
