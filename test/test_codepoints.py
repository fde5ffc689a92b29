# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

import itertools
import unittest

from collation_extractor.codepoints import (
    CODE_POINT_COUNT,
    MAX_CODE_POINT,
    SURROGATE_MAX,
    SURROGATE_MIN,
    CodePointIterator,
    is_valid,
)


class TestCodePointIterator(unittest.TestCase):
    def test_full_range(self):
        cps = list(CodePointIterator())
        self.assertEqual(len(cps), CODE_POINT_COUNT)
        self.assertEqual(cps[0], 0)
        self.assertEqual(cps[-1], MAX_CODE_POINT)
        self.assertEqual(cps[SURROGATE_MIN - 1], SURROGATE_MIN - 1)
        self.assertEqual(cps[SURROGATE_MIN], SURROGATE_MAX + 1)
        self.assertTrue(all(a < b for a, b in itertools.pairwise(cps)))
        self.assertFalse(any(SURROGATE_MIN <= cp <= SURROGATE_MAX for cp in cps))

    def test_limit(self):
        it = CodePointIterator(limit=5)
        self.assertEqual(len(it), 5)
        self.assertEqual(list(it), [0, 1, 2, 3, 4])
        self.assertEqual(len(CodePointIterator()), CODE_POINT_COUNT)
        self.assertEqual(len(CodePointIterator(limit=10**9)), CODE_POINT_COUNT)

    def test_reset(self):
        it = CodePointIterator(limit=3)
        self.assertEqual(list(it), [0, 1, 2])
        self.assertEqual(list(it), [])
        it.reset()
        self.assertEqual(list(it), [0, 1, 2])

    def test_is_valid(self):
        for cp, expected in (
            (0, True),
            (0x41, True),
            (SURROGATE_MIN - 1, True),
            (SURROGATE_MIN, False),
            (0xDBFF, False),
            (SURROGATE_MAX, False),
            (SURROGATE_MAX + 1, True),
            (MAX_CODE_POINT, True),
            (MAX_CODE_POINT + 1, False),
            (-1, False),
        ):
            with self.subTest(cp=hex(cp)):
                self.assertEqual(is_valid(cp), expected)


if __name__ == "__main__":
    unittest.main()
