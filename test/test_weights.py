# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

import string
import unittest

from collation_extractor.codepoints import CodePoint
from collation_extractor.errors import ConfigurationError
from collation_extractor.weights import (
    UNKNOWN_WEIGHT,
    CompressedWeights,
    DynamicWeightRange,
    OrderCatalog,
    RangeCompressor,
    StaticWeightRange,
)

LETTERS = [CodePoint(ord(c)) for c in string.ascii_uppercase + string.ascii_lowercase]


def compare_keys(key):
    def compare(left: CodePoint, right: CodePoint) -> int:
        l = key(chr(left))
        r = key(chr(right))
        return (l > r) - (l < r)

    return compare


case_insensitive = compare_keys(str.lower)
# Lower case first: a < A < b < B…
case_aware = compare_keys(lambda c: (c.lower(), c.isupper()))
# Upper case first: A < a < B < b…
upper_first = compare_keys(lambda c: (c.lower(), c.islower()))


def catalog_of(comparator, cps) -> OrderCatalog:
    catalog = OrderCatalog(comparator)
    for cp in cps:
        catalog.insert(cp)
    return catalog


class TestOrderCatalog(unittest.TestCase):
    def test_no_comparator(self):
        with self.assertRaises(ConfigurationError):
            OrderCatalog().insert(CodePoint(0x41))

    def test_insert(self):
        catalog = OrderCatalog(compare_keys(lambda c: c))
        self.assertEqual(catalog.insert(CodePoint(0x42)), 0)
        self.assertEqual(catalog.insert(CodePoint(0x41)), 0)
        self.assertEqual(catalog.insert(CodePoint(0x44)), 2)
        self.assertEqual(catalog.insert(CodePoint(0x43)), 2)
        self.assertEqual(catalog.insert(CodePoint(0x43)), 2)
        self.assertEqual(catalog.rows, [[0x41], [0x42], [0x43, 0x43], [0x44]])

    def test_invalid_comparison(self):
        catalog = OrderCatalog(lambda l, r: 2)
        catalog.insert(CodePoint(0x41))
        with self.assertRaises(ValueError):
            catalog.insert(CodePoint(0x42))

    def test_rows_are_ordered(self):
        for name, comparator, count in (
            ("case-insensitive", case_insensitive, 26),
            ("case-aware", case_aware, 52),
            ("upper-first", upper_first, 52),
        ):
            with self.subTest(comparator=name):
                catalog = catalog_of(comparator, LETTERS)
                self.assertEqual(len(catalog), count)
                for i, row in enumerate(catalog.rows):
                    for later in catalog.rows[i + 1 :]:
                        for a in row:
                            for b in later:
                                self.assertEqual(comparator(a, b), -1)
                self.assertEqual(sorted(catalog.weights()), sorted(LETTERS))

    def test_case_insensitive_weights(self):
        weights = catalog_of(case_insensitive, LETTERS).weights()
        self.assertEqual(weights[ord("A")], weights[ord("a")])
        self.assertEqual(weights[ord("A")], 0)
        self.assertEqual(weights[ord("z")], 25)


class TestRangeCompressor(unittest.TestCase):
    def test_static_ranges(self):
        ranges = RangeCompressor.static_ranges(
            [(0, 0x32), (0, 0x30), (0, 0x31), (1, 0x40), (2, 0x41)]
        )
        self.assertEqual(
            ranges,
            [
                StaticWeightRange(0x30, 0x32, 0),
                StaticWeightRange(0x40, 0x40, 1),
                StaticWeightRange(0x41, 0x41, 2),
            ],
        )

    def test_case_insensitive(self):
        weights = RangeCompressor().compress(catalog_of(case_insensitive, LETTERS))
        self.assertEqual(weights.static, ())
        self.assertEqual(
            weights.dynamic,
            (
                DynamicWeightRange(ord("A"), ord("Z"), -ord("A")),
                DynamicWeightRange(ord("a"), ord("z"), -ord("a")),
            ),
        )
        self.assertEqual(weights.lookup(CodePoint(ord("a"))), (0, True))
        self.assertEqual(weights.lookup(CodePoint(ord("Q"))), (16, True))
        self.assertEqual(weights.lookup(CodePoint(ord("["))), (UNKNOWN_WEIGHT, False))

    def test_case_aware(self):
        for name, comparator, first, second in (
            ("case-aware", case_aware, "a", "A"),
            ("upper-first", upper_first, "A", "a"),
        ):
            catalog = catalog_of(comparator, LETTERS)
            expected = catalog.weights()
            weights = RangeCompressor().compress(catalog)
            with self.subTest(comparator=name):
                self.assertEqual(len(weights), 52)
                self.assertEqual(len(weights.static), 52)
                self.assertEqual(sorted(weights.code_points()), sorted(LETTERS))
                self.assertEqual(weights.weight(ord(first)), 0)
                self.assertEqual(weights.weight(ord(second)), 1)
                self.assertEqual(weights.weight(ord(first) + 25), 50)
                self.assertEqual(weights.weight(ord(second) + 25), 51)
            for cp in LETTERS:
                with self.subTest(comparator=name, cp=chr(cp)):
                    self.assertEqual(weights.weight(cp), expected[cp])

    def test_mixed(self):
        pairs = [
            (0, 0x30),
            (0, 0x31),
            (0, 0x32),
            (1, 0x40),
            (5, 0x41),
            (6, 0x42),
            (7, 0x43),
            (8, 0x44),
            (2, 0x50),
            (3, 0x51),
        ]
        weights = RangeCompressor().compress(pairs)
        self.assertEqual(
            weights.static,
            (
                StaticWeightRange(0x30, 0x32, 0),
                StaticWeightRange(0x40, 0x40, 1),
                StaticWeightRange(0x50, 0x50, 2),
                StaticWeightRange(0x51, 0x51, 3),
            ),
        )
        self.assertEqual(weights.dynamic, (DynamicWeightRange(0x41, 0x44, -0x41 + 5),))
        self.assertEqual(len(weights), len(pairs))
        self.assertEqual(sorted(weights.code_points()), sorted(cp for _, cp in pairs))
        for weight, cp in pairs:
            with self.subTest(cp=hex(cp)):
                self.assertEqual(weights.lookup(CodePoint(cp)), (weight, True))
        for cp in (0x2F, 0x33, 0x45, 0x4F, 0x52):
            with self.subTest(cp=hex(cp)):
                self.assertEqual(weights.lookup(CodePoint(cp)), (UNKNOWN_WEIGHT, False))

    def test_min_dynamic_length(self):
        pairs = [(2, 0x50), (3, 0x51)]
        self.assertEqual(RangeCompressor().compress(pairs).dynamic, ())
        weights = RangeCompressor(min_dynamic_length=2).compress(pairs)
        self.assertEqual(weights.static, ())
        self.assertEqual(weights.dynamic, (DynamicWeightRange(0x50, 0x51, 2 - 0x50),))

    def test_empty(self):
        weights = RangeCompressor().compress([])
        self.assertEqual(weights, CompressedWeights(static=(), dynamic=()))
        self.assertEqual(len(weights), 0)
        self.assertEqual(weights.lookup(CodePoint(0)), (UNKNOWN_WEIGHT, False))


if __name__ == "__main__":
    unittest.main()
