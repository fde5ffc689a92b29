# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

import tempfile
import textwrap
import unittest
from pathlib import Path

from collation_extractor.config import (
    CharsetTarget,
    CollationTarget,
    Targets,
    load_targets,
)
from collation_extractor.extract import UnknownMarker

ROOT = Path(__file__).parent.parent


class TestTargets(unittest.TestCase):
    def test_charsets(self):
        targets = Targets.parse(
            {
                "charsets": [
                    "ascii",
                    {"name": "latin-1", "case_mappings": True},
                    {"name": "gbk", "unknown_marker": "3f", "unknown_code_point": 0x3F},
                    {"name": "euc-jp", "unknown_marker": "a2ae", "unknown_code_point": 0x3013},
                    {"name": "cp1252", "unknown_marker": None},
                ]
            }
        )
        self.assertEqual(
            targets.charsets,
            (
                CharsetTarget("ascii"),
                CharsetTarget("latin-1", case_mappings=True),
                CharsetTarget("gbk", UnknownMarker()),
                CharsetTarget("euc-jp", UnknownMarker(b"\xa2\xae", 0x3013)),
                CharsetTarget("cp1252", None),
            ),
        )
        self.assertEqual(targets.collations, ())

    def test_collations(self):
        targets = Targets.parse(
            {
                "collations": [
                    {"name": "latin1_bin", "charset": "latin-1"},
                    {
                        "name": "sv",
                        "charset": "latin-1",
                        "strength": "primary",
                        "min_dynamic_length": 4,
                        "inline_threshold": 64,
                        "check_order": True,
                    },
                ]
            }
        )
        self.assertEqual(
            targets.collations,
            (
                CollationTarget("latin1_bin", "latin-1"),
                CollationTarget("sv", "latin-1", "primary", 4, 64, check_order=True),
            ),
        )
        self.assertEqual(targets.collations[0].min_dynamic_length, 3)
        self.assertEqual(targets.collations[0].inline_threshold, 26)
        self.assertFalse(targets.collations[0].check_order)

    def test_empty(self):
        self.assertEqual(Targets.parse(None), Targets(charsets=(), collations=()))
        self.assertEqual(Targets.parse({}), Targets(charsets=(), collations=()))

    def test_invalid(self):
        for raw in (
            [],
            "latin-1",
            {"fonts": []},
            {"charsets": {"name": "latin-1"}},
            {"charsets": [{"nom": "latin-1"}]},
            {"charsets": [{"name": "latin-1", "unknown_marker": "zz"}]},
            {"charsets": [{"name": "latin-1", "unknown_marker": ""}]},
            {"collations": ["latin1_bin"]},
            {"collations": [{"name": "latin1_bin"}]},
            {"collations": [{"name": "x", "charset": "y", "min_dynamic_length": 0}]},
            {"collations": [{"name": "x", "charset": "y", "inline_threshold": "big"}]},
            {"collations": [{"name": "x", "charset": "y", "inline_threshold": True}]},
        ):
            with self.subTest(raw=raw):
                with self.assertRaises(ValueError):
                    Targets.parse(raw)

    def test_all_errors_reported(self):
        with self.assertRaises(ValueError) as cm:
            Targets.parse(
                {
                    "charsets": [{"nom": "latin-1"}, "ascii", 42],
                    "collations": [{"name": "latin1_bin"}],
                }
            )
        self.assertEqual(len(cm.exception.args[0]), 3)


class TestLoadTargets(unittest.TestCase):
    def test_load(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "targets.yaml"
            path.write_text(
                textwrap.dedent(
                    """
                    charsets:
                      - name: latin-1
                        case_mappings: true
                    collations:
                      - name: latin1_bin
                        charset: latin-1
                    """
                ),
                encoding="utf-8",
            )
            targets = load_targets(path)
        self.assertEqual(
            targets,
            Targets(
                charsets=(CharsetTarget("latin-1", case_mappings=True),),
                collations=(CollationTarget("latin1_bin", "latin-1"),),
            ),
        )

    def test_load_errors(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "targets.yaml"
            with self.assertRaises(OSError):
                load_targets(path)
            path.write_text("charsets: [latin-1\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_targets(path)

    def test_project_targets(self):
        targets = load_targets(ROOT / "data" / "targets.yaml")
        self.assertIn("latin-1", [c.name for c in targets.charsets])
        for collation in targets.collations:
            with self.subTest(collation=collation.name):
                self.assertIn(collation.charset, [c.name for c in targets.charsets])


if __name__ == "__main__":
    unittest.main()
