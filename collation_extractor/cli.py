# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Command line interface: extract character sets and collations and generate
the corresponding C files.
"""

from __future__ import annotations

import argparse
import logging
from enum import Enum, unique
from pathlib import Path
from typing import Self

from .codepoints import CodePointIterator
from .config import CharsetTarget, CollationTarget, Config, load_targets
from .emit import DEFAULT_INLINE_THRESHOLD, Emitter
from .errors import ExtractionError
from .extract import (
    UnknownMarker,
    charset_to_range_map,
    extract_case_mappings,
    check_code_point_order,
    extract_collation,
    is_valid_in,
)
from .oracle import CodecOracle, Oracle
from .range_map import RangeMap
from .weights import DEFAULT_MIN_DYNAMIC_LENGTH, RangeCompressor

logger = logging.getLogger(__name__)


@unique
class OracleKind(Enum):
    Codecs = "codecs"
    Icu = "icu"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> Self:
        for kind in cls:
            if kind.value == raw.lower():
                return kind
        else:
            raise ValueError(raw)

    def oracle(self, strength: str | None = None) -> Oracle:
        match self:
            case self.__class__.Codecs:
                if strength is not None:
                    raise ExtractionError("Strength requires the ICU oracle")
                return CodecOracle()
            case self.__class__.Icu:
                # PyICU is optional
                from .icu_oracle import IcuOracle, Strength

                if strength is None:
                    return IcuOracle()
                try:
                    return IcuOracle(Strength.parse(strength))
                except ValueError as e:
                    raise ExtractionError(f"Unknown strength: {strength}") from e
            case _:
                raise ValueError(self)


def code_points(config: Config) -> CodePointIterator:
    return CodePointIterator(limit=config.limit)


class Runner:
    """
    Run the extraction of targets and write the resulting files
    """

    def __init__(
        self, kind: OracleKind, config: Config, output: Path, write: bool
    ) -> None:
        self.kind = kind
        self.config = config
        self.output = output
        self.write = write
        self.emitter = Emitter()
        self._oracles: dict[str | None, Oracle] = {}
        self._range_maps: dict[tuple[str, UnknownMarker | None], RangeMap] = {}
        self._unknown_markers: dict[str, UnknownMarker | None] = {}

    def oracle(self, strength: str | None = None) -> Oracle:
        if (oracle := self._oracles.get(strength)) is None:
            oracle = self._oracles[strength] = self.kind.oracle(strength)
        return oracle

    def range_map(
        self, charset: str, unknown_marker: UnknownMarker | None = UnknownMarker()
    ) -> RangeMap:
        key = (charset, unknown_marker)
        if (range_map := self._range_maps.get(key)) is None:
            range_map = charset_to_range_map(
                self.oracle(),
                charset,
                code_points=code_points(self.config),
                unknown_marker=unknown_marker,
                check_error=self.config.check_error,
            )
            self._range_maps[key] = range_map
        return range_map

    def emit(self, name: str, content: str) -> None:
        path = self.output / f"{name}.c"
        if self.write:
            self.emitter.write(path, content)
            print(f"✨ Written {path}")
        elif self.config.verbose:
            print(content, end="")

    def unknown_marker(self, charset: str) -> UnknownMarker | None:
        "Unknown marker of the character set, as last extracted"
        return self._unknown_markers.get(charset, UnknownMarker())

    def charset(self, target: CharsetTarget) -> None:
        self._unknown_markers[target.name] = target.unknown_marker
        range_map = self.range_map(target.name, target.unknown_marker)
        case_mappings = None
        if target.case_mappings:
            case_mappings = extract_case_mappings(
                self.oracle(), target.name, range_map, code_points(self.config)
            )
        print(
            f"{target.name}: {len(range_map)} ranges",
            ""
            if case_mappings is None
            else f"({len(case_mappings.to_upper)} upper, "
            f"{len(case_mappings.to_lower)} lower case mappings)",
        )
        self.emit(
            target.name, self.emitter.range_map(target.name, range_map, case_mappings)
        )

    def check_order(self, target: CollationTarget, range_map: RangeMap) -> None:
        errors = check_code_point_order(
            self.oracle(target.strength),
            target.name,
            (
                cp
                for cp in code_points(self.config)
                if is_valid_in(range_map, cp)
            ),
        )
        for previous, cp in errors:
            logger.warning(
                "Error: U+%04X does not sort before U+%04X in %s",
                previous,
                cp,
                target.name,
            )
        if errors and self.config.check_error:
            raise ExtractionError(
                f"{target.name}: {len(errors)} code points out of order"
            )
        print(f"{target.name}: {len(errors)} code points out of order")

    def collation(self, target: CollationTarget) -> None:
        range_map = self.range_map(target.charset, self.unknown_marker(target.charset))
        if target.check_order:
            self.check_order(target, range_map)
        catalog = extract_collation(
            self.oracle(target.strength),
            target.charset,
            target.name,
            code_points=code_points(self.config),
            range_map=range_map,
        )
        compressor = RangeCompressor(min_dynamic_length=target.min_dynamic_length)
        weights = compressor.compress(catalog)
        print(
            f"{target.name}: {len(catalog)} weights, {len(weights)} code points, "
            f"{len(weights.static)} static and {len(weights.dynamic)} dynamic ranges"
        )
        self.emit(
            target.name,
            self.emitter.weights(
                target.name, weights, inline_threshold=target.inline_threshold
            ),
        )


def positive_int(raw: str) -> int:
    if (value := int(raw)) < 1:
        raise argparse.ArgumentTypeError(f"Expected a positive integer: {raw}")
    return value


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="collation_extractor",
        description="Extract character sets and collations into C lookup tables",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("generated"),
        help="Output directory (default: %(default)s)",
    )
    parser.add_argument(
        "--oracle",
        type=OracleKind.parse,
        default=OracleKind.Codecs,
        choices=OracleKind,
        help="Ground-truth oracle (default: %(default)s)",
    )
    parser.add_argument(
        "--limit",
        type=positive_int,
        help="Only process the first code points (default: all)",
    )
    parser.add_argument(
        "--dry",
        action="store_true",
        help="Do not write (default: %(default)s)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Verbose (default: %(default)s)",
    )
    parser.add_argument(
        "--no-check",
        action="store_true",
        help="Do not check errors (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    charset = subparsers.add_parser("charset", help="Extract a character set")
    charset.add_argument("name", help="Character set name")
    charset.add_argument(
        "--unknown-marker",
        default="3f",
        help="Hexadecimal encoding of unencodable characters (default: %(default)s)",
    )
    charset.add_argument(
        "--unknown-code-point",
        type=lambda raw: int(raw, 0),
        help="Code point genuinely encoded by the unknown marker "
        "(default: last byte of the marker)",
    )
    charset.add_argument(
        "--case-mappings",
        action="store_true",
        help="Extract the case mappings (default: %(default)s)",
    )

    collation = subparsers.add_parser("collation", help="Extract a collation")
    collation.add_argument("name", help="Collation name")
    collation.add_argument("--charset", required=True, help="Character set name")
    collation.add_argument("--strength", help="Collation strength (ICU oracle only)")
    collation.add_argument(
        "--min-dynamic-length",
        type=positive_int,
        default=DEFAULT_MIN_DYNAMIC_LENGTH,
        help="Shortest dynamic range (default: %(default)s)",
    )
    collation.add_argument(
        "--inline-threshold",
        type=positive_int,
        default=DEFAULT_INLINE_THRESHOLD,
        help="Shortest static range checked inline (default: %(default)s)",
    )
    collation.add_argument(
        "--check-order",
        action="store_true",
        help="Check that code points sort in ascending order (default: %(default)s)",
    )

    targets = subparsers.add_parser("targets", help="Extract the targets of a file")
    targets.add_argument("path", type=Path, help="YAML targets file")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = make_parser()
    args = parser.parse_args(argv)
    config = Config(
        check_error=not args.no_check,
        verbose=args.verbose,
        limit=args.limit,
    )
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(levelname)s: %(name)s: %(message)s",
    )

    match args.command:
        case "charset":
            try:
                unknown_marker = UnknownMarker.parse(
                    args.unknown_marker, args.unknown_code_point
                )
            except ValueError as e:
                parser.error(f"invalid unknown marker: {e}")
            charsets = [
                CharsetTarget(args.name, unknown_marker, args.case_mappings)
            ]
            collations = []
        case "collation":
            charsets = []
            collations = [
                CollationTarget(
                    name=args.name,
                    charset=args.charset,
                    strength=args.strength,
                    min_dynamic_length=args.min_dynamic_length,
                    inline_threshold=args.inline_threshold,
                    check_order=args.check_order,
                )
            ]
        case "targets":
            try:
                targets = load_targets(args.path)
            except (OSError, ValueError) as e:
                parser.error(f"invalid targets file: {e}")
            charsets = list(targets.charsets)
            collations = list(targets.collations)
        case command:
            raise ValueError(command)

    runner = Runner(args.oracle, config, args.output, write=not args.dry)
    try:
        for charset in charsets:
            runner.charset(charset)
        for collation in collations:
            runner.collation(collation)
    except ExtractionError as e:
        logger.error("%s", e)
        return 1
    return 0
