# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Extraction of character sets and collations from an oracle.

Character sets are extracted by encoding every code point, storing the results
in an `EncodingTree` and consolidating it into a `RangeMap` that converts
between the character set and UTF-8.

Collations are extracted by inserting every code point valid in their
character set into an `OrderCatalog`. Weight strings obtained from the oracle
are memoized so that most comparisons do not need the oracle at all.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from .codepoints import CodePoint, CodePointIterator
from .encoding_tree import EncodingTree
from .errors import OracleFailure, StructuralConflict
from .oracle import Case, Oracle
from .range_map import RangeMap, RangeMapBuilder
from .weights import OrderCatalog

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 0x10000


@dataclass(frozen=True)
class UnknownMarker:
    """
    Encoding returned by an oracle for characters that have no representation
    in the target character set, and the code point it genuinely encodes.
    """

    marker: bytes = b"?"
    code_point: CodePoint = CodePoint(0x3F)

    @classmethod
    def parse(cls, raw: str, code_point: int | None = None) -> UnknownMarker:
        if not (marker := bytes.fromhex(raw)):
            raise ValueError("Empty unknown marker")
        return cls(
            marker=marker,
            code_point=CodePoint(marker[-1] if code_point is None else code_point),
        )


def _progress(cp: CodePoint, what: str) -> None:
    if cp and not cp % PROGRESS_INTERVAL:
        logger.debug("%s: reached U+%04X", what, cp)


def build_encoding_tree(
    oracle: Oracle,
    charset: str,
    code_points: Iterable[CodePoint] | None = None,
    unknown_marker: UnknownMarker | None = UnknownMarker(),
) -> EncodingTree:
    """
    Build the tree mapping the encodings of a character set to UTF-8
    """
    tree = EncodingTree()
    for cp in CodePointIterator() if code_points is None else code_points:
        _progress(cp, charset)
        if not (encoded := oracle.encode(cp, charset)):
            continue
        if (
            unknown_marker is not None
            and encoded == unknown_marker.marker
            and cp != unknown_marker.code_point
        ):
            # The genuine character must come first, since it is ASCII
            if tree.lookup(encoded) is None:
                raise StructuralConflict(
                    f"U+{cp:04X} encoded as unknown marker {encoded!r}, "
                    "which has not been assigned yet"
                )
            continue
        try:
            tree.insert(encoded, chr(cp).encode("utf-8"))
        except StructuralConflict as e:
            raise StructuralConflict(f"{charset}: U+{cp:04X} {encoded!r}: {e}") from e
    return tree


def check_range_map(range_map: RangeMap, tree: EncodingTree, check_error: bool) -> bool:
    """
    Check that the range map converts every stored encoding in both directions
    """
    errors = range_map.check(tree)
    if errors and check_error:
        raise ValueError(errors)
    for direction, data, expected, got in errors:
        logger.warning(
            "Error: %s %s: expected %s, got %s",
            direction,
            data.hex(),
            expected.hex(),
            None if got is None else got.hex(),
        )
    return not errors


def charset_to_range_map(
    oracle: Oracle,
    charset: str,
    code_points: Iterable[CodePoint] | None = None,
    unknown_marker: UnknownMarker | None = UnknownMarker(),
    check_error: bool = True,
) -> RangeMap:
    tree = build_encoding_tree(
        oracle, charset, code_points=code_points, unknown_marker=unknown_marker
    )
    builder = RangeMapBuilder().extend(tree)
    count = len(builder.inputs)
    range_map = builder.build()
    logger.debug("%s: %d encodings in %d ranges", charset, count, len(range_map))
    check_range_map(range_map, tree, check_error)
    return range_map


def is_valid_in(range_map: RangeMap | None, cp: CodePoint) -> bool:
    return range_map is None or range_map.encode(chr(cp).encode("utf-8")) is not None


@dataclass
class CaseMappings:
    to_upper: list[tuple[CodePoint, CodePoint]] = field(default_factory=list)
    to_lower: list[tuple[CodePoint, CodePoint]] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.to_upper or self.to_lower)


def extract_case_mappings(
    oracle: Oracle,
    charset: str,
    range_map: RangeMap | None,
    code_points: Iterable[CodePoint] | None = None,
) -> CaseMappings:
    """
    Extract the simple case mappings of the characters of a character set.

    Mappings are not symmetric, so both are queried for each character.
    """
    mappings = CaseMappings()
    for cp in CodePointIterator() if code_points is None else code_points:
        if not is_valid_in(range_map, cp):
            continue
        for case, target in (
            (Case.Upper, mappings.to_upper),
            (Case.Lower, mappings.to_lower),
        ):
            mapped = oracle.case_mapping(cp, charset, case)
            if len(mapped) != 1:
                logger.warning(
                    "Skipping %s case mapping of U+%04X: %r", case.value, cp, mapped
                )
                continue
            if (mapped_cp := CodePoint(ord(mapped))) != cp:
                target.append((cp, mapped_cp))
    return mappings


@dataclass
class WeightComparator:
    """
    Compare code points using their weight strings when both are known, else
    the oracle. Code points found equal to a code point with a known weight
    string inherit it.
    """

    oracle: Oracle
    collation: str
    weights: dict[CodePoint, bytes] = field(default_factory=dict)
    oracle_calls: int = 0

    def __call__(self, left: CodePoint, right: CodePoint) -> int:
        l = self.weights.get(left)
        r = self.weights.get(right)
        if l is not None and r is not None:
            return (l > r) - (l < r)
        self.oracle_calls += 1
        result = self.oracle.compare(left, right, self.collation)
        if result not in (-1, 0, 1):
            raise OracleFailure(
                f"Unknown comparison result {result!r} for "
                f"U+{left:04X} and U+{right:04X} in {self.collation}"
            )
        if not result:
            if l is not None and r is None:
                self.weights[right] = l
            elif l is None and r is not None:
                self.weights[left] = r
        return result


def extract_collation(
    oracle: Oracle,
    charset: str,
    collation: str,
    code_points: Iterable[CodePoint] | None = None,
    range_map: RangeMap | None = None,
) -> OrderCatalog:
    """
    Sort the characters of a character set according to a collation.

    Some characters have no weight string but still sort; they are placed
    using the oracle comparisons only.
    """
    comparator = WeightComparator(oracle, collation)
    catalog = OrderCatalog(comparator)
    for cp in CodePointIterator() if code_points is None else code_points:
        _progress(cp, collation)
        if not is_valid_in(range_map, cp):
            continue
        if weight := oracle.weight_string(cp, collation):
            comparator.weights[cp] = weight
        catalog.insert(cp)
    logger.debug(
        "%s: %d weights, %d oracle comparisons",
        collation,
        len(catalog),
        comparator.oracle_calls,
    )
    return catalog


def check_code_point_order(
    oracle: Oracle, collation: str, code_points: Iterable[CodePoint] | None = None
) -> list[tuple[CodePoint, CodePoint]]:
    """
    Return the consecutive code points that do not sort in ascending order
    """
    errors: list[tuple[CodePoint, CodePoint]] = []
    previous: CodePoint | None = None
    for cp in CodePointIterator() if code_points is None else code_points:
        if previous is not None and oracle.compare(previous, cp, collation) != -1:
            errors.append((previous, cp))
        previous = cp
    return errors
