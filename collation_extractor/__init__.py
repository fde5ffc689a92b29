# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Extract character sets and collations from a ground-truth oracle into compact
range-based lookup tables.
"""

from .codepoints import CodePoint, CodePointIterator
from .encoding_tree import EncodingTree
from .errors import (
    ConfigurationError,
    ExtractionError,
    OracleFailure,
    StructuralConflict,
)
from .oracle import Case, CodecOracle, Oracle
from .range_map import RangeMap, RangeMapBuilder
from .weights import CompressedWeights, OrderCatalog, RangeCompressor

__all__ = [
    "Case",
    "CodePoint",
    "CodePointIterator",
    "CodecOracle",
    "CompressedWeights",
    "ConfigurationError",
    "EncodingTree",
    "ExtractionError",
    "Oracle",
    "OracleFailure",
    "OrderCatalog",
    "RangeCompressor",
    "RangeMap",
    "RangeMapBuilder",
    "StructuralConflict",
]
