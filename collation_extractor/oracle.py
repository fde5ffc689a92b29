# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Ground-truth oracles.

An oracle answers the questions the extraction cannot answer by itself: how a
code point is encoded in a character set, how two code points compare in a
collation, and what the case mappings of a code point are. The reference
oracle of a character set is usually a database server; any object following
the `Oracle` protocol can be used.
"""

from __future__ import annotations

import codecs
from enum import Enum, unique
from typing import Protocol

from .codepoints import CodePoint
from .errors import OracleFailure


@unique
class Case(Enum):
    Upper = "upper"
    Lower = "lower"


class Oracle(Protocol):
    def encode(self, cp: CodePoint, charset: str) -> bytes | None:
        """
        Encoding of the code point, `None` or empty if there is none. Oracles
        may answer with a replacement marker instead.
        """
        ...

    def compare(self, left: CodePoint, right: CodePoint, collation: str) -> int:
        "Three-way comparison: -1, 0 or 1"
        ...

    def weight_string(self, cp: CodePoint, collation: str) -> bytes | None: ...

    def case_mapping(self, cp: CodePoint, charset: str, case: Case) -> str: ...


class CodecOracle:
    """
    Oracle based on the Python codecs.

    Unencodable characters are replaced by the codec replacement marker.
    Collations are limited to binary collations, i.e. `binary` and the
    collations with the `_bin` suffix, which sort by encoded bytes.
    """

    errors = "replace"

    def __init__(self) -> None:
        self._codecs: dict[str, codecs.CodecInfo] = {}

    def codec(self, charset: str) -> codecs.CodecInfo:
        if (info := self._codecs.get(charset)) is None:
            try:
                info = codecs.lookup(charset)
            except LookupError as e:
                raise OracleFailure(f"Unknown character set: {charset}") from e
            self._codecs[charset] = info
        return info

    def encode(self, cp: CodePoint, charset: str) -> bytes | None:
        data, _ = self.codec(charset).encode(chr(cp), self.errors)
        return data or None

    @staticmethod
    def binary_charset(collation: str) -> str:
        if collation == "binary":
            return "utf-8"
        charset, sep, suffix = collation.rpartition("_")
        if not sep or suffix != "bin":
            raise OracleFailure(f"Unsupported collation: {collation}")
        return charset

    def weight_string(self, cp: CodePoint, collation: str) -> bytes | None:
        return self.encode(cp, self.binary_charset(collation))

    def compare(self, left: CodePoint, right: CodePoint, collation: str) -> int:
        l = self.weight_string(left, collation) or b""
        r = self.weight_string(right, collation) or b""
        return (l > r) - (l < r)

    def case_mapping(self, cp: CodePoint, charset: str, case: Case) -> str:
        # Ensure the character set exists
        self.codec(charset)
        char = chr(cp)
        match case:
            case Case.Upper:
                return char.upper()
            case Case.Lower:
                return char.lower()
