# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Oracle using the ICU collators.

Collation names are ICU locale identifiers, e.g. `root`, `sv` or
`de@collation=phonebook`.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import Self

import icu

from .codepoints import CodePoint
from .errors import OracleFailure
from .oracle import Case, CodecOracle

c = icu.Locale.createFromName("C")
icu.Locale.setDefault(c)


@unique
class Strength(Enum):
    Primary = icu.Collator.PRIMARY
    Secondary = icu.Collator.SECONDARY
    Tertiary = icu.Collator.TERTIARY
    Quaternary = icu.Collator.QUATERNARY
    Identical = icu.Collator.IDENTICAL

    @classmethod
    def parse(cls, raw: str) -> Self:
        for s in cls:
            if s.name.lower() == raw.lower():
                return s
        else:
            raise ValueError(raw)


class IcuOracle(CodecOracle):
    def __init__(self, strength: Strength | None = None) -> None:
        super().__init__()
        self.strength = strength
        self._collators: dict[str, icu.Collator] = {}

    def collator(self, collation: str) -> icu.Collator:
        if (collator := self._collators.get(collation)) is None:
            try:
                collator = icu.Collator.createInstance(icu.Locale(collation))
            except icu.ICUError as e:
                raise OracleFailure(f"Unsupported collation: {collation}") from e
            if self.strength is not None:
                collator.setStrength(self.strength.value)
            self._collators[collation] = collator
        return collator

    def weight_string(self, cp: CodePoint, collation: str) -> bytes | None:
        if collation == "binary" or collation.endswith("_bin"):
            return super().weight_string(cp, collation)
        return bytes(self.collator(collation).getSortKey(chr(cp))) or None

    def compare(self, left: CodePoint, right: CodePoint, collation: str) -> int:
        if collation == "binary" or collation.endswith("_bin"):
            return super().compare(left, right, collation)
        result = self.collator(collation).compare(chr(left), chr(right))
        return (result > 0) - (result < 0)

    def case_mapping(self, cp: CodePoint, charset: str, case: Case) -> str:
        self.codec(charset)
        match case:
            case Case.Upper:
                return chr(icu.Char.toupper(cp))
            case Case.Lower:
                return chr(icu.Char.tolower(cp))
