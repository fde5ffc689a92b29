# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Extraction settings and target files.

A target file lists the character sets and collations to extract, e.g.:

    charsets:
      - name: latin-1
        case_mappings: true
      - name: cp1252
        unknown_marker: "3f"
    collations:
      - name: latin1_bin
        charset: latin-1
        min_dynamic_length: 4
        check_order: true
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

import yaml

from .emit import DEFAULT_INLINE_THRESHOLD
from .extract import UnknownMarker
from .weights import DEFAULT_MIN_DYNAMIC_LENGTH


@dataclass
class Config:
    check_error: bool
    verbose: bool
    limit: int | None = None


@dataclass(frozen=True)
class CharsetTarget:
    name: str
    unknown_marker: UnknownMarker | None = UnknownMarker()
    case_mappings: bool = False

    @classmethod
    def parse(cls, raw: Any) -> Self:
        if isinstance(raw, str):
            return cls(raw)
        if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
            raise ValueError(f"Invalid character set entry: {raw!r}")
        unknown_marker: UnknownMarker | None = UnknownMarker()
        if "unknown_marker" in raw:
            if (marker := raw["unknown_marker"]) is None:
                unknown_marker = None
            else:
                unknown_marker = UnknownMarker.parse(
                    str(marker), raw.get("unknown_code_point")
                )
        return cls(
            name=raw["name"],
            unknown_marker=unknown_marker,
            case_mappings=bool(raw.get("case_mappings", False)),
        )


@dataclass(frozen=True)
class CollationTarget:
    name: str
    charset: str
    strength: str | None = None
    min_dynamic_length: int = DEFAULT_MIN_DYNAMIC_LENGTH
    inline_threshold: int = DEFAULT_INLINE_THRESHOLD
    check_order: bool = False

    @classmethod
    def parse(cls, raw: Any) -> Self:
        if (
            not isinstance(raw, dict)
            or not isinstance(raw.get("name"), str)
            or not isinstance(raw.get("charset"), str)
        ):
            raise ValueError(f"Invalid collation entry: {raw!r}")
        target = cls(
            name=raw["name"],
            charset=raw["charset"],
            strength=raw.get("strength"),
            min_dynamic_length=raw.get("min_dynamic_length", DEFAULT_MIN_DYNAMIC_LENGTH),
            inline_threshold=raw.get("inline_threshold", DEFAULT_INLINE_THRESHOLD),
            check_order=bool(raw.get("check_order", False)),
        )
        for field in ("min_dynamic_length", "inline_threshold"):
            value = getattr(target, field)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ValueError(f"Invalid {field} for {target.name}: {value!r}")
        return target


@dataclass(frozen=True)
class Targets:
    charsets: tuple[CharsetTarget, ...]
    collations: tuple[CollationTarget, ...]

    @classmethod
    def parse(cls, raw: Any) -> Self:
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(f"Invalid targets document: {raw!r}")
        if unknown := set(raw) - {"charsets", "collations"}:
            raise ValueError(f"Unknown sections: {sorted(unknown)}")
        errors: list[str] = []
        charsets: list[CharsetTarget] = []
        collations: list[CollationTarget] = []
        for parse, entries, target in (
            (CharsetTarget.parse, raw.get("charsets") or [], charsets),
            (CollationTarget.parse, raw.get("collations") or [], collations),
        ):
            if not isinstance(entries, list):
                errors.append(f"Expected a list, got: {entries!r}")
                continue
            for entry in entries:
                try:
                    target.append(parse(entry))
                except ValueError as e:
                    errors.append(str(e))
        if errors:
            raise ValueError(errors)
        return cls(charsets=tuple(charsets), collations=tuple(collations))


def load_targets(path: Path) -> Targets:
    with path.open("rt", encoding="utf-8") as fd:
        try:
            raw = yaml.safe_load(fd)
        except yaml.YAMLError as e:
            raise ValueError(f"{path}: {e}") from e
    return Targets.parse(raw)
