# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Generate C source files embedding the extracted tables
"""

from __future__ import annotations

import itertools
import logging
import re
from pathlib import Path

import jinja2

from .extract import CaseMappings
from .range_map import RangeMap
from .weights import UNKNOWN_WEIGHT, CompressedWeights, StaticWeightRange

logger = logging.getLogger(__name__)

TEMPLATES = Path(__file__).parent / "templates"
GENERATOR = __package__

DEFAULT_INLINE_THRESHOLD = 26
"Static ranges at least this long are checked inline rather than tabulated"


def c_identifier(name: str) -> str:
    identifier = re.sub(r"[^0-9a-zA-Z_]", "_", name).lower()
    if not identifier or identifier[0].isdigit():
        identifier = "_" + identifier
    return identifier


class Emitter:
    def __init__(self, templates: Path = TEMPLATES) -> None:
        # Configure Jinja
        template_loader = jinja2.FileSystemLoader(templates, encoding="utf-8")
        self.env = jinja2.Environment(
            loader=template_loader,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["byte"] = lambda b: f"0x{b:0>2x}"
        self.env.filters["code_point"] = lambda cp: f"0x{cp:0>4x}"
        self.env.filters["weight"] = lambda w: f"0x{w:0>8x}"
        self.env.filters["c_identifier"] = c_identifier

    def render(self, template: str, **data) -> str:
        return "".join(
            self.env.get_template(template).generate(generator=GENERATOR, **data)
        )

    def range_map(
        self,
        name: str,
        range_map: RangeMap,
        case_mappings: CaseMappings | None = None,
    ) -> str:
        """
        Render the decoding and encoding functions of a character set, and
        optionally its case mappings.
        """
        if case_mappings is None:
            case_mappings = CaseMappings()
        return self.render(
            "range_map.c.jinja",
            name=name,
            entries=tuple(range_map.entries),
            to_upper=sorted(case_mappings.to_upper),
            to_lower=sorted(case_mappings.to_lower),
        )

    @staticmethod
    def split_static(
        ranges: tuple[StaticWeightRange, ...], inline_threshold: int
    ) -> tuple[list[StaticWeightRange], list[tuple[int, int]]]:
        inline: list[StaticWeightRange] = []
        table: list[tuple[int, int]] = []
        for r in ranges:
            if len(r) >= inline_threshold:
                inline.append(r)
            else:
                table.extend(zip(range(r.lower, r.upper + 1), itertools.repeat(r.weight)))
        return inline, table

    def weights(
        self,
        name: str,
        weights: CompressedWeights,
        inline_threshold: int = DEFAULT_INLINE_THRESHOLD,
    ) -> str:
        """
        Render the weight function of a collation.

        Dynamic ranges and large static ranges are tested one after the other;
        the remaining code points are looked up in a sorted table.
        """
        inline, table = self.split_static(weights.static, inline_threshold)
        logger.debug(
            "%s: %d dynamic ranges, %d inline static ranges, %d table entries",
            name,
            len(weights.dynamic),
            len(inline),
            len(table),
        )
        return self.render(
            "weights.c.jinja",
            name=name,
            dynamic=weights.dynamic,
            inline=inline,
            table=table,
            unknown_weight=UNKNOWN_WEIGHT,
        )

    @staticmethod
    def write(path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wt", encoding="utf-8") as fd:
            fd.write(content)
