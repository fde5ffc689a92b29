# Copyright © 2025 collation-extractor contributors
# SPDX-License-Identifier: MIT

"""
Errors raised while extracting character sets and collations
"""


class ExtractionError(Exception):
    pass


class StructuralConflict(ExtractionError):
    """
    The encoding tree cannot hold the data: a byte sequence was seen twice, or
    as both a prefix and a complete sequence.
    """


class ConfigurationError(ExtractionError):
    pass


class OracleFailure(ExtractionError):
    "The ground-truth oracle could not answer a request"
