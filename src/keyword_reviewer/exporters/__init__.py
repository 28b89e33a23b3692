"""Exporters for reviewed search terms."""

from keyword_reviewer.exporters.negative_keywords import (
    DEFAULT_EXPORT_FILENAME,
    MatchType,
    NegativeKeywordExporter,
    format_negative_keyword,
)

__all__ = [
    "DEFAULT_EXPORT_FILENAME",
    "MatchType",
    "NegativeKeywordExporter",
    "format_negative_keyword",
]
