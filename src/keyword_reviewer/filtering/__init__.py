"""Search term filtering."""

from keyword_reviewer.filtering.record_filter import (
    FilterReport,
    RecordFilter,
    filter_records,
)

__all__ = ["FilterReport", "RecordFilter", "filter_records"]
