"""Parsers for Google Ads report exports."""

from keyword_reviewer.parsers.csv_parser import ParsedReport, SearchTermReportParser
from keyword_reviewer.parsers.field_mappings import (
    ColumnMap,
    ReportFormat,
    detect_report_format,
)

__all__ = [
    "ColumnMap",
    "ParsedReport",
    "ReportFormat",
    "SearchTermReportParser",
    "detect_report_format",
]
