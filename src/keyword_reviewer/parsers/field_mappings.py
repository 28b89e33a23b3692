"""Column mappings for Google Ads search terms reports.

API and UI exports name the same metric differently ("Impressions" vs
"Impr."), so every canonical field lists the headers it accepts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from keyword_reviewer.core.exceptions import CSVFormatError

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "term": ("Search term", "Search Term", "Search query", "Query"),
    "cost": ("Cost", "Spend", "Cost (USD)"),
    "impressions": ("Impressions", "Impr.", "Impr"),
    "clicks": ("Clicks",),
    "conversions": ("Conversions", "Conv.", "All conv."),
    "cost_per_conversion": ("Cost / conv.", "Cost/conv.", "Cost per conversion"),
    "status": ("Added/Excluded", "Search term status", "Status"),
    "campaign": ("Campaign",),
    "ad_group": ("Ad group",),
}

REQUIRED_FIELDS = ("term", "cost", "impressions", "clicks")


class ReportFormat(str, Enum):
    """How a report carries cost per conversion."""

    # Conversions column present; cost per conversion is computed
    CONVERSIONS = "conversions"
    # Only the pre-computed "Cost / conv." column is present
    COST_PER_CONVERSION = "cost_per_conversion"
    UNKNOWN = "unknown"


def _normalize(header: str) -> str:
    return header.strip().lower()


def find_column(headers: Iterable[str], field: str) -> str | None:
    """Return the actual header used for a canonical field, if any."""
    by_normalized = {_normalize(h): h for h in headers}
    for alias in FIELD_ALIASES[field]:
        header = by_normalized.get(_normalize(alias))
        if header is not None:
            return header
    return None


def detect_report_format(headers: Iterable[str]) -> ReportFormat:
    """Detect which cost-per-conversion variant a report uses.

    The conversions column wins when both are present, since the exported
    "Cost / conv." column is rounded.
    """
    headers = list(headers)
    if find_column(headers, "conversions"):
        return ReportFormat.CONVERSIONS
    if find_column(headers, "cost_per_conversion"):
        return ReportFormat.COST_PER_CONVERSION
    return ReportFormat.UNKNOWN


def is_header_row(cells: Iterable[str]) -> bool:
    """Check whether a line's cells look like a search terms header row."""
    return find_column([c for c in cells if c], "term") is not None


@dataclass(frozen=True)
class ColumnMap:
    """Resolved report headers for each canonical field."""

    term: str
    cost: str
    impressions: str
    clicks: str
    report_format: ReportFormat
    conversions: str | None = None
    cost_per_conversion: str | None = None
    status: str | None = None
    campaign: str | None = None
    ad_group: str | None = None

    @classmethod
    def from_headers(cls, headers: Iterable[str], source: str = "<report>") -> "ColumnMap":
        """Resolve headers, raising CSVFormatError when required ones are missing."""
        headers = [h for h in headers if isinstance(h, str)]
        resolved = {field: find_column(headers, field) for field in FIELD_ALIASES}
        report_format = detect_report_format(headers)

        missing = [
            FIELD_ALIASES[field][0] for field in REQUIRED_FIELDS if not resolved[field]
        ]
        if report_format == ReportFormat.UNKNOWN:
            missing.append(
                f"{FIELD_ALIASES['conversions'][0]} or "
                f"{FIELD_ALIASES['cost_per_conversion'][0]}"
            )

        if missing:
            detected = "unknown" if not resolved["term"] else "search_terms"
            raise CSVFormatError(
                file_path=source,
                detected_format=detected,
                missing_columns=missing,
            )

        return cls(report_format=report_format, **resolved)
