"""Record filter turning raw report rows into review candidates."""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from pydantic import ValidationError

from keyword_reviewer.core.config import ReportConfig, ReviewThresholds
from keyword_reviewer.core.exceptions import RowParseError
from keyword_reviewer.models.search_term import (
    BoundedCostPerConversion,
    CandidateRecord,
    CostPerConversion,
    UnboundedCostPerConversion,
    compute_cost_per_conversion,
)
from keyword_reviewer.parsers.field_mappings import ColumnMap, ReportFormat
from keyword_reviewer.utils.csv_parsing import (
    clean_numeric_value,
    is_missing_marker,
    is_summary_row,
)

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]


@dataclass
class FilterReport:
    """Outcome of filtering one report."""

    candidates: list[CandidateRecord] = field(default_factory=list)
    total_rows: int = 0
    summary_rows: int = 0
    excluded_rows: int = 0
    malformed_rows: int = 0
    below_threshold_rows: int = 0

    @property
    def dropped_rows(self) -> int:
        return self.total_rows - len(self.candidates)


class RecordFilter:
    """Filter report rows by spend and cost-per-conversion thresholds.

    Rows are handled one at a time: a row with bad numbers is dropped and
    logged, and the rest of the batch carries on.
    """

    def __init__(
        self,
        thresholds: ReviewThresholds,
        columns: ColumnMap | None = None,
        report_config: ReportConfig | None = None,
    ):
        """Initialize the filter.

        Args:
            thresholds: Minimum spend and cost per conversion
            columns: Resolved report headers; inferred from the first row of
                each batch if omitted
            report_config: Total-row and excluded-status markers
        """
        self.thresholds = thresholds
        self.columns = columns
        self.config = report_config or ReportConfig()

    def apply(self, rows: Iterable[Row]) -> FilterReport:
        """Filter rows, preserving their original order."""
        report = FilterReport()
        columns = self.columns

        for row_number, row in enumerate(rows, 1):
            report.total_rows += 1

            if columns is None:
                columns = ColumnMap.from_headers(row.keys())

            if is_summary_row(row.get(columns.term), self.config.total_row_prefix):
                report.summary_rows += 1
                continue

            if self._is_excluded(row, columns):
                report.excluded_rows += 1
                continue

            try:
                candidate = self.to_candidate(row, row_number, columns)
            except RowParseError as e:
                logger.debug(f"Dropping malformed row: {e}")
                report.malformed_rows += 1
                continue

            if candidate is None:
                report.below_threshold_rows += 1
                continue

            report.candidates.append(candidate)

        logger.info(
            f"Kept {len(report.candidates)} of {report.total_rows} rows "
            f"(spend >= {self.thresholds.spend_threshold}, "
            f"cost/conv >= {self.thresholds.cpc_threshold}); "
            f"{report.summary_rows} summary, {report.excluded_rows} excluded, "
            f"{report.malformed_rows} malformed"
        )
        return report

    def to_candidate(
        self,
        row: Row,
        row_number: int | None = None,
        columns: ColumnMap | None = None,
    ) -> CandidateRecord | None:
        """Build a candidate from a row, or None if it misses a threshold.

        Raises:
            RowParseError: If a required value is blank or malformed
        """
        if columns is None:
            columns = self.columns or ColumnMap.from_headers(row.keys())

        raw_term = row.get(columns.term)
        term = raw_term.strip() if isinstance(raw_term, str) else ""
        if not term:
            raise RowParseError("term", raw_term, row_number)

        spend = self._number(row, columns.cost, "cost", row_number)
        impressions = self._count(row, columns.impressions, "impressions", row_number)
        clicks = self._count(row, columns.clicks, "clicks", row_number)

        conversions: float | None = None
        if columns.report_format == ReportFormat.CONVERSIONS:
            conversions = self._number(
                row, columns.conversions, "conversions", row_number, missing=0.0
            )
            try:
                cost_per_conversion = compute_cost_per_conversion(spend, conversions)
            except ValidationError as e:
                raise RowParseError(
                    "conversions", row.get(columns.conversions), row_number
                ) from e
        else:
            cost_per_conversion = self._direct_cost_per_conversion(
                row, columns, row_number
            )

        if spend < self.thresholds.spend_threshold:
            return None
        if not cost_per_conversion.meets(self.thresholds.cpc_threshold):
            return None

        try:
            return CandidateRecord(
                term=term,
                spend=spend,
                impressions=impressions,
                clicks=clicks,
                cost_per_conversion=cost_per_conversion,
                conversions=conversions,
                campaign_name=self._text(row, columns.campaign),
                ad_group_name=self._text(row, columns.ad_group),
                row_number=row_number,
            )
        except ValidationError as e:
            raise RowParseError("term", raw_term, row_number) from e

    def _is_excluded(self, row: Row, columns: ColumnMap) -> bool:
        if not columns.status:
            return False
        status = row.get(columns.status)
        return isinstance(status, str) and status.strip() == self.config.excluded_status

    def _direct_cost_per_conversion(
        self, row: Row, columns: ColumnMap, row_number: int | None
    ) -> CostPerConversion:
        # Google Ads writes "--" here when nothing converted
        raw = row.get(columns.cost_per_conversion)
        if is_missing_marker(raw):
            return UnboundedCostPerConversion()
        value = self._number(
            row, columns.cost_per_conversion, "cost_per_conversion", row_number
        )
        return BoundedCostPerConversion(value=value)

    @staticmethod
    def _number(
        row: Row,
        column: str | None,
        field_name: str,
        row_number: int | None,
        missing: float | None = None,
    ) -> float:
        raw = row.get(column) if column else None
        if missing is not None and is_missing_marker(raw):
            return missing

        value = clean_numeric_value(raw)
        if value is None or not math.isfinite(value) or value < 0:
            raise RowParseError(field_name, raw, row_number)
        return float(value)

    @classmethod
    def _count(
        cls, row: Row, column: str | None, field_name: str, row_number: int | None
    ) -> int:
        value = cls._number(row, column, field_name, row_number)
        if not value.is_integer():
            raise RowParseError(field_name, row.get(column), row_number)
        return int(value)

    @staticmethod
    def _text(row: Row, column: str | None) -> str | None:
        if not column:
            return None
        value = row.get(column)
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip()


def filter_records(
    rows: Iterable[Row],
    spend_threshold: float,
    cpc_threshold: float,
    columns: ColumnMap | None = None,
) -> list[CandidateRecord]:
    """Filter raw rows and return only the candidates."""
    thresholds = ReviewThresholds(
        spend_threshold=spend_threshold, cpc_threshold=cpc_threshold
    )
    return RecordFilter(thresholds, columns=columns).apply(rows).candidates
