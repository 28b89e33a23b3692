"""Parser for Google Ads search terms report exports.

Google Ads exports often include:
- Report title and date range lines above the real header row
- UTF-16, tab-separated files (the "CSV for Excel" download)
- Footer rows such as "Total: Account"
"""

import codecs
import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from keyword_reviewer.core.config import ReportConfig
from keyword_reviewer.core.exceptions import (
    CSVEncodingError,
    CSVFormatError,
    CSVParsingError,
    DataError,
)
from keyword_reviewer.parsers.field_mappings import (
    ColumnMap,
    ReportFormat,
    is_header_row,
)

logger = logging.getLogger(__name__)

FALLBACK_ENCODINGS = ("utf-8-sig", "cp1252")


@dataclass
class ParsedReport:
    """Raw rows of a search terms report, keyed by the report's own headers."""

    source: str
    headers: list[str]
    rows: list[dict[str, str]]
    columns: ColumnMap
    preamble_lines: int = 0
    skipped_lines: list[list[str]] = field(default_factory=list)

    @property
    def report_format(self) -> ReportFormat:
        return self.columns.report_format

    def __len__(self) -> int:
        return len(self.rows)


def decode_report(raw: bytes, source: str = "<report>") -> str:
    """Decode report bytes, honouring UTF-16 byte order marks."""
    tried = []

    if raw.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        tried.append("utf-16")
        try:
            return raw.decode("utf-16")
        except UnicodeDecodeError:
            raise CSVEncodingError(source, tried_encodings=tried)

    for encoding in FALLBACK_ENCODINGS:
        tried.append(encoding)
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError:
            logger.debug(f"Decoding {source} as {encoding} failed")
            continue
        if "\x00" in text:
            # NUL bytes mean UTF-16 without a BOM or a binary file
            break
        return text

    raise CSVEncodingError(source, tried_encodings=tried)


def detect_delimiter(lines: list[str]) -> str:
    """Pick tab or comma, whichever dominates the leading lines."""
    tabs = sum(line.count("\t") for line in lines)
    commas = sum(line.count(",") for line in lines)
    return "\t" if tabs > commas else ","


class SearchTermReportParser:
    """Turn a search terms report export into raw rows."""

    def __init__(self, report_config: ReportConfig | None = None):
        self.config = report_config or ReportConfig()

    def parse(self, file_path: Path | str) -> ParsedReport:
        """Read and parse a report file.

        Raises:
            DataError: If the file cannot be read
            CSVParsingError: If the file is not a usable search terms report
        """
        path = Path(file_path)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as e:
            raise DataError(f"Report file not found: {path}") from e
        except IsADirectoryError as e:
            raise DataError(f"Report path is a directory: {path}") from e
        except (PermissionError, OSError) as e:
            raise DataError(f"Failed to read report file {path}: {str(e)}") from e

        logger.info(f"Parsing search terms report {path} ({len(raw)} bytes)")
        return self.parse_text(decode_report(raw, str(path)), source=str(path))

    def detect_header_row(self, lines: list[str], delimiter: str) -> int:
        """Return the index of the header row, skipping report preamble lines."""
        for i, line in enumerate(lines[: self.config.header_scan_rows]):
            cells = next(csv.reader([line], delimiter=delimiter), [])
            if is_header_row(cell.strip() for cell in cells):
                return i
        return 0

    def parse_text(self, text: str, source: str = "<text>") -> ParsedReport:
        """Parse already-decoded report text."""
        # Only "\n" ends a line; quoted cells may hold other line separators
        lines = text.split("\n")
        if not any(line.strip() for line in lines):
            raise CSVFormatError(file_path=source)

        delimiter = detect_delimiter(lines[: self.config.header_scan_rows])
        header_index = self.detect_header_row(lines, delimiter)
        if header_index:
            logger.info(f"Detected {header_index} preamble lines to skip in {source}")

        skipped: list[list[str]] = []

        def skip_bad_line(bad_line: list[str]) -> None:
            skipped.append(bad_line)
            return None

        try:
            frame = pd.read_csv(
                io.StringIO("\n".join(lines[header_index:])),
                sep=delimiter,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                on_bad_lines=skip_bad_line,
            )
        except pd.errors.EmptyDataError as e:
            raise CSVFormatError(file_path=source) from e
        except (pd.errors.ParserError, csv.Error) as e:
            raise CSVParsingError(
                file_path=source,
                error=str(e),
                suggestions=["Check for unbalanced quotes in the report"],
            ) from e

        frame.columns = [str(column).strip() for column in frame.columns]
        headers = list(frame.columns)
        columns = ColumnMap.from_headers(headers, source)

        rows = frame.fillna("").to_dict(orient="records")

        if skipped:
            logger.warning(f"Skipped {len(skipped)} malformed lines in {source}")
        logger.info(
            f"Parsed {len(rows)} rows from {source} "
            f"(format: {columns.report_format.value})"
        )

        return ParsedReport(
            source=source,
            headers=headers,
            rows=rows,
            columns=columns,
            preamble_lines=header_index,
            skipped_lines=skipped,
        )
