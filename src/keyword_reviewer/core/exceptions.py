"""Custom exceptions for Keyword Reviewer."""


class KeywordReviewerError(Exception):
    """Base exception for all Keyword Reviewer errors."""

    pass


class ConfigurationError(KeywordReviewerError):
    """Raised when session configuration is missing or invalid."""

    pass


class DataError(KeywordReviewerError):
    """Raised when report data cannot be read."""

    pass


class ReviewError(KeywordReviewerError):
    """Raised when the review workflow is used incorrectly."""

    pass


class ReviewCompleteError(ReviewError):
    """Raised when a candidate is requested after the review has finished."""

    pass


class InputChannelError(ReviewError):
    """Raised when the key input channel is attached more than once."""

    pass


class RowParseError(DataError):
    """Raised when a single report row cannot be turned into a candidate.

    The record filter catches this per row, so one bad row never fails
    the whole report.
    """

    def __init__(self, field: str, value: object, row_number: int | None = None):
        self.field = field
        self.value = value
        self.row_number = row_number

        message = f"Invalid value for '{field}': {value!r}"
        if row_number is not None:
            message = f"Row {row_number}: {message}"
        super().__init__(message)


class CSVParsingError(DataError):
    """CSV parsing error with guidance for the user."""

    def __init__(
        self,
        file_path: str,
        error: str,
        suggestions: list | None = None,
        line_number: int | None = None,
        detected_format: str | None = None,
    ):
        """Initialize CSV parsing error.

        Args:
            file_path: Path (or label) of the CSV that failed to parse
            error: Original error message
            suggestions: List of suggested fixes
            line_number: Line number where error occurred (if known)
            detected_format: Detected report format (if known)
        """
        self.file_path = file_path
        self.original_error = error
        self.suggestions = suggestions or []
        self.line_number = line_number
        self.detected_format = detected_format

        message = f"CSV parsing failed for {file_path}:\n"

        if line_number:
            message += f"Error at line {line_number}:\n"

        message += f"Error: {error}\n"

        if detected_format and detected_format != "unknown":
            message += f"Detected format: {detected_format}\n"

        if self.suggestions:
            message += "\nSuggestions to fix this issue:\n"
            for i, suggestion in enumerate(self.suggestions, 1):
                message += f"  {i}. {suggestion}\n"

        super().__init__(message)


class CSVFormatError(CSVParsingError):
    """Raised when the CSV is not a usable search terms report."""

    def __init__(
        self,
        file_path: str,
        detected_format: str = "unknown",
        missing_columns: list | None = None,
    ):
        """Initialize CSV format error.

        Args:
            file_path: Path to the CSV file
            detected_format: Detected format type
            missing_columns: List of missing required columns
        """
        self.missing_columns = missing_columns or []

        if detected_format == "unknown":
            error = "Unable to find a search terms header row"
            suggestions = [
                "Ensure the file is a Google Ads search terms report export",
                "Verify the file contains data rows (not just report titles)",
            ]
        else:
            error = f"Search terms report ({detected_format}) has validation issues"
            suggestions = []

        if self.missing_columns:
            error += f". Missing required columns: {', '.join(self.missing_columns)}"
            suggestions.extend(
                [
                    f"Add missing columns: {', '.join(self.missing_columns)}",
                    "Re-export the report from Google Ads with all required columns",
                ]
            )

        super().__init__(
            file_path=file_path,
            error=error,
            suggestions=suggestions,
            detected_format=detected_format,
        )


class CSVEncodingError(CSVParsingError):
    """Raised when the CSV file has encoding issues."""

    def __init__(self, file_path: str, tried_encodings: list | None = None):
        """Initialize CSV encoding error.

        Args:
            file_path: Path to the CSV file
            tried_encodings: List of encodings that were tried
        """
        suggestions = [
            "Save the file as UTF-8 encoded CSV",
            "In Excel: File > Save As > CSV UTF-8 (Comma delimited)",
            "Check for corrupted or binary content in the file",
        ]

        if tried_encodings:
            suggestions.append(f"Tried encodings: {', '.join(tried_encodings)}")

        super().__init__(
            file_path=file_path,
            error="Unable to detect file encoding",
            suggestions=suggestions,
            detected_format="encoding_error",
        )
