"""CSV value parsing utilities for search terms reports."""

import logging
import re
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

# Values Google Ads writes where a metric has no data
MISSING_VALUE_MARKERS = ("", "--", "-", "n/a", "na", "null", "none")


def is_missing_marker(value: Any) -> bool:
    """Check whether a raw cell is an explicit "no data" placeholder."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() in MISSING_VALUE_MARKERS
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def clean_numeric_value(value: Any) -> int | float | None:
    """Clean and parse numeric values from CSV data.

    Handles various Google Ads CSV numeric formats including:
    - Comma-separated numbers: "4,894" → 4894
    - Currency symbols: "$1,234.56" → 1234.56
    - Percentage values: "12.5%" → 12.5
    - Accounting negatives: "(3.00)" → -3.0
    - Empty/null values: "" → None
    - Invalid formats: "N/A" → None

    Args:
        value: Raw value from CSV that should be numeric

    Returns:
        Cleaned numeric value (int/float) or None if invalid
    """
    if is_missing_marker(value):
        return None

    # bool is an int subclass but never a metric
    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return value

    if isinstance(value, str):
        cleaned = re.sub(r"[,$%\s]", "", value.strip())

        if cleaned.startswith("(") and cleaned.endswith(")"):
            cleaned = "-" + cleaned[1:-1]

        try:
            if "." not in cleaned and "e" not in cleaned.lower():
                return int(cleaned)
            return float(cleaned)
        except (ValueError, OverflowError):
            logger.debug(f"Unable to parse numeric value: '{value}', returning None")
            return None

    logger.debug(f"Unable to convert value to numeric: '{value}' (type: {type(value)})")
    return None


def is_summary_row(term: Any, prefix: str = "Total:") -> bool:
    """Check if a row is a report summary/footer row, e.g. "Total: Account"."""
    if not isinstance(term, str):
        return False
    return term.strip().startswith(prefix)
