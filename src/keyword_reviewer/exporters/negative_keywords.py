"""Negative keyword list export."""

import logging
from enum import Enum
from pathlib import Path
from typing import Iterable

from keyword_reviewer.models.search_term import CandidateRecord

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILENAME = "negative-keywords.csv"


class MatchType(str, Enum):
    """Keyword syntax used for each exported negative."""

    PLAIN = "plain"
    EXACT = "exact"
    PHRASE = "phrase"


def format_negative_keyword(term: str, match_type: MatchType | str) -> str:
    """Format a term in Google Ads keyword syntax for the given match type."""
    if not term:
        return ""

    match_type = MatchType(match_type)

    if match_type == MatchType.EXACT:
        return f"[{term}]"
    elif match_type == MatchType.PHRASE:
        return f'"{term}"'
    else:
        return term


class NegativeKeywordExporter:
    """Serialize accepted search terms into a negative keyword list.

    One keyword per line, no header and no trailing newline, so an empty
    selection renders as an empty string.
    """

    def __init__(self, match_type: MatchType | str = MatchType.PLAIN):
        self.match_type = MatchType(match_type)

    def render(self, records: Iterable[CandidateRecord]) -> str:
        """Render records as newline-joined keywords."""
        return "\n".join(
            format_negative_keyword(record.term, self.match_type) for record in records
        )

    def write(self, records: Iterable[CandidateRecord], path: Path | str) -> Path:
        """Write the rendered list to ``path`` and return it."""
        path = Path(path)
        content = self.render(records)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

        count = len(content.splitlines())
        logger.info(f"Exported {count} negative keywords to {path}")
        return path
