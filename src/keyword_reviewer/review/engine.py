"""Review engine: walk candidates one at a time and collect accepted terms."""

import logging
from enum import Enum
from typing import Iterable, NamedTuple

from keyword_reviewer.core.exceptions import ReviewCompleteError
from keyword_reviewer.exporters.negative_keywords import (
    MatchType,
    NegativeKeywordExporter,
)
from keyword_reviewer.models.search_term import CandidateRecord
from keyword_reviewer.review.input_channel import Decision, decision_for_key

logger = logging.getLogger(__name__)


class ReviewState(str, Enum):
    """Review engine states."""

    REVIEWING = "reviewing"
    COMPLETE = "complete"


class ReviewProgress(NamedTuple):
    """Reviewed count out of total candidates."""

    cursor: int
    total: int

    @property
    def percent(self) -> float:
        """Percentage reviewed; 0.0 for an empty review."""
        if self.total == 0:
            return 0.0
        return self.cursor / self.total * 100


class ReviewEngine:
    """Linear accept/reject review over a fixed candidate list.

    The cursor only moves forward, one step per decision. Once it reaches
    the end of the list the engine is complete and ignores further input.
    """

    def __init__(self, candidates: Iterable[CandidateRecord] = ()):
        self._candidates: tuple[CandidateRecord, ...] = ()
        self._cursor = 0
        self._accepted: list[CandidateRecord] = []
        self.reset(candidates)

    @property
    def candidates(self) -> tuple[CandidateRecord, ...]:
        return self._candidates

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def accepted(self) -> tuple[CandidateRecord, ...]:
        return tuple(self._accepted)

    @property
    def state(self) -> ReviewState:
        if self._cursor >= len(self._candidates):
            return ReviewState.COMPLETE
        return ReviewState.REVIEWING

    @property
    def is_complete(self) -> bool:
        return self.state == ReviewState.COMPLETE

    def current_candidate(self) -> CandidateRecord:
        """Return the candidate under the cursor.

        Raises:
            ReviewCompleteError: If every candidate has been decided
        """
        if self.is_complete:
            raise ReviewCompleteError(
                f"Review is complete: all {len(self._candidates)} candidates decided"
            )
        return self._candidates[self._cursor]

    def progress(self) -> ReviewProgress:
        return ReviewProgress(cursor=self._cursor, total=len(self._candidates))

    def decide(self, is_accept: bool) -> bool:
        """Accept or reject the current candidate and advance.

        Returns:
            True if the decision was applied, False once the review is complete
        """
        if self.is_complete:
            logger.debug("Ignoring decision: review is complete")
            return False

        candidate = self._candidates[self._cursor]
        if is_accept:
            self._accepted.append(candidate)
        self._cursor += 1

        logger.debug(
            f"{'Accepted' if is_accept else 'Rejected'} '{candidate.term}' "
            f"({self._cursor}/{len(self._candidates)})"
        )
        if self.is_complete:
            logger.info(
                f"Review complete: {len(self._accepted)} of "
                f"{len(self._candidates)} terms accepted as negatives"
            )
        return True

    def apply(self, decision: Decision) -> bool:
        return self.decide(decision == Decision.ACCEPT)

    def handle_key(self, key: str) -> bool:
        """Apply a key press; keys other than y/Y/n/N are ignored."""
        decision = decision_for_key(key)
        if decision is None:
            return False
        return self.apply(decision)

    def reset(self, candidates: Iterable[CandidateRecord] = ()) -> None:
        """Start over with a fresh candidate list."""
        self._candidates = tuple(candidates)
        self._cursor = 0
        self._accepted = []
        logger.debug(f"Review engine reset with {len(self._candidates)} candidates")

    def export_accepted(self, match_type: MatchType | str = MatchType.PLAIN) -> str:
        """Render accepted terms as a newline-joined negative keyword list."""
        return NegativeKeywordExporter(match_type).render(self._accepted)
