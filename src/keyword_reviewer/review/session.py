"""Review sessions and the upload -> review -> complete workflow."""

import logging
from enum import Enum
from pathlib import Path
from typing import Callable

from pydantic import ValidationError

from keyword_reviewer.core.config import ReviewThresholds, Settings
from keyword_reviewer.core.exceptions import ConfigurationError, ReviewError
from keyword_reviewer.exporters.negative_keywords import (
    MatchType,
    NegativeKeywordExporter,
)
from keyword_reviewer.filtering.record_filter import FilterReport, RecordFilter
from keyword_reviewer.parsers.csv_parser import SearchTermReportParser
from keyword_reviewer.review.engine import ReviewEngine, ReviewState
from keyword_reviewer.review.input_channel import KeyInputChannel

logger = logging.getLogger(__name__)


class ReviewStage(str, Enum):
    """Workflow stages."""

    UPLOAD = "upload"
    REVIEWING = "reviewing"
    COMPLETE = "complete"


def build_thresholds(spend_threshold: float, cpc_threshold: float) -> ReviewThresholds:
    """Validate raw threshold input.

    Raises:
        ConfigurationError: If either threshold is negative or not finite
    """
    try:
        return ReviewThresholds(
            spend_threshold=spend_threshold, cpc_threshold=cpc_threshold
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid thresholds: {e}") from e


class ReviewSession:
    """One review of one report under fixed thresholds."""

    def __init__(
        self,
        source: str,
        thresholds: ReviewThresholds,
        filter_report: FilterReport,
        settings: Settings | None = None,
        channel: KeyInputChannel | None = None,
    ):
        self.source = source
        self.thresholds = thresholds
        self.filter_report = filter_report
        self.settings = settings or Settings()
        self.engine = ReviewEngine(filter_report.candidates)
        self.channel = channel or KeyInputChannel()

    @property
    def stage(self) -> ReviewStage:
        if self.engine.state == ReviewState.COMPLETE:
            return ReviewStage.COMPLETE
        return ReviewStage.REVIEWING

    def run(
        self,
        read_key: Callable[[], str],
        on_change: Callable[["ReviewSession"], None] | None = None,
    ) -> ReviewEngine:
        """Read keys until every candidate is decided.

        The input channel is attached only while this runs. Exceptions from
        ``read_key`` (e.g. KeyboardInterrupt) propagate after detaching.
        """
        with self.channel.listening(self.engine.handle_key):
            if on_change:
                on_change(self)
            while not self.engine.is_complete:
                if self.channel.dispatch(read_key()) and on_change:
                    on_change(self)
        return self.engine

    def close(self) -> None:
        self.channel.detach()

    def _exporter(self, match_type: MatchType | str | None) -> NegativeKeywordExporter:
        return NegativeKeywordExporter(match_type or self.settings.export.match_type)

    def export(self, match_type: MatchType | str | None = None) -> str:
        """Render the accepted terms."""
        return self._exporter(match_type).render(self.engine.accepted)

    def write_export(
        self,
        directory: Path | str = ".",
        filename: str | None = None,
        match_type: MatchType | str | None = None,
    ) -> Path:
        """Write the accepted terms to ``directory/filename``."""
        path = Path(directory) / (filename or self.settings.export.filename)
        return self._exporter(match_type).write(self.engine.accepted, path)


class ReviewWorkflow:
    """Application stage machine holding at most one review session."""

    def __init__(
        self,
        settings: Settings | None = None,
        parser: SearchTermReportParser | None = None,
    ):
        self.settings = settings or Settings()
        self.parser = parser or SearchTermReportParser(self.settings.report)
        self._session: ReviewSession | None = None

    @property
    def session(self) -> ReviewSession | None:
        return self._session

    @property
    def stage(self) -> ReviewStage:
        if self._session is None:
            return ReviewStage.UPLOAD
        return self._session.stage

    def validate(
        self, file_path: Path | str | None, thresholds: ReviewThresholds
    ) -> None:
        """Check that a review can start.

        Raises:
            ConfigurationError: If the file is missing or thresholds are not allowed
        """
        if not file_path:
            raise ConfigurationError("Please choose a search terms report file")
        if self.settings.require_positive_thresholds and not thresholds.is_positive:
            raise ConfigurationError(
                "Please enter spend and cost per conversion thresholds greater than zero"
            )

    def start(
        self,
        file_path: Path | str | None,
        thresholds: ReviewThresholds | None = None,
    ) -> ReviewSession:
        """Parse and filter a report and open a review session.

        Nothing is kept if validation, reading or parsing fails.

        Raises:
            ConfigurationError: If the file or thresholds are missing/invalid
            DataError: If the report cannot be read or parsed
            ReviewError: If a session is already open
        """
        if self._session is not None:
            raise ReviewError("A review is already in progress; restart it first")

        if thresholds is None:
            thresholds = self.settings.thresholds
        self.validate(file_path, thresholds)

        report = self.parser.parse(file_path)
        filter_report = RecordFilter(
            thresholds, columns=report.columns, report_config=self.settings.report
        ).apply(report.rows)

        self._session = ReviewSession(
            source=report.source,
            thresholds=thresholds,
            filter_report=filter_report,
            settings=self.settings,
        )
        logger.info(
            f"Started review of {report.source}: "
            f"{len(filter_report.candidates)} candidates"
        )
        return self._session

    def restart(self) -> None:
        """Discard the current session and return to the upload stage."""
        if self._session is not None:
            self._session.close()
            logger.info(f"Discarded review session for {self._session.source}")
        self._session = None
