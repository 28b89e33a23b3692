"""Tests for review sessions and the review workflow."""

import pytest

from keyword_reviewer.core.config import ReviewThresholds, Settings
from keyword_reviewer.core.exceptions import (
    ConfigurationError,
    CSVFormatError,
    DataError,
    ReviewError,
)
from keyword_reviewer.exporters.negative_keywords import MatchType
from keyword_reviewer.filtering.record_filter import FilterReport
from keyword_reviewer.review.session import (
    ReviewSession,
    ReviewStage,
    ReviewWorkflow,
    build_thresholds,
)


@pytest.fixture
def thresholds():
    return ReviewThresholds(spend_threshold=10, cpc_threshold=20)


@pytest.fixture
def workflow(settings):
    return ReviewWorkflow(settings)


@pytest.fixture
def session(candidates, settings, thresholds):
    return ReviewSession(
        source="report.csv",
        thresholds=thresholds,
        filter_report=FilterReport(candidates=candidates, total_rows=3),
        settings=settings,
    )


def keys(*pressed):
    return iter(pressed).__next__


class TestBuildThresholds:
    def test_valid(self):
        thresholds = build_thresholds(10, 5.5)
        assert thresholds.spend_threshold == 10.0
        assert thresholds.cpc_threshold == 5.5

    @pytest.mark.parametrize(
        "spend, cpc", [(-1, 5), (5, -0.01), (float("nan"), 5), (5, float("inf"))]
    )
    def test_invalid(self, spend, cpc):
        with pytest.raises(ConfigurationError):
            build_thresholds(spend, cpc)


class TestReviewWorkflow:
    """Test the upload -> reviewing -> complete stages."""

    def test_starts_in_upload(self, workflow):
        assert workflow.stage == ReviewStage.UPLOAD
        assert workflow.session is None

    def test_start_filters_report(self, workflow, search_terms_csv, thresholds):
        session = workflow.start(search_terms_csv, thresholds)

        assert workflow.stage == ReviewStage.REVIEWING
        assert workflow.session is session
        assert [c.term for c in session.engine.candidates] == [
            "free shoes",
            "cheap sneakers",
        ]
        assert session.filter_report.excluded_rows == 1
        assert session.source == str(search_terms_csv)

    def test_start_with_string_path(self, workflow, search_terms_csv, thresholds):
        session = workflow.start(str(search_terms_csv), thresholds)
        assert len(session.engine.candidates) == 2

    def test_no_file(self, workflow, thresholds):
        with pytest.raises(ConfigurationError, match="search terms report"):
            workflow.start(None, thresholds)
        assert workflow.session is None

    @pytest.mark.parametrize("spend, cpc", [(0, 20), (10, 0), (0, 0)])
    def test_thresholds_must_be_positive(self, workflow, search_terms_csv, spend, cpc):
        with pytest.raises(ConfigurationError, match="greater than zero"):
            workflow.start(
                search_terms_csv,
                ReviewThresholds(spend_threshold=spend, cpc_threshold=cpc),
            )
        assert workflow.stage == ReviewStage.UPLOAD

    def test_zero_thresholds_allowed_when_configured(self, search_terms_csv):
        workflow = ReviewWorkflow(Settings(require_positive_thresholds=False))
        session = workflow.start(search_terms_csv, ReviewThresholds())

        # Everything but the footer, the excluded term and the broken row
        assert len(session.engine.candidates) == 4

    def test_default_thresholds_from_settings(self, search_terms_csv):
        settings = Settings(
            thresholds=ReviewThresholds(spend_threshold=50, cpc_threshold=50)
        )
        session = ReviewWorkflow(settings).start(search_terms_csv)

        assert [c.term for c in session.engine.candidates] == ["cheap sneakers"]

    def test_missing_file_keeps_upload_stage(self, workflow, tmp_path, thresholds):
        with pytest.raises(DataError):
            workflow.start(tmp_path / "missing.csv", thresholds)
        assert workflow.session is None

    def test_wrong_report_keeps_upload_stage(self, workflow, tmp_path, thresholds):
        path = tmp_path / "keywords.csv"
        path.write_text("Keyword,Cost\nshoes,1\n")

        with pytest.raises(CSVFormatError):
            workflow.start(path, thresholds)
        assert workflow.stage == ReviewStage.UPLOAD

    def test_one_session_at_a_time(self, workflow, search_terms_csv, thresholds):
        workflow.start(search_terms_csv, thresholds)
        with pytest.raises(ReviewError):
            workflow.start(search_terms_csv, thresholds)

    def test_restart(self, workflow, search_terms_csv, thresholds):
        session = workflow.start(search_terms_csv, thresholds)
        session.run(keys("y", "n"))
        assert workflow.stage == ReviewStage.COMPLETE

        workflow.restart()

        assert workflow.stage == ReviewStage.UPLOAD
        assert workflow.session is None
        assert not session.channel.is_attached

        new_session = workflow.start(search_terms_csv, thresholds)
        assert new_session.engine.cursor == 0
        assert new_session.engine.accepted == ()

    def test_restart_without_session(self, workflow):
        workflow.restart()
        assert workflow.stage == ReviewStage.UPLOAD


class TestReviewSession:
    def test_run_until_complete(self, session):
        engine = session.run(keys("y", "n", "y"))

        assert engine.is_complete
        assert session.stage == ReviewStage.COMPLETE
        assert [c.term for c in engine.accepted] == ["free shoes", "shoe repair jobs"]

    def test_unbound_keys_do_not_advance(self, session):
        seen = []
        session.run(keys("x", "y", "q", "N", "Y"), on_change=lambda s: seen.append(s.engine.cursor))

        # Initial render plus one per decision
        assert seen == [0, 1, 2, 3]
        assert len(session.engine.accepted) == 2

    def test_channel_only_attached_while_running(self, session):
        attached = []
        session.run(
            keys("n", "n", "n"),
            on_change=lambda s: attached.append(s.channel.is_attached),
        )

        assert all(attached)
        assert not session.channel.is_attached

    def test_channel_detached_when_input_fails(self, session):
        def interrupted():
            raise KeyboardInterrupt

        with pytest.raises(KeyboardInterrupt):
            session.run(interrupted)

        assert not session.channel.is_attached
        assert session.stage == ReviewStage.REVIEWING

    def test_empty_session_completes_immediately(self, settings, thresholds):
        session = ReviewSession("report.csv", thresholds, FilterReport(), settings)

        def no_keys():
            raise AssertionError("no key should be read")

        session.run(no_keys)
        assert session.stage == ReviewStage.COMPLETE
        assert session.export() == ""

    def test_export(self, session):
        session.run(keys("y", "y", "n"))

        assert session.export() == "free shoes\ncheap sneakers"
        assert session.export(MatchType.EXACT) == "[free shoes]\n[cheap sneakers]"

    def test_write_export(self, session, tmp_path):
        session.run(keys("y", "n", "y"))

        path = session.write_export(tmp_path / "out")

        assert path == tmp_path / "out" / "negative-keywords.csv"
        assert path.read_text(encoding="utf-8") == "free shoes\nshoe repair jobs"

    def test_write_export_uses_configured_match_type(self, candidates, tmp_path, thresholds):
        settings = Settings(export={"match_type": "phrase", "filename": "negatives.txt"})
        session = ReviewSession(
            "report.csv", thresholds, FilterReport(candidates=candidates), settings
        )
        session.run(keys("y", "n", "n"))

        path = session.write_export(tmp_path)

        assert path.name == "negatives.txt"
        assert path.read_text(encoding="utf-8") == '"free shoes"'
