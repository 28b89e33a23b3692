"""Keyword Reviewer.

Filter a Google Ads search terms report by spend and cost per conversion,
review the remaining terms one key press at a time, and export the accepted
ones as a negative keyword list.
"""

__version__ = "1.0.0"

from keyword_reviewer.filtering.record_filter import RecordFilter, filter_records
from keyword_reviewer.review.engine import ReviewEngine
from keyword_reviewer.review.session import ReviewWorkflow

__all__ = ["RecordFilter", "ReviewEngine", "ReviewWorkflow", "filter_records"]
