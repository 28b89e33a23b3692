"""Interactive review of filtered search terms."""

from keyword_reviewer.review.engine import ReviewEngine, ReviewProgress, ReviewState
from keyword_reviewer.review.input_channel import (
    KEY_BINDINGS,
    Decision,
    KeyInputChannel,
    decision_for_key,
)
from keyword_reviewer.review.session import (
    ReviewSession,
    ReviewStage,
    ReviewWorkflow,
    build_thresholds,
)

__all__ = [
    "KEY_BINDINGS",
    "Decision",
    "KeyInputChannel",
    "ReviewEngine",
    "ReviewProgress",
    "ReviewSession",
    "ReviewStage",
    "ReviewState",
    "ReviewWorkflow",
    "build_thresholds",
    "decision_for_key",
]
