"""Data models for Keyword Reviewer."""

from keyword_reviewer.models.base import BaseReviewModel
from keyword_reviewer.models.search_term import (
    BoundedCostPerConversion,
    CandidateRecord,
    CostPerConversion,
    UnboundedCostPerConversion,
    compute_cost_per_conversion,
)

__all__ = [
    "BaseReviewModel",
    "BoundedCostPerConversion",
    "CandidateRecord",
    "CostPerConversion",
    "UnboundedCostPerConversion",
    "compute_cost_per_conversion",
]
