"""Search term candidate models."""

import math
from typing import Annotated, Literal, Union

from pydantic import Field, field_validator

from keyword_reviewer.models.base import BaseReviewModel


class BoundedCostPerConversion(BaseReviewModel):
    """Cost per conversion of a term that converted at least once."""

    kind: Literal["bounded"] = "bounded"
    value: float = Field(..., ge=0.0, description="Cost divided by conversions")

    @field_validator("value")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        """Unbounded costs must use UnboundedCostPerConversion."""
        if not math.isfinite(v):
            raise ValueError("Cost per conversion must be finite")
        return v

    def meets(self, threshold: float) -> bool:
        """Check the value against a minimum threshold."""
        return self.value >= threshold

    def as_float(self) -> float:
        return self.value

    def __str__(self) -> str:
        return f"${self.value:,.2f}"


class UnboundedCostPerConversion(BaseReviewModel):
    """Cost per conversion of a term with zero conversions."""

    kind: Literal["unbounded"] = "unbounded"

    def meets(self, threshold: float) -> bool:
        """An unbounded cost satisfies every finite threshold."""
        return True

    def as_float(self) -> float:
        """Float view for display and sorting only."""
        return math.inf

    def __str__(self) -> str:
        return "∞ (no conversions)"


CostPerConversion = Annotated[
    Union[BoundedCostPerConversion, UnboundedCostPerConversion],
    Field(discriminator="kind"),
]


def compute_cost_per_conversion(cost: float, conversions: float) -> CostPerConversion:
    """Divide cost by conversions, returning the unbounded variant for zero."""
    if conversions == 0:
        return UnboundedCostPerConversion()
    return BoundedCostPerConversion(value=cost / conversions)


class CandidateRecord(BaseReviewModel):
    """A search term that passed the thresholds and awaits review."""

    term: str = Field(..., min_length=1, description="The search query text")
    spend: float = Field(..., ge=0.0, description="Total cost in account currency")
    impressions: int = Field(default=0, ge=0, description="Total impressions")
    clicks: int = Field(default=0, ge=0, description="Total clicks")
    cost_per_conversion: CostPerConversion = Field(
        ..., description="Cost per conversion, unbounded when nothing converted"
    )

    conversions: float | None = Field(
        None, ge=0.0, description="Conversions, when the report has the column"
    )
    campaign_name: str | None = Field(None, description="Campaign name")
    ad_group_name: str | None = Field(None, description="Ad group name")
    row_number: int | None = Field(
        None, ge=1, description="1-based data row in the source report"
    )

    @field_validator("term")
    @classmethod
    def validate_term(cls, v: str) -> str:
        """Strip surrounding whitespace; blank terms are rejected."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Search term must not be blank")
        return stripped

    @property
    def has_conversions(self) -> bool:
        return self.cost_per_conversion.kind == "bounded"

    @property
    def ctr(self) -> float:
        """Calculate click-through rate."""
        return (self.clicks / self.impressions * 100) if self.impressions > 0 else 0.0

    @property
    def avg_cpc(self) -> float:
        """Calculate average cost per click."""
        return self.spend / self.clicks if self.clicks > 0 else 0.0
