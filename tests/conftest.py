"""Shared fixtures for Keyword Reviewer tests."""

import os
from pathlib import Path

import pytest

from keyword_reviewer.core.config import Settings
from keyword_reviewer.models.search_term import (
    CandidateRecord,
    compute_cost_per_conversion,
)

# Google Ads UI export: two preamble lines, a footer row and an excluded term
SEARCH_TERMS_REPORT = """Search terms report
"January 1, 2024 - January 31, 2024"
Search term,Match type,Added/Excluded,Campaign,Ad group,Impr.,Clicks,Cost,Conversions,Cost / conv.
free shoes,Broad match,None,Shoes,Running,"1,200",40,$12.00,0,--
running shoes,Exact match,Added,Shoes,Running,800,32,96.00,6,16.00
cheap sneakers,Phrase match,None,Shoes,Sneakers,500,25,60.00,1,60.00
shoe repair,Broad match,Excluded,Shoes,Running,300,12,45.00,0,--
shoe laces,Broad match,None,Shoes,Accessories,90,3,4.50,0,--
broken row,Broad match,None,Shoes,Running,100,5,abc,0,--
Total: Search terms,,,,,"2,990",117,$217.50,7,31.07
"""

# Report carrying only the pre-computed cost per conversion
COST_PER_CONVERSION_REPORT = """Search term,Impressions,Clicks,Cost,Cost / conv.
free shoes,1200,40,12.00,--
running shoes,800,32,96.00,16.00
cheap sneakers,500,25,60.00,60.00
"""


@pytest.fixture
def search_terms_csv(tmp_path) -> Path:
    """Write the sample UI export to a temporary file."""
    path = tmp_path / "search_terms.csv"
    path.write_text(SEARCH_TERMS_REPORT, encoding="utf-8")
    return path


@pytest.fixture
def cost_per_conversion_csv(tmp_path) -> Path:
    path = tmp_path / "search_terms_cpc.csv"
    path.write_text(COST_PER_CONVERSION_REPORT, encoding="utf-8")
    return path


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings isolated from the developer's environment."""
    for name in list(os.environ):
        if name.upper().startswith("KWR_"):
            monkeypatch.delenv(name, raising=False)
    return Settings()


def build_candidate(
    term: str, spend: float = 20.0, conversions: float = 0.0, **kwargs
) -> CandidateRecord:
    """Build a candidate record with sensible defaults."""
    return CandidateRecord(
        term=term,
        spend=spend,
        impressions=kwargs.pop("impressions", 100),
        clicks=kwargs.pop("clicks", 10),
        cost_per_conversion=compute_cost_per_conversion(spend, conversions),
        conversions=conversions,
        **kwargs,
    )


@pytest.fixture
def candidates() -> list[CandidateRecord]:
    """Three candidates in report order."""
    return [
        build_candidate("free shoes"),
        build_candidate("cheap sneakers", spend=60.0, conversions=1.0),
        build_candidate("shoe repair jobs", spend=45.0),
    ]


@pytest.fixture
def make_candidate():
    """Factory for candidate records."""
    return build_candidate
