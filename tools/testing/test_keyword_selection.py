"""
Keyword Selector tests (in-memory source).

Covers:
1. Underperforming: metric < target - tolerance, ascending
2. Overperforming: metric > target + tolerance, descending
3. Only ENABLED keywords, keywords without a share never selected
4. Metric selector switches between the two impression shares
5. The two sets never overlap when tolerance >= 0

Run: python tools/testing/test_keyword_selection.py
"""

import random
import sys
from datetime import date
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from act_bidshare.config_models import BidShareConfig
from act_bidshare.date_range import resolve_date_range
from act_bidshare.keyword_source import AccountKeyword, InMemoryKeywordSource, KeywordSelection
from act_bidshare.models import ImpressionShareMetric
from act_bidshare.selector import (
    overperforming_selection,
    select_overperforming,
    select_underperforming,
    underperforming_selection,
)

DATE_RANGE = resolve_date_range(7, today=date(2026, 2, 11))


def kw(criterion_id, abs_top=None, search=None, status="ENABLED", cpc=10.0, impressions=100):
    return AccountKeyword(
        ad_group_id="5001",
        criterion_id=str(criterion_id),
        cpc=cpc,
        search_absolute_top_impression_share=abs_top,
        search_impression_share=search,
        impressions=impressions,
        status=status,
    )


def ids(records):
    return [r.criterion_id for r in records]


@pytest.fixture
def source():
    return InMemoryKeywordSource([
        kw(1, abs_top=0.70, search=0.95),
        kw(2, abs_top=0.92, search=0.99),
        kw(3, abs_top=0.80, search=0.90),
        kw(4, abs_top=0.10, search=0.50),
        kw(5, abs_top=0.99, search=0.99),
        kw(6, abs_top=0.20, search=0.30, status="PAUSED"),
        kw(7, abs_top=None, search=None),
        kw(8, abs_top=0.75, search=0.75),    # exactly on the lower edge
        kw(9, abs_top=0.85, search=0.85),    # exactly on the upper edge
    ])


def test_underperforming_ascending(source):
    cfg = BidShareConfig(use_absolute_top=True)
    result = select_underperforming(source, cfg, DATE_RANGE)
    assert ids(result) == ["4", "1"]
    assert [r.impression_share for r in result] == [0.10, 0.70]


def test_overperforming_descending(source):
    cfg = BidShareConfig(use_absolute_top=True)
    result = select_overperforming(source, cfg, DATE_RANGE)
    assert ids(result) == ["5", "2"]


def test_band_edges_are_not_selected(source):
    cfg = BidShareConfig(use_absolute_top=True)
    selected = ids(select_underperforming(source, cfg, DATE_RANGE)) + ids(select_overperforming(source, cfg, DATE_RANGE))
    assert "8" not in selected
    assert "9" not in selected
    assert "3" not in selected


def test_paused_and_unreported_keywords_skipped(source):
    cfg = BidShareConfig(use_absolute_top=True)
    selected = ids(select_underperforming(source, cfg, DATE_RANGE)) + ids(select_overperforming(source, cfg, DATE_RANGE))
    assert "6" not in selected
    assert "7" not in selected


def test_search_impression_share_metric(source):
    cfg = BidShareConfig(use_absolute_top=False)
    under = select_underperforming(source, cfg, DATE_RANGE)
    over = select_overperforming(source, cfg, DATE_RANGE)
    assert ids(under) == ["4"]
    assert ids(over) == ["2", "5", "1", "3"]
    assert all(r.impression_share is not None for r in under + over)


def test_selection_built_from_config():
    cfg = BidShareConfig(target_impression_share=0.6, tolerance=0.1, use_absolute_top=False)
    under = underperforming_selection(cfg)
    over = overperforming_selection(cfg)
    assert under.metric is ImpressionShareMetric.SEARCH_IMPRESSION_SHARE
    assert (under.comparison, under.descending) == ("<", False)
    assert under.threshold == pytest.approx(0.5)
    assert (over.comparison, over.descending) == (">", True)
    assert over.threshold == pytest.approx(0.7)


def test_ties_keep_account_order():
    source = InMemoryKeywordSource([kw(i, abs_top=0.5) for i in (3, 1, 2)])
    result = select_underperforming(source, BidShareConfig(), DATE_RANGE)
    assert ids(result) == ["3", "1", "2"]


def test_invalid_comparison_rejected():
    with pytest.raises(ValueError):
        KeywordSelection(ImpressionShareMetric.SEARCH_IMPRESSION_SHARE, "<=", 0.5)


def test_sets_disjoint_for_non_negative_tolerance():
    rnd = random.Random(7)
    keywords = [kw(i, abs_top=round(rnd.random(), 3), search=round(rnd.random(), 3)) for i in range(200)]
    source = InMemoryKeywordSource(keywords)
    for tolerance in (0.0, 0.01, 0.05, 0.2):
        for absolute_top in (True, False):
            cfg = BidShareConfig(tolerance=tolerance, use_absolute_top=absolute_top)
            under = {r.key for r in select_underperforming(source, cfg, DATE_RANGE)}
            over = {r.key for r in select_overperforming(source, cfg, DATE_RANGE)}
            assert under.isdisjoint(over)


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-v"]))
