"""
Keyword Selector - which keywords are outside the target band.

  underperforming: metric < target - tolerance, worst first (ASC)
  overperforming:  metric > target + tolerance, best first (DESC)

A negative tolerance (or tolerance >= target) can invert the band; the
config is trusted as given.
"""
from __future__ import annotations

from typing import List

from .config_models import BidShareConfig
from .date_range import DateRange
from .keyword_source import KeywordSelection, KeywordSource
from .models import KeywordRecord


def underperforming_selection(config: BidShareConfig) -> KeywordSelection:
    return KeywordSelection(
        metric=config.metric,
        comparison="<",
        threshold=config.lower_threshold,
        descending=False,
    )


def overperforming_selection(config: BidShareConfig) -> KeywordSelection:
    return KeywordSelection(
        metric=config.metric,
        comparison=">",
        threshold=config.upper_threshold,
        descending=True,
    )


def select_underperforming(
    source: KeywordSource, config: BidShareConfig, date_range: DateRange
) -> List[KeywordRecord]:
    return source.query_keywords(underperforming_selection(config), date_range)


def select_overperforming(
    source: KeywordSource, config: BidShareConfig, date_range: DateRange
) -> List[KeywordRecord]:
    return source.query_keywords(overperforming_selection(config), date_range)
