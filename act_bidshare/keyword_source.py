"""
Keyword data source contract.

The adjuster only talks to an account through KeywordSource:
  query_keywords  - one filtered + sorted query over the statistics window
  set_bid         - persist a new max CPC for a keyword
  account_timezone

Implementations:
  InMemoryKeywordSource   (this module)     - list-backed, for tests
  DuckDBKeywordSource     (mock_source)     - mock account in a DuckDB file
  GoogleAdsKeywordSource  (google_ads_api)  - live Google Ads account
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .date_range import DateRange
from .errors import KeywordSourceError
from .models import ImpressionShareMetric, KeywordRecord


@dataclass(frozen=True)
class KeywordSelection:
    """Status filter, metric predicate and sort order for one keyword query."""
    metric: ImpressionShareMetric
    comparison: str                 # "<" | ">"
    threshold: float
    descending: bool = False
    status: str = "ENABLED"

    def __post_init__(self):
        if self.comparison not in ("<", ">"):
            raise ValueError(f"comparison must be '<' or '>' (got {self.comparison!r})")

    def matches(self, value: Optional[float]) -> bool:
        if value is None:
            return False
        if self.comparison == "<":
            return value < self.threshold
        return value > self.threshold

    @property
    def order(self) -> str:
        return "DESC" if self.descending else "ASC"

    def describe(self) -> str:
        return (
            f"status = {self.status} AND {self.metric.gaql_field} {self.comparison} "
            f"{self.threshold!r} ORDER BY {self.metric.gaql_field} {self.order}"
        )


class KeywordSource(ABC):

    @abstractmethod
    def query_keywords(self, selection: KeywordSelection, date_range: DateRange) -> List[KeywordRecord]:
        """Keywords matching `selection` over `date_range`, in the selection's order."""

    @abstractmethod
    def set_bid(self, keyword: KeywordRecord, new_cpc: float) -> None:
        """Set the keyword's max CPC (currency units)."""

    @abstractmethod
    def account_timezone(self) -> str:
        """IANA time zone of the account."""


@dataclass
class AccountKeyword:
    """A keyword as held by InMemoryKeywordSource (mutable: set_bid updates cpc)."""
    ad_group_id: str
    criterion_id: str
    cpc: float
    search_impression_share: Optional[float] = None
    search_absolute_top_impression_share: Optional[float] = None
    impressions: int = 0
    first_page_cpc: float = 0.0
    top_of_page_cpc: float = 0.0
    keyword_text: str = ""
    status: str = "ENABLED"

    @property
    def key(self) -> Tuple[str, str]:
        return (str(self.ad_group_id), str(self.criterion_id))

    def share(self, metric: ImpressionShareMetric) -> Optional[float]:
        return getattr(self, metric.value)

    def snapshot(self, metric: ImpressionShareMetric) -> KeywordRecord:
        return KeywordRecord(
            ad_group_id=str(self.ad_group_id),
            criterion_id=str(self.criterion_id),
            impression_share=self.share(metric),
            impressions=self.impressions,
            cpc=self.cpc,
            first_page_cpc=self.first_page_cpc,
            top_of_page_cpc=self.top_of_page_cpc,
            keyword_text=self.keyword_text,
            status=self.status,
        )


class InMemoryKeywordSource(KeywordSource):
    """
    Keeps keyword stats for a single window in memory.

    The date range is accepted but not used for filtering: every AccountKeyword
    already holds the window's numbers. Bid writes are recorded in `bid_updates`
    (in call order) as well as applied to the keyword.
    """

    def __init__(self, keywords: List[AccountKeyword], timezone: str = "UTC"):
        self.keywords = list(keywords)
        self.timezone = timezone
        self.bid_updates: List[Tuple[Tuple[str, str], float]] = []
        self.queries: List[KeywordSelection] = []

    def query_keywords(self, selection: KeywordSelection, date_range: DateRange) -> List[KeywordRecord]:
        self.queries.append(selection)
        matching = [
            kw for kw in self.keywords
            if kw.status == selection.status and selection.matches(kw.share(selection.metric))
        ]
        # sorted() is stable: ties keep account order
        matching.sort(key=lambda kw: kw.share(selection.metric), reverse=selection.descending)
        return [kw.snapshot(selection.metric) for kw in matching]

    def set_bid(self, keyword: KeywordRecord, new_cpc: float) -> None:
        for kw in self.keywords:
            if kw.key == keyword.key:
                kw.cpc = new_cpc
                self.bid_updates.append((kw.key, new_cpc))
                return
        raise KeywordSourceError(f"Keyword not found: {keyword.label}")

    def account_timezone(self) -> str:
        return self.timezone

    def get(self, ad_group_id: str, criterion_id: str) -> Optional[AccountKeyword]:
        for kw in self.keywords:
            if kw.key == (str(ad_group_id), str(criterion_id)):
                return kw
        return None
