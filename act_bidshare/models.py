"""
Bid to Impression Share data models - ImpressionShareMetric, KeywordRecord, BidChange, RunSummary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class ImpressionShareMetric(str, Enum):
    """Which impression share the bids are steered by."""
    SEARCH_IMPRESSION_SHARE = "search_impression_share"
    SEARCH_ABSOLUTE_TOP_IMPRESSION_SHARE = "search_absolute_top_impression_share"

    @property
    def gaql_field(self) -> str:
        return f"metrics.{self.value}"

    @property
    def is_absolute_top(self) -> bool:
        return self is ImpressionShareMetric.SEARCH_ABSOLUTE_TOP_IMPRESSION_SHARE


class Direction(str, Enum):
    RAISE = "raise"
    LOWER = "lower"


@dataclass(frozen=True)
class KeywordRecord:
    """Snapshot of one keyword over the statistics window."""
    ad_group_id: str
    criterion_id: str
    impression_share: Optional[float]   # selected metric, 0-1 (None = not reported)
    impressions: int                    # window total
    cpc: float                          # current max CPC (currency units, not micros)
    first_page_cpc: float = 0.0
    top_of_page_cpc: float = 0.0
    keyword_text: str = ""
    status: str = "ENABLED"             # ENABLED | PAUSED | REMOVED

    @property
    def key(self) -> Tuple[str, str]:
        return (str(self.ad_group_id), str(self.criterion_id))

    @property
    def label(self) -> str:
        text = f" '{self.keyword_text}'" if self.keyword_text else ""
        return f"{self.ad_group_id}~{self.criterion_id}{text}"


@dataclass(frozen=True)
class BidChange:
    """One adjustment decision for a keyword."""
    keyword: KeywordRecord
    direction: Direction
    old_cpc: float
    new_cpc: Optional[float]            # None when skipped
    applied: bool                       # dry run: simulated only
    skip_reason: Optional[str] = None

    @property
    def change_pct(self) -> Optional[float]:
        if self.new_cpc is None or self.old_cpc == 0:
            return None
        return (self.new_cpc - self.old_cpc) / self.old_cpc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ad_group_id": self.keyword.ad_group_id,
            "criterion_id": self.keyword.criterion_id,
            "keyword_text": self.keyword.keyword_text,
            "impression_share": self.keyword.impression_share,
            "impressions": self.keyword.impressions,
            "direction": self.direction.value,
            "old_cpc": self.old_cpc,
            "new_cpc": self.new_cpc,
            "change_pct": self.change_pct,
            "applied": self.applied,
            "skip_reason": self.skip_reason,
        }


@dataclass
class RunSummary:
    """Outcome of one BidAdjuster.run() call, in execution order."""
    start: date
    finish: date
    metric: ImpressionShareMetric
    dry_run: bool
    changes: List[BidChange] = field(default_factory=list)

    def _count(self, direction: Direction, applied: bool) -> int:
        return sum(1 for c in self.changes if c.direction is direction and c.applied is applied)

    @property
    def raised(self) -> int:
        return self._count(Direction.RAISE, True)

    @property
    def lowered(self) -> int:
        return self._count(Direction.LOWER, True)

    @property
    def skipped(self) -> int:
        return sum(1 for c in self.changes if not c.applied)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "finish": self.finish.isoformat(),
            "metric": self.metric.value,
            "dry_run": self.dry_run,
            "raised": self.raised,
            "lowered": self.lowered,
            "skipped": self.skipped,
            "changes": [c.to_dict() for c in self.changes],
        }
