"""
Bid Adjuster - moves keyword bids toward the target impression share band.

Flow (one run):
  1. Resolve the statistics window (ends today, account time zone)
  2. Fetch underperforming keywords, raise each bid
  3. Fetch overperforming keywords, lower each bid

Raising always finishes before lowering starts. Each keyword is changed at
most once per run. Any data source error aborts the run.
"""
from __future__ import annotations

from datetime import date
from typing import Callable, List, Optional, Set, Tuple

from .config_models import BidShareConfig
from .date_range import DateRange, resolve_date_range
from .keyword_source import KeywordSource
from .logging_config import setup_logging
from .models import BidChange, Direction, KeywordRecord, RunSummary
from .policy import BidPolicy
from .selector import select_overperforming, select_underperforming

logger = setup_logging(__name__)


class BidAdjuster:
    """
    Runs the Bid to Impression Share rule against one keyword source.

    Supports two modes:
    - Live (default): new bids are written with source.set_bid()
    - Dry-run: new bids are computed and logged, nothing is written
    """

    def __init__(
        self,
        source: KeywordSource,
        config: BidShareConfig,
        dry_run: bool = False,
        timezone: Optional[str] = None,
        today: Optional[date] = None,
    ):
        """
        Args:
            source: Keyword data source (Google Ads, mock DuckDB, in-memory)
            config: Validated bid parameters
            dry_run: If True, never call source.set_bid()
            timezone: Overrides source.account_timezone() for "today"
            today: Fixed end date of the statistics window
        """
        self.source = source
        self.config = config
        self.policy = BidPolicy(config)
        self.dry_run = dry_run
        self.timezone = timezone
        self.today = today

        mode = "DRY-RUN" if dry_run else "LIVE"
        logger.info(f"BidAdjuster initialized: metric={config.metric.value}, mode={mode}")

    def resolve_date_range(self) -> DateRange:
        if self.today is not None:
            return resolve_date_range(self.config.statistics_window_days, today=self.today)
        timezone = self.timezone or self.source.account_timezone()
        return resolve_date_range(self.config.statistics_window_days, timezone=timezone)

    def run(self) -> RunSummary:
        date_range = self.resolve_date_range()
        cfg = self.config
        logger.info(
            f"Starting run: window={date_range} ({date_range.days} days), "
            f"target={cfg.target_impression_share}, tolerance={cfg.tolerance}, "
            f"dry_run={self.dry_run}"
        )

        summary = RunSummary(
            start=date_range.start,
            finish=date_range.finish,
            metric=cfg.metric,
            dry_run=self.dry_run,
        )
        touched: Set[Tuple[str, str]] = set()

        to_raise = select_underperforming(self.source, cfg, date_range)
        logger.info(f"Keywords below {cfg.lower_threshold:.4f}: {len(to_raise)}")
        summary.changes.extend(
            self._adjust_all(to_raise, Direction.RAISE, self._raised_cpc, touched)
        )

        to_lower = select_overperforming(self.source, cfg, date_range)
        logger.info(f"Keywords above {cfg.upper_threshold:.4f}: {len(to_lower)}")
        summary.changes.extend(
            self._adjust_all(to_lower, Direction.LOWER, self._lowered_cpc, touched)
        )

        logger.info(
            f"Run complete: raised={summary.raised}, lowered={summary.lowered}, "
            f"skipped={summary.skipped}"
        )
        return summary

    def _raised_cpc(self, kw: KeywordRecord) -> float:
        return self.policy.raise_cpc(kw.cpc, kw.first_page_cpc, kw.top_of_page_cpc)

    def _lowered_cpc(self, kw: KeywordRecord) -> float:
        return self.policy.lower_cpc(kw.cpc)

    def _adjust_all(
        self,
        keywords: List[KeywordRecord],
        direction: Direction,
        new_cpc_for: Callable[[KeywordRecord], float],
        touched: Set[Tuple[str, str]],
    ) -> List[BidChange]:
        changes = []
        for kw in keywords:
            reason = self._skip_reason(kw, touched)
            if reason:
                logger.warning(f"Skipping {direction.value} for keyword {kw.label}: {reason}")
                changes.append(BidChange(
                    keyword=kw,
                    direction=direction,
                    old_cpc=kw.cpc,
                    new_cpc=None,
                    applied=False,
                    skip_reason=reason,
                ))
                continue

            new_cpc = new_cpc_for(kw)
            touched.add(kw.key)
            if self.dry_run:
                logger.info(
                    f"DRY RUN: Would {direction.value} keyword {kw.label} bid "
                    f"{kw.cpc:.2f} -> {new_cpc:.2f} (share={kw.impression_share})"
                )
            else:
                self.source.set_bid(kw, new_cpc)
                logger.info(
                    f"Updated keyword {kw.label} bid {kw.cpc:.2f} -> {new_cpc:.2f} "
                    f"({direction.value}, share={kw.impression_share})"
                )
            changes.append(BidChange(
                keyword=kw,
                direction=direction,
                old_cpc=kw.cpc,
                new_cpc=new_cpc,
                applied=True,
            ))
        return changes

    def _skip_reason(self, kw: KeywordRecord, touched: Set[Tuple[str, str]]) -> Optional[str]:
        if kw.key in touched:
            return "already adjusted in this run"
        if self.config.skip_if_zero_impressions and kw.impressions <= 0:
            return "no impressions in statistics window"
        return None
