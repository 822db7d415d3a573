"""
Mock account - keyword stats and bids in DuckDB (BIDSHARE_MODE=mock).

Tables:
  keyword_stats_daily  one row per keyword per day (impressions, eligible, absolute top)
  keyword_bids         current bid + reference CPCs per keyword

Window impression shares are computed the way Google Ads reports them:
  search_impression_share              = SUM(impressions) / SUM(eligible_impressions)
  search_absolute_top_impression_share = SUM(absolute_top_impressions) / SUM(eligible_impressions)
Keywords with no eligible impressions in the window have no share and are never selected.
"""
from __future__ import annotations

import random
from datetime import date, timedelta
from typing import List

import duckdb

from .date_range import DateRange
from .errors import KeywordSourceError
from .keyword_source import KeywordSelection, KeywordSource
from .logging_config import setup_logging
from .models import KeywordRecord

logger = setup_logging(__name__)


KEYWORD_STATS_DAILY_DDL = """
CREATE TABLE IF NOT EXISTS keyword_stats_daily (
    customer_id VARCHAR,
    snapshot_date DATE,
    ad_group_id VARCHAR,
    criterion_id VARCHAR,
    impressions BIGINT,
    eligible_impressions BIGINT,
    absolute_top_impressions BIGINT
)
"""

KEYWORD_BIDS_DDL = """
CREATE TABLE IF NOT EXISTS keyword_bids (
    customer_id VARCHAR,
    ad_group_id VARCHAR,
    criterion_id VARCHAR,
    keyword_text VARCHAR,
    status VARCHAR,
    cpc_bid DOUBLE,
    first_page_cpc DOUBLE,
    top_of_page_cpc DOUBLE,
    updated_at TIMESTAMP
)
"""

MOCK_KEYWORD_TEXTS = [
    "running shoes", "trail running shoes", "buy running shoes", "womens running shoes",
    "mens running shoes", "running shoes sale", "waterproof running shoes", "cushioned running shoes",
    "marathon shoes", "running trainers", "lightweight running shoes", "wide running shoes",
]


def ensure_schema(con: duckdb.DuckDBPyConnection) -> None:
    con.execute(KEYWORD_STATS_DAILY_DDL)
    con.execute(KEYWORD_BIDS_DDL)


def has_keywords(con: duckdb.DuckDBPyConnection, customer_id: str) -> bool:
    row = con.execute(
        "SELECT COUNT(*) FROM keyword_bids WHERE customer_id = ?", [customer_id]
    ).fetchone()
    return bool(row and row[0])


def seed_mock_keywords(
    con: duckdb.DuckDBPyConnection,
    customer_id: str,
    today: date,
    seed: int,
    ad_groups: int = 3,
    keywords_per_ad_group: int = 4,
    days: int = 30,
) -> int:
    """
    Insert deterministic synthetic keywords with `days` of daily stats ending today.

    Every 5th keyword gets zero impressions (eligible but never shown).
    Returns the number of keywords created.
    """
    ensure_schema(con)
    rnd = random.Random(seed)

    bid_rows = []
    stat_rows = []
    n = 0
    for g in range(1, ad_groups + 1):
        ad_group_id = str(5000 + g)
        for k in range(1, keywords_per_ad_group + 1):
            n += 1
            criterion_id = str(700000 + n)
            text = MOCK_KEYWORD_TEXTS[(n - 1) % len(MOCK_KEYWORD_TEXTS)]
            never_shown = n % 5 == 0

            abs_top_share = rnd.uniform(0.30, 0.98)
            search_share = abs_top_share + rnd.uniform(0.0, 1.0 - abs_top_share)
            first_page_cpc = round(rnd.uniform(1.0, 8.0), 2)
            top_of_page_cpc = round(first_page_cpc * rnd.uniform(1.5, 3.0), 2)
            cpc_bid = round(rnd.uniform(4.0, 36.0), 2)

            bid_rows.append((
                customer_id, ad_group_id, criterion_id, text, "ENABLED",
                cpc_bid, first_page_cpc, top_of_page_cpc,
            ))

            for d in range(days):
                eligible = rnd.randint(20, 400)
                impressions = 0 if never_shown else round(eligible * search_share)
                abs_top = 0 if never_shown else min(impressions, round(eligible * abs_top_share))
                stat_rows.append((
                    customer_id, today - timedelta(days=d), ad_group_id, criterion_id,
                    impressions, eligible, abs_top,
                ))

    con.executemany(
        "INSERT INTO keyword_bids VALUES (?, ?, ?, ?, ?, ?, ?, ?, now())", bid_rows
    )
    con.executemany(
        "INSERT INTO keyword_stats_daily VALUES (?, ?, ?, ?, ?, ?, ?)", stat_rows
    )
    logger.info(f"Seeded {n} mock keywords ({len(stat_rows)} daily rows) for customer {customer_id}")
    return n


class DuckDBKeywordSource(KeywordSource):
    """KeywordSource over the mock account tables."""

    def __init__(self, con: duckdb.DuckDBPyConnection, customer_id: str, timezone: str = "UTC"):
        self.con = con
        self.customer_id = customer_id
        self.timezone = timezone
        ensure_schema(con)

    def query_keywords(self, selection: KeywordSelection, date_range: DateRange) -> List[KeywordRecord]:
        # metric column names come from the enum, never from user input
        metric_col = selection.metric.value
        sql = f"""
            WITH stats AS (
                SELECT
                    ad_group_id,
                    criterion_id,
                    SUM(impressions) AS impressions,
                    SUM(impressions)::DOUBLE / NULLIF(SUM(eligible_impressions), 0)
                        AS search_impression_share,
                    SUM(absolute_top_impressions)::DOUBLE / NULLIF(SUM(eligible_impressions), 0)
                        AS search_absolute_top_impression_share
                FROM keyword_stats_daily
                WHERE customer_id = ?
                  AND snapshot_date BETWEEN ? AND ?
                GROUP BY ad_group_id, criterion_id
            )
            SELECT
                b.ad_group_id,
                b.criterion_id,
                b.keyword_text,
                b.status,
                b.cpc_bid,
                b.first_page_cpc,
                b.top_of_page_cpc,
                s.impressions,
                s.{metric_col}
            FROM keyword_bids b
            JOIN stats s
              ON s.ad_group_id = b.ad_group_id AND s.criterion_id = b.criterion_id
            WHERE b.customer_id = ?
              AND b.status = ?
              AND s.{metric_col} {selection.comparison} ?
            ORDER BY s.{metric_col} {selection.order}, b.ad_group_id, b.criterion_id
        """
        params = [
            self.customer_id, date_range.start, date_range.finish,
            self.customer_id, selection.status, selection.threshold,
        ]

        try:
            rows = self.con.execute(sql, params).fetchall()
        except duckdb.Error as e:
            logger.error(f"Failed to query mock keywords: {e}")
            raise KeywordSourceError(f"Mock keyword query failed: {e}") from e

        keywords = [
            KeywordRecord(
                ad_group_id=r[0],
                criterion_id=r[1],
                keyword_text=r[2] or "",
                status=r[3],
                cpc=float(r[4]),
                first_page_cpc=float(r[5] or 0.0),
                top_of_page_cpc=float(r[6] or 0.0),
                impressions=int(r[7] or 0),
                impression_share=float(r[8]),
            )
            for r in rows
        ]
        logger.info(f"Fetched {len(keywords)} mock keywords: {selection.describe()}")
        return keywords

    def set_bid(self, keyword: KeywordRecord, new_cpc: float) -> None:
        try:
            updated = self.con.execute(
                """
                UPDATE keyword_bids
                SET cpc_bid = ?, updated_at = now()
                WHERE customer_id = ? AND ad_group_id = ? AND criterion_id = ?
                RETURNING criterion_id
                """,
                [new_cpc, self.customer_id, keyword.ad_group_id, keyword.criterion_id],
            ).fetchall()
        except duckdb.Error as e:
            logger.error(f"Failed to update mock keyword bid: {e}")
            raise KeywordSourceError(f"Mock bid update failed: {e}") from e

        if not updated:
            raise KeywordSourceError(f"Keyword not found: {keyword.label}")

    def account_timezone(self) -> str:
        return self.timezone

    def current_bid(self, ad_group_id: str, criterion_id: str) -> float:
        row = self.con.execute(
            """
            SELECT cpc_bid FROM keyword_bids
            WHERE customer_id = ? AND ad_group_id = ? AND criterion_id = ?
            """,
            [self.customer_id, ad_group_id, criterion_id],
        ).fetchone()
        if row is None:
            raise KeywordSourceError(f"Keyword not found: {ad_group_id}~{criterion_id}")
        return float(row[0])
