"""
Bid to Impression Share CLI – adjust keyword bids toward a target impression share.

Usage:
    python -m act_bidshare.cli run configs/client_bidshare.yaml
    python -m act_bidshare.cli run configs/client_bidshare.yaml --mode mock --today 2026-02-11
    python -m act_bidshare.cli run configs/client_bidshare.yaml --mode live --dry-run
"""
from __future__ import annotations

import argparse
import json
from datetime import date
from pathlib import Path

import duckdb

from .adjuster import BidAdjuster
from .config_loader import load_client_config
from .date_range import today_in
from .errors import ConfigError, KeywordSourceError
from .models import RunSummary
from .settings import get_settings


def _parse_date(s: str) -> date:
    parts = s.split("-")
    if len(parts) != 3:
        raise ValueError("today must be YYYY-MM-DD")
    return date(int(parts[0]), int(parts[1]), int(parts[2]))


def _print_summary(summary: RunSummary) -> None:
    print(f"[BidShare] window:  {summary.start.isoformat()} .. {summary.finish.isoformat()}")
    print(f"[BidShare] metric:  {summary.metric.value}")
    print(f"[BidShare]   raised:  {summary.raised}")
    print(f"[BidShare]   lowered: {summary.lowered}")
    print(f"[BidShare]   skipped: {summary.skipped}")

    if not summary.changes:
        return

    print(f"\n{'='*70}")
    print("BID CHANGES (execution order)" + (" - DRY RUN" if summary.dry_run else ""))
    print(f"{'='*70}")
    for c in summary.changes:
        kw = c.keyword
        share = f"{kw.impression_share:.2%}" if kw.impression_share is not None else "n/a"
        if c.applied:
            print(f"  {c.direction.value:<5} {kw.label:<40} share={share:>7}  {c.old_cpc:6.2f} -> {c.new_cpc:6.2f}")
        else:
            print(f"  skip  {kw.label:<40} share={share:>7}  {c.skip_reason}")


def cmd_run(args: argparse.Namespace) -> int:
    settings = get_settings()
    mode = args.mode or settings.mode
    if mode not in ("mock", "live"):
        print(f"[BidShare] ERROR: unknown mode '{mode}' (expected mock or live)")
        return 2

    try:
        today = _parse_date(args.today) if args.today else None
    except ValueError as e:
        print(f"[BidShare] ERROR: {e}")
        return 2

    try:
        cfg = load_client_config(args.client_config)
    except ConfigError as e:
        print(f"[BidShare] ERROR: {e}")
        return 1

    print(f"[BidShare] client={cfg.client_name} customer_id={cfg.customer_id} mode={mode} dry_run={args.dry_run}")

    con = None
    try:
        if mode == "mock":
            from .mock_source import DuckDBKeywordSource, has_keywords, seed_mock_keywords

            db_path = Path(args.mock_db or settings.mock_db_path)
            con = duckdb.connect(str(db_path))
            source = DuckDBKeywordSource(con, cfg.customer_id, timezone=cfg.timezone or "UTC")
            if not has_keywords(con, cfg.customer_id):
                seed_date = today or today_in(source.account_timezone())
                n = seed_mock_keywords(con, cfg.customer_id, seed_date, settings.mock_seed)
                print(f"[BidShare] Seeded {n} mock keywords into {db_path}")
        else:
            from .google_ads_api import GoogleAdsKeywordSource, load_google_ads_client

            client = load_google_ads_client(args.google_ads_config or settings.google_ads_config)
            source = GoogleAdsKeywordSource(client, cfg.customer_id)

        adjuster = BidAdjuster(
            source,
            cfg.bid_to_impression_share,
            dry_run=args.dry_run,
            timezone=cfg.timezone,
            today=today,
        )
        summary = adjuster.run()
    except ConfigError as e:
        print(f"[BidShare] ERROR: {e}")
        return 1
    except KeywordSourceError as e:
        print(f"[BidShare] ERROR: run aborted: {e}")
        return 1
    finally:
        if con is not None:
            con.close()

    _print_summary(summary)

    if args.output:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"\n[BidShare] Summary saved: {out_path}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="act_bidshare")
    sub = p.add_subparsers(dest="command", required=True)

    p_run = sub.add_parser("run", help="Adjust keyword bids toward the target impression share")
    p_run.add_argument("client_config", help="Path to client config YAML (e.g. configs/client_bidshare.yaml)")
    p_run.add_argument("--mode", choices=["mock", "live"], default=None,
                       help="Data source (default: $BIDSHARE_MODE or mock)")
    p_run.add_argument("--dry-run", action="store_true", help="Compute and log bid changes without writing them")
    p_run.add_argument("--today", default=None, help="Override end date of the statistics window (YYYY-MM-DD)")
    p_run.add_argument("--mock-db", default=None, help="DuckDB file for mock mode (default: $BIDSHARE_MOCK_DB)")
    p_run.add_argument("--google-ads-config", default=None,
                       help="Path to google-ads.yaml for live mode (default: $GOOGLE_ADS_CONFIG)")
    p_run.add_argument("--output", default=None, help="Write the run summary as JSON to this path")
    p_run.set_defaults(func=cmd_run)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
