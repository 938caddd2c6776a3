#!/usr/bin/env python
"""
Compute the analytics payload for one pipeline and write it as JSON.

Usage:
    python scripts/build_analytics.py --pipeline-id <id>
    python scripts/build_analytics.py --pipeline-id <id> --as-of 2025-10-15 --output out.json
"""
import argparse
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_analytics.config import config, configure_logging
from crm_analytics.data.loader import load_snapshot
from crm_analytics.data.periods import resolve_reference_date
from crm_analytics.metrics.dashboard import compute_analytics_payload
from crm_analytics.metrics.kpis import compute_pipeline_kpis


def main():
    parser = argparse.ArgumentParser(description="Build analytics payload")
    parser.add_argument("--pipeline-id", type=str, default=None, help="Pipeline to report on (all when omitted)")
    parser.add_argument("--data-dir", type=str, default=None, help="Override data directory")
    parser.add_argument("--as-of", type=str, default=None, help="Reference date (defaults to now)")
    parser.add_argument("--output", type=str, default=None, help="Output JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else None)

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir
    snapshot_dir = data_dir / "snapshots"
    now = resolve_reference_date(args.as_of)

    print("Building analytics...")
    print(f"  Source: {snapshot_dir}")
    print(f"  Pipeline: {args.pipeline_id or 'all'}")
    print(f"  As of: {now.isoformat()}")
    print()

    tables = load_snapshot(args.pipeline_id, snapshot_dir=snapshot_dir)
    if len(tables["stages"]) == 0:
        print(f"ERROR: No stages found for pipeline {args.pipeline_id!r} in {snapshot_dir}")
        sys.exit(1)

    payload = compute_analytics_payload(
        tables["deals"],
        tables["stages"],
        tables["users"],
        tables["accounts"],
        tables["goals"],
        reference_date=now,
    )
    payload["kpis"] = compute_pipeline_kpis(tables["deals"], tables["stages"], reference_date=now)
    payload["pipeline_id"] = args.pipeline_id
    payload["as_of"] = now.isoformat()

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = data_dir / "analytics" / f"analytics_{args.pipeline_id or 'all'}.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    print(f"✓ Wrote {output_path}")
    print(f"  Deals: {len(tables['deals']):,}")
    print(f"  Goal attainment: {payload['goal_vs_actual']['percentage']:.1f}%")


if __name__ == "__main__":
    main()
