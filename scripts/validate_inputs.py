#!/usr/bin/env python
"""
Validate CRM snapshot exports before they reach the dashboard.

Checks every table file against its column contract, then checks that deals
reference known stages and that stage orders are unique per pipeline.

Usage:
    python scripts/validate_inputs.py
    python scripts/validate_inputs.py --data-dir /path/to/data --strict
"""
import argparse
import sys
from pathlib import Path
from typing import Dict, List

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from crm_analytics.config import config, configure_logging, TABLE_FILES, CORE_TABLES
from crm_analytics.data.loader import find_snapshot, load_raw_table, load_table_from_dir
from crm_analytics.data.schema import validate_schema


def check_table(table_name: str, snapshot_dir: Path) -> Dict:
    """Column contract check for one snapshot file."""
    path = find_snapshot(snapshot_dir / TABLE_FILES[table_name])
    report = {"path": path, "rows": 0, "problems": [], "notes": []}

    if path is None:
        if table_name in CORE_TABLES:
            report["problems"].append("snapshot missing (required)")
        else:
            report["notes"].append("snapshot missing (optional)")
        return report

    try:
        df = load_raw_table(table_name, snapshot_dir)
    except (OSError, ValueError) as e:
        report["problems"].append(f"unreadable: {e}")
        return report

    report["rows"] = len(df)
    schema = validate_schema(df, table_name, strict=False)
    if schema["missing_required"]:
        report["problems"].append(f"missing required columns {schema['missing_required']}")
    if schema["missing_optional"]:
        report["notes"].append(f"missing optional columns {schema['missing_optional']}")
    report["notes"].extend(schema["value_issues"])

    return report


def check_references(snapshot_dir: Path) -> List[str]:
    """Cross-table checks on deals and stages."""
    deals = load_table_from_dir("deals", snapshot_dir)
    stages = load_table_from_dir("stages", snapshot_dir)
    problems = []

    orphans = deals[~deals["stage_id"].isin(stages["id"])]
    if len(orphans) > 0:
        problems.append(f"{len(orphans):,} deals reference unknown stages (they count as open)")

    duplicated_ids = stages["id"][stages["id"].duplicated()].unique().tolist()
    if duplicated_ids:
        problems.append(f"duplicated stage ids {duplicated_ids} (first one wins)")

    clashes = stages[stages.duplicated(subset=["pipeline_id", "order"], keep=False)]
    if len(clashes) > 0:
        problems.append(f"stage order repeated within a pipeline: {sorted(clashes['id'].astype(str))}")

    return problems


def main():
    parser = argparse.ArgumentParser(description="Validate CRM snapshot files")
    parser.add_argument("--data-dir", type=str, default=None, help="Override data directory")
    parser.add_argument("--strict", action="store_true", help="Treat reference warnings as failures")

    args = parser.parse_args()
    configure_logging("ERROR")

    data_dir = Path(args.data_dir) if args.data_dir else config.data_dir
    snapshot_dir = data_dir / "snapshots"

    print(f"Snapshots: {snapshot_dir}")
    print()

    failed = False
    for table_name in TABLE_FILES:
        report = check_table(table_name, snapshot_dir)
        mark = "✗" if report["problems"] else "✓"
        source = report["path"].name if report["path"] is not None else "-"
        print(f"{mark} {table_name:<10} {source:<20} {report['rows']:>8,} rows")
        for problem in report["problems"]:
            print(f"    ✗ {problem}")
        for note in report["notes"]:
            print(f"    ⚠ {note}")
        failed = failed or bool(report["problems"])

    if not failed:
        print()
        reference_problems = check_references(snapshot_dir)
        for problem in reference_problems:
            print(f"⚠ {problem}")
        if args.strict and reference_problems:
            failed = True

    print()
    if failed:
        print("✗ Validation failed")
        sys.exit(1)
    print("✓ Snapshots look usable")
    sys.exit(0)


if __name__ == "__main__":
    main()
