#!/usr/bin/env python3
"""Sample scan harness for end-to-end validation.

This script provides a manual way to validate the DMP Award Scanner
pipeline without running pytest. It can operate in two modes:

1. Fixture mode (default): Plans and awards come from a YAML fixture file
2. Real endpoint mode: Connects to the configured DMPHub and the NSF API

Usage:
    # Run with fixtures (no network required)
    python scripts/run_sample_scan.py

    # Run with real endpoints (requires network and valid config)
    END_VALIDATION_REAL_RUN=1 python scripts/run_sample_scan.py --config config.yaml

    # Custom database path
    python scripts/run_sample_scan.py --database /tmp/test.db
"""

import argparse
import os
import sys
from datetime import datetime
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from award_scanner.config.loader import load_config
from award_scanner.logging.config import configure_logging
from award_scanner.main import build_pipeline
from award_scanner.persistence.database import close_database, init_database
from award_scanner.pipeline import ScanPipeline
from tests.helpers.fixture_adapter import FixtureAwardsAdapter, FixtureDMPHubAdapter


def print_header(title: str):
    """Print a formatted section header."""
    width = 80
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width + "\n")


def print_summary_table(result):
    """Print a formatted summary table of pipeline results."""
    print_header("Pipeline Execution Summary")

    metrics = [
        ("Plans Fetched", result.total_plans),
        ("Plans Scanned", result.total_scanned),
        ("Plans Skipped", result.total_skipped),
        ("Plans Matched", result.total_matched),
        ("Awards Registered", result.total_registered),
        ("Total Errors", result.total_errors),
        ("Had Errors", "Yes" if result.had_errors else "No"),
        ("Duration (seconds)", f"{result.total_duration_seconds:.2f}"),
    ]

    max_label_width = max(len(label) for label, _ in metrics)

    print("┌" + "─" * (max_label_width + 2) + "┬" + "─" * 22 + "┐")
    print(f"│ {'Metric':<{max_label_width}} │ {'Value':<20} │")
    print("├" + "─" * (max_label_width + 2) + "┼" + "─" * 22 + "┤")

    for label, value in metrics:
        print(f"│ {label:<{max_label_width}} │ {str(value):<20} │")

    print("└" + "─" * (max_label_width + 2) + "┴" + "─" * 22 + "┘")

    if result.plan_outcomes:
        print("\n" + "-" * 80)
        print(" Per-Plan Breakdown")
        print("-" * 80 + "\n")

        for outcome in result.plan_outcomes:
            print(f"Plan: {outcome.doi}")
            print(f"  Outcome: {outcome.outcome}")
            print(f"  Candidates: {outcome.candidate_count}")
            if outcome.award_id:
                print(f"  Award: {outcome.award_id}")
            if outcome.error_message:
                print(f"  Error Message: {outcome.error_message}")
            print()


def main():
    """Main entry point for sample scan harness."""
    parser = argparse.ArgumentParser(
        description="Run a sample scan for end-to-end validation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("tests/fixtures/end_validation/config.yaml"),
        help="Path to configuration file (default: tests/fixtures/end_validation/config.yaml)",
    )
    parser.add_argument(
        "--fixtures",
        type=Path,
        default=Path("tests/fixtures/end_validation/sample_scan.yaml"),
        help="Path to fixtures YAML file (default: tests/fixtures/end_validation/sample_scan.yaml)",
    )
    parser.add_argument(
        "--database",
        type=Path,
        default=Path("data/sample_end_validation.db"),
        help="Path to SQLite database (default: data/sample_end_validation.db)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: INFO)",
    )

    args = parser.parse_args()

    load_dotenv()

    use_real_endpoints = os.environ.get("END_VALIDATION_REAL_RUN", "0") == "1"

    print_header("DMP Award Scanner - Sample Scan Harness")

    print(f"Configuration file: {args.config}")
    print(f"Database: {args.database}")
    print(f"Log level: {args.log_level}")

    if use_real_endpoints:
        print("\n⚠️  REAL ENDPOINT MODE ENABLED")
        print("   The scanner will query the NSF API and register awards with the DMPHub.")
        response = input("\nContinue? [y/N]: ")
        if response.lower() != "y":
            print("Aborted.")
            return 1
    else:
        print(f"Fixture mode: {args.fixtures}")
        print("\nUsing fixture data (no network requests will be made)")

    if not args.config.exists():
        print(f"\n❌ Error: Configuration file not found: {args.config}")
        return 1

    if not use_real_endpoints and not args.fixtures.exists():
        print(f"\n❌ Error: Fixture file not found: {args.fixtures}")
        print("   Run with END_VALIDATION_REAL_RUN=1 to use real endpoints instead.")
        return 1

    try:
        print("\n📋 Loading configuration...")
        app_config, env_config = load_config(args.config)

        database_url = f"sqlite:///{args.database.absolute()}"

        configure_logging(
            level=args.log_level,
            format_type=app_config.logging.format if app_config.logging else "key-value",
            environment="validation",
        )

        print(f"✓ DMPHub plans endpoint: {app_config.dmphub.plans_url}")
        print(f"✓ NSF awards endpoint: {app_config.nsf.awards_url}")

        print(f"\n💾 Initializing database: {args.database}")
        init_database(database_url)
        print("✓ Database initialized")

        if use_real_endpoints:
            pipeline = build_pipeline(app_config, env_config)
        else:
            pipeline = ScanPipeline(
                app_config=app_config,
                dmphub_adapter=FixtureDMPHubAdapter(args.fixtures),
                awards_adapter=FixtureAwardsAdapter(args.fixtures),
            )

        print("\n🚀 Executing pipeline scan...")
        print(f"   Started at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        result = pipeline.run_once()
        print(f"   Completed at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

        print_summary_table(result)

        print_header("Output Locations")
        print(f"Database: {args.database.absolute()}")
        print("\nTo inspect the processed plans:")
        print(f"  sqlite3 {args.database.absolute()} 'SELECT * FROM processed_plans;'")

        print("\n" + "-" * 80)
        print(f"To clean up (plans are skipped on re-runs): rm {args.database.absolute()}")
        print("-" * 80 + "\n")

        close_database()

        return 1 if result.had_errors else 0

    except Exception as e:
        print(f"\n❌ Fatal error: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
