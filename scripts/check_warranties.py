#!/usr/bin/env python3
"""
Warranty Status Check
=====================

Check warranty coverage of assets against the configured warranty service.

Usage:
    python scripts/check_warranties.py 12 13 14
    python scripts/check_warranties.py 12 13 --json
    python scripts/check_warranties.py 12 --api-url https://warranty.example.com

Version: 0.1.0
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shared.logging import get_logger, setup_logging
from services.asset_tracker.warranty import WarrantyServiceClient, classify_warranty_status

setup_logging(log_level="WARNING", json_logs=False, service_name="check-warranties")
logger = get_logger(__name__)


async def check(asset_ids: list[str], api_url: str | None, as_json: bool) -> int:
    """Check every asset and print the outcome; returns the exit code."""
    async with WarrantyServiceClient(base_url=api_url) as client:
        statuses = await client.batch_check_warranty_status(asset_ids)

    if as_json:
        print(json.dumps(
            {key: status.model_dump(mode="json") for key, status in statuses.items()},
            indent=2,
        ))
    else:
        for key, status in statuses.items():
            view = classify_warranty_status(status)
            print(f"{key}\t{view.label}")

    failed = [key for key, status in statuses.items() if status.error]
    if failed:
        logger.warning("warranty_checks_failed", asset_ids=failed)
        return 1
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Check asset warranty coverage")
    parser.add_argument("asset_ids", nargs="+", help="Asset identifiers")
    parser.add_argument("--api-url", default=None, help="Warranty service base URL")
    parser.add_argument("--json", action="store_true", help="Print raw statuses as JSON")
    args = parser.parse_args()

    sys.exit(asyncio.run(check(args.asset_ids, args.api_url, args.json)))


if __name__ == "__main__":
    main()
