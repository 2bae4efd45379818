#!/usr/bin/env python3
"""
Initialize the JSON documents under DATA_DIR and report their record counts.

Missing or malformed documents are recreated empty; healthy ones are left
byte-for-byte untouched.
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add the project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from shopstore.core.config import ensure_data_directory, get_data_dir, validate_config
from shopstore.core.errors import StoreFault
from shopstore.core.registry import initialize_all, reset_stores


async def _initialize_and_count():
    stores = await initialize_all()
    return {name: await store.count() for name, store in stores.items()}


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Initialize shop store documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                      # Initialize documents under DATA_DIR
  %(prog)s --data-dir ./tmp     # Use another data directory
  %(prog)s --check              # Only validate configuration

Environment variables:
- DATA_DIR=./data (default)
- SCHEMA_VERSION=1.0 (default)
        """
    )

    parser.add_argument(
        "--data-dir", "-d",
        help="Data directory (overrides DATA_DIR)"
    )

    parser.add_argument(
        "--check", "-c",
        action="store_true",
        help="Validate configuration without touching any document"
    )

    args = parser.parse_args(argv)

    if args.data_dir:
        os.environ["DATA_DIR"] = args.data_dir
        reset_stores()

    issues = validate_config()
    if issues:
        for issue in issues:
            print(f"ERROR: {issue}")
        return 1

    if args.check:
        print(f"Configuration OK (data directory: {get_data_dir()})")
        return 0

    try:
        ensure_data_directory()
        counts = asyncio.run(_initialize_and_count())
    except StoreFault as e:
        print(f"ERROR: Initialization failed: {e}")
        return 1

    print(f"Documents initialized in {get_data_dir()}")
    for name, count in counts.items():
        print(f"  {name}: {count} records")
    return 0


if __name__ == "__main__":
    sys.exit(main())
