#!/usr/bin/env python3
"""
Back-fill missing sort keys for one ordered list.

Items without a sort_key are given keys after the last keyed item (see
OrderedItem.get_for_list for the ordering), leaving every existing key alone.

Usage:
    python scripts/backfill_sort_keys.py --list-key KEY [--alphabet NAME] [--dry-run]
"""

import sys
import os
import argparse
import logging
from dotenv import load_dotenv

# Add parent directory to path so we can import app modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.sort_key_service import SortKeyService
from sort_key_alphabets import PROVIDERS, get_provider

# Load environment variables from .env file
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Back-fill missing sort keys for an ordered list")
    parser.add_argument("--list-key", required=True, help="list_key of the list to fill in")
    parser.add_argument(
        "--alphabet",
        choices=sorted(PROVIDERS),
        default=os.environ.get("SORT_KEY_ALPHABET") or None,
        help="sort key alphabet (default: SORT_KEY_ALPHABET or base64)",
    )
    parser.add_argument("--dry-run", action="store_true", help="show the keys without writing them")
    return parser.parse_args(argv)


def main(argv=None):
    """Run the back-fill and return a process exit code."""
    args = parse_args(argv)
    service = SortKeyService(provider=get_provider(args.alphabet))

    logger.info(f"Back-filling sort keys for list '{args.list_key}'" + (" (dry run)" if args.dry_run else ""))
    success, message, items = service.populate_missing_sort_keys(args.list_key, dry_run=args.dry_run)

    if not success:
        logger.error(message)
        return 1

    for item in items:
        logger.info(f"  - item {item.ordered_item_id} ({item.label}): {item.sort_key}")
    logger.info(message)
    return 0


if __name__ == '__main__':
    sys.exit(main())
