#!/usr/bin/env python3
"""
Create the ordered_item table used by the ordered list API.

sort_key is declared COLLATE "C" so that ORDER BY sort_key compares bytes,
which is the order the fractional sort keys are generated in.

Usage:
    python schema/create_ordered_item_table.py [--dry-run]

Options:
    --dry-run    Print the SQL without running it
"""

import sys
import os
import argparse
import logging
from dotenv import load_dotenv

# Add parent directory to path to import modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import get_db_connection, create_ordered_item_schema, ORDERED_ITEM_DDL, ORDERED_ITEM_INDEX_DDL

load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create the ordered_item table")
    parser.add_argument("--dry-run", action="store_true", help="print the SQL without running it")
    args = parser.parse_args(argv)

    if args.dry_run:
        print(ORDERED_ITEM_DDL)
        print(ORDERED_ITEM_INDEX_DDL)
        return 0

    conn = get_db_connection()
    try:
        cur = conn.cursor()
        create_ordered_item_schema(cur)
        conn.commit()
        logger.info("ordered_item table is ready")
        return 0
    except Exception as e:
        conn.rollback()
        logger.error(f"Failed to create ordered_item table: {e}", exc_info=True)
        return 1
    finally:
        conn.close()


if __name__ == '__main__':
    sys.exit(main())
