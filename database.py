import os
import psycopg2


# sort_key must be compared byte-by-byte; any other collation can disagree
# with the alphabet's digit order
SORT_KEY_COLLATION = 'COLLATE "C"'

ORDERED_ITEM_DDL = f"""
    CREATE TABLE IF NOT EXISTS ordered_item (
        ordered_item_id SERIAL PRIMARY KEY,
        list_key TEXT NOT NULL,
        label TEXT,
        sort_key TEXT {SORT_KEY_COLLATION},
        created_date TIMESTAMP NOT NULL DEFAULT (NOW() AT TIME ZONE 'UTC'),
        last_modified_date TIMESTAMP NOT NULL DEFAULT (NOW() AT TIME ZONE 'UTC')
    )
"""

ORDERED_ITEM_INDEX_DDL = """
    CREATE INDEX IF NOT EXISTS ordered_item_list_key_sort_key_idx
    ON ordered_item (list_key, sort_key)
"""


def get_db_connection():
    conn = psycopg2.connect(
        host=os.environ.get("PGHOST"),
        database=os.environ.get("PGDATABASE"),
        user=os.environ.get("PGUSER"),
        password=os.environ.get("PGPASSWORD"),
        port=int(os.environ.get("PGPORT", 5432)),
    )
    return conn


def create_ordered_item_schema(cur):
    """Create the ordered_item table and its (list_key, sort_key) index.

    Args:
        cur: Database cursor
    """
    cur.execute(ORDERED_ITEM_DDL)
    cur.execute(ORDERED_ITEM_INDEX_DDL)
