"""
OrderedItem model for items kept in order by a fractional sort key.

Each row belongs to a list (list_key) and carries a sort_key string produced by
a SortKeyProvider. A NULL sort_key marks an item that still needs a key.
"""

from datetime import datetime
from typing import Optional, List, Dict, Any, Iterable, Tuple
from psycopg2.extras import execute_values
from database import get_db_connection, SORT_KEY_COLLATION


SELECT_COLUMNS = """
    SELECT ordered_item_id, list_key, label, sort_key,
           created_date, last_modified_date
    FROM ordered_item
"""


class OrderedItem:
    """
    Model representing one item of an ordered list.
    """

    MAX_LIST_KEY_LENGTH = 255

    def __init__(
        self,
        ordered_item_id: Optional[int] = None,
        list_key: Optional[str] = None,
        label: Optional[str] = None,
        sort_key: Optional[str] = None,
        created_date: Optional[datetime] = None,
        last_modified_date: Optional[datetime] = None
    ):
        self.ordered_item_id = ordered_item_id
        self.list_key = list_key
        self.label = label
        # '' and None both mean "no key yet"
        self.sort_key = sort_key or None
        self.created_date = created_date
        self.last_modified_date = last_modified_date

        self._validate()

    @property
    def id(self) -> Optional[int]:
        return self.ordered_item_id

    def _validate(self) -> None:
        """
        Validate the OrderedItem instance data.

        Raises:
            ValueError: If validation fails
        """
        if self.ordered_item_id is not None and self.ordered_item_id <= 0:
            raise ValueError(f"ordered_item_id must be positive, got {self.ordered_item_id}")

        if self.list_key is not None:
            if not isinstance(self.list_key, str) or not self.list_key.strip():
                raise ValueError("list_key must be a non-empty string")
            if len(self.list_key) > self.MAX_LIST_KEY_LENGTH:
                raise ValueError(
                    f"list_key must be at most {self.MAX_LIST_KEY_LENGTH} characters, "
                    f"got {len(self.list_key)}"
                )

        if self.sort_key is not None and not isinstance(self.sort_key, str):
            raise ValueError(f"sort_key must be a string, got {type(self.sort_key).__name__}")

    def validate_for_save(self) -> None:
        """
        Validate that the instance has all required fields for database save.

        Raises:
            ValueError: If required fields are missing
        """
        self._validate()

        if self.list_key is None:
            raise ValueError("list_key is required for save")

    @classmethod
    def from_row(cls, row) -> 'OrderedItem':
        return cls(
            ordered_item_id=row[0],
            list_key=row[1],
            label=row[2],
            sort_key=row[3],
            created_date=row[4],
            last_modified_date=row[5]
        )

    def save(self) -> 'OrderedItem':
        """
        Insert the OrderedItem, or update it if it already has an ID.

        Returns:
            OrderedItem: The saved instance with updated fields

        Raises:
            ValueError: If validation fails or required fields are missing
        """
        self.validate_for_save()

        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")

            if self.ordered_item_id is None:
                cur.execute("""
                    INSERT INTO ordered_item (
                        list_key, label, sort_key, created_date, last_modified_date
                    ) VALUES (%s, %s, %s,
                             (NOW() AT TIME ZONE 'UTC'), (NOW() AT TIME ZONE 'UTC'))
                    RETURNING ordered_item_id, created_date, last_modified_date
                """, (self.list_key, self.label, self.sort_key))

                result = cur.fetchone()
                self.ordered_item_id = result[0]
                self.created_date = result[1]
                self.last_modified_date = result[2]
            else:
                cur.execute("""
                    UPDATE ordered_item
                    SET label = %s,
                        sort_key = %s,
                        last_modified_date = (NOW() AT TIME ZONE 'UTC')
                    WHERE ordered_item_id = %s
                    RETURNING last_modified_date
                """, (self.label, self.sort_key, self.ordered_item_id))

                result = cur.fetchone()
                if result:
                    self.last_modified_date = result[0]

            cur.execute("COMMIT")
            return self

        except Exception as e:
            cur.execute("ROLLBACK")
            raise e
        finally:
            conn.close()

    def update_sort_key(self, sort_key: str) -> bool:
        """
        Move the item by giving it a new sort key.

        Returns:
            bool: True if the row was updated, False if the key was unchanged
        """
        if self.ordered_item_id is None:
            raise ValueError("Cannot update sort_key without ordered_item_id")
        if not sort_key:
            raise ValueError("sort_key is required")

        if sort_key == self.sort_key:
            return False

        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            cur.execute("""
                UPDATE ordered_item
                SET sort_key = %s,
                    last_modified_date = (NOW() AT TIME ZONE 'UTC')
                WHERE ordered_item_id = %s
            """, (sort_key, self.ordered_item_id))

            updated = cur.rowcount > 0
            cur.execute("COMMIT")

            if updated:
                self.sort_key = sort_key
            return updated

        except Exception as e:
            cur.execute("ROLLBACK")
            raise e
        finally:
            conn.close()

    def delete(self) -> bool:
        """
        Delete the OrderedItem from the database.

        Returns:
            bool: True if deleted, False if record didn't exist
        """
        if self.ordered_item_id is None:
            return False

        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            cur.execute("""
                DELETE FROM ordered_item WHERE ordered_item_id = %s
            """, (self.ordered_item_id,))

            deleted = cur.rowcount > 0
            cur.execute("COMMIT")

            if deleted:
                self.ordered_item_id = None
            return deleted

        except Exception as e:
            cur.execute("ROLLBACK")
            raise e
        finally:
            conn.close()

    @classmethod
    def get_by_id(cls, ordered_item_id: int) -> Optional['OrderedItem']:
        """
        Retrieve an OrderedItem by its ID.

        Returns:
            OrderedItem instance or None if not found
        """
        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute(SELECT_COLUMNS + """
                WHERE ordered_item_id = %s
            """, (ordered_item_id,))

            row = cur.fetchone()
            if row:
                return cls.from_row(row)
            return None

        finally:
            conn.close()

    @classmethod
    def get_for_list(cls, list_key: str) -> List['OrderedItem']:
        """
        Retrieve every item of a list in sort key order.

        Items without a sort key come last, oldest first, so that filling them in
        appends them after the keyed items.

        Returns:
            List of OrderedItem instances
        """
        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute(SELECT_COLUMNS + f"""
                WHERE list_key = %s
                ORDER BY sort_key {SORT_KEY_COLLATION} NULLS LAST, ordered_item_id
            """, (list_key,))

            return [cls.from_row(row) for row in cur.fetchall()]

        finally:
            conn.close()

    @staticmethod
    def bulk_update_sort_keys(updates: Iterable[Tuple[int, str]]) -> int:
        """
        Write many (ordered_item_id, sort_key) pairs in one transaction.

        Returns:
            int: Number of rows updated
        """
        updates = list(updates)
        if not updates:
            return 0

        conn = get_db_connection()
        try:
            cur = conn.cursor()
            cur.execute("BEGIN")
            rows = execute_values(cur, """
                UPDATE ordered_item AS oi
                SET sort_key = v.sort_key,
                    last_modified_date = (NOW() AT TIME ZONE 'UTC')
                FROM (VALUES %s) AS v (ordered_item_id, sort_key)
                WHERE oi.ordered_item_id = v.ordered_item_id
                RETURNING oi.ordered_item_id
            """, updates, fetch=True)

            # rowcount only reflects the last page of execute_values
            updated = len(rows)
            cur.execute("COMMIT")
            return updated

        except Exception as e:
            cur.execute("ROLLBACK")
            raise e
        finally:
            conn.close()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the OrderedItem to a dictionary representation.
        """
        return {
            'ordered_item_id': self.ordered_item_id,
            'list_key': self.list_key,
            'label': self.label,
            'sort_key': self.sort_key,
            'created_date': self.created_date.isoformat() if self.created_date else None,
            'last_modified_date': self.last_modified_date.isoformat() if self.last_modified_date else None
        }

    def __repr__(self) -> str:
        return (
            f"OrderedItem(ordered_item_id={self.ordered_item_id}, "
            f"list_key='{self.list_key}', label='{self.label}', "
            f"sort_key='{self.sort_key}')"
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, OrderedItem):
            return False
        return (
            self.ordered_item_id == other.ordered_item_id and
            self.list_key == other.list_key and
            self.label == other.label and
            self.sort_key == other.sort_key
        )
