"""
Sort key service layer for ordered lists.

This service ties the fractional indexing engine to OrderedItem storage: adding
items at either end of a list, moving an item between two neighbours, and
filling in sort keys that are missing. The engine only computes keys; every
decision about what to write happens here.
"""

import logging
import os
from typing import Optional, List, Tuple

from fractional_indexing import SortKeyError, SortKeyProvider
from models.ordered_item import OrderedItem
from reorder import ReorderError, derive_reorder_neighbors, sort_key_for_reorder
from sort_key_alphabets import get_provider

logger = logging.getLogger(__name__)

VALID_POSITIONS = {'first', 'last'}


class SortKeyService:
    """
    Service class for keeping OrderedItem lists in order.

    Args:
        provider: SortKeyProvider to generate keys with; defaults to the
            alphabet named by the SORT_KEY_ALPHABET environment variable
    """

    def __init__(self, provider: Optional[SortKeyProvider] = None):
        if provider is None:
            provider = get_provider(os.environ.get('SORT_KEY_ALPHABET'))
        self.provider = provider

    def get_list_items(self, list_key: str) -> List[OrderedItem]:
        """
        Retrieve the items of a list in sort key order.

        Returns:
            List of OrderedItem instances, or an empty list on error
        """
        try:
            return OrderedItem.get_for_list(list_key)
        except Exception as e:
            logger.error(f"Error loading list '{list_key}': {e}")
            return []

    def add_item(
        self,
        list_key: str,
        label: Optional[str] = None,
        position: str = 'last'
    ) -> Tuple[bool, str, Optional[OrderedItem]]:
        """
        Add a new item at the start or the end of a list.

        Args:
            list_key: The list to add to
            label: Optional label for the item
            position: 'first' or 'last'

        Returns:
            Tuple of (success, message, ordered_item)
        """
        if position not in VALID_POSITIONS:
            return False, f"position must be one of {sorted(VALID_POSITIONS)}, got '{position}'", None

        try:
            items = OrderedItem.get_for_list(list_key)
            keys = [item.sort_key for item in items if item.sort_key]

            if not keys:
                sort_key = self.provider.sort_key_initial_item()
            elif position == 'first':
                sort_key = self.provider.sort_key_at_first_before(keys[0])
            else:
                sort_key = self.provider.sort_key_at_last_after(keys[-1])

            item = OrderedItem(list_key=list_key, label=label, sort_key=sort_key)
            saved = item.save()

            logger.info(
                f"Added item {saved.ordered_item_id} to list '{list_key}' "
                f"at {position} with sort_key '{sort_key}'"
            )
            return True, "Item added successfully", saved

        except SortKeyError as e:
            logger.error(f"Sort key error adding to list '{list_key}': {e}")
            return False, f"Sort key error: {str(e)}", None
        except ValueError as e:
            return False, f"Validation error: {str(e)}", None
        except Exception as e:
            logger.error(f"Error adding item to list '{list_key}': {e}")
            return False, f"Error adding item: {str(e)}", None

    def reorder_item(
        self,
        list_key: str,
        target_id: int,
        before_id: Optional[int] = None,
        to_last: bool = False,
        after_id: Optional[int] = None,
        to_first: bool = False
    ) -> Tuple[bool, str, Optional[OrderedItem]]:
        """
        Move an item so it sits between two neighbours.

        Args:
            list_key: The list holding the item
            target_id: ordered_item_id of the item being moved
            before_id: Item that will follow the target (or pass to_last)
            after_id: Item that will precede the target (or pass to_first)

        Returns:
            Tuple of (success, message, ordered_item)
        """
        try:
            items = OrderedItem.get_for_list(list_key)
            if any(not item.sort_key for item in items):
                # neighbours without keys give nothing to bisect
                return False, f"List '{list_key}' has items without sort keys; populate them first", None

            neighbors = derive_reorder_neighbors(
                items,
                target_id,
                before_id=before_id,
                to_last=to_last,
                after_id=after_id,
                to_first=to_first
            )
            target = neighbors.target
            old_key = target.sort_key
            new_key = sort_key_for_reorder(self.provider, neighbors)

            target.update_sort_key(new_key)

            logger.info(
                f"Reordered item {target.ordered_item_id} in list '{list_key}': "
                f"'{old_key}' -> '{new_key}'"
            )
            return True, "Item reordered successfully", target

        except ReorderError as e:
            return False, f"Invalid reorder: {str(e)}", None
        except SortKeyError as e:
            logger.error(f"Sort key error reordering list '{list_key}': {e}")
            return False, f"Sort key error: {str(e)}", None
        except Exception as e:
            logger.error(f"Error reordering item {target_id} in list '{list_key}': {e}")
            return False, f"Error reordering item: {str(e)}", None

    def populate_missing_sort_keys(
        self,
        list_key: str,
        dry_run: bool = False
    ) -> Tuple[bool, str, List[OrderedItem]]:
        """
        Give every item of a list that has no sort key a key of its own.

        Args:
            list_key: The list to fill in
            dry_run: Compute the keys but do not write them

        Returns:
            Tuple of (success, message, items_that_received_a_key)
        """
        try:
            items = OrderedItem.get_for_list(list_key)
            populated = self.provider.sort_key_populate_missing([item.sort_key for item in items])

            changed = []
            for item, sort_key in zip(items, populated):
                if item.sort_key != sort_key:
                    item.sort_key = sort_key
                    changed.append(item)

            if not changed:
                return True, "No missing sort keys", []

            if dry_run:
                return True, f"Would populate {len(changed)} sort keys", changed

            updated = OrderedItem.bulk_update_sort_keys(
                (item.ordered_item_id, item.sort_key) for item in changed
            )
            logger.info(f"Populated {updated} missing sort keys in list '{list_key}'")
            return True, f"Populated {updated} sort keys", changed

        except SortKeyError as e:
            logger.error(f"Sort key error populating list '{list_key}': {e}")
            return False, f"Sort key error: {str(e)}", []
        except Exception as e:
            logger.error(f"Error populating sort keys for list '{list_key}': {e}")
            return False, f"Error populating sort keys: {str(e)}", []
