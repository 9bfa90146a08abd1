"""
Test configuration and fixtures for the sort key test suite.

This file contains shared fixtures and configuration for all tests.
"""

import os
import sys
import pytest
from datetime import datetime, timezone
from unittest.mock import patch, MagicMock

# Add project root to Python path so we can import app modules
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Set test environment before importing app
os.environ["FLASK_ENV"] = "testing"
os.environ["PGHOST"] = "localhost"
os.environ["PGDATABASE"] = "sortkeys_test"
os.environ["PGUSER"] = "test_user"
os.environ["PGPASSWORD"] = "test_password"
os.environ["PGPORT"] = "5432"
os.environ["SORT_KEY_ALPHABET"] = "base64"

from app import app
from fractional_indexing import SortKeyProvider
from models.ordered_item import OrderedItem


# A small alphabet that straddles the upper/lower case boundary, so that
# code-point order and case-insensitive order disagree
SMALL_CHARS = "DEFabc"


@pytest.fixture
def client():
    """Create a test client for the Flask application."""
    app.config["TESTING"] = True

    with app.test_client() as client:
        with app.app_context():
            yield client


@pytest.fixture
def provider():
    """SortKeyProvider over the small 'DEFabc' alphabet."""
    return SortKeyProvider(SMALL_CHARS)


@pytest.fixture
def mock_db_connection():
    """Mock the psycopg2 connection used by the OrderedItem model."""
    with patch("models.ordered_item.get_db_connection") as mock_get_conn:
        mock_connection = MagicMock()
        mock_cursor = MagicMock()
        mock_connection.cursor.return_value = mock_cursor
        mock_get_conn.return_value = mock_connection

        yield {
            "connection": mock_connection,
            "cursor": mock_cursor,
            "get_connection": mock_get_conn,
        }


@pytest.fixture
def sample_timestamp():
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_items():
    """Three keyed items of the 'groceries' list, in sort key order."""
    return [
        OrderedItem(ordered_item_id=1, list_key="groceries", label="apples", sort_key="Ek"),
        OrderedItem(ordered_item_id=2, list_key="groceries", label="bread", sort_key="UV"),
        OrderedItem(ordered_item_id=3, list_key="groceries", label="cheese", sort_key="jF"),
    ]
