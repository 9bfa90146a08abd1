from flask import Flask, jsonify
import os
import logging
from dotenv import load_dotenv

load_dotenv()

# Import our custom modules
from api_routes import (
    sort_key_initial,
    sort_key_between,
    sort_key_first_before,
    sort_key_last_after,
    sort_key_compare,
    sort_key_populate_missing,
    get_list_items,
    add_list_item,
    reorder_list_item,
    populate_list_sort_keys,
    health_check,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()  # Log to stdout (captured by Gunicorn)
    ]
)

app = Flask(__name__)

# Configure Flask to handle trailing slashes consistently
app.url_map.strict_slashes = False

# Stateless sort key endpoints
app.add_url_rule("/api/sort-keys/initial", "sort_key_initial", sort_key_initial, methods=["GET"])
app.add_url_rule("/api/sort-keys/between", "sort_key_between", sort_key_between, methods=["POST"])
app.add_url_rule("/api/sort-keys/first-before", "sort_key_first_before", sort_key_first_before, methods=["POST"])
app.add_url_rule("/api/sort-keys/last-after", "sort_key_last_after", sort_key_last_after, methods=["POST"])
app.add_url_rule("/api/sort-keys/compare", "sort_key_compare", sort_key_compare, methods=["POST"])
app.add_url_rule(
    "/api/sort-keys/populate-missing",
    "sort_key_populate_missing",
    sort_key_populate_missing,
    methods=["POST"],
)

# Ordered list endpoints
app.add_url_rule("/api/lists/<list_key>/items", "get_list_items", get_list_items, methods=["GET"])
app.add_url_rule("/api/lists/<list_key>/items", "add_list_item", add_list_item, methods=["POST"])
app.add_url_rule("/api/lists/<list_key>/reorder", "reorder_list_item", reorder_list_item, methods=["POST"])
app.add_url_rule(
    "/api/lists/<list_key>/populate-missing",
    "populate_list_sort_keys",
    populate_list_sort_keys,
    methods=["POST"],
)

app.add_url_rule("/health", "health_check", health_check)


@app.errorhandler(404)
def not_found(e):
    return jsonify({"success": False, "error": "Not found"}), 404


@app.errorhandler(405)
def method_not_allowed(e):
    return jsonify({"success": False, "error": "Method not allowed"}), 405


if __name__ == "__main__":
    app.run(debug=os.environ.get("FLASK_DEBUG") == "1")
