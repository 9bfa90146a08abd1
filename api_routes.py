"""
JSON API routes for sort key generation and ordered lists.

The /api/sort-keys endpoints are stateless wrappers around a SortKeyProvider.
The /api/lists endpoints go through SortKeyService and the ordered_item table.
"""

import logging
from functools import wraps
from flask import request, jsonify

from fractional_indexing import SortKeyError
from services.sort_key_service import SortKeyService
from sort_key_alphabets import get_provider

logger = logging.getLogger(__name__)

sort_key_service = SortKeyService()


class InvalidRequest(ValueError):
    pass


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _error(message, status, error_type=None):
    payload = {"success": False, "error": message}
    if error_type:
        payload["error_type"] = error_type
    return jsonify(payload), status


def sort_key_endpoint(f):
    """
    Decorator for stateless sort key endpoints.

    Resolves the optional 'alphabet' (JSON body or query string) into a
    provider, and turns engine errors into 400 responses.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        alphabet = _json_body().get("alphabet") or request.args.get("alphabet")
        if alphabet is not None and not isinstance(alphabet, str):
            return _error("'alphabet' must be a string", 400)
        try:
            provider = get_provider(alphabet)
        except ValueError as e:
            return _error(str(e), 400, "UnknownAlphabet")

        try:
            return f(provider, *args, **kwargs)
        except SortKeyError as e:
            return _error(str(e), 400, type(e).__name__)
        except InvalidRequest as e:
            return _error(str(e), 400)
        except Exception as e:
            logger.error(f"Unexpected error in {f.__name__}: {e}", exc_info=True)
            return _error("Internal server error", 500)
    return decorated_function


def _optional_flag(data, name):
    value = data.get(name, False)
    if not isinstance(value, bool):
        raise InvalidRequest(f"'{name}' must be true or false")
    return value


def _optional_key(data, name):
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise InvalidRequest(f"'{name}' must be a string or null")
    return value


@sort_key_endpoint
def sort_key_initial(provider):
    return jsonify({"success": True, "sort_key": provider.sort_key_initial_item()})


@sort_key_endpoint
def sort_key_between(provider):
    data = _json_body()
    sort_key = provider.sort_key_between(
        _optional_key(data, "key_less"),
        _optional_key(data, "key_more"),
    )
    return jsonify({"success": True, "sort_key": sort_key})


@sort_key_endpoint
def sort_key_first_before(provider):
    data = _json_body()
    sort_key = provider.sort_key_at_first_before(_optional_key(data, "key_more"))
    return jsonify({"success": True, "sort_key": sort_key})


@sort_key_endpoint
def sort_key_last_after(provider):
    data = _json_body()
    sort_key = provider.sort_key_at_last_after(_optional_key(data, "key_less"))
    return jsonify({"success": True, "sort_key": sort_key})


@sort_key_endpoint
def sort_key_compare(provider):
    data = _json_body()
    result = provider.sort_key_comparator(_optional_key(data, "a"), _optional_key(data, "b"))
    return jsonify({"success": True, "result": result})


@sort_key_endpoint
def sort_key_populate_missing(provider):
    data = _json_body()
    sort_keys = data.get("sort_keys")
    if not isinstance(sort_keys, list):
        return _error("'sort_keys' must be a list", 400)
    for key in sort_keys:
        if key is not None and not isinstance(key, str):
            return _error("'sort_keys' may only contain strings or nulls", 400)

    populated = provider.sort_key_populate_missing(sort_keys)
    return jsonify({"success": True, "sort_keys": populated})


def get_list_items(list_key):
    items = sort_key_service.get_list_items(list_key)
    return jsonify({
        "success": True,
        "list_key": list_key,
        "items": [item.to_dict() for item in items],
    })


def add_list_item(list_key):
    data = _json_body()
    position = data.get("position", "last")

    success, message, item = sort_key_service.add_item(
        list_key, label=data.get("label"), position=position
    )
    if not success:
        return _error(message, 400)
    return jsonify({"success": True, "message": message, "item": item.to_dict()}), 201


def reorder_list_item(list_key):
    data = _json_body()
    target_id = data.get("target_id")
    if target_id is None:
        return _error("'target_id' is required", 400)

    try:
        to_last = _optional_flag(data, "to_last")
        to_first = _optional_flag(data, "to_first")
    except InvalidRequest as e:
        return _error(str(e), 400)

    success, message, item = sort_key_service.reorder_item(
        list_key,
        target_id,
        before_id=data.get("before_id"),
        to_last=to_last,
        after_id=data.get("after_id"),
        to_first=to_first,
    )
    if not success:
        return _error(message, 400)
    return jsonify({"success": True, "message": message, "item": item.to_dict()})


def populate_list_sort_keys(list_key):
    data = _json_body()
    try:
        dry_run = _optional_flag(data, "dry_run")
    except InvalidRequest as e:
        return _error(str(e), 400)

    success, message, items = sort_key_service.populate_missing_sort_keys(list_key, dry_run=dry_run)
    if not success:
        return _error(message, 400)
    return jsonify({
        "success": True,
        "message": message,
        "dry_run": dry_run,
        "items": [item.to_dict() for item in items],
    })


def health_check():
    return jsonify({"success": True, "status": "ok"})
