"""Shared helper utilities."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List

from bson import ObjectId


def ensure_object_id(identifier: Any) -> ObjectId:
    """Return ``identifier`` as an ``ObjectId``, parsing strings and other values."""
    if isinstance(identifier, ObjectId):
        return identifier
    return ObjectId(str(identifier))


def ensure_object_ids(identifiers: Iterable[Any]) -> List[ObjectId]:
    return [ensure_object_id(item) for item in identifiers]


def normalize_id_filter(filter_doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize filter document, converting _id values to ObjectIds.
    Handles both simple _id values and ``$in``/``in`` operator queries.
    Any other key or operator is passed through untouched.
    """
    if "_id" not in filter_doc:
        return filter_doc

    normalized = dict(filter_doc)
    _id_value = normalized["_id"]

    if isinstance(_id_value, dict):
        if "$in" in _id_value:
            normalized["_id"] = {**_id_value, "$in": ensure_object_ids(_id_value["$in"])}
        elif "in" in _id_value:
            # MongoDB only understands $in
            rest = {k: v for k, v in _id_value.items() if k != "in"}
            normalized["_id"] = {**rest, "$in": ensure_object_ids(_id_value["in"])}
    elif _id_value is not None:
        normalized["_id"] = ensure_object_id(_id_value)

    return normalized


def sanitize_connection_string(url: str) -> str:
    """Hide the password in a MongoDB URL for safe logging."""
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    credentials, host = rest.rsplit("@", 1)
    if ":" not in credentials:
        return url
    username = credentials.split(":", 1)[0]
    return f"{protocol}://{username}:***@{host}"
