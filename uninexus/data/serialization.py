"""
Conversion of stored records into JSON-safe payloads.

Records leave the data layer with ObjectIds and datetimes; everything that is
cached or returned over HTTP goes through ``to_public`` first so a cached
payload and a freshly computed one serialize identically.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping

from bson import ObjectId


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_datetime(value: Any) -> datetime:
    """Accept a datetime or an ISO-8601 string (``Z`` suffix allowed)."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str):
        return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    raise TypeError(f"Expected datetime or ISO string, got {type(value).__name__}")


def json_default(value: Any) -> Any:
    """``default=`` hook for json.dumps."""
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _convert(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _convert(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(v) for v in value]
    if isinstance(value, (datetime, ObjectId, set, frozenset)):
        return json_default(value)
    return value


def to_public(doc: Mapping[str, Any], exclude: Iterable[str] = ()) -> Dict[str, Any]:
    """JSON-safe copy of a record, without the ``exclude`` top-level fields."""
    hidden = set(exclude)
    return {str(k): _convert(v) for k, v in doc.items() if k not in hidden}
