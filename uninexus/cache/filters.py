"""
Typed filter descriptors used as cache-key input.

Each call site that caches a filterable list gets its own record with
documented defaults. ``normalized()`` replaces absent, ``None`` and empty
values with the field default so that "not specified" and "specified as the
default" hash to the same key.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

DISCOVER_TYPES = ("events", "clubs", "all")
DATE_RANGES = ("today", "week", "month", "upcoming")


def _text(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def _flag(value: Any, default: str) -> str:
    """Normalize a tri-state query flag to 'true' / 'false' / default."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    lowered = str(value).strip().lower()
    if lowered in ("true", "1", "yes"):
        return "true"
    if lowered in ("false", "0", "no"):
        return "false"
    return default


class FilterDescriptor:
    """Base for filter records; subclasses are dataclasses."""

    def normalized(self) -> Dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class DiscoverFilters(FilterDescriptor):
    """
    Filters for the discover search.

    Defaults: query "", type "all", category "all", date_range "upcoming".
    Unknown date ranges behave like "upcoming" and normalize to it.
    """
    query: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    date_range: Optional[str] = None

    def normalized(self) -> Dict[str, Any]:
        entity_type = _text(self.type, "all").lower()
        date_range = _text(self.date_range, "upcoming").lower()
        return {
            "query": _text(self.query, ""),
            "type": entity_type if entity_type in DISCOVER_TYPES else "all",
            "category": _text(self.category, "all"),
            "dateRange": date_range if date_range in DATE_RANGES else "upcoming",
        }


@dataclass(frozen=True)
class EventListFilters(FilterDescriptor):
    """Filters for the paginated event list. Defaults: category "all", limit 20, offset 0, upcoming True."""
    category: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    upcoming: Optional[Any] = None

    def normalized(self) -> Dict[str, Any]:
        return {
            "category": _text(self.category, "all"),
            "limit": int(self.limit) if self.limit else 20,
            "offset": int(self.offset) if self.offset else 0,
            "upcoming": _flag(self.upcoming, "true"),
        }


@dataclass(frozen=True)
class ClubListFilters(FilterDescriptor):
    """Filters for the paginated club list. Defaults: verified "all", category "all", limit 20, offset 0."""
    verified: Optional[Any] = None
    category: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

    def normalized(self) -> Dict[str, Any]:
        return {
            "verified": _flag(self.verified, "all"),
            "category": _text(self.category, "all"),
            "limit": int(self.limit) if self.limit else 20,
            "offset": int(self.offset) if self.offset else 0,
        }
