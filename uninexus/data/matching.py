"""
In-process evaluation of the Mongo filter subset used by the read path.

Supported: field equality (dotted paths, array membership), ``$or``,
``$and``, ``$gt``/``$gte``/``$lt``/``$lte``, ``$ne``, ``$in`` (values or
compiled patterns), ``$regex`` with ``$options``, and compiled ``re``
patterns used as values. Sorting follows Mongo's rule that missing/None
values order first.
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from uninexus.data.serialization import as_utc

_MISSING = object()

_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


class UnsupportedQueryError(ValueError):
    """Raised for query operators the in-memory store does not evaluate."""


def get_path(doc: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path; returns _MISSING when any segment is absent."""
    current: Any = doc
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return _MISSING
    return current


def _comparable(value: Any) -> Any:
    if isinstance(value, datetime):
        return as_utc(value)
    return value


def _compile(pattern: Any, options: str = "") -> "re.Pattern":
    if isinstance(pattern, re.Pattern):
        return pattern
    flags = 0
    for opt in options:
        flags |= _REGEX_FLAGS.get(opt, 0)
    return re.compile(pattern, flags)


def _scalar_equals(value: Any, expected: Any) -> bool:
    if isinstance(expected, re.Pattern):
        return isinstance(value, str) and expected.search(value) is not None
    return _comparable(value) == _comparable(expected)


def _equals(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        return expected is None
    if isinstance(value, list) and not isinstance(expected, list):
        return any(_scalar_equals(item, expected) for item in value)
    return _scalar_equals(value, expected)


def _compare(value: Any, op: str, bound: Any) -> bool:
    if value is _MISSING or value is None:
        return False
    if isinstance(value, list):
        return any(_compare(item, op, bound) for item in value)
    left, right = _comparable(value), _comparable(bound)
    try:
        if op == "$gt":
            return left > right
        if op == "$gte":
            return left >= right
        if op == "$lt":
            return left < right
        return left <= right
    except TypeError:
        # Mongo only compares values of the same BSON type
        return False


def _match_operators(value: Any, operators: Mapping[str, Any]) -> bool:
    options = operators.get("$options", "")
    for op, operand in operators.items():
        if op == "$options":
            continue
        if op in ("$gt", "$gte", "$lt", "$lte"):
            if not _compare(value, op, operand):
                return False
        elif op == "$ne":
            if _equals(value, operand):
                return False
        elif op == "$in":
            if not any(_equals(value, candidate) for candidate in operand):
                return False
        elif op == "$regex":
            if not _equals(value, _compile(operand, options)):
                return False
        else:
            raise UnsupportedQueryError(f"Unsupported operator: {op}")
    return True


def _is_operator_doc(condition: Any) -> bool:
    return isinstance(condition, Mapping) and bool(condition) and all(
        str(k).startswith("$") for k in condition
    )


def matches(doc: Mapping[str, Any], query: Optional[Mapping[str, Any]]) -> bool:
    """True if ``doc`` satisfies ``query``."""
    if not query:
        return True
    for field, condition in query.items():
        if field == "$or":
            if not any(matches(doc, sub) for sub in condition):
                return False
        elif field == "$and":
            if not all(matches(doc, sub) for sub in condition):
                return False
        elif field.startswith("$"):
            raise UnsupportedQueryError(f"Unsupported top-level operator: {field}")
        elif _is_operator_doc(condition):
            if not _match_operators(get_path(doc, field), condition):
                return False
        elif not _equals(get_path(doc, field), condition):
            return False
    return True


def _sort_key(doc: Mapping[str, Any], field: str) -> Tuple[bool, Any]:
    value = get_path(doc, field)
    if value is _MISSING or value is None:
        return (False, 0)
    return (True, _comparable(value))


def sort_documents(docs: List[Dict[str, Any]], sort: Optional[Sequence[Tuple[str, int]]]) -> List[Dict[str, Any]]:
    """Stable multi-key sort; ``sort`` is a pymongo-style list of (field, 1|-1)."""
    result = list(docs)
    for field, direction in reversed(list(sort or [])):
        result.sort(key=lambda d: _sort_key(d, field), reverse=direction < 0)
    return result
