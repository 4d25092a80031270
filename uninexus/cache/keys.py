"""
Cache key derivation.

Keys follow ``resourceType:operation:identifier``. The identifier is either a
raw entity id or a content hash of a normalized filter descriptor, so that
semantically equivalent filters (different key order, omitted vs default
fields) always land on the same key.
"""
import hashlib
import json
from typing import Any, Dict, Mapping, Union

from uninexus.cache.filters import FilterDescriptor

KEY_DELIMITER = ":"
HASH_LENGTH = 32  # hex chars = 128 bits

Descriptor = Union[FilterDescriptor, Mapping[str, Any]]


def normalize(descriptor: Descriptor) -> Dict[str, Any]:
    """
    Return the normalized, key-sorted form of a filter descriptor.

    Typed descriptors fill in their documented defaults. Plain mappings drop
    ``None``/empty values and transient keys starting with ``_``.
    """
    if isinstance(descriptor, FilterDescriptor):
        values = descriptor.normalized()
    else:
        values = {
            k: v for k, v in descriptor.items()
            if not str(k).startswith("_") and v is not None and v != ""
        }
    return {k: values[k] for k in sorted(values)}


def canonical(normalized: Mapping[str, Any]) -> str:
    """Serialize a normalized descriptor with stable field order and delimiters."""
    return json.dumps(normalized, sort_keys=True, separators=(",", ":"), default=str)


def hash_filters(descriptor: Descriptor) -> str:
    """Fixed-length hex digest of the normalized descriptor."""
    raw = canonical(normalize(descriptor))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()[:HASH_LENGTH]


def generate_key(resource_type: str, operation: str, identifier: Any) -> str:
    """Build ``resourceType:operation:identifier``."""
    return KEY_DELIMITER.join((resource_type, operation, str(identifier)))


def namespace_pattern(resource_type: str) -> str:
    """Glob matching every key written under a resource type."""
    return f"{resource_type}{KEY_DELIMITER}*"
