"""Document store collaborators and record serialization."""
from uninexus.data.document_store import (
    CLUBS_COLLECTION,
    EVENTS_COLLECTION,
    USERS_COLLECTION,
    DocumentStore,
    InMemoryDocumentStore,
    MongoDocumentStore,
    object_id,
)
from uninexus.data.serialization import to_public

__all__ = [
    "DocumentStore",
    "MongoDocumentStore",
    "InMemoryDocumentStore",
    "EVENTS_COLLECTION",
    "CLUBS_COLLECTION",
    "USERS_COLLECTION",
    "object_id",
    "to_public",
]
