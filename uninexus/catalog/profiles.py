"""
User profile reads with a per-user cache entry (``users:profile:{id}``).

Profile updates drop only that user's key.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from uninexus.cache.policy import DEFAULT_TTL_PROFILE
from uninexus.cache.service import CacheService
from uninexus.data.document_store import USERS_COLLECTION, DocumentStore, object_id
from uninexus.data.serialization import to_public

SENSITIVE_FIELDS = ("password", "refreshToken")


class ProfileCatalog:

    def __init__(self, cache: CacheService, store: DocumentStore, ttl: int = DEFAULT_TTL_PROFILE):
        self.cache = cache
        self.store = store
        self.ttl = ttl

    async def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        cached = await self.cache.get_user_profile(user_id)
        if cached is not None:
            return cached

        user = await self.store.find_one(USERS_COLLECTION, {"_id": object_id(user_id)})
        if user is None:
            return None
        profile = to_public(user, exclude=SENSITIVE_FIELDS)
        await self.cache.set_user_profile(user_id, profile, self.ttl)
        return profile

    async def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        updated = await self.store.update_one(
            USERS_COLLECTION,
            {"_id": object_id(user_id)},
            set_fields={**changes, "updatedAt": datetime.now(timezone.utc)},
        )
        if updated is None:
            return None
        await self.cache.invalidate_user_profile(user_id)
        return to_public(updated, exclude=SENSITIVE_FIELDS)
