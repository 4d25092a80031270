"""
Cache hook for the media-upload collaborator.

A successful upload changes what cached detail views show (poster, logo,
avatar URLs), so the affected cache scope is dropped.
"""
from typing import Optional

from uninexus.cache.policy import USERS
from uninexus.cache.service import CacheService
from uninexus.utils.logger import get_logger

logger = get_logger("catalog.media")


async def on_media_uploaded(cache: CacheService, resource_type: str, entity_id: Optional[str] = None) -> None:
    """
    Invalidate after an upload for ``resource_type`` (events, clubs or users).

    A user upload only touches that user's profile entry when the id is known.
    """
    if resource_type == USERS and entity_id:
        await cache.invalidate_user_profile(entity_id)
    else:
        await cache.invalidate_for_mutation(resource_type)
    logger.info(f"Media uploaded for {resource_type} {entity_id or ''}".rstrip())
