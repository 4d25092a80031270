"""Cached entity reads and invalidating mutations."""
from uninexus.catalog.clubs import ClubCatalog
from uninexus.catalog.events import EventCatalog
from uninexus.catalog.media import on_media_uploaded
from uninexus.catalog.profiles import ProfileCatalog

__all__ = ["EventCatalog", "ClubCatalog", "ProfileCatalog", "on_media_uploaded"]
