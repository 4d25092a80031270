"""Trending and discover query paths."""
from uninexus.discovery.discover import DiscoverService
from uninexus.discovery.trending import TrendingService, rank_entities

__all__ = ["DiscoverService", "TrendingService", "rank_entities"]
