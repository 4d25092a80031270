"""
API module for UniNexus.

Provides the REST endpoints in front of the cached read path.
"""
from uninexus.api.models import Envelope, HealthResponse

__all__ = ["Envelope", "HealthResponse"]
