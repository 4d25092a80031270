"""
Pydantic models for UniNexus API requests and responses.

Request bodies use extra="forbid" to reject unknown fields.
"""
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Envelope(BaseModel):
    """Standard success envelope."""
    success: bool = True
    data: Any = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    message: str


class EventCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str
    description: str
    location: str = ""
    category: str = "Other"
    tags: List[str] = Field(default_factory=list)
    isPublic: bool = True
    posterUrl: str = ""
    organizer: Optional[str] = None
    startTime: datetime
    endTime: datetime


class EventUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    isPublic: Optional[bool] = None
    posterUrl: Optional[str] = None
    startTime: Optional[datetime] = None
    endTime: Optional[datetime] = None


class RSVPRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: Literal["going", "interested", "not_going", "waitlist"]
    previousStatus: Optional[Literal["going", "interested", "not_going", "waitlist"]] = None


class ClubCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    description: str
    email: str
    category: str = "Other"
    logoUrl: str = ""
    socialLinks: Dict[str, str] = Field(default_factory=dict)
    user: Optional[str] = None


class ClubUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    email: Optional[str] = None
    logoUrl: Optional[str] = None
    socialLinks: Optional[Dict[str, str]] = None


class ProfileUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    firstName: Optional[str] = None
    lastName: Optional[str] = None
    bio: Optional[str] = None
    avatarUrl: Optional[str] = None
    interests: Optional[List[str]] = None


class MediaUploadedRequest(BaseModel):
    """Notification from the media-upload collaborator."""
    model_config = ConfigDict(extra="forbid")

    resourceType: Literal["events", "clubs", "users"]
    entityId: Optional[str] = None


class CacheStats(BaseModel):
    hits: int
    misses: int
    sets: int
    deletes: int
    errors: int


class HealthResponse(BaseModel):
    message: str
    timestamp: str
    database: str
    redis: str
    cache: CacheStats
