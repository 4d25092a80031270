"""
FastAPI server for the UniNexus read path.

Collaborators (cache service, document store) are built once at boot by the
lifespan handler, shared by every request through ``Depends`` and closed at
shutdown. Tests inject their own through ``create_app(cache=..., store=...)``.

Usage:
    python -m uninexus.api.server
    # or
    uvicorn uninexus.api.server:app --reload --port 5000
"""
import os
import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Literal, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from uninexus.api.models import (
    ClubCreateRequest,
    ClubUpdateRequest,
    Envelope,
    ErrorEnvelope,
    EventCreateRequest,
    EventUpdateRequest,
    HealthResponse,
    MediaUploadedRequest,
    ProfileUpdateRequest,
    RSVPRequest,
)
from uninexus.cache.filters import ClubListFilters, DiscoverFilters, EventListFilters
from uninexus.cache.service import CacheService
from uninexus.cache.store import RedisCacheStore
from uninexus.catalog import ClubCatalog, EventCatalog, ProfileCatalog, on_media_uploaded
from uninexus.core.config import ConfigurationError, UniNexusConfig, get_config
from uninexus.data.document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    MongoDocumentStore,
    object_id,
)
from uninexus.discovery import DiscoverService, TrendingService
from uninexus.discovery.date_ranges import campus_timezone
from uninexus.utils.logger import get_logger

logger = get_logger("api.server")


def build_cache(config: UniNexusConfig) -> CacheService:
    """Redis-backed cache service; a disabled cache is a store with no client."""
    if not config.cache_enabled:
        logger.info("Cache disabled (CACHE_ENABLED=0) - every read goes to the data store")
        return CacheService(RedisCacheStore(None))
    return CacheService(RedisCacheStore.from_url(config.redis_url, config.cache_timeout_seconds))


def build_document_store(config: UniNexusConfig) -> DocumentStore:
    """
    Mongo store for MONGO_URL. The in-memory store is only used when asked for
    explicitly (database.in_memory / UNINEXUS_IN_MEMORY_DB=1).
    """
    if config.mongo_url:
        return MongoDocumentStore(config.mongo_url, config.mongo_db, config.mongo_timeout_ms)
    if config.in_memory_db:
        logger.warning("Using the in-memory document store - data is lost on restart")
        return InMemoryDocumentStore()
    raise ConfigurationError(
        "MONGO_URL is not set. Set it, or set UNINEXUS_IN_MEMORY_DB=1 for local development."
    )


# ============================================================================
# Middleware
# ============================================================================

class ErrorEnvelopeMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status and duration for every request and turns any
    unhandled exception into the 500 error envelope.
    """

    async def dispatch(self, request: Request, call_next):
        t0 = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Error in {request.method} {request.url.path}: {e}\n{traceback.format_exc()}")
            response = JSONResponse(
                status_code=500,
                content=ErrorEnvelope(message="Internal server error").model_dump(),
            )
        duration_ms = round((time.perf_counter() - t0) * 1000, 1)
        logger.debug(f"{request.method} {request.url.path} -> {response.status_code}  {duration_ms}ms")
        return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorEnvelope(message=str(exc.detail)).model_dump(),
    )


# ============================================================================
# Dependencies
# ============================================================================

def get_app_config(request: Request) -> UniNexusConfig:
    return request.app.state.config


def get_cache(request: Request) -> CacheService:
    return request.app.state.cache


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_trending_service(
    cache: CacheService = Depends(get_cache),
    store: DocumentStore = Depends(get_store),
    config: UniNexusConfig = Depends(get_app_config),
) -> TrendingService:
    return TrendingService(cache, store, ttl=config.ttl_trending, limit=config.trending_limit)


def get_discover_service(
    cache: CacheService = Depends(get_cache),
    store: DocumentStore = Depends(get_store),
    config: UniNexusConfig = Depends(get_app_config),
) -> DiscoverService:
    return DiscoverService(
        cache, store,
        ttl=config.ttl_search,
        limit=config.discover_limit,
        tz=campus_timezone(config.campus_timezone),
    )


def get_event_catalog(
    cache: CacheService = Depends(get_cache),
    store: DocumentStore = Depends(get_store),
    config: UniNexusConfig = Depends(get_app_config),
) -> EventCatalog:
    return EventCatalog(cache, store, list_ttl=config.ttl_list, detail_ttl=config.ttl_detail)


def get_club_catalog(
    cache: CacheService = Depends(get_cache),
    store: DocumentStore = Depends(get_store),
    config: UniNexusConfig = Depends(get_app_config),
) -> ClubCatalog:
    return ClubCatalog(cache, store, list_ttl=config.ttl_list, detail_ttl=config.ttl_detail)


def get_profile_catalog(
    cache: CacheService = Depends(get_cache),
    store: DocumentStore = Depends(get_store),
    config: UniNexusConfig = Depends(get_app_config),
) -> ProfileCatalog:
    return ProfileCatalog(cache, store, ttl=config.ttl_profile)


def _page(limit: Optional[int], config: UniNexusConfig) -> int:
    return min(limit or config.list_default_limit, config.list_max_limit)


# ============================================================================
# Routes
# ============================================================================

router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthResponse)
async def health(
    cache: CacheService = Depends(get_cache),
    store: DocumentStore = Depends(get_store),
):
    """Health check: data store and Redis reachability plus cache counters."""
    database_up = await store.ping()
    redis_up = await cache.ping()
    return HealthResponse(
        message="Connected! Backend is running.",
        timestamp=datetime.now(timezone.utc).isoformat(),
        database="connected" if database_up else "disconnected",
        redis="connected" if redis_up else "disconnected",
        cache=cache.stats,
    )


@router.get("/trending", response_model=Envelope)
async def trending(service: TrendingService = Depends(get_trending_service)):
    """Top events and clubs ranked by engagement score."""
    return Envelope(data=await service.get_trending())


@router.get("/discover", response_model=Envelope)
async def discover(
    query: Optional[str] = None,
    type: Optional[Literal["events", "clubs", "all"]] = None,
    category: Optional[str] = None,
    dateRange: Optional[str] = None,
    service: DiscoverService = Depends(get_discover_service),
):
    """Search events and clubs by text, type, category and date range."""
    filters = DiscoverFilters(query=query, type=type, category=category, date_range=dateRange)
    return Envelope(data=await service.discover(filters))


@router.get("/events", response_model=Envelope)
async def list_events(
    category: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    upcoming: Optional[str] = None,
    catalog: EventCatalog = Depends(get_event_catalog),
    config: UniNexusConfig = Depends(get_app_config),
):
    filters = EventListFilters(category=category, limit=_page(limit, config), offset=offset, upcoming=upcoming)
    return Envelope(data=await catalog.list_events(filters))


@router.post("/events", response_model=Envelope, status_code=201)
async def create_event(request: EventCreateRequest, catalog: EventCatalog = Depends(get_event_catalog)):
    fields = request.model_dump()
    if fields.get("organizer"):
        fields["organizer"] = object_id(fields["organizer"])
    return Envelope(data=await catalog.create_event(fields))


@router.get("/events/{event_id}", response_model=Envelope)
async def get_event(event_id: str, catalog: EventCatalog = Depends(get_event_catalog)):
    event = await catalog.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return Envelope(data=event)


@router.patch("/events/{event_id}", response_model=Envelope)
async def update_event(
    event_id: str,
    request: EventUpdateRequest,
    catalog: EventCatalog = Depends(get_event_catalog),
):
    event = await catalog.update_event(event_id, request.model_dump(exclude_none=True))
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return Envelope(data=event)


@router.delete("/events/{event_id}", response_model=Envelope)
async def delete_event(event_id: str, catalog: EventCatalog = Depends(get_event_catalog)):
    if not await catalog.delete_event(event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return Envelope(data={"id": event_id, "deleted": True})


@router.post("/events/{event_id}/rsvp", response_model=Envelope)
async def rsvp(
    event_id: str,
    request: RSVPRequest,
    catalog: EventCatalog = Depends(get_event_catalog),
):
    """Record an RSVP status change and keep the attendee counter in step."""
    delta = int(request.status == "going") - int(request.previousStatus == "going")
    if delta == 0:
        event = await catalog.get_event(event_id)
    else:
        event = await catalog.record_rsvp(event_id, delta)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return Envelope(data=event)


@router.get("/clubs", response_model=Envelope)
async def list_clubs(
    verified: Optional[str] = None,
    category: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
    catalog: ClubCatalog = Depends(get_club_catalog),
    config: UniNexusConfig = Depends(get_app_config),
):
    filters = ClubListFilters(verified=verified, category=category, limit=_page(limit, config), offset=offset)
    return Envelope(data=await catalog.list_clubs(filters))


@router.post("/clubs", response_model=Envelope, status_code=201)
async def create_club(request: ClubCreateRequest, catalog: ClubCatalog = Depends(get_club_catalog)):
    fields = request.model_dump()
    if fields.get("user"):
        fields["user"] = object_id(fields["user"])
    return Envelope(data=await catalog.create_club(fields))


@router.get("/clubs/{club_id}", response_model=Envelope)
async def get_club(club_id: str, catalog: ClubCatalog = Depends(get_club_catalog)):
    club = await catalog.get_club(club_id)
    if club is None:
        raise HTTPException(status_code=404, detail="Club not found")
    return Envelope(data=club)


@router.patch("/clubs/{club_id}", response_model=Envelope)
async def update_club(
    club_id: str,
    request: ClubUpdateRequest,
    catalog: ClubCatalog = Depends(get_club_catalog),
):
    club = await catalog.update_club(club_id, request.model_dump(exclude_none=True))
    if club is None:
        raise HTTPException(status_code=404, detail="Club not found")
    return Envelope(data=club)


@router.get("/users/{user_id}/profile", response_model=Envelope)
async def get_profile(user_id: str, catalog: ProfileCatalog = Depends(get_profile_catalog)):
    profile = await catalog.get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return Envelope(data=profile)


@router.patch("/users/{user_id}/profile", response_model=Envelope)
async def update_profile(
    user_id: str,
    request: ProfileUpdateRequest,
    catalog: ProfileCatalog = Depends(get_profile_catalog),
):
    profile = await catalog.update_profile(user_id, request.model_dump(exclude_none=True))
    if profile is None:
        raise HTTPException(status_code=404, detail="User not found")
    return Envelope(data=profile)


@router.post("/media/uploaded", response_model=Envelope)
async def media_uploaded(request: MediaUploadedRequest, cache: CacheService = Depends(get_cache)):
    """Called by the media-upload service after a successful upload."""
    await on_media_uploaded(cache, request.resourceType, request.entityId)
    return Envelope(data={"invalidated": request.resourceType})


# ============================================================================
# Application
# ============================================================================

def create_app(
    config: Optional[UniNexusConfig] = None,
    cache: Optional[CacheService] = None,
    store: Optional[DocumentStore] = None,
) -> FastAPI:
    """
    Build the application.

    Anything not injected is constructed by the lifespan handler at startup
    and closed at shutdown; injected collaborators belong to the caller.
    """
    config = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = []
        if app.state.cache is None:
            app.state.cache = build_cache(config)
            owned.append(app.state.cache)
        if app.state.store is None:
            app.state.store = build_document_store(config)
            owned.append(app.state.store)

        if await app.state.cache.ping():
            logger.info("Redis connected")
        else:
            logger.warning("Redis unavailable - serving without cache")

        yield

        for resource in owned:
            await resource.close()

    app = FastAPI(
        title="UniNexus API",
        description="Campus events and clubs: cached discovery and trending",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.cache = cache
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ErrorEnvelopeMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.include_router(router)

    @app.get("/")
    async def root():
        return {"message": "UniNexus API is running..."}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    uvicorn.run("uninexus.api.server:app", host="0.0.0.0", port=port)
