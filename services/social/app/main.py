from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.database import init_db
from app.dependencies import get_settings
from app.exceptions import VALIDATION_FIELD_CODES
from app.rate_limit import limiter
from app.activity.router import router as activity_router
from app.sharing.router import router as sharing_router
from app.sharing.admin_router import router as sharing_admin_router
from app.social_graph.router import router as social_graph_router
from shared.middleware.error_handler import (
    error_envelope_middleware,
    http_exception_handler,
    make_validation_exception_handler,
)
from shared.middleware.request_id import request_id_middleware


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## AniSwipe Social Service

The social layer of the AniSwipe anime-discovery app:

* **Social graph** — unidirectional follows and blocks. Blocking a user removes
  follow edges in both directions; unblocking never restores them.
* **Activity feed** — fan-out-on-read feed of the caller's own actions and those
  of the people they follow, with blocked users filtered out in both directions.
* **Share links** — random 32-character tokens pointing at an anime, optionally
  expiring, with a view counter.

### Authentication
All protected endpoints require:
```
Authorization: Bearer <access_token>
```
`GET /api/v1/share-links/{token}` is public. Admin endpoints require the
`admin`, `super_admin` or `service` role in the token.

### Error shape
All errors return a consistent JSON envelope:
```json
{ "error": { "code": "ALREADY_FOLLOWING", "message": "Already following this user." },
  "request_id": "..." }
```
Clients branch on `error.code`. The public share link lookup instead returns
`{ "error": "...", "code": "INVALID_TOKEN" | "NOT_FOUND" | "EXPIRED" }`.

### Pagination
Follow, block and share link lists return an opaque `next_cursor`; pass it back
as `cursor`. Activity feeds return the `created_at` of the last item as
`next_cursor`, which bounds the next page exclusively.

### Rate limits
`429 Too Many Requests` is returned when a rate limit is exceeded: follow 50/hour,
share link creation 30/hour, public share link lookup 60/minute per IP.
"""

_TAGS_METADATA = [
    {
        "name": "social-graph",
        "description": (
            "Follows and blocks. Following is refused in either direction of a block. "
            "Blocking removes follow edges both ways; block and unblock return the "
            "caller's full block list."
        ),
    },
    {
        "name": "activity",
        "description": (
            "Record actions (favorite, watch later, comment) and read feeds. Follow, block "
            "and unblock are recorded automatically; unfollow is never recorded."
        ),
    },
    {
        "name": "share-links",
        "description": (
            "Create, resolve, count views on and delete share links. Expired links "
            "resolve as EXPIRED until the cleanup sweep removes them."
        ),
    },
    {
        "name": "admin-share-links",
        "description": "**Admin only.** Expired share link sweep.",
    },
]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.social_database_url)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="AniSwipe Social Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(
        RequestValidationError, make_validation_exception_handler(VALIDATION_FIELD_CODES)
    )

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(social_graph_router, prefix="/api/v1")
    app.include_router(activity_router, prefix="/api/v1")
    app.include_router(sharing_router, prefix="/api/v1")
    app.include_router(sharing_admin_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        """Lightweight liveness probe. Does not hit the database."""
        return HealthResponse(status="ok", service="social")

    return app


app = create_app()
