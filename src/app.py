"""Vehicle Reviews FastAPI application.

Serves the review, voting and moderation endpoints. Commands are processed
synchronously; every request runs inside the review domain's context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level so uvicorn workers share it. PROTEAN_ENV selects
# the config overlay (memory stores by default, PostgreSQL in "production").
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from vehicle_reviews.domain import reviews
from vehicle_reviews.utils.logging import add_context, clear_context, configure_logging

configure_logging()
reviews.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Vehicle Reviews API",
    description="Owner reviews, moderation and rating statistics for vehicle listings",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the review domain context and bind request info to the logs."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with reviews.domain_context():
        response = await call_next(request)
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from vehicle_reviews.api.errors import register_error_handlers  # noqa: E402
from vehicle_reviews.api.routes import (  # noqa: E402
    author_router,
    moderation_router,
    review_router,
    vehicle_router,
)

app.include_router(vehicle_router)
app.include_router(author_router)
app.include_router(review_router)
app.include_router(moderation_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "vehicle_reviews": {"name": reviews.name},
            },
        }
    )
