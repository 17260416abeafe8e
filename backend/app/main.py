# backend/app/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import Base, engine
from .errors import register_error_handlers
from .middleware.prometheus_middleware import METRICS_PATH, PrometheusMiddleware
from .routes.v1 import (
    bookings as bookings_v1,
    health as health_v1,
    prometheus as prometheus_v1,
    review_invites as review_invites_v1,
    reviews as reviews_v1,
    session_reviews as session_reviews_v1,
)

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown without deprecated events."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(
        f"Invite TTL {settings.review_invite_ttl_days}d, review cooldown "
        f"{settings.review_cooldown_days}d, session review trigger {settings.session_review_trigger}"
    )
    if is_running_tests():
        logger.info("Running under pytest (test mode active)")

    # SQLite databases are created on the fly; Postgres is managed by alembic
    if settings.is_sqlite:
        Base.metadata.create_all(bind=engine)

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")
    engine.dispose()


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)
app.add_middleware(PrometheusMiddleware)

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(bookings_v1.router, prefix="/bookings")
# Invites before reviews so /reviews/invites isn't shadowed by a review path
api_v1.include_router(review_invites_v1.router, prefix="/reviews/invites")
api_v1.include_router(reviews_v1.router, prefix="/reviews")
api_v1.include_router(session_reviews_v1.router, prefix="/session-reviews")
app.include_router(api_v1)

app.include_router(health_v1.router, prefix="/health")
app.include_router(prometheus_v1.router, prefix=METRICS_PATH)


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": f"Welcome to the {BRAND_NAME} API", "version": API_VERSION, "docs": "/docs"}
