import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rentverse.config import settings
from rentverse.routers import (
    admin,
    auth,
    bookings,
    conversations,
    engagement,
    listings,
    notifications,
    reports,
    search,
    users,
)
from rentverse.routers import settings as settings_router

logger = logging.getLogger("rentverse")


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        from rentverse.database import init_db
        init_db()
        logger.info("Database schema ready.")
    except Exception as exc:
        logger.error("Could not initialise database: %s", exc)
    if not settings.groq_api_key:
        logger.warning("No LLM key configured; search runs on basic filters.")
    yield


app = FastAPI(
    title="RentVerse",
    description="Peer-to-peer rental marketplace API",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router, prefix=settings.api_prefix)
app.include_router(users.router, prefix=settings.api_prefix)
app.include_router(listings.router, prefix=settings.api_prefix)
app.include_router(search.router, prefix=settings.api_prefix)
app.include_router(bookings.router, prefix=settings.api_prefix)
app.include_router(notifications.router, prefix=settings.api_prefix)
app.include_router(conversations.router, prefix=settings.api_prefix)
app.include_router(settings_router.router, prefix=settings.api_prefix)
app.include_router(engagement.router, prefix=settings.api_prefix)
app.include_router(reports.router, prefix=settings.api_prefix)
app.include_router(admin.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
