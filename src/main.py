"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from src.api import auth, events, livestreams, marketplace, posts
from src.api.errors import auth_error_handler, validation_error_handler
from src.config import get_settings
from src.services.errors import AuthError

settings = get_settings()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logging.getLogger(__name__).info(f"Starting CampusConnect API ({settings.environment})")
    yield


app = FastAPI(
    title="CampusConnect API",
    description="Campus social network: accounts, events, marketplace, feed and livestreams",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
            settings.frontend_url,
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.add_exception_handler(AuthError, auth_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)

# Register routers
app.include_router(auth.router)
app.include_router(events.router)
app.include_router(marketplace.router)
app.include_router(posts.router)
app.include_router(livestreams.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
