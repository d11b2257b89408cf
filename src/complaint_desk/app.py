"""Main FastAPI application module.

This module builds the FastAPI application and registers all route handlers.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from complaint_desk.api.routes import assistant, auth, complaints, notifications, reports
from complaint_desk.config import API_HOST, API_PORT, CORS_ALLOWED_ORIGINS
from complaint_desk.core.context import AppContext, build_context
from complaint_desk.core.logging_config import setup_logging

logger = logging.getLogger(__name__)

APP_TITLE = "Complaint Desk API"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Backend API for the student complaints management system."


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        context: Pre-built application context. When omitted, one is built
            from configuration at startup and disposed at shutdown.

    Returns:
        Configured FastAPI application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = getattr(app.state, "context", None) is None
        if owned:
            app.state.context = build_context()
        yield
        if owned:
            app.state.context.dispose()
            app.state.context = None

    app = FastAPI(
        title=APP_TITLE,
        description=APP_DESCRIPTION,
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.context = context

    # Configure CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register route handlers
    app.include_router(auth.router)
    app.include_router(complaints.router)
    app.include_router(reports.router)
    app.include_router(assistant.router)
    app.include_router(notifications.router)

    @app.get("/", summary="API root", tags=["Info"])
    def root() -> dict:
        """Return API information and documentation links."""
        return {
            "name": APP_TITLE,
            "version": APP_VERSION,
            "description": APP_DESCRIPTION,
            "docs": {
                "swagger": "/docs",
                "redoc": "/redoc",
            },
            "health": "/api/health",
        }

    @app.get("/api/health", summary="Health check", tags=["Health"])
    def health() -> dict:
        return {"status": "ok"}

    return app


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    setup_logging()
    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Starting {APP_TITLE} at {server_url}")
    print(f"API docs: {server_url}/docs")
    uvicorn.run(create_app(), host=API_HOST, port=API_PORT)


# --- Startup code for direct execution ---
if __name__ == "__main__":
    run()
