"""
FastAPI application entry point for MedPanel.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request/response logging with request IDs
- Dependency Injection: Services and the session store injected via Depends()
- Exception Handling: Consistent error responses via setup_exception_handlers()
- Lifespan Management: Logging setup and session store initialization

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                     │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware                                                 │
    │    └── LoggingMiddleware  - Request logging & request IDs   │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── pages.py      - / upload page                        │
    │    ├── health.py     - /health liveness probe               │
    │    └── sessions.py   - sessions, uploads, dashboard         │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    │    ├── RecordPipelineService - Loader → Extractor →         │
    │    │                           Synthesizer → Classifier     │
    │    └── DashboardService      - Presenter + Plotly charts    │
    ├─────────────────────────────────────────────────────────────┤
    │  SessionStore (process memory, bounded)                     │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
import uvicorn

from medpanel import __version__
from medpanel.api.routers import health_router, pages_router, sessions_router
from medpanel.core.config import settings
from medpanel.core.dependencies import get_session_store
from medpanel.core.exceptions import setup_exception_handlers
from medpanel.core.logging_config import setup_logging
from medpanel.core.middleware import LoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Lifespan context manager for FastAPI application.

    Startup:
        - Configures structured logging
        - Initializes the session store

    Shutdown:
        - Logs how many sessions are discarded
    """
    # Configure logging FIRST so startup logs are formatted
    setup_logging(level=settings.log_level, json_format=settings.log_format == "json")

    logger = logging.getLogger(__name__)
    logger.info("Starting MedPanel...")

    store = get_session_store()
    logger.info(
        "Session store ready",
        extra={"max_sessions": store.max_sessions, "extraction_timeout": settings.extraction_timeout},
    )

    yield  # Application runs here

    logger.info("MedPanel shutting down", extra={"discarded_sessions": len(store)})


# Create FastAPI app with lifespan context
app = FastAPI(
    title="MedPanel",
    description="Upload PDF medical records and view a vitals dashboard with trend charts. "
                "Values missing from the documents are filled with placeholder data.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
# MedPanelError and its subclasses are converted to JSON error responses.
setup_exception_handlers(app)

# =============================================================================
# MIDDLEWARE
# =============================================================================
# Generates request_id and logs every request
app.add_middleware(LoggingMiddleware)

# =============================================================================
# ROUTERS
# =============================================================================
app.include_router(pages_router)
app.include_router(health_router)
app.include_router(sessions_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "medpanel.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
    )


if __name__ == "__main__":
    run()
