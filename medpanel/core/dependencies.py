"""
FastAPI Dependency Injection configuration for MedPanel.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (RecordPipelineService, DashboardService)
         ↓ Injected
    SessionStore (process memory)

Usage in Routers:
    from medpanel.core.dependencies import get_session_store, get_record_pipeline

    @router.post("/sessions/{session_id}/documents")
    async def upload_documents(
        session_id: str,
        store: SessionStore = Depends(get_session_store),
        pipeline: RecordPipelineService = Depends(get_record_pipeline),
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_session_store] = lambda: test_store
"""
import logging
from typing import Optional

from medpanel.core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# SESSION STORE DEPENDENCY
# =============================================================================

# Lazy import to avoid circular dependencies
_session_store_instance: Optional["SessionStore"] = None


def get_session_store() -> "SessionStore":
    """
    Get the process-wide session store (singleton).

    Created on first use with the configured capacity and seed.
    """
    global _session_store_instance

    if _session_store_instance is None:
        from medpanel.services.session_store import SessionStore

        _session_store_instance = SessionStore(
            max_sessions=settings.max_sessions,
            seed=settings.random_seed,
        )
        logger.info(
            "Session store initialized",
            extra={"max_sessions": settings.max_sessions, "seeded": settings.random_seed is not None},
        )

    return _session_store_instance


def reset_session_store() -> None:
    """
    Reset the session store (for testing only).

    Drops every live session.
    """
    global _session_store_instance
    _session_store_instance = None


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_document_loader() -> "DocumentLoader":
    """Get a DocumentLoader using PyMuPDF and the configured timeout."""
    from medpanel.services.document_loader import DocumentLoader

    return DocumentLoader(timeout=settings.extraction_timeout)


def get_record_pipeline() -> "RecordPipelineService":
    """
    Get a RecordPipelineService with the document loader injected.

    Returns:
        RecordPipelineService: Service that processes upload batches.
    """
    from medpanel.services.record_pipeline import RecordPipelineService

    return RecordPipelineService(
        loader=get_document_loader(),
        strict_validation=settings.strict_validation,
        max_size=settings.upload_max_size,
    )


def get_dashboard_service() -> "DashboardService":
    """
    Get a DashboardService instance.

    DashboardService is stateless; it reads the record it is given.
    """
    from medpanel.services.dashboard import DashboardService

    return DashboardService()
