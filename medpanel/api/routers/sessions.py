"""
Sessions router - session lifecycle, document uploads and the dashboard.

Architecture:
    HTTP Request → Router (this file) → Services → SessionStore

Dependency Injection:
    Services are injected via FastAPI's Depends() mechanism.
    The DI chain is defined in core/dependencies.py.

    Example flow for upload_documents:
    1. Request arrives at /api/v1/sessions/{id}/documents (POST)
    2. FastAPI calls get_session_store() and get_record_pipeline()
    3. The session is looked up (SessionNotFoundError -> 404)
    4. RecordPipelineService processes every file in upload order
    5. Per-file failures come back as notices in a 200 response
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from medpanel.core.dependencies import (
    get_dashboard_service,
    get_record_pipeline,
    get_session_store,
)
from medpanel.schemas import (
    BatchResult,
    DashboardView,
    SessionCreatedResponse,
    SessionResponse,
    UploadedDocument,
    UploadSource,
)
from medpanel.services.dashboard import DashboardService
from medpanel.services.record_pipeline import RecordPipelineService
from medpanel.services.session_store import SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/sessions",
    tags=["Sessions"],
)


# =============================================================================
# SESSION LIFECYCLE
# =============================================================================

@router.post(
    "",
    response_model=SessionCreatedResponse,
    status_code=201,
    summary="Create a session",
    description="Start an empty in-memory session. The oldest session is evicted when the store is full.",
)
async def create_session(store: SessionStore = Depends(get_session_store)):
    session = store.create()
    return SessionCreatedResponse(session_id=session.session_id, created_at=session.created_at)


@router.get(
    "/{session_id}",
    response_model=SessionResponse,
    summary="Get the session's medical record",
    description="Snapshot of the record, with the provenance of every vital.",
)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    """
    Raises:
    - 404 Not Found: If the session does not exist (SessionNotFoundError)
    """
    session = store.get(session_id)
    return SessionResponse.from_record(session.session_id, session.created_at, session.record)


@router.delete(
    "/{session_id}",
    status_code=204,
    summary="Discard a session",
)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# DOCUMENT UPLOAD
# =============================================================================

@router.post(
    "/{session_id}/documents",
    response_model=BatchResult,
    summary="Upload PDF medical records",
    description="Upload one or more PDFs via multipart/form-data. Files are processed in order; "
                "a file that fails produces a notice and the rest of the batch continues.",
)
async def upload_documents(
    session_id: str,
    files: List[UploadFile] = File(..., description="PDF files, processed in upload order"),
    source: UploadSource = Form(
        UploadSource.PICKER,
        description="'picker' passes every file through; 'drop' skips non-PDF uploads",
    ),
    store: SessionStore = Depends(get_session_store),
    pipeline: RecordPipelineService = Depends(get_record_pipeline),
):
    """
    Upload documents into a session.

    - **files**: One or more files (multipart field name `files`)
    - **source**: `picker` or `drop`

    Returns one result per processed file, one notice per failed file,
    and the names of files skipped by the drop filter.

    Raises:
    - 404 Not Found: If the session does not exist (SessionNotFoundError)
    """
    session = store.get(session_id)

    documents = []
    for upload in files:
        documents.append(UploadedDocument(
            filename=upload.filename or "upload.pdf",
            content_type=upload.content_type,
            data=await upload.read(),
        ))

    return await pipeline.process_batch(session, documents, source=source)


# =============================================================================
# DASHBOARD
# =============================================================================

@router.get(
    "/{session_id}/dashboard",
    response_model=DashboardView,
    summary="Get the dashboard view",
    description="Presentation-ready dashboard data: vitals, summary, risks, medications, "
                "placeholder guidance and chart specs.",
)
async def get_dashboard(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
):
    """
    Raises:
    - 404 Not Found: If the session does not exist (SessionNotFoundError)
    - 409 Conflict: If no document has been processed yet (IncompleteRecordError)
    """
    session = store.get(session_id)
    return dashboard_service.build_view(session.record)


@router.get(
    "/{session_id}/dashboard/html",
    summary="Get the dashboard page",
    description="Self-contained HTML dashboard with Overview, Trends, Medications and Insights tabs.",
)
async def get_dashboard_html(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    dashboard_service: DashboardService = Depends(get_dashboard_service),
):
    session = store.get(session_id)
    view = dashboard_service.build_view(session.record)
    html_content = dashboard_service.render_html(view, session.notices)
    return Response(content=html_content, media_type="text/html")
