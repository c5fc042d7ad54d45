"""
Shared pytest fixtures.

Key patterns:

1. Real PDFs: documents are generated in memory with PyMuPDF, so the
   loader is exercised against the same engine used in production
2. Session Isolation: each test gets a fresh SessionStore
3. DI Override: app.dependency_overrides injects test instances

Fixture Hierarchy:
    session_store → pipeline / dashboard_service → test_app → client
"""
import random
from typing import Iterable, List, Optional

import fitz  # PyMuPDF
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from medpanel.core import dependencies as deps
from medpanel.core.exceptions import setup_exception_handlers
from medpanel.schemas.upload import UploadedDocument
from medpanel.services.dashboard import DashboardService
from medpanel.services.document_loader import DocumentLoader
from medpanel.services.record_pipeline import RecordPipelineService
from medpanel.services.session_store import SessionStore

PDF_CONTENT_TYPE = "application/pdf"

CHECKUP_PAGE = [
    "Annual Checkup Report",
    "Blood Pressure: 130/85",
    "Cholesterol: 210 mg/dL",
    "Glucose: 98 mg/dL",
    "BMI: 24.5",
]


def make_pdf(*pages: Iterable[str]) -> bytes:
    """
    Build a PDF in memory, one page per argument.

    Each page argument is a list of text lines.
    """
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        for index, line in enumerate(lines):
            page.insert_text((72, 72 + index * 18), line, fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


def make_upload(
    filename: str,
    data: bytes,
    content_type: Optional[str] = PDF_CONTENT_TYPE,
) -> UploadedDocument:
    return UploadedDocument(filename=filename, content_type=content_type, data=data)


@pytest.fixture
def checkup_pdf() -> bytes:
    """PDF with all four vitals on one page."""
    return make_pdf(CHECKUP_PAGE)


@pytest.fixture
def medications_pdf() -> bytes:
    """PDF with only a medication list."""
    return make_pdf(["Discharge Summary"], ["Medications: Lisinopril 10mg, Atorvastatin 20mg"])


@pytest.fixture
def blank_pdf() -> bytes:
    """Valid PDF with no recognizable vital-sign text."""
    return make_pdf(["Visit notes", "Patient reports feeling well"])


@pytest.fixture
def corrupt_pdf() -> bytes:
    """Bytes that are not a PDF at all."""
    return b"this is definitely not a pdf document" * 4


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def session_store() -> SessionStore:
    """Fresh, seeded in-memory session store."""
    return SessionStore(max_sessions=10, seed=1234)


@pytest.fixture
def pipeline() -> RecordPipelineService:
    return RecordPipelineService(
        loader=DocumentLoader(timeout=10),
        strict_validation=False,
        max_size=1024 * 1024,
    )


@pytest.fixture
def dashboard_service() -> DashboardService:
    return DashboardService()


@pytest.fixture
def test_app(session_store, pipeline, dashboard_service):
    """
    Create a FastAPI test app with dependency overrides.

    Uses the real routers and exception handlers; only the DI providers
    are replaced with test instances.
    """
    from medpanel.api.routers import health_router, pages_router, sessions_router

    app = FastAPI(title="MedPanel Test")
    setup_exception_handlers(app)

    app.dependency_overrides[deps.get_session_store] = lambda: session_store
    app.dependency_overrides[deps.get_record_pipeline] = lambda: pipeline
    app.dependency_overrides[deps.get_dashboard_service] = lambda: dashboard_service

    app.include_router(pages_router)
    app.include_router(health_router)
    app.include_router(sessions_router)

    yield app

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client for the API."""
    return TestClient(test_app)


def pdf_files(*named: tuple) -> List[tuple]:
    """Build the multipart ``files`` list for TestClient from (name, bytes[, content_type])."""
    files = []
    for item in named:
        name, data = item[0], item[1]
        content_type = item[2] if len(item) > 2 else PDF_CONTENT_TYPE
        files.append(("files", (name, data, content_type)))
    return files
