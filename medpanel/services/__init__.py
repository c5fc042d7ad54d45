"""
Service layer for business logic.

This module contains the processing stages and their orchestration.

Note: The dashboard package is not re-exported here. Import it directly:
- from medpanel.services.dashboard import DashboardService
"""
from medpanel.services.document_loader import DocumentLoader
from medpanel.services.record_pipeline import RecordPipelineService
from medpanel.services.sample_synthesizer import SampleDataSynthesizer
from medpanel.services.session_store import MedicalSession, SessionStore

__all__ = [
    "DocumentLoader",
    "MedicalSession",
    "RecordPipelineService",
    "SampleDataSynthesizer",
    "SessionStore",
]
