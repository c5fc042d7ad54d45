"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from medpanel.schemas.upload import (
    GENERIC_ERROR_MESSAGE,
    BatchResult,
    DocumentResult,
    UploadedDocument,
    UploadSource,
    UserNotice,
)
from medpanel.schemas.session import (
    SessionCreatedResponse,
    SessionResponse,
    TrendSeriesResponse,
    VitalReadingResponse,
)
from medpanel.schemas.dashboard import (
    AxisSpec,
    ChartSpec,
    DashboardView,
    DatasetSpec,
    InsightItem,
    MedicationItem,
    Recommendations,
    RiskItem,
    SummaryItem,
    TestResultItem,
    VitalCard,
)

__all__ = [
    # Upload schemas
    "GENERIC_ERROR_MESSAGE",
    "BatchResult",
    "DocumentResult",
    "UploadedDocument",
    "UploadSource",
    "UserNotice",
    # Session schemas
    "SessionCreatedResponse",
    "SessionResponse",
    "TrendSeriesResponse",
    "VitalReadingResponse",
    # Dashboard schemas
    "AxisSpec",
    "ChartSpec",
    "DashboardView",
    "DatasetSpec",
    "InsightItem",
    "MedicationItem",
    "Recommendations",
    "RiskItem",
    "SummaryItem",
    "TestResultItem",
    "VitalCard",
]
