"""
Domain models for MedPanel.

Internal dataclasses; API boundary models live in medpanel.schemas.
"""
from medpanel.models.medical_record import (
    MONTH_LABELS,
    TREND_LENGTH,
    BloodPressureReading,
    BloodPressureSample,
    BmiReading,
    CholesterolReading,
    GlucoseReading,
    LabSample,
    MedicalRecord,
    Provenance,
    TrendData,
    TrendSeries,
    VitalKind,
    VitalReading,
    WeightSample,
)
from medpanel.models.assessment import (
    BloodPressureStatus,
    BmiStatus,
    HealthAssessment,
    RiskLevel,
    StatusLabel,
)

__all__ = [
    "MONTH_LABELS",
    "TREND_LENGTH",
    "BloodPressureReading",
    "BloodPressureSample",
    "BmiReading",
    "CholesterolReading",
    "GlucoseReading",
    "LabSample",
    "MedicalRecord",
    "Provenance",
    "TrendData",
    "TrendSeries",
    "VitalKind",
    "VitalReading",
    "WeightSample",
    # Assessment
    "BloodPressureStatus",
    "BmiStatus",
    "HealthAssessment",
    "RiskLevel",
    "StatusLabel",
]
