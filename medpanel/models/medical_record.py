"""
Domain models for one in-memory medical record.

A MedicalRecord is created per session, mutated in place by the field
extractor and the sample data synthesizer, and discarded with the session.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun")
TREND_LENGTH = len(MONTH_LABELS)


class VitalKind(str, Enum):
    """Vital signs tracked on a record."""
    BLOOD_PRESSURE = "blood_pressure"
    CHOLESTEROL = "cholesterol"
    GLUCOSE = "glucose"
    BMI = "bmi"


class Provenance(str, Enum):
    """Where a reading came from."""
    EXTRACTED = "extracted"
    SYNTHESIZED = "synthesized"


# =============================================================================
# VITAL READINGS
# =============================================================================

@dataclass
class BloodPressureReading:
    systolic: int
    diastolic: int
    provenance: Provenance = Provenance.EXTRACTED
    observed_at: Optional[datetime] = None
    source_document: Optional[str] = None

    kind = VitalKind.BLOOD_PRESSURE


@dataclass
class CholesterolReading:
    total: int
    provenance: Provenance = Provenance.EXTRACTED
    observed_at: Optional[datetime] = None
    source_document: Optional[str] = None

    kind = VitalKind.CHOLESTEROL


@dataclass
class GlucoseReading:
    value: int
    provenance: Provenance = Provenance.EXTRACTED
    observed_at: Optional[datetime] = None
    source_document: Optional[str] = None

    kind = VitalKind.GLUCOSE


@dataclass
class BmiReading:
    value: float
    provenance: Provenance = Provenance.EXTRACTED
    observed_at: Optional[datetime] = None
    source_document: Optional[str] = None

    kind = VitalKind.BMI


VitalReading = Union[BloodPressureReading, CholesterolReading, GlucoseReading, BmiReading]


# =============================================================================
# TREND SERIES
# =============================================================================

@dataclass
class BloodPressureSample:
    month: str
    systolic: int
    diastolic: int


@dataclass
class WeightSample:
    month: str
    weight: int
    bmi: float


@dataclass
class LabSample:
    month: str
    cholesterol: int
    glucose: int


@dataclass
class TrendSeries:
    """
    A fixed-length monthly series used only for chart display.

    Always exactly six samples labelled Jan..Jun.
    """
    name: str
    samples: List[Union[BloodPressureSample, WeightSample, LabSample]]

    def __post_init__(self) -> None:
        if len(self.samples) != TREND_LENGTH:
            raise ValueError(
                f"Trend series '{self.name}' must have {TREND_LENGTH} samples, got {len(self.samples)}"
            )

    @property
    def labels(self) -> List[str]:
        return [sample.month for sample in self.samples]

    def values(self, field_name: str) -> List[float]:
        """Extract one numeric field across all samples."""
        return [getattr(sample, field_name) for sample in self.samples]


@dataclass
class TrendData:
    blood_pressure: TrendSeries
    weight: TrendSeries
    labs: TrendSeries

    def get(self, name: str) -> TrendSeries:
        return getattr(self, name)


# =============================================================================
# ROOT AGGREGATE
# =============================================================================

@dataclass
class MedicalRecord:
    """Root aggregate for one session's medical data."""
    vitals: Dict[VitalKind, VitalReading] = field(default_factory=dict)
    medications: List[str] = field(default_factory=list)
    # Not populated yet; kept so the record shape matches the dashboard sections.
    lab_results: List[str] = field(default_factory=list)
    conditions: List[str] = field(default_factory=list)
    appointments: List[str] = field(default_factory=list)
    trends: Optional[TrendData] = None

    @property
    def blood_pressure(self) -> Optional[BloodPressureReading]:
        return self.vitals.get(VitalKind.BLOOD_PRESSURE)

    @property
    def cholesterol(self) -> Optional[CholesterolReading]:
        return self.vitals.get(VitalKind.CHOLESTEROL)

    @property
    def glucose(self) -> Optional[GlucoseReading]:
        return self.vitals.get(VitalKind.GLUCOSE)

    @property
    def bmi(self) -> Optional[BmiReading]:
        return self.vitals.get(VitalKind.BMI)

    def set_vital(self, reading: VitalReading) -> None:
        self.vitals[reading.kind] = reading

    def missing_vitals(self) -> List[VitalKind]:
        return [kind for kind in VitalKind if kind not in self.vitals]

    def is_complete(self) -> bool:
        return not self.missing_vitals() and self.trends is not None
