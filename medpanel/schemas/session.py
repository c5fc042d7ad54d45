"""
Pydantic schemas for session and record snapshots.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from medpanel.models import MedicalRecord, TrendSeries


class SessionCreatedResponse(BaseModel):
    """Returned when a new session is created."""
    session_id: str = Field(..., description="Opaque session identifier")
    created_at: datetime = Field(..., description="UTC creation time")


class VitalReadingResponse(BaseModel):
    """One vital reading with its provenance."""
    kind: str = Field(..., example="blood_pressure")
    values: Dict[str, float] = Field(..., example={"systolic": 130, "diastolic": 85})
    provenance: str = Field(..., description="'extracted' or 'synthesized'", example="extracted")
    observed_at: Optional[datetime] = None
    source_document: Optional[str] = None


class TrendSeriesResponse(BaseModel):
    name: str = Field(..., example="labs")
    labels: List[str] = Field(..., example=["Jan", "Feb", "Mar", "Apr", "May", "Jun"])
    values: Dict[str, List[float]]


class SessionResponse(BaseModel):
    """Snapshot of a session's medical record."""
    session_id: str
    created_at: datetime
    vitals: List[VitalReadingResponse] = Field(default_factory=list)
    medications: List[str] = Field(default_factory=list)
    lab_results: List[str] = Field(default_factory=list)
    conditions: List[str] = Field(default_factory=list)
    appointments: List[str] = Field(default_factory=list)
    trends: List[TrendSeriesResponse] = Field(default_factory=list)

    @classmethod
    def from_record(cls, session_id: str, created_at: datetime, record: MedicalRecord) -> "SessionResponse":
        """Build a snapshot from the in-memory record."""
        vitals = []
        for kind, reading in record.vitals.items():
            values = {
                name: getattr(reading, name)
                for name in ("systolic", "diastolic", "total", "value")
                if hasattr(reading, name)
            }
            vitals.append(VitalReadingResponse(
                kind=kind.value,
                values=values,
                provenance=reading.provenance.value,
                observed_at=reading.observed_at,
                source_document=reading.source_document,
            ))

        trends = []
        if record.trends is not None:
            for name in ("blood_pressure", "weight", "labs"):
                trends.append(_series_response(record.trends.get(name)))

        return cls(
            session_id=session_id,
            created_at=created_at,
            vitals=vitals,
            medications=list(record.medications),
            lab_results=list(record.lab_results),
            conditions=list(record.conditions),
            appointments=list(record.appointments),
            trends=trends,
        )


def _series_response(series: TrendSeries) -> TrendSeriesResponse:
    fields = [name for name in vars(series.samples[0]) if name != "month"]
    return TrendSeriesResponse(
        name=series.name,
        labels=series.labels,
        values={name: series.values(name) for name in fields},
    )
