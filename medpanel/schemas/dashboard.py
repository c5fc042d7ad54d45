"""
Pydantic schemas for the dashboard view.

The view is presentation-ready: every value is already formatted, and
static placeholder sections are flagged so clients can tell them apart
from computed data.
"""
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class VitalCard(BaseModel):
    """One vital shown on the Overview tab."""
    name: str = Field(..., description="Canonical vital name", example="blood_pressure")
    display_name: str = Field(..., example="Blood Pressure")
    value: str = Field(..., description="Formatted value", example="130/85")
    unit: str = Field(..., example="mmHg")
    provenance: str = Field(..., description="'extracted' or 'synthesized'", example="extracted")
    status: Optional[str] = Field(None, description="Classification label, if any", example="Elevated")
    css_class: Optional[str] = Field(None, description="Severity class for the status", example="health-warning")


class SummaryItem(BaseModel):
    label: str = Field(..., example="Blood Pressure")
    value: str = Field(..., example="Elevated (130/85 mmHg)")
    css_class: Optional[str] = Field(None, example="health-warning")


class TestResultItem(BaseModel):
    name: str = Field(..., example="Lipid Panel")
    result: str = Field(..., example="Cholesterol 210 mg/dL")
    date: str = Field(..., example="Oct 19, 2026")


class RiskItem(BaseModel):
    condition: str = Field(..., example="Cardiovascular Disease")
    level: str = Field(..., example="Medium Risk")
    css_class: str = Field(..., example="risk-medium")


class MedicationItem(BaseModel):
    name: str = Field(..., example="Lisinopril 10mg")
    instructions: str = Field(..., example="Take as prescribed")
    is_placeholder: bool = Field(False, description="True when shown because no medication was extracted")


class InsightItem(BaseModel):
    title: str = Field(..., example="Pattern Recognition")
    text: str


class Recommendations(BaseModel):
    lifestyle: List[str] = Field(default_factory=list)
    preventive_care: List[str] = Field(default_factory=list)
    health_goals: List[str] = Field(default_factory=list)


class AxisSpec(BaseModel):
    axis_id: str = Field(..., example="y")
    min: Optional[float] = Field(None, example=60)
    max: Optional[float] = Field(None, example=160)
    side: str = Field("left", example="left")


class DatasetSpec(BaseModel):
    label: str = Field(..., example="Systolic")
    data: List[float]
    color: str = Field(..., example="#ef4444")
    fill_color: Optional[str] = Field(None, example="rgba(239, 68, 68, 0.1)")
    axis: str = Field("y", example="y")


class ChartSpec(BaseModel):
    """Engine-neutral description of one trend chart."""
    chart_id: str = Field(..., example="bp-chart")
    title: str = Field(..., example="Blood Pressure")
    chart_type: str = Field(..., description="'line' or 'bar'", example="line")
    labels: List[str] = Field(..., example=["Jan", "Feb", "Mar", "Apr", "May", "Jun"])
    datasets: List[DatasetSpec]
    axes: List[AxisSpec]

    def get_axis(self, axis_id: str) -> Optional[AxisSpec]:
        for axis in self.axes:
            if axis.axis_id == axis_id:
                return axis
        return None


class DashboardView(BaseModel):
    """Everything the dashboard page renders."""
    generated_on: date
    vitals: List[VitalCard]
    health_summary: List[SummaryItem]
    recent_tests: List[TestResultItem]
    risks: List[RiskItem]
    medications: List[MedicationItem]
    insights: List[InsightItem]
    recommendations: Recommendations
    charts: List[ChartSpec]
    static_content_computed: bool = Field(
        False,
        description="Insights and recommendations are fixed placeholder text, not derived from the record",
    )
