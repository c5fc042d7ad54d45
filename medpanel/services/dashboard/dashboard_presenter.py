"""
Dashboard presenter - turns a record and its assessment into a DashboardView.

Formatting only. Classification happens in health_classifier, and chart
layout (types, colors, axis bounds) comes from the vital registry.

The insights and recommendation lists are fixed placeholder text and are
flagged as such on the view.
"""
import logging
from datetime import date
from typing import List, Optional

from medpanel.core.datetime_utils import format_for_display, utc_now
from medpanel.core.exceptions import IncompleteRecordError
from medpanel.core.vital_registry import ChartDefinition, get_vital, list_charts
from medpanel.models import HealthAssessment, MedicalRecord, VitalKind
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

logger = logging.getLogger(__name__)

PRESCRIBED_INSTRUCTIONS = "Take as prescribed"

PLACEHOLDER_MEDICATIONS = (
    ("Lisinopril 10mg", "Once daily for blood pressure"),
    ("Metformin 500mg", "Twice daily with meals"),
)

AI_INSIGHTS = (
    (
        "Pattern Recognition",
        "Your blood pressure shows an upward trend over the past 3 months. "
        "Consider lifestyle modifications.",
    ),
    (
        "Medication Adherence",
        "Based on refill patterns, your medication adherence rate is approximately 85%. "
        "Consistent daily intake is recommended.",
    ),
    (
        "Risk Factors",
        "Primary risk factors identified: Elevated blood pressure and borderline cholesterol levels.",
    ),
)

LIFESTYLE_RECOMMENDATIONS = (
    "Reduce sodium intake to less than 2,300mg per day",
    "Engage in 150 minutes of moderate aerobic activity weekly",
    "Maintain a healthy sleep schedule (7-9 hours)",
    "Consider the DASH diet for blood pressure management",
)

PREVENTIVE_CARE = (
    "Annual flu vaccination - Due in October",
    "Blood pressure check - Schedule for next month",
    "Cholesterol screening - Due in 6 months",
    "Diabetes screening - Recommended annually",
)

HEALTH_GOALS = (
    "Reduce blood pressure to below 120/80 mmHg",
    "Lower cholesterol to below 200 mg/dL",
    "Maintain BMI between 18.5-24.9",
    "Achieve 10,000 steps daily",
)


class DashboardPresenter:
    """Builds the presentation model for the dashboard page and JSON endpoint."""

    def present(
        self,
        record: MedicalRecord,
        assessment: HealthAssessment,
        today: Optional[date] = None,
    ) -> DashboardView:
        """
        Format a classified record for display.

        Args:
            record: Record with all four vitals and trend data populated.
            assessment: Classification of the record's current vitals.
            today: Date shown as the check-up and test date. Defaults to today (UTC).

        Raises:
            IncompleteRecordError: If the record is missing vitals or trends.
        """
        if not record.is_complete():
            raise IncompleteRecordError(missing=[kind.value for kind in record.missing_vitals()])

        today = today or utc_now().date()
        today_text = format_for_display(today)

        bp = record.blood_pressure
        bp_text = self.format_blood_pressure(record)
        cholesterol_text = self.format_vital(VitalKind.CHOLESTEROL, record.cholesterol.total)
        glucose_text = self.format_vital(VitalKind.GLUCOSE, record.glucose.value)
        bmi_text = self.format_vital(VitalKind.BMI, record.bmi.value)

        vitals = [
            self._vital_card(VitalKind.BLOOD_PRESSURE, bp_text, bp.provenance.value, assessment.blood_pressure),
            self._vital_card(VitalKind.CHOLESTEROL, cholesterol_text, record.cholesterol.provenance.value),
            self._vital_card(VitalKind.GLUCOSE, glucose_text, record.glucose.provenance.value),
            self._vital_card(VitalKind.BMI, bmi_text, record.bmi.provenance.value, assessment.bmi),
        ]

        health_summary = [
            SummaryItem(
                label="Blood Pressure",
                value=f"{assessment.blood_pressure.label} ({bp_text} mmHg)",
                css_class=assessment.blood_pressure.css_class,
            ),
            SummaryItem(
                label="BMI",
                value=f"{assessment.bmi.label} ({bmi_text})",
                css_class=assessment.bmi.css_class,
            ),
            SummaryItem(label="Last Check-up", value=today_text),
        ]

        recent_tests = [
            TestResultItem(name="Complete Blood Count", result="Normal", date=today_text),
            TestResultItem(name="Lipid Panel", result=f"Cholesterol {cholesterol_text} mg/dL", date=today_text),
            TestResultItem(name="Fasting Glucose", result=f"{glucose_text} mg/dL", date=today_text),
        ]

        risks = [
            RiskItem(condition=condition, level=f"{label.label} Risk", css_class=label.css_class)
            for condition, label in assessment.risks().items()
        ]

        view = DashboardView(
            generated_on=today,
            vitals=vitals,
            health_summary=health_summary,
            recent_tests=recent_tests,
            risks=risks,
            medications=self.present_medications(record.medications),
            insights=[InsightItem(title=title, text=text) for title, text in AI_INSIGHTS],
            recommendations=Recommendations(
                lifestyle=list(LIFESTYLE_RECOMMENDATIONS),
                preventive_care=list(PREVENTIVE_CARE),
                health_goals=list(HEALTH_GOALS),
            ),
            charts=[self.chart_spec(record, chart) for chart in list_charts()],
        )
        logger.debug(
            "Dashboard view built",
            extra={"medications": len(view.medications), "charts": len(view.charts)},
        )
        return view

    # -------------------------------------------------------------------------
    # Formatting helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def format_vital(kind: VitalKind, value: float) -> str:
        return get_vital(kind.value).format_value(value)

    def format_blood_pressure(self, record: MedicalRecord) -> str:
        bp = record.blood_pressure
        return (
            f"{self.format_vital(VitalKind.BLOOD_PRESSURE, bp.systolic)}/"
            f"{self.format_vital(VitalKind.BLOOD_PRESSURE, bp.diastolic)}"
        )

    @staticmethod
    def _vital_card(kind: VitalKind, value: str, provenance: str, status=None) -> VitalCard:
        definition = get_vital(kind.value)
        return VitalCard(
            name=kind.value,
            display_name=definition.display_name,
            value=value,
            unit=definition.unit,
            provenance=provenance,
            status=status.label if status else None,
            css_class=status.css_class if status else None,
        )

    @staticmethod
    def present_medications(medications: List[str]) -> List[MedicationItem]:
        """Extracted medications, or the two placeholders when none were found."""
        if not medications:
            return [
                MedicationItem(name=name, instructions=instructions, is_placeholder=True)
                for name, instructions in PLACEHOLDER_MEDICATIONS
            ]
        return [MedicationItem(name=name, instructions=PRESCRIBED_INSTRUCTIONS) for name in medications]

    @staticmethod
    def chart_spec(record: MedicalRecord, chart: ChartDefinition) -> ChartSpec:
        """Bind one registry chart definition to the record's trend series."""
        series = record.trends.get(chart.series)
        return ChartSpec(
            chart_id=chart.chart_id,
            title=chart.title,
            chart_type=chart.chart_type,
            labels=series.labels,
            datasets=[
                DatasetSpec(
                    label=ds.label,
                    data=series.values(ds.field),
                    color=ds.color,
                    fill_color=ds.fill_color,
                    axis=ds.axis,
                )
                for ds in chart.datasets
            ],
            axes=[
                AxisSpec(axis_id=axis.axis_id, min=axis.min, max=axis.max, side=axis.side)
                for axis in chart.axes
            ],
        )
