"""
Tests for the dashboard package.

Tests cover:
- DashboardPresenter: display strings, static sections, placeholder medications
- PlotlyBuilder / ChartHandle: trace types, axes, legend, resize
- DashboardService: full HTML page, escaping, notice banner
"""
import random
from datetime import date

import plotly.graph_objects as go
import pytest

from medpanel.core.exceptions import IncompleteRecordError
from medpanel.models import (
    BloodPressureReading,
    BmiReading,
    CholesterolReading,
    GlucoseReading,
    MedicalRecord,
)
from medpanel.schemas.upload import GENERIC_ERROR_MESSAGE, UserNotice
from medpanel.services.dashboard import DashboardPresenter, DashboardService, PlotlyBuilder
from medpanel.services.health_classifier import classify
from medpanel.services.sample_synthesizer import SampleDataSynthesizer

TODAY = date(2025, 3, 5)


@pytest.fixture
def record():
    """Complete record with known vitals and seeded trends."""
    record = MedicalRecord()
    record.set_vital(BloodPressureReading(systolic=130, diastolic=85))
    record.set_vital(CholesterolReading(total=210))
    record.set_vital(GlucoseReading(value=98))
    record.set_vital(BmiReading(value=24.46))
    SampleDataSynthesizer(random.Random(8)).generate_trends(record)
    return record


@pytest.fixture
def view(record):
    return DashboardPresenter().present(record, classify(record.vitals), today=TODAY)


# =============================================================================
# TESTS: DashboardPresenter
# =============================================================================

class TestDashboardPresenter:

    def test_vital_cards(self, view):
        cards = {card.name: card for card in view.vitals}
        assert cards["blood_pressure"].value == "130/85"
        assert cards["blood_pressure"].status == "Elevated"
        assert cards["cholesterol"].value == "210"
        assert cards["glucose"].value == "98"
        assert cards["bmi"].value == "24.5"
        assert cards["bmi"].status == "Normal"
        assert cards["bmi"].provenance == "extracted"

    def test_health_summary(self, view):
        assert [(i.label, i.value) for i in view.health_summary] == [
            ("Blood Pressure", "Elevated (130/85 mmHg)"),
            ("BMI", "Normal (24.5)"),
            ("Last Check-up", "Mar 05, 2025"),
        ]

    def test_recent_tests(self, view):
        assert [(t.name, t.result, t.date) for t in view.recent_tests] == [
            ("Complete Blood Count", "Normal", "Mar 05, 2025"),
            ("Lipid Panel", "Cholesterol 210 mg/dL", "Mar 05, 2025"),
            ("Fasting Glucose", "98 mg/dL", "Mar 05, 2025"),
        ]

    def test_risks(self, view):
        assert [(r.condition, r.level, r.css_class) for r in view.risks] == [
            ("Cardiovascular Disease", "Medium Risk", "risk-medium"),
            ("Diabetes", "Low Risk", "risk-low"),
            ("Stroke", "Medium Risk", "risk-medium"),
        ]

    def test_placeholder_medications_when_none_extracted(self, view):
        assert [(m.name, m.instructions, m.is_placeholder) for m in view.medications] == [
            ("Lisinopril 10mg", "Once daily for blood pressure", True),
            ("Metformin 500mg", "Twice daily with meals", True),
        ]

    def test_extracted_medications(self, record):
        record.medications.extend(["Aspirin 81mg", "Atorvastatin"])
        view = DashboardPresenter().present(record, classify(record.vitals), today=TODAY)
        assert [(m.name, m.instructions, m.is_placeholder) for m in view.medications] == [
            ("Aspirin 81mg", "Take as prescribed", False),
            ("Atorvastatin", "Take as prescribed", False),
        ]

    def test_static_content_flagged(self, view):
        assert view.static_content_computed is False
        assert [i.title for i in view.insights] == [
            "Pattern Recognition", "Medication Adherence", "Risk Factors",
        ]
        assert len(view.recommendations.lifestyle) == 4
        assert view.recommendations.preventive_care[0] == "Annual flu vaccination - Due in October"
        assert view.recommendations.health_goals[-1] == "Achieve 10,000 steps daily"

    def test_chart_specs_bound_to_trends(self, record, view):
        bp, weight, labs = view.charts
        assert bp.labels == ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]
        assert bp.datasets[0].data == record.trends.blood_pressure.values("systolic")
        assert weight.get_axis("y1").side == "right"
        assert labs.chart_type == "bar"
        assert [len(ds.data) for chart in view.charts for ds in chart.datasets] == [6] * 6

    def test_incomplete_record(self):
        record = MedicalRecord()
        record.set_vital(GlucoseReading(value=90))
        with pytest.raises(IncompleteRecordError):
            DashboardPresenter().present(record, None, today=TODAY)


# =============================================================================
# TESTS: PlotlyBuilder / ChartHandle
# =============================================================================

class TestPlotlyBuilder:

    def test_line_chart(self, view):
        handle = PlotlyBuilder().render("bp-chart", view.charts[0])
        fig = handle.figure

        assert handle.container_id == "bp-chart"
        assert [type(t) for t in fig.data] == [go.Scatter, go.Scatter]
        assert [t.name for t in fig.data] == ["Systolic", "Diastolic"]
        assert fig.data[0].line.shape == "spline"
        assert fig.data[0].line.color == "#ef4444"
        assert tuple(fig.layout.yaxis.range) == (60, 160)
        assert fig.layout.legend.orientation == "h"
        assert fig.layout.legend.yanchor == "top"

    def test_secondary_axis(self, view):
        fig = PlotlyBuilder().render("weight-chart", view.charts[1]).figure

        assert fig.data[0].yaxis == "y"
        assert fig.data[1].yaxis == "y2"
        assert fig.layout.yaxis2.overlaying == "y"
        assert fig.layout.yaxis2.side == "right"
        assert tuple(fig.layout.yaxis2.range) == (20, 30)

    def test_bar_chart_from_zero(self, view):
        fig = PlotlyBuilder().render("labs-chart", view.charts[2]).figure

        assert [type(t) for t in fig.data] == [go.Bar, go.Bar]
        assert fig.layout.barmode == "group"
        assert fig.layout.yaxis.rangemode == "tozero"

    def test_resize(self, view):
        handle = PlotlyBuilder().render("bp-chart", view.charts[0])

        assert handle.resize(width=640, height=400) is handle
        assert handle.figure.layout.width == 640
        assert handle.figure.layout.height == 400
        assert handle.figure.layout.autosize is False

        handle.resize()
        assert handle.figure.layout.width is None
        assert handle.figure.layout.autosize is True

    def test_to_html_fragment(self, view):
        fragment = PlotlyBuilder().render("labs-chart", view.charts[2]).to_html()

        assert 'id="labs-chart"' in fragment
        assert "<html" not in fragment
        assert "Plotly.newPlot" in fragment


# =============================================================================
# TESTS: DashboardService
# =============================================================================

class TestDashboardService:

    def test_build_view_requires_data(self):
        with pytest.raises(IncompleteRecordError):
            DashboardService().build_view(MedicalRecord())

    def test_page_has_tabs_and_charts(self, view):
        page = DashboardService().render_html(view)

        for tab in ("overview", "trends", "medications", "insights"):
            assert f'data-tab="{tab}"' in page
            assert f'id="{tab}"' in page
        for chart_id in ("bp-chart", "weight-chart", "labs-chart"):
            assert f'id="{chart_id}"' in page
        assert "cdn.plot.ly/plotly-" in page
        assert "Plotly.Plots.resize" in page
        assert 'role="alert"' not in page

    def test_document_text_escaped(self, record):
        record.medications.append("<script>alert('x')</script>")
        service = DashboardService()
        page = service.render_html(service.build_view(record, today=TODAY))

        assert "<script>alert('x')</script>" not in page
        assert "&lt;script&gt;alert(&#x27;x&#x27;)&lt;/script&gt;" in page

    def test_notice_banner(self, view):
        notice = UserNotice(
            filename="bad<1>.pdf",
            message=GENERIC_ERROR_MESSAGE,
            detail="no objects found",
            error_type="ExtractionError",
        )
        page = DashboardService().render_html(view, [notice])

        assert 'role="alert"' in page
        assert "bad&lt;1&gt;.pdf" in page
        assert GENERIC_ERROR_MESSAGE in page

    def test_upload_page(self):
        page = DashboardService().render_upload_page()

        assert 'id="drop-zone"' in page
        assert 'type="file"' in page
        assert "'/api/v1'" in page
        assert "'drop'" in page and "'picker'" in page
