"""
Service layer for the dashboard page.

Orchestrates classification, presentation and chart rendering:
- health_classifier.classify: derives the assessment from current vitals
- DashboardPresenter: builds the DashboardView
- PlotlyBuilder: renders each trend chart into an HTML fragment

The page is one self-contained HTML document with four tabs (Overview,
Trends, Medications, Insights). plotly.js is loaded from the CDN.
Every string that can come from an uploaded document is HTML-escaped.
"""

import html
import logging
from datetime import date
from string import Template
from typing import Iterable, List, Optional

from plotly.offline import get_plotlyjs_version

from medpanel.models import MedicalRecord
from medpanel.schemas.dashboard import DashboardView
from medpanel.schemas.upload import UserNotice
from medpanel.services.dashboard.dashboard_presenter import DashboardPresenter
from medpanel.services.dashboard.plotly_builder import ChartHandle, PlotlyBuilder
from medpanel.services.health_classifier import classify

logger = logging.getLogger(__name__)

TABS = (
    ("overview", "Overview"),
    ("trends", "Trends"),
    ("medications", "Medications"),
    ("insights", "Insights"),
)

PAGE_STYLE = """
<style>
    * { box-sizing: border-box; }
    body {
        margin: 0;
        padding: 16px;
        background: #FAFAFA;
        color: #1f2937;
        font-family: -apple-system, system-ui, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
        -webkit-font-smoothing: antialiased;
    }
    h1 { font-size: 22px; margin: 0 0 12px; }
    h2 { font-size: 16px; margin: 0 0 8px; }
    .tabs { display: flex; gap: 4px; border-bottom: 1px solid #e5e7eb; margin-bottom: 16px; }
    .tab-btn { border: none; background: none; padding: 8px 14px; cursor: pointer; font-size: 14px; }
    .tab-btn.active { border-bottom: 2px solid #3b82f6; color: #3b82f6; font-weight: 600; }
    .tab-content { display: none; }
    .tab-content.active { display: block; }
    .grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 12px; }
    .card {
        background: white;
        border-radius: 10px;
        box-shadow: 0 1px 4px rgba(0,0,0,0.06);
        padding: 14px;
        margin-bottom: 12px;
    }
    .vital-value { font-size: 24px; font-weight: 600; }
    .vital-unit { color: #6b7280; font-size: 12px; }
    .provenance { font-size: 11px; color: #9ca3af; text-transform: uppercase; }
    .row { display: flex; justify-content: space-between; padding: 4px 0; }
    .health-good, .risk-low { color: #10b981; }
    .health-warning, .risk-medium { color: #f59e0b; }
    .health-danger, .risk-high { color: #ef4444; }
    .notices { background: #fef2f2; border: 1px solid #fecaca; color: #991b1b; }
    .placeholder-note { font-size: 11px; color: #9ca3af; }
    .chart { width: 100%; }
    @media (max-width: 480px) {
        body { padding: 6px; }
        .vital-value { font-size: 20px; }
    }
</style>
"""

TAB_SCRIPT = """
<script>
(function() {
    function showTab(name) {
        document.querySelectorAll('.tab-btn').forEach(function(btn) {
            btn.classList.toggle('active', btn.dataset.tab === name);
        });
        document.querySelectorAll('.tab-content').forEach(function(panel) {
            panel.classList.toggle('active', panel.id === name);
        });
        // Charts drawn inside a hidden tab have zero size until resized
        if (name === 'trends' && window.Plotly) {
            document.querySelectorAll('#trends .js-plotly-plot').forEach(function(el) {
                Plotly.Plots.resize(el);
            });
        }
    }
    document.querySelectorAll('.tab-btn').forEach(function(btn) {
        btn.addEventListener('click', function() { showTab(btn.dataset.tab); });
    });
})();
</script>
"""

DASHBOARD_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Medical Dashboard</title>
<script src="https://cdn.plot.ly/plotly-$plotly_version.min.js"></script>
$style
</head>
<body>
<h1>Medical Dashboard</h1>
$notices
<nav class="tabs">$tab_buttons</nav>
<section id="overview" class="tab-content active">
  <div class="grid">$vitals</div>
  <div class="grid">
    <div class="card"><h2>Health Summary</h2>$summary</div>
    <div class="card"><h2>Recent Tests</h2>$tests</div>
    <div class="card"><h2>Risk Assessment</h2>$risks</div>
  </div>
</section>
<section id="trends" class="tab-content">$charts</section>
<section id="medications" class="tab-content">
  <div class="card"><h2>Current Medications</h2>$medications</div>
</section>
<section id="insights" class="tab-content">
  <p class="placeholder-note">General guidance, not computed from your records.</p>
  <div class="card"><h2>AI Insights</h2>$insights</div>
  <div class="grid">
    <div class="card"><h2>Lifestyle Recommendations</h2>$lifestyle</div>
    <div class="card"><h2>Preventive Care</h2>$preventive</div>
    <div class="card"><h2>Health Goals</h2>$goals</div>
  </div>
</section>
$script
</body>
</html>
""")

UPLOAD_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>Medical Dashboard - Upload</title>
$style
<style>
    #drop-zone {
        border: 2px dashed #cbd5e1;
        border-radius: 10px;
        padding: 40px;
        text-align: center;
        background: white;
    }
    #drop-zone.dragover { border-color: #3b82f6; background: #eff6ff; }
</style>
</head>
<body>
<h1>Upload Medical Records</h1>
<div id="drop-zone">
  <p>Drag and drop PDF files here, or</p>
  <input type="file" id="file-input" multiple accept=".pdf">
</div>
<p class="placeholder-note">Values not found in your documents are filled with sample data.</p>
<script>
(function() {
    var apiBase = '$api_prefix';

    async function upload(files, source) {
        var created = await fetch(apiBase + '/sessions', {method: 'POST'});
        var session = await created.json();
        var form = new FormData();
        Array.from(files).forEach(function(file) { form.append('files', file); });
        form.append('source', source);
        var response = await fetch(apiBase + '/sessions/' + session.session_id + '/documents', {
            method: 'POST',
            body: form
        });
        var batch = await response.json();
        (batch.notices || []).forEach(function(notice) { alert(notice.message); });
        if (batch.documents && batch.documents.some(function(d) { return d.status === 'processed'; })) {
            window.location = apiBase + '/sessions/' + session.session_id + '/dashboard/html';
        }
    }

    var zone = document.getElementById('drop-zone');
    document.getElementById('file-input').addEventListener('change', function(e) {
        upload(e.target.files, 'picker');
    });
    zone.addEventListener('dragover', function(e) { e.preventDefault(); zone.classList.add('dragover'); });
    zone.addEventListener('dragleave', function() { zone.classList.remove('dragover'); });
    zone.addEventListener('drop', function(e) {
        e.preventDefault();
        zone.classList.remove('dragover');
        upload(e.dataTransfer.files, 'drop');
    });
})();
</script>
</body>
</html>
""")


def _e(value) -> str:
    return html.escape(str(value), quote=True)


def _list(items: Iterable[str]) -> str:
    return "<ul>" + "".join(f"<li>{_e(item)}</li>" for item in items) + "</ul>"


def _row(label: str, value: str, css_class: Optional[str] = None) -> str:
    cls = f' class="{_e(css_class)}"' if css_class else ""
    return f'<div class="row"><span>{_e(label)}</span><span{cls}>{_e(value)}</span></div>'


# =============================================================================
# DASHBOARD SERVICE
# =============================================================================

class DashboardService:
    """
    Service for building and rendering the dashboard.

    Combines:
    - Classification via health_classifier
    - Presentation via DashboardPresenter
    - Chart rendering via PlotlyBuilder
    """

    def __init__(
        self,
        presenter: Optional[DashboardPresenter] = None,
        plotly_builder: Optional[PlotlyBuilder] = None,
        api_prefix: str = "/api/v1",
    ):
        self._presenter = presenter or DashboardPresenter()
        self._builder = plotly_builder or PlotlyBuilder()
        self.api_prefix = api_prefix

    def build_view(self, record: MedicalRecord, today: Optional[date] = None) -> DashboardView:
        """
        Classify the record and build its dashboard view.

        Raises:
            IncompleteRecordError: If no document has been processed yet.
        """
        assessment = classify(record.vitals)
        return self._presenter.present(record, assessment, today=today)

    def render_charts(self, view: DashboardView) -> List[ChartHandle]:
        return [self._builder.render(chart.chart_id, chart) for chart in view.charts]

    def render_html(self, view: DashboardView, notices: Iterable[UserNotice] = ()) -> str:
        """Generate the complete dashboard page."""
        charts = self.render_charts(view)
        notices = list(notices)

        page = DASHBOARD_TEMPLATE.substitute(
            plotly_version=get_plotlyjs_version(),
            style=PAGE_STYLE,
            notices=self._render_notices(notices),
            tab_buttons="".join(
                f'<button class="tab-btn{" active" if tab == "overview" else ""}" data-tab="{tab}">{label}</button>'
                for tab, label in TABS
            ),
            vitals="".join(
                '<div class="card">'
                f'<div>{_e(card.display_name)}</div>'
                f'<div class="vital-value">{_e(card.value)} <span class="vital-unit">{_e(card.unit)}</span></div>'
                + (f'<div class="{_e(card.css_class)}">{_e(card.status)}</div>' if card.status else "")
                + f'<div class="provenance">{_e(card.provenance)}</div>'
                "</div>"
                for card in view.vitals
            ),
            summary="".join(_row(item.label, item.value, item.css_class) for item in view.health_summary),
            tests="".join(_row(test.name, f"{test.result} ({test.date})") for test in view.recent_tests),
            risks="".join(_row(risk.condition, risk.level, risk.css_class) for risk in view.risks),
            charts="".join(
                f'<div class="card"><h2>{_e(chart.title)}</h2><div class="chart">{handle.to_html()}</div></div>'
                for chart, handle in zip(view.charts, charts)
            ),
            medications="".join(
                _row(med.name, med.instructions)
                + ('<div class="placeholder-note">Sample medication</div>' if med.is_placeholder else "")
                for med in view.medications
            ),
            insights="".join(
                f"<div><strong>{_e(insight.title)}</strong><p>{_e(insight.text)}</p></div>"
                for insight in view.insights
            ),
            lifestyle=_list(view.recommendations.lifestyle),
            preventive=_list(view.recommendations.preventive_care),
            goals=_list(view.recommendations.health_goals),
            script=TAB_SCRIPT,
        )
        logger.info(
            "Dashboard rendered",
            extra={"charts": len(charts), "notices": len(notices), "bytes": len(page)},
        )
        return page

    def render_upload_page(self) -> str:
        """Generate the upload page with the file picker and drop zone."""
        return UPLOAD_TEMPLATE.substitute(style=PAGE_STYLE, api_prefix=_e(self.api_prefix))

    @staticmethod
    def _render_notices(notices: List[UserNotice]) -> str:
        if not notices:
            return ""
        items = "".join(
            f"<li>{_e(notice.filename)}: {_e(notice.message)}</li>" for notice in notices
        )
        return f'<div class="card notices" role="alert"><ul>{items}</ul></div>'
