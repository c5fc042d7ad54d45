"""
Dashboard package.

This package contains:
- DashboardService: Public orchestration layer for the dashboard page
- DashboardPresenter: Record + assessment -> DashboardView
- PlotlyBuilder / ChartHandle: Plotly-specific chart rendering

Usage:
    from medpanel.services.dashboard import DashboardService

    service = DashboardService()
    view = service.build_view(session.record)
    html = service.render_html(view, session.notices)
"""

from medpanel.services.dashboard.dashboard_presenter import DashboardPresenter
from medpanel.services.dashboard.dashboard_service import DashboardService
from medpanel.services.dashboard.plotly_builder import ChartHandle, PlotlyBuilder

__all__ = [
    "ChartHandle",
    "DashboardPresenter",
    "DashboardService",
    "PlotlyBuilder",
]
