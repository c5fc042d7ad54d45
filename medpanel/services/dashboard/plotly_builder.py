"""
Plotly adapter for the dashboard trend charts.

Responsibilities:
- Turning an engine-neutral ChartSpec into a Plotly figure
- Mapping chart axes onto Plotly's y / y2 axes
- Emitting an embeddable HTML fragment per chart

The chart engine is opaque to the rest of the service: callers get a
ChartHandle back from render() and only ever call resize() or to_html()
on it.
"""

import logging
from typing import Any, Dict, List, Optional

import plotly.graph_objects as go
import plotly.io as pio

from medpanel.schemas.dashboard import AxisSpec, ChartSpec, DatasetSpec

logger = logging.getLogger(__name__)

CHART_HEIGHT = 320


class ChartHandle:
    """A rendered chart bound to its container element id."""

    def __init__(self, container_id: str, figure: go.Figure, config: Dict[str, Any]):
        self.container_id = container_id
        self.figure = figure
        self.config = config

    def resize(self, width: Optional[int] = None, height: Optional[int] = None) -> "ChartHandle":
        """
        Fit the chart to new container dimensions.

        With no arguments the chart goes back to autosizing to its container.
        """
        self.figure.update_layout(
            width=width,
            height=height or CHART_HEIGHT,
            autosize=width is None,
        )
        logger.debug(
            "Chart resized",
            extra={"chart": self.container_id, "width": width, "height": height},
        )
        return self

    def to_html(self) -> str:
        """HTML div for this chart. plotly.js itself is not included."""
        return pio.to_html(
            self.figure,
            full_html=False,
            include_plotlyjs=False,
            div_id=self.container_id,
            config=self.config,
        )


class PlotlyBuilder:
    """
    Builder for the three dashboard trend charts.

    Usage:
        builder = PlotlyBuilder()
        handle = builder.render("bp-chart", chart_spec)
        html = handle.to_html()
    """

    def render(self, container_id: str, spec: ChartSpec) -> ChartHandle:
        """Build a figure for the spec and bind it to container_id."""
        axis_refs = self.axis_refs(spec.axes)

        fig = go.Figure()
        for dataset in spec.datasets:
            fig.add_trace(self.create_trace(spec, dataset, axis_refs.get(dataset.axis, "y")))

        self.apply_layout(fig, spec, axis_refs)

        logger.debug(
            "Chart rendered",
            extra={"chart": container_id, "chart_type": spec.chart_type, "traces": len(spec.datasets)},
        )
        return ChartHandle(container_id, fig, self.get_config())

    @staticmethod
    def axis_refs(axes: List[AxisSpec]) -> Dict[str, str]:
        """Map chart axis ids to Plotly axis references, in declaration order."""
        return {
            axis.axis_id: "y" if index == 0 else f"y{index + 1}"
            for index, axis in enumerate(axes)
        }

    def create_trace(self, spec: ChartSpec, dataset: DatasetSpec, yaxis: str):
        """Spline line trace for line charts, grouped bar trace for bar charts."""
        if spec.chart_type == "bar":
            return go.Bar(
                x=spec.labels,
                y=dataset.data,
                name=dataset.label,
                marker=dict(color=dataset.color),
                yaxis=yaxis,
                hovertemplate=f"<b>{dataset.label}</b><br>%{{x}}: %{{y}}<extra></extra>",
            )

        return go.Scatter(
            x=spec.labels,
            y=dataset.data,
            name=dataset.label,
            mode="lines+markers",
            line=dict(color=dataset.color, width=2, shape="spline", smoothing=0.8),
            marker=dict(
                size=7,
                color=dataset.fill_color or dataset.color,
                line=dict(width=2, color=dataset.color),
            ),
            yaxis=yaxis,
            hovertemplate=f"<b>{dataset.label}</b><br>%{{x}}: %{{y:.1f}}<extra></extra>",
        )

    def apply_layout(self, fig: go.Figure, spec: ChartSpec, axis_refs: Dict[str, str]) -> None:
        """Apply axis bounds, bottom legend and the shared chart styling."""
        layout: Dict[str, Any] = dict(
            xaxis=dict(showgrid=False),
            legend=dict(
                orientation="h",
                x=0.5, xanchor="center",
                y=-0.15, yanchor="top",
                font=dict(size=11, color="#424242"),
            ),
            barmode="group",
            hovermode="x unified",
            height=CHART_HEIGHT,
            autosize=True,
            margin=dict(l=50, r=50, t=20, b=60),
            template="plotly_white",
            paper_bgcolor="#FFFFFF",
            plot_bgcolor="#FFFFFF",
        )

        for axis in spec.axes:
            ref = axis_refs[axis.axis_id]
            axis_layout: Dict[str, Any] = dict(
                side=axis.side,
                showgrid=ref == "y",
                gridcolor="rgba(0,0,0,0.06)",
            )
            if axis.min is not None and axis.max is not None:
                axis_layout["range"] = [axis.min, axis.max]
            elif axis.min == 0:
                axis_layout["rangemode"] = "tozero"
            if ref != "y":
                axis_layout["overlaying"] = "y"
            layout[ref.replace("y", "yaxis", 1)] = axis_layout

        fig.update_layout(**layout)

    def get_config(self) -> Dict[str, Any]:
        return {
            "displayModeBar": False,
            "displaylogo": False,
            "responsive": True,
        }
