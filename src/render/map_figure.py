"""Plotly figure for the map: graticule, inset boxes, region boundaries, fire points and viewport."""

from typing import Dict, List, Optional, Tuple

import plotly.graph_objects as go

from src.render.fire_layer import PointMark
from src.render.tooltip import on_hover_record
from src.render.viewport import REGION_STROKE, ViewportTransform
from src.utils import log

MAP_BACKGROUND = "#0e0e10"
INSET_FILL = "#141417"
GRATICULE_COLOR = "#2a2a2e"
LABEL_COLOR = "#777"


class RegionPaths:
    """
    Projected outlines of every region plus the static map furniture
    (graticule, its labels and inset boxes), computed once per dataset.
    """

    def __init__(self, regions, projection):
        self.paths: Dict[str, List[List[Tuple[float, float]]]] = {}
        for region in regions:
            try:
                self.paths[region.name] = projection.path(region.geometry)
            except Exception as e:
                log(f"⚠️  Cannot draw region {region.name!r}: {e}")

        # Projections without insets or a grid simply draw neither
        self.inset_boxes = dict(getattr(projection, "inset_boxes", {}))
        self.graticule = projection.graticule() if hasattr(projection, "graticule") else []
        self.graticule_labels = (
            projection.graticule_labels() if hasattr(projection, "graticule_labels") else []
        )

    def trace_for(self, name: str, fill: str) -> go.Scatter:
        xs: List[Optional[float]] = []
        ys: List[Optional[float]] = []
        for ring in self.paths[name]:
            xs += [p[0] for p in ring] + [None]
            ys += [p[1] for p in ring] + [None]
        return go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            fill="toself",
            fillcolor=fill,
            line=dict(color=REGION_STROKE, width=0.8),
            name=name,
            hoverinfo="text",
            hovertext=name,
            showlegend=False,
        )

    def graticule_trace(self) -> go.Scatter:
        xs: List[Optional[float]] = []
        ys: List[Optional[float]] = []
        for line in self.graticule:
            for p in line:
                xs.append(p[0] if p is not None else None)
                ys.append(p[1] if p is not None else None)
            xs.append(None)
            ys.append(None)
        return go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            line=dict(color=GRATICULE_COLOR, width=0.6),
            hoverinfo="skip",
            name="graticule",
            showlegend=False,
        )

    def labels_trace(self) -> go.Scatter:
        return go.Scatter(
            x=[label[0] for label in self.graticule_labels],
            y=[label[1] for label in self.graticule_labels],
            text=[label[2] for label in self.graticule_labels],
            mode="text",
            textfont=dict(color=LABEL_COLOR, size=9),
            hoverinfo="skip",
            name="graticule labels",
            showlegend=False,
        )


def points_trace(marks: List[PointMark], zoom: float = 1.0) -> go.Scatter:
    """
    All fire marks as one marker trace; hover shows the tooltip fields.

    Marker sizes grow with ``zoom`` so points scale with the rest of the map.
    """
    customdata = []
    for mark in marks:
        fields = on_hover_record(mark.record)
        customdata.append(
            [
                fields["brightness"],
                fields["formatted_date"],
                fields["day_night"],
                fields["region_label"],
                fields["lat"] or "unknown",
                fields["lon"] or "unknown",
            ]
        )

    return go.Scatter(
        x=[m.x for m in marks],
        y=[m.y for m in marks],
        mode="markers",
        marker=dict(
            size=[2 * m.target_radius * zoom for m in marks],
            color=[m.color for m in marks],
            opacity=[m.opacity for m in marks],
            line_width=0,
        ),
        customdata=customdata,
        hovertemplate=(
            "<b>Brightness:</b> %{customdata[0]}<br>"
            "<b>Date:</b> %{customdata[1]}<br>"
            "<b>Detected:</b> %{customdata[2]}<br>"
            "<b>State:</b> %{customdata[3]}<br>"
            "<b>Lat:</b> %{customdata[4]} <b>Lon:</b> %{customdata[5]}"
            "<extra></extra>"
        ),
        name="fires",
        showlegend=False,
    )


def map_figure(
    region_paths: RegionPaths,
    region_styles: Dict[str, str],
    marks: List[PointMark],
    transform: ViewportTransform,
    size: Tuple[int, int],
    title: Optional[str] = None,
) -> go.Figure:
    """
    Compose the map. The viewport transform is applied by narrowing the axis
    ranges to the part of map space it brings into view.
    """
    width, height = size
    fig = go.Figure()

    for x0, y0, x1, y1 in region_paths.inset_boxes.values():
        fig.add_shape(
            type="rect",
            x0=x0,
            y0=y0,
            x1=x1,
            y1=y1,
            fillcolor=INSET_FILL,
            line=dict(color=GRATICULE_COLOR, width=1),
            layer="below",
        )

    if region_paths.graticule:
        fig.add_trace(region_paths.graticule_trace())
    if region_paths.graticule_labels:
        fig.add_trace(region_paths.labels_trace())

    for name, fill in region_styles.items():
        if name in region_paths.paths:
            fig.add_trace(region_paths.trace_for(name, fill))

    fig.add_trace(points_trace(marks, zoom=transform.scale))

    (x0, x1), (y0, y1) = transform.visible_window(width, height)
    fig.update_layout(
        width=width,
        height=height,
        title=title,
        margin=dict(l=0, r=0, t=30 if title else 0, b=0),
        paper_bgcolor=MAP_BACKGROUND,
        plot_bgcolor=MAP_BACKGROUND,
        font=dict(color="#eee"),
        hoverlabel=dict(bgcolor="rgba(30,30,35,0.95)"),
        xaxis=dict(range=[x0, x1], visible=False),
        yaxis=dict(range=[y1, y0], visible=False, scaleanchor="x"),
        dragmode=False,
    )
    return fig
