"""
Monthly brightness chart.

Averages brightness per calendar month over the brightness/region filtered
records (never season filtered, all twelve months stay on screen) and lays
out a line, points and month bands. Bands are shown for the months of the
selected seasons. Scales are rebuilt from the container size on every redraw.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import plotly.graph_objects as go

from src.analysis.records import FireRecord
from src.analysis.scales import LinearScale, PointScale, color_scale
from src.filters.seasons import MONTH_NAMES, months_for_seasons

CHART_MARGIN = {"top": 18, "right": 12, "bottom": 48, "left": 36}
FALLBACK_Y_DOMAIN = (300.0, 340.0)
MIN_PLOT_SIZE = 10.0

BAND_OPACITY = 0.16
EMPTY_BAND_COLOR = "steelblue"
EMPTY_BAND_OPACITY = 0.12


def monthly_average(records: Iterable[FireRecord]) -> List[Optional[float]]:
    """
    Mean brightness for each calendar month, January first.

    Records without a usable brightness or date are skipped. A month with no
    contributing records is None.
    """
    sums = [0.0] * 12
    counts = [0] * 12
    for record in records:
        if record.brightness is None or record.month is None:
            continue
        sums[record.month - 1] += record.brightness
        counts[record.month - 1] += 1
    return [s / c if c else None for s, c in zip(sums, counts)]


@dataclass
class MonthBand:
    month: int  # 1-12
    x: float
    width: float
    height: float
    color: str
    opacity: float
    visible: bool


@dataclass
class ChartFrame:
    """Laid out chart in plot-area pixels (origin top-left of the plot area)."""

    width: float
    height: float
    averages: List[Optional[float]]
    y_domain: Tuple[float, float]
    y_ticks: List[float]
    points: List[Tuple[float, Optional[float]]]
    bands: List[MonthBand] = field(default_factory=list)

    def line_segments(self) -> List[List[Tuple[float, float]]]:
        """Connected pieces of the line; None months break it."""
        segments, current = [], []
        for x, y in self.points:
            if y is None:
                if current:
                    segments.append(current)
                current = []
            else:
                current.append((x, y))
        if current:
            segments.append(current)
        return segments


def plot_size(container: Tuple[float, float]) -> Tuple[float, float]:
    """Plot area size for a rendered container size, net of margins."""
    w = container[0] - CHART_MARGIN["left"] - CHART_MARGIN["right"]
    h = container[1] - CHART_MARGIN["top"] - CHART_MARGIN["bottom"]
    return max(MIN_PLOT_SIZE, w), max(MIN_PLOT_SIZE, h)


class AggregateChart:
    """Monthly brightness chart; keeps the last input so resizes can redraw."""

    def __init__(self, container_size: Tuple[float, float]):
        self.container_size = container_size
        self.last_records: Sequence[FireRecord] = ()
        self.last_seasons: frozenset = frozenset()
        self.frame: Optional[ChartFrame] = None

    def redraw(
        self,
        records: Sequence[FireRecord],
        selected_seasons: Iterable[str],
        container_size: Optional[Tuple[float, float]] = None,
    ) -> ChartFrame:
        if container_size is not None:
            self.container_size = container_size
        self.last_records = records
        self.last_seasons = frozenset(selected_seasons)
        self.frame = layout_chart(records, self.last_seasons, self.container_size)
        return self.frame

    def resize(self, container_size: Tuple[float, float]) -> ChartFrame:
        return self.redraw(self.last_records, self.last_seasons, container_size)


def layout_chart(
    records: Sequence[FireRecord],
    selected_seasons: Iterable[str],
    container_size: Tuple[float, float],
) -> ChartFrame:
    width, height = plot_size(container_size)
    averages = monthly_average(records)

    present = [a for a in averages if a is not None]
    lo, hi = (min(present), max(present)) if present else FALLBACK_Y_DOMAIN

    x = PointScale(range(1, 13), (0, width), padding=0.5)
    y = LinearScale((lo, hi), (height, 0)).nice()

    highlighted = months_for_seasons(selected_seasons)
    band_width = width / 12
    bands = []
    for month, avg in zip(range(1, 13), averages):
        if avg is not None:
            color, opacity = color_scale(avg), BAND_OPACITY
        else:
            color, opacity = EMPTY_BAND_COLOR, EMPTY_BAND_OPACITY
        bands.append(
            MonthBand(
                month=month,
                x=x(month) - band_width / 2,
                width=band_width,
                height=height,
                color=color,
                opacity=opacity,
                visible=month in highlighted,
            )
        )

    points = [
        (x(month), y(avg) if avg is not None else None)
        for month, avg in zip(range(1, 13), averages)
    ]

    return ChartFrame(
        width=width,
        height=height,
        averages=averages,
        y_domain=y.domain,
        y_ticks=y.ticks(3),
        points=points,
        bands=bands,
    )


def chart_figure(frame: ChartFrame, container_size: Tuple[float, float]) -> go.Figure:
    """Plotly figure for a laid out chart, drawn in plot-area pixel space."""
    fig = go.Figure()

    for band in frame.bands:
        if not band.visible:
            continue
        fig.add_shape(
            type="rect",
            x0=band.x,
            x1=band.x + band.width,
            y0=0,
            y1=band.height,
            fillcolor=band.color,
            opacity=band.opacity,
            line_width=0,
            layer="below",
        )

    xs = [p[0] for p in frame.points]
    ys = [p[1] for p in frame.points]
    fig.add_trace(
        go.Scatter(
            x=xs,
            y=ys,
            mode="lines+markers",
            connectgaps=False,
            line=dict(color="#ff6b6b", width=2),
            marker=dict(size=6, color="#ff6b6b"),
            customdata=[
                [MONTH_NAMES[i], f"{a:.1f}" if a is not None else "no data"]
                for i, a in enumerate(frame.averages)
            ],
            hovertemplate="%{customdata[0]}: %{customdata[1]}<extra></extra>",
            showlegend=False,
        )
    )

    # The y scale maps brightness to pixels (top = 0); label ticks with values
    y = LinearScale(frame.y_domain, (frame.height, 0))
    fig.update_layout(
        width=container_size[0],
        height=container_size[1],
        margin=dict(
            l=CHART_MARGIN["left"],
            r=CHART_MARGIN["right"],
            t=CHART_MARGIN["top"],
            b=CHART_MARGIN["bottom"],
        ),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color="#ddd", size=10),
        xaxis=dict(
            range=[0, frame.width],
            tickvals=xs,
            ticktext=[str(m) for m in range(1, 13)],
            title="month",
            showgrid=False,
            zeroline=False,
        ),
        yaxis=dict(
            range=[frame.height, 0],
            tickvals=[y(t) for t in frame.y_ticks],
            ticktext=[f"{t:g}" for t in frame.y_ticks],
            title="Brightness",
            showgrid=False,
            zeroline=False,
        ),
    )
    return fig
