"""
Gradio Web Interface for the Wildfire Hotspot Map

Interactive map of satellite fire hotspots over the US with season,
brightness and state filters, a monthly brightness chart and a short
guided narration.

The datasets are loaded once per app and shared read-only; each browser
client gets its own session (filters, selection, zoom, narration) held in
``gr.State``. Handlers are coroutines, so every event runs on the event loop
one at a time.
"""

import gradio as gr
import plotly.graph_objects as go
import sys
from pathlib import Path
from typing import Optional

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.analysis.buckets import snap_to_notch
from src.analysis.monthly_chart import chart_figure
from src.config import FIRES_GEOJSON, REGIONS_GEOJSON
from src.filters.seasons import SEASON_NAMES
from src.render.map_figure import RegionPaths, map_figure
from src.session import LOADING_MESSAGE, FireMapSession, MapData
from src.story import Narration
from src.utils import log


def create_empty_map(message: str, height: int = 600) -> go.Figure:
    """Create an empty map with a message."""
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        xref="paper",
        yref="paper",
        x=0.5,
        y=0.5,
        showarrow=False,
        font=dict(size=20),
    )
    fig.update_layout(
        height=height,
        xaxis=dict(visible=False),
        yaxis=dict(visible=False),
    )
    return fig


class MapView:
    """One client's page: its session, narration and zoom flag."""

    def __init__(self, session: FireMapSession, region_paths: RegionPaths):
        self.session = session
        self.region_paths = region_paths
        self.narration = Narration()
        self.zoomed = False

    def map(self) -> go.Figure:
        try:
            s = self.session
            s.layer.finish_transitions()
            return map_figure(
                self.region_paths,
                s.region_styles(),
                s.layer.visible_marks(),
                s.viewport.transform,
                s.map_size,
                title=f"{len(s.visible):,} fire detections",
            )
        except Exception as e:
            log(f"[MAP] Error rendering map: {e}")
            return create_empty_map("Error rendering map. Check terminal for details.")

    def chart(self) -> go.Figure:
        try:
            chart = self.session.chart
            return chart_figure(chart.frame, chart.container_size)
        except Exception as e:
            log(f"[CHART] Error rendering chart: {e}")
            return create_empty_map("Chart unavailable", height=220)

    def swatch(self) -> str:
        s = self.session
        return (
            f"<div style='display:flex;gap:8px;align-items:center'>"
            f"<span style='width:14px;height:14px;border-radius:50%;"
            f"background:{s.slider_color};display:inline-block'></span>"
            f"<span>Brightness ≥ {s.state.brightness_threshold}</span></div>"
        )

    def outputs(self):
        """Values for every view component, in ``view_components`` order."""
        s = self.session
        with s.lock:
            has_selection = bool(s.state.selected_regions)
            return (
                self.map(),
                self.chart(),
                f"**{s.time_frame_label}**",
                s.regions_label,
                self.swatch(),
                gr.update(visible=has_selection),
                gr.update(visible=has_selection and not self.zoomed),
                gr.update(visible=has_selection and self.zoomed),
            )

    def narration_outputs(self):
        narration = self.narration
        step = narration.current
        return (
            gr.update(visible=narration.visible),
            f"### {step.title}\n*{step.subtitle}*\n\n{step.text}",
            narration.indicator,
            gr.update(interactive=narration.can_go_back),
            gr.update(value=narration.next_label),
        )


def create_gradio_app(
    fires_path: str = FIRES_GEOJSON, regions_path: str = REGIONS_GEOJSON
):
    """Create and configure the Gradio interface."""

    data = MapData.from_files(fires_path, regions_path)
    region_paths = RegionPaths(data.regions, data.projection)
    notches = data.buckets.notches
    region_names = sorted(r.name for r in data.regions)

    custom_css = """
    .gradio-container {
        font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    }
    #narration-box {
        border-left: 4px solid #ff6b6b;
        padding: 12px;
    }
    """

    with gr.Blocks(css=custom_css, title="How The Country Burns") as app:
        gr.Markdown("""
        # 🔥 How The Country Burns

        An interactive exploration of U.S. wildfire hotspots from NASA satellite data
        """)

        view_state = gr.State(None)
        loading_banner = gr.Markdown(LOADING_MESSAGE, visible=False)

        with gr.Row():
            with gr.Column(scale=1):
                with gr.Group(visible=False, elem_id="narration-box") as narration_box:
                    narration_text = gr.Markdown()
                    with gr.Row():
                        back_btn = gr.Button("←", size="sm")
                        next_btn = gr.Button("→", size="sm", variant="primary")
                        step_indicator = gr.Markdown()
                start_btn = gr.Button("Start", variant="primary")

                gr.Markdown("### Filters")
                season_boxes = gr.CheckboxGroup(
                    choices=list(SEASON_NAMES),
                    value=list(SEASON_NAMES),
                    label="Seasons",
                )
                brightness_slider = gr.Slider(
                    minimum=notches[0],
                    maximum=notches[-1],
                    step=notches[1] - notches[0] if len(notches) > 1 else 1,
                    value=notches[0],
                    label="Minimum brightness",
                )
                slider_swatch = gr.HTML()
                state_picker = gr.Dropdown(
                    choices=region_names,
                    value=None,
                    label="Click a state to select or deselect it",
                )
                with gr.Row():
                    reset_btn = gr.Button("Reset selection", size="sm", visible=False)
                    zoom_in_btn = gr.Button("Zoom In", size="sm", visible=False)
                    zoom_out_btn = gr.Button("Zoom Out", size="sm", visible=False)

                gr.Markdown("### Brightness by month")
                chart_plot = gr.Plot(show_label=False)

            with gr.Column(scale=3):
                time_subtitle = gr.Markdown()
                states_subtitle = gr.Markdown()
                map_plot = gr.Plot(show_label=False)

        view_components = [
            map_plot,
            chart_plot,
            time_subtitle,
            states_subtitle,
            slider_swatch,
            reset_btn,
            zoom_in_btn,
            zoom_out_btn,
        ]
        narration_components = [
            narration_box,
            narration_text,
            step_indicator,
            back_btn,
            next_btn,
        ]

        # Filter events: each one re-derives the client's whole view
        async def handle_seasons(selected, view: MapView):
            view.session.set_seasons(selected or [])
            return view.outputs()

        async def handle_brightness(value, view: MapView):
            view.session.on_brightness_change(snap_to_notch(value, notches))
            return view.outputs()

        async def handle_state(name: Optional[str], view: MapView):
            if name:
                view.session.on_region_click(name)
                if not view.session.state.selected_regions:
                    view.zoomed = False
            return (*view.outputs(), None)

        season_boxes.change(
            handle_seasons, inputs=[season_boxes, view_state], outputs=view_components
        )
        brightness_slider.input(
            handle_brightness,
            inputs=[brightness_slider, view_state],
            outputs=view_components,
        )
        state_picker.input(
            handle_state,
            inputs=[state_picker, view_state],
            outputs=view_components + [state_picker],
        )

        # Viewport buttons
        async def handle_zoom_in(view: MapView):
            if view.session.fit_to_selection():
                view.zoomed = True
            return view.outputs()

        async def handle_zoom_out(view: MapView):
            view.session.zoom_out()
            view.zoomed = False
            return view.outputs()

        async def handle_reset(view: MapView):
            view.session.reset_selection()
            view.zoomed = False
            return view.outputs()

        zoom_in_btn.click(handle_zoom_in, inputs=[view_state], outputs=view_components)
        zoom_out_btn.click(handle_zoom_out, inputs=[view_state], outputs=view_components)
        reset_btn.click(handle_reset, inputs=[view_state], outputs=view_components)

        # Narration
        async def handle_start(view: MapView):
            view.narration.start()
            return (*view.narration_outputs(), gr.update(visible=False))

        async def handle_next(view: MapView):
            view.narration.next()
            return view.narration_outputs()

        async def handle_back(view: MapView):
            view.narration.previous()
            return view.narration_outputs()

        start_btn.click(
            handle_start, inputs=[view_state], outputs=narration_components + [start_btn]
        )
        next_btn.click(handle_next, inputs=[view_state], outputs=narration_components)
        back_btn.click(handle_back, inputs=[view_state], outputs=narration_components)

        # A fresh session per client with the loading banner, then the shared
        # containment pass (started by the first client, awaited by all)
        async def handle_load():
            view = MapView(data.new_session(), region_paths)
            indexed = data.index_task is not None and data.index_task.done
            return (view, gr.update(visible=not indexed), *view.outputs())

        async def handle_indexing(view: MapView):
            task = view.session.attach_index_task(data.start_indexing())
            try:
                await task.wait()
            except Exception as e:
                log(f"[INDEX] Containment pass failed: {e}")
            return (gr.update(visible=False), *view.outputs())

        app.load(
            handle_load, outputs=[view_state, loading_banner] + view_components
        ).then(
            handle_indexing,
            inputs=[view_state],
            outputs=[loading_banner] + view_components,
        )

    return app


if __name__ == "__main__":
    app = create_gradio_app()
    app.launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=False,
    )
