"""
Map session controller.

``MapData`` holds what every viewer shares read-only: the fire records, region
polygons, brightness buckets, projection and the one containment pass over
them. A ``FireMapSession`` is one viewer's page: its ``FilterState``, fire
layer, chart and viewport. Every input event swaps in a new filter state and
re-derives the visible subset, the fire layer and the monthly chart from
scratch, one event at a time.
"""

import threading
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.analysis.buckets import BRIGHTNESS_NOTCHES, BucketedDataset
from src.analysis.containment import ContainmentIndexTask, IndexSummary, index_records
from src.analysis.monthly_chart import AggregateChart, ChartFrame
from src.analysis.projection import AlbersProjection
from src.analysis.records import FireRecord, RegionPolygon
from src.analysis.scales import color_scale
from src.config import CHART_SIZE, INDEX_DELAY_SECONDS, MAP_SIZE
from src.filters.filter_state import FilterState
from src.filters.pipeline import derive_chart_subset, derive_visible
from src.filters.seasons import describe_regions, describe_time_frame
from src.ingestion.geojson_loader import load_fire_records, load_regions
from src.render.fire_layer import FireLayerRenderer
from src.render.reconcile import KeyedDiff
from src.render.tooltip import on_hover_record
from src.render.viewport import SelectionViewport
from src.utils import log

LOADING_MESSAGE = "Loading map..."


class FireMapSession:
    """
    Interactive filtering and rendering state for one map page.

    Input events and refreshes hold ``lock``, so events arriving from several
    threads (or the indexer's completion callback) are applied one at a time.

    Args:
        records: Fire detections (indexed later by ``index_regions`` or
            ``start_indexing``)
        regions: Region polygons, also the clickable boundary layer
        notches: Discrete brightness thresholds offered by the slider
        map_size: Map viewport (width, height) in pixels
        chart_size: Chart container (width, height) in pixels
        projection: Object with ``project``/``path``/``bounds``; defaults to
            an Albers projection fitted to ``map_size``
        buckets: Prebuilt buckets over ``records`` to share between sessions
    """

    def __init__(
        self,
        records: Sequence[FireRecord],
        regions: Sequence[RegionPolygon],
        notches: Sequence[int] = BRIGHTNESS_NOTCHES,
        map_size: Tuple[int, int] = MAP_SIZE,
        chart_size: Tuple[int, int] = CHART_SIZE,
        projection=None,
        buckets: Optional[BucketedDataset] = None,
    ):
        self.lock = threading.RLock()
        self.records: Sequence[FireRecord] = records
        self.regions: Sequence[RegionPolygon] = regions
        self.region_names = [r.name for r in self.regions]
        self.map_size = map_size
        self.projection = projection or AlbersProjection(*map_size)

        self.buckets = buckets if buckets is not None else BucketedDataset(records, notches)
        self.state = FilterState.create(brightness=self.buckets.notches[0])

        self.layer = FireLayerRenderer(self.projection.project)
        self.chart = AggregateChart(chart_size)
        self.viewport = SelectionViewport(self.regions, self.projection, *map_size)
        self.index_task: Optional[ContainmentIndexTask] = None

        dates = [r.acquired for r in self.records if r.acquired is not None]
        self.first_date: Optional[date] = min(dates).date() if dates else None
        self.last_date: Optional[date] = max(dates).date() if dates else None

        self.visible: List[FireRecord] = []
        self.last_diff: KeyedDiff[str] = KeyedDiff()
        self.refresh()

    @classmethod
    def from_files(
        cls, fires_path: str | Path, regions_path: str | Path, **kwargs
    ) -> "FireMapSession":
        return cls(load_fire_records(fires_path), load_regions(regions_path), **kwargs)

    # --- containment indexing ---

    def index_regions(self) -> IndexSummary:
        """Run the containment pass now and refresh the views."""
        summary = index_records(self.records, self.regions)
        log(
            f"✓ Indexed {summary.total} fires: {summary.matched} in a region, "
            f"{summary.unknown} unknown ({summary.elapsed_seconds:.2f}s)"
        )
        self.refresh()
        return summary

    def attach_index_task(self, task: ContainmentIndexTask) -> ContainmentIndexTask:
        """Follow a (possibly shared) containment pass and refresh when it ends."""
        if self.index_task is not task:
            self.index_task = task
            task.add_done_callback(lambda summary: self.refresh())
        return task

    def start_indexing(self, delay: float = INDEX_DELAY_SECONDS) -> ContainmentIndexTask:
        """
        Schedule the containment pass on the running event loop.

        Views derived before it finishes treat records as outside every region.
        """
        if self.index_task is None:
            self.attach_index_task(
                ContainmentIndexTask(self.records, self.regions, delay)
            ).start()
        return self.index_task

    @property
    def loading(self) -> bool:
        return self.index_task is not None and not self.index_task.done

    @property
    def loading_message(self) -> Optional[str]:
        return LOADING_MESSAGE if self.loading else None

    # --- input events ---

    def on_season_toggle(self, season: str, checked: Optional[bool] = None):
        """Toggle a season, or force it on/off with ``checked``."""
        with self.lock:
            if checked is None or checked != (season in self.state.selected_seasons):
                self.state = self.state.toggle_season(season)
            self.refresh()

    def set_seasons(self, seasons: Iterable[str]):
        with self.lock:
            self.state = self.state.with_seasons(seasons)
            self.refresh()

    def on_brightness_change(self, threshold: int):
        """
        Apply a brightness threshold.

        Raises:
            ValueError: ``threshold`` is not one of the notches
        """
        if threshold not in self.buckets:
            raise ValueError(
                f"Brightness {threshold} is not a notch; expected one of "
                f"{list(self.buckets.notches)}"
            )
        with self.lock:
            self.state = self.state.with_brightness(threshold)
            self.refresh()

    def on_region_click(self, name: str) -> bool:
        """Toggle a region in the selection. Unknown names are ignored."""
        if name not in self.viewport.regions:
            log(f"⚠️  Ignoring click on unknown region {name!r}")
            return False
        with self.lock:
            self.state = self.state.toggle_region(name)
            self.refresh()
        return True

    def on_resize(self, chart_size: Tuple[int, int]) -> ChartFrame:
        with self.lock:
            return self.chart.resize(chart_size)

    def fit_to_selection(self) -> bool:
        with self.lock:
            return self.viewport.fit_to_selection(self.state.selected_regions)

    def zoom_out(self):
        with self.lock:
            self.viewport.zoom_out()

    def reset_selection(self):
        """Clear the region selection and return to the full map view."""
        with self.lock:
            self.state = self.state.clear_regions()
            self.viewport.zoom_out()
            self.refresh()

    # --- derived views ---

    def refresh(self):
        with self.lock:
            self.visible = derive_visible(self.buckets, self.state)
            self.last_diff = self.layer.render(self.visible)
            self.chart.redraw(
                derive_chart_subset(self.buckets, self.state), self.state.selected_seasons
            )

    def hover(self, record_id: str) -> Optional[Dict[str, Optional[str]]]:
        with self.lock:
            mark = self.layer.find(record_id)
            return on_hover_record(mark.record) if mark is not None else None

    def region_styles(self) -> Dict[str, str]:
        return self.viewport.region_styles(self.state.selected_regions)

    @property
    def time_frame_label(self) -> str:
        return describe_time_frame(
            self.state.selected_seasons, self.first_date, self.last_date
        )

    @property
    def regions_label(self) -> str:
        return describe_regions(self.state.selected_regions)

    @property
    def slider_color(self) -> str:
        return color_scale(self.state.brightness_threshold)


class MapData:
    """
    Datasets loaded once and shared read-only by every viewer's session.

    The containment pass is the only write: it runs once for all sessions.
    """

    def __init__(
        self,
        records: Sequence[FireRecord],
        regions: Sequence[RegionPolygon],
        notches: Sequence[int] = BRIGHTNESS_NOTCHES,
        map_size: Tuple[int, int] = MAP_SIZE,
        chart_size: Tuple[int, int] = CHART_SIZE,
        projection=None,
    ):
        self.records: Tuple[FireRecord, ...] = tuple(records)
        self.regions: Tuple[RegionPolygon, ...] = tuple(regions)
        self.map_size = map_size
        self.chart_size = chart_size
        self.projection = projection or AlbersProjection(*map_size)
        self.buckets = BucketedDataset(self.records, notches)
        self.index_task: Optional[ContainmentIndexTask] = None

    @classmethod
    def from_files(
        cls, fires_path: str | Path, regions_path: str | Path, **kwargs
    ) -> "MapData":
        return cls(load_fire_records(fires_path), load_regions(regions_path), **kwargs)

    def new_session(self) -> FireMapSession:
        """A fresh page state over the shared data, following the shared pass if any."""
        session = FireMapSession(
            self.records,
            self.regions,
            map_size=self.map_size,
            chart_size=self.chart_size,
            projection=self.projection,
            buckets=self.buckets,
        )
        if self.index_task is not None:
            session.attach_index_task(self.index_task)
        return session

    def start_indexing(self, delay: float = INDEX_DELAY_SECONDS) -> ContainmentIndexTask:
        """Schedule the shared containment pass once; later calls return the same task."""
        if self.index_task is None:
            self.index_task = ContainmentIndexTask(self.records, self.regions, delay)
            self.index_task.start()
        return self.index_task
