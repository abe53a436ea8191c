"""
Geo-containment indexing of fire detections against region polygons.

Every region's bounding box is computed once and padded by a small epsilon.
Each point is compared against those boxes first and only the surviving
candidates get the exact polygon test. The pass runs once per session; the
deferred variant lets a loading indicator render before the work starts.
"""

import asyncio
import math
import time
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, List, Optional, Sequence, Set

from src.analysis.records import FireRecord, RegionPolygon
from src.config import INDEX_DELAY_SECONDS
from src.utils import log

# Padding (degrees) applied to every region bbox so boundary points survive
# floating point noise in the prefilter.
BBOX_EPSILON_DEG = 0.01

# Records processed between cooperative yields of the deferred task
YIELD_EVERY = 500


@dataclass
class RegionBounds:
    """Padded lon/lat bounding box of a region."""

    region: RegionPolygon
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def admits(self, lon: float, lat: float) -> bool:
        return (
            self.min_lon <= lon <= self.max_lon and self.min_lat <= lat <= self.max_lat
        )


@dataclass
class IndexSummary:
    """Outcome of a containment pass."""

    total: int = 0
    matched: int = 0
    unknown: int = 0
    exact_tests: int = 0
    failed_regions: Set[str] = field(default_factory=set)
    elapsed_seconds: float = 0.0


def build_region_bounds(
    regions: Sequence[RegionPolygon], epsilon: float = BBOX_EPSILON_DEG
) -> List[RegionBounds]:
    """
    Precompute padded bounding boxes for all regions.

    Regions whose bounds cannot be computed (empty or broken geometry) are
    left out; they can never contain a point.
    """
    result = []
    for region in regions:
        try:
            min_lon, min_lat, max_lon, max_lat = region.bounds
        except Exception as e:
            log(f"⚠️  Skipping region {region.name!r}: cannot compute bounds ({e})")
            continue

        if not all(math.isfinite(v) for v in (min_lon, min_lat, max_lon, max_lat)):
            log(f"⚠️  Skipping region {region.name!r}: empty geometry")
            continue

        result.append(
            RegionBounds(
                region=region,
                min_lon=min_lon - epsilon,
                min_lat=min_lat - epsilon,
                max_lon=max_lon + epsilon,
                max_lat=max_lat + epsilon,
            )
        )
    return result


def find_containing_regions(
    lon: float,
    lat: float,
    bounds: Sequence[RegionBounds],
    summary: Optional[IndexSummary] = None,
) -> FrozenSet[str]:
    """
    Names of all regions containing (lon, lat).

    A failing exact test counts as "not contained" for that region only.
    """
    names = set()
    for bbox in bounds:
        if not bbox.admits(lon, lat):
            continue
        if summary is not None:
            summary.exact_tests += 1
        try:
            if bbox.region.contains(lon, lat):
                names.add(bbox.region.name)
        except Exception as e:
            if summary is not None and bbox.region.name not in summary.failed_regions:
                summary.failed_regions.add(bbox.region.name)
                log(f"⚠️  Containment test failed for {bbox.region.name!r}: {e}")
    return frozenset(names)


def _index_one(
    record: FireRecord, bounds: Sequence[RegionBounds], summary: IndexSummary
):
    names: FrozenSet[str] = frozenset()
    if record.coordinates is not None:
        lon, lat = record.coordinates
        if math.isfinite(lon) and math.isfinite(lat):
            names = find_containing_regions(lon, lat, bounds, summary)

    record.assign_regions(names)
    summary.total += 1
    if names:
        summary.matched += 1
    else:
        summary.unknown += 1


def index_records(
    records: Sequence[FireRecord],
    regions: Sequence[RegionPolygon],
    epsilon: float = BBOX_EPSILON_DEG,
) -> IndexSummary:
    """Tag every record with its containing regions, synchronously."""
    started = time.perf_counter()
    summary = IndexSummary()
    bounds = build_region_bounds(regions, epsilon)

    for record in records:
        _index_one(record, bounds, summary)

    summary.elapsed_seconds = time.perf_counter() - started
    return summary


class ContainmentIndexTask:
    """
    One-shot deferred containment pass on the running event loop.

    The pass waits ``delay`` seconds before starting, then yields back to the
    loop every ``yield_every`` records. There is no cancellation: once started
    it runs to completion. Until then records report no containing regions.
    """

    def __init__(
        self,
        records: Sequence[FireRecord],
        regions: Sequence[RegionPolygon],
        delay: float = INDEX_DELAY_SECONDS,
        epsilon: float = BBOX_EPSILON_DEG,
        yield_every: int = YIELD_EVERY,
    ):
        self.records = records
        self.regions = regions
        self.delay = delay
        self.epsilon = epsilon
        self.yield_every = max(1, yield_every)
        self.summary: Optional[IndexSummary] = None
        self.error: Optional[BaseException] = None
        self._done = asyncio.Event()
        self._task: Optional[asyncio.Task] = None
        self._callbacks: List[Callable[[IndexSummary], None]] = []

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def add_done_callback(self, callback: Callable[[IndexSummary], None]):
        """Register a callback invoked with the summary when the pass completes."""
        if self.summary is not None:
            callback(self.summary)
        else:
            self._callbacks.append(callback)

    def start(self) -> asyncio.Task:
        """Schedule the pass on the running loop. Calling twice is a no-op."""
        if self._task is None:
            self._task = asyncio.ensure_future(self.run())
        return self._task

    async def wait(self) -> IndexSummary:
        """
        Wait for the pass to finish.

        Raises:
            Exception: whatever made the pass fail; records it did not reach
                stay unindexed
        """
        await self._done.wait()
        if self.error is not None:
            raise self.error
        assert self.summary is not None
        return self.summary

    async def run(self) -> IndexSummary:
        await asyncio.sleep(self.delay)

        started = time.perf_counter()
        summary = IndexSummary()
        log(
            f"🗺️  Indexing {len(self.records)} fires against {len(self.regions)} regions..."
        )
        try:
            bounds = build_region_bounds(self.regions, self.epsilon)
            for i, record in enumerate(self.records, 1):
                _index_one(record, bounds, summary)
                if i % self.yield_every == 0:
                    await asyncio.sleep(0)
            log(
                f"✓ Indexed {summary.total} fires: {summary.matched} in a region, "
                f"{summary.unknown} unknown ({time.perf_counter() - started:.2f}s)"
            )
        except Exception as e:
            self.error = e
            log(f"✗ Containment indexing failed after {summary.total} fires: {e}")
        finally:
            summary.elapsed_seconds = time.perf_counter() - started
            self.summary = summary
            self._done.set()
            # Listeners refresh on failure too, so partial results still show
            callbacks, self._callbacks = self._callbacks, []
            for callback in callbacks:
                callback(summary)
        return summary
