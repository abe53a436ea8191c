"""Derivation of the visible fire subset from the bucketed dataset and filters."""

from typing import FrozenSet, List, Sequence

from src.analysis.buckets import BucketedDataset
from src.analysis.records import FireRecord
from src.filters.filter_state import FilterState
from src.filters.seasons import months_for_seasons


def in_any_region(record: FireRecord, regions: FrozenSet[str]) -> bool:
    """True when the record lies in one of ``regions``; unindexed records never do."""
    return not record.regions.isdisjoint(regions)


def filter_by_months(
    records: Sequence[FireRecord], months: FrozenSet[int]
) -> List[FireRecord]:
    return [r for r in records if r.month is not None and r.month in months]


def filter_by_regions(
    records: Sequence[FireRecord], regions: FrozenSet[str]
) -> List[FireRecord]:
    """Keep records in any of ``regions``; an empty selection keeps everything."""
    if not regions:
        return list(records)
    return [r for r in records if in_any_region(r, regions)]


def derive_visible(dataset: BucketedDataset, state: FilterState) -> List[FireRecord]:
    """
    Records to draw on the map for ``state``.

    1. Start from the bucket for the brightness threshold.
    2. Keep records acquired in a month of a selected season (none selected
       means nothing is shown).
    3. If regions are selected, keep records in at least one of them.
    """
    candidates = dataset[state.brightness_threshold]
    months = months_for_seasons(state.selected_seasons)
    if not months:
        return []
    return filter_by_regions(
        filter_by_months(candidates, months), state.selected_regions
    )


def derive_chart_subset(
    dataset: BucketedDataset, state: FilterState
) -> List[FireRecord]:
    """Brightness- and region-filtered records for the monthly chart (all seasons)."""
    return filter_by_regions(
        dataset[state.brightness_threshold], state.selected_regions
    )
