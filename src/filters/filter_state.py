"""The active filter predicates of a map session."""

from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable

from src.analysis.buckets import NOTCH_MIN
from src.filters.seasons import SEASON_NAMES, validate_season


@dataclass(frozen=True)
class FilterState:
    """
    Immutable snapshot of the filters.

    Mutations return a new state; the session swaps it in and re-derives
    everything downstream. An empty season set shows nothing, an empty
    region set applies no region restriction.
    """

    selected_seasons: FrozenSet[str] = frozenset(SEASON_NAMES)
    brightness_threshold: int = NOTCH_MIN
    selected_regions: FrozenSet[str] = frozenset()

    @classmethod
    def create(
        cls,
        seasons: Iterable[str] = SEASON_NAMES,
        brightness: int = NOTCH_MIN,
        regions: Iterable[str] = (),
    ) -> "FilterState":
        return cls(
            selected_seasons=frozenset(validate_season(s) for s in seasons),
            brightness_threshold=brightness,
            selected_regions=frozenset(regions),
        )

    def toggle_season(self, season: str) -> "FilterState":
        season = validate_season(season)
        return replace(self, selected_seasons=self.selected_seasons ^ {season})

    def with_seasons(self, seasons: Iterable[str]) -> "FilterState":
        return replace(
            self, selected_seasons=frozenset(validate_season(s) for s in seasons)
        )

    def with_brightness(self, threshold: int) -> "FilterState":
        return replace(self, brightness_threshold=threshold)

    def toggle_region(self, name: str) -> "FilterState":
        return replace(self, selected_regions=self.selected_regions ^ {name})

    def clear_regions(self) -> "FilterState":
        return replace(self, selected_regions=frozenset())
