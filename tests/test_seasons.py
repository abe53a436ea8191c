from datetime import date

import pytest

from src.filters.seasons import (
    SEASON_NAMES,
    describe_regions,
    describe_time_frame,
    months_for_seasons,
    season_label,
    validate_season,
)

PREFIX = "Time Frame Currently Displaying: "


def test_seasons_partition_the_year():
    assert SEASON_NAMES == ("Winter", "Spring", "Summer", "Fall")
    assert months_for_seasons(["Winter"]) == {11, 12, 1}
    assert months_for_seasons(SEASON_NAMES) == set(range(1, 13))
    assert months_for_seasons([]) == frozenset()


def test_unknown_season_is_rejected():
    with pytest.raises(ValueError, match="Unknown season"):
        validate_season("Monsoon")


def test_winter_spans_the_year_boundary():
    label = describe_time_frame(["Winter"], date(2022, 11, 3), date(2023, 10, 20))
    assert label == PREFIX + "November 2022–January 2023"


def test_each_fire_year_gets_its_own_range():
    label = describe_time_frame(["Winter"], date(2021, 11, 1), date(2023, 10, 31))
    assert label == PREFIX + "November 2021–January 2022, November 2022–January 2023"


def test_range_end_is_clamped_to_october():
    label = describe_time_frame(["Winter"], date(2022, 11, 1), date(2023, 12, 5))
    assert label == PREFIX + "November 2022–January 2023"


def test_late_single_year_range_is_not_clamped():
    label = describe_time_frame(["Winter"], date(2023, 11, 5), date(2023, 12, 20))
    assert label == PREFIX + "November 2023–December 2023"


def test_all_seasons_without_dates_use_fallback_year():
    label = describe_time_frame(SEASON_NAMES, None, None, fallback_year=2023)
    assert label == PREFIX + "November 2022–October 2023"


def test_no_seasons_reads_none():
    assert describe_time_frame([], date(2023, 1, 1), date(2023, 6, 1)) == PREFIX + "none"


def test_season_label():
    assert season_label("Winter", 2023) == "Winter (November 2022–January 2023)"
    assert season_label("Fall", 2023) == "Fall (August 2023–October 2023)"


def test_describe_regions():
    assert describe_regions([]) == "States: all states"
    assert describe_regions({"Oregon", "California"}) == "States: California, Oregon"
