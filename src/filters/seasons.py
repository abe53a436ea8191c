"""
Season definitions and time-frame labels.

Seasons follow a November-October "fire year": Winter spans the turn of the
calendar year. All range labels are built from one chronological month
timeline so that year boundaries are handled in a single place.
"""

from datetime import date, datetime
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

SEASONS: Dict[str, Tuple[int, int, int]] = {
    "Winter": (11, 12, 1),  # Nov, Dec, Jan
    "Spring": (2, 3, 4),  # Feb, Mar, Apr
    "Summer": (5, 6, 7),  # May, Jun, Jul
    "Fall": (8, 9, 10),  # Aug, Sep, Oct
}
SEASON_NAMES: Tuple[str, ...] = tuple(SEASONS)

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Last month of a fire year
FIRE_YEAR_END_MONTH = 10

MonthSlot = Tuple[int, int]  # (year, month)


def validate_season(name: str) -> str:
    if name not in SEASONS:
        raise ValueError(f"Unknown season: {name}. Expected one of {list(SEASONS)}")
    return name


def months_for_seasons(seasons: Iterable[str]) -> FrozenSet[int]:
    """Union of calendar months (1-12) implied by the given seasons."""
    months = set()
    for name in seasons:
        months.update(SEASONS[validate_season(name)])
    return frozenset(months)


def month_timeline(start: MonthSlot, end: MonthSlot) -> List[MonthSlot]:
    """Chronological (year, month) slots from ``start`` to ``end`` inclusive."""
    slots = []
    year, month = start
    while (year, month) <= end:
        slots.append((year, month))
        month += 1
        if month > 12:
            year, month = year + 1, 1
    return slots


def fire_year_timeline(year: int) -> List[MonthSlot]:
    """Months of the fire year ending in October of ``year``."""
    return month_timeline((year - 1, 11), (year, FIRE_YEAR_END_MONTH))


def dataset_timeline(
    first: Optional[date], last: Optional[date], fallback_year: Optional[int] = None
) -> List[MonthSlot]:
    """
    Month timeline covering a dataset.

    The end is clamped to October of its year since the data is cut at the
    end of a fire year, unless that would end the timeline before it starts
    (data only from November or December of one year). Without usable dates,
    a single fire year is used.
    """
    if first is None or last is None:
        year = fallback_year if fallback_year is not None else datetime.now().year
        return fire_year_timeline(year)

    start = (first.year, first.month)
    end = (last.year, last.month)
    if last.month > FIRE_YEAR_END_MONTH and (last.year, FIRE_YEAR_END_MONTH) >= start:
        end = (last.year, FIRE_YEAR_END_MONTH)
    return month_timeline(start, end)


def contiguous_runs(
    timeline: Sequence[MonthSlot], months: FrozenSet[int]
) -> List[Tuple[MonthSlot, MonthSlot]]:
    """(start, end) slots of each maximal run of timeline months in ``months``."""
    runs = []
    run_start = None
    prev = None
    for slot in timeline:
        if slot[1] in months:
            if run_start is None:
                run_start = slot
            prev = slot
        elif run_start is not None:
            runs.append((run_start, prev))
            run_start = None
    if run_start is not None:
        runs.append((run_start, prev))
    return runs


def format_run(run: Tuple[MonthSlot, MonthSlot]) -> str:
    (y0, m0), (y1, m1) = run
    return f"{MONTH_NAMES[m0 - 1]} {y0}–{MONTH_NAMES[m1 - 1]} {y1}"


def describe_time_frame(
    seasons: Iterable[str],
    first: Optional[date],
    last: Optional[date],
    fallback_year: Optional[int] = None,
) -> str:
    """Subtitle text for the months currently displayed."""
    months = months_for_seasons(seasons)
    if not months:
        return "Time Frame Currently Displaying: none"

    timeline = dataset_timeline(first, last, fallback_year)
    runs = contiguous_runs(timeline, months)
    if not runs:
        return "Time Frame Currently Displaying: none"
    return "Time Frame Currently Displaying: " + ", ".join(format_run(r) for r in runs)


def season_label(season: str, year: int) -> str:
    """Season name with its range in the fire year ending in ``year``."""
    runs = contiguous_runs(fire_year_timeline(year), months_for_seasons([season]))
    return f"{season} ({format_run(runs[0])})"


def describe_regions(selected: Iterable[str]) -> str:
    names = sorted(selected)
    if not names:
        return "States: all states"
    return "States: " + ", ".join(names)
