import enum
from datetime import time, timedelta


class Period(str, enum.Enum):
    morning = "morning"
    afternoon = "afternoon"
    evening = "evening"
    anytime = "anytime"


# Clock ranges used for exact appointment placement
PERIOD_WINDOWS: dict[Period, tuple[time, time]] = {
    Period.morning: (time(6, 0), time(12, 0)),
    Period.afternoon: (time(12, 0), time(18, 0)),
    Period.evening: (time(18, 0), time(23, 59)),
}

PERIOD_LABELS: dict[Period, str] = {
    Period.morning: "Morning (6am-12pm)",
    Period.afternoon: "Afternoon (12pm-6pm)",
    Period.evening: "Evening (6pm-12am)",
    Period.anytime: "Anytime",
}

# Bookable hours per period on the availability calendar
PERIOD_CAPACITY_HOURS: dict[Period, float] = {
    Period.morning: 6,
    Period.afternoon: 6,
    Period.evening: 4,
    Period.anytime: 16,
}

# Display range for the calendar ("first period" start/end)
PERIOD_DISPLAY_HOURS: dict[Period, tuple[time, time]] = {
    Period.morning: (time(6, 0), time(12, 0)),
    Period.afternoon: (time(12, 0), time(18, 0)),
    Period.evening: (time(18, 0), time(22, 0)),
    Period.anytime: (time(6, 0), time(22, 0)),
}

# Requests at least this long are treated as day-level checks
DAY_LEVEL_THRESHOLD = timedelta(hours=6)


def period_labels(periods) -> str:
    return ", ".join(PERIOD_LABELS[Period(p)] for p in periods)


def capacity_hours(periods) -> float:
    periods = [Period(p) for p in periods]
    if Period.anytime in periods:
        return PERIOD_CAPACITY_HOURS[Period.anytime]
    return float(sum(PERIOD_CAPACITY_HOURS[p] for p in periods))


def fits_period(period: Period, start: time, end: time) -> bool:
    if period == Period.anytime:
        return True
    p_start, p_end = PERIOD_WINDOWS[period]
    return p_start <= start and end <= p_end
