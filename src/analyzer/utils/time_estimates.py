# src/analyzer/utils/time_estimates.py
import re
from typing import Iterable, Optional

_ESTIMATE = re.compile(r"(\d+(?:\.\d+)?)(?:\s*-\s*(\d+(?:\.\d+)?))?\s*(minute|hour|day|week)s?", re.IGNORECASE)

# Working hours per unit.
UNIT_HOURS = {"minute": 1 / 60, "hour": 1.0, "day": 8.0, "week": 40.0}


def parse_hours(estimate: Optional[str]) -> Optional[float]:
    """'2-4 hours' -> 3.0, '30 minutes' -> 0.5, '1-2 weeks' -> 60.0. None when unparseable."""
    if not estimate:
        return None
    match = _ESTIMATE.search(estimate)
    if not match:
        return None
    low = float(match.group(1))
    high = float(match.group(2)) if match.group(2) else low
    return (low + high) / 2 * UNIT_HOURS[match.group(3).lower()]


def format_hours(hours: float) -> str:
    if hours < 1:
        return f"{round(hours * 60)} minutes"
    if hours < 8:
        return f"{round(hours, 1)} hours"
    if hours < 40:
        return f"{round(hours / 8, 1)} days"
    return f"{round(hours / 40, 1)} weeks"


def total_hours(estimates: Iterable[Optional[str]]) -> float:
    return sum(h for h in (parse_hours(e) for e in estimates) if h is not None)


def average_hours(estimates: Iterable[Optional[str]]) -> Optional[float]:
    parsed = [h for h in (parse_hours(e) for e in estimates) if h is not None]
    if not parsed:
        return None
    return sum(parsed) / len(parsed)
