from __future__ import annotations

import re
from datetime import datetime, tzinfo

from app.application.exceptions import MalformedSlotTimeError
from app.domain.entities.selected_slot import SelectedSlot

MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}
_MONTH_ABBREVIATIONS = {name[:3]: index for name, index in MONTHS.items()}

_DATE_FRAGMENT = re.compile(
    r"\b(" + "|".join(MONTHS) + r"|" + "|".join(_MONTH_ABBREVIATIONS) + r")\.?\s+(\d{1,2})\b",
    re.IGNORECASE,
)
_START_TIME = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(am|pm)\s*$", re.IGNORECASE)


def extract_date_fragment(label: str) -> str:
    """Pull "January 4" out of a date control label such as "Thursday, January 4 - Times available"."""
    match = _DATE_FRAGMENT.search(label or "")
    if not match:
        raise MalformedSlotTimeError(f"No month/day found in date label: {label!r}")
    return f"{match.group(1)} {int(match.group(2))}"


def month_index(name: str) -> int:
    key = name.strip().lower().rstrip(".")
    index = MONTHS.get(key) or _MONTH_ABBREVIATIONS.get(key[:3])
    if index is None:
        raise MalformedSlotTimeError(f"Unknown month name: {name!r}")
    return index


def parse_start_time(text: str) -> tuple[int, int]:
    """Parse a 12-hour clock value like "2:30pm" into (hour24, minute)."""
    match = _START_TIME.match(text or "")
    if not match:
        raise MalformedSlotTimeError(f"Unrecognised slot start time: {text!r}")

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = match.group(3).lower()
    if not 1 <= hour <= 12 or not 0 <= minute <= 59:
        raise MalformedSlotTimeError(f"Slot start time out of range: {text!r}")

    if meridiem == "am":
        hour = 0 if hour == 12 else hour
    else:
        hour = hour if hour == 12 else hour + 12
    return hour, minute


def build_selected_slot(
    date_label: str,
    start_time: str,
    *,
    tz: tzinfo | None = None,
    now: datetime | None = None,
) -> SelectedSlot:
    """
    Combine a captured date fragment and start time into an absolute timestamp.

    The year is the current one, except that a date already behind today belongs to
    next year: the calendar only offers upcoming days, so "January 4" seen in late
    December is next January.
    """
    fragment = extract_date_fragment(date_label)
    month_name, day_text = fragment.split(" ", 1)
    hour, minute = parse_start_time(start_time)
    today = (now or datetime.now(tz)).date()
    month = month_index(month_name)
    day = int(day_text)

    try:
        starts_at = datetime(today.year, month, day, hour, minute, tzinfo=tz)
        if starts_at.date() < today:
            starts_at = starts_at.replace(year=today.year + 1)
    except ValueError as e:
        raise MalformedSlotTimeError(f"Invalid slot date {fragment!r} {start_time!r}: {e}") from e

    return SelectedSlot(date_label=fragment, start_time=start_time.strip(), starts_at=starts_at)
