from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from app.application.exceptions import MalformedSlotTimeError
from app.application.utils.slot_time import (
    build_selected_slot,
    extract_date_fragment,
    parse_start_time,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2:30pm", (14, 30)),
        ("12:00am", (0, 0)),
        ("12:15pm", (12, 15)),
        ("9:05am", (9, 5)),
        ("11:59PM", (23, 59)),
        (" 7:00 pm ", (19, 0)),
    ],
)
def test_parse_start_time(text, expected):
    assert parse_start_time(text) == expected


@pytest.mark.parametrize("text", ["14:30", "2:30", "2pm", "", "13:00pm", "0:30am", "2:75pm", "noon"])
def test_parse_start_time_rejects_malformed(text):
    with pytest.raises(MalformedSlotTimeError):
        parse_start_time(text)


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Thursday, January 4 - Times available", "January 4"),
        ("Monday, December 30 - Times available", "December 30"),
        ("Sep 07 Times available", "Sep 7"),
        ("January 4", "January 4"),
    ],
)
def test_extract_date_fragment(label, expected):
    assert extract_date_fragment(label) == expected


def test_extract_date_fragment_rejects_label_without_date():
    with pytest.raises(MalformedSlotTimeError):
        extract_date_fragment("Times available")


def test_build_selected_slot_combines_date_and_time():
    slot = build_selected_slot("January 4", "2:30pm", now=datetime(2031, 1, 2, 9, 0))

    assert slot.date_label == "January 4"
    assert slot.start_time == "2:30pm"
    assert slot.starts_at == datetime(2031, 1, 4, 14, 30)


def test_build_selected_slot_uses_current_year_and_timezone():
    tz = ZoneInfo("America/New_York")
    now = datetime(2030, 2, 10, 8, 0, tzinfo=tz)
    slot = build_selected_slot("Friday, March 1 - Times available", "12:00am", tz=tz, now=now)

    assert slot.starts_at.year == 2030
    assert (slot.starts_at.month, slot.starts_at.day, slot.starts_at.hour) == (3, 1, 0)
    assert slot.starts_at.tzinfo is tz


def test_build_selected_slot_rejects_impossible_date():
    with pytest.raises(MalformedSlotTimeError):
        build_selected_slot("February 30", "9:00am", now=datetime(2030, 1, 1))


def test_build_selected_slot_rejects_missing_suffix():
    with pytest.raises(MalformedSlotTimeError):
        build_selected_slot("January 4", "2:30", now=datetime(2030, 1, 1))


def test_build_selected_slot_rolls_past_dates_into_next_year():
    slot = build_selected_slot("January 4", "2:30pm", now=datetime(2030, 12, 28, 16, 0))

    assert slot.starts_at == datetime(2031, 1, 4, 14, 30)


def test_build_selected_slot_keeps_today_in_current_year():
    slot = build_selected_slot("December 28", "9:00am", now=datetime(2030, 12, 28, 16, 0))

    assert slot.starts_at == datetime(2030, 12, 28, 9, 0)
