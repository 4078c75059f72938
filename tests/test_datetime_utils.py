from datetime import date, datetime, time

import pytest

from timetrack.common.datetime_utils import (
    local_day_bounds_utc,
    parse_hhmm,
    parse_iso_datetime,
    shift_span_minutes,
    week_start,
    work_day_for,
)
from timetrack.core.exceptions import ValidationError


def test_parse_iso_datetime_normalizes_to_naive_utc():
    assert parse_iso_datetime("2025-01-13T08:00:00Z") == datetime(2025, 1, 13, 8, 0)
    assert parse_iso_datetime("2025-01-13T09:00:00+01:00") == datetime(2025, 1, 13, 8, 0)
    assert parse_iso_datetime("2025-01-13T08:00:00") == datetime(2025, 1, 13, 8, 0)

    with pytest.raises(ValidationError):
        parse_iso_datetime("yesterday")


def test_parse_hhmm():
    assert parse_hhmm(" 07:30 ") == time(7, 30)
    with pytest.raises(ValidationError):
        parse_hhmm("25:00")


def test_work_day_rolls_over_at_five():
    assert work_day_for(datetime(2025, 1, 14, 4, 59)) == date(2025, 1, 13)
    assert work_day_for(datetime(2025, 1, 14, 5, 0)) == date(2025, 1, 14)


def test_local_day_bounds_in_utc():
    start, end = local_day_bounds_utc(date(2025, 1, 13), date(2025, 1, 14), 60)

    assert start == datetime(2025, 1, 12, 23, 0)
    assert end.date() == date(2025, 1, 14)
    assert (end.hour, end.minute) == (22, 59)


def test_shift_span_wraps_midnight():
    assert shift_span_minutes(time(22, 0), time(6, 0)) == 480
    assert shift_span_minutes(time(8, 0), time(16, 30)) == 510


def test_week_start_is_monday():
    assert week_start(date(2025, 1, 19)) == date(2025, 1, 13)
    assert week_start(date(2025, 1, 13)) == date(2025, 1, 13)
