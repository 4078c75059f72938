from datetime import datetime

from timetrack.core.enums import TimeEntryType
from timetrack.time_entries.calculator.standard_calculator import StandardWorkTimeCalculator
from timetrack.time_entries.model import TimeEntry


def _entry(entry_id: int, entry_type: TimeEntryType, hour: int, minute: int = 0) -> TimeEntry:
    return TimeEntry(
        entry_id=entry_id,
        employee_id=1,
        company_id=1,
        entry_type=entry_type,
        timestamp=datetime(2025, 1, 13, hour, minute),
    )


def test_session_subtracts_breaks():
    calc = StandardWorkTimeCalculator()
    entries = [
        _entry(1, TimeEntryType.IN, 8),
        _entry(2, TimeEntryType.BREAK, 10),
        _entry(3, TimeEntryType.RESUME, 10, 30),
        _entry(4, TimeEntryType.OUT, 16, 30),
    ]

    sessions = calc.sessions(entries)

    assert len(sessions) == 1
    assert sessions[0].gross_minutes == 510
    assert sessions[0].break_minutes == 30
    assert sessions[0].worked_minutes == 480


def test_second_clock_in_restarts_the_session():
    calc = StandardWorkTimeCalculator()
    entries = [_entry(1, TimeEntryType.IN, 8), _entry(2, TimeEntryType.IN, 9), _entry(3, TimeEntryType.OUT, 12)]

    sessions = calc.sessions(entries)

    assert [s.start.hour for s in sessions] == [9]
    assert sessions[0].worked_minutes == 180


def test_out_without_open_session_is_ignored():
    calc = StandardWorkTimeCalculator()
    assert calc.sessions([_entry(1, TimeEntryType.OUT, 12)]) == []


def test_open_session_counts_until_cutoff():
    calc = StandardWorkTimeCalculator()
    entries = [_entry(1, TimeEntryType.IN, 8)]

    assert calc.worked_minutes(entries) == 0
    assert calc.worked_minutes(entries, until=datetime(2025, 1, 13, 10, 0)) == 120


def test_unfinished_break_runs_until_day_end():
    calc = StandardWorkTimeCalculator()
    entries = [_entry(1, TimeEntryType.IN, 8), _entry(2, TimeEntryType.BREAK, 12)]

    assert calc.break_minutes(entries, day_end=datetime(2025, 1, 13, 12, 45)) == 45


def test_overtime_beyond_standard_day():
    assert StandardWorkTimeCalculator().overtime_minutes(500) == 20
    assert StandardWorkTimeCalculator().overtime_minutes(300) == 0
    assert StandardWorkTimeCalculator(standard_day_minutes=420).overtime_minutes(450) == 30
