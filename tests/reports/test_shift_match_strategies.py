from datetime import date, datetime, time

from timetrack.reports.factory import ShiftMatchStrategyFactory
from timetrack.reports.strategies.base import DayShiftStrategy
from timetrack.reports.strategies.early_morning_strategy import EarlyMorningStrategy
from timetrack.reports.strategies.evening_strategy import EveningStrategy
from timetrack.schedules.model import Schedule

MONDAY = date(2025, 1, 13)
TUESDAY = date(2025, 1, 14)


def _shift(schedule_id: int, start: time, end: time) -> Schedule:
    return Schedule(schedule_id=schedule_id, company_id=1, name=f"S{schedule_id}", start_time=start, end_time=end)


def _lookup(plan: dict):
    return lambda day: plan.get(day, [])


def test_factory_late_evening_uses_evening_strategy():
    factory = ShiftMatchStrategyFactory()
    strategy = factory.for_entry(local_ts=datetime(2025, 1, 13, 22, 0))

    assert isinstance(strategy, EveningStrategy)


def test_factory_small_hours_use_early_morning_strategy():
    factory = ShiftMatchStrategyFactory()
    strategy = factory.for_entry(local_ts=datetime(2025, 1, 14, 5, 59))

    assert isinstance(strategy, EarlyMorningStrategy)


def test_factory_daytime_uses_day_strategy():
    factory = ShiftMatchStrategyFactory()
    strategy = factory.for_entry(local_ts=datetime(2025, 1, 14, 6, 0))

    assert type(strategy) is DayShiftStrategy


def test_day_strategy_picks_latest_started_shift():
    morning = _shift(1, time(8, 0), time(14, 0))
    evening = _shift(2, time(15, 0), time(20, 0))
    lookup = _lookup({MONDAY: [morning, evening]})

    match = DayShiftStrategy().match(local_ts=datetime(2025, 1, 13, 15, 10), shifts_for=lookup)

    assert match.schedule == evening
    assert match.shift_date == MONDAY
    assert match.delay_minutes == 10


def test_day_strategy_early_arrival_is_negative_delay():
    morning = _shift(1, time(8, 0), time(14, 0))
    lookup = _lookup({MONDAY: [morning]})

    match = DayShiftStrategy().match(local_ts=datetime(2025, 1, 13, 7, 50), shifts_for=lookup)

    assert match.schedule == morning
    assert match.delay_minutes == -10


def test_day_strategy_without_shifts():
    assert DayShiftStrategy().match(local_ts=datetime(2025, 1, 13, 9, 0), shifts_for=_lookup({})) is None


def test_evening_strategy_matches_overnight_shift_of_the_same_day():
    night = _shift(1, time(22, 0), time(6, 0))
    lookup = _lookup({MONDAY: [night]})

    match = EveningStrategy().match(local_ts=datetime(2025, 1, 13, 22, 15), shifts_for=lookup)

    assert match.schedule == night
    assert match.shift_date == MONDAY
    assert match.delay_minutes == 15


def test_early_morning_strategy_belongs_to_previous_night():
    night = _shift(1, time(22, 0), time(6, 0))
    lookup = _lookup({MONDAY: [night]})

    match = EarlyMorningStrategy().match(local_ts=datetime(2025, 1, 14, 0, 30), shifts_for=lookup)

    assert match.shift_date == MONDAY
    assert match.delay_minutes == 150


def test_early_morning_strategy_falls_back_to_same_day_shift():
    early = _shift(2, time(4, 0), time(12, 0))
    lookup = _lookup({TUESDAY: [early]})

    match = EarlyMorningStrategy().match(local_ts=datetime(2025, 1, 14, 3, 50), shifts_for=lookup)

    assert match.schedule == early
    assert match.shift_date == TUESDAY
    assert match.delay_minutes == -10
