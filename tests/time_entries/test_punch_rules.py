import pytest

from timetrack.core.enums import TimeEntryType
from timetrack.core.exceptions import ValidationError
from timetrack.time_entries.rules import allowed_next, validate_transition


def test_only_clock_in_opens_a_work_day():
    validate_transition(None, TimeEntryType.IN)

    with pytest.raises(ValidationError, match="first punch of the day must be a clock-in"):
        validate_transition(None, TimeEntryType.OUT)


@pytest.mark.parametrize(
    "last, new, message",
    [
        (TimeEntryType.IN, TimeEntryType.IN, "Already clocked in"),
        (TimeEntryType.BREAK, TimeEntryType.OUT, "End the break before clocking out"),
        (TimeEntryType.OUT, TimeEntryType.BREAK, "Clock in before starting a break"),
        (TimeEntryType.IN, TimeEntryType.RESUME, "There is no break in progress"),
    ],
)
def test_illegal_transitions_are_explained(last, new, message):
    with pytest.raises(ValidationError, match=message):
        validate_transition(last, new)


def test_allowed_next_after_resume():
    assert allowed_next(TimeEntryType.RESUME) == {TimeEntryType.OUT, TimeEntryType.BREAK}
    assert allowed_next(TimeEntryType.OUT) == {TimeEntryType.IN}
