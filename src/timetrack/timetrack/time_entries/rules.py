"""Punch sequencing rules.

A work day is a small state machine over the last punch: the next punch is
only accepted when it is a legal transition from the previous one.
"""
from __future__ import annotations

from typing import Optional

from ..core.enums import TimeEntryType
from ..core.exceptions import ValidationError

IN = TimeEntryType.IN
OUT = TimeEntryType.OUT
BREAK = TimeEntryType.BREAK
RESUME = TimeEntryType.RESUME

ALLOWED_AFTER: dict[Optional[TimeEntryType], frozenset[TimeEntryType]] = {
    None: frozenset({IN}),
    IN: frozenset({OUT, BREAK}),
    BREAK: frozenset({RESUME}),
    RESUME: frozenset({OUT, BREAK}),
    OUT: frozenset({IN}),
}

_REJECTIONS: dict[tuple[Optional[TimeEntryType], TimeEntryType], str] = {
    (IN, IN): "Already clocked in",
    (RESUME, IN): "Already clocked in",
    (BREAK, IN): "Already clocked in (on break)",
    (OUT, OUT): "Already clocked out",
    (BREAK, OUT): "End the break before clocking out",
    (BREAK, BREAK): "A break is already in progress",
    (OUT, BREAK): "Clock in before starting a break",
    (RESUME, RESUME): "The break has already ended",
    (IN, RESUME): "There is no break in progress",
    (OUT, RESUME): "There is no break in progress",
}


def allowed_next(last: Optional[TimeEntryType]) -> frozenset[TimeEntryType]:
    return ALLOWED_AFTER[last]


def validate_transition(last: Optional[TimeEntryType], new: TimeEntryType) -> None:
    """Raise ValidationError when ``new`` may not follow ``last`` in the same work day."""
    if new in ALLOWED_AFTER[last]:
        return
    if last is None:
        raise ValidationError("The first punch of the day must be a clock-in")
    raise ValidationError(_REJECTIONS.get((last, new), f"{new.value} is not allowed after {last.value}"))
