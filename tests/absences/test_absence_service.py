from __future__ import annotations

from datetime import date

import pytest

from timetrack.absences.calculator import absence_days
from timetrack.core.enums import AbsenceStatus, AbsenceType, HalfDayPart
from timetrack.core.exceptions import ConflictError, ValidationError

COMPANY_ID = 1


def _vacation(container, start="2025-03-10", end="2025-03-14", employee_id=1, **kwargs):
    return container.absence_service.create(
        company_id=COMPANY_ID,
        employee_id=employee_id,
        absence_type="VACATION",
        start_date=start,
        end_date=end,
        requested_by="ana",
        **kwargs,
    )


def _balance(container, employee_id=1):
    return container.vacation_service.get_balance(company_id=COMPANY_ID, employee_id=employee_id, year=2025)


def test_absence_days_in_half_day_steps():
    assert absence_days(date(2025, 3, 10), date(2025, 3, 14)) == 5.0
    assert absence_days(date(2025, 3, 10), date(2025, 3, 10), half_day=True) == 0.5
    assert (
        absence_days(
            date(2025, 3, 10),
            date(2025, 3, 14),
            start_half_day=HalfDayPart.AFTERNOON,
            end_half_day=HalfDayPart.MORNING,
        )
        == 4.0
    )
    assert (
        absence_days(
            date(2025, 3, 10),
            date(2025, 3, 10),
            start_half_day=HalfDayPart.AFTERNOON,
            end_half_day=HalfDayPart.MORNING,
        )
        == 0.5
    )


def test_vacation_request_reserves_pending_days(container):
    absence = _vacation(container)

    assert absence.status == AbsenceStatus.PENDING
    assert absence.days == 5.0
    balance = _balance(container)
    assert balance.total_days == 22
    assert balance.pending_days == 5.0
    assert balance.available_days == 17.0


def test_overlapping_request_is_rejected(container):
    _vacation(container)

    with pytest.raises(ConflictError):
        _vacation(container, start="2025-03-14", end="2025-03-17")


def test_approve_moves_pending_to_used(container):
    absence = _vacation(container)

    approved = container.absence_service.approve(company_id=COMPANY_ID, absence_id=absence.absence_id, approved_by="boss")

    assert approved.status == AbsenceStatus.APPROVED
    assert approved.approved_by == "boss"
    assert approved.approved_at is not None
    balance = _balance(container)
    assert balance.pending_days == 0
    assert balance.used_days == 5.0

    with pytest.raises(ConflictError, match="already been processed"):
        container.absence_service.approve(company_id=COMPANY_ID, absence_id=absence.absence_id)


def test_reject_needs_reason_and_frees_the_dates(container):
    absence = _vacation(container)
    service = container.absence_service

    with pytest.raises(ValidationError, match="rejection reason"):
        service.reject(company_id=COMPANY_ID, absence_id=absence.absence_id, rejection_reason="  ")

    rejected = service.reject(
        company_id=COMPANY_ID, absence_id=absence.absence_id, rejection_reason="Peak season", rejected_by="boss"
    )

    assert rejected.status == AbsenceStatus.REJECTED
    assert rejected.rejection_reason == "Peak season"
    assert _balance(container).pending_days == 0
    # Rejected absences do not block the period any more.
    _vacation(container)


def test_delete_cancels_pending_but_not_approved(container):
    service = container.absence_service
    pending = _vacation(container)
    approved = _vacation(container, start="2025-04-01", end="2025-04-02", approve=True)

    service.delete(company_id=COMPANY_ID, absence_id=pending.absence_id, deleted_by="admin")

    cancelled = service.get(company_id=COMPANY_ID, absence_id=pending.absence_id)
    assert cancelled.status == AbsenceStatus.CANCELLED
    assert "Cancelled by: admin" in cancelled.notes
    assert _balance(container).pending_days == 0
    assert _balance(container).used_days == 2.0

    with pytest.raises(ValidationError, match="approved"):
        service.delete(company_id=COMPANY_ID, absence_id=approved.absence_id)


def test_update_recomputes_days_and_pending(container):
    absence = _vacation(container)

    updated = container.absence_service.update(
        company_id=COMPANY_ID, absence_id=absence.absence_id, changes={"end_date": "2025-03-12"}
    )

    assert updated.days == 3.0
    assert _balance(container).pending_days == 3.0


def test_dates_of_approved_absence_are_frozen(container):
    absence = _vacation(container, approve=True)

    with pytest.raises(ValidationError, match="approved"):
        container.absence_service.update(
            company_id=COMPANY_ID, absence_id=absence.absence_id, changes={"end_date": "2025-03-20"}
        )


def test_type_of_approved_vacation_is_frozen(container):
    absence = _vacation(container, approve=True)
    used = _balance(container).used_days

    with pytest.raises(ValidationError, match="type of an approved"):
        container.absence_service.update(
            company_id=COMPANY_ID, absence_id=absence.absence_id, changes={"absence_type": "SICK_LEAVE"}
        )

    assert container.absence_service.get(company_id=COMPANY_ID, absence_id=absence.absence_id).absence_type == AbsenceType.VACATION
    assert _balance(container).used_days == used

    notes_only = container.absence_service.update(
        company_id=COMPANY_ID, absence_id=absence.absence_id, changes={"absence_type": "VACATION", "notes": "Trip"}
    )
    assert notes_only.notes == "Trip"
    assert _balance(container).used_days == used


def test_half_day_rules(container):
    with pytest.raises(ValidationError, match="same date"):
        _vacation(container, half_day=True)

    container.vacation_service.create_policy(company_id=COMPANY_ID, name="Strict", allow_half_days=False)
    with pytest.raises(ValidationError, match="half days"):
        _vacation(container, start="2025-03-10", end="2025-03-10", half_day=True)


def test_inactive_employee_cannot_request(container):
    with pytest.raises(ValidationError, match="inactive"):
        _vacation(container, employee_id=3)


def test_end_before_start_is_rejected(container):
    with pytest.raises(ValidationError, match="before the start"):
        _vacation(container, start="2025-03-14", end="2025-03-10")


def test_stats_group_by_status_type_and_month(container):
    _vacation(container)
    container.absence_service.create(
        company_id=COMPANY_ID,
        employee_id=2,
        absence_type="SICK_LEAVE",
        start_date="2025-04-07",
        end_date="2025-04-08",
        approve=True,
    )

    stats = container.absence_service.stats(company_id=COMPANY_ID)

    assert stats.total == 2
    assert stats.total_days == 7.0
    assert stats.by_status == {"pending": 1, "approved": 1, "rejected": 0, "cancelled": 0}
    assert stats.by_type["VACATION"] == {"count": 1, "days": 5.0}
    assert list(stats.by_month) == ["2025-03", "2025-04"]
