import pytest

from timetrack.core.exceptions import ConflictError, ValidationError

COMPANY_ID = 1


def test_names_are_unique_per_company(container):
    service = container.break_type_service
    service.create(company_id=COMPANY_ID, name="Coffee")

    with pytest.raises(ConflictError):
        service.create(company_id=COMPANY_ID, name="Coffee")


def test_color_and_limit_are_validated(container):
    service = container.break_type_service

    with pytest.raises(ValidationError, match="#RRGGBB"):
        service.create(company_id=COMPANY_ID, name="Lunch", color="red")

    lunch = service.create(company_id=COMPANY_ID, name="Lunch", max_minutes=60)
    assert lunch.color == "#F59E0B"
    assert lunch.max_minutes == 60


def test_referenced_break_type_is_only_deactivated(container, repos):
    service = container.break_type_service
    used = service.create(company_id=COMPANY_ID, name="Coffee")
    unused = service.create(company_id=COMPANY_ID, name="Smoke")
    repos.break_types_repo.entry_counts[used.break_type_id] = 3

    assert service.delete(company_id=COMPANY_ID, break_type_id=used.break_type_id) is False
    assert service.delete(company_id=COMPANY_ID, break_type_id=unused.break_type_id) is True

    remaining = service.list(company_id=COMPANY_ID)
    assert [(b.name, b.active) for b in remaining] == [("Coffee", False)]
