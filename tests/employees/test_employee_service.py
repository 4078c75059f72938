import pytest

from timetrack.core.exceptions import AuthenticationError, ConflictError, ValidationError

COMPANY_ID = 1


def test_create_hashes_the_pin(container, repos):
    employee = container.employee_service.create(
        company_id=COMPANY_ID, name="Nora", surname=" ", dni="55555555e", pin="4321"
    )

    assert employee.dni == "55555555E"
    assert employee.surname is None
    assert employee.full_name == "Nora"
    assert employee.pin_hash != "4321"
    assert container.employee_service.verify_pin(company_id=COMPANY_ID, dni="55555555E", pin="4321") == employee


def test_create_validates_pin_and_dni(container):
    service = container.employee_service

    with pytest.raises(ValidationError, match="PIN"):
        service.create(company_id=COMPANY_ID, name="Nora", surname=None, dni="55555555E", pin="12")
    with pytest.raises(ConflictError):
        service.create(company_id=COMPANY_ID, name="Clone", surname=None, dni="11111111A", pin="1234")


def test_inactive_employee_cannot_use_the_kiosk(container):
    with pytest.raises(AuthenticationError):
        container.employee_service.verify_pin(company_id=COMPANY_ID, dni="33333333C", pin="1234")


def test_set_active(container):
    employee = container.employee_service.set_active(company_id=COMPANY_ID, employee_id=3, active=True)

    assert employee.active
