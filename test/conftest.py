from datetime import datetime, timezone
from decimal import Decimal

import pytest

from payment_scheduler.clock import FixedClock
from payment_scheduler.model import Employee, Invoice

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def automotive_invoice():
    return Invoice(invoice_id="124", amount=Decimal(1500), created_at=NOW)


@pytest.fixture
def software_invoice():
    return Invoice(invoice_id="123", amount=Decimal(600), created_at=NOW)


@pytest.fixture
def employee():
    return Employee(
        employee_id="124",
        tax_identifier="9900223341124",
        bank_account_identifier="1234000056780000124",
        base_salary=Decimal(12000),
    )
