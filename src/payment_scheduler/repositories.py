"""Collaborator interfaces and in-memory implementations.

Services depend only on the protocols below. The in-memory classes back the
command line runner (fed from a workbook) and the tests.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, List, Protocol

from payment_scheduler.errors import PayeeNotFoundError
from payment_scheduler.model import Employee, Invoice
from payment_scheduler.payment import Payment

logger = logging.getLogger(__name__)


class InvoiceRepository(Protocol):
    def get_invoice(self, invoice_id: str) -> Invoice: ...


class EmployeeRepository(Protocol):
    def get_employee(self, employee_id: str) -> Employee: ...


class PaymentLedger(Protocol):
    def save(self, payment: Payment) -> None: ...


class InMemoryInvoiceRepository:
    """Invoice lookup over a fixed set of invoices."""

    def __init__(self, invoices: Iterable[Invoice] = ()) -> None:
        self._by_id: Dict[str, Invoice] = {inv.invoice_id: inv for inv in invoices}

    def get_invoice(self, invoice_id: str) -> Invoice:
        try:
            return self._by_id[invoice_id]
        except KeyError:
            raise PayeeNotFoundError("invoice", invoice_id) from None


class InMemoryEmployeeRepository:
    """Employee lookup over a fixed set of employees."""

    def __init__(self, employees: Iterable[Employee] = ()) -> None:
        self._by_id: Dict[str, Employee] = {emp.employee_id: emp for emp in employees}

    def get_employee(self, employee_id: str) -> Employee:
        try:
            return self._by_id[employee_id]
        except KeyError:
            raise PayeeNotFoundError("employee", employee_id) from None


class InMemoryPaymentLedger:
    """Ledger that keeps saved payments in a list, in save order."""

    def __init__(self) -> None:
        self.payments: List[Payment] = []
        self._lock = threading.Lock()

    def save(self, payment: Payment) -> None:
        with self._lock:
            self.payments.append(payment)
        logger.info("Payment saved")


__all__ = [
    "EmployeeRepository",
    "InMemoryEmployeeRepository",
    "InMemoryInvoiceRepository",
    "InMemoryPaymentLedger",
    "InvoiceRepository",
    "PaymentLedger",
]
