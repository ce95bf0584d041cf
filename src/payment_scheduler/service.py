"""Services turning a payee identifier into a recorded payment."""

from __future__ import annotations

import logging
from decimal import Decimal

from payment_scheduler import terms
from payment_scheduler.clock import Clock, SystemClock
from payment_scheduler.payment import Payment
from payment_scheduler.repositories import (
    EmployeeRepository,
    InvoiceRepository,
    PaymentLedger,
)
from payment_scheduler.translator import to_payment_data

logger = logging.getLogger(__name__)


class InvoiceService:
    """Pays supplier invoices according to the payment term rules."""

    def __init__(
        self,
        invoice_repository: InvoiceRepository,
        payment_ledger: PaymentLedger,
        clock: Clock | None = None,
    ) -> None:
        self._invoices = invoice_repository
        self._ledger = payment_ledger
        self._clock = clock or SystemClock()

    def pay_invoice(
        self,
        invoice_id: str,
        payment_method: str,
        *,
        current_balance: Decimal | int,
    ) -> Payment:
        """Schedule and record the payment of one invoice.

        ``current_balance`` is the payer's cash position at call time; it is
        read once. Lookup failures propagate and nothing is saved.
        """

        invoice = self._invoices.get_invoice(invoice_id)
        scheduled_date = terms.invoice_due_date(
            invoice.base_due_date,
            is_automotive_supplier=invoice.is_automotive_supplier,
            current_balance=current_balance,
            now=self._clock.now(),
        )
        payment = Payment(
            payment_id=invoice.invoice_id,
            payment_method=payment_method,
            data=to_payment_data(invoice),
            scheduled_date=scheduled_date,
        )
        self._ledger.save(payment)
        logger.info(
            "Invoice %s to %s scheduled for %s",
            invoice.invoice_id,
            payment.data.recipient,
            scheduled_date.isoformat(),
        )
        return payment


class PayrollService:
    """Pays employee salaries on the fixed payroll day."""

    def __init__(
        self,
        employee_repository: EmployeeRepository,
        payment_ledger: PaymentLedger,
        clock: Clock | None = None,
    ) -> None:
        self._employees = employee_repository
        self._ledger = payment_ledger
        self._clock = clock or SystemClock()

    def pay_employee(self, employee_id: str, payment_method: str) -> Payment:
        """Schedule and record one employee's salary payment."""

        employee = self._employees.get_employee(employee_id)
        payment = Payment(
            payment_id=employee.tax_identifier,
            payment_method=payment_method,
            data=to_payment_data(employee),
            scheduled_date=terms.payroll_date(self._clock.now()),
        )
        self._ledger.save(payment)
        logger.info(
            "Salary of employee %s scheduled for %s",
            employee.employee_id,
            payment.scheduled_date.isoformat(),
        )
        return payment


__all__ = ["InvoiceService", "PayrollService"]
