from __future__ import annotations

import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List

from payment_scheduler import excel_reader
from payment_scheduler.clock import Clock, SystemClock
from payment_scheduler.errors import PaymentError
from payment_scheduler.model import PaymentSnapshot
from payment_scheduler.payment import Payment
from payment_scheduler.report import (
    build_error_payload,
    build_report_payload,
    write_report_to_json,
)
from payment_scheduler.repositories import (
    InMemoryEmployeeRepository,
    InMemoryInvoiceRepository,
    InMemoryPaymentLedger,
    PaymentLedger,
)
from payment_scheduler.service import InvoiceService, PayrollService

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "payment_report.json"
DEFAULT_INVOICE_METHOD = "credit card"
DEFAULT_PAYROLL_METHOD = "bank transfer"


def run_payments(
    workbook_path: str,
    *,
    invoice_ids: Iterable[str] = (),
    employee_ids: Iterable[str] = (),
    current_balance: Decimal = Decimal(0),
    invoice_method: str = DEFAULT_INVOICE_METHOD,
    payroll_method: str = DEFAULT_PAYROLL_METHOD,
    ledger: PaymentLedger | None = None,
    transmit: bool = False,
    clock: Clock | None = None,
    output_path: str | None = None,
) -> Path:
    """Pay the given invoices and employees from a workbook and write a JSON report.

    Payees are paid one at a time in the order given. The first failure stops
    the run and produces an error report listing the payments already saved.
    """

    report_path = Path(output_path) if output_path else Path(DEFAULT_REPORT_NAME)
    invoice_ids = list(invoice_ids)
    employee_ids = list(employee_ids)
    clock = clock or SystemClock()
    ledger = ledger if ledger is not None else InMemoryPaymentLedger()

    payments: List[Payment] = []  # Saved so far, reported even on failure

    try:
        # 1. Pay invoices, reading the sheet only when asked to
        if invoice_ids:
            invoices = excel_reader.extract_invoices(Path(workbook_path), clock)
            invoice_service = InvoiceService(
                InMemoryInvoiceRepository(invoices), ledger, clock
            )
            for invoice_id in invoice_ids:
                payments.append(
                    invoice_service.pay_invoice(
                        invoice_id, invoice_method, current_balance=current_balance
                    )
                )

        # 2. Pay employees
        if employee_ids:
            employees = excel_reader.extract_employees(Path(workbook_path))
            payroll_service = PayrollService(
                InMemoryEmployeeRepository(employees), ledger, clock
            )
            for employee_id in employee_ids:
                payments.append(
                    payroll_service.pay_employee(employee_id, payroll_method)
                )

        # 3. Optionally release the recorded payments
        transmissions: List[PaymentSnapshot] = []
        if transmit:
            transmissions = [payment.transmit() for payment in payments]

        payload = build_report_payload(payments, transmissions, current_balance)

    except (PaymentError, FileNotFoundError, ValueError, RuntimeError) as exc:
        logger.exception("Payment run failed")
        payload = build_error_payload(exc, current_balance, payments)

    return write_report_to_json(payload, report_path)


__all__ = ["DEFAULT_REPORT_NAME", "run_payments"]
