"""Domain models for scheduled payments.

These dataclasses represent the core entities shared throughout the tool:
the payee records we owe money to, the normalised payment data derived from
them, and the snapshot handed over when a payment is transmitted.
"""

from __future__ import annotations  # Postponed evaluation of annotations (PEP 563)

from dataclasses import dataclass  # Dataclass utilities
from datetime import datetime, timedelta  # Due date arithmetic
from decimal import Decimal  # Monetary values
from typing import Literal  # Constrained string types for clarity

SupplierCategory = Literal["Automotive", "Software"]  # Derived from invoice amount

AUTOMOTIVE_AMOUNT_THRESHOLD = Decimal(1000)  # Exclusive: 1000 itself is Software
INVOICE_TERM = timedelta(days=14)  # Creation -> base due date
AUTOMOTIVE_GRACE_PERIOD = timedelta(days=5)  # Extension for automotive suppliers
PAYROLL_DAY_OF_MONTH = 10  # Salaries are scheduled on this day


@dataclass(frozen=True, slots=True)
class Invoice:
    """A trade invoice owed to a supplier."""

    invoice_id: str  # Natural identifier, reused as the payment id
    amount: Decimal  # Positive amount owed
    created_at: datetime  # Timezone-aware creation time

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError(f"Invoice {self.invoice_id} amount must be positive")

    @property
    def supplier_category(self) -> SupplierCategory:
        if self.amount > AUTOMOTIVE_AMOUNT_THRESHOLD:
            return "Automotive"
        return "Software"

    @property
    def supplier_name(self) -> str:
        return f"{self.supplier_category} Supplier"

    @property
    def is_automotive_supplier(self) -> bool:
        return self.supplier_category == "Automotive"

    @property
    def base_due_date(self) -> datetime:
        return self.created_at + INVOICE_TERM

    def __str__(self) -> str:
        return (
            f"invoice(id={self.invoice_id}, amount={self.amount}, "
            f"supplier={self.supplier_name})"
        )


@dataclass(frozen=True, slots=True)
class Employee:
    """An employee receiving payroll."""

    employee_id: str  # Internal identifier used for lookups
    tax_identifier: str  # Reused as the payment id
    bank_account_identifier: str  # Where the salary is paid
    base_salary: Decimal  # Positive monthly amount

    def __post_init__(self) -> None:
        if self.base_salary <= 0:
            raise ValueError(f"Employee {self.employee_id} salary must be positive")

    def __str__(self) -> str:
        return f"employee(id={self.employee_id}, tax_id={self.tax_identifier})"


PayeeRecord = Invoice | Employee  # Closed set of payee variants


@dataclass(frozen=True, slots=True)
class NormalizedPaymentData:
    """Amount and recipient, independent of the payee variant."""

    amount: Decimal
    recipient: str  # Supplier name for invoices, bank account for employees


@dataclass(frozen=True, slots=True)
class PaymentSnapshot:
    """What a transmitted payment releases to the outside world."""

    payment_method: str
    data: NormalizedPaymentData
    scheduled_date: datetime


__all__ = [
    "AUTOMOTIVE_AMOUNT_THRESHOLD",
    "AUTOMOTIVE_GRACE_PERIOD",
    "Employee",
    "INVOICE_TERM",
    "Invoice",
    "NormalizedPaymentData",
    "PAYROLL_DAY_OF_MONTH",
    "PayeeRecord",
    "PaymentSnapshot",
    "SupplierCategory",
]
