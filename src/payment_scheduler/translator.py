"""Translate payee records into normalised payment data."""

from __future__ import annotations

from payment_scheduler.model import (
    Employee,
    Invoice,
    NormalizedPaymentData,
    PayeeRecord,
)


def to_payment_data(record: PayeeRecord) -> NormalizedPaymentData:
    """Return the amount and recipient for ``record``.

    Invoices pay the supplier by display name; employees are paid into their
    bank account. Each payee variant has exactly one branch here.
    """

    if isinstance(record, Invoice):
        return NormalizedPaymentData(
            amount=record.amount,
            recipient=record.supplier_name,
        )
    if isinstance(record, Employee):
        return NormalizedPaymentData(
            amount=record.base_salary,
            recipient=record.bank_account_identifier,
        )
    raise TypeError(f"Unsupported payee record: {type(record).__name__}")


__all__ = ["to_payment_data"]
