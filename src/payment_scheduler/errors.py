"""Exceptions raised by the payment scheduler."""

from __future__ import annotations


class PaymentError(Exception):
    """Base class for payment scheduler failures."""


class AlreadyTransmittedError(PaymentError):
    """Raised when a payment is transmitted a second time."""

    def __init__(self, payment_id: str) -> None:
        super().__init__(f"Payment {payment_id} already sent")
        self.payment_id = payment_id


class PayeeNotFoundError(PaymentError, LookupError):
    """Raised by payee lookups when no record matches the identifier."""

    def __init__(self, kind: str, payee_id: str) -> None:
        super().__init__(f"{kind} not found: {payee_id}")
        self.kind = kind  # "invoice" or "employee"
        self.payee_id = payee_id


__all__ = ["AlreadyTransmittedError", "PayeeNotFoundError", "PaymentError"]
