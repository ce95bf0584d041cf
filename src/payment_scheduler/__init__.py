"""Payment scheduler.

Exposes the services and the high-level ``run_payments`` API for
programmatic use.
"""

from .errors import AlreadyTransmittedError, PayeeNotFoundError, PaymentError
from .payment import Payment
from .runner import run_payments
from .service import InvoiceService, PayrollService

__all__ = [
    "AlreadyTransmittedError",
    "InvoiceService",
    "PayeeNotFoundError",
    "Payment",
    "PaymentError",
    "PayrollService",
    "run_payments",
]
