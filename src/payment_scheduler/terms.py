"""Payment term rules.

Pure functions computing when a payment is scheduled. The caller supplies
"now" (from its clock) and a snapshot of the payer's cash balance.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from payment_scheduler.model import AUTOMOTIVE_GRACE_PERIOD, PAYROLL_DAY_OF_MONTH


def invoice_due_date(
    base_due_date: datetime,
    *,
    is_automotive_supplier: bool,
    current_balance: Decimal | int,
    now: datetime,
) -> datetime:
    """Return the scheduled date for an invoice payment.

    Automotive suppliers get a grace period on top of the base due date.
    A negative balance replaces that result with twice the remaining time
    from ``now`` to the original base due date; the two rules never add up.
    The doubled runway is not clamped, so an overdue invoice lands in the past.
    """

    scheduled = base_due_date
    if is_automotive_supplier:
        scheduled = scheduled + AUTOMOTIVE_GRACE_PERIOD
    if current_balance < 0:
        remaining = base_due_date - now
        scheduled = now + remaining * 2
    return scheduled


def payroll_date(now: datetime) -> datetime:
    """Return the payroll date: the fixed day of the current month."""

    return now.replace(day=PAYROLL_DAY_OF_MONTH)


__all__ = ["invoice_due_date", "payroll_date"]
