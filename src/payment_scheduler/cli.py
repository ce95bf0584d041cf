"""Command-line interface for the payment scheduler."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal, InvalidOperation

from .qb_gateway import QuickBooksPaymentLedger
from .repositories import InMemoryPaymentLedger
from .runner import DEFAULT_INVOICE_METHOD, DEFAULT_PAYROLL_METHOD, run_payments

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


def _decimal(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"invalid amount: {value!r}") from exc


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Schedule invoice and payroll payments from an Excel workbook"
    )
    parser.add_argument(
        "--workbook",
        required=True,
        help="Excel workbook containing the invoices and employees worksheets",
    )
    parser.add_argument(
        "--invoice", action="append", default=[], help="Invoice id to pay (repeatable)"
    )
    parser.add_argument(
        "--employee",
        action="append",
        default=[],
        help="Employee id to pay (repeatable)",
    )
    parser.add_argument("--invoice-method", default=DEFAULT_INVOICE_METHOD)
    parser.add_argument("--payroll-method", default=DEFAULT_PAYROLL_METHOD)
    parser.add_argument(
        "--balance",
        type=_decimal,
        default=Decimal(0),
        help="Current cash balance of the payer",
    )
    parser.add_argument(
        "--ledger",
        choices=["memory", "quickbooks"],
        default="memory",
        help="Where payments are recorded",
    )
    parser.add_argument(
        "--transmit", action="store_true", help="Transmit payments once recorded"
    )
    parser.add_argument("--output", help="Optional JSON output path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    if args.ledger == "quickbooks":
        ledger = QuickBooksPaymentLedger()
    else:
        ledger = InMemoryPaymentLedger()
    path = run_payments(
        args.workbook,
        invoice_ids=args.invoice,
        employee_ids=args.employee,
        current_balance=args.balance,
        invoice_method=args.invoice_method,
        payroll_method=args.payroll_method,
        ledger=ledger,
        transmit=args.transmit,
        output_path=args.output,
    )
    print(f"Report written to {path}")

    with path.open(encoding="utf-8") as f:
        status = json.load(f)["status"]
    return 0 if status == "success" else 1


if __name__ == "__main__":  # pragma: no cover - manual invocation
    sys.exit(main())
