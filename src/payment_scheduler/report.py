from __future__ import annotations

import json
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Iterable

from payment_scheduler.model import PaymentSnapshot
from payment_scheduler.payment import Payment


def iso_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def _serialise_payment(payment: Payment) -> Dict[str, Any]:
    return {
        "id": payment.payment_id,
        "payment_method": payment.payment_method,
        "amount": str(payment.data.amount),
        "recipient": payment.data.recipient,
        "scheduled_date": payment.scheduled_date.isoformat(),
        "transmitted": payment.transmitted,
    }


def _serialise_snapshot(snapshot: PaymentSnapshot) -> Dict[str, Any]:
    return {
        "payment_method": snapshot.payment_method,
        "amount": str(snapshot.data.amount),
        "recipient": snapshot.data.recipient,
        "scheduled_date": snapshot.scheduled_date.isoformat(),
    }


def build_report_payload(
    payments: Iterable[Payment],
    transmissions: Iterable[PaymentSnapshot],
    current_balance: Decimal,
) -> Dict[str, Any]:
    """Build JSON payload listing recorded payments and transmissions."""

    return {
        "status": "success",
        "timestamp": iso_timestamp(),
        "current_balance": str(current_balance),
        "payments": [_serialise_payment(p) for p in payments],
        "transmissions": [_serialise_snapshot(s) for s in transmissions],
        "error": None,
    }


def build_error_payload(
    error: Exception,
    current_balance: Decimal,
    payments: Iterable[Payment] = (),
) -> Dict[str, Any]:
    """Build the error payload, listing payments saved before the failure."""

    return {
        "status": "error",
        "timestamp": iso_timestamp(),
        "current_balance": str(current_balance),
        "payments": [_serialise_payment(p) for p in payments],
        "transmissions": [],
        "error": str(error),
    }


def write_report_to_json(payload: Dict[str, Any], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    return output_path


__all__ = [
    "build_error_payload",
    "build_report_payload",
    "iso_timestamp",
    "write_report_to_json",
]
