"""Excel extraction of payee records.

This module reads the ``invoices`` and ``employees`` worksheets from an Excel
workbook using ``openpyxl`` and converts rows into :class:`Invoice` and
:class:`Employee` objects.
"""

from __future__ import annotations

import zipfile  # Raised for corrupt .xlsx archives
from datetime import datetime, timezone  # Creation timestamps
from decimal import Decimal, InvalidOperation  # Monetary parsing
from pathlib import Path  # Filesystem path management
from typing import Any, Dict, Iterator, List  # Type hints for readability

from openpyxl import load_workbook  # Excel file loader
from openpyxl.utils.exceptions import InvalidFileException

from payment_scheduler.clock import Clock, SystemClock
from payment_scheduler.model import Employee, Invoice

INVOICES_SHEET = "invoices"
EMPLOYEES_SHEET = "employees"


def _iter_sheet(workbook_path: Path, sheet_name: str) -> Iterator[Dict[str, Any]]:
    """Yield each data row of ``sheet_name`` as a header -> value mapping."""

    workbook_path = Path(workbook_path)  # Ensure we have a Path instance
    if not workbook_path.exists():  # Validate the file exists
        raise FileNotFoundError(f"Workbook not found: {workbook_path}")

    # Open in read-only mode for performance and safety; use cell values only
    try:
        workbook = load_workbook(filename=workbook_path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile) as exc:
        raise ValueError(f"Workbook could not be read: {workbook_path}: {exc}") from exc
    try:
        try:
            sheet = workbook[sheet_name]
        except KeyError as exc:
            raise ValueError(f"Worksheet '{sheet_name}' not found in workbook") from exc

        rows = sheet.iter_rows(values_only=True)
        headers_row = next(rows, None)  # First row holds the column headers
        if headers_row is None:  # Empty sheet
            return

        headers = [
            str(header).strip() if header is not None else "" for header in headers_row
        ]
        for row in rows:
            yield {
                header: row[idx] if idx < len(row) else None
                for idx, header in enumerate(headers)
                if header
            }
    finally:
        workbook.close()  # Always close the workbook handle


def _normalise_id(raw: Any) -> str:
    """Turn a cell value into an identifier string (30.0 -> "30")."""

    if raw is None:
        return ""
    try:
        return str(int(raw))
    except (TypeError, ValueError):
        return str(raw).strip()


def _decimal(raw: Any, column: str, record_id: str) -> Decimal:
    message = f"Invalid {column} for record {record_id}: {raw!r}"
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(message) from exc
    if not value.is_finite():  # NaN and Infinity parse but are not amounts
        raise ValueError(message)
    return value


def _timestamp(raw: Any, record_id: str) -> datetime:
    """Return an aware datetime from a cell holding a datetime or ISO string."""

    if isinstance(raw, datetime):
        value = raw
    else:
        try:
            value = datetime.fromisoformat(str(raw).strip())
        except ValueError as exc:
            raise ValueError(
                f"Invalid Created for record {record_id}: {raw!r}"
            ) from exc
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)  # Excel has no timezones
    return value


def extract_invoices(
    workbook_path: Path, clock: Clock | None = None
) -> List[Invoice]:
    """Return invoices parsed from the ``invoices`` worksheet.

    Expected columns are ``ID``, ``Amount`` and an optional ``Created``
    timestamp; when ``Created`` is blank the invoice is taken as created now.
    Rows without an ID are skipped.
    """

    clock = clock or SystemClock()
    invoices: List[Invoice] = []
    for row in _iter_sheet(workbook_path, INVOICES_SHEET):
        invoice_id = _normalise_id(row.get("ID"))
        if not invoice_id:
            continue

        created_raw = row.get("Created")
        if created_raw in (None, ""):
            created_at = clock.now()
        else:
            created_at = _timestamp(created_raw, invoice_id)

        invoices.append(
            Invoice(
                invoice_id=invoice_id,
                amount=_decimal(row.get("Amount"), "Amount", invoice_id),
                created_at=created_at,
            )
        )
    return invoices


def extract_employees(workbook_path: Path) -> List[Employee]:
    """Return employees parsed from the ``employees`` worksheet.

    Expected columns: ``ID``, ``Tax ID``, ``Bank Account``, ``Base Salary``.
    """

    employees: List[Employee] = []
    for row in _iter_sheet(workbook_path, EMPLOYEES_SHEET):
        employee_id = _normalise_id(row.get("ID"))
        if not employee_id:
            continue

        employees.append(
            Employee(
                employee_id=employee_id,
                tax_identifier=_normalise_id(row.get("Tax ID")),
                bank_account_identifier=_normalise_id(row.get("Bank Account")),
                base_salary=_decimal(
                    row.get("Base Salary"), "Base Salary", employee_id
                ),
            )
        )
    return employees


__all__ = ["extract_employees", "extract_invoices"]
