"""QuickBooks COM gateway recording scheduled payments.

This module communicates with QuickBooks Desktop via the QBXML Request Processor
COM interface exposed by ``pywin32``. Each saved payment becomes a check
transaction dated on its scheduled date, so the QuickBooks company file acts
as the payment ledger.
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import logging
import xml.etree.ElementTree as ET  # XML parsing for QBXML responses
from contextlib import contextmanager  # For clean session management
from typing import Iterator  # Type hints for readability

try:  # Imported lazily to allow testing without pywin32
    import win32com.client  # type: ignore
except ImportError:  # pragma: no cover
    win32com = None  # type: ignore  # Fallback used to raise a clear error later

from payment_scheduler.payment import Payment

logger = logging.getLogger(__name__)

APP_NAME = "Payment Scheduler"  # Name registered with the QuickBooks connection
DEFAULT_BANK_ACCOUNT = "Checking"  # Account the checks are drawn on
DEFAULT_EXPENSE_ACCOUNT = "Accounts Payable"  # Account the amount is booked to


def _require_win32com() -> None:
    """Ensure the win32com dependency is available before COM operations."""
    if win32com is None:  # pragma: no cover - exercised via tests
        raise RuntimeError("pywin32 is required to communicate with QuickBooks")


@contextmanager
def _qb_session() -> Iterator[tuple[object, object]]:
    """Context manager that opens and closes a QBXML request processor session.

    Yields a tuple of (session, ticket) that must be used to send requests.
    Ensures sessions are properly closed even if errors occur.
    """
    _require_win32com()
    session = win32com.client.Dispatch("QBXMLRP2.RequestProcessor")
    session.OpenConnection2("", APP_NAME, 1)  # Register connection with an app name
    ticket = session.BeginSession("", 0)  # Use the currently open company file
    try:
        yield session, ticket
    finally:
        try:
            session.EndSession(ticket)  # Always end the session
        finally:
            session.CloseConnection()  # And close the connection regardless of errors


def _send_qbxml(qbxml: str) -> ET.Element:
    """Send a QBXML request and return the parsed XML root element."""
    with _qb_session() as (session, ticket):
        process = session.ProcessRequest  # type: ignore[attr-defined]
        raw_response = process(ticket, qbxml)
    return _parse_response(raw_response)


def _parse_response(raw_xml: str) -> ET.Element:
    """Parse raw QBXML response and raise on error status codes."""
    root = ET.fromstring(raw_xml)
    response = root.find(".//*[@statusCode]")  # Locate the first node with a status
    if response is None:
        raise RuntimeError("QuickBooks response missing status information")

    status_code = int(response.get("statusCode", "0"))
    status_message = response.get("statusMessage", "")
    if status_code != 0:
        logger.error("QuickBooks error (%s): %s", status_code, status_message)
        raise RuntimeError(status_message)
    return root


def _escape_xml(value: str) -> str:
    """Escape XML special characters for safe QBXML construction."""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def build_check_qbxml(
    payment: Payment,
    *,
    bank_account: str = DEFAULT_BANK_ACCOUNT,
    expense_account: str = DEFAULT_EXPENSE_ACCOUNT,
) -> str:
    """Return the QBXML ``CheckAddRq`` recording ``payment``."""

    memo = f"{payment.payment_id} ({payment.payment_method})"
    bank = _escape_xml(bank_account)
    payee = _escape_xml(payment.data.recipient)
    expense = _escape_xml(expense_account)
    return (
        '<?xml version="1.0"?>\n'
        '<?qbxml version="13.0"?>\n'
        "<QBXML>\n"
        '  <QBXMLMsgsRq onError="stopOnError">\n'
        "    <CheckAddRq>\n"
        "      <CheckAdd>\n"
        f"        <AccountRef><FullName>{bank}</FullName></AccountRef>\n"
        f"        <PayeeEntityRef><FullName>{payee}</FullName></PayeeEntityRef>\n"
        f"        <TxnDate>{payment.scheduled_date.date().isoformat()}</TxnDate>\n"
        f"        <Memo>{_escape_xml(memo)}</Memo>\n"
        "        <IsToBePrinted>false</IsToBePrinted>\n"
        "        <ExpenseLineAdd>\n"
        f"          <AccountRef><FullName>{expense}</FullName></AccountRef>\n"
        f"          <Amount>{payment.data.amount:.2f}</Amount>\n"
        "        </ExpenseLineAdd>\n"
        "      </CheckAdd>\n"
        "    </CheckAddRq>\n"
        "  </QBXMLMsgsRq>\n"
        "</QBXML>"
    )


class QuickBooksPaymentLedger:
    """Payment ledger writing each payment to QuickBooks as a check."""

    def __init__(
        self,
        bank_account: str = DEFAULT_BANK_ACCOUNT,
        expense_account: str = DEFAULT_EXPENSE_ACCOUNT,
    ) -> None:
        self.bank_account = bank_account
        self.expense_account = expense_account
        self.txn_ids: dict[str, str] = {}  # payment id -> QuickBooks TxnID

    def save(self, payment: Payment) -> None:
        qbxml = build_check_qbxml(
            payment,
            bank_account=self.bank_account,
            expense_account=self.expense_account,
        )
        root = _send_qbxml(qbxml)
        txn_id = (root.findtext(".//CheckRet/TxnID") or "").strip()
        if not txn_id:
            raise RuntimeError(
                f"QuickBooks did not return a check for payment {payment.payment_id}"
            )
        self.txn_ids[payment.payment_id] = txn_id
        logger.info("Payment %s saved to QuickBooks as %s", payment.payment_id, txn_id)


__all__ = ["QuickBooksPaymentLedger", "build_check_qbxml"]
