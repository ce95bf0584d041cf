import json
from decimal import Decimal
from unittest.mock import Mock

from openpyxl import Workbook

from payment_scheduler.cli import main
from payment_scheduler.repositories import InMemoryPaymentLedger
from payment_scheduler.runner import run_payments


def create_company_workbook(path):
    workbook = Workbook()
    workbook.remove(workbook.active)
    invoices = workbook.create_sheet("invoices")
    invoices.append(["ID", "Amount", "Created"])
    invoices.append([123, 600, "2025-06-01T00:00:00+00:00"])
    invoices.append([124, 1500, "2025-06-01T00:00:00+00:00"])
    employees = workbook.create_sheet("employees")
    employees.append(["ID", "Tax ID", "Bank Account", "Base Salary"])
    employees.append([124, "9900223341124", "1234000056780000124", 12000])
    workbook.save(path)
    return path


def _load(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


# --------------------------------------------------------------------
# RUNNER TESTS
# --------------------------------------------------------------------
def test_run_payments_success(tmp_path, clock):
    workbook = create_company_workbook(tmp_path / "company.xlsx")
    ledger = InMemoryPaymentLedger()

    report_path = run_payments(
        str(workbook),
        invoice_ids=["124", "123"],
        employee_ids=["124"],
        current_balance=Decimal(1000),
        ledger=ledger,
        clock=clock,
        output_path=str(tmp_path / "out" / "report.json"),
    )

    report = _load(report_path)
    assert report["status"] == "success"
    assert report["error"] is None
    assert report["current_balance"] == "1000"
    assert [p["id"] for p in report["payments"]] == ["124", "123", "9900223341124"]
    assert report["payments"][0]["recipient"] == "Automotive Supplier"
    assert report["payments"][0]["scheduled_date"] == "2025-06-20T00:00:00+00:00"
    assert report["payments"][1]["scheduled_date"] == "2025-06-15T00:00:00+00:00"
    assert report["payments"][2]["scheduled_date"] == "2025-06-10T00:00:00+00:00"
    assert report["payments"][2]["payment_method"] == "bank transfer"
    assert report["transmissions"] == []
    assert len(ledger.payments) == 3


def test_run_payments_transmits(tmp_path, clock):
    workbook = create_company_workbook(tmp_path / "company.xlsx")
    ledger = InMemoryPaymentLedger()

    report_path = run_payments(
        str(workbook),
        invoice_ids=["123"],
        current_balance=Decimal(-1200),
        ledger=ledger,
        transmit=True,
        clock=clock,
        output_path=str(tmp_path / "report.json"),
    )

    report = _load(report_path)
    assert report["payments"][0]["transmitted"] is True
    assert report["transmissions"] == [
        {
            "payment_method": "credit card",
            "amount": "600",
            "recipient": "Software Supplier",
            "scheduled_date": "2025-06-29T00:00:00+00:00",
        }
    ]
    assert ledger.payments[0].transmitted is True


def test_run_payments_only_reads_needed_sheets(tmp_path, clock):
    path = tmp_path / "employees_only.xlsx"
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "employees"
    sheet.append(["ID", "Tax ID", "Bank Account", "Base Salary"])
    sheet.append([1, "T1", "B1", 100])
    workbook.save(path)

    report = _load(
        run_payments(
            str(path),
            employee_ids=["1"],
            clock=clock,
            output_path=str(tmp_path / "report.json"),
        )
    )
    assert report["status"] == "success"


def test_run_payments_unknown_payee_reports_error(tmp_path, clock):
    workbook = create_company_workbook(tmp_path / "company.xlsx")
    ledger = Mock()

    report = _load(
        run_payments(
            str(workbook),
            invoice_ids=["999"],
            ledger=ledger,
            clock=clock,
            output_path=str(tmp_path / "report.json"),
        )
    )

    assert report["status"] == "error"
    assert "999" in report["error"]
    assert report["payments"] == []
    ledger.save.assert_not_called()


def test_run_payments_missing_workbook(tmp_path):
    report = _load(
        run_payments(
            str(tmp_path / "missing.xlsx"),
            invoice_ids=["1"],
            output_path=str(tmp_path / "report.json"),
        )
    )
    assert report["status"] == "error"
    assert "Workbook not found" in report["error"]


def test_run_payments_unreadable_workbook(tmp_path):
    csv_path = tmp_path / "company.csv"
    csv_path.write_text("ID,Amount\n1,100\n", encoding="utf-8")

    report = _load(
        run_payments(
            str(csv_path),
            invoice_ids=["1"],
            output_path=str(tmp_path / "report.json"),
        )
    )
    assert report["status"] == "error"
    assert "Workbook could not be read" in report["error"]


def test_run_payments_non_finite_amount(tmp_path, clock):
    path = tmp_path / "nan.xlsx"
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "invoices"
    sheet.append(["ID", "Amount"])
    sheet.append([1, "NaN"])
    workbook.save(path)

    report = _load(
        run_payments(
            str(path),
            invoice_ids=["1"],
            clock=clock,
            output_path=str(tmp_path / "report.json"),
        )
    )
    assert report["status"] == "error"
    assert "Invalid Amount for record 1" in report["error"]


class FlakyLedger(InMemoryPaymentLedger):
    """Ledger whose second save fails, like QuickBooks going away mid-run."""

    def save(self, payment):
        if self.payments:
            raise RuntimeError("QuickBooks down")
        super().save(payment)


def test_run_payments_reports_payments_saved_before_failure(tmp_path, clock):
    workbook = create_company_workbook(tmp_path / "company.xlsx")
    ledger = FlakyLedger()

    report = _load(
        run_payments(
            str(workbook),
            invoice_ids=["124", "123"],
            ledger=ledger,
            clock=clock,
            output_path=str(tmp_path / "report.json"),
        )
    )

    assert report["status"] == "error"
    assert report["error"] == "QuickBooks down"
    assert len(ledger.payments) == 1
    assert [p["id"] for p in report["payments"]] == ["124"]
    assert report["payments"][0]["transmitted"] is False
    assert report["transmissions"] == []


# --------------------------------------------------------------------
# CLI TESTS
# --------------------------------------------------------------------
def test_cli_success(tmp_path, capsys):
    workbook = create_company_workbook(tmp_path / "company.xlsx")
    output = tmp_path / "cli_report.json"

    code = main(
        [
            "--workbook",
            str(workbook),
            "--invoice",
            "123",
            "--employee",
            "124",
            "--balance",
            "-50",
            "--transmit",
            "--output",
            str(output),
        ]
    )

    assert code == 0
    assert "Report written to" in capsys.readouterr().out
    report = _load(output)
    assert report["current_balance"] == "-50"
    assert len(report["transmissions"]) == 2


def test_cli_error_exit_code(tmp_path):
    workbook = create_company_workbook(tmp_path / "company.xlsx")

    code = main(
        [
            "--workbook",
            str(workbook),
            "--employee",
            "404",
            "--output",
            str(tmp_path / "report.json"),
        ]
    )

    assert code == 1
