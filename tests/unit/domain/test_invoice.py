"""Unit tests for Invoice domain entities"""

import pytest
from datetime import date
from decimal import Decimal
from pydantic import ValidationError
from invoice_lifecycle.domain.billing_profile import BillingProfile
from invoice_lifecycle.domain.invoice import (
    BankInfo,
    Invoice,
    InvoiceFilterOptions,
    InvoiceItem,
    InvoiceStatus,
    calculate_tax,
    calculate_totals,
)
from invoice_lifecycle.domain.notification import ReminderEvent, ReminderType
from tests.factories import make_invoice


class TestInvoiceItem:
    """Test InvoiceItem amount and tax calculation"""

    def test_build_computes_amount_and_tax(self):
        """Test 1 x 30000 at 10% gives amount 30000 and tax 3000"""
        # Arrange & Act
        item = InvoiceItem.build("Monthly base fee", quantity=1, unit_price=30000, tax_rate=10)

        # Assert
        assert item.amount == Decimal("30000")
        assert item.tax_amount == Decimal("3000")

    def test_tax_is_floored(self):
        """Test fractional tax is rounded down"""
        # 3 x 333 = 999, 10% = 99.9
        item = InvoiceItem.build("Support", quantity=3, unit_price=333, tax_rate=10)

        assert item.amount == Decimal("999")
        assert item.tax_amount == Decimal("99")

    def test_calculate_tax_with_zero_rate(self):
        assert calculate_tax(Decimal("1234"), Decimal("0")) == Decimal("0")

    def test_recalculate_keeps_id(self):
        """Test recalculate refreshes derived fields and keeps the item id"""
        # Arrange
        item = InvoiceItem.build("Seats", quantity=2, unit_price=100, tax_rate=10)
        edited = item.model_copy(update={"quantity": Decimal("5")})

        # Act
        recalculated = edited.recalculate()

        # Assert
        assert recalculated.id == item.id
        assert recalculated.amount == Decimal("500")
        assert recalculated.tax_amount == Decimal("50")


class TestInvoiceTotals:
    """Test invoice total invariants"""

    def test_totals_are_sums_of_items(self):
        # Arrange
        items = [
            InvoiceItem.build("Base", quantity=1, unit_price=30000, tax_rate=10),
            InvoiceItem.build("Options", quantity=3, unit_price=333, tax_rate=10),
            InvoiceItem.build("Exempt", quantity=1, unit_price=500, tax_rate=0),
        ]

        # Act
        subtotal, tax_total, total = calculate_totals(items)

        # Assert
        assert subtotal == Decimal("31499")
        assert tax_total == Decimal("3099")
        assert total == subtotal + tax_total

    def test_empty_items_total_zero(self):
        assert calculate_totals([]) == (Decimal("0"), Decimal("0"), Decimal("0"))

    def test_billing_prefix_strips_sequence(self):
        invoice = make_invoice(invoice_number="202402-tenant-1-007")

        assert invoice.billing_prefix == "202402-tenant-1"


class TestBankInfo:
    """Test BankInfo snapshot"""

    def test_bank_info_is_immutable(self):
        # Arrange
        bank_info = BankInfo(
            bank_name="Sample Bank",
            branch_name="Main",
            account_number="1234567",
            account_holder="Sample Corp",
        )

        # Act & Assert
        with pytest.raises(ValidationError):
            bank_info.bank_name = "Other Bank"


class TestInvoiceFilterOptions:
    """Test filter matching"""

    def test_empty_filter_matches_everything(self):
        assert InvoiceFilterOptions().matches(make_invoice())

    def test_status_filter(self):
        invoice = make_invoice(status=InvoiceStatus.ISSUED)

        assert InvoiceFilterOptions(status=InvoiceStatus.ISSUED).matches(invoice)
        assert not InvoiceFilterOptions(status=InvoiceStatus.PAID).matches(invoice)

    def test_date_range_is_inclusive_on_issue_date(self):
        invoice = make_invoice(issue_date=date(2024, 2, 10))

        assert InvoiceFilterOptions(start_date=date(2024, 2, 10), end_date=date(2024, 2, 10)).matches(invoice)
        assert not InvoiceFilterOptions(start_date=date(2024, 2, 11)).matches(invoice)
        assert not InvoiceFilterOptions(end_date=date(2024, 2, 9)).matches(invoice)

    def test_customer_name_is_case_insensitive_substring(self):
        invoice = make_invoice(customer_name="Sample Corp")

        assert InvoiceFilterOptions(customer_name="sample").matches(invoice)
        assert InvoiceFilterOptions(customer_name="CORP").matches(invoice)
        assert not InvoiceFilterOptions(customer_name="Other").matches(invoice)

    def test_all_fields_must_match(self):
        invoice = make_invoice(customer_id="tenant-1", status=InvoiceStatus.UNPAID)

        assert not InvoiceFilterOptions(
            customer_id="tenant-1", status=InvoiceStatus.PAID
        ).matches(invoice)


class TestReminderEvent:
    def test_event_key_includes_type_invoice_and_date(self):
        reminder = ReminderEvent(invoice_id="inv1", customer_id="tenant-1", type=ReminderType.UNPAID)

        assert reminder.event_key(date(2024, 2, 20)) == "unpaid:inv1:2024-02-20"


class TestSchemaExamples:
    """OpenAPI examples declared through model_config"""

    def test_invoice_example(self):
        schema = Invoice.model_json_schema()

        assert schema["example"]["invoice_number"] == "202402-tenant-1-001"
        assert schema["example"]["version"] == 1

    def test_billing_profile_example(self):
        assert BillingProfile.model_json_schema()["example"]["customer_id"] == "tenant-1"

    def test_new_invoice_starts_at_version_1(self):
        assert make_invoice().version == 1
