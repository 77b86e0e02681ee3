"""Unit tests for invoice status transitions"""

import pytest
from datetime import datetime
from invoice_lifecycle.domain.errors import InvalidTransitionError
from invoice_lifecycle.domain.invoice import InvoiceStatus
from invoice_lifecycle.domain.status_transition import (
    PERMISSIVE_POLICY,
    STRICT_POLICY,
    apply_transition,
    get_transition_policy,
    is_transition_allowed,
)
from tests.factories import make_invoice

NOW = datetime(2024, 2, 15, 12, 0, 0)

STRICT_ALLOWED = {
    (InvoiceStatus.UNPAID, InvoiceStatus.ISSUED),
    (InvoiceStatus.UNPAID, InvoiceStatus.CANCELED),
    (InvoiceStatus.ISSUED, InvoiceStatus.PAID),
    (InvoiceStatus.ISSUED, InvoiceStatus.OVERDUE),
    (InvoiceStatus.ISSUED, InvoiceStatus.CANCELED),
    (InvoiceStatus.OVERDUE, InvoiceStatus.PAID),
    (InvoiceStatus.OVERDUE, InvoiceStatus.CANCELED),
}


class TestStrictPolicy:
    """Test the default adjacency table"""

    @pytest.mark.parametrize("current", list(InvoiceStatus))
    @pytest.mark.parametrize("target", list(InvoiceStatus))
    def test_matches_adjacency_table(self, current, target):
        assert is_transition_allowed(current, target) == ((current, target) in STRICT_ALLOWED)

    def test_paid_to_unpaid_is_rejected(self):
        assert is_transition_allowed(InvoiceStatus.PAID, InvoiceStatus.UNPAID) is False

    def test_unpaid_cannot_become_overdue_directly(self):
        assert is_transition_allowed(InvoiceStatus.UNPAID, InvoiceStatus.OVERDUE) is False

    def test_terminal_statuses(self):
        assert STRICT_POLICY.is_terminal(InvoiceStatus.PAID)
        assert STRICT_POLICY.is_terminal(InvoiceStatus.CANCELED)
        assert not STRICT_POLICY.is_terminal(InvoiceStatus.OVERDUE)


class TestPermissivePolicy:
    """Test the demo override"""

    def test_paid_to_unpaid_is_allowed(self):
        assert is_transition_allowed(InvoiceStatus.PAID, InvoiceStatus.UNPAID, PERMISSIVE_POLICY)

    @pytest.mark.parametrize("status", list(InvoiceStatus))
    def test_same_status_is_not_a_transition(self, status):
        assert not is_transition_allowed(status, status, PERMISSIVE_POLICY)


class TestGetTransitionPolicy:
    def test_resolves_names_case_insensitively(self):
        assert get_transition_policy("strict") is STRICT_POLICY
        assert get_transition_policy("PERMISSIVE") is PERMISSIVE_POLICY

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError):
            get_transition_policy("lenient")


class TestApplyTransition:
    """Test applying a status change to an invoice"""

    def test_issue_sets_status_and_updated_at(self):
        """
        Given: An unpaid invoice
        When: It is moved to ISSUED
        Then: A new invoice with status ISSUED is returned, original untouched
        """
        # Arrange
        invoice = make_invoice(status=InvoiceStatus.UNPAID)

        # Act
        issued = apply_transition(invoice, InvoiceStatus.ISSUED, NOW)

        # Assert
        assert issued.status == InvoiceStatus.ISSUED
        assert issued.updated_at == NOW
        assert invoice.status == InvoiceStatus.UNPAID

    def test_paid_at_is_set_once(self):
        """
        Given: An invoice that was paid, reverted and paid again (permissive)
        When: It is paid the second time
        Then: paid_at keeps the first payment timestamp
        """
        # Arrange
        first = datetime(2024, 2, 10, 9, 0, 0)
        invoice = make_invoice(status=InvoiceStatus.ISSUED)
        paid = apply_transition(invoice, InvoiceStatus.PAID, first)
        reverted = apply_transition(paid, InvoiceStatus.ISSUED, NOW, PERMISSIVE_POLICY)

        # Act
        paid_again = apply_transition(reverted, InvoiceStatus.PAID, NOW, PERMISSIVE_POLICY)

        # Assert
        assert paid_again.paid_at == first

    def test_cancel_sets_canceled_at(self):
        invoice = make_invoice(status=InvoiceStatus.OVERDUE)

        canceled = apply_transition(invoice, InvoiceStatus.CANCELED, NOW)

        assert canceled.canceled_at == NOW
        assert canceled.paid_at is None

    def test_invalid_transition_raises_with_both_statuses(self):
        """
        Given: A paid invoice under the strict policy
        When: It is moved to CANCELED
        Then: InvalidTransitionError names both statuses
        """
        invoice = make_invoice(status=InvoiceStatus.PAID)

        with pytest.raises(InvalidTransitionError) as exc_info:
            apply_transition(invoice, InvoiceStatus.CANCELED, NOW)

        assert exc_info.value.code == "INVALID_TRANSITION"
        assert "paid" in exc_info.value.message
        assert "canceled" in exc_info.value.message
