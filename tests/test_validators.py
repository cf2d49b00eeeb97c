"""
Unit tests for draft and invoice consistency validators.
"""
import pytest
from decimal import Decimal

from jewelry_invoice.core.models import ItemDraft, Party, PaymentSplit
from jewelry_invoice.core.validators import (
    DraftValidator, InvoiceConsistencyValidator, InvoiceValidator,
)


@pytest.fixture
def validator():
    """Create consistency validator instance"""
    return InvoiceConsistencyValidator()


def codes(result):
    return [v.code for v in result.violations]


class TestDraftValidator:
    """Test suite for draft input checks"""

    def test_valid_draft_passes(self, make_draft):
        """Test that a complete draft passes"""
        result = DraftValidator().validate(make_draft())

        assert result.is_valid
        assert result.violations == []

    def test_blank_seller_is_warning(self, make_draft):
        """Test that a blank seller name warns without rejecting"""
        result = DraftValidator().validate(make_draft(seller=Party(name="")))

        assert result.is_valid
        assert codes(result) == ["REQ_003"]
        assert result.errors == []

    def test_zero_price_is_warning(self, make_draft):
        """Test that zero-priced lines (missing rate) only warn"""
        item = ItemDraft(variant_no="Z", product_name="Unpriced")
        result = DraftValidator().validate(make_draft(items=[item]))

        assert result.is_valid
        assert "LINE_004" in codes(result)

    def test_negative_price_rejected(self, make_draft):
        item = ItemDraft(variant_no="N", product_name="Broken", unit_price=Decimal("-5"))
        result = DraftValidator().validate(make_draft(items=[item]))

        assert not result.is_valid
        assert "LINE_003" in codes(result)

    def test_multiple_errors_collected(self, make_draft):
        """Test that every failing check is reported"""
        result = DraftValidator().validate(make_draft(invoice_no="", buyer=Party(name=""), items=[]))

        assert not result.is_valid
        assert codes(result) == ["REQ_001", "REQ_002", "LINE_001"]


class TestInvoiceConsistencyValidator:
    """Test suite for invoice arithmetic checks"""

    def test_calculated_invoice_is_consistent(self, validator, invoice):
        """Test that a calculator-built invoice passes every check"""
        result = validator.validate(invoice)

        assert result.is_valid
        assert result.violations == []

    def test_tampered_net_amount(self, validator, invoice):
        """Test that an altered net amount is detected"""
        tampered = invoice.model_copy(update={'net_amount': invoice.net_amount + 10})
        result = validator.validate(tampered)

        assert not result.is_valid
        assert "CALC_007" in codes(result)

    def test_tampered_tax(self, validator, invoice):
        tampered = invoice.model_copy(update={'tax_amount': Decimal("0")})
        result = validator.validate(tampered)

        assert "CALC_005" in codes(result)

    def test_round_off_out_of_range(self, validator, invoice):
        tampered = invoice.model_copy(update={
            'round_off': Decimal("1.5"),
            'net_amount': invoice.net_amount + Decimal("1.5"),
        })
        result = validator.validate(tampered)

        assert codes(result) == ["CALC_006"]

    def test_within_tolerance(self, validator, invoice):
        """Test that sub-paisa differences are accepted"""
        tampered = invoice.model_copy(update={'net_amount': invoice.net_amount + Decimal("0.005")})

        assert validator.validate(tampered).is_valid

    def test_overpaid_is_warning(self, validator, invoice):
        split = PaymentSplit(cash=Decimal("70000")).reconciled(invoice.net_amount)
        result = validator.validate(invoice.model_copy(update={'payment_split': split}))

        assert result.is_valid
        assert codes(result) == ["PAY_003"]

    def test_unreconciled_payment(self, validator, invoice):
        split = PaymentSplit(cash=Decimal("1000"), due_amount=Decimal("0"))
        result = validator.validate(invoice.model_copy(update={'payment_split': split}))

        assert not result.is_valid
        assert "PAY_002" in codes(result)


class TestInvoiceValidator:
    """Test suite for the combined interface"""

    def test_both_stages(self, make_draft, invoice):
        validator = InvoiceValidator()

        assert validator.validate_draft(make_draft()).is_valid
        assert validator.validate(invoice).is_valid
