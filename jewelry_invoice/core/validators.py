"""
Draft input checks and invoice arithmetic consistency checks.
"""
from decimal import Decimal

from jewelry_invoice.core.models import Draft, Invoice, ValidationResult, ZERO
from jewelry_invoice.utils.decorators import audit_log, measure_performance


class DraftValidator:
    """
    Checks mandatory draft data before anything is priced or rendered.
    Any ERROR here means the draft must be rejected.
    """

    def validate(self, draft: Draft) -> ValidationResult:
        """
        Run all input checks on a draft.

        Args:
            draft: Draft to check

        Returns:
            ValidationResult with list of violations
        """
        result = ValidationResult(invoice_no=draft.invoice_no or "N/A")

        self._check_header(draft, result)
        self._check_items(draft, result)
        self._check_payment(draft, result)

        return result

    def _check_header(self, draft: Draft, result: ValidationResult):
        """Invoice number and buyer name are mandatory"""
        if not draft.invoice_no or not draft.invoice_no.strip():
            result.add_violation(
                code='REQ_001',
                field='invoice_no',
                message='Invoice number is blank',
            )

        if not draft.buyer.name or not draft.buyer.name.strip():
            result.add_violation(
                code='REQ_002',
                field='buyer.name',
                message='Buyer name is blank',
            )

        if not draft.seller.name or not draft.seller.name.strip():
            result.add_violation(
                code='REQ_003',
                field='seller.name',
                message='Seller name is blank',
                severity='WARNING',
            )

    def _check_items(self, draft: Draft, result: ValidationResult):
        """Validate line item completeness"""
        if not draft.items:
            result.add_violation(
                code='LINE_001',
                field='items',
                message='Invoice must have at least one item',
            )
            return

        for idx, item in enumerate(draft.items):
            if item.quantity <= 0:
                result.add_violation(
                    code='LINE_002',
                    field=f'items[{idx}].quantity',
                    message=f'Item {item.variant_no}: Quantity must be positive',
                )

            if item.unit_price < 0:
                result.add_violation(
                    code='LINE_003',
                    field=f'items[{idx}].unit_price',
                    message=f'Item {item.variant_no}: Unit price cannot be negative',
                )

            if item.unit_price == 0:
                result.add_violation(
                    code='LINE_004',
                    field=f'items[{idx}].unit_price',
                    message=f'Item {item.variant_no}: Zero price (missing metal rate?)',
                    severity='WARNING',
                )

    def _check_payment(self, draft: Draft, result: ValidationResult):
        if draft.discount < 0:
            result.add_violation(
                code='PAY_001',
                field='discount',
                message='Discount cannot be negative',
            )


class InvoiceConsistencyValidator:
    """
    Verifies the arithmetic relations between the figures of a finished invoice.
    """

    # Allow small rounding differences
    TOLERANCE = Decimal('0.01')

    def validate(self, invoice: Invoice) -> ValidationResult:
        result = ValidationResult(invoice_no=invoice.invoice_no)

        self._check_items(invoice, result)
        self._check_totals(invoice, result)
        self._check_payment(invoice, result)

        return result

    def _mismatch(self, expected: Decimal, actual: Decimal) -> bool:
        return abs(expected - actual) > self.TOLERANCE

    def _check_items(self, invoice: Invoice, result: ValidationResult):
        for idx, item in enumerate(invoice.items):
            if self._mismatch(item.unit_price * item.quantity, item.cost_value):
                result.add_violation(
                    code='CALC_001',
                    field=f'items[{idx}].cost_value',
                    message=f'Item {item.variant_no}: cost value {item.cost_value} '
                            f'!= {item.unit_price} x {item.quantity}',
                )

            expected_unit = item.metal_price + item.making_charge + item.stone_amount
            if self._mismatch(expected_unit, item.unit_price):
                result.add_violation(
                    code='CALC_002',
                    field=f'items[{idx}].unit_price',
                    message=f'Item {item.variant_no}: unit price {item.unit_price} '
                            f'!= metal + making + stones ({expected_unit})',
                    severity='WARNING',
                )

    def _check_totals(self, invoice: Invoice, result: ValidationResult):
        calc_subtotal = sum((item.cost_value for item in invoice.items), ZERO)
        if self._mismatch(calc_subtotal, invoice.subtotal):
            result.add_violation(
                code='CALC_003',
                field='subtotal',
                message=f'Subtotal mismatch: invoice={invoice.subtotal}, calculated={calc_subtotal}',
            )

        calc_taxable = max(ZERO, invoice.subtotal - invoice.discount - invoice.exchange_value)
        if self._mismatch(calc_taxable, invoice.taxable_amount):
            result.add_violation(
                code='CALC_004',
                field='taxable_amount',
                message=f'Taxable mismatch: invoice={invoice.taxable_amount}, calculated={calc_taxable}',
            )

        calc_tax = invoice.taxable_amount * invoice.tax_rate / Decimal(100)
        if self._mismatch(calc_tax, invoice.tax_amount):
            result.add_violation(
                code='CALC_005',
                field='tax_amount',
                message=f'Tax mismatch: invoice={invoice.tax_amount}, calculated={calc_tax}',
            )

        if abs(invoice.round_off) >= 1:
            result.add_violation(
                code='CALC_006',
                field='round_off',
                message=f'Round off out of range: {invoice.round_off}',
            )

        calc_net = invoice.taxable_amount + invoice.tax_amount + invoice.round_off
        if self._mismatch(calc_net, invoice.net_amount):
            result.add_violation(
                code='CALC_007',
                field='net_amount',
                message=f'Net amount mismatch: invoice={invoice.net_amount}, calculated={calc_net}',
            )

    def _check_payment(self, invoice: Invoice, result: ValidationResult):
        split = invoice.payment_split
        if split is None:
            return

        if self._mismatch(split.total_paid + split.due_amount, invoice.net_amount):
            result.add_violation(
                code='PAY_002',
                field='payment_split.due_amount',
                message=f'Payment split does not reconcile: paid={split.total_paid}, '
                        f'due={split.due_amount}, net={invoice.net_amount}',
            )

        if split.is_overpaid:
            result.add_violation(
                code='PAY_003',
                field='payment_split',
                message=f'Overpaid by {-split.due_amount}',
                severity='WARNING',
            )


class InvoiceValidator:
    """
    Main validator interface.
    Combines draft input checks and invoice consistency checks.
    """

    def __init__(self):
        self.draft_validator = DraftValidator()
        self.consistency_validator = InvoiceConsistencyValidator()

    @measure_performance
    @audit_log
    def validate_draft(self, draft: Draft) -> ValidationResult:
        return self.draft_validator.validate(draft)

    @measure_performance
    @audit_log
    def validate(self, invoice: Invoice) -> ValidationResult:
        """
        Validate a finished invoice.

        Args:
            invoice: Invoice to validate

        Returns:
            ValidationResult
        """
        return self.consistency_validator.validate(invoice)
