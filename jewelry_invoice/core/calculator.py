"""
Invoice aggregation: turns a priced Draft into a frozen Invoice.
"""
import hashlib
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from jewelry_invoice.core.exceptions import InvoiceInputError
from jewelry_invoice.core.models import BankInfo, Draft, Invoice, Item, ZERO
from jewelry_invoice.core.validators import DraftValidator
from jewelry_invoice.utils.decorators import audit_log, measure_performance

logger = logging.getLogger(__name__)


EDITABLE_FIELDS = frozenset({
    'seller', 'buyer', 'memo_no', 'city', 'place_of_delivery', 'notes',
})


def round_half_up(value: Decimal) -> Decimal:
    return value.quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def default_memo_no(invoice_no: str) -> str:
    """GST/ followed by the last 8 characters of the invoice number"""
    return f"GST/{invoice_no[-8:]}"


def default_city(address: str) -> str:
    """First comma-separated part of an address, else its first word"""
    address = (address or '').strip()
    if not address:
        return ""
    if ',' in address:
        return address.split(',')[0].strip()
    return address.split()[0]


def compute_irn(invoice_no: str, timestamp: str) -> str:
    """Invoice reference number: SHA-256 hex of invoice number + timestamp"""
    return hashlib.sha256(f"{invoice_no}{timestamp}".encode('utf-8')).hexdigest()


class InvoiceCalculator:
    """
    Aggregates item prices into invoice totals.

    Items are carried over exactly as drafted; nothing is re-priced here.
    Tax is computed once on the taxable amount, and the only rounding is
    the round-off to whole rupees.
    """

    def __init__(self, validator: DraftValidator = None):
        self.validator = validator or DraftValidator()

    @measure_performance
    @audit_log
    def calculate(self, draft: Draft, bank_info: BankInfo = None) -> Invoice:
        """
        Build the frozen invoice for a draft.

        Args:
            draft: Priced draft
            bank_info: Seller's settlement account shown on the document

        Returns:
            Invoice

        Raises:
            InvoiceInputError: If the draft is missing mandatory data
        """
        check = self.validator.validate(draft)
        if not check.is_valid:
            messages = "; ".join(v.message for v in check.errors)
            raise InvoiceInputError(
                f"Invoice {draft.invoice_no or 'N/A'} rejected: {messages}",
                violations=check.errors,
            )

        items = tuple(
            Item(**item.model_dump(exclude={'cost_value'}),
                 cost_value=item.unit_price * item.quantity)
            for item in draft.items
        )

        subtotal = sum((item.cost_value for item in items), ZERO)
        exchange_value = draft.exchange_gold.exchange_value if draft.exchange_gold else ZERO
        taxable_amount = max(ZERO, subtotal - draft.discount - exchange_value)
        tax_amount = taxable_amount * draft.tax_rate / Decimal(100)
        gross_total = taxable_amount + tax_amount
        round_off = round_half_up(gross_total) - gross_total
        net_amount = gross_total + round_off

        payment_split = None
        if draft.payment_split is not None:
            payment_split = draft.payment_split.reconciled(net_amount)
            if payment_split.is_overpaid:
                logger.warning(
                    f"Invoice {draft.invoice_no} overpaid by {-payment_split.due_amount}"
                )

        issue_timestamp = draft.issue_date.isoformat()

        invoice = Invoice(
            invoice_no=draft.invoice_no,
            issue_date=draft.issue_date,
            seller=draft.seller,
            buyer=draft.buyer,
            items=items,
            exchange_gold=draft.exchange_gold,
            subtotal=subtotal,
            exchange_value=exchange_value,
            discount=draft.discount,
            taxable_amount=taxable_amount,
            tax_rate=draft.tax_rate,
            tax_amount=tax_amount,
            gross_total=gross_total,
            round_off=round_off,
            net_amount=net_amount,
            payment_split=payment_split,
            notes=draft.notes,
            bank_info=bank_info or BankInfo(),
            irn=compute_irn(draft.invoice_no, issue_timestamp),
            ack_no=draft.invoice_no[:15],
            ack_date=draft.issue_date.strftime('%d/%m/%Y'),
            memo_no=draft.memo_no if draft.memo_no is not None else default_memo_no(draft.invoice_no),
            city=draft.city if draft.city is not None else default_city(draft.buyer.address),
            place_of_delivery=(
                draft.place_of_delivery if draft.place_of_delivery is not None
                else draft.buyer.state_name or draft.seller.state_name
            ),
        )

        logger.info(
            f"Invoice {invoice.invoice_no}: {len(items)} items, "
            f"subtotal {subtotal}, net {net_amount}"
        )
        return invoice


def allocate_item_tax(invoice: Invoice) -> List[Decimal]:
    """
    Split the invoice tax across items in proportion to item cost value.

    Allocation uses the pre-discount cost value of each item. When the
    subtotal is zero every share is zero.
    """
    if invoice.subtotal <= 0:
        return [ZERO for _ in invoice.items]
    return [
        item.cost_value / invoice.subtotal * invoice.tax_amount
        for item in invoice.items
    ]


def draft_from_invoice(invoice: Invoice) -> Draft:
    """Rebuild an editable draft carrying the invoice's items unchanged"""
    return Draft(
        invoice_no=invoice.invoice_no,
        issue_date=invoice.issue_date,
        seller=invoice.seller,
        buyer=invoice.buyer,
        items=[item.model_dump(exclude={'cost_value'}) for item in invoice.items],
        exchange_gold=invoice.exchange_gold,
        discount=invoice.discount,
        tax_rate=invoice.tax_rate,
        payment_split=invoice.payment_split,
        notes=invoice.notes,
        memo_no=invoice.memo_no,
        city=invoice.city,
        place_of_delivery=invoice.place_of_delivery,
    )


def edit_invoice(invoice: Invoice, calculator: InvoiceCalculator = None,
                 **header_changes) -> Invoice:
    """
    Produce a new invoice with changed party/header fields.

    Only seller, buyer, memo_no, city, place_of_delivery and notes may
    change; items, variant numbers and weights stay identical.

    Raises:
        ValueError: If any other field is passed
    """
    forbidden = set(header_changes) - EDITABLE_FIELDS
    if forbidden:
        raise ValueError(
            f"Only header fields can be edited, got: {', '.join(sorted(forbidden))}"
        )

    draft = draft_from_invoice(invoice)
    for field, value in header_changes.items():
        setattr(draft, field, value)

    calculator = calculator or InvoiceCalculator()
    return calculator.calculate(draft, invoice.bank_info)
