"""
Invoice sections.

Each section is built with the invoice and appends layout elements to the
sink it is given. Sections never know where their output ends up: the
renderer hands them either the page flow or an in-memory sink.
"""
from abc import ABC, abstractmethod
from decimal import Decimal

from jewelry_invoice.core.exceptions import SectionRenderError
from jewelry_invoice.core.models import Invoice
from jewelry_invoice.rendering.layout import (
    CENTER, RIGHT, Cell, Divider, ElementSink, Spacer, Table, TextBlock, cells,
)
from jewelry_invoice.utils.currency import amount_in_words, format_indian, format_weight


TAGLINE = "Govt. approved BIS Certified hallmark Gold Jewellery"

TERMS_AND_CONDITIONS = (
    "No encashment or exchange without presentation of this Invoice.",
    "Any exchange of sold ornaments can be made within 48 hours, only if it is "
    "not tampered, repaired or used.",
    "The company is not liable for colours, damage, loss and breakage of ornaments.",
    "In case of payment by cheque, delivery of goods will be made only after "
    "realization of cheque.",
    "Terms & conditions are subject to change without prior notice.",
    "Including Hallmarking Charge",
    "Disputes if any, are subject to SAHARSA jurisdiction",
)

ITEM_HEADERS = (
    "Variant no", "Product name", "Material with Purity", "Net Qty",
    "Gross Weight (grams)", "Net Stone Weight (grams)", "Net Metal Weight (grams)",
    "Polish", "HSN", "Rate (per gm)", "Labour Charges (Rs.)",
    "Stone Amount (Rs.)", "COST Value (Rs.)",
)
ITEM_WIDTHS = (12, 15, 12, 5, 8, 10, 10, 8, 8, 12, 10, 10, 12)


def money(value: Decimal) -> str:
    return format_indian(value, decimals=True)


def money_or_dash(value: Decimal) -> str:
    return money(value) if value > 0 else "-"


class InvoiceSection(ABC):
    """Base class for a self-contained part of the document"""

    name = "section"

    def __init__(self, invoice: Invoice):
        self.invoice = invoice

    def is_applicable(self) -> bool:
        """False when the optional data this section shows is absent"""
        return True

    @abstractmethod
    def render(self, sink):
        pass


class HeaderSection(InvoiceSection):
    """Seller identity and the document title"""

    name = "header"

    def render(self, sink):
        seller = self.invoice.seller
        if not seller.name.strip():
            raise SectionRenderError(self.name, "seller name is blank")

        sink.append(TextBlock(seller.name.upper(), size=14, bold=True, align=CENTER))
        sink.append(TextBlock(seller.certification or TAGLINE, size=9, align=CENTER))
        if seller.address:
            sink.append(TextBlock(seller.address, size=9, align=CENTER))

        contact = []
        phones = [p for p in (seller.phone_primary or seller.phone, seller.phone_secondary) if p]
        if phones:
            contact.append(f"Phone: {', '.join(phones)}")
        if seller.email:
            contact.append(f"Email: {seller.email}")
        if contact:
            sink.append(TextBlock("  |  ".join(contact), size=9, align=CENTER))
        if seller.gstin:
            sink.append(TextBlock(f"GSTIN: {seller.gstin}", size=9, bold=True, align=CENTER))

        sink.append(Spacer(4))
        sink.append(TextBlock("TAX INVOICE", size=16, bold=True, align=CENTER, space_after=4))


class PartySection(InvoiceSection):
    """Buyer details next to the order references"""

    name = "party"

    def render(self, sink):
        invoice = self.invoice
        buyer = invoice.buyer
        if not buyer.name.strip():
            raise SectionRenderError(self.name, "buyer name is blank")

        customer = (
            ("Name", buyer.name.upper()),
            ("Address", buyer.address.upper()),
            ("City", invoice.city.upper()),
            ("Ph No.", buyer.phone),
        )
        references = (
            ("Order No.", invoice.invoice_no),
            ("Memo No.", invoice.memo_no),
            ("Date", invoice.ack_date),
            ("", ""),
        )

        rows = []
        for (label, value), (ref_label, ref_value) in zip(customer, references):
            rows.append((
                Cell(label, bold=True),
                Cell(f": {value}"),
                Cell(ref_label, bold=True),
                Cell(f": {ref_value}" if ref_label else ""),
            ))

        state = invoice.seller.state_name
        if invoice.seller.state_code:
            state = f"{state} ({invoice.seller.state_code})" if state else invoice.seller.state_code
        rows.append((
            Cell("State Name & Code", bold=True),
            Cell(f": {state}"),
            Cell("Place of Delivery", bold=True),
            Cell(f": {invoice.place_of_delivery}"),
        ))

        sink.append(Table(rows=tuple(rows), widths=(15, 45, 15, 25), font_size=9))
        sink.append(Spacer(4))


class ItemsTableSection(InvoiceSection):
    """Thirteen-column item grid with a totals row"""

    name = "items"

    def _product_cell(self, item) -> Cell:
        lines = [TextBlock(item.product_name.upper(), size=6, bold=True)]
        if item.diamond_carats > 0:
            lines.append(TextBlock(f"Diamond Wt {item.diamond_carats:.3f} Ct", size=6))
        if item.solitaire_carats > 0:
            lines.append(TextBlock(f"Solitaire Wt {item.solitaire_carats:.3f} Ct", size=6))
        return Cell(tuple(lines))

    def render(self, sink):
        items = self.invoice.items
        if not items:
            raise SectionRenderError(self.name, "invoice has no items")

        rows = [cells(*ITEM_HEADERS, bold=True, align=CENTER, shaded=True)]

        for item in items:
            rows.append((
                Cell(item.variant_no, align=CENTER),
                self._product_cell(item),
            ) + cells(
                item.material_with_purity,
                f"{item.quantity}N",
                format_weight(item.total_gross_weight),
                format_weight(item.total_stone_weight) if item.net_stone_weight > 0 else "-",
                format_weight(item.total_metal_weight),
                f"{format_weight(item.making_percent)}%",
                item.barcode_id or "-",
                money(item.rate_per_gram),
                money(item.total_making_charge),
                money_or_dash(item.total_stone_amount),
                money(item.cost_value),
                align=CENTER,
            ))

        total_stone_weight = sum(item.total_stone_weight for item in items)
        total_stone_amount = sum(item.total_stone_amount for item in items)
        rows.append((Cell("Total", colspan=3, bold=True, align=CENTER),) + cells(
            f"{self.invoice.total_quantity}N",
            format_weight(sum(item.total_gross_weight for item in items)),
            format_weight(total_stone_weight) if total_stone_weight > 0 else "-",
            format_weight(sum(item.total_metal_weight for item in items)),
            "-",
            "-",
            "-",
            money(sum(item.total_making_charge for item in items)),
            money_or_dash(total_stone_amount),
            money(self.invoice.subtotal),
            bold=True,
            align=CENTER,
        ))

        sink.append(Table(rows=tuple(rows), widths=ITEM_WIDTHS, font_size=6, header_rows=1))
        sink.append(Spacer(6))


class BankSection(InvoiceSection):
    """Seller's settlement account"""

    name = "bank"

    def render(self, sink):
        bank = self.invoice.bank_info
        rows = [(Cell("Bank Details", colspan=2, bold=True),)]
        for label, value in (
            ("Account holder", bank.account_holder),
            ("Account no.", bank.account_number),
            ("IFSC code", bank.ifsc_code),
            ("BRANCH", bank.branch.upper()),
            ("Account Type", bank.account_type.upper()),
            ("Company PAN No.", bank.pan),
        ):
            if value:
                rows.append((Cell(label, padding=1.5), Cell(f": {value}", padding=1.5)))

        sink.append(Table(rows=tuple(rows), widths=(35, 65), border=False))


class DividerSection(InvoiceSection):
    name = "divider"

    def render(self, sink):
        sink.append(Divider())


class PaymentSection(InvoiceSection):
    """How the net amount was settled"""

    name = "payment"

    def is_applicable(self) -> bool:
        return self.invoice.payment_split is not None

    def render(self, sink):
        split = self.invoice.payment_split
        rows = [(Cell("Payment Details", colspan=2, bold=True),)]
        for label, value in (
            ("Cash", split.cash),
            ("BANK/CARD/ONLINE", split.electronic),
            ("Total Paid Amount", split.total_paid),
            ("Due Amount", split.due_amount),
        ):
            rows.append((Cell(label, padding=1.5), Cell(money(value), align=RIGHT, padding=1.5)))

        if split.is_overpaid:
            rows.append((Cell(f"Overpaid by {money(-split.due_amount)}", colspan=2, bold=True),))

        sink.append(Table(rows=tuple(rows), widths=(60, 40), border=False))


class ExchangeGoldSection(InvoiceSection):
    """Trade-in metal details"""

    name = "exchange_gold"

    def is_applicable(self) -> bool:
        return self.invoice.exchange_gold is not None

    def detail_lines(self) -> list:
        exchange = self.invoice.exchange_gold
        lines = []
        if exchange.product_name:
            lines.append(f"Product: {exchange.product_name}")
        if exchange.weight > 0:
            text = f"Weight: {format_weight(exchange.weight, 2)}g"
            if exchange.total_product_weight > 0 and exchange.percentage > 0:
                text += (f" (Total: {format_weight(exchange.total_product_weight, 2)}g, "
                         f"{format_weight(exchange.percentage, 2)}%)")
            lines.append(text)
        if exchange.purity:
            lines.append(f"Purity: {exchange.purity}")
        if exchange.rate > 0:
            lines.append(f"Rate: Rs. {money(exchange.rate)}/g")
        return lines

    def render(self, sink):
        for line in self.detail_lines():
            sink.append(TextBlock(line, size=6))


class TaxSummarySection(InvoiceSection):
    """Amount, deductions, GST split and the net amount"""

    name = "tax_summary"

    def _row(self, label: str, value: Decimal, **style):
        return (
            Cell(label, bold=True, padding=2, **style),
            Cell(money(value), align=RIGHT, padding=2, **style),
        )

    def render(self, sink):
        invoice = self.invoice
        rows = [self._row("Amount", invoice.subtotal)]

        exchange = ExchangeGoldSection(invoice)
        if exchange.is_applicable() and invoice.exchange_value > 0:
            rows.append(self._row("Less: Exchange Gold", invoice.exchange_value))
            details = ElementSink()
            exchange.render(details)
            if details.elements:
                rows.append((Cell(details.elements, colspan=2, padding=2),))

        half_rate = f"{invoice.half_tax_rate:.3f}"
        rows.extend([
            self._row("Less: Discount", invoice.discount),
            self._row("Taxable Amount", invoice.taxable_amount),
            self._row(f"SGST {half_rate} %", invoice.half_tax_amount),
            self._row(f"CGST {half_rate} %", invoice.half_tax_amount),
            self._row("Gross Total", invoice.gross_total),
            self._row("Round Off", invoice.round_off),
            self._row("Net Amount", invoice.net_amount, shaded=True),
        ])

        sink.append(Table(rows=tuple(rows), widths=(70, 30), border=False))


class TotalsSection(InvoiceSection):
    """Amount in words, terms and conditions, signatures"""

    name = "totals"

    def render(self, sink):
        invoice = self.invoice

        sink.append(Table(
            rows=((Cell(f"In Words: {amount_in_words(invoice.net_amount)}", bold=True, padding=6),),),
            widths=(100,),
            font_size=8,
        ))
        sink.append(Spacer(6))

        terms = [TextBlock("TERMS & CONDITIONS:", size=8, bold=True)]
        terms.extend(
            TextBlock(f"{idx}. {text}", size=7.5)
            for idx, text in enumerate(TERMS_AND_CONDITIONS, start=1)
        )
        signoff = (
            TextBlock("E. & O.E.", size=8, align=RIGHT, space_after=36),
            TextBlock(f"For {invoice.seller.name.upper()}", size=8.5, bold=True, align=RIGHT),
        )
        sink.append(Table(
            rows=((Cell(tuple(terms), padding=0), Cell(signoff, padding=0)),),
            widths=(70, 30),
            border=False,
        ))
        sink.append(Spacer(10))

        signature = "_________________\n\n"
        sink.append(Table(
            rows=(cells(f"{signature}Customer's Signature", f"{signature}Authorised Signatory",
                        align=CENTER),),
            widths=(50, 50),
            font_size=8,
            border=False,
        ))
