"""
Document renderer: lays the sections out in their fixed order.
"""
import logging
from typing import Callable

from jewelry_invoice.core.exceptions import SectionRenderError
from jewelry_invoice.core.models import Invoice
from jewelry_invoice.rendering.flow import DocumentFlow, HtmlDocumentFlow, PdfDocumentFlow
from jewelry_invoice.rendering.layout import Cell, ElementSink, Spacer, Table
from jewelry_invoice.rendering.sections import (
    BankSection,
    DividerSection,
    HeaderSection,
    InvoiceSection,
    ItemsTableSection,
    PartySection,
    PaymentSection,
    TaxSummarySection,
    TotalsSection,
)
from jewelry_invoice.utils.decorators import audit_log, measure_performance, performance_context

logger = logging.getLogger(__name__)


# Left column (bank/payment) gets the larger share
TWO_COLUMN_WIDTHS = (70, 30)
COLUMN_PADDING = 4


class DocumentRenderer:
    """
    Renders an invoice in macro order:
    header, parties, items table, [bank / divider / payment | tax summary], totals.

    Sections whose optional data is missing are skipped. A section failing on
    mandatory data aborts the whole render with SectionRenderError.
    """

    def __init__(self, flow_factory: Callable[[], DocumentFlow] = PdfDocumentFlow):
        self.flow_factory = flow_factory

    def render_section(self, section: InvoiceSection, sink):
        if not section.is_applicable():
            logger.debug(f"Skipping section {section.name}: no data")
            return

        try:
            with performance_context(f"section {section.name}"):
                section.render(sink)
        except SectionRenderError:
            raise
        except Exception as e:
            raise SectionRenderError(section.name, str(e)) from e

    def two_column(self, invoice: Invoice) -> Table:
        """Bank, divider and payment on the left; tax summary on the right"""
        left = ElementSink()
        for section in (BankSection(invoice), DividerSection(invoice), PaymentSection(invoice)):
            self.render_section(section, left)

        right = ElementSink()
        self.render_section(TaxSummarySection(invoice), right)

        return Table(
            rows=((
                Cell(left.elements, padding=COLUMN_PADDING),
                Cell(right.elements, padding=COLUMN_PADDING),
            ),),
            widths=TWO_COLUMN_WIDTHS,
        )

    def compose(self, invoice: Invoice, sink):
        """Render every section of the invoice into ``sink``"""
        for section in (HeaderSection(invoice), PartySection(invoice), ItemsTableSection(invoice)):
            self.render_section(section, sink)

        sink.append(self.two_column(invoice))
        sink.append(Spacer(3))

        self.render_section(TotalsSection(invoice), sink)

    @measure_performance
    @audit_log
    def render(self, invoice: Invoice, flow: DocumentFlow = None) -> bytes:
        """
        Render the invoice through a page flow.

        Args:
            invoice: Frozen invoice
            flow: Unopened flow; a new one from the factory when omitted

        Returns:
            Document bytes produced by the flow
        """
        flow = flow or self.flow_factory()
        flow.open()
        self.compose(invoice, flow)
        return flow.close()

    def render_html_body(self, invoice: Invoice) -> str:
        """Body markup shared by every HTML engine"""
        return self.render(invoice, HtmlDocumentFlow()).decode('utf-8')
