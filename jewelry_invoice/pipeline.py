"""
End-to-end invoice pipeline: order snapshot in, verified document file out.
"""
import logging
from pathlib import Path
from typing import Optional, Union

from jewelry_invoice.config import RenderConfig
from jewelry_invoice.core.calculator import InvoiceCalculator
from jewelry_invoice.core.exceptions import InvoiceError
from jewelry_invoice.core.models import Invoice, OrderSnapshot, RenderResult, StoreInfo
from jewelry_invoice.core.parsers import DraftBuilder
from jewelry_invoice.core.repository import ProductRepository
from jewelry_invoice.core.validators import InvoiceValidator
from jewelry_invoice.rendering.backends import BackendSelector, HtmlDocumentWriter, RenderJob
from jewelry_invoice.rendering.renderer import DocumentRenderer
from jewelry_invoice.rendering.templates import (
    DirectoryTemplateStore, HtmlComposer, PackageTemplateStore,
)
from jewelry_invoice.utils.decorators import audit_log, measure_performance

logger = logging.getLogger(__name__)


FORMAT_PDF = 'pdf'
FORMAT_HTML = 'html'


class InvoicePipeline:
    """
    Builds, checks and renders invoices.

    Failures never escape as exceptions from render_to_file(): they come back
    as an unsuccessful RenderResult, and nothing is left at the output path.

    Usage:
        pipeline = InvoicePipeline(catalog, catalog.store)
        result = pipeline.render_to_file(order, "out/ORD-1.pdf")
    """

    def __init__(self, repository: ProductRepository, store: StoreInfo,
                 config: RenderConfig = None,
                 selector: BackendSelector = None,
                 composer: HtmlComposer = None,
                 renderer: DocumentRenderer = None):
        self.config = config or RenderConfig.from_env()
        self.store = store

        self.builder = DraftBuilder(
            repository,
            making_mode=self.config.making_charge_mode,
            default_tax_rate=self.config.default_tax_rate,
        )
        self.calculator = InvoiceCalculator()
        self.validator = InvoiceValidator()
        self.renderer = renderer or DocumentRenderer()

        if composer is None:
            templates = (
                DirectoryTemplateStore(self.config.template_dir)
                if self.config.template_dir else PackageTemplateStore()
            )
            composer = HtmlComposer(templates, self.config.template_name, self.config.stylesheet_name)
        self.composer = composer

        self.selector = selector or BackendSelector.from_names(self.config.backends, self.renderer)
        self.html_writer = HtmlDocumentWriter()

    def build_invoice(self, order: OrderSnapshot, invoice_no: Optional[str] = None) -> Invoice:
        """
        Price the order and aggregate it into a checked invoice.

        Raises:
            InvoiceInputError: If the order lacks mandatory data
            InvoiceError: If the finished figures are inconsistent
        """
        draft = self.builder.build(order, self.store, invoice_no)
        invoice = self.calculator.calculate(draft, self.store.bank_info)

        check = self.validator.validate(invoice)
        for violation in check.violations:
            logger.warning(
                f"Invoice {invoice.invoice_no}: [{violation.code}] {violation.message}"
            )
        if not check.is_valid:
            raise InvoiceError(
                f"Invoice {invoice.invoice_no} failed consistency checks: "
                + "; ".join(v.code for v in check.errors)
            )
        return invoice

    def make_job(self, invoice: Invoice, stylesheet_href: Optional[str] = None,
                 base_url: Optional[str] = None) -> RenderJob:
        body = self.renderer.render_html_body(invoice)
        html = self.composer.compose(invoice, body, stylesheet_href)
        return RenderJob(invoice=invoice, html=html, base_url=base_url)

    @measure_performance
    @audit_log
    def render_invoice(self, invoice: Invoice, output_path: Union[str, Path],
                       fmt: str = FORMAT_PDF) -> RenderResult:
        """
        Render a finished invoice to a file.

        Args:
            invoice: Frozen invoice
            output_path: Destination file
            fmt: "pdf" (backend chain) or "html" (HTML + sibling CSS)

        Returns:
            RenderResult describing the outcome
        """
        path = Path(output_path)
        try:
            if fmt == FORMAT_HTML:
                job = self.make_job(invoice, stylesheet_href=path.with_suffix('.css').name)
                self.html_writer.write(job.html, self.composer.stylesheet(), path)
                backend = FORMAT_HTML
            elif fmt == FORMAT_PDF:
                job = self.make_job(invoice, base_url=str(path.resolve().parent))
                backend = self.selector.write(job, path)
            else:
                raise ValueError(f"Unsupported output format: {fmt}")

        except (InvoiceError, ValueError, OSError) as e:
            logger.error(f"Rendering invoice {invoice.invoice_no} failed: {e}")
            return RenderResult(
                invoice_no=invoice.invoice_no,
                success=False,
                reason=str(e),
                net_amount=invoice.net_amount,
            )

        return RenderResult(
            invoice_no=invoice.invoice_no,
            success=True,
            output_path=str(path),
            backend=backend,
            net_amount=invoice.net_amount,
        )

    def render_to_file(self, order: OrderSnapshot, output_path: Union[str, Path],
                       fmt: str = FORMAT_PDF,
                       invoice_no: Optional[str] = None) -> RenderResult:
        """
        Build and render one order.

        Returns:
            RenderResult; success is False with a human-readable reason on
            any input, consistency or backend failure
        """
        try:
            invoice = self.build_invoice(order, invoice_no)
        except (InvoiceError, ValueError) as e:
            logger.error(f"Order {order.order_id} rejected: {e}")
            return RenderResult(
                invoice_no=invoice_no or order.order_id,
                success=False,
                reason=str(e),
            )

        return self.render_invoice(invoice, output_path, fmt)
