"""
HTML templates and {{TOKEN}} substitution.

Stores only hand back raw template text; substitution happens in
HtmlComposer so every store behaves the same way.
"""
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from jinja2 import Environment, TemplateError
from markupsafe import Markup, escape

from jewelry_invoice.core.exceptions import TemplateNotFoundError, TemplateRenderError
from jewelry_invoice.core.models import Invoice
from jewelry_invoice.utils.currency import amount_in_words, format_indian

logger = logging.getLogger(__name__)


PACKAGE_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / 'templates'
DEFAULT_TEMPLATE = 'invoice.html'
DEFAULT_STYLESHEET = 'invoice.css'


class TemplateStore(ABC):
    """Source of invoice templates and stylesheets"""

    @abstractmethod
    def get_template(self, name: str) -> str:
        pass

    @abstractmethod
    def get_stylesheet(self, name: str) -> str:
        pass


class DirectoryTemplateStore(TemplateStore):
    """Reads templates from a directory on disk"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _read(self, name: str) -> str:
        path = self.directory / name
        if not path.is_file():
            raise TemplateNotFoundError(f"Template {name} not found in {self.directory}")
        return path.read_text(encoding='utf-8')

    def get_template(self, name: str) -> str:
        return self._read(name)

    def get_stylesheet(self, name: str) -> str:
        return self._read(name)


class PackageTemplateStore(DirectoryTemplateStore):
    """Templates shipped inside the package"""

    def __init__(self):
        super().__init__(PACKAGE_TEMPLATE_DIR)


class HtmlComposer:
    """
    Fills a template's {{TOKEN}} placeholders for an invoice.

    Tokens:
        BODY              rendered section markup
        STYLESHEET        inline CSS (empty when linking)
        STYLESHEET_LINK   <link> tag for a sibling CSS file (empty when inlining)
        TITLE, INVOICE_NO, ISSUE_DATE, SELLER_NAME, BUYER_NAME,
        NET_AMOUNT, AMOUNT_IN_WORDS
    """

    def __init__(self, store: TemplateStore = None,
                 template_name: str = DEFAULT_TEMPLATE,
                 stylesheet_name: str = DEFAULT_STYLESHEET):
        self.store = store or PackageTemplateStore()
        self.template_name = template_name
        self.stylesheet_name = stylesheet_name
        self.env = Environment(autoescape=True)

    def stylesheet(self) -> str:
        return self.store.get_stylesheet(self.stylesheet_name)

    def compose(self, invoice: Invoice, body: str,
                stylesheet_href: Optional[str] = None) -> str:
        """
        Produce the complete HTML document.

        Args:
            invoice: Invoice the body was rendered from
            body: Section markup from the HTML flow
            stylesheet_href: Link to this CSS file instead of inlining it

        Returns:
            Fully substituted HTML

        Raises:
            TemplateNotFoundError: If the template or stylesheet is missing
            TemplateRenderError: If the template is malformed
        """
        source = self.store.get_template(self.template_name)

        if stylesheet_href:
            css = Markup("")
            link = Markup(f'<link rel="stylesheet" href="{escape(stylesheet_href)}"/>')
        else:
            css = Markup(self.stylesheet())
            link = Markup("")

        try:
            template = self.env.from_string(source)
            html = template.render(
                BODY=Markup(body),
                STYLESHEET=css,
                STYLESHEET_LINK=link,
                TITLE=f"Tax Invoice {invoice.invoice_no}",
                INVOICE_NO=invoice.invoice_no,
                ISSUE_DATE=invoice.ack_date,
                SELLER_NAME=invoice.seller.name,
                BUYER_NAME=invoice.buyer.name,
                NET_AMOUNT=format_indian(invoice.net_amount, decimals=True),
                AMOUNT_IN_WORDS=amount_in_words(invoice.net_amount),
            )
        except TemplateError as e:
            raise TemplateRenderError(
                f"Template {self.template_name} failed for {invoice.invoice_no}: {e}"
            ) from e

        logger.debug(f"Composed {len(html)} chars of HTML for {invoice.invoice_no}")
        return html
