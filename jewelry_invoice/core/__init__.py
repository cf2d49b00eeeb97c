"""Jewelry Invoice Renderer - Core Package"""

from jewelry_invoice.core.models import (
    Draft,
    Invoice,
    ItemDraft,
    Item,
    Party,
    BankInfo,
    PaymentSplit,
    ExchangeGoldInfo,
    ValidationResult,
    RenderResult,
    BatchResult,
)
from jewelry_invoice.core.exceptions import (
    InvoiceError,
    InvoiceInputError,
    BackendError,
    ParserError,
)
from jewelry_invoice.core.pricing import calculate_price, PricingInput, MakingChargeMode
from jewelry_invoice.core.calculator import InvoiceCalculator, allocate_item_tax, edit_invoice
from jewelry_invoice.core.repository import ProductRepository, InMemoryCatalog, load_catalog
from jewelry_invoice.core.parsers import load_order, order_generator, DraftBuilder
from jewelry_invoice.core.validators import InvoiceValidator

__all__ = [
    'Draft',
    'Invoice',
    'ItemDraft',
    'Item',
    'Party',
    'BankInfo',
    'PaymentSplit',
    'ExchangeGoldInfo',
    'ValidationResult',
    'RenderResult',
    'BatchResult',
    'InvoiceError',
    'InvoiceInputError',
    'BackendError',
    'ParserError',
    'calculate_price',
    'PricingInput',
    'MakingChargeMode',
    'InvoiceCalculator',
    'allocate_item_tax',
    'edit_invoice',
    'ProductRepository',
    'InMemoryCatalog',
    'load_catalog',
    'load_order',
    'order_generator',
    'DraftBuilder',
    'InvoiceValidator',
]
