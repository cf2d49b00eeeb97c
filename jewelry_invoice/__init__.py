"""
Jewelry Invoice Renderer

Prices jewelry orders and renders them as GST tax invoices (PDF or HTML).
"""

__version__ = '1.0.0'
__license__ = 'MIT'

from jewelry_invoice.core import (
    Draft,
    Invoice,
    RenderResult,
    BatchResult,
    InvoiceCalculator,
    InMemoryCatalog,
    load_catalog,
    load_order,
)

from jewelry_invoice.pipeline import InvoicePipeline
from jewelry_invoice.processing import ConcurrentRenderer

__all__ = [
    'Draft',
    'Invoice',
    'RenderResult',
    'BatchResult',
    'InvoiceCalculator',
    'InMemoryCatalog',
    'load_catalog',
    'load_order',
    'InvoicePipeline',
    'ConcurrentRenderer',
]
