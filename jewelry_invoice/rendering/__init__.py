"""Jewelry Invoice Renderer - Rendering Package"""

from jewelry_invoice.rendering.layout import ElementSink
from jewelry_invoice.rendering.flow import PdfDocumentFlow, HtmlDocumentFlow
from jewelry_invoice.rendering.renderer import DocumentRenderer
from jewelry_invoice.rendering.templates import (
    HtmlComposer,
    PackageTemplateStore,
    DirectoryTemplateStore,
)
from jewelry_invoice.rendering.backends import (
    BackendSelector,
    HtmlDocumentWriter,
    RenderBackend,
    RenderJob,
)

__all__ = [
    'ElementSink',
    'PdfDocumentFlow',
    'HtmlDocumentFlow',
    'DocumentRenderer',
    'HtmlComposer',
    'PackageTemplateStore',
    'DirectoryTemplateStore',
    'BackendSelector',
    'HtmlDocumentWriter',
    'RenderBackend',
    'RenderJob',
]
