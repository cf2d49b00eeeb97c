"""Jewelry Invoice Renderer - Processing Package"""

from jewelry_invoice.processing.concurrent import ConcurrentRenderer

__all__ = [
    'ConcurrentRenderer',
]
