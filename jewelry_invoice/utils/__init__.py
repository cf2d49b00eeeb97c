"""Jewelry Invoice Renderer - Utilities Package"""

from jewelry_invoice.utils.currency import (
    format_indian,
    format_rupees,
    to_words,
    amount_in_words,
)
from jewelry_invoice.utils.decorators import (
    audit_log,
    measure_performance,
    performance_context,
)

__all__ = [
    'format_indian',
    'format_rupees',
    'to_words',
    'amount_in_words',
    'audit_log',
    'measure_performance',
    'performance_context',
]
