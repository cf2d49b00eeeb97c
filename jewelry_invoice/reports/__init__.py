"""Jewelry Invoice Renderer - Reports Package"""

from jewelry_invoice.reports.generator import generate_summary_report, generate_json_report

__all__ = [
    'generate_summary_report',
    'generate_json_report',
]
